"""Tests for asset generation and placement."""
import pytest

from mapforge.core.map_generation.assets import (
    AssetCategory,
    AssetGenerationContext,
    AssetPlacementEngine,
    Avoid,
    CREATURE_CATALOG,
    Center,
    Corner,
    Edge,
    GeneratedAsset,
    Near,
    OnTerrain,
    PlacedAsset,
    PlacementSubstrate,
    Rarity,
    creature_pool,
    rule_from_dict,
)
from mapforge.core.map_generation.document import ObjectType, TerrainType
from mapforge.core.map_generation.geometry import Position, Size
from mapforge.core.map_generation.rng import SeededRNG
from mapforge.core.map_generation.tuning import GenerationTuning

from conftest import make_room


def engine(seed="assets", **tuning):
    return AssetPlacementEngine(SeededRNG(seed), GenerationTuning(**tuning))


def asset(asset_id="a", rarity=Rarity.COMMON, size=Size(1, 1), rules=(), object_type=ObjectType.FURNITURE, kind=""):
    return GeneratedAsset(
        id=asset_id,
        object_type=object_type,
        category=AssetCategory.FURNITURE,
        name=asset_id.title(),
        description="",
        size=size,
        rarity=rarity,
        placement_rules=tuple(rules),
        kind=kind,
    )


@pytest.fixture
def room_substrate():
    """One 8x6 room at (2, 2) with a door on its left wall."""
    room = make_room("room_0", 2, 2, 8, 6, doors=((2, 4),))
    return PlacementSubstrate.from_spaces([room], 20, 20)


class TestGenerateAssets:
    """Tests for asset list generation."""

    def test_required_features_first(self):
        context = AssetGenerationContext(theme="dungeon", required_features=("altar", "trap"))
        assets = engine().generate_assets(context, Size(20, 20))
        assert assets[0].kind == "altar"
        assert assets[0].name == "Dungeon Altar"
        assert assets[0].size == Size(2, 2)
        assert assets[1].kind == "trap"

    def test_unknown_feature_dropped(self):
        context = AssetGenerationContext(required_features=("dragon_hoard",))
        assets = engine().generate_assets(context, Size(20, 20))
        assert not any(a.category == AssetCategory.FEATURES for a in assets)

    def test_altar_rules(self):
        context = AssetGenerationContext(required_features=("altar",))
        altar = engine().generate_assets(context, Size(20, 20))[0]
        assert altar.rarity == Rarity.UNCOMMON
        assert altar.placement_rules == (Center(0.7), Avoid("door", 3, 1.0))

    @pytest.mark.parametrize("difficulty, expected", [(1, 1), (3, 1), (6, 2), (9, 3), (10, 3)])
    def test_creature_count(self, difficulty, expected):
        context = AssetGenerationContext(difficulty=difficulty)
        assets = engine().generate_assets(context, Size(20, 20))
        creatures = [a for a in assets if a.category == AssetCategory.CREATURES]
        assert len(creatures) == expected
        for creature in creatures:
            assert OnTerrain(TerrainType.FLOOR, 1.0) in creature.placement_rules

    @pytest.mark.parametrize("width, expected", [(5, 1), (20, 2), (45, 4)])
    def test_door_count(self, width, expected):
        assets = engine().generate_assets(AssetGenerationContext(), Size(width, 10))
        doors = [a for a in assets if a.kind == "door"]
        assert len(doors) == expected

    def test_furniture_count(self):
        """Furniture is area / 20 * density plus up to two extra."""
        context = AssetGenerationContext(object_density=1.0)
        assets = engine().generate_assets(context, Size(20, 20))
        furniture = [a for a in assets if a.category == AssetCategory.FURNITURE]
        assert 20 <= len(furniture) <= 22

    def test_decoration_count(self):
        context = AssetGenerationContext(object_density=0.5)
        assets = engine().generate_assets(context, Size(30, 30))
        decorations = [a for a in assets if a.category == AssetCategory.DECORATIONS]
        assert len(decorations) == 15

    def test_zero_density_has_no_decorations(self):
        context = AssetGenerationContext(object_density=0.0)
        assets = engine().generate_assets(context, Size(30, 30))
        assert not any(a.category == AssetCategory.DECORATIONS for a in assets)

    def test_category_cap(self):
        """No category exceeds the configured cap."""
        context = AssetGenerationContext(object_density=1.0, difficulty=10)
        assets = engine(max_assets_per_category=3).generate_assets(context, Size(100, 100))
        for category in AssetCategory:
            assert len([a for a in assets if a.category == category]) <= 3

    def test_rule_dict_round_trip(self):
        rules = [Near("door", 2, 0.8), Avoid("wall", 1, 0.5), OnTerrain(TerrainType.FLOOR), Edge(0.3), Center(), Corner(0.6)]
        for rule in rules:
            assert rule_from_dict(rule.to_dict()) == rule

    def test_peaceful_mood_keeps_common_creatures(self):
        context = AssetGenerationContext(difficulty=10, mood="peaceful")
        assets = engine().generate_assets(context, Size(20, 20))
        creatures = [a for a in assets if a.category == AssetCategory.CREATURES]
        assert len(creatures) == 3
        assert {c.name for c in creatures} == {"Goblin"}

    def test_hostile_mood_drops_common_creatures(self):
        context = AssetGenerationContext(difficulty=10, mood="Hostile")
        assets = engine().generate_assets(context, Size(20, 20))
        creatures = [a for a in assets if a.category == AssetCategory.CREATURES]
        assert len(creatures) == 3
        assert all(c.rarity in (Rarity.UNCOMMON, Rarity.RARE) for c in creatures)

    def test_unknown_mood_uses_whole_catalog(self):
        assert creature_pool("neutral") == CREATURE_CATALOG
        assert [entry[0] for entry in creature_pool("menacing")] == ["Orc Warrior", "Troll"]

    def test_context_from_dict(self):
        context = AssetGenerationContext.from_dict({
            "theme": "cave", "difficulty": "7", "mood": "calm", "terrain_types": ["wall", "door"],
        })
        assert context.difficulty == 7
        assert context.mood == "calm"
        assert context.terrain_types == ("wall", "door")


class TestSubstrate:
    """Tests for the placement substrate."""

    def test_interior_only(self, room_substrate):
        """Candidates are the room interior, walls and doors excluded."""
        assert len(room_substrate.allowed) == 6 * 4
        assert (2, 2) not in room_substrate.allowed
        assert (3, 3) in room_substrate.allowed

    def test_terrain(self, room_substrate):
        assert room_substrate.terrain[(2, 4)] == TerrainType.DOOR
        assert room_substrate.terrain[(2, 2)] == TerrainType.WALL
        assert room_substrate.terrain[(5, 5)] == TerrainType.FLOOR

    def test_region_is_interior_box(self, room_substrate):
        assert room_substrate.region_of((5, 5)) == (3, 3, 8, 6)

    def test_open_field(self):
        substrate = PlacementSubstrate.open_field(5, 4)
        assert len(substrate.allowed) == 20
        assert substrate.region_of((2, 2)) == (0, 0, 4, 3)

    def test_layout_clipped_to_map(self):
        """A space hanging off the map only contributes its on-map cells."""
        room = make_room("room_0", 2, 2, 8, 6, doors=((2, 4),))
        substrate = PlacementSubstrate.from_spaces([room], 6, 5)
        assert substrate.allowed == {(x, y) for x in range(3, 6) for y in range(3, 5)}
        assert all(0 <= x < 6 and 0 <= y < 5 for x, y in substrate.terrain)
        assert all(0 <= x < 6 and 0 <= y < 5 for x, y in substrate.walls)
        assert substrate.doors == ((2, 4),)
        assert substrate.region_of((4, 4)) == (3, 3, 5, 4)

    def test_layout_entirely_off_map(self):
        room = make_room("room_0", 30, 30, 6, 6, doors=((30, 32),))
        substrate = PlacementSubstrate.from_spaces([room], 20, 20)
        assert not substrate.allowed
        assert not substrate.terrain
        assert substrate.doors == ()

    def test_open_field_wall_hint(self):
        substrate = PlacementSubstrate.open_field(6, 5, ("wall",))
        assert substrate.terrain[(0, 0)] == TerrainType.WALL
        assert substrate.terrain[(5, 2)] == TerrainType.WALL
        assert substrate.terrain[(2, 2)] == TerrainType.FLOOR
        assert substrate.allowed == {(x, y) for x in range(1, 5) for y in range(1, 4)}
        assert (0, 0) in substrate.walls
        assert substrate.region_of((2, 2)) == (1, 1, 4, 3)

    def test_open_field_door_hint(self):
        substrate = PlacementSubstrate.open_field(6, 5, ("WALL", "door"))
        assert substrate.doors == ((3, 0), (5, 2), (3, 4), (0, 2))
        for door in substrate.doors:
            assert substrate.terrain[door] == TerrainType.DOOR
            assert door not in substrate.walls
            assert door not in substrate.allowed

    def test_open_field_unknown_hint_ignored(self):
        substrate = PlacementSubstrate.open_field(5, 4, ("lava", "floor"))
        assert len(substrate.allowed) == 20
        assert not substrate.walls
        assert substrate.doors == ()

    def test_open_field_too_small_for_walls(self):
        substrate = PlacementSubstrate.open_field(2, 6, ("wall",))
        assert len(substrate.allowed) == 12
        assert not substrate.walls


class TestPredicates:
    """Tests for rule predicates."""

    def test_near_without_targets_fails(self):
        substrate = PlacementSubstrate.open_field(10, 10)
        assert not engine().satisfies(Near("door", 5), 3, 3, Size(1, 1), substrate, [])

    def test_avoid_without_targets_passes(self):
        substrate = PlacementSubstrate.open_field(10, 10)
        assert engine().satisfies(Avoid("door", 5), 3, 3, Size(1, 1), substrate, [])

    def test_near_door(self, room_substrate):
        assert engine().satisfies(Near("door", 2), 3, 4, Size(1, 1), room_substrate, [])
        assert not engine().satisfies(Near("door", 2), 8, 6, Size(1, 1), room_substrate, [])

    def test_avoid_door(self, room_substrate):
        assert not engine().satisfies(Avoid("door", 3), 3, 4, Size(1, 1), room_substrate, [])
        assert engine().satisfies(Avoid("door", 3), 8, 6, Size(1, 1), room_substrate, [])

    def test_avoid_wall(self, room_substrate):
        assert not engine().satisfies(Avoid("wall", 2), 3, 3, Size(1, 1), room_substrate, [])
        assert engine().satisfies(Avoid("wall", 2), 5, 4, Size(1, 1), room_substrate, [])

    def test_object_type_target(self):
        substrate = PlacementSubstrate.open_field(10, 10)
        chest = PlacedAsset(asset("chest", object_type=ObjectType.TREASURE), Position(5, 5))
        assert engine().satisfies(Near("treasure", 1.5), 6, 6, Size(1, 1), substrate, [chest])

    def test_edge_and_corner(self, room_substrate):
        assert engine().satisfies(Edge(), 3, 5, Size(1, 1), room_substrate, [])
        assert not engine().satisfies(Edge(), 5, 5, Size(1, 1), room_substrate, [])
        assert engine().satisfies(Corner(), 8, 6, Size(1, 1), room_substrate, [])
        assert not engine().satisfies(Corner(), 3, 5, Size(1, 1), room_substrate, [])

    def test_center(self, room_substrate):
        assert engine().satisfies(Center(), 5, 4, Size(1, 1), room_substrate, [])
        assert not engine().satisfies(Center(), 3, 3, Size(1, 1), room_substrate, [])

    def test_on_terrain(self, room_substrate):
        assert engine().satisfies(OnTerrain(TerrainType.FLOOR), 4, 4, Size(2, 2), room_substrate, [])
        assert not engine().satisfies(OnTerrain(TerrainType.FLOOR), 1, 1, Size(2, 2), room_substrate, [])

    def test_on_terrain_open_field_walls(self):
        substrate = PlacementSubstrate.open_field(8, 8, ("wall",))
        assert engine().satisfies(OnTerrain(TerrainType.FLOOR), 1, 1, Size(1, 1), substrate, [])
        assert not engine().satisfies(OnTerrain(TerrainType.FLOOR), 0, 3, Size(1, 1), substrate, [])

    def test_walled_field_keeps_assets_inside(self):
        substrate = PlacementSubstrate.open_field(8, 8, ("wall", "door"))
        placed = engine().place([asset(f"a{i}") for i in range(12)], substrate)
        assert placed
        for placement in placed:
            x, y = placement.position.as_cell()
            assert 1 <= x <= 6 and 1 <= y <= 6


class TestPlacement:
    """Tests for placing assets."""

    def test_no_overlap(self, room_substrate):
        assets = [asset(f"a{i}", size=Size(2, 1) if i % 2 else Size(1, 1)) for i in range(10)]
        placed = engine().place(assets, room_substrate)
        seen = set()
        for placement in placed:
            cells = set(placement.footprint())
            assert not (cells & seen)
            assert cells <= room_substrate.allowed
            seen |= cells

    def test_rarest_first(self, room_substrate):
        assets = [
            asset("common", Rarity.COMMON),
            asset("legendary", Rarity.LEGENDARY),
            asset("uncommon", Rarity.UNCOMMON),
            asset("rare", Rarity.RARE),
        ]
        placed = engine().place(assets, room_substrate)
        assert [p.asset.id for p in placed] == ["legendary", "rare", "uncommon", "common"]

    def test_impossible_asset_omitted(self, room_substrate):
        """An asset with no valid origin is left out."""
        huge = asset("huge", size=Size(10, 10))
        small = asset("small")
        placed = engine().place([huge, small], room_substrate)
        assert [p.asset.id for p in placed] == ["small"]

    def test_hard_rule_filters(self, room_substrate):
        """A rule with probability 1.0 always applies."""
        corner_piece = asset("corner", rules=[Corner(1.0)])
        placed = engine().place([corner_piece], room_substrate)
        assert placed[0].position.as_cell() in {(3, 3), (8, 3), (3, 6), (8, 6)}

    def test_rotation_is_quarter_turn(self, room_substrate):
        placed = engine().place([asset(f"a{i}") for i in range(8)], room_substrate)
        assert all(p.rotation in (0, 90, 180, 270) for p in placed)

    def test_deterministic(self, room_substrate):
        assets = [asset(f"a{i}", rules=[Avoid("door", 2, 0.5)]) for i in range(6)]
        first = engine("same").place(assets, room_substrate)
        second = engine("same").place(assets, room_substrate)
        assert first == second

    def test_map_object_conversion(self, room_substrate):
        placed = engine().place([asset("well", object_type=ObjectType.INTERACTIVE)], room_substrate)
        obj = placed[0].to_map_object()
        assert obj.id == "well"
        assert obj.is_interactive
        assert obj.properties["rarity"] == "common"
