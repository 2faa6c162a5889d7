"""Tests for space layout planning."""
import pytest

from mapforge.core.map_generation.archetypes import (
    STRATEGIES,
    DUNGEON_KINDS,
    TerrainArchetype,
    resolve_strategy,
)
from mapforge.core.map_generation.geometry import ShapeType
from mapforge.core.map_generation.layout import Space, SpaceLayoutPlanner
from mapforge.core.map_generation.rng import SeededRNG


def plan(archetype, seed="layout", width=60, height=60, count=6, min_size=4, max_size=8, factor=0.5):
    rng = SeededRNG(seed)
    strategy = resolve_strategy(archetype, rng)
    planner = SpaceLayoutPlanner(rng, width, height, strategy)
    return strategy, planner.plan(count, min_size, max_size, factor)


class TestSpaceLayout:
    """Tests for the layout invariants."""

    @pytest.mark.parametrize("archetype", list(TerrainArchetype))
    def test_spaces_never_share_cells(self, archetype):
        """No cell belongs to two spaces."""
        _, spaces = plan(archetype)
        seen = set()
        for space in spaces:
            assert not (space.cells & seen)
            seen |= space.cells

    @pytest.mark.parametrize("archetype", list(TerrainArchetype))
    def test_spaces_inside_map(self, archetype):
        _, spaces = plan(archetype, width=50, height=40)
        for space in spaces:
            for x, y in space.cells:
                assert 0 <= x < 50
                assert 0 <= y < 40

    @pytest.mark.parametrize("archetype", list(TerrainArchetype))
    def test_doors_on_footprint(self, archetype):
        """Every door lies on the space it belongs to, one or two per space."""
        _, spaces = plan(archetype)
        for space in spaces:
            assert 1 <= len(space.doors) <= 2
            for door in space.doors:
                assert door.as_cell() in space.cells

    def test_ids_are_sequential(self):
        _, spaces = plan(TerrainArchetype.HOUSE)
        assert [s.id for s in spaces] == [f"room_{i}" for i in range(len(spaces))]

    def test_first_space_always_placed(self):
        """The first space has nothing to collide with."""
        _, spaces = plan(TerrainArchetype.HOUSE, count=1)
        assert len(spaces) == 1

    def test_crowded_map_skips_spaces(self):
        """Spaces that cannot fit are skipped instead of failing."""
        _, spaces = plan(TerrainArchetype.HOUSE, width=12, height=12, count=10, min_size=6, max_size=8)
        assert len(spaces) == 1

    def test_house_kinds_cycle(self):
        """House rooms take kinds in order when every room is placed."""
        _, spaces = plan(TerrainArchetype.HOUSE, width=120, height=120, count=3, min_size=4, max_size=5)
        kinds = STRATEGIES[TerrainArchetype.HOUSE].kinds
        assert len(spaces) == 3
        assert [s.kind for s in spaces] == list(kinds[:3])

    def test_rectangle_size_bounds(self):
        """Rectangular rooms respect the requested size range."""
        _, spaces = plan(TerrainArchetype.TOWN, min_size=5, max_size=7)
        for space in spaces:
            assert 5 <= space.size.width <= 7
            assert 5 <= space.size.height <= 7

    def test_organic_shapes_for_forest(self):
        _, spaces = plan(TerrainArchetype.FOREST)
        assert spaces
        assert all(s.shape.shape_type == ShapeType.ORGANIC for s in spaces)
        assert all(s.kind == "clearing" for s in spaces)

    def test_dungeon_kinds(self):
        _, spaces = plan(TerrainArchetype.DUNGEON)
        assert all(s.kind in DUNGEON_KINDS for s in spaces)

    def test_same_seed_same_layout(self):
        _, first = plan(TerrainArchetype.CAVE, seed="repeat")
        _, second = plan(TerrainArchetype.CAVE, seed="repeat")
        assert first == second

    def test_space_dict_round_trip(self):
        _, spaces = plan(TerrainArchetype.CAVE)
        for space in spaces:
            assert Space.from_dict(space.to_dict()) == space


class TestStrategies:
    """Tests for archetype strategy resolution."""

    def test_cave_roughness_floor(self):
        """Caves are always at least 0.7 rough."""
        cave = STRATEGIES[TerrainArchetype.CAVE]
        assert cave.effective_organic_factor(0.1) == 0.7
        assert cave.effective_organic_factor(0.9) == 0.9

    @pytest.mark.parametrize("draw, shape_type, buffer", [
        (0.9, ShapeType.RECTANGLE, 3),
        (0.1, ShapeType.ORGANIC, 2),
    ])
    def test_dungeon_variant_is_rect_or_organic(self, draw, shape_type, buffer):
        """Dungeons pick house-style or cave-style spaces per run."""
        rng = SeededRNG("dungeon")
        rng.next_float = lambda: draw
        strategy = resolve_strategy(TerrainArchetype.DUNGEON, rng)
        assert strategy.shape_type == shape_type
        assert strategy.buffer == buffer
        assert strategy.kinds == DUNGEON_KINDS
        assert strategy.archetype == TerrainArchetype.DUNGEON
