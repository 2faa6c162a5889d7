"""
Contextual asset generation and placement.

Assets are generated from a context (theme, difficulty, required features,
density) and then placed on the interiors of the laid-out spaces. Each
asset carries placement rules; a rule that passes its probability roll
becomes a hard filter on the candidate origins.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, FrozenSet, Iterable, Optional, Sequence, Set, Tuple, Union
import logging
import math

from .document import MapObject, ObjectType, TerrainType
from .edges import classify
from .geometry import Cell, Position, Size
from .layout import Space
from .rng import SeededRNG
from .tuning import GenerationTuning

logger = logging.getLogger("mapforge.assets")

Region = Tuple[int, int, int, int]  # inclusive min_x, min_y, max_x, max_y


class AssetCategory(str, Enum):
    """Asset grouping used for per-category caps."""
    FEATURES = "features"
    FURNITURE = "furniture"
    CREATURES = "creatures"
    INTERACTIVE = "interactive"
    DECORATIONS = "decorations"


class Rarity(str, Enum):
    """Asset rarity; rarer assets are placed first."""
    LEGENDARY = "legendary"
    RARE = "rare"
    UNCOMMON = "uncommon"
    COMMON = "common"

    @property
    def rank(self) -> int:
        return RARITY_ORDER[self]


RARITY_ORDER = {
    Rarity.LEGENDARY: 0,
    Rarity.RARE: 1,
    Rarity.UNCOMMON: 2,
    Rarity.COMMON: 3,
}

# Targets for Near/Avoid rules besides ObjectType values
TARGET_DOOR = "door"
TARGET_WALL = "wall"


# =============================================================================
# PLACEMENT RULES
# =============================================================================

@dataclass(frozen=True)
class Near:
    """Origin within ``max_distance`` of some target."""
    target: str
    max_distance: float
    probability: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "near", "target": self.target, "distance": self.max_distance, "probability": self.probability}


@dataclass(frozen=True)
class Avoid:
    """Origin at least ``min_distance`` from every target."""
    target: str
    min_distance: float
    probability: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "avoid", "target": self.target, "distance": self.min_distance, "probability": self.probability}


@dataclass(frozen=True)
class OnTerrain:
    """Every footprint cell has the given terrain."""
    terrain: TerrainType
    probability: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "on_terrain", "target": self.terrain.value, "probability": self.probability}


@dataclass(frozen=True)
class Edge:
    """Footprint touches the border of its region."""
    probability: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "edge", "probability": self.probability}


@dataclass(frozen=True)
class Center:
    """Origin close to the centre of its region."""
    probability: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "center", "probability": self.probability}


@dataclass(frozen=True)
class Corner:
    """Footprint covers a corner of its region."""
    probability: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "corner", "probability": self.probability}


PlacementRule = Union[Near, Avoid, OnTerrain, Edge, Center, Corner]


def rule_from_dict(data: Dict[str, Any]) -> PlacementRule:
    """Rebuild a placement rule from its dictionary form."""
    rule_type = data["type"]
    probability = float(data.get("probability", 1.0))
    if rule_type == "near":
        return Near(data["target"], float(data["distance"]), probability)
    if rule_type == "avoid":
        return Avoid(data["target"], float(data["distance"]), probability)
    if rule_type == "on_terrain":
        return OnTerrain(TerrainType(data["target"]), probability)
    if rule_type == "edge":
        return Edge(probability)
    if rule_type == "center":
        return Center(probability)
    if rule_type == "corner":
        return Corner(probability)
    raise ValueError(f"Unknown placement rule type: {rule_type}")


# =============================================================================
# ASSETS
# =============================================================================

@dataclass(frozen=True)
class GeneratedAsset:
    """An asset waiting to be placed."""
    id: str
    object_type: ObjectType
    category: AssetCategory
    name: str
    description: str
    size: Size
    rarity: Rarity
    placement_rules: Tuple[PlacementRule, ...] = ()
    kind: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.object_type.value,
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
            "size": self.size.to_dict(),
            "rarity": self.rarity.value,
            "placement_rules": [rule.to_dict() for rule in self.placement_rules],
            "kind": self.kind,
        }


@dataclass(frozen=True)
class PlacedAsset:
    """An asset committed at a position."""
    asset: GeneratedAsset
    position: Position
    rotation: int = 0

    def footprint(self) -> List[Cell]:
        return footprint(self.position.x, self.position.y, self.asset.size)

    def to_map_object(self) -> MapObject:
        """Convert to a layer object."""
        return MapObject(
            id=self.asset.id,
            object_type=self.asset.object_type,
            position=self.position,
            size=self.asset.size,
            name=self.asset.name,
            description=self.asset.description,
            rotation=self.rotation,
            is_interactive=self.asset.object_type == ObjectType.INTERACTIVE,
            properties={
                "category": self.asset.category.value,
                "rarity": self.asset.rarity.value,
                "kind": self.asset.kind,
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset": self.asset.to_dict(),
            "position": self.position.to_dict(),
            "rotation": self.rotation,
        }


@dataclass
class AssetGenerationContext:
    """What to furnish a map with."""
    theme: str = "dungeon"
    difficulty: int = 5
    required_features: Tuple[str, ...] = ()
    object_density: float = 1.0
    mood: str = "neutral"
    terrain_types: Tuple[str, ...] = ()  # hints for the open field when there is no layout

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetGenerationContext":
        return cls(
            theme=data.get("theme", "dungeon"),
            difficulty=int(data.get("difficulty", 5)),
            required_features=tuple(data.get("required_features", ())),
            object_density=float(data.get("object_density", 1.0)),
            mood=data.get("mood", "neutral"),
            terrain_types=tuple(data.get("terrain_types", ())),
        )


def footprint(x: int, y: int, size: Size) -> List[Cell]:
    return [(x + dx, y + dy) for dy in range(size.height) for dx in range(size.width)]


# =============================================================================
# CATALOGS
# =============================================================================

@dataclass(frozen=True)
class _Template:
    name: str
    description: str
    object_type: ObjectType
    size: Size
    rarity: Rarity
    rules: Tuple[PlacementRule, ...] = ()


FEATURE_CATALOG: Dict[str, _Template] = {
    "altar": _Template(
        "{theme} Altar", "An altar fitting the {theme} theme",
        ObjectType.FURNITURE, Size(2, 2), Rarity.UNCOMMON,
        (Center(0.7), Avoid(TARGET_DOOR, 3, 1.0)),
    ),
    "trap": _Template(
        "Hidden Trap", "A concealed pressure plate",
        ObjectType.HAZARD, Size(1, 1), Rarity.RARE,
        (Near(TARGET_DOOR, 2, 0.8),),
    ),
    "treasure_chest": _Template(
        "Treasure Chest", "A locked chest bound in iron",
        ObjectType.TREASURE, Size(1, 1), Rarity.RARE,
        (Corner(0.6), Avoid(TARGET_DOOR, 2, 0.8)),
    ),
    "throne": _Template(
        "{theme} Throne", "A high-backed seat of power",
        ObjectType.FURNITURE, Size(2, 2), Rarity.RARE,
        (Edge(0.8), Avoid(TARGET_DOOR, 3, 1.0)),
    ),
    "well": _Template(
        "Stone Well", "A deep well with a wooden winch",
        ObjectType.INTERACTIVE, Size(2, 2), Rarity.COMMON,
        (Center(0.6),),
    ),
    "campfire": _Template(
        "Campfire", "A ring of stones around glowing embers",
        ObjectType.LIGHT_SOURCE, Size(1, 1), Rarity.COMMON,
        (Center(0.5), Avoid(TARGET_WALL, 2, 0.8)),
    ),
    "shrine": _Template(
        "{theme} Shrine", "A small shrine with fresh offerings",
        ObjectType.DECORATION, Size(1, 1), Rarity.UNCOMMON,
        (Edge(0.7),),
    ),
    "portal": _Template(
        "Arcane Portal", "A shimmering gateway to elsewhere",
        ObjectType.INTERACTIVE, Size(2, 2), Rarity.LEGENDARY,
        (Center(0.9), Avoid(TARGET_DOOR, 3, 1.0)),
    ),
}

FURNITURE_CATALOG: Dict[str, List[_Template]] = {
    "dungeon": [
        _Template("Ancient Pillar", "A cracked stone pillar", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON),
        _Template("Iron Brazier", "A rusty iron brazier", ObjectType.LIGHT_SOURCE, Size(1, 1), Rarity.UNCOMMON,
                  (Avoid(TARGET_DOOR, 1, 0.8),)),
        _Template("Weapon Rack", "A rack of notched blades", ObjectType.FURNITURE, Size(2, 1), Rarity.COMMON,
                  (Edge(0.8),)),
    ],
    "temple": [
        _Template("Prayer Bench", "A wooden prayer bench", ObjectType.FURNITURE, Size(2, 1), Rarity.COMMON),
        _Template("Holy Symbol", "A carved holy symbol", ObjectType.DECORATION, Size(1, 1), Rarity.UNCOMMON,
                  (Edge(0.7),)),
    ],
    "house": [
        _Template("Wooden Table", "A sturdy oak table", ObjectType.FURNITURE, Size(2, 1), Rarity.COMMON,
                  (Center(0.5),)),
        _Template("Chair", "A simple wooden chair", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON),
        _Template("Bookshelf", "Shelves of dusty tomes", ObjectType.FURNITURE, Size(2, 1), Rarity.UNCOMMON,
                  (Edge(0.9),)),
        _Template("Bed", "A straw mattress on a frame", ObjectType.FURNITURE, Size(1, 2), Rarity.COMMON,
                  (Corner(0.6),)),
    ],
    "forest": [
        _Template("Fallen Log", "A moss-covered fallen log", ObjectType.FURNITURE, Size(2, 1), Rarity.COMMON),
        _Template("Boulder", "A weathered grey boulder", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON,
                  (Edge(0.6),)),
        _Template("Tree Stump", "The stump of an old oak", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON),
    ],
    "cave": [
        _Template("Stalagmite", "A jagged column of rock", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON),
        _Template("Glowing Crystals", "A cluster of softly glowing crystals", ObjectType.LIGHT_SOURCE,
                  Size(1, 1), Rarity.UNCOMMON, (Edge(0.8),)),
        _Template("Underground Pool", "Still, dark water", ObjectType.FURNITURE, Size(2, 2), Rarity.UNCOMMON,
                  (Center(0.5),)),
    ],
    "town": [
        _Template("Market Stall", "A canvas-roofed stall", ObjectType.FURNITURE, Size(2, 1), Rarity.COMMON,
                  (Edge(0.7),)),
        _Template("Barrel", "An oak barrel", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON),
        _Template("Crate Stack", "Stacked shipping crates", ObjectType.FURNITURE, Size(1, 1), Rarity.COMMON,
                  (Corner(0.5),)),
    ],
}

CREATURE_CATALOG: List[Tuple[str, str, Rarity]] = [
    ("Goblin", "A small, mischievous creature", Rarity.COMMON),
    ("Orc Warrior", "A fierce orc warrior", Rarity.UNCOMMON),
    ("Troll", "A large, intimidating troll", Rarity.RARE),
]

# Moods that narrow the creature pool; anything else draws from the whole catalog
MOOD_CREATURE_RARITIES: Dict[str, Tuple[Rarity, ...]] = {
    "peaceful": (Rarity.COMMON,),
    "calm": (Rarity.COMMON,),
    "hostile": (Rarity.UNCOMMON, Rarity.RARE),
    "menacing": (Rarity.UNCOMMON, Rarity.RARE),
}


def creature_pool(mood: str) -> List[Tuple[str, str, Rarity]]:
    """Creatures a mood allows."""
    rarities = MOOD_CREATURE_RARITIES.get(mood.lower())
    if rarities is None:
        return list(CREATURE_CATALOG)
    return [entry for entry in CREATURE_CATALOG if entry[2] in rarities]

DECORATION_CATALOG: List[Tuple[str, str]] = [
    ("Stone Rubble", "Scattered stone debris"),
    ("Moss Patch", "A patch of green moss"),
    ("Cobweb", "Dusty cobwebs in the corner"),
]


# =============================================================================
# PLACEMENT SUBSTRATE
# =============================================================================

@dataclass
class PlacementSubstrate:
    """
    Where assets may go.

    ``allowed`` holds candidate cells (space interiors minus doors), and
    ``regions`` maps each of them to the interior bounding box of its space.
    """
    map_width: int
    map_height: int
    allowed: FrozenSet[Cell]
    terrain: Dict[Cell, TerrainType]
    doors: Tuple[Cell, ...] = ()
    walls: FrozenSet[Cell] = frozenset()
    regions: Dict[Cell, Region] = field(default_factory=dict)

    def region_of(self, cell: Cell) -> Region:
        return self.regions.get(cell, (0, 0, self.map_width - 1, self.map_height - 1))

    @classmethod
    def from_spaces(cls, spaces: Sequence[Space], map_width: int, map_height: int) -> "PlacementSubstrate":
        """
        Build the substrate from a space layout.

        Cells outside ``map_width`` x ``map_height`` are dropped, so a
        layout larger than the map only contributes its overlapping part.
        """
        allowed: Set[Cell] = set()
        terrain: Dict[Cell, TerrainType] = {}
        walls: Set[Cell] = set()
        regions: Dict[Cell, Region] = {}
        doors: List[Cell] = []

        def inside(cell: Cell) -> bool:
            return 0 <= cell[0] < map_width and 0 <= cell[1] < map_height

        for space in spaces:
            edge_map = classify(space.cells)
            space_doors = {door.as_cell() for door in space.doors if inside(door.as_cell())}
            for cell in edge_map.edges:
                if inside(cell):
                    terrain[cell] = TerrainType.WALL
            for cell in edge_map.interior:
                if inside(cell):
                    terrain[cell] = TerrainType.FLOOR
            for cell in space_doors:
                terrain[cell] = TerrainType.DOOR
            walls |= {cell for cell in edge_map.edges - space_doors if inside(cell)}
            doors.extend(sorted(space_doors, key=lambda c: (c[1], c[0])))

            interior = {cell for cell in edge_map.interior - space_doors if inside(cell)}
            if not interior:
                continue
            xs = [c[0] for c in interior]
            ys = [c[1] for c in interior]
            region = (min(xs), min(ys), max(xs), max(ys))
            for cell in interior:
                regions[cell] = region
            allowed |= interior

        return cls(
            map_width=map_width,
            map_height=map_height,
            allowed=frozenset(allowed),
            terrain=terrain,
            doors=tuple(doors),
            walls=frozenset(walls),
            regions=regions,
        )

    @classmethod
    def open_field(
        cls,
        map_width: int,
        map_height: int,
        terrain_types: Sequence[str] = (),
    ) -> "PlacementSubstrate":
        """
        Whole map as one region, used when there is no layout.

        Terrain hints shape the field: ``wall`` rings the map with wall
        cells and ``door`` opens a door at the middle of each side. Without
        hints, or with only ``floor``, every cell is open floor.

        Args:
            map_width: Map width in cells
            map_height: Map height in cells
            terrain_types: Terrain type names; unknown names are ignored
        """
        hints = set()
        for name in terrain_types:
            try:
                hints.add(TerrainType(name.lower()))
            except ValueError:
                logger.debug(f"Ignored unknown terrain hint '{name}'")

        cells = [(x, y) for y in range(map_height) for x in range(map_width)]
        terrain: Dict[Cell, TerrainType] = {cell: TerrainType.FLOOR for cell in cells}
        border = {
            (x, y) for x, y in cells
            if x in (0, map_width - 1) or y in (0, map_height - 1)
        }

        door_cells: List[Cell] = []
        if TerrainType.DOOR in hints:
            midpoints = [
                (map_width // 2, 0),
                (map_width - 1, map_height // 2),
                (map_width // 2, map_height - 1),
                (0, map_height // 2),
            ]
            for cell in midpoints:
                if cell not in door_cells:
                    door_cells.append(cell)

        walls: Set[Cell] = set()
        region = (0, 0, map_width - 1, map_height - 1)
        if TerrainType.WALL in hints and map_width >= 3 and map_height >= 3:
            walls = border - set(door_cells)
            for cell in walls:
                terrain[cell] = TerrainType.WALL
            region = (1, 1, map_width - 2, map_height - 2)
        for cell in door_cells:
            terrain[cell] = TerrainType.DOOR

        allowed = frozenset(cell for cell in cells if terrain[cell] == TerrainType.FLOOR)
        regions = {cell: region for cell in allowed} if walls else {}
        return cls(
            map_width=map_width,
            map_height=map_height,
            allowed=allowed,
            terrain=terrain,
            doors=tuple(door_cells),
            walls=frozenset(walls),
            regions=regions,
        )


# =============================================================================
# ENGINE
# =============================================================================

class AssetPlacementEngine:
    """Generates assets for a context and places them on a substrate."""

    def __init__(self, rng: SeededRNG, tuning: Optional[GenerationTuning] = None):
        self.rng = rng
        self.tuning = tuning or GenerationTuning()

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate_assets(self, context: AssetGenerationContext, map_size: Size) -> List[GeneratedAsset]:
        """
        Build the asset list for a context.

        Args:
            context: Theme, difficulty, required features and density
            map_size: Map dimensions in cells

        Returns:
            Features, furniture, creatures, doors and decorations, each
            category capped at ``max_assets_per_category``
        """
        cap = self.tuning.max_assets_per_category
        assets: List[GeneratedAsset] = []
        assets.extend(self._feature_assets(context)[:cap])
        assets.extend(self._furniture_assets(context, map_size)[:cap])
        assets.extend(self._creature_assets(context)[:cap])
        assets.extend(self._door_assets(map_size)[:cap])
        assets.extend(self._decoration_assets(context, map_size)[:cap])
        return assets

    def _feature_assets(self, context: AssetGenerationContext) -> List[GeneratedAsset]:
        theme_name = context.theme.replace("_", " ").title()
        assets = []
        for index, feature in enumerate(context.required_features):
            key = feature.lower()
            template = FEATURE_CATALOG.get(key)
            if template is None:
                logger.debug(f"Dropped unknown required feature '{feature}'")
                continue
            assets.append(GeneratedAsset(
                id=f"feature_{key}_{index}",
                object_type=template.object_type,
                category=AssetCategory.FEATURES,
                name=template.name.format(theme=theme_name),
                description=template.description.format(theme=context.theme),
                size=template.size,
                rarity=template.rarity,
                placement_rules=template.rules,
                kind=key,
            ))
        return assets

    def _furniture_assets(self, context: AssetGenerationContext, map_size: Size) -> List[GeneratedAsset]:
        count = int(math.floor(map_size.area / 20 * context.object_density)) + self.rng.next_int(3)
        count = min(count, self.tuning.max_assets_per_category)
        catalog = FURNITURE_CATALOG.get(context.theme.lower(), FURNITURE_CATALOG["dungeon"])
        assets = []
        for i in range(count):
            template = self.rng.choice(catalog)
            assets.append(GeneratedAsset(
                id=f"furniture_{i}",
                object_type=template.object_type,
                category=AssetCategory.FURNITURE,
                name=template.name,
                description=template.description,
                size=template.size,
                rarity=template.rarity,
                placement_rules=template.rules,
                kind="furniture",
            ))
        return assets

    def _creature_assets(self, context: AssetGenerationContext) -> List[GeneratedAsset]:
        count = max(1, context.difficulty // 3)
        pool = creature_pool(context.mood)
        assets = []
        for i in range(count):
            name, description, rarity = self.rng.choice(pool)
            assets.append(GeneratedAsset(
                id=f"creature_{i}",
                object_type=ObjectType.CREATURE,
                category=AssetCategory.CREATURES,
                name=name,
                description=description,
                size=Size(1, 1),
                rarity=rarity,
                placement_rules=(Avoid(TARGET_DOOR, 1, 0.7), OnTerrain(TerrainType.FLOOR, 1.0)),
                kind="creature",
            ))
        return assets

    def _door_assets(self, map_size: Size) -> List[GeneratedAsset]:
        count = max(1, map_size.width // 10)
        return [
            GeneratedAsset(
                id=f"door_{i}",
                object_type=ObjectType.INTERACTIVE,
                category=AssetCategory.INTERACTIVE,
                name="Door",
                description="A sturdy door",
                size=Size(1, 1),
                rarity=Rarity.COMMON,
                placement_rules=(Edge(1.0),),
                kind="door",
            )
            for i in range(count)
        ]

    def _decoration_assets(self, context: AssetGenerationContext, map_size: Size) -> List[GeneratedAsset]:
        count = int(math.floor(map_size.area / 30 * context.object_density))
        count = min(count, self.tuning.max_assets_per_category)
        assets = []
        for i in range(count):
            name, description = self.rng.choice(DECORATION_CATALOG)
            assets.append(GeneratedAsset(
                id=f"decoration_{i}",
                object_type=ObjectType.DECORATION,
                category=AssetCategory.DECORATIONS,
                name=name,
                description=description,
                size=Size(1, 1),
                rarity=Rarity.COMMON,
                placement_rules=(Avoid(TARGET_DOOR, 1, 0.9),),
                kind="decoration",
            ))
        return assets

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    def place(self, assets: Sequence[GeneratedAsset], substrate: PlacementSubstrate) -> List[PlacedAsset]:
        """
        Place assets rarest first; assets with no valid origin are omitted.

        Returns:
            Placed assets in placement order
        """
        ordered = sorted(assets, key=lambda a: a.rarity.rank)
        candidates = sorted(substrate.allowed, key=lambda c: (c[1], c[0]))
        occupied: Set[Cell] = set()
        placed: List[PlacedAsset] = []

        for asset in ordered:
            survivors = [
                (x, y) for x, y in candidates
                if self._fits(x, y, asset.size, substrate, occupied)
                and self._passes_rules(x, y, asset, substrate, placed)
            ]
            if not survivors:
                logger.debug(f"Omitted asset {asset.id} ({asset.name}): no valid position")
                continue

            x, y = survivors[self.rng.next_int(len(survivors))]
            rotation = self.rng.next_int(4) * 90
            placement = PlacedAsset(asset=asset, position=Position(x, y), rotation=rotation)
            occupied.update(placement.footprint())
            placed.append(placement)

        return placed

    @staticmethod
    def _fits(x: int, y: int, size: Size, substrate: PlacementSubstrate, occupied: Set[Cell]) -> bool:
        for cell in footprint(x, y, size):
            if cell not in substrate.allowed or cell in occupied:
                return False
        return True

    def _passes_rules(
        self,
        x: int,
        y: int,
        asset: GeneratedAsset,
        substrate: PlacementSubstrate,
        placed: List[PlacedAsset],
    ) -> bool:
        for rule in asset.placement_rules:
            if self.rng.next_float() > rule.probability:
                continue
            if not self.satisfies(rule, x, y, asset.size, substrate, placed):
                return False
        return True

    def satisfies(
        self,
        rule: PlacementRule,
        x: int,
        y: int,
        size: Size,
        substrate: PlacementSubstrate,
        placed: Sequence[PlacedAsset],
    ) -> bool:
        """Evaluate one rule predicate for an origin."""
        region = substrate.region_of((x, y))
        cells = footprint(x, y, size)

        if isinstance(rule, Near):
            return any(d <= rule.max_distance for d in self._target_distances(rule.target, x, y, rule.max_distance, substrate, placed))
        if isinstance(rule, Avoid):
            return all(d >= rule.min_distance for d in self._target_distances(rule.target, x, y, rule.min_distance, substrate, placed))
        if isinstance(rule, OnTerrain):
            return all(substrate.terrain.get(cell) == rule.terrain for cell in cells)
        if isinstance(rule, Edge):
            min_x, min_y, max_x, max_y = region
            return any(cx in (min_x, max_x) or cy in (min_y, max_y) for cx, cy in cells)
        if isinstance(rule, Corner):
            min_x, min_y, max_x, max_y = region
            corners = {(min_x, min_y), (max_x, min_y), (min_x, max_y), (max_x, max_y)}
            return any(cell in corners for cell in cells)
        if isinstance(rule, Center):
            min_x, min_y, max_x, max_y = region
            center_x = (min_x + max_x) / 2
            center_y = (min_y + max_y) / 2
            limit = min(max_x - min_x + 1, max_y - min_y + 1) / 4
            return math.hypot(x - center_x, y - center_y) <= limit
        return True

    @staticmethod
    def _target_distances(
        target: str,
        x: int,
        y: int,
        radius: float,
        substrate: PlacementSubstrate,
        placed: Sequence[PlacedAsset],
    ) -> Iterable[float]:
        """
        Distances from an origin to the targets that matter for a rule.

        Wall targets are searched only within ``radius`` of the origin.
        """
        if target == TARGET_WALL:
            reach = int(math.ceil(radius))
            for dy in range(-reach, reach + 1):
                for dx in range(-reach, reach + 1):
                    if (x + dx, y + dy) in substrate.walls:
                        yield math.hypot(dx, dy)
            return

        if target == TARGET_DOOR:
            points = list(substrate.doors)
            points.extend(p.position.as_cell() for p in placed if p.asset.kind == "door")
        else:
            points = [p.position.as_cell() for p in placed if p.asset.object_type.value == target]

        for px, py in points:
            yield math.hypot(px - x, py - y)
