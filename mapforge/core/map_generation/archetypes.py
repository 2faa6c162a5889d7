"""
Terrain archetypes.

Each archetype maps to a strategy record (shape mode, margins, space kinds,
path style) plus a colour palette and a name pool. The generator consults
these tables instead of branching on the archetype in every stage.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .colors import Color, ColorTheme
from .geometry import ShapeType
from .rng import SeededRNG


class TerrainArchetype(str, Enum):
    """Kinds of map the generator can build."""
    HOUSE = "house"
    FOREST = "forest"
    CAVE = "cave"
    TOWN = "town"
    DUNGEON = "dungeon"


class PathStyle(str, Enum):
    """How connections are drawn."""
    ORGANIC = "organic"
    CORRIDOR = "corridor"


@dataclass(frozen=True)
class ArchetypeStrategy:
    """Per-archetype generation parameters."""
    archetype: TerrainArchetype
    shape_type: ShapeType
    margin: int
    buffer: int
    kinds: Tuple[str, ...]
    cycle_kinds: bool            # True: kinds[index % n], False: random pick
    path_style: PathStyle
    path_width: int
    path_width_jitter: int = 0   # extra width drawn from next_int(jitter + 1)
    min_organic_factor: float = 0.0
    id_prefix: str = "space"
    grid_opacity: float = 0.3

    def pick_kind(self, index: int, rng: SeededRNG) -> str:
        if self.cycle_kinds:
            return self.kinds[index % len(self.kinds)]
        return rng.choice(self.kinds)

    def effective_organic_factor(self, organic_factor: float) -> float:
        return max(self.min_organic_factor, organic_factor)


# =============================================================================
# STRATEGY TABLE
# =============================================================================

STRATEGIES: Dict[TerrainArchetype, ArchetypeStrategy] = {
    TerrainArchetype.HOUSE: ArchetypeStrategy(
        archetype=TerrainArchetype.HOUSE,
        shape_type=ShapeType.RECTANGLE,
        margin=2,
        buffer=3,
        kinds=("bedroom", "kitchen", "living_room", "study", "storage"),
        cycle_kinds=True,
        path_style=PathStyle.CORRIDOR,
        path_width=2,
        id_prefix="room",
    ),
    TerrainArchetype.FOREST: ArchetypeStrategy(
        archetype=TerrainArchetype.FOREST,
        shape_type=ShapeType.ORGANIC,
        margin=2,
        buffer=4,
        kinds=("clearing",),
        cycle_kinds=True,
        path_style=PathStyle.ORGANIC,
        path_width=1,
        id_prefix="clearing",
    ),
    TerrainArchetype.CAVE: ArchetypeStrategy(
        archetype=TerrainArchetype.CAVE,
        shape_type=ShapeType.ORGANIC,
        margin=2,
        buffer=2,
        kinds=("cavern",),
        cycle_kinds=True,
        path_style=PathStyle.ORGANIC,
        path_width=2,
        path_width_jitter=1,
        min_organic_factor=0.7,
        id_prefix="cavern",
    ),
    TerrainArchetype.TOWN: ArchetypeStrategy(
        archetype=TerrainArchetype.TOWN,
        shape_type=ShapeType.RECTANGLE,
        margin=3,
        buffer=4,
        kinds=("house", "shop", "tavern", "stable", "workshop"),
        cycle_kinds=False,
        path_style=PathStyle.CORRIDOR,
        path_width=2,
        id_prefix="building",
    ),
}

DUNGEON_KINDS = ("chamber", "trap_room", "treasure_room", "guard_room", "crypt")


def resolve_strategy(archetype: TerrainArchetype, rng: SeededRNG) -> ArchetypeStrategy:
    """
    Get the strategy for an archetype.

    Dungeons draw once to pick house-style rectangular rooms or cave-style
    organic chambers; both variants use dungeon room kinds and corridors.
    """
    if archetype != TerrainArchetype.DUNGEON:
        return STRATEGIES[archetype]

    base = STRATEGIES[TerrainArchetype.HOUSE] if rng.next_bool() else STRATEGIES[TerrainArchetype.CAVE]
    return replace(
        base,
        archetype=TerrainArchetype.DUNGEON,
        kinds=DUNGEON_KINDS,
        cycle_kinds=False,
        path_style=PathStyle.CORRIDOR,
        path_width=2,
        path_width_jitter=0,
        id_prefix="chamber",
    )


def minimum_margin(archetype: TerrainArchetype) -> int:
    """Smallest margin any variant of the archetype may use."""
    if archetype == TerrainArchetype.DUNGEON:
        return min(STRATEGIES[TerrainArchetype.HOUSE].margin, STRATEGIES[TerrainArchetype.CAVE].margin)
    return STRATEGIES[archetype].margin


# =============================================================================
# COLOUR PALETTES
# =============================================================================

COLOR_THEMES: Dict[TerrainArchetype, List[ColorTheme]] = {
    TerrainArchetype.HOUSE: [
        ColorTheme("Warm Wood & Dark Halls", Color(222, 184, 135), Color(101, 67, 33), Color(139, 90, 43), 4.5),
        ColorTheme("Stone & Slate", Color(105, 105, 105), Color(47, 79, 79), Color(60, 60, 60), 3.2),
        ColorTheme("Rich Wood & Light Stone", Color(139, 69, 19), Color(119, 136, 153), Color(92, 51, 23), 5.1),
    ],
    TerrainArchetype.FOREST: [
        ColorTheme("Deep Forest & Earth Trails", Color(34, 139, 34), Color(139, 115, 85), Color(0, 100, 0), 3.8),
        ColorTheme("Olive Grove & Peru Paths", Color(85, 107, 47), Color(205, 133, 63), Color(60, 80, 30), 4.2),
        ColorTheme("Meadow & Brown Trails", Color(107, 142, 35), Color(93, 78, 55), Color(72, 100, 20), 3.5),
    ],
    TerrainArchetype.CAVE: [
        ColorTheme("Dark Stone & Slate", Color(47, 47, 47), Color(112, 128, 144), Color(30, 30, 30), 4.1),
        ColorTheme("Deep Cave & Steel Blue", Color(28, 28, 28), Color(70, 130, 180), Color(15, 15, 15), 6.2),
        ColorTheme("Charcoal & Light Steel", Color(54, 69, 79), Color(176, 196, 222), Color(35, 45, 52), 5.8),
    ],
    TerrainArchetype.TOWN: [
        ColorTheme("Green Commons & Tan Streets", Color(143, 188, 143), Color(210, 180, 140), Color(139, 119, 101), 3.1),
        ColorTheme("Forest Green & Wheat Stone", Color(34, 139, 34), Color(245, 222, 179), Color(160, 140, 110), 4.9),
        ColorTheme("Lime Green & Sienna Brick", Color(50, 205, 50), Color(160, 82, 45), Color(110, 55, 30), 3.7),
    ],
}

DUNGEON_THEME_SOURCES = (TerrainArchetype.HOUSE, TerrainArchetype.CAVE, TerrainArchetype.FOREST)


def select_color_theme(archetype: TerrainArchetype, rng: SeededRNG) -> ColorTheme:
    """Pick one palette for the run; dungeons darken a borrowed palette."""
    if archetype == TerrainArchetype.DUNGEON:
        source = rng.choice(DUNGEON_THEME_SOURCES)
        return rng.choice(COLOR_THEMES[source]).darkened(0.3, 0.2)
    return rng.choice(COLOR_THEMES[archetype])


# =============================================================================
# MAP NAMES
# =============================================================================

NAME_POOLS: Dict[TerrainArchetype, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    TerrainArchetype.HOUSE: (
        ("Cozy", "Grand", "Ancient", "Mysterious", "Humble"),
        ("Manor", "Cottage", "Estate", "Villa", "Homestead"),
    ),
    TerrainArchetype.FOREST: (
        ("Enchanted", "Dark", "Whispering", "Ancient", "Moonlit"),
        ("Woods", "Grove", "Thicket", "Glade", "Woodland"),
    ),
    TerrainArchetype.CAVE: (
        ("Crystal", "Shadow", "Echoing", "Deep", "Forgotten"),
        ("Caverns", "Grotto", "Depths", "Hollow", "Abyss"),
    ),
    TerrainArchetype.TOWN: (
        ("Bustling", "Peaceful", "Trading", "Border", "Riverside"),
        ("Village", "Township", "Settlement", "Hamlet", "Outpost"),
    ),
    TerrainArchetype.DUNGEON: (
        ("Cursed", "Lost", "Forbidden", "Ancient", "Treacherous"),
        ("Dungeon", "Catacombs", "Ruins", "Sanctum", "Labyrinth"),
    ),
}


def generate_map_name(archetype: TerrainArchetype, rng: SeededRNG, override: Optional[str] = None) -> str:
    """Random '<prefix> <suffix>' name, unless the caller supplied one."""
    prefixes, suffixes = NAME_POOLS[archetype]
    prefix = rng.choice(prefixes)
    suffix = rng.choice(suffixes)
    return override or f"{prefix} {suffix}"


def archetype_summary() -> List[Dict[str, object]]:
    """Describe every archetype for listing endpoints."""
    summary = []
    for archetype in TerrainArchetype:
        if archetype == TerrainArchetype.DUNGEON:
            shapes = [ShapeType.RECTANGLE.value, ShapeType.ORGANIC.value]
            kinds = list(DUNGEON_KINDS)
            path_style = PathStyle.CORRIDOR.value
        else:
            strategy = STRATEGIES[archetype]
            shapes = [strategy.shape_type.value]
            kinds = list(strategy.kinds)
            path_style = strategy.path_style.value
        summary.append({
            "archetype": archetype.value,
            "shapes": shapes,
            "space_kinds": kinds,
            "path_style": path_style,
        })
    return summary
