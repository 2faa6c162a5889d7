"""
Procedural Map Generation System.

Generates layered grid maps for tabletop play using:
- A seeded RNG so every map can be reproduced from its seed
- Archetype strategies (house, forest, cave, town, dungeon) for space layout
- Minimum spanning tree connectivity with corridors or organic trails
- Contextual asset placement driven by placement rules
"""

from .rng import SeededRNG, hash_seed
from .geometry import Position, Size, Shape, ShapeType, ShapeGenerator, Waypoint
from .archetypes import TerrainArchetype, PathStyle
from .colors import Color, ColorTheme
from .layout import Space, SpaceLayoutPlanner
from .connectivity import PathSegment, ConnectivityPlanner
from .edges import EdgeMap, EdgeClassifier
from .document import MapDocument, MapLayer, MapTile, MapObject, LayerType, TerrainType, ObjectType
from .layers import LayerAssembler
from .assets import (
    AssetGenerationContext,
    AssetPlacementEngine,
    GeneratedAsset,
    PlacedAsset,
    Rarity,
    Near,
    Avoid,
    OnTerrain,
    Edge,
    Center,
    Corner,
)
from .map_generator import (
    GenerationOptions,
    MapGenerator,
    generate,
    place_assets,
    generate_batch,
    derive_seed,
)
from .presets import Preset, get_preset, list_presets
from .tuning import GenerationTuning

__all__ = [
    "SeededRNG",
    "hash_seed",
    "Position",
    "Size",
    "Shape",
    "ShapeType",
    "ShapeGenerator",
    "Waypoint",
    "TerrainArchetype",
    "PathStyle",
    "Color",
    "ColorTheme",
    "Space",
    "SpaceLayoutPlanner",
    "PathSegment",
    "ConnectivityPlanner",
    "EdgeMap",
    "EdgeClassifier",
    "MapDocument",
    "MapLayer",
    "MapTile",
    "MapObject",
    "LayerType",
    "TerrainType",
    "ObjectType",
    "LayerAssembler",
    "AssetGenerationContext",
    "AssetPlacementEngine",
    "GeneratedAsset",
    "PlacedAsset",
    "Rarity",
    "Near",
    "Avoid",
    "OnTerrain",
    "Edge",
    "Center",
    "Corner",
    "GenerationOptions",
    "MapGenerator",
    "generate",
    "place_assets",
    "generate_batch",
    "derive_seed",
    "Preset",
    "get_preset",
    "list_presets",
    "GenerationTuning",
]
