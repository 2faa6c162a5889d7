"""
Map document model.

The MapDocument is the only contract between the generator and the
editing, rendering and persistence layers, so every type here converts to
and from plain JSON-compatible dictionaries without loss.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional
import json

from mapforge.core.errors import MapDocumentError
from .colors import Color, ColorTheme
from .geometry import Position, Size
from .layout import Space
from .connectivity import PathSegment


class LayerType(str, Enum):
    """Map layer kinds, in the order the generator emits them."""
    BACKGROUND = "background"
    TERRAIN = "terrain"
    PATHS = "paths"
    OBJECTS = "objects"
    OVERLAY = "overlay"


class TerrainType(str, Enum):
    """Tile terrain produced by the generator."""
    WALL = "wall"
    FLOOR = "floor"
    DOOR = "door"


class ObjectType(str, Enum):
    """Closed set of object types a layer may carry."""
    FILL = "fill"
    GRID = "grid"
    FURNITURE = "furniture"
    DECORATION = "decoration"
    INTERACTIVE = "interactive"
    CREATURE = "creature"
    TREASURE = "treasure"
    HAZARD = "hazard"
    LIGHT_SOURCE = "light_source"


@dataclass
class MapTile:
    """A single classified grid cell."""
    position: Position
    terrain_type: TerrainType
    color: Optional[Color] = None
    source_id: Optional[str] = None  # Space or path that produced the tile

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.to_dict(),
            "terrain_type": self.terrain_type.value,
            "color": self.color.to_dict() if self.color else None,
            "source_id": self.source_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapTile":
        color = data.get("color")
        return cls(
            position=Position.from_dict(data["position"]),
            terrain_type=TerrainType(data["terrain_type"]),
            color=Color.from_dict(color) if color else None,
            source_id=data.get("source_id"),
        )


@dataclass
class MapObject:
    """An object placed on a layer (asset, fill, grid overlay)."""
    id: str
    object_type: ObjectType
    position: Position
    size: Size
    name: str
    description: str = ""
    color: Optional[Color] = None
    rotation: int = 0
    opacity: float = 1.0
    is_visible: bool = True
    is_interactive: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.object_type.value,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "name": self.name,
            "description": self.description,
            "color": self.color.to_dict() if self.color else None,
            "rotation": self.rotation,
            "opacity": self.opacity,
            "is_visible": self.is_visible,
            "is_interactive": self.is_interactive,
            "properties": self.properties,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapObject":
        color = data.get("color")
        return cls(
            id=data["id"],
            object_type=ObjectType(data["type"]),
            position=Position.from_dict(data["position"]),
            size=Size.from_dict(data["size"]),
            name=data["name"],
            description=data.get("description", ""),
            color=Color.from_dict(color) if color else None,
            rotation=data.get("rotation", 0),
            opacity=data.get("opacity", 1.0),
            is_visible=data.get("is_visible", True),
            is_interactive=data.get("is_interactive", False),
            properties=dict(data.get("properties", {})),
        )


@dataclass
class MapLayer:
    """
    One paint layer.

    A layer carries either tiles or objects; visibility, lock and opacity
    are defaults the editor may toggle later.
    """
    id: str
    name: str
    layer_type: LayerType
    is_visible: bool = True
    is_locked: bool = False
    opacity: float = 1.0
    tiles: Optional[List[MapTile]] = None
    objects: Optional[List[MapObject]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.layer_type.value,
            "is_visible": self.is_visible,
            "is_locked": self.is_locked,
            "opacity": self.opacity,
        }
        if self.tiles is not None:
            data["tiles"] = [t.to_dict() for t in self.tiles]
        if self.objects is not None:
            data["objects"] = [o.to_dict() for o in self.objects]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapLayer":
        tiles = data.get("tiles")
        objects = data.get("objects")
        return cls(
            id=data["id"],
            name=data["name"],
            layer_type=LayerType(data["type"]),
            is_visible=data.get("is_visible", True),
            is_locked=data.get("is_locked", False),
            opacity=data.get("opacity", 1.0),
            tiles=[MapTile.from_dict(t) for t in tiles] if tiles is not None else None,
            objects=[MapObject.from_dict(o) for o in objects] if objects is not None else None,
        )


@dataclass
class GridConfig:
    """Grid display settings."""
    cell_size: int = 32
    show_grid: bool = True
    snap_to_grid: bool = True
    grid_type: str = "square"
    grid_color: Color = field(default_factory=lambda: Color(200, 200, 200, 0.3))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cell_size": self.cell_size,
            "show_grid": self.show_grid,
            "snap_to_grid": self.snap_to_grid,
            "grid_type": self.grid_type,
            "grid_color": self.grid_color.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridConfig":
        return cls(
            cell_size=data.get("cell_size", 32),
            show_grid=data.get("show_grid", True),
            snap_to_grid=data.get("snap_to_grid", True),
            grid_type=data.get("grid_type", "square"),
            grid_color=Color.from_dict(data["grid_color"]) if "grid_color" in data else Color(200, 200, 200, 0.3),
        )


@dataclass
class MapMetadata:
    """Identity and provenance of a generated map."""
    id: str
    name: str
    archetype: str
    seed: str
    tags: List[str] = field(default_factory=list)
    version: str = "1.0"
    theme: Optional[ColorTheme] = None
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "archetype": self.archetype,
            "tags": list(self.tags),
            "version": self.version,
            "generation": {
                "seed": self.seed,
                "parameters": self.parameters,
            },
            "theme": self.theme.to_dict() if self.theme else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapMetadata":
        generation = data.get("generation", {})
        theme = data.get("theme")
        return cls(
            id=data["id"],
            name=data["name"],
            archetype=data["archetype"],
            seed=generation.get("seed", ""),
            tags=list(data.get("tags", [])),
            version=data.get("version", "1.0"),
            theme=ColorTheme.from_dict(theme) if theme else None,
            parameters=dict(generation.get("parameters", {})),
        )


@dataclass
class MapDocument:
    """A complete generated map, owned by the caller once returned."""
    metadata: MapMetadata
    dimensions: Size
    grid_config: GridConfig
    layers: List[MapLayer]
    background_color: Color
    spaces: List[Space] = field(default_factory=list)
    paths: List[PathSegment] = field(default_factory=list)

    def get_layer(self, layer_type: LayerType) -> Optional[MapLayer]:
        """Get the first layer of a type."""
        for layer in self.layers:
            if layer.layer_type == layer_type:
                return layer
        return None

    def get_objects(self) -> List[MapObject]:
        """Objects on the objects layer."""
        layer = self.get_layer(LayerType.OBJECTS)
        return list(layer.objects or []) if layer else []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response or storage."""
        return {
            "metadata": self.metadata.to_dict(),
            "dimensions": self.dimensions.to_dict(),
            "grid_config": self.grid_config.to_dict(),
            "layers": [layer.to_dict() for layer in self.layers],
            "background_color": self.background_color.to_dict(),
            "layout": {
                "spaces": [s.to_dict() for s in self.spaces],
                "paths": [p.to_dict() for p in self.paths],
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapDocument":
        """
        Rebuild a document from ``to_dict`` output.

        Raises:
            MapDocumentError: If required fields are missing or invalid
        """
        try:
            layout = data.get("layout", {})
            return cls(
                metadata=MapMetadata.from_dict(data["metadata"]),
                dimensions=Size.from_dict(data["dimensions"]),
                grid_config=GridConfig.from_dict(data.get("grid_config", {})),
                layers=[MapLayer.from_dict(layer) for layer in data["layers"]],
                background_color=Color.from_dict(data["background_color"]),
                spaces=[Space.from_dict(s) for s in layout.get("spaces", [])],
                paths=[PathSegment.from_dict(p) for p in layout.get("paths", [])],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MapDocumentError(
                reason=f"Malformed map document: {e}",
                details={"exception_type": type(e).__name__},
            ) from e

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "MapDocument":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MapDocumentError(reason=f"Map document is not valid JSON: {e}") from e
        return cls.from_dict(data)
