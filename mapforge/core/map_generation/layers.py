"""
Layer assembly.

Turns classified spaces and paths into the fixed layer stack of a map
document: background, terrain, paths, objects, grid.
"""
from typing import Dict, FrozenSet, List, Optional, Sequence

from .colors import Color, ColorTheme
from .connectivity import PathSegment
from .document import LayerType, MapLayer, MapObject, MapTile, ObjectType, TerrainType
from .edges import EdgeClassifier, EdgeMap, merge_edge_maps
from .geometry import Cell, Position, Size
from .layout import Space

DOOR_COLOR = Color(139, 90, 43)
GRID_LINE_COLOR = Color(200, 200, 200, 0.3)
GRID_LINE_WIDTH = 1


def _row_major(cell: Cell):
    return (cell[1], cell[0])


class LayerAssembler:
    """Builds the layer stack for one map."""

    def __init__(self, map_width: int, map_height: int, theme: ColorTheme, cell_size: int = 32):
        self.map_width = map_width
        self.map_height = map_height
        self.theme = theme
        self.cell_size = cell_size
        self.classifier = EdgeClassifier(map_width, map_height)

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def space_edge_map(self, spaces: Sequence[Space]) -> EdgeMap:
        """Merged edge/interior split of all space footprints."""
        return merge_edge_maps(self.classifier.classify_space(space) for space in spaces)

    def path_edge_map(self, paths: Sequence[PathSegment], spaces: Sequence[Space]) -> EdgeMap:
        """
        Merged edge/interior split of all paths.

        Path edge cells lying on a space are dropped so corridors open into
        the rooms they join.
        """
        merged = merge_edge_maps(self.classifier.classify_path(path) for path in paths)
        space_cells = frozenset().union(*(space.cells for space in spaces)) if spaces else frozenset()
        return EdgeMap(edges=merged.edges - space_cells, interior=merged.interior)

    # =========================================================================
    # LAYERS
    # =========================================================================

    def assemble(
        self,
        spaces: Sequence[Space],
        paths: Sequence[PathSegment],
        objects: Optional[List[MapObject]] = None,
        grid_opacity: float = 0.3,
    ) -> List[MapLayer]:
        """
        Build all five layers in display order.

        Args:
            spaces: Committed spaces
            paths: Path segments between spaces
            objects: Placed asset objects
            grid_opacity: Opacity of the grid overlay

        Returns:
            Background, terrain, paths, objects and grid layers
        """
        return [
            self.background_layer(),
            self.terrain_layer(spaces),
            self.paths_layer(paths, spaces),
            self.objects_layer(objects or []),
            self.grid_layer(grid_opacity),
        ]

    def background_layer(self) -> MapLayer:
        fill = MapObject(
            id="background_fill",
            object_type=ObjectType.FILL,
            position=Position(0, 0),
            size=Size(self.map_width, self.map_height),
            name="Background",
            color=self.theme.background_color,
        )
        return MapLayer(id="layer_background", name="Background", layer_type=LayerType.BACKGROUND, objects=[fill])

    def terrain_layer(self, spaces: Sequence[Space]) -> MapLayer:
        edge_map = self.space_edge_map(spaces)
        owners: Dict[Cell, str] = {}
        doors: FrozenSet[Cell] = frozenset()
        for space in spaces:
            for cell in space.cells:
                owners[cell] = space.id
            doors = doors | {door.as_cell() for door in space.doors}

        tiles = []
        for cell in sorted(edge_map.cells, key=_row_major):
            if cell in doors:
                terrain, color = TerrainType.DOOR, DOOR_COLOR
            elif edge_map.is_interior(cell):
                terrain, color = TerrainType.FLOOR, self.theme.path_color
            else:
                terrain, color = TerrainType.WALL, self.theme.wall_color
            tiles.append(MapTile(Position(*cell), terrain, color, owners.get(cell)))

        return MapLayer(id="layer_terrain", name="Terrain", layer_type=LayerType.TERRAIN, tiles=tiles)

    def paths_layer(self, paths: Sequence[PathSegment], spaces: Sequence[Space]) -> MapLayer:
        edge_map = self.path_edge_map(paths, spaces)
        tiles = []
        for cell in sorted(edge_map.cells, key=_row_major):
            if edge_map.is_interior(cell):
                tiles.append(MapTile(Position(*cell), TerrainType.FLOOR, self.theme.path_color))
            else:
                tiles.append(MapTile(Position(*cell), TerrainType.WALL, self.theme.wall_color))
        return MapLayer(id="layer_paths", name="Paths", layer_type=LayerType.PATHS, tiles=tiles)

    def objects_layer(self, objects: List[MapObject]) -> MapLayer:
        return MapLayer(id="layer_objects", name="Objects", layer_type=LayerType.OBJECTS, objects=list(objects))

    def grid_layer(self, opacity: float = 0.3) -> MapLayer:
        grid = MapObject(
            id="grid_overlay",
            object_type=ObjectType.GRID,
            position=Position(0, 0),
            size=Size(self.map_width, self.map_height),
            name="Grid",
            color=GRID_LINE_COLOR,
            opacity=opacity,
            properties={"line_width": GRID_LINE_WIDTH, "cell_size": self.cell_size},
        )
        return MapLayer(
            id="layer_grid",
            name="Grid",
            layer_type=LayerType.OVERLAY,
            opacity=opacity,
            objects=[grid],
        )
