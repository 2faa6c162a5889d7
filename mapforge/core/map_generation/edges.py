"""
Rasterisation and edge/interior classification.

A cell set is split into edge cells (at least one 4-neighbour outside the
set) and interior cells. Classification is done per shape; merging keeps a
cell in one class only, interior taking precedence.
"""
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Set
import math

from .geometry import Cell, Shape, Waypoint

NEIGHBOURS_4 = ((0, -1), (1, 0), (0, 1), (-1, 0))


@dataclass(frozen=True)
class EdgeMap:
    """Disjoint edge and interior cell sets."""
    edges: FrozenSet[Cell]
    interior: FrozenSet[Cell]

    @property
    def cells(self) -> FrozenSet[Cell]:
        return self.edges | self.interior

    def is_edge(self, cell: Cell) -> bool:
        return cell in self.edges

    def is_interior(self, cell: Cell) -> bool:
        return cell in self.interior


def rasterize_shape(shape: Shape, map_width: int, map_height: int) -> FrozenSet[Cell]:
    """
    Cells whose centres fall inside a shape, clipped to the map.

    Args:
        shape: Space outline in map coordinates
        map_width: Map width in cells
        map_height: Map height in cells

    Returns:
        Frozen set of (x, y) cells
    """
    min_x, min_y, max_x, max_y = shape.bounds()
    x_start = max(0, int(math.floor(min_x)))
    y_start = max(0, int(math.floor(min_y)))
    x_end = min(map_width, int(math.ceil(max_x)))
    y_end = min(map_height, int(math.ceil(max_y)))

    cells: Set[Cell] = set()
    for y in range(y_start, y_end):
        for x in range(x_start, x_end):
            if shape.contains(x + 0.5, y + 0.5):
                cells.add((x, y))
    return frozenset(cells)


def walk_line(start: Cell, end: Cell) -> List[Cell]:
    """4-connected cell walk from start to end, both included."""
    x, y = start
    x1, y1 = end
    dx, dy = abs(x1 - x), abs(y1 - y)
    sx = 1 if x1 > x else -1
    sy = 1 if y1 > y else -1

    cells = [(x, y)]
    ix = iy = 0
    while ix < dx or iy < dy:
        if (0.5 + ix) * dy < (0.5 + iy) * dx:
            x += sx
            ix += 1
        else:
            y += sy
            iy += 1
        cells.append((x, y))
    return cells


def brush(cell: Cell, width: int) -> List[Cell]:
    """Square brush of ``width`` cells around a cell."""
    x, y = cell
    low = -((width - 1) // 2)
    high = width // 2
    return [
        (x + ox, y + oy)
        for oy in range(low, high + 1)
        for ox in range(low, high + 1)
    ]


def rasterize_path(
    waypoints: Sequence[Waypoint],
    default_width: int,
    map_width: int,
    map_height: int,
) -> FrozenSet[Cell]:
    """
    Cells covered by a path, clipped to the map.

    Each leg between consecutive waypoints is walked cell by cell and
    painted with the width of the leg's starting waypoint.
    """
    cells: Set[Cell] = set()

    def paint(cell: Cell, width: int) -> None:
        for bx, by in brush(cell, max(1, width)):
            if 0 <= bx < map_width and 0 <= by < map_height:
                cells.add((bx, by))

    if len(waypoints) == 1:
        only = waypoints[0]
        paint((only.x, only.y), only.width or default_width)

    for start, end in zip(waypoints, waypoints[1:]):
        width = start.width if start.width is not None else default_width
        for cell in walk_line((start.x, start.y), (end.x, end.y)):
            paint(cell, width)

    return frozenset(cells)


def classify(cells: Iterable[Cell]) -> EdgeMap:
    """Split a cell set into edge and interior cells."""
    cell_set = frozenset(cells)
    edges = set()
    for x, y in cell_set:
        for ox, oy in NEIGHBOURS_4:
            if (x + ox, y + oy) not in cell_set:
                edges.add((x, y))
                break
    edge_set = frozenset(edges)
    return EdgeMap(edges=edge_set, interior=cell_set - edge_set)


def merge_edge_maps(maps: Iterable[EdgeMap]) -> EdgeMap:
    """Union several maps; a cell interior to any map is interior."""
    edges: Set[Cell] = set()
    interior: Set[Cell] = set()
    for edge_map in maps:
        edges |= edge_map.edges
        interior |= edge_map.interior
    return EdgeMap(edges=frozenset(edges - interior), interior=frozenset(interior))


class EdgeClassifier:
    """Classifies spaces and paths on a map of fixed dimensions."""

    def __init__(self, map_width: int, map_height: int):
        self.map_width = map_width
        self.map_height = map_height

    def rasterize_space(self, space) -> FrozenSet[Cell]:
        return rasterize_shape(space.shape, self.map_width, self.map_height)

    def rasterize_path(self, segment) -> FrozenSet[Cell]:
        return rasterize_path(segment.waypoints, segment.width, self.map_width, self.map_height)

    def classify_space(self, space) -> EdgeMap:
        # Spaces keep their footprint from layout so doors stay on it
        return classify(space.cells)

    def classify_path(self, segment) -> EdgeMap:
        return classify(self.rasterize_path(segment))

    def classify(self, cells: Iterable[Cell]) -> EdgeMap:
        return classify(cells)
