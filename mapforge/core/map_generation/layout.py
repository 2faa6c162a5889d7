"""
Space layout planning.

Places rooms, clearings, caverns or buildings on the map by rejection
sampling: each space gets a bounded number of random positions and is
skipped when none of them keeps the archetype buffer clear of the spaces
already committed.
"""
from dataclasses import dataclass
from typing import List, Dict, Any, FrozenSet, Optional, Tuple
import logging
import math

from .archetypes import ArchetypeStrategy
from .edges import rasterize_shape
from .geometry import Cell, Position, Size, Shape, ShapeType, ShapeGenerator
from .rng import SeededRNG
from .tuning import GenerationTuning

logger = logging.getLogger("mapforge.layout")

# Side index -> unit step from the centre toward that side
SIDE_STEPS = ((0, -1), (1, 0), (0, 1), (-1, 0))  # top, right, bottom, left


@dataclass(frozen=True)
class Space:
    """A placed space: its outline, rasterised footprint and doors."""
    id: str
    kind: str
    shape: Shape
    position: Position
    size: Size
    doors: Tuple[Position, ...]
    cells: FrozenSet[Cell]

    def center(self) -> Tuple[int, int]:
        """Get the center point of the bounding box."""
        return (self.position.x + self.size.width // 2, self.position.y + self.size.height // 2)

    def bounds(self) -> Tuple[int, int, int, int]:
        """Inclusive (min_x, min_y, max_x, max_y) of the footprint."""
        return (
            self.position.x,
            self.position.y,
            self.position.x + self.size.width - 1,
            self.position.y + self.size.height - 1,
        )

    def contains(self, px: int, py: int) -> bool:
        """Check if a cell belongs to this space."""
        return (px, py) in self.cells

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "kind": self.kind,
            "shape": self.shape.to_dict(),
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "doors": [d.to_dict() for d in self.doors],
            "cells": [[x, y] for x, y in sorted(self.cells, key=lambda c: (c[1], c[0]))],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Space":
        return cls(
            id=data["id"],
            kind=data["kind"],
            shape=Shape.from_dict(data["shape"]),
            position=Position.from_dict(data["position"]),
            size=Size.from_dict(data["size"]),
            doors=tuple(Position.from_dict(d) for d in data.get("doors", [])),
            cells=frozenset((int(c[0]), int(c[1])) for c in data["cells"]),
        )


def cell_bounds(cells: FrozenSet[Cell]) -> Tuple[int, int, int, int]:
    """Inclusive bounding box of a non-empty cell set."""
    xs = [c[0] for c in cells]
    ys = [c[1] for c in cells]
    return min(xs), min(ys), max(xs), max(ys)


def boxes_overlap(a: Tuple[int, int, int, int], b: Tuple[int, int, int, int]) -> bool:
    """Inclusive box intersection test."""
    return not (a[2] < b[0] or b[2] < a[0] or a[3] < b[1] or b[3] < a[1])


class SpaceLayoutPlanner:
    """
    Places spaces for one archetype on one map.

    The planner never fails: spaces that cannot be placed within
    ``placement_attempts`` tries are skipped, so the result may hold fewer
    spaces than requested.
    """

    def __init__(
        self,
        rng: SeededRNG,
        map_width: int,
        map_height: int,
        strategy: ArchetypeStrategy,
        tuning: Optional[GenerationTuning] = None,
    ):
        self.rng = rng
        self.map_width = map_width
        self.map_height = map_height
        self.strategy = strategy
        self.tuning = tuning or GenerationTuning()
        self.shapes = ShapeGenerator(rng)

    def plan(
        self,
        space_count: int,
        min_size: int,
        max_size: int,
        organic_factor: float = 0.0,
    ) -> List[Space]:
        """
        Lay out up to ``space_count`` spaces.

        Args:
            space_count: Number of spaces requested
            min_size: Minimum side/diameter in cells
            max_size: Maximum side/diameter in cells
            organic_factor: Outline roughness for organic shapes

        Returns:
            Committed spaces in placement order
        """
        spaces: List[Space] = []
        factor = self.strategy.effective_organic_factor(organic_factor)

        for index in range(space_count):
            space = self._place_space(index, len(spaces), spaces, min_size, max_size, factor)
            if space is None:
                logger.debug(
                    f"Skipped {self.strategy.archetype.value} space {index}: "
                    f"no free position after {self.tuning.placement_attempts} attempts"
                )
                continue
            spaces.append(space)

        logger.debug(f"Placed {len(spaces)}/{space_count} spaces")
        return spaces

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    def _place_space(
        self,
        index: int,
        space_index: int,
        committed: List[Space],
        min_size: int,
        max_size: int,
        organic_factor: float,
    ) -> Optional[Space]:
        kind = self.strategy.pick_kind(index, self.rng)

        for _ in range(self.tuning.placement_attempts):
            if self.strategy.shape_type == ShapeType.RECTANGLE:
                shape = self._random_rectangle(min_size, max_size)
            else:
                shape = self._random_organic(min_size, max_size, organic_factor)

            cells = rasterize_shape(shape, self.map_width, self.map_height)
            if not cells:
                cells = frozenset([self._center_cell(shape)])

            if self._collides(cells, committed):
                continue

            min_x, min_y, max_x, max_y = cell_bounds(cells)
            return Space(
                id=f"{self.strategy.id_prefix}_{space_index}",
                kind=kind,
                shape=shape,
                position=Position(min_x, min_y),
                size=Size(max_x - min_x + 1, max_y - min_y + 1),
                doors=self._create_doors(shape, cells),
                cells=cells,
            )
        return None

    def _random_rectangle(self, min_size: int, max_size: int) -> Shape:
        margin = self.strategy.margin
        width = min(self.rng.next_range(min_size, max_size), self.map_width - 2 * margin)
        height = min(self.rng.next_range(min_size, max_size), self.map_height - 2 * margin)
        x = margin + self.rng.next_int(self.map_width - width - 2 * margin + 1)
        y = margin + self.rng.next_int(self.map_height - height - 2 * margin + 1)
        return self.shapes.rectangle(width, height, Position(x, y))

    def _random_organic(self, min_size: int, max_size: int, organic_factor: float) -> Shape:
        margin = self.strategy.margin
        limit = min(self.map_width, self.map_height) - 2 * margin
        size = min(self.rng.next_range(min_size, max_size), limit)
        radius = size / 2
        reach = int(math.ceil(radius))
        cx = margin + reach + self.rng.next_int(max(1, self.map_width - 2 * margin - 2 * reach + 1))
        cy = margin + reach + self.rng.next_int(max(1, self.map_height - 2 * margin - 2 * reach + 1))
        return self.shapes.organic((cx, cy), radius, organic_factor)

    def _center_cell(self, shape: Shape) -> Cell:
        min_x, min_y, max_x, max_y = shape.bounds()
        cx = int((min_x + max_x) / 2)
        cy = int((min_y + max_y) / 2)
        return (
            min(max(cx, 0), self.map_width - 1),
            min(max(cy, 0), self.map_height - 1),
        )

    def _collides(self, cells: FrozenSet[Cell], committed: List[Space]) -> bool:
        buffer = self.strategy.buffer
        min_x, min_y, max_x, max_y = cell_bounds(cells)
        expanded = (min_x - buffer, min_y - buffer, max_x + buffer, max_y + buffer)
        return any(boxes_overlap(expanded, space.bounds()) for space in committed)

    # =========================================================================
    # DOORS
    # =========================================================================

    def _create_doors(self, shape: Shape, cells: FrozenSet[Cell]) -> Tuple[Position, ...]:
        """One or two doors, each on a randomly chosen side."""
        door_count = 1 + self.rng.next_int(2)
        doors: List[Position] = []
        for _ in range(door_count):
            side = self.rng.next_int(4)
            if shape.shape_type == ShapeType.RECTANGLE:
                door = self._rectangle_door(shape, side)
            else:
                door = self._organic_door(cells, side)
            if door not in doors:
                doors.append(door)
        return tuple(doors)

    @staticmethod
    def _rectangle_door(shape: Shape, side: int) -> Position:
        min_x, min_y, max_x, max_y = (int(v) for v in shape.bounds())
        w, h = max_x - min_x, max_y - min_y
        if side == 0:
            return Position(min_x + w // 2, min_y)
        if side == 1:
            return Position(min_x + w - 1, min_y + h // 2)
        if side == 2:
            return Position(min_x + w // 2, min_y + h - 1)
        return Position(min_x, min_y + h // 2)

    def _organic_door(self, cells: FrozenSet[Cell], side: int) -> Position:
        """Last footprint cell on the walk from the centre toward a side."""
        min_x, min_y, max_x, max_y = cell_bounds(cells)
        center = ((min_x + max_x) // 2, (min_y + max_y) // 2)
        if center not in cells:
            center = min(
                sorted(cells, key=lambda c: (c[1], c[0])),
                key=lambda c: (c[0] - center[0]) ** 2 + (c[1] - center[1]) ** 2,
            )

        step_x, step_y = SIDE_STEPS[side]
        x, y = center
        while (x + step_x, y + step_y) in cells:
            x += step_x
            y += step_y
        return Position(x, y)
