"""
Grid geometry and room shapes.

Positions and sizes are integer grid values. Shapes are stored as ordered
perimeter points in map coordinates; organic shapes are angle-ascending so
the ray casting test in ``Shape.contains`` is reliable.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple
import math

from .rng import SeededRNG

Cell = Tuple[int, int]


@dataclass(frozen=True)
class Position:
    """Integer grid coordinate."""
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        return cls(x=int(data["x"]), y=int(data["y"]))

    def as_cell(self) -> Cell:
        return (self.x, self.y)


@dataclass(frozen=True)
class Size:
    """Integer width/height in grid cells."""
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Size":
        return cls(width=int(data["width"]), height=int(data["height"]))


@dataclass(frozen=True)
class Waypoint:
    """A path control point; ``width`` overrides the segment width."""
    x: int
    y: int
    width: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"x": self.x, "y": self.y}
        if self.width is not None:
            data["width"] = self.width
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Waypoint":
        width = data.get("width")
        return cls(x=int(data["x"]), y=int(data["y"]), width=int(width) if width is not None else None)


class ShapeType(str, Enum):
    """Kinds of space footprint."""
    RECTANGLE = "rectangle"
    ORGANIC = "organic"


@dataclass(frozen=True)
class Shape:
    """A space footprint outline in map coordinates."""
    shape_type: ShapeType
    points: Tuple[Tuple[float, float], ...]

    def bounds(self) -> Tuple[float, float, float, float]:
        """Return (min_x, min_y, max_x, max_y) of the outline."""
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return min(xs), min(ys), max(xs), max(ys)

    def contains(self, px: float, py: float) -> bool:
        """
        Check if a point lies inside the shape.

        Rectangles use a half-open bounds test; polygons use ray casting.
        """
        if self.shape_type == ShapeType.RECTANGLE:
            min_x, min_y, max_x, max_y = self.bounds()
            return min_x <= px < max_x and min_y <= py < max_y
        return point_in_polygon(px, py, self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "points": [[x, y] for x, y in self.points],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Shape":
        return cls(
            shape_type=ShapeType(data["type"]),
            points=tuple((p[0], p[1]) for p in data["points"]),
        )


def point_in_polygon(px: float, py: float, points: Tuple[Tuple[float, float], ...]) -> bool:
    """Even-odd ray casting test."""
    inside = False
    count = len(points)
    j = count - 1
    for i in range(count):
        xi, yi = points[i]
        xj, yj = points[j]
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


class ShapeGenerator:
    """Builds rectangular and organic space outlines."""

    MIN_ORGANIC_POINTS = 8
    MAX_ORGANIC_POINTS = 16

    def __init__(self, rng: SeededRNG):
        self.rng = rng

    def rectangle(self, width: int, height: int, origin: Position = Position(0, 0)) -> Shape:
        """Four corners, clockwise from the origin."""
        x, y = origin.x, origin.y
        return Shape(
            shape_type=ShapeType.RECTANGLE,
            points=(
                (x, y),
                (x + width, y),
                (x + width, y + height),
                (x, y + height),
            ),
        )

    def organic(self, center: Tuple[float, float], base_radius: float, organic_factor: float) -> Shape:
        """
        Noisy radial polygon around a centre.

        Args:
            center: Polygon centre in map coordinates
            base_radius: Unperturbed radius in cells
            organic_factor: 0.0 (regular polygon) to 1.0 (very rough)

        Returns:
            Organic shape with 8-16 angle-ascending points
        """
        cx, cy = center
        spread = self.MAX_ORGANIC_POINTS - self.MIN_ORGANIC_POINTS + 1
        num_points = self.MIN_ORGANIC_POINTS + self.rng.next_int(spread)
        max_delta = base_radius * organic_factor * 0.5

        points: List[Tuple[float, float]] = []
        for i in range(num_points):
            angle = (i / num_points) * 2 * math.pi
            radius = base_radius + (self.rng.next_float() * 2 - 1) * max_delta
            points.append((
                round(cx + math.cos(angle) * radius, 3),
                round(cy + math.sin(angle) * radius, 3),
            ))

        return Shape(shape_type=ShapeType.ORGANIC, points=tuple(points))
