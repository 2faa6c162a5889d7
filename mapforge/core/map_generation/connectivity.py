"""
Connectivity planning.

Builds a minimum spanning tree over the placed spaces (Prim's algorithm,
Euclidean distance between centres) and turns every tree edge into a
drawable path: a curved trail for forests and caves, a wandering
one-cell-per-step corridor for houses, towns and dungeons.
"""
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence, Tuple
import logging
import math

from .archetypes import ArchetypeStrategy, PathStyle
from .geometry import Waypoint
from .layout import Space
from .rng import SeededRNG
from .tuning import GenerationTuning

logger = logging.getLogger("mapforge.connectivity")

Point = Tuple[int, int]


@dataclass(frozen=True)
class PathSegment:
    """A path between two spaces."""
    id: str
    waypoints: Tuple[Waypoint, ...]
    width: int
    from_space: str
    to_space: str
    style: PathStyle

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "waypoints": [w.to_dict() for w in self.waypoints],
            "width": self.width,
            "from_space": self.from_space,
            "to_space": self.to_space,
            "style": self.style.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PathSegment":
        return cls(
            id=data["id"],
            waypoints=tuple(Waypoint.from_dict(w) for w in data["waypoints"]),
            width=int(data["width"]),
            from_space=data["from_space"],
            to_space=data["to_space"],
            style=PathStyle(data["style"]),
        )


def minimum_spanning_tree(spaces: Sequence[Space]) -> List[Tuple[int, int]]:
    """
    Prim's algorithm over space centres.

    Ties keep the first pair found, scanning visited spaces in visit order
    and candidates in space order.

    Returns:
        Edges as (visited index, new index) pairs, in the order added
    """
    if len(spaces) < 2:
        return []

    centers = [space.center() for space in spaces]
    visited = [0]
    in_tree = {0}
    edges: List[Tuple[int, int]] = []

    while len(visited) < len(spaces):
        best: Optional[Tuple[int, int]] = None
        best_distance = math.inf
        for i in visited:
            for j in range(len(spaces)):
                if j in in_tree:
                    continue
                distance = math.dist(centers[i], centers[j])
                if distance < best_distance:
                    best_distance = distance
                    best = (i, j)
        edges.append(best)
        visited.append(best[1])
        in_tree.add(best[1])

    return edges


class ConnectivityPlanner:
    """Connects spaces so that every space is reachable from every other."""

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

    def connect(self, spaces: Sequence[Space], extra_connection_factor: float = 0.0) -> List[PathSegment]:
        """
        Build path segments for the spanning tree plus optional loops.

        Args:
            spaces: Committed spaces
            extra_connection_factor: Extra edges as a fraction of the space count

        Returns:
            One PathSegment per edge; empty for fewer than two spaces
        """
        if len(spaces) < 2:
            return []

        edges = minimum_spanning_tree(spaces)
        edges.extend(self._extra_edges(len(spaces), edges, extra_connection_factor))

        segments = []
        for index, (a, b) in enumerate(edges):
            segments.append(self._build_segment(f"path_{index}", spaces[a], spaces[b]))

        logger.debug(f"Connected {len(spaces)} spaces with {len(segments)} paths")
        return segments

    def _extra_edges(
        self,
        space_count: int,
        existing: List[Tuple[int, int]],
        factor: float,
    ) -> List[Tuple[int, int]]:
        wanted = int(math.floor(space_count * factor))
        if wanted <= 0 or space_count < 3:
            return []

        taken = {frozenset(edge) for edge in existing}
        extra: List[Tuple[int, int]] = []
        for _ in range(2 * space_count):
            if len(extra) >= wanted:
                break
            a = self.rng.next_int(space_count)
            b = self.rng.next_int(space_count)
            pair = frozenset((a, b))
            if a == b or pair in taken:
                continue
            taken.add(pair)
            extra.append((a, b))
        return extra

    # =========================================================================
    # SEGMENTS
    # =========================================================================

    def _build_segment(self, segment_id: str, source: Space, target: Space) -> PathSegment:
        width = self.strategy.path_width
        if self.strategy.path_width_jitter:
            width += self.rng.next_int(self.strategy.path_width_jitter + 1)

        organic = self.strategy.path_style == PathStyle.ORGANIC
        start, end = self.nearest_endpoints(source, target, include_centers=organic)

        if organic:
            waypoints = self.organic_path(start, end, width)
        else:
            waypoints = self.corridor_path(start, end, width)

        return PathSegment(
            id=segment_id,
            waypoints=tuple(waypoints),
            width=width,
            from_space=source.id,
            to_space=target.id,
            style=self.strategy.path_style,
        )

    @staticmethod
    def nearest_endpoints(source: Space, target: Space, include_centers: bool = False) -> Tuple[Point, Point]:
        """Closest (Manhattan) pair among the two spaces' doors."""
        def candidates(space: Space) -> List[Point]:
            points = [door.as_cell() for door in space.doors]
            if include_centers or not points:
                points.append(space.center())
            return points

        best: Optional[Tuple[Point, Point]] = None
        best_distance = None
        for a in candidates(source):
            for b in candidates(target):
                distance = abs(a[0] - b[0]) + abs(a[1] - b[1])
                if best_distance is None or distance < best_distance:
                    best_distance = distance
                    best = (a, b)
        return best

    def _vary_width(self, width: int, chance: float) -> int:
        if self.rng.next_float() < chance:
            delta = 1 if self.rng.next_bool() else -1
            return max(1, width + delta)
        return width

    def _clamp(self, x: float, y: float) -> Point:
        return (
            min(max(int(round(x)), 0), self.map_width - 1),
            min(max(int(round(y)), 0), self.map_height - 1),
        )

    def organic_path(self, start: Point, end: Point, width: int) -> List[Waypoint]:
        """
        Quadratic Bezier trail through one randomly offset midpoint.

        Interior waypoints wobble a little and may vary in width.
        """
        tuning = self.tuning
        sx, sy = start
        ex, ey = end
        distance = math.dist(start, end)

        mx = (sx + ex) / 2 + (self.rng.next_float() - 0.5) * distance * tuning.organic_midpoint_offset
        my = (sy + ey) / 2 + (self.rng.next_float() - 0.5) * distance * tuning.organic_midpoint_offset
        segments = max(tuning.organic_min_segments, int(distance / tuning.organic_segment_spacing))

        waypoints: List[Waypoint] = []
        for i in range(segments + 1):
            t = i / segments
            inv = 1 - t
            x = inv * inv * sx + 2 * inv * t * mx + t * t * ex
            y = inv * inv * sy + 2 * inv * t * my + t * t * ey
            if 0 < i < segments:
                x += (self.rng.next_float() - 0.5) * 2 * tuning.organic_wobble
                y += (self.rng.next_float() - 0.5) * 2 * tuning.organic_wobble
                px, py = self._clamp(x, y)
            else:
                px, py = (sx, sy) if i == 0 else (ex, ey)
            point_width = self._vary_width(width, tuning.organic_width_variation_chance)

            if waypoints and (waypoints[-1].x, waypoints[-1].y) == (px, py):
                continue
            waypoints.append(Waypoint(px, py, point_width))
        return waypoints

    def corridor_path(self, start: Point, end: Point, width: int) -> List[Waypoint]:
        """
        Axis-aligned corridor walked one cell per step.

        Horizontal-first or vertical-first is chosen at random. Lateral
        drift along the way is undone by a final settling leg, so the last
        waypoint is always the target.
        """
        x, y = start
        tx, ty = end
        waypoints = [Waypoint(x, y, width)]

        if self.rng.next_float() > 0.5:
            x, y = self._walk_leg(waypoints, x, y, tx, horizontal=True, width=width)
            x, y = self._walk_leg(waypoints, x, y, ty, horizontal=False, width=width)
        else:
            x, y = self._walk_leg(waypoints, x, y, ty, horizontal=False, width=width)
            x, y = self._walk_leg(waypoints, x, y, tx, horizontal=True, width=width)

        # Settle any lateral drift left by the last leg
        x, y = self._walk_leg(waypoints, x, y, tx, horizontal=True, width=width, wander=False)
        self._walk_leg(waypoints, x, y, ty, horizontal=False, width=width, wander=False)
        return waypoints

    def _walk_leg(
        self,
        waypoints: List[Waypoint],
        x: int,
        y: int,
        target: int,
        horizontal: bool,
        width: int,
        wander: bool = True,
    ) -> Point:
        tuning = self.tuning
        primary, lateral = (x, y) if horizontal else (y, x)
        lateral_limit = self.map_height if horizontal else self.map_width
        low, high = sorted((primary, target))
        step = 1 if target > primary else -1

        def emit(p: int, l: int, w: int) -> None:
            wx, wy = (p, l) if horizontal else (l, p)
            waypoints.append(Waypoint(wx, wy, w))

        while primary != target:
            primary += step
            if (
                wander
                and low < primary < high - 1
                and (primary - low) % tuning.corridor_wander_interval == 0
                and self.rng.next_float() < tuning.corridor_wander_chance
            ):
                drift = 1 if self.rng.next_bool() else -1
                shifted = min(max(lateral + drift, 0), lateral_limit - 1)
                if shifted != lateral:
                    emit(primary, lateral, width)
                    lateral = shifted
            emit(primary, lateral, self._vary_width(width, tuning.corridor_width_variation_chance))

        return (primary, lateral) if horizontal else (lateral, primary)
