"""Tests for connectivity planning."""
import pytest

from mapforge.core.map_generation.archetypes import STRATEGIES, PathStyle, TerrainArchetype
from mapforge.core.map_generation.connectivity import (
    ConnectivityPlanner,
    PathSegment,
    minimum_spanning_tree,
)
from mapforge.core.map_generation.rng import SeededRNG

from conftest import make_room, connected_components, is_four_adjacent


def planner(archetype=TerrainArchetype.HOUSE, seed="paths", size=40):
    return ConnectivityPlanner(SeededRNG(seed), size, size, STRATEGIES[archetype])


@pytest.fixture
def row_of_rooms():
    """Three rooms in a row, ten cells apart."""
    return [
        make_room("room_0", 0, 0, 4, 4, doors=((3, 2),)),
        make_room("room_1", 10, 0, 4, 4, doors=((10, 2),)),
        make_room("room_2", 20, 0, 4, 4, doors=((20, 2),)),
    ]


class TestMinimumSpanningTree:
    """Tests for Prim's algorithm over space centres."""

    def test_row_is_chained(self, row_of_rooms):
        assert minimum_spanning_tree(row_of_rooms) == [(0, 1), (1, 2)]

    def test_ties_keep_first_pair(self):
        """Equal distances resolve to the first pair scanned."""
        spaces = [
            make_room("a", 0, 0, 4, 4),
            make_room("b", 10, 0, 4, 4),
            make_room("c", 0, 10, 4, 4),
        ]
        assert minimum_spanning_tree(spaces) == [(0, 1), (0, 2)]

    def test_edge_count(self):
        spaces = [make_room(f"r{i}", (i % 3) * 12, (i // 3) * 12, 4, 4) for i in range(7)]
        assert len(minimum_spanning_tree(spaces)) == 6

    def test_too_few_spaces(self):
        assert minimum_spanning_tree([]) == []
        assert minimum_spanning_tree([make_room("solo", 0, 0, 4, 4)]) == []


class TestConnect:
    """Tests for turning tree edges into path segments."""

    def test_no_paths_for_single_space(self):
        assert planner().connect([make_room("solo", 5, 5, 4, 4)]) == []

    def test_segments_link_every_space(self, row_of_rooms):
        segments = planner().connect(row_of_rooms)
        ids = [s.id for s in row_of_rooms]
        assert len(segments) == 2
        assert connected_components(ids, [(p.from_space, p.to_space) for p in segments]) == 1

    def test_nearest_door_endpoints(self, row_of_rooms):
        start, end = ConnectivityPlanner.nearest_endpoints(row_of_rooms[0], row_of_rooms[1])
        assert start == (3, 2)
        assert end == (10, 2)

    def test_centres_count_in_organic_mode(self):
        """Organic paths may start from a space centre."""
        a = make_room("a", 0, 0, 6, 6, doors=((0, 3),))
        b = make_room("b", 20, 0, 6, 6, doors=((25, 3),))
        start, end = ConnectivityPlanner.nearest_endpoints(a, b, include_centers=True)
        assert start == (3, 3)
        assert end == (23, 3)

    def test_path_style_follows_archetype(self, row_of_rooms):
        corridors = planner(TerrainArchetype.TOWN).connect(row_of_rooms)
        trails = planner(TerrainArchetype.FOREST).connect(row_of_rooms)
        assert all(p.style == PathStyle.CORRIDOR for p in corridors)
        assert all(p.style == PathStyle.ORGANIC for p in trails)

    def test_extra_connections_add_loops(self):
        """Extra connections never duplicate an existing pair."""
        spaces = [make_room(f"r{i}", (i % 3) * 12, (i // 3) * 12, 4, 4, doors=(((i % 3) * 12, (i // 3) * 12),))
                  for i in range(6)]
        segments = planner(seed="loops").connect(spaces, extra_connection_factor=0.5)
        pairs = [frozenset((p.from_space, p.to_space)) for p in segments]
        assert 5 <= len(segments) <= 8
        assert len(pairs) == len(set(pairs))

    def test_segment_dict_round_trip(self, row_of_rooms):
        for segment in planner().connect(row_of_rooms):
            assert PathSegment.from_dict(segment.to_dict()) == segment


class TestCorridorPath:
    """Tests for corridor waypoints."""

    @pytest.mark.parametrize("seed", ["c1", "c2", "c3", "c4", "c5", "c6"])
    def test_corridor_is_contiguous(self, seed):
        """Consecutive corridor waypoints are 4-adjacent and the walk ends on target."""
        waypoints = planner(seed=seed).corridor_path((3, 2), (30, 25), 2)
        cells = [(w.x, w.y) for w in waypoints]
        assert cells[0] == (3, 2)
        assert cells[-1] == (30, 25)
        for a, b in zip(cells, cells[1:]):
            assert is_four_adjacent(a, b)

    def test_corridor_widths_positive(self):
        waypoints = planner(seed="widths").corridor_path((0, 0), (35, 35), 1)
        assert all(w.width >= 1 for w in waypoints)

    def test_corridor_stays_in_map(self):
        waypoints = planner(seed="edge", size=30).corridor_path((0, 0), (29, 0), 2)
        assert all(0 <= w.x < 30 and 0 <= w.y < 30 for w in waypoints)

    def test_zero_length_corridor(self):
        waypoints = planner().corridor_path((5, 5), (5, 5), 2)
        assert [(w.x, w.y) for w in waypoints] == [(5, 5)]


class TestOrganicPath:
    """Tests for curved trails."""

    @pytest.mark.parametrize("seed", ["t1", "t2", "t3"])
    def test_endpoints_and_bounds(self, seed):
        waypoints = planner(TerrainArchetype.FOREST, seed=seed).organic_path((2, 2), (35, 30), 1)
        assert (waypoints[0].x, waypoints[0].y) == (2, 2)
        assert (waypoints[-1].x, waypoints[-1].y) == (35, 30)
        assert all(0 <= w.x < 40 and 0 <= w.y < 40 for w in waypoints)
        assert all(w.width >= 1 for w in waypoints)

    def test_minimum_segment_count(self):
        """Short trails still get at least eight segments' worth of control points."""
        waypoints = planner(TerrainArchetype.CAVE, seed="short").organic_path((10, 10), (30, 10), 2)
        assert len(waypoints) >= 3
