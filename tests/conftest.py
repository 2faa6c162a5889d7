"""
Map Forge - Test Configuration and Fixtures
Shared test utilities and fixtures for pytest.
"""
import pytest
from typing import Dict, List, Set, Tuple
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mapforge.core.map_generation import (
    GenerationOptions,
    MapGenerator,
    Position,
    SeededRNG,
    ShapeGenerator,
    Size,
    Space,
    TerrainArchetype,
)
from mapforge.core.map_generation.edges import rasterize_shape


# ==================== Helpers ====================

def make_room(space_id: str, x: int, y: int, width: int, height: int,
              doors: Tuple[Tuple[int, int], ...] = (), map_size: int = 100) -> Space:
    """Build a rectangular space directly, bypassing the layout planner."""
    shape = ShapeGenerator(SeededRNG("fixture")).rectangle(width, height, Position(x, y))
    return Space(
        id=space_id,
        kind="chamber",
        shape=shape,
        position=Position(x, y),
        size=Size(width, height),
        doors=tuple(Position(dx, dy) for dx, dy in doors),
        cells=rasterize_shape(shape, map_size, map_size),
    )


def connected_components(space_ids: List[str], edges: List[Tuple[str, str]]) -> int:
    """Union-find component count over space ids."""
    parent: Dict[str, str] = {space_id: space_id for space_id in space_ids}

    def find(node: str) -> str:
        while parent[node] != node:
            parent[node] = parent[parent[node]]
            node = parent[node]
        return node

    for a, b in edges:
        parent[find(a)] = find(b)

    return len({find(space_id) for space_id in space_ids})


def is_four_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


# ==================== Fixtures ====================

@pytest.fixture
def generator() -> MapGenerator:
    """Generator with default tuning."""
    return MapGenerator()


@pytest.fixture
def dungeon_options() -> GenerationOptions:
    """Medium dungeon used across generator tests."""
    return GenerationOptions(
        width=40,
        height=40,
        archetype=TerrainArchetype.DUNGEON,
        space_count=6,
        min_space_size=4,
        max_space_size=8,
        organic_factor=0.3,
        object_density=0.5,
        seed="test-1",
    )


@pytest.fixture
def options_factory():
    """Build options for any archetype with small, fast defaults."""
    def _make(archetype: TerrainArchetype, seed: str = "fixture-seed", **overrides) -> GenerationOptions:
        values = {
            "width": 48,
            "height": 48,
            "archetype": archetype,
            "space_count": 5,
            "min_space_size": 5,
            "max_space_size": 9,
            "organic_factor": 0.5,
            "object_density": 0.3,
            "seed": seed,
        }
        values.update(overrides)
        return GenerationOptions(**values)
    return _make


@pytest.fixture
def dungeon_document(generator, dungeon_options):
    """A generated dungeon document."""
    return generator.generate(dungeon_options)
