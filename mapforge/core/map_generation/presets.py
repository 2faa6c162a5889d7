"""
Named generation presets.

Ready-made parameter sets for common map types. A preset becomes
GenerationOptions with an optional seed and name on top.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from mapforge.core.errors import PresetNotFoundError
from .archetypes import TerrainArchetype
from .map_generator import GenerationOptions
from .rng import Seed


@dataclass(frozen=True)
class Preset:
    """A named set of generation parameters."""
    name: str
    archetype: TerrainArchetype
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_options(self, seed: Optional[Seed] = None, name: Optional[str] = None) -> GenerationOptions:
        """Build generation options from this preset."""
        data = dict(self.parameters)
        data["archetype"] = self.archetype.value
        data["seed"] = seed
        data["name"] = name
        return GenerationOptions.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "archetype": self.archetype.value,
            "description": self.description,
            "parameters": dict(self.parameters),
        }


PRESETS: List[Preset] = [
    Preset(
        name="Small House",
        archetype=TerrainArchetype.HOUSE,
        description="A modest home with a handful of rooms",
        parameters={
            "width": 60, "height": 60,
            "space_count": 5, "min_space_size": 4, "max_space_size": 8,
            "object_density": 0.4,
        },
    ),
    Preset(
        name="Large Manor",
        archetype=TerrainArchetype.HOUSE,
        description="A sprawling estate of many rooms",
        parameters={
            "width": 100, "height": 100,
            "space_count": 12, "min_space_size": 6, "max_space_size": 15,
            "object_density": 0.5,
        },
    ),
    Preset(
        name="Small Dungeon",
        archetype=TerrainArchetype.DUNGEON,
        description="A compact dungeon crawl",
        parameters={
            "width": 80, "height": 80,
            "space_count": 8, "min_space_size": 5, "max_space_size": 10,
            "organic_factor": 0.2, "extra_connection_factor": 0.1,
            "difficulty": 4,
        },
    ),
    Preset(
        name="Large Dungeon",
        archetype=TerrainArchetype.DUNGEON,
        description="A deep dungeon with looping passages",
        parameters={
            "width": 120, "height": 120,
            "space_count": 15, "min_space_size": 6, "max_space_size": 14,
            "organic_factor": 0.4, "extra_connection_factor": 0.2,
            "difficulty": 7,
        },
    ),
    Preset(
        name="Winding Dungeon",
        archetype=TerrainArchetype.DUNGEON,
        description="Twisting chambers joined by many corridors",
        parameters={
            "width": 100, "height": 100,
            "space_count": 12, "min_space_size": 5, "max_space_size": 12,
            "organic_factor": 0.5, "extra_connection_factor": 0.25,
            "difficulty": 6,
        },
    ),
    Preset(
        name="Forest Glade",
        archetype=TerrainArchetype.FOREST,
        description="Clearings joined by winding trails",
        parameters={
            "width": 100, "height": 100,
            "space_count": 5, "min_space_size": 6, "max_space_size": 12,
            "organic_factor": 0.6, "object_density": 0.3,
            "difficulty": 3,
        },
    ),
    Preset(
        name="Cave Network",
        archetype=TerrainArchetype.CAVE,
        description="Rough caverns linked by narrow tunnels",
        parameters={
            "width": 80, "height": 80,
            "space_count": 6, "min_space_size": 6, "max_space_size": 12,
            "organic_factor": 0.8,
            "difficulty": 5,
        },
    ),
    Preset(
        name="Market Town",
        archetype=TerrainArchetype.TOWN,
        description="Shops and homes around busy streets",
        parameters={
            "width": 100, "height": 100,
            "space_count": 10, "min_space_size": 5, "max_space_size": 10,
            "object_density": 0.4,
            "difficulty": 2,
        },
    ),
]

_PRESETS_BY_NAME = {preset.name.lower(): preset for preset in PRESETS}


def list_presets(archetype: Optional[TerrainArchetype] = None) -> List[Preset]:
    """All presets, optionally filtered by archetype."""
    if archetype is None:
        return list(PRESETS)
    return [preset for preset in PRESETS if preset.archetype == archetype]


def get_preset(name: str) -> Preset:
    """
    Look up a preset by name (case-insensitive).

    Raises:
        PresetNotFoundError: If no preset has that name
    """
    preset = _PRESETS_BY_NAME.get(name.strip().lower())
    if preset is None:
        raise PresetNotFoundError(name)
    return preset
