"""
Tunable constants for map generation.

These are aesthetic knobs (corridor wander, width jitter, curve wobble)
rather than correctness requirements. Defaults reproduce the classic look;
every field can be overridden through a ``MAPGEN_<FIELD>`` environment
variable.
"""
from dataclasses import dataclass, fields
from typing import Dict, Any, Optional
import os


def _coerce(name: str, default: Any, value: Any) -> Any:
    """Convert a raw value (often an environment string) to the type of ``default``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid tuning value for {name}: {value!r} is not a number") from None
    if isinstance(default, int):
        if not number.is_integer():
            raise ValueError(f"Invalid tuning value for {name}: {value!r} is not a whole number")
        return int(number)
    return number


@dataclass(frozen=True)
class GenerationTuning:
    """Tuning values shared by layout, connectivity and placement."""
    # Layout
    placement_attempts: int = 50

    # Corridor mode (house, town, dungeon)
    corridor_wander_chance: float = 0.3
    corridor_wander_interval: int = 3
    corridor_width_variation_chance: float = 0.2

    # Organic mode (forest, cave)
    organic_width_variation_chance: float = 0.3
    organic_wobble: float = 1.0
    organic_midpoint_offset: float = 0.3
    organic_min_segments: int = 8
    organic_segment_spacing: int = 3

    # Asset placement
    max_assets_per_category: int = 60

    # Validation limits
    max_map_dimension: int = 256
    max_space_count: int = 64

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationTuning":
        """
        Create tuning from a dictionary, ignoring unknown keys.

        Raises:
            ValueError: If a value cannot be read as its field's type
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                continue
            values[key] = _coerce(key, getattr(cls, key), value)
        return cls(**values)

    @classmethod
    def from_settings(cls, settings: Optional[Any] = None) -> "GenerationTuning":
        """
        Build tuning from application settings and MAPGEN_* overrides.

        Args:
            settings: Settings instance (defaults to the cached settings)

        Returns:
            GenerationTuning with environment overrides applied
        """
        if settings is None:
            from mapforge.config import get_settings
            settings = get_settings()

        data: Dict[str, Any] = {
            "placement_attempts": settings.PLACEMENT_ATTEMPTS,
            "max_assets_per_category": settings.MAX_ASSETS_PER_CATEGORY,
            "max_map_dimension": settings.MAX_MAP_DIMENSION,
            "max_space_count": settings.MAX_SPACE_COUNT,
        }
        for f in fields(cls):
            env_value = os.getenv(f"MAPGEN_{f.name.upper()}")
            if env_value is not None:
                data[f.name] = env_value
        return cls.from_dict(data)
