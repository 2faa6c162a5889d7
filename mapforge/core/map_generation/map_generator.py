"""
Map generator.

Ties the pipeline together: validate options, seed one RNG, pick the
archetype strategy and palette, lay out spaces, connect them, furnish them
and assemble the layered MapDocument.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence, Tuple, Union
import json
import logging
import uuid

from mapforge.core.errors import InvalidMapParametersError, MapForgeError, MapGenerationError
from .archetypes import (
    TerrainArchetype,
    generate_map_name,
    minimum_margin,
    resolve_strategy,
    select_color_theme,
)
from .assets import AssetGenerationContext, AssetPlacementEngine, PlacedAsset, PlacementSubstrate
from .connectivity import ConnectivityPlanner
from .document import GridConfig, MapDocument, MapMetadata
from .geometry import Size
from .layers import LayerAssembler
from .layout import SpaceLayoutPlanner, Space
from .rng import Seed, SeededRNG
from .tuning import GenerationTuning

logger = logging.getLogger("mapforge.generator")

MAP_ID_NAMESPACE = uuid.UUID("6f1c3f0e-4d7a-5b1e-9a52-7c3e2d9b8a10")


def new_seed() -> str:
    """Fresh 12-hex-digit seed for callers that did not supply one."""
    return uuid.uuid4().hex[:12]


def derive_seed(base_seed: Seed, poi_id: str) -> str:
    """Per-location seed within a campaign: ``"<seed>-<poi id>"``."""
    return f"{base_seed}-{poi_id}"


@dataclass
class GenerationOptions:
    """Parameters for one generated map."""
    width: int
    height: int
    archetype: TerrainArchetype
    space_count: int
    min_space_size: int
    max_space_size: int
    organic_factor: float = 0.0
    object_density: float = 0.5
    seed: Optional[Seed] = None
    difficulty: int = 5
    required_features: Tuple[str, ...] = ()
    extra_connection_factor: float = 0.0
    name: Optional[str] = None

    def parameters(self) -> Dict[str, Any]:
        """Generation parameters without the seed, as stored in metadata."""
        return {
            "width": self.width,
            "height": self.height,
            "archetype": self.archetype.value,
            "space_count": self.space_count,
            "min_space_size": self.min_space_size,
            "max_space_size": self.max_space_size,
            "organic_factor": self.organic_factor,
            "object_density": self.object_density,
            "difficulty": self.difficulty,
            "required_features": list(self.required_features),
            "extra_connection_factor": self.extra_connection_factor,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.parameters()
        data["seed"] = self.seed
        data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationOptions":
        """
        Create options from a dictionary.

        Raises:
            InvalidMapParametersError: If a required field is missing or the
                archetype is unknown
        """
        try:
            archetype = TerrainArchetype(str(data["archetype"]).lower())
        except KeyError:
            raise InvalidMapParametersError("archetype", "archetype is required")
        except ValueError:
            valid = ", ".join(a.value for a in TerrainArchetype)
            raise InvalidMapParametersError(
                "archetype", f"Unknown archetype; expected one of: {valid}", data.get("archetype")
            )

        missing = [
            key for key in ("width", "height", "space_count", "min_space_size", "max_space_size")
            if key not in data
        ]
        if missing:
            raise InvalidMapParametersError(missing[0], f"{missing[0]} is required")

        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            archetype=archetype,
            space_count=int(data["space_count"]),
            min_space_size=int(data["min_space_size"]),
            max_space_size=int(data["max_space_size"]),
            organic_factor=float(data.get("organic_factor", 0.0)),
            object_density=float(data.get("object_density", 0.5)),
            seed=data.get("seed"),
            difficulty=int(data.get("difficulty", 5)),
            required_features=tuple(data.get("required_features") or ()),
            extra_connection_factor=float(data.get("extra_connection_factor", 0.0)),
            name=data.get("name"),
        )


def validate_options(options: GenerationOptions, tuning: GenerationTuning) -> None:
    """
    Reject impossible or out-of-range options.

    Raises:
        InvalidMapParametersError: On the first failing field
    """
    for name in ("width", "height", "space_count", "min_space_size", "max_space_size"):
        value = getattr(options, name)
        if value <= 0:
            raise InvalidMapParametersError(name, f"{name} must be positive", value)

    for name in ("width", "height"):
        value = getattr(options, name)
        if value > tuning.max_map_dimension:
            raise InvalidMapParametersError(
                name, f"{name} must be at most {tuning.max_map_dimension}", value
            )

    if options.space_count > tuning.max_space_count:
        raise InvalidMapParametersError(
            "space_count", f"space_count must be at most {tuning.max_space_count}", options.space_count
        )

    if options.min_space_size > options.max_space_size:
        raise InvalidMapParametersError(
            "min_space_size",
            "min_space_size must not exceed max_space_size",
            options.min_space_size,
        )

    for name in ("organic_factor", "object_density", "extra_connection_factor"):
        value = getattr(options, name)
        if not 0.0 <= value <= 1.0:
            raise InvalidMapParametersError(name, f"{name} must be between 0 and 1", value)

    if not 1 <= options.difficulty <= 10:
        raise InvalidMapParametersError("difficulty", "difficulty must be between 1 and 10", options.difficulty)

    needed = options.min_space_size + 2 * minimum_margin(options.archetype)
    if needed > options.width or needed > options.height:
        raise InvalidMapParametersError(
            "min_space_size",
            f"A {options.min_space_size}-cell space plus margins needs a {needed}x{needed} map, "
            f"got {options.width}x{options.height}",
            options.min_space_size,
        )


def validate_placement(context: AssetGenerationContext, map_size: Size, tuning: GenerationTuning) -> None:
    """
    Reject out-of-range asset placement requests.

    Raises:
        InvalidMapParametersError: On the first failing field
    """
    for name, value in (("width", map_size.width), ("height", map_size.height)):
        if value <= 0:
            raise InvalidMapParametersError(name, f"{name} must be positive", value)
        if value > tuning.max_map_dimension:
            raise InvalidMapParametersError(
                name, f"{name} must be at most {tuning.max_map_dimension}", value
            )

    if not 1 <= context.difficulty <= 10:
        raise InvalidMapParametersError("difficulty", "difficulty must be between 1 and 10", context.difficulty)

    if not 0.0 <= context.object_density <= 1.0:
        raise InvalidMapParametersError(
            "object_density", "object_density must be between 0 and 1", context.object_density
        )


def map_id_for(seed: str, options: GenerationOptions) -> str:
    """Stable map id derived from the seed and parameters."""
    key = json.dumps({"seed": seed, "parameters": options.parameters()}, sort_keys=True)
    return str(uuid.uuid5(MAP_ID_NAMESPACE, key))


class MapGenerator:
    """
    Procedural map generator.

    One instance can serve many calls; every call builds its own RNG, so
    concurrent calls on separate threads do not interfere.
    """

    def __init__(
        self,
        tuning: Optional[GenerationTuning] = None,
        cell_size: int = 32,
        batch_workers: int = 4,
    ):
        self.tuning = tuning or GenerationTuning()
        self.cell_size = cell_size
        self.batch_workers = batch_workers

    @classmethod
    def from_settings(cls, settings: Optional[Any] = None) -> "MapGenerator":
        """Build a generator from application settings."""
        if settings is None:
            from mapforge.config import get_settings
            settings = get_settings()
        return cls(
            tuning=GenerationTuning.from_settings(settings),
            cell_size=settings.GRID_CELL_SIZE,
            batch_workers=settings.BATCH_MAX_WORKERS,
        )

    def generate(self, options: GenerationOptions) -> MapDocument:
        """
        Generate a complete map.

        Args:
            options: Generation options; a missing seed is replaced by a
                fresh token recorded in the document

        Returns:
            MapDocument with background, terrain, paths, objects and grid layers

        Raises:
            InvalidMapParametersError: If options fail validation
            MapGenerationError: If the pipeline fails unexpectedly
        """
        validate_options(options, self.tuning)
        seed = str(options.seed) if options.seed is not None else new_seed()

        try:
            document = self._run(options, seed)
        except MapForgeError:
            raise
        except Exception as e:
            logger.error(f"Map generation failed for seed '{seed}': {e}", exc_info=True)
            raise MapGenerationError(
                reason=f"Map generation failed: {e}",
                details={"seed": seed, "archetype": options.archetype.value},
            ) from e

        logger.info(
            f"Generated {options.archetype.value} '{document.metadata.name}': "
            f"{len(document.spaces)} spaces, {len(document.paths)} paths, "
            f"{len(document.get_objects())} objects (seed={seed})"
        )
        return document

    def _run(self, options: GenerationOptions, seed: str) -> MapDocument:
        rng = SeededRNG(seed)
        width, height = options.width, options.height

        strategy = resolve_strategy(options.archetype, rng)
        theme = select_color_theme(options.archetype, rng)
        name = generate_map_name(options.archetype, rng, options.name)

        spaces = SpaceLayoutPlanner(rng, width, height, strategy, self.tuning).plan(
            options.space_count,
            options.min_space_size,
            options.max_space_size,
            options.organic_factor,
        )
        paths = ConnectivityPlanner(rng, width, height, strategy, self.tuning).connect(
            spaces, options.extra_connection_factor
        )

        engine = AssetPlacementEngine(rng, self.tuning)
        context = AssetGenerationContext(
            theme=options.archetype.value,
            difficulty=options.difficulty,
            required_features=tuple(options.required_features),
            object_density=options.object_density,
        )
        assets = engine.generate_assets(context, Size(width, height))
        placed = engine.place(assets, PlacementSubstrate.from_spaces(spaces, width, height))

        assembler = LayerAssembler(width, height, theme, self.cell_size)
        layers = assembler.assemble(
            spaces,
            paths,
            [p.to_map_object() for p in placed],
            strategy.grid_opacity,
        )

        metadata = MapMetadata(
            id=map_id_for(seed, options),
            name=name,
            archetype=options.archetype.value,
            seed=seed,
            tags=[options.archetype.value, strategy.shape_type.value, strategy.path_style.value],
            theme=theme,
            parameters=options.parameters(),
        )
        return MapDocument(
            metadata=metadata,
            dimensions=Size(width, height),
            grid_config=GridConfig(cell_size=self.cell_size),
            layers=layers,
            background_color=theme.background_color,
            spaces=list(spaces),
            paths=list(paths),
        )

    def place_assets(
        self,
        context: AssetGenerationContext,
        map_size: Size,
        existing_layout: Optional[Union[Sequence[Space], MapDocument]] = None,
        seed: Optional[Seed] = None,
    ) -> List[PlacedAsset]:
        """
        Generate and place assets for a context.

        Args:
            context: Theme, difficulty, required features and density
            map_size: Map dimensions in cells
            existing_layout: Spaces (or a whole document) to place into;
                without one the whole map is a single open region shaped
                by ``context.terrain_types``
            seed: Seed for the placement RNG

        Returns:
            Placed assets in placement order

        Raises:
            InvalidMapParametersError: If the map size, difficulty or density
                is out of range
        """
        validate_placement(context, map_size, self.tuning)

        if isinstance(existing_layout, MapDocument):
            spaces: Optional[Sequence[Space]] = existing_layout.spaces
        else:
            spaces = existing_layout

        rng = SeededRNG(seed if seed is not None else new_seed())
        engine = AssetPlacementEngine(rng, self.tuning)
        assets = engine.generate_assets(context, map_size)

        if spaces:
            substrate = PlacementSubstrate.from_spaces(spaces, map_size.width, map_size.height)
        else:
            substrate = PlacementSubstrate.open_field(map_size.width, map_size.height, context.terrain_types)

        placed = engine.place(assets, substrate)
        logger.info(f"Placed {len(placed)}/{len(assets)} assets for theme '{context.theme}'")
        return placed

    def generate_batch(
        self,
        options_list: Sequence[GenerationOptions],
        max_workers: Optional[int] = None,
    ) -> List[MapDocument]:
        """
        Generate several independent maps concurrently.

        Results keep the order of ``options_list``. The first failure is
        raised once all submitted work has finished. ``max_workers``
        defaults to the generator's ``batch_workers``.
        """
        if not options_list:
            return []
        workers = max_workers if max_workers is not None else self.batch_workers
        with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
            documents = list(executor.map(self.generate, options_list))
        logger.info(f"Generated batch of {len(documents)} maps")
        return documents


# =============================================================================
# MODULE-LEVEL API
# =============================================================================

def generate(options: GenerationOptions, tuning: Optional[GenerationTuning] = None) -> MapDocument:
    """Generate one map with default (or given) tuning."""
    return MapGenerator(tuning).generate(options)


def place_assets(
    context: AssetGenerationContext,
    map_size: Size,
    existing_layout: Optional[Union[Sequence[Space], MapDocument]] = None,
    seed: Optional[Seed] = None,
    tuning: Optional[GenerationTuning] = None,
) -> List[PlacedAsset]:
    """Generate and place assets with default (or given) tuning."""
    return MapGenerator(tuning).place_assets(context, map_size, existing_layout, seed)


def generate_batch(
    options_list: Sequence[GenerationOptions],
    max_workers: Optional[int] = None,
    tuning: Optional[GenerationTuning] = None,
) -> List[MapDocument]:
    """Generate several maps concurrently, preserving input order."""
    if max_workers is None:
        from mapforge.config import get_settings
        max_workers = get_settings().BATCH_MAX_WORKERS
    return MapGenerator(tuning).generate_batch(options_list, max_workers)
