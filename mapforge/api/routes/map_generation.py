"""
Map Generation API Routes.

Thin request/response layer over the procedural map generator. Domain
validation happens in the generator; errors surface through the
registered MapForgeError handlers.
"""
import logging

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional, Union

from mapforge.config import get_settings
from mapforge.core.map_generation import (
    AssetGenerationContext,
    GenerationOptions,
    MapDocument,
    MapGenerator,
    Size,
    get_preset,
    list_presets,
)
from mapforge.core.map_generation.archetypes import archetype_summary

logger = logging.getLogger("mapforge.api")

router = APIRouter(prefix="/maps", tags=["map_generation"])

# Schema limits follow the generator's validation limits
MAX_DIMENSION = get_settings().MAX_MAP_DIMENSION
MAX_SPACES = get_settings().MAX_SPACE_COUNT


def get_generator() -> MapGenerator:
    """Generator configured from the cached settings."""
    return MapGenerator.from_settings(get_settings())


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class GenerateMapRequest(BaseModel):
    """Request to generate a map."""
    width: int = Field(default=40, ge=1, le=MAX_DIMENSION, description="Map width in cells")
    height: int = Field(default=40, ge=1, le=MAX_DIMENSION, description="Map height in cells")
    archetype: str = Field(default="dungeon", description="house, forest, cave, town or dungeon")
    space_count: int = Field(default=6, ge=1, le=MAX_SPACES, description="Number of spaces to attempt")
    min_space_size: int = Field(default=4, ge=1, description="Minimum space size in cells")
    max_space_size: int = Field(default=10, ge=1, description="Maximum space size in cells")
    organic_factor: float = Field(default=0.3, ge=0.0, le=1.0, description="Outline roughness")
    object_density: float = Field(default=0.5, ge=0.0, le=1.0, description="Asset density")
    seed: Optional[Union[int, str]] = Field(default=None, description="Random seed")
    difficulty: int = Field(default=5, ge=1, le=10, description="Encounter difficulty")
    required_features: List[str] = Field(default_factory=list, description="Features that must appear")
    extra_connection_factor: float = Field(default=0.0, ge=0.0, le=1.0, description="Extra loop paths")
    name: Optional[str] = Field(default=None, description="Map name override")


class PlaceAssetsRequest(BaseModel):
    """Request to generate and place assets."""
    width: int = Field(ge=1, le=MAX_DIMENSION)
    height: int = Field(ge=1, le=MAX_DIMENSION)
    theme: str = Field(default="dungeon")
    difficulty: int = Field(default=5, ge=1, le=10)
    required_features: List[str] = Field(default_factory=list)
    object_density: float = Field(default=1.0, ge=0.0, le=1.0)
    mood: str = Field(default="neutral", description="peaceful, calm, hostile or menacing narrow the creature pool")
    terrain_types: List[str] = Field(default_factory=list, description="wall, floor or door hints for the open field")
    seed: Optional[Union[int, str]] = None
    layout: Optional[Dict[str, Any]] = Field(default=None, description="A generated map document to place into")


class PresetRequest(BaseModel):
    """Optional overrides when generating from a preset."""
    seed: Optional[Union[int, str]] = None
    name: Optional[str] = None


class MapResponse(BaseModel):
    """Response containing generated map data."""
    success: bool
    map: Dict[str, Any]
    message: str = ""


class PlacementResponse(BaseModel):
    """Response containing placed assets."""
    success: bool
    placements: List[Dict[str, Any]]
    message: str = ""


class ArchetypesResponse(BaseModel):
    """Response listing available archetypes."""
    success: bool
    archetypes: List[Dict[str, Any]]


class PresetsResponse(BaseModel):
    """Response listing available presets."""
    success: bool
    presets: List[Dict[str, Any]]


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/generate", response_model=MapResponse)
async def generate_map(request: GenerateMapRequest):
    """
    Generate a procedural map.

    Lays out spaces for the archetype, connects them, places assets and
    returns the layered map document. The same seed and parameters
    always return the same document.
    """
    options = GenerationOptions.from_dict(request.model_dump())
    document = get_generator().generate(options)

    return MapResponse(
        success=True,
        map=document.to_dict(),
        message=f"Generated {options.archetype.value} map '{document.metadata.name}' "
                f"with {len(document.spaces)} spaces"
    )


@router.get("/generate", response_model=MapResponse)
async def generate_map_get(
    width: int = Query(default=40, ge=1, le=MAX_DIMENSION),
    height: int = Query(default=40, ge=1, le=MAX_DIMENSION),
    archetype: str = Query(default="dungeon"),
    space_count: int = Query(default=6, ge=1, le=MAX_SPACES),
    min_space_size: int = Query(default=4, ge=1),
    max_space_size: int = Query(default=10, ge=1),
    organic_factor: float = Query(default=0.3, ge=0.0, le=1.0),
    object_density: float = Query(default=0.5, ge=0.0, le=1.0),
    seed: Optional[str] = Query(default=None),
    difficulty: int = Query(default=5, ge=1, le=10),
):
    """
    Generate a procedural map (GET version for convenience).
    """
    request = GenerateMapRequest(
        width=width,
        height=height,
        archetype=archetype,
        space_count=space_count,
        min_space_size=min_space_size,
        max_space_size=max_space_size,
        organic_factor=organic_factor,
        object_density=object_density,
        seed=seed,
        difficulty=difficulty,
    )
    return await generate_map(request)


@router.post("/place-assets", response_model=PlacementResponse)
async def place_map_assets(request: PlaceAssetsRequest):
    """
    Generate assets for a theme and place them.

    With a ``layout`` document the assets go into its space interiors;
    without one the whole map is treated as open floor.
    """
    context = AssetGenerationContext(
        theme=request.theme,
        difficulty=request.difficulty,
        required_features=tuple(request.required_features),
        object_density=request.object_density,
        mood=request.mood,
        terrain_types=tuple(request.terrain_types),
    )
    layout = MapDocument.from_dict(request.layout) if request.layout else None

    placed = get_generator().place_assets(
        context,
        Size(request.width, request.height),
        existing_layout=layout,
        seed=request.seed,
    )

    return PlacementResponse(
        success=True,
        placements=[p.to_dict() for p in placed],
        message=f"Placed {len(placed)} assets"
    )


@router.get("/archetypes", response_model=ArchetypesResponse)
async def list_archetypes():
    """
    List all terrain archetypes.

    Each archetype has its own space shapes, space kinds and path style.
    """
    return ArchetypesResponse(
        success=True,
        archetypes=archetype_summary()
    )


@router.get("/presets", response_model=PresetsResponse)
async def list_map_presets():
    """List named generation presets."""
    return PresetsResponse(
        success=True,
        presets=[preset.to_dict() for preset in list_presets()]
    )


@router.post("/presets/{preset_name}", response_model=MapResponse)
async def generate_from_preset(preset_name: str, request: Optional[PresetRequest] = None):
    """Generate a map from a named preset."""
    request = request or PresetRequest()
    preset = get_preset(preset_name)
    document = get_generator().generate(preset.to_options(seed=request.seed, name=request.name))

    logger.info(f"Generated map from preset '{preset.name}'")
    return MapResponse(
        success=True,
        map=document.to_dict(),
        message=f"Generated '{document.metadata.name}' from preset '{preset.name}'"
    )
