"""Application configuration using environment variables."""
import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS - Frontend URL
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Map document defaults
    GRID_CELL_SIZE: int = int(os.getenv("GRID_CELL_SIZE", "32"))  # pixels per grid square

    # Generation limits (callers needing bounded latency cap here)
    MAX_MAP_DIMENSION: int = int(os.getenv("MAX_MAP_DIMENSION", "256"))
    MAX_SPACE_COUNT: int = int(os.getenv("MAX_SPACE_COUNT", "64"))
    PLACEMENT_ATTEMPTS: int = int(os.getenv("PLACEMENT_ATTEMPTS", "50"))
    MAX_ASSETS_PER_CATEGORY: int = int(os.getenv("MAX_ASSETS_PER_CATEGORY", "60"))

    # Batch generation
    BATCH_MAX_WORKERS: int = int(os.getenv("BATCH_MAX_WORKERS", "4"))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
