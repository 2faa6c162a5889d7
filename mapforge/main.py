"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from mapforge.config import get_settings
from mapforge.middleware.error_handler import setup_error_handlers

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("mapforge.api")

app = FastAPI(
    title="Map Forge",
    description="Procedural tabletop map generation: layouts, corridors, layers and asset placement",
    version="0.1.0",
)


# Middleware to log all requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.debug(f"[REQUEST] {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"[RESPONSE] {request.method} {request.url.path} -> {response.status_code}")
    return response

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",  # Vite
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Structured error handlers
setup_error_handlers(app, debug=settings.DEBUG)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "online", "service": "Map Forge", "version": "0.1.0"}


@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "debug_mode": settings.DEBUG,
        "max_map_dimension": settings.MAX_MAP_DIMENSION,
    }


# Routes
from mapforge.api.routes import map_generation
app.include_router(map_generation.router, prefix="/api", tags=["map_generation"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("mapforge.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
