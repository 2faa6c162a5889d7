"""Middleware package for the Map Forge API."""

from mapforge.middleware.error_handler import setup_error_handlers

__all__ = [
    "setup_error_handlers",
]
