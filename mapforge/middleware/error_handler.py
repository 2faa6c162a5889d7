"""
Map Forge - Error Handler
Formats exceptions raised by the API into structured JSON responses.
"""
import traceback
import logging
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mapforge.core.errors import MapForgeError, ErrorCode

logger = logging.getLogger("mapforge.errors")

HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
    500: ErrorCode.UNKNOWN,
}


def _error_id() -> str:
    """Short id that ties a response to its log line."""
    return str(uuid.uuid4())[:8]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def setup_error_handlers(app: FastAPI, debug: bool = False):
    """
    Setup all error handlers for the FastAPI application.

    Call this function after creating the FastAPI app to register
    exception handlers for MapForgeError and standard exceptions.
    """

    @app.exception_handler(MapForgeError)
    async def map_forge_error_handler(request: Request, exc: MapForgeError):
        """Handle MapForgeError exceptions."""
        error_id = _error_id()

        logger.warning(
            f"[{error_id}] MapForgeError: {exc.code.value} - {exc.message}",
            extra={
                "error_id": error_id,
                "error_code": exc.code.value,
                "path": str(request.url.path),
            }
        )

        response_data = exc.to_dict()
        response_data["error"]["error_id"] = error_id
        response_data["error"]["timestamp"] = _timestamp()

        return JSONResponse(
            status_code=exc.http_status,
            content=response_data
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors from request parsing."""
        errors = []
        for error in exc.errors():
            field = " -> ".join(str(loc) for loc in error.get("loc", []))
            errors.append({
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error")
            })

        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "code": ErrorCode.VALIDATION_ERROR.value,
                    "message": "Request validation failed",
                    "details": {"errors": errors},
                    "recoverable": True,
                    "recovery_hint": "Check the request data and correct any invalid fields",
                    "error_id": _error_id(),
                    "timestamp": _timestamp()
                }
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle standard HTTP exceptions."""
        error_code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.UNKNOWN)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": error_code.value,
                    "message": str(exc.detail) if exc.detail else "An error occurred",
                    "details": {},
                    "recoverable": exc.status_code < 500,
                    "recovery_hint": None,
                    "error_id": _error_id(),
                    "timestamp": _timestamp()
                }
            }
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        error_id = _error_id()

        logger.error(
            f"[{error_id}] Unhandled exception: {type(exc).__name__}: {exc}",
            extra={
                "error_id": error_id,
                "path": str(request.url.path),
                "method": request.method,
            },
            exc_info=True
        )

        content = {
            "error": {
                "code": ErrorCode.UNKNOWN.value,
                "message": "An unexpected error occurred",
                "details": {},
                "recoverable": False,
                "recovery_hint": "Please try again or report the seed that failed",
                "error_id": error_id,
                "timestamp": _timestamp()
            }
        }

        if debug:
            content["error"]["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exception(type(exc), exc, exc.__traceback__)
            }

        return JSONResponse(
            status_code=500,
            content=content
        )

    return app
