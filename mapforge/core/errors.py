"""
Map Forge - Custom Error Types
Structured exceptions for map generation errors with recovery hints.
"""
from typing import Dict, Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the map generator."""
    # General errors
    UNKNOWN = "UNKNOWN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Generation errors
    MAP_INVALID_PARAMETERS = "MAP_INVALID_PARAMETERS"
    MAP_GENERATION_FAILED = "MAP_GENERATION_FAILED"
    MAP_PRESET_NOT_FOUND = "MAP_PRESET_NOT_FOUND"

    # Document errors
    MAP_DOCUMENT_INVALID = "MAP_DOCUMENT_INVALID"


class MapForgeError(Exception):
    """
    Base exception for all map generation errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Additional context details
    - Recovery hints for the caller
    """

    def __init__(
        self,
        code: ErrorCode = ErrorCode.UNKNOWN,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
        recovery_hint: Optional[str] = None,
        http_status: int = 500
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.http_status = http_status

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
                "recoverable": self.recoverable,
                "recovery_hint": self.recovery_hint
            }
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(MapForgeError):
    """Input validation errors."""

    def __init__(
        self,
        field: str,
        message: str,
        value: Any = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details = {"field": field}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            code=code,
            message=message,
            details=details,
            http_status=400,
            recovery_hint=f"Check the value for '{field}'"
        )
        self.field = field


class InvalidMapParametersError(ValidationError):
    """
    Raised when generation options are rejected.

    Always raised before the first random draw, so a failed call never
    produces a partial map.
    """

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            field=field,
            message=message,
            value=value,
            code=ErrorCode.MAP_INVALID_PARAMETERS,
        )


class MapGenerationError(MapForgeError):
    """Raised when the generator fails for reasons other than bad input."""

    def __init__(self, reason: str = "Map generation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.MAP_GENERATION_FAILED,
            message=reason,
            details=details,
            recoverable=True,
            recovery_hint="Retry with a different seed or smaller parameters",
            http_status=500
        )


# =============================================================================
# Lookup Errors
# =============================================================================

class NotFoundError(MapForgeError):
    """Generic not found error."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None,
        code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            code=code,
            message=f"{resource} not found",
            details=details,
            http_status=404
        )


class PresetNotFoundError(NotFoundError):
    """Raised when a named generation preset does not exist."""

    def __init__(self, preset_name: str):
        super().__init__(
            resource="Preset",
            identifier=preset_name,
            code=ErrorCode.MAP_PRESET_NOT_FOUND,
        )
        self.recovery_hint = "List the available presets with GET /api/maps/presets"


# =============================================================================
# Document Errors
# =============================================================================

class MapDocumentError(MapForgeError):
    """Raised when a serialized map document cannot be loaded."""

    def __init__(self, reason: str = "Malformed map document", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.MAP_DOCUMENT_INVALID,
            message=reason,
            details=details,
            http_status=400,
            recovery_hint="Re-export the map or regenerate it from its seed"
        )
