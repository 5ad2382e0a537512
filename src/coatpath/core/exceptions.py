"""
Custom exceptions for coatpath.

All coatpath exceptions inherit from CoatPathError for easy catching.
Degenerate geometry never raises; these signal contract violations.
"""

from typing import Any


class CoatPathError(Exception):
    """Base exception for all coatpath errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(CoatPathError):
    """Raised when configuration is invalid or missing."""

    pass


class GeometryError(CoatPathError):
    """Raised when shape geometry cannot be interpreted."""

    pass


class UnsupportedShapeKindError(GeometryError):
    """Raised for a boundary kind outside rectangle/circle/polyline."""

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.kind = kind


class PlanningError(CoatPathError):
    """Raised when toolpath planning fails."""

    pass


class UnsupportedPatternError(PlanningError):
    """Raised for a fill pattern outside the defined enumeration."""

    def __init__(
        self,
        message: str,
        pattern: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.pattern = pattern


class PlanningCancelledError(PlanningError):
    """Raised at a yield point once the planning call was cancelled."""

    pass
