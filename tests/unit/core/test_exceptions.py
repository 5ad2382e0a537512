"""
Unit tests for the exception hierarchy.
"""

import pytest

from coatpath.core.exceptions import (
    CoatPathError,
    ConfigurationError,
    GeometryError,
    PlanningCancelledError,
    PlanningError,
    UnsupportedPatternError,
    UnsupportedShapeKindError,
)


class TestExceptions:
    """Tests for CoatPathError and subclasses."""

    def test_str_without_details(self):
        assert str(CoatPathError("boom")) == "boom"

    def test_str_with_details(self):
        error = ConfigurationError("bad", details={"key": "value"})
        assert "bad" in str(error)
        assert "key" in str(error)
        assert error.details == {"key": "value"}

    @pytest.mark.parametrize(
        "cls, parent",
        [
            (ConfigurationError, CoatPathError),
            (GeometryError, CoatPathError),
            (UnsupportedShapeKindError, GeometryError),
            (PlanningError, CoatPathError),
            (UnsupportedPatternError, PlanningError),
            (PlanningCancelledError, PlanningError),
        ],
    )
    def test_hierarchy(self, cls, parent):
        assert issubclass(cls, parent)

    def test_kind_and_pattern_attributes(self):
        assert UnsupportedShapeKindError("x", kind="star").kind == "star"
        assert UnsupportedPatternError("x", pattern="spiral").pattern == "spiral"
