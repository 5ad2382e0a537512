"""
Core module - Shapes, geometry, configuration and shared utilities.
"""

from coatpath.core.coating import (
    CoatingType,
    FillPattern,
    MaskAvoidanceStrategy,
    OutlineStartPoint,
    ScanAxis,
)
from coatpath.core.config import CoatingSettings, ConfigManager, load_settings
from coatpath.core.exceptions import (
    CoatPathError,
    ConfigurationError,
    GeometryError,
    PlanningCancelledError,
    PlanningError,
    UnsupportedPatternError,
    UnsupportedShapeKindError,
)
from coatpath.core.geometry import Bounds, Point, Segment, rotate_point, rotate_segments
from coatpath.core.shapes import (
    CircleGeometry,
    CoatingShape,
    PolylineGeometry,
    RectangleGeometry,
    load_shapes,
    shape_from_dict,
)

__all__ = [
    # Coating intent
    "CoatingType",
    "FillPattern",
    "MaskAvoidanceStrategy",
    "OutlineStartPoint",
    "ScanAxis",
    # Config
    "CoatingSettings",
    "ConfigManager",
    "load_settings",
    # Exceptions
    "CoatPathError",
    "ConfigurationError",
    "GeometryError",
    "PlanningCancelledError",
    "PlanningError",
    "UnsupportedPatternError",
    "UnsupportedShapeKindError",
    # Geometry
    "Bounds",
    "Point",
    "Segment",
    "rotate_point",
    "rotate_segments",
    # Shapes
    "CircleGeometry",
    "CoatingShape",
    "PolylineGeometry",
    "RectangleGeometry",
    "load_shapes",
    "shape_from_dict",
]
