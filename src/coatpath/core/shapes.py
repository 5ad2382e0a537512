"""
Design shapes annotated with coating intent.

A shape's boundary is one of a closed set of geometry kinds:

- RectangleGeometry: ``(x, y)`` is the top-left corner (images load as these)
- CircleGeometry: ``(x, y)`` is the center
- PolylineGeometry: points relative to ``(x, y)``, open, outline only

Shapes are plain value objects built fresh for every computation request.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import yaml

from coatpath.core.coating import CoatingType, FillPattern, OutlineStartPoint
from coatpath.core.exceptions import (
    ConfigurationError,
    GeometryError,
    UnsupportedShapeKindError,
)
from coatpath.core.geometry import Bounds, Point


@dataclass(frozen=True)
class RectangleGeometry:
    x: float
    y: float
    width: float
    height: float
    is_image: bool = False

    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.width, self.height)

    def center(self) -> Point:
        return self.bounds().center

    def contains(self, point: Point) -> bool:
        return self.bounds().contains(point)


@dataclass(frozen=True)
class CircleGeometry:
    x: float
    y: float
    radius: float

    def bounds(self) -> Bounds:
        return Bounds(
            self.x - self.radius, self.y - self.radius, self.radius * 2, self.radius * 2
        )

    def center(self) -> Point:
        return Point(self.x, self.y)

    def contains(self, point: Point) -> bool:
        return math.hypot(point.x - self.x, point.y - self.y) <= self.radius


@dataclass(frozen=True)
class PolylineGeometry:
    x: float
    y: float
    points: Tuple[Point, ...] = ()

    def world_points(self) -> List[Point]:
        return [p.translated(self.x, self.y) for p in self.points]

    def bounds(self) -> Bounds:
        pts = self.world_points()
        if not pts:
            return Bounds(self.x, self.y, 0.0, 0.0)
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return Bounds(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def center(self) -> Point:
        return self.bounds().center

    def contains(self, point: Point) -> bool:
        # An open polyline encloses nothing.
        return False


BoundaryGeometry = Union[RectangleGeometry, CircleGeometry, PolylineGeometry]


@dataclass(frozen=True)
class CoatingShape:
    """
    A boundary plus the coating parameters that apply to it.

    Attributes left as ``None`` fall back to the process-wide
    CoatingSettings when planning starts.

    Attributes:
        geometry: Boundary kind and dimensions
        coating_type: Which planner processes the shape
        fill_pattern: Fill pattern override (fill only)
        line_spacing: Distance between scanline centers (mm)
        coating_width: Width of one coating line (mm)
        outline_offset: Distance between outline passes (mm)
        outline_passes: Number of outline traces (>= 1)
        outline_start_point: Where the first outline trace sits
        rotation: Degrees about the rotation center
        offset_x, offset_y: Pivot offset subtracted from the center
        skip_coating: Excluded from coating and from the mask set
        coating_order: Position in the coating sequence (lower first)
        masking_clearance: Per-mask clearance override (masking only)
    """

    geometry: BoundaryGeometry
    coating_type: CoatingType = CoatingType.FILL
    fill_pattern: Optional[FillPattern] = None
    line_spacing: Optional[float] = None
    coating_width: Optional[float] = None
    outline_offset: Optional[float] = None
    outline_passes: int = 1
    outline_start_point: OutlineStartPoint = OutlineStartPoint.CENTER
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    skip_coating: bool = False
    coating_order: Optional[int] = None
    masking_clearance: Optional[float] = None
    name: str = ""

    @property
    def x(self) -> float:
        return self.geometry.x

    @property
    def y(self) -> float:
        return self.geometry.y

    @property
    def label(self) -> str:
        return self.name or type(self.geometry).__name__.replace("Geometry", "").lower()

    def bounds(self) -> Bounds:
        return self.geometry.bounds()

    def rotation_center(self) -> Point:
        """Geometric center adjusted by the pivot offset."""
        center = self.geometry.center()
        return Point(center.x - self.offset_x, center.y - self.offset_y)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")

_RECT_KINDS = {"rectangle", "rect", "image"}
_CIRCLE_KINDS = {"circle"}
_POLYLINE_KINDS = {"line", "polyline"}


def _snake_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_CAMEL.sub("_", k).lower(): v for k, v in data.items()}


def _parse_points(raw: Any) -> Tuple[Point, ...]:
    if not raw:
        return ()
    if all(isinstance(v, (int, float)) for v in raw):
        # Flat [x0, y0, x1, y1, ...]; a dangling coordinate is ignored.
        return tuple(Point(float(raw[i]), float(raw[i + 1])) for i in range(0, len(raw) - 1, 2))
    return tuple(Point(float(p[0]), float(p[1])) for p in raw)


def _parse_geometry(kind: str, data: dict[str, Any]) -> BoundaryGeometry:
    x = float(data.get("x") or 0.0)
    y = float(data.get("y") or 0.0)
    if kind in _RECT_KINDS:
        return RectangleGeometry(
            x,
            y,
            float(data.get("width") or 0.0),
            float(data.get("height") or 0.0),
            is_image=kind == "image",
        )
    if kind in _CIRCLE_KINDS:
        return CircleGeometry(x, y, float(data.get("radius") or 0.0))
    if kind in _POLYLINE_KINDS:
        return PolylineGeometry(x, y, _parse_points(data.get("points")))
    raise UnsupportedShapeKindError(
        f"Unsupported shape kind: {kind!r}",
        kind=kind,
        details={"supported": sorted(_RECT_KINDS | _CIRCLE_KINDS | _POLYLINE_KINDS)},
    )


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def shape_from_dict(data: dict[str, Any]) -> CoatingShape:
    """
    Build a CoatingShape from a mapping (snake_case or camelCase keys).

    Raises:
        UnsupportedShapeKindError: If ``type`` is not a known boundary kind
        UnsupportedPatternError: If ``fill_pattern`` is not a known pattern
        GeometryError: If ``coating_type`` or ``outline_start_point`` is unknown
    """
    data = _snake_keys(data)
    kind = str(data.get("type", "")).lower()
    geometry = _parse_geometry(kind, data)

    try:
        coating_type = CoatingType(str(data.get("coating_type", "fill")).lower())
        start_point = OutlineStartPoint(
            str(data.get("outline_start_point", "center")).lower()
        )
    except ValueError as e:
        raise GeometryError(f"Invalid coating attribute: {e}", details={"shape": data.get("name")})

    pattern = data.get("fill_pattern")
    return CoatingShape(
        geometry=geometry,
        coating_type=coating_type,
        fill_pattern=FillPattern.parse(pattern) if pattern is not None else None,
        line_spacing=_optional_float(data.get("line_spacing")),
        coating_width=_optional_float(data.get("coating_width")),
        outline_offset=_optional_float(data.get("outline_offset")),
        outline_passes=int(data.get("outline_passes") or 1),
        outline_start_point=start_point,
        rotation=float(data.get("rotation") or 0.0),
        scale_x=float(data.get("scale_x", 1.0)),
        scale_y=float(data.get("scale_y", 1.0)),
        offset_x=float(data.get("offset_x") or 0.0),
        offset_y=float(data.get("offset_y") or 0.0),
        skip_coating=bool(data.get("skip_coating", False)),
        coating_order=_optional_int(data.get("coating_order")),
        masking_clearance=_optional_float(data.get("masking_clearance")),
        name=str(data.get("name") or data.get("id") or ""),
    )


def load_shapes(path: str | Path) -> List[CoatingShape]:
    """
    Load shapes from a YAML (or JSON) file holding a top-level ``shapes`` list.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Shapes file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse shapes file: {path}",
            details={"error": str(e)},
        )

    if not isinstance(data, dict) or not isinstance(data.get("shapes"), list):
        raise ConfigurationError(f"Shapes file must contain a 'shapes' list: {path}")

    return [shape_from_dict(item) for item in data["shapes"]]
