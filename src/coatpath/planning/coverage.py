"""
Coverage helpers for previewing coating output.

fill_rects() approximates each segment by the rectangle the coating head
paints; coverage_ratio() measures how much of a shape those strips cover.
Area operations use shapely.

References:
- shapely: https://shapely.readthedocs.io/
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from shapely import affinity
from shapely.geometry import LineString, Polygon as ShapelyPolygon, box
from shapely.geometry import Point as ShapelyPoint
from shapely.ops import unary_union

from coatpath.core.exceptions import UnsupportedShapeKindError
from coatpath.core.geometry import AXIS_TOLERANCE, Segment
from coatpath.core.shapes import CircleGeometry, CoatingShape, PolylineGeometry, RectangleGeometry


@dataclass(frozen=True)
class FillRect:
    """Painted strip of one segment, axis-aligned by construction."""

    x: float
    y: float
    width: float
    height: float


def fill_rects(segments: Sequence[Segment], coating_width: float) -> List[FillRect]:
    """
    One rectangle per segment, ``coating_width`` thick.

    Segments with ``|dy| < AXIS_TOLERANCE`` count as horizontal; every other
    segment is drawn as a vertical strip over its y-extent.
    """
    half = coating_width / 2
    rects: List[FillRect] = []
    for seg in segments:
        x0, x1 = sorted((seg.start.x, seg.end.x))
        y0, y1 = sorted((seg.start.y, seg.end.y))
        if seg.is_horizontal(AXIS_TOLERANCE):
            rects.append(FillRect(x0, seg.start.y - half, x1 - x0, coating_width))
        else:
            rects.append(FillRect(seg.start.x - half, y0, coating_width, y1 - y0))
    return rects


def shape_polygon(shape: CoatingShape) -> ShapelyPolygon:
    """World-space polygon of a closed shape, rotated about its rotation center."""
    geometry = shape.geometry
    if isinstance(geometry, RectangleGeometry):
        b = geometry.bounds()
        polygon = box(b.x, b.y, b.max_x, b.max_y)
    elif isinstance(geometry, CircleGeometry):
        polygon = ShapelyPoint(geometry.x, geometry.y).buffer(geometry.radius, quad_segs=64)
    elif isinstance(geometry, PolylineGeometry):
        raise UnsupportedShapeKindError(
            "Open polylines have no area", kind="polyline"
        )
    else:
        raise UnsupportedShapeKindError(
            f"Cannot build polygon for {type(geometry).__name__}",
            kind=type(geometry).__name__,
        )

    if shape.rotation == 0:
        return polygon
    center = shape.rotation_center()
    return affinity.rotate(polygon, shape.rotation, origin=(center.x, center.y))


def coverage_ratio(
    shape: CoatingShape, segments: Sequence[Segment], coating_width: float
) -> float:
    """
    Fraction of the shape's area painted by ``segments``.

    Each segment is buffered by half the coating width with flat caps, the
    strips are unioned and intersected with the shape polygon.
    """
    polygon = shape_polygon(shape)
    if polygon.area == 0 or not segments or coating_width <= 0:
        return 0.0

    strips = [
        LineString([seg.start.as_tuple(), seg.end.as_tuple()]).buffer(
            coating_width / 2, cap_style="flat"
        )
        for seg in segments
        if seg.length() > 0
    ]
    if not strips:
        return 0.0
    painted = unary_union(strips).intersection(polygon)
    return painted.area / polygon.area
