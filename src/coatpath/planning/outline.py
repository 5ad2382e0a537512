"""
Outline Planner - concentric boundary traces offset from a shape's edge.

Provides:
- rectangle_outline() - 4 segments per pass, clockwise from top-left
- circle_outline()    - chord-approximated rings
- polyline_outline()  - one segment per consecutive point pair
- plan_outline()      - dispatch on the boundary kind

The first pass sits according to the start-point policy; every further pass
steps outward by ``offset``. Passes that collapse (non-positive size or
radius) are skipped, never raised.
"""

from typing import List

from coatpath.core.coating import OutlineStartPoint
from coatpath.core.exceptions import UnsupportedShapeKindError
from coatpath.core.geometry import (
    Segment,
    circle_chord_count,
    circle_segments,
    rectangle_segments,
)
from coatpath.core.logging import get_logger
from coatpath.core.shapes import (
    BoundaryGeometry,
    CircleGeometry,
    PolylineGeometry,
    RectangleGeometry,
)
from coatpath.planning.parameters import PlanningParameters

logger = get_logger(__name__)


def first_offset(start_point: OutlineStartPoint, offset: float) -> float:
    """Signed distance of the first pass from the boundary."""
    if start_point == OutlineStartPoint.OUTSIDE:
        return offset
    if start_point == OutlineStartPoint.INSIDE:
        return -offset
    return 0.0


def rectangle_outline(
    geometry: RectangleGeometry,
    offset: float,
    passes: int,
    start_point: OutlineStartPoint = OutlineStartPoint.CENTER,
) -> List[Segment]:
    """
    Rectangle traces grown by the pass offset.

    Parameters:
        geometry: Rectangle boundary (top-left origin).
        offset: Distance between passes (mm).
        passes: Number of traces to attempt.
        start_point: Placement of the first trace.

    Returns:
        Segments of all non-degenerate passes, in pass order.
    """
    segments: List[Segment] = []
    base = first_offset(start_point, offset)

    for pass_index in range(passes):
        grow = base + offset * pass_index
        width = geometry.width + grow * 2
        height = geometry.height + grow * 2
        if width <= 0 or height <= 0:
            continue
        segments.extend(
            rectangle_segments(geometry.x - grow, geometry.y - grow, width, height)
        )

    return segments


def circle_outline(
    geometry: CircleGeometry,
    offset: float,
    passes: int,
    start_point: OutlineStartPoint = OutlineStartPoint.CENTER,
) -> List[Segment]:
    """Circle rings; every ring uses the chord count of the base radius."""
    segments: List[Segment] = []
    chords = circle_chord_count(geometry.radius)
    first_radius = geometry.radius + first_offset(start_point, offset)

    for pass_index in range(passes):
        radius = first_radius + offset * pass_index
        if radius <= 0:
            continue
        segments.extend(circle_segments(geometry.x, geometry.y, radius, chords))

    return segments


def polyline_outline(geometry: PolylineGeometry) -> List[Segment]:
    """Trace an open polyline once; offsets are not defined for it."""
    points = geometry.world_points()
    return [Segment(a, b) for a, b in zip(points, points[1:])]


def plan_outline(geometry: BoundaryGeometry, params: PlanningParameters) -> List[Segment]:
    """Outline segments for any boundary kind, in the shape's local frame."""
    if isinstance(geometry, RectangleGeometry):
        segments = rectangle_outline(
            geometry, params.outline_offset, params.outline_passes, params.outline_start_point
        )
    elif isinstance(geometry, CircleGeometry):
        segments = circle_outline(
            geometry, params.outline_offset, params.outline_passes, params.outline_start_point
        )
    elif isinstance(geometry, PolylineGeometry):
        segments = polyline_outline(geometry)
    else:
        raise UnsupportedShapeKindError(
            f"Cannot outline boundary of type {type(geometry).__name__}",
            kind=type(geometry).__name__,
        )

    logger.debug(
        "outline_planned",
        passes=params.outline_passes,
        start_point=params.outline_start_point.value,
        segments=len(segments),
    )
    return segments
