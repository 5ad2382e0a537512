"""
Unit tests for the outline planner.
"""

import math

import pytest

from coatpath.core.coating import FillPattern, OutlineStartPoint
from coatpath.core.exceptions import UnsupportedShapeKindError
from coatpath.core.geometry import Point, Segment
from coatpath.core.shapes import CircleGeometry, PolylineGeometry, RectangleGeometry
from coatpath.planning.outline import (
    circle_outline,
    first_offset,
    plan_outline,
    polyline_outline,
    rectangle_outline,
)
from coatpath.planning.parameters import PlanningParameters


def outline_params(offset=5.0, passes=1, start=OutlineStartPoint.CENTER) -> PlanningParameters:
    return PlanningParameters(
        line_spacing=offset,
        coating_width=2.0,
        fill_pattern=FillPattern.AUTO,
        outline_offset=offset,
        outline_passes=passes,
        outline_start_point=start,
    )


@pytest.mark.unit
@pytest.mark.planning
class TestRectangleOutline:
    """Tests for rectangle traces."""

    def test_single_pass_on_boundary(self):
        segments = rectangle_outline(RectangleGeometry(0, 0, 100, 50), 5, 1)
        assert segments[0] == Segment(Point(0, 0), Point(100, 0))
        assert len(segments) == 4

    def test_passes_step_outward(self):
        segments = rectangle_outline(RectangleGeometry(0, 0, 100, 50), 5, 2)
        assert len(segments) == 8
        assert segments[4] == Segment(Point(-5, -5), Point(105, -5))

    def test_outside_start(self):
        segments = rectangle_outline(
            RectangleGeometry(0, 0, 100, 50), 5, 1, OutlineStartPoint.OUTSIDE
        )
        assert segments[0] == Segment(Point(-5, -5), Point(105, -5))

    def test_inside_start(self):
        segments = rectangle_outline(
            RectangleGeometry(0, 0, 100, 50), 5, 1, OutlineStartPoint.INSIDE
        )
        assert segments[0] == Segment(Point(5, 5), Point(95, 5))

    def test_collapsed_pass_skipped(self):
        segments = rectangle_outline(
            RectangleGeometry(0, 0, 10, 10), 10, 2, OutlineStartPoint.INSIDE
        )
        # first pass shrinks to -10 x -10, second sits on the boundary
        assert segments == rectangle_outline(RectangleGeometry(0, 0, 10, 10), 10, 1)

    def test_zero_offset_does_not_raise(self):
        segments = rectangle_outline(RectangleGeometry(0, 0, 10, 10), 0, 3)
        assert len(segments) == 12


@pytest.mark.unit
@pytest.mark.planning
class TestCircleOutline:
    """Tests for circle rings."""

    def test_rings_grow_by_offset(self):
        segments = circle_outline(CircleGeometry(0, 0, 10), 2, 3)
        assert len(segments) == 48
        radii = [math.hypot(s.start.x, s.start.y) for s in segments[::16]]
        assert radii == pytest.approx([10, 12, 14])

    def test_chord_count_from_base_radius(self):
        segments = circle_outline(CircleGeometry(0, 0, 40), 10, 2, OutlineStartPoint.INSIDE)
        # 20 chords per ring, both rings
        assert len(segments) == 40

    def test_inside_collapse_skipped(self):
        assert circle_outline(CircleGeometry(0, 0, 10), 10, 1, OutlineStartPoint.INSIDE) == []


@pytest.mark.unit
@pytest.mark.planning
class TestPlanOutline:
    """Tests for outline dispatch."""

    def test_polyline_traced_once(self):
        geometry = PolylineGeometry(10, 10, (Point(0, 0), Point(10, 0), Point(10, 10)))
        assert polyline_outline(geometry) == [
            Segment(Point(10, 10), Point(20, 10)),
            Segment(Point(20, 10), Point(20, 20)),
        ]
        assert plan_outline(geometry, outline_params(passes=3)) == polyline_outline(geometry)

    def test_dispatch_rectangle(self):
        segments = plan_outline(RectangleGeometry(0, 0, 10, 10), outline_params(passes=2))
        assert len(segments) == 8

    def test_unknown_geometry_raises(self):
        with pytest.raises(UnsupportedShapeKindError):
            plan_outline(object(), outline_params())

    @pytest.mark.parametrize(
        "start, expected",
        [
            (OutlineStartPoint.OUTSIDE, 3.0),
            (OutlineStartPoint.CENTER, 0.0),
            (OutlineStartPoint.INSIDE, -3.0),
        ],
    )
    def test_first_offset(self, start, expected):
        assert first_offset(start, 3.0) == expected
