"""
Unit tests for geometry primitives and rotation.
"""

import math

import pytest

from coatpath.core.geometry import (
    Bounds,
    Point,
    Segment,
    circle_chord_count,
    circle_segments,
    rectangle_segments,
    rotate_point,
    rotate_segments,
    translate_segments,
)


def _close(a: Point, b: Point, tol: float = 1e-9) -> bool:
    return abs(a.x - b.x) < tol and abs(a.y - b.y) < tol


class TestSegment:
    """Tests for Segment."""

    def test_reversed(self):
        seg = Segment(Point(0, 0), Point(10, 5))
        assert seg.reversed() == Segment(Point(10, 5), Point(0, 0))

    def test_length(self):
        assert Segment(Point(0, 0), Point(3, 4)).length() == pytest.approx(5.0)

    def test_is_horizontal_tolerance(self):
        assert Segment(Point(0, 1), Point(10, 1.0005)).is_horizontal()
        assert not Segment(Point(0, 1), Point(10, 1.01)).is_horizontal()

    def test_point_at(self):
        seg = Segment(Point(0, 0), Point(10, 20))
        assert seg.point_at(0.25) == Point(2.5, 5.0)


class TestBounds:
    """Tests for Bounds."""

    def test_contains_is_inclusive(self):
        b = Bounds(0, 0, 10, 10)
        assert b.contains(Point(0, 0))
        assert b.contains(Point(10, 10))
        assert not b.contains(Point(10.01, 5))

    def test_inflated(self):
        b = Bounds(10, 10, 20, 20).inflated(5)
        assert (b.x, b.y, b.width, b.height) == (5, 5, 30, 30)

    def test_center(self):
        assert Bounds(0, 0, 100, 50).center == Point(50, 25)


class TestRotation:
    """Tests for the rotation transform."""

    def test_zero_rotation_is_identity(self):
        p = Point(1.23456789, 9.87654321)
        assert rotate_point(p, Point(5, 5), 0) is p

    def test_quarter_turn(self):
        rotated = rotate_point(Point(10, 0), Point(0, 0), 90)
        assert _close(rotated, Point(0, 10))

    def test_full_turn_round_trip(self):
        p = Point(12.5, -3.25)
        rotated = rotate_point(p, Point(4, 4), 360)
        assert _close(rotated, p)

    def test_rotate_segments_matches_rotate_point(self):
        center = Point(3, 7)
        segments = [Segment(Point(0, 0), Point(10, 0)), Segment(Point(5, 5), Point(-2, 8))]
        rotated = rotate_segments(segments, center, 33.0)

        for original, result in zip(segments, rotated):
            assert _close(result.start, rotate_point(original.start, center, 33.0))
            assert _close(result.end, rotate_point(original.end, center, 33.0))

    def test_rotate_segments_zero_returns_copy(self):
        segments = [Segment(Point(0, 0), Point(1, 1))]
        result = rotate_segments(segments, Point(0, 0), 0)
        assert result == segments
        assert result is not segments

    def test_rotate_segments_360_round_trip(self):
        segments = [Segment(Point(0, 1), Point(100, 1)), Segment(Point(100, 11), Point(0, 11))]
        result = rotate_segments(segments, Point(50, 25), 360)
        for a, b in zip(segments, result):
            assert _close(a.start, b.start, 1e-6)
            assert _close(a.end, b.end, 1e-6)

    def test_translate_segments(self):
        result = translate_segments([Segment(Point(5, 5), Point(6, 7))], -5, -5)
        assert result == [Segment(Point(0, 0), Point(1, 2))]


class TestPrimitives:
    """Tests for ring and rectangle builders."""

    @pytest.mark.parametrize("radius, expected", [(1, 16), (10, 16), (32, 16), (40, 20), (101, 50)])
    def test_chord_count(self, radius, expected):
        assert circle_chord_count(radius) == expected

    def test_circle_segments_closed(self):
        segments = circle_segments(0, 0, 5, 16)
        assert len(segments) == 16
        assert _close(segments[0].start, Point(5, 0))
        assert _close(segments[-1].end, segments[0].start)
        for a, b in zip(segments, segments[1:]):
            assert a.end == b.start
        for seg in segments:
            assert math.hypot(seg.start.x, seg.start.y) == pytest.approx(5)

    def test_rectangle_segments_order(self):
        segments = rectangle_segments(0, 0, 10, 5)
        assert segments == [
            Segment(Point(0, 0), Point(10, 0)),
            Segment(Point(10, 0), Point(10, 5)),
            Segment(Point(10, 5), Point(0, 5)),
            Segment(Point(0, 5), Point(0, 0)),
        ]
