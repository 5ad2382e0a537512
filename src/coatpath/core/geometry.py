"""
2D geometry primitives and the rotation transform used by the planners.

Planners work in a shape's unrotated local frame; everything here converts
between that frame and world coordinates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

# Scanline boundary inclusion tolerance (mm).
SCANLINE_TOLERANCE = 0.01
# Horizontal/vertical classification tolerance (mm).
AXIS_TOLERANCE = 0.001
# Pieces shorter than this are dropped when clipping against masks (mm).
MIN_SEGMENT_LENGTH = 0.01


@dataclass(frozen=True)
class Point:
    """World or local 2D coordinate in millimetres."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def translated(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Segment:
    """A single straight motion primitive."""

    start: Point
    end: Point

    def reversed(self) -> Segment:
        """Return the same line traversed the other way."""
        return Segment(self.end, self.start)

    def length(self) -> float:
        return self.start.distance_to(self.end)

    def is_horizontal(self, tolerance: float = AXIS_TOLERANCE) -> bool:
        return abs(self.start.y - self.end.y) < tolerance

    def translated(self, dx: float, dy: float) -> Segment:
        return Segment(self.start.translated(dx, dy), self.end.translated(dx, dy))

    def point_at(self, t: float) -> Point:
        """Point at parameter ``t`` (0 = start, 1 = end)."""
        return Point(
            self.start.x + (self.end.x - self.start.x) * t,
            self.start.y + (self.end.y - self.start.y) * t,
        )


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box, ``(x, y)`` is the minimum corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, point: Point) -> bool:
        return self.x <= point.x <= self.max_x and self.y <= point.y <= self.max_y

    def inflated(self, margin: float) -> Bounds:
        return Bounds(
            self.x - margin,
            self.y - margin,
            self.width + margin * 2,
            self.height + margin * 2,
        )


def rotate_point(point: Point, center: Point, angle_deg: float) -> Point:
    """
    Rotate ``point`` about ``center`` by ``angle_deg`` degrees.

    A zero angle returns the very same object so unrotated shapes never pick
    up floating-point drift.
    """
    if angle_deg == 0:
        return point

    angle = math.radians(angle_deg)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(
        center.x + (dx * cos_a - dy * sin_a),
        center.y + (dx * sin_a + dy * cos_a),
    )


def rotate_segments(
    segments: Sequence[Segment], center: Point, angle_deg: float
) -> List[Segment]:
    """
    Rotate both endpoints of every segment about ``center``.

    Segments stay straight; only their endpoints move.
    """
    if angle_deg == 0 or not segments:
        return list(segments)

    angle = math.radians(angle_deg)
    rot = np.array(
        [[math.cos(angle), -math.sin(angle)], [math.sin(angle), math.cos(angle)]]
    )
    origin = np.array([center.x, center.y])

    # (n, 2, 2): segment, endpoint, xy
    coords = np.array(
        [[[s.start.x, s.start.y], [s.end.x, s.end.y]] for s in segments],
        dtype=float,
    )
    rotated = (coords - origin) @ rot.T + origin

    return [
        Segment(Point(float(a[0]), float(a[1])), Point(float(b[0]), float(b[1])))
        for a, b in rotated
    ]


def translate_segments(
    segments: Iterable[Segment], dx: float, dy: float
) -> List[Segment]:
    """Shift every segment by ``(dx, dy)``."""
    return [seg.translated(dx, dy) for seg in segments]


def circle_chord_count(base_radius: float) -> int:
    """Chords used to approximate a ring; grows with the shape's radius."""
    return max(16, int(math.floor(base_radius * 0.5)))


def circle_segments(
    cx: float, cy: float, radius: float, chord_count: int
) -> List[Segment]:
    """Closed polygon approximating a circle, counter-clockwise from +x."""
    step = 2 * math.pi / chord_count
    segments: List[Segment] = []
    for i in range(chord_count):
        a1 = i * step
        a2 = ((i + 1) % chord_count) * step
        segments.append(
            Segment(
                Point(cx + radius * math.cos(a1), cy + radius * math.sin(a1)),
                Point(cx + radius * math.cos(a2), cy + radius * math.sin(a2)),
            )
        )
    return segments


def rectangle_segments(x: float, y: float, width: float, height: float) -> List[Segment]:
    """Closed rectangle trace: top, right, bottom, left from the top-left corner."""
    return [
        Segment(Point(x, y), Point(x + width, y)),
        Segment(Point(x + width, y), Point(x + width, y + height)),
        Segment(Point(x + width, y + height), Point(x, y + height)),
        Segment(Point(x, y + height), Point(x, y)),
    ]
