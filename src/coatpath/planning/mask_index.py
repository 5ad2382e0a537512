"""
Mask Index - read-only lookup over the masking shapes of one batch.

Answers three kinds of question:

1. Is a point inside any mask?                (auto-pattern density sampling)
2. Which spans of a scanline are forbidden?   (route-around fill)
3. Which parts of a segment survive clipping? (post-hoc masking of outlines)

Every mask is inflated by its clearance: the batch clearance
(``masking_clearance + coating_width / 2``) or, when a mask carries its own
``masking_clearance``, that value plus half the coating width. Masks are
treated as axis-aligned; polyline masks enclose nothing and are ignored.
"""

from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from coatpath.core.coating import CoatingType, ScanAxis
from coatpath.core.config import CoatingSettings
from coatpath.core.geometry import MIN_SEGMENT_LENGTH, Bounds, Point, Segment, rotate_point
from coatpath.core.logging import get_logger
from coatpath.core.shapes import (
    CircleGeometry,
    CoatingShape,
    PolylineGeometry,
    RectangleGeometry,
)

logger = get_logger(__name__)


class Interval(NamedTuple):
    start: float
    end: float


def merge_intervals(intervals: Iterable[Tuple[float, float]]) -> List[Interval]:
    """Sort by start and fold overlapping or touching spans together."""
    ordered = sorted((Interval(*iv) for iv in intervals), key=lambda iv: iv.start)
    merged: List[Interval] = []
    for iv in ordered:
        if merged and iv.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Interval(last.start, max(last.end, iv.end))
        else:
            merged.append(iv)
    return merged


def subtract_intervals(
    start: float, end: float, forbidden: Sequence[Interval]
) -> List[Interval]:
    """Parts of ``[start, end]`` not covered by the (merged) forbidden spans."""
    allowed = [Interval(start, end)]
    for fb in forbidden:
        remaining: List[Interval] = []
        for cur in allowed:
            if cur.end < fb.start or cur.start > fb.end:
                remaining.append(cur)
                continue
            if cur.start < fb.start:
                remaining.append(Interval(cur.start, fb.start))
            if cur.end > fb.end:
                remaining.append(Interval(fb.end, cur.end))
        allowed = remaining
    return sorted(
        (iv for iv in allowed if iv.end - iv.start > MIN_SEGMENT_LENGTH),
        key=lambda iv: iv.start,
    )


class _Mask(NamedTuple):
    shape: CoatingShape
    clearance: float


class MaskIndex:
    """
    Immutable set of masking regions.

    Safe to share between calculator instances: nothing mutates it after
    construction.
    """

    def __init__(
        self,
        masks: Sequence[CoatingShape] = (),
        clearance: float = 0.0,
        coating_width: float = 0.0,
    ) -> None:
        entries: List[_Mask] = []
        for shape in masks:
            if shape.coating_type != CoatingType.MASKING or shape.skip_coating:
                continue
            geometry = shape.geometry
            if isinstance(geometry, PolylineGeometry):
                logger.debug("mask_ignored", mask=shape.label, reason="polyline")
                continue
            if isinstance(geometry, CircleGeometry) and geometry.radius <= 0:
                continue
            if shape.masking_clearance is not None:
                own = shape.masking_clearance + coating_width / 2
            else:
                own = clearance
            entries.append(_Mask(shape, own))
        self._masks: Tuple[_Mask, ...] = tuple(entries)

    @classmethod
    def from_shapes(
        cls, shapes: Iterable[CoatingShape], settings: CoatingSettings
    ) -> MaskIndex:
        """Build the mask set of a batch: masking, not skipped, masking enabled."""
        if not settings.enable_masking:
            return cls()
        masks = [
            s
            for s in shapes
            if s.coating_type == CoatingType.MASKING and not s.skip_coating
        ]
        return cls(masks, settings.mask_clearance, settings.coating_width)

    @property
    def masks(self) -> Tuple[CoatingShape, ...]:
        return tuple(m.shape for m in self._masks)

    def has_masks(self) -> bool:
        return bool(self._masks)

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    def is_point_in_mask_area(self, point: Point) -> bool:
        """True if ``point`` lies in any (clearance-inflated) mask."""
        return any(self._contains(m, point) for m in self._masks)

    @staticmethod
    def _contains(mask: _Mask, point: Point) -> bool:
        geometry = mask.shape.geometry
        if isinstance(geometry, RectangleGeometry):
            return geometry.bounds().inflated(mask.clearance).contains(point)
        if isinstance(geometry, CircleGeometry):
            distance = math.hypot(point.x - geometry.x, point.y - geometry.y)
            return distance <= geometry.radius + mask.clearance
        return False

    # ------------------------------------------------------------------
    # Scanline interval queries
    # ------------------------------------------------------------------

    def forbidden_intervals(
        self, coordinate: float, axis: ScanAxis = ScanAxis.HORIZONTAL
    ) -> List[Interval]:
        """
        Merged forbidden spans along one scanline.

        For a horizontal line ``coordinate`` is its y and the spans are
        x-ranges; for a vertical line it is the x and the spans are y-ranges.
        """
        horizontal = axis == ScanAxis.HORIZONTAL
        spans: List[Interval] = []
        for mask in self._masks:
            geometry = mask.shape.geometry
            c = mask.clearance
            if isinstance(geometry, RectangleGeometry):
                b = geometry.bounds().inflated(c)
                lo_main, hi_main = (b.y, b.max_y) if horizontal else (b.x, b.max_x)
                if lo_main <= coordinate <= hi_main:
                    spans.append(
                        Interval(b.x, b.max_x) if horizontal else Interval(b.y, b.max_y)
                    )
            elif isinstance(geometry, CircleGeometry):
                radius = geometry.radius + c
                center_main = geometry.y if horizontal else geometry.x
                center_cross = geometry.x if horizontal else geometry.y
                d = abs(coordinate - center_main)
                if d <= radius:
                    half = math.sqrt(radius * radius - d * d)
                    spans.append(Interval(center_cross - half, center_cross + half))
        return merge_intervals(spans)

    def allowed_intervals(
        self,
        coordinate: float,
        start: float,
        end: float,
        axis: ScanAxis = ScanAxis.HORIZONTAL,
    ) -> List[Interval]:
        """Sub-spans of ``[start, end]`` on a scanline that avoid every mask."""
        return subtract_intervals(start, end, self.forbidden_intervals(coordinate, axis))

    # ------------------------------------------------------------------
    # Segment clipping
    # ------------------------------------------------------------------

    def segment_mask_intervals(self, segment: Segment) -> List[Interval]:
        """Merged parameter ranges ``t`` in [0, 1] of ``segment`` inside masks."""
        spans: List[Interval] = []
        for mask in self._masks:
            span = self._segment_params(segment, mask)
            if span is not None:
                spans.append(span)
        return merge_intervals(spans)

    def split_segment(self, segment: Segment) -> List[Segment]:
        """Keep the pieces of ``segment`` outside every mask."""
        if not self._masks:
            return [segment]
        if segment.length() == 0:
            return [] if self.is_point_in_mask_area(segment.start) else [segment]

        pieces: List[Segment] = []
        last_t = 0.0
        for span in self.segment_mask_intervals(segment):
            if span.start > last_t:
                piece = Segment(segment.point_at(last_t), segment.point_at(span.start))
                if piece.length() > MIN_SEGMENT_LENGTH:
                    pieces.append(piece)
            last_t = max(last_t, span.end)

        if last_t < 1.0:
            piece = Segment(segment.point_at(last_t), segment.end)
            if piece.length() > MIN_SEGMENT_LENGTH:
                pieces.append(piece)
        return pieces

    def split_segments(self, segments: Iterable[Segment]) -> List[Segment]:
        result: List[Segment] = []
        for seg in segments:
            result.extend(self.split_segment(seg))
        return result

    def intersecting_masks(self, start: Point, end: Point) -> List[CoatingShape]:
        """Masks a straight move from ``start`` to ``end`` passes through."""
        segment = Segment(start, end)
        if segment.length() == 0:
            return [m.shape for m in self._masks if self._contains(m, start)]
        return [
            m.shape for m in self._masks if self._segment_params(segment, m) is not None
        ]

    @staticmethod
    def _segment_params(segment: Segment, mask: _Mask) -> Optional[Interval]:
        geometry = mask.shape.geometry
        p1, p2 = segment.start, segment.end
        dx = p2.x - p1.x
        dy = p2.y - p1.y

        if isinstance(geometry, RectangleGeometry):
            # Liang-Barsky clip against the inflated rectangle
            b = geometry.bounds().inflated(mask.clearance)
            t0, t1 = 0.0, 1.0
            for p, q in (
                (-dx, p1.x - b.x),
                (dx, b.max_x - p1.x),
                (-dy, p1.y - b.y),
                (dy, b.max_y - p1.y),
            ):
                if p == 0:
                    if q < 0:
                        return None
                    continue
                r = q / p
                if p < 0:
                    if r > t1:
                        return None
                    t0 = max(t0, r)
                else:
                    if r < t0:
                        return None
                    t1 = min(t1, r)
            return Interval(t0, t1) if t0 < t1 else None

        if isinstance(geometry, CircleGeometry):
            radius = geometry.radius + mask.clearance
            fx = p1.x - geometry.x
            fy = p1.y - geometry.y
            a = dx * dx + dy * dy
            if a == 0:
                return None
            b = 2 * (fx * dx + fy * dy)
            c = fx * fx + fy * fy - radius * radius
            disc = b * b - 4 * a * c
            if disc < 0:
                return None
            root = math.sqrt(disc)
            ta = (-b - root) / (2 * a)
            tb = (-b + root) / (2 * a)
            start_t = max(0.0, min(ta, tb))
            end_t = min(1.0, max(ta, tb))
            return Interval(start_t, end_t) if start_t < end_t else None

        return None

    # ------------------------------------------------------------------
    # Whole-shape queries
    # ------------------------------------------------------------------

    def is_shape_inside_masks(self, shape: CoatingShape) -> bool:
        """True if one mask alone covers the whole (rotated) coating shape."""
        if not self._masks:
            return False

        geometry = shape.geometry
        center = shape.rotation_center()

        if isinstance(geometry, CircleGeometry):
            c = rotate_point(geometry.center(), center, shape.rotation)
            for mask in self._masks:
                mg = mask.shape.geometry
                if isinstance(mg, CircleGeometry):
                    distance = math.hypot(c.x - mg.x, c.y - mg.y)
                    if distance + geometry.radius <= mg.radius + mask.clearance:
                        return True
                elif isinstance(mg, RectangleGeometry):
                    outer = mg.bounds().inflated(mask.clearance)
                    inner = Bounds(
                        c.x - geometry.radius,
                        c.y - geometry.radius,
                        geometry.radius * 2,
                        geometry.radius * 2,
                    )
                    if (
                        inner.x >= outer.x
                        and inner.y >= outer.y
                        and inner.max_x <= outer.max_x
                        and inner.max_y <= outer.max_y
                    ):
                        return True
            return False

        if isinstance(geometry, RectangleGeometry):
            b = geometry.bounds()
            corners = [
                Point(b.x, b.y),
                Point(b.max_x, b.y),
                Point(b.max_x, b.max_y),
                Point(b.x, b.max_y),
            ]
        else:
            corners = geometry.world_points()
        if not corners:
            return False

        points = [rotate_point(p, center, shape.rotation) for p in corners]
        return any(all(self._contains(m, p) for p in points) for m in self._masks)
