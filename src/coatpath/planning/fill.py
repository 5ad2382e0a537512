"""
Fill Planner - coating segments covering a shape's interior.

Patterns:
1. horizontal - snake scanlines running along x
2. vertical   - snake scanlines running along y
3. auto       - horizontal or vertical, picked per shape
4. concentric - nested rings shrinking inward

Scanlines are centered: the first line sits half a coating width inside the
boundary, lines step by ``line_spacing`` and the last one must stay half a
coating width inside the far edge (with SCANLINE_TOLERANCE of slack).
Alternate lines run in opposite directions so each line starts next to
where the previous one ended.

All geometry is computed in the shape's unrotated local frame. Mask tests
are done in world space by rotating the query point (or scan chord), never
the masks.

When masks are present, scanline fills avoid them with one of two
strategies (see MaskAvoidanceStrategy):

- ROUTE_AROUND: exact interval subtraction per line; each line starts at the
  end closest to the previous line's exit.
- LIFT: the line is walked at a step of one coating width; runs of unmasked
  samples become segments (clipped to the exact mask outlines) and the tool
  lifts over the rest.
"""

from __future__ import annotations

import math
from typing import List, Optional

from coatpath.core.coating import FillPattern, MaskAvoidanceStrategy, ScanAxis
from coatpath.core.config import CoatingSettings
from coatpath.core.exceptions import UnsupportedPatternError, UnsupportedShapeKindError
from coatpath.core.geometry import (
    MIN_SEGMENT_LENGTH,
    SCANLINE_TOLERANCE,
    Bounds,
    Point,
    Segment,
    circle_chord_count,
    circle_segments,
    rectangle_segments,
    rotate_point,
)
from coatpath.core.logging import get_logger
from coatpath.core.shapes import (
    BoundaryGeometry,
    CircleGeometry,
    CoatingShape,
    PolylineGeometry,
    RectangleGeometry,
)
from coatpath.planning.mask_index import MaskIndex
from coatpath.planning.parameters import PlanningParameters
from coatpath.planning.scheduling import CancellationToken, cooperative_yield

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------


def scan_chord(
    geometry: BoundaryGeometry, axis: ScanAxis, position: float
) -> Optional[Segment]:
    """
    Intersection of one scanline with the boundary, in forward direction.

    Forward is +x for horizontal lines and +y for vertical lines. Lines
    outside the shape's extent give None.
    """
    horizontal = axis == ScanAxis.HORIZONTAL

    if isinstance(geometry, RectangleGeometry):
        b = geometry.bounds()
        if horizontal:
            if b.y <= position <= b.max_y:
                return Segment(Point(b.x, position), Point(b.max_x, position))
        elif b.x <= position <= b.max_x:
            return Segment(Point(position, b.y), Point(position, b.max_y))
        return None

    if isinstance(geometry, CircleGeometry):
        r = geometry.radius
        d = abs(position - (geometry.y if horizontal else geometry.x))
        if d > r:
            return None
        half = math.sqrt(r * r - d * d)
        if horizontal:
            return Segment(
                Point(geometry.x - half, position), Point(geometry.x + half, position)
            )
        return Segment(
            Point(position, geometry.y - half), Point(position, geometry.y + half)
        )

    return None


def scan_positions(
    lo: float, hi: float, line_spacing: float, coating_width: float
) -> List[float]:
    """Centers of the scanlines that fit between ``lo`` and ``hi``."""
    half = coating_width / 2
    first = lo + half
    last = hi - half
    if first > last or line_spacing <= 0:
        return []

    positions: List[float] = []
    i = 0
    while True:
        pos = first + i * line_spacing
        if pos > last + SCANLINE_TOLERANCE:
            break
        positions.append(pos)
        i += 1
    return positions


def concentric_fill(
    geometry: BoundaryGeometry, line_spacing: float, coating_width: float
) -> List[Segment]:
    """
    Nested rings shrinking toward the center.

    Rectangles lose ``coating_width`` on each side length for the first ring
    and ``2 * line_spacing`` per further ring (both sides together). Circles
    lose ``coating_width / 2`` of radius, then ``line_spacing`` per ring.
    Shapes not larger than one coating width produce nothing.
    """
    segments: List[Segment] = []

    if isinstance(geometry, RectangleGeometry):
        if geometry.width <= coating_width or geometry.height <= coating_width:
            return []
        center = geometry.center()
        width = geometry.width - coating_width
        height = geometry.height - coating_width
        while width > 0 and height > 0:
            segments.extend(
                rectangle_segments(
                    center.x - width / 2, center.y - height / 2, width, height
                )
            )
            width -= line_spacing * 2
            height -= line_spacing * 2

    elif isinstance(geometry, CircleGeometry):
        if geometry.radius * 2 <= coating_width:
            return []
        chords = circle_chord_count(geometry.radius)
        radius = geometry.radius - coating_width / 2
        while radius > 0:
            segments.extend(circle_segments(geometry.x, geometry.y, radius, chords))
            radius -= line_spacing

    return segments


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------


class FillPlanner:
    """
    Fills one shape's interior with coating segments.

    Holds only immutable collaborators, so one planner may serve any number
    of sequential or concurrent ``plan`` calls.

    Example:
        >>> planner = FillPlanner(MaskIndex())
        >>> segments = await planner.plan(shape, params)
    """

    def __init__(
        self,
        mask_index: Optional[MaskIndex] = None,
        strategy: MaskAvoidanceStrategy = MaskAvoidanceStrategy.ROUTE_AROUND,
        yield_interval: int = 50,
        density_grid_size: int = 5,
        density_threshold: float = 0.4,
        token: Optional[CancellationToken] = None,
    ):
        self.mask_index = mask_index or MaskIndex()
        self.strategy = strategy
        self.yield_interval = yield_interval
        self.density_grid_size = density_grid_size
        self.density_threshold = density_threshold
        self.token = token

    @classmethod
    def from_settings(
        cls,
        settings: CoatingSettings,
        mask_index: Optional[MaskIndex] = None,
        token: Optional[CancellationToken] = None,
    ) -> FillPlanner:
        return cls(
            mask_index,
            strategy=settings.mask_avoidance,
            yield_interval=settings.yield_interval,
            density_grid_size=settings.density_grid_size,
            density_threshold=settings.density_threshold,
            token=token,
        )

    async def plan(self, shape: CoatingShape, params: PlanningParameters) -> List[Segment]:
        """
        Fill segments for ``shape`` in its local (unrotated) frame.

        Raises:
            UnsupportedShapeKindError: If the boundary kind is unknown
            UnsupportedPatternError: If the resolved pattern is unknown
        """
        geometry = shape.geometry
        if isinstance(geometry, PolylineGeometry):
            logger.debug("fill_skipped", reason="open_polyline")
            return []
        if not isinstance(geometry, (RectangleGeometry, CircleGeometry)):
            raise UnsupportedShapeKindError(
                f"Cannot fill boundary of type {type(geometry).__name__}",
                kind=type(geometry).__name__,
            )

        bounds = geometry.bounds()
        if params.line_spacing <= 0 or params.coating_width < 0:
            return []
        if bounds.width <= 0 or bounds.height <= 0:
            return []

        pattern = params.fill_pattern
        if pattern == FillPattern.CONCENTRIC:
            segments = concentric_fill(geometry, params.line_spacing, params.coating_width)
        else:
            if pattern == FillPattern.AUTO:
                pattern = self.choose_direction(shape, bounds)
            if pattern == FillPattern.HORIZONTAL:
                axis = ScanAxis.HORIZONTAL
            elif pattern == FillPattern.VERTICAL:
                axis = ScanAxis.VERTICAL
            else:
                raise UnsupportedPatternError(
                    f"Unsupported fill pattern: {pattern!r}", pattern=str(pattern)
                )
            segments = await self._scan_fill(shape, bounds, axis, params)

        logger.debug("fill_planned", pattern=pattern.value, segments=len(segments))
        return segments

    # ------------------------------------------------------------------
    # Automatic direction
    # ------------------------------------------------------------------

    def choose_direction(self, shape: CoatingShape, bounds: Bounds) -> FillPattern:
        """
        Pick horizontal or vertical scanning for an ``auto`` fill.

        Unobstructed shapes scan along their longer side. When masks cover
        more than ``density_threshold`` of the sampled area the choice flips,
        so lines stay short in heavily masked regions.
        """
        wide = bounds.width > bounds.height
        along_long = FillPattern.HORIZONTAL if wide else FillPattern.VERTICAL
        along_short = FillPattern.VERTICAL if wide else FillPattern.HORIZONTAL

        if not self.mask_index.has_masks():
            return along_long

        density = self.sample_mask_density(shape, bounds)
        logger.debug("mask_density_sampled", density=density)
        return along_short if density > self.density_threshold else along_long

    def sample_mask_density(self, shape: CoatingShape, bounds: Bounds) -> float:
        """Fraction of grid cell centers inside both the shape and a mask."""
        n = self.density_grid_size
        step_x = bounds.width / n
        step_y = bounds.height / n
        center = shape.rotation_center()

        masked = 0
        for i in range(n):
            for j in range(n):
                local = Point(bounds.x + (i + 0.5) * step_x, bounds.y + (j + 0.5) * step_y)
                if not shape.geometry.contains(local):
                    continue
                world = rotate_point(local, center, shape.rotation)
                if self.mask_index.is_point_in_mask_area(world):
                    masked += 1
        return masked / (n * n)

    # ------------------------------------------------------------------
    # Scanline fill
    # ------------------------------------------------------------------

    async def _scan_fill(
        self,
        shape: CoatingShape,
        bounds: Bounds,
        axis: ScanAxis,
        params: PlanningParameters,
    ) -> List[Segment]:
        if axis == ScanAxis.HORIZONTAL:
            lo, hi = bounds.y, bounds.max_y
        else:
            lo, hi = bounds.x, bounds.max_x
        positions = scan_positions(lo, hi, params.line_spacing, params.coating_width)

        avoiding = self.mask_index.has_masks()
        segments: List[Segment] = []
        last_exit: Optional[Point] = None

        for i, pos in enumerate(positions):
            await cooperative_yield(i, self.yield_interval, self.token)

            chord = scan_chord(shape.geometry, axis, pos)
            if chord is None:
                continue

            if not avoiding:
                segments.append(chord if i % 2 == 0 else chord.reversed())
                continue

            if self.strategy == MaskAvoidanceStrategy.LIFT:
                directed = chord if i % 2 == 0 else chord.reversed()
                pieces = self._lift_pieces(shape, directed, params.coating_width)
            else:
                pieces = self._route_around_pieces(shape, chord, axis, pos)
                pieces = self._orient_from(pieces, last_exit)

            if pieces:
                segments.extend(pieces)
                last_exit = pieces[-1].end

        return segments

    def _route_around_pieces(
        self, shape: CoatingShape, chord: Segment, axis: ScanAxis, position: float
    ) -> List[Segment]:
        """Forward-ordered parts of ``chord`` outside every mask."""
        if shape.rotation == 0:
            horizontal = axis == ScanAxis.HORIZONTAL
            lo = chord.start.x if horizontal else chord.start.y
            hi = chord.end.x if horizontal else chord.end.y
            allowed = self.mask_index.allowed_intervals(position, lo, hi, axis)
            if horizontal:
                return [Segment(Point(a, position), Point(b, position)) for a, b in allowed]
            return [Segment(Point(position, a), Point(position, b)) for a, b in allowed]

        return self._clip_in_world(shape, chord)

    def _clip_in_world(self, shape: CoatingShape, segment: Segment) -> List[Segment]:
        """Pieces of a local-frame segment outside every mask, still local."""
        if shape.rotation == 0:
            return self.mask_index.split_segment(segment)

        center = shape.rotation_center()
        world = Segment(
            rotate_point(segment.start, center, shape.rotation),
            rotate_point(segment.end, center, shape.rotation),
        )
        return [
            Segment(
                rotate_point(piece.start, center, -shape.rotation),
                rotate_point(piece.end, center, -shape.rotation),
            )
            for piece in self.mask_index.split_segment(world)
        ]

    @staticmethod
    def _orient_from(pieces: List[Segment], last_exit: Optional[Point]) -> List[Segment]:
        """Traverse a line from whichever end lies closer to the last exit."""
        if not pieces or last_exit is None:
            return pieces
        to_first = last_exit.distance_to(pieces[0].start)
        to_last = last_exit.distance_to(pieces[-1].end)
        if to_last < to_first:
            return [p.reversed() for p in reversed(pieces)]
        return pieces

    def _lift_pieces(
        self, shape: CoatingShape, directed: Segment, coating_width: float
    ) -> List[Segment]:
        """
        Runs of unmasked samples along ``directed``, in traversal order.

        Each run is then clipped against the exact mask outlines, so no
        piece crosses a mask that fell between samples.
        """
        length = directed.length()
        if length == 0:
            return []
        step = coating_width if coating_width > 0 else length
        count = int(math.floor(length / step))
        params = [min(1.0, k * step / length) for k in range(count + 1)]
        if params[-1] < 1.0:
            params.append(1.0)

        center = shape.rotation_center()
        pieces: List[Segment] = []
        run_start: Optional[Point] = None
        run_end: Optional[Point] = None

        for t in params:
            local = directed.point_at(t)
            world = rotate_point(local, center, shape.rotation)
            if self.mask_index.is_point_in_mask_area(world):
                if run_start is not None and run_end is not None:
                    self._close_run(shape, pieces, run_start, run_end)
                run_start = run_end = None
            else:
                if run_start is None:
                    run_start = local
                run_end = local

        if run_start is not None and run_end is not None:
            self._close_run(shape, pieces, run_start, run_end)
        return pieces

    def _close_run(
        self, shape: CoatingShape, pieces: List[Segment], start: Point, end: Point
    ) -> None:
        # A mask narrower than the sampling step can sit between two samples.
        piece = Segment(start, end)
        if piece.length() > MIN_SEGMENT_LENGTH:
            pieces.extend(self._clip_in_world(shape, piece))
