"""
Batch coating job: a whole design in, per-shape toolpaths out.

Chains: mask set -> coating order -> per-shape calculation -> post-hoc
masking -> optional travel ordering

Each shape is one step. A shape that fails with a CoatPathError is recorded
and the job continues with the next one; cancellation stops the whole job.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from coatpath.core.coating import CoatingType, FillPattern, MaskAvoidanceStrategy
from coatpath.core.config import CoatingSettings
from coatpath.core.exceptions import CoatPathError, PlanningCancelledError
from coatpath.core.geometry import Point, Segment
from coatpath.core.logging import get_logger, shape_context
from coatpath.core.shapes import CoatingShape
from coatpath.planning.calculator import ToolpathCalculator
from coatpath.planning.mask_index import MaskIndex
from coatpath.planning.parameters import resolve_parameters
from coatpath.planning.scheduling import CancellationToken
from coatpath.planning.sequencing import order_segments, total_length, travel_distance

logger = get_logger(__name__)

# Shapes without an explicit coating order go last.
DEFAULT_COATING_ORDER = 999


@dataclass
class ShapeToolpath:
    """Planned output of one shape."""

    shape: CoatingShape
    segments: List[Segment] = field(default_factory=list)
    skipped: bool = False
    reason: str = ""
    duration_s: float = 0.0

    @property
    def coating_length(self) -> float:
        return total_length(self.segments)


@dataclass
class JobResult:
    """Result of a complete coating job."""

    shapes: List[ShapeToolpath] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors

    def all_segments(self) -> List[Segment]:
        """Every coating segment of the job, in coating order."""
        return [seg for item in self.shapes for seg in item.segments]

    def travel_distance(self) -> float:
        """Non-coating distance from the origin through the whole job."""
        return travel_distance(self.all_segments(), start=Point(0.0, 0.0))


# Type alias for progress callback: (shape label, fraction 0.0-1.0)
ProgressCallback = Callable[[str, float], None]


def _noop_callback(step: str, pct: float) -> None:
    pass


def coating_sequence(shapes: Sequence[CoatingShape]) -> List[CoatingShape]:
    """Fill and outline shapes in coating order: explicit order, then x, then y."""
    coatable = [
        s
        for s in shapes
        if not s.skip_coating and s.coating_type != CoatingType.MASKING
    ]
    return sorted(
        coatable,
        key=lambda s: (
            DEFAULT_COATING_ORDER if s.coating_order is None else s.coating_order,
            s.x,
            s.y,
        ),
    )


class CoatingJob:
    """Plans every shape of a design in coating order.

    Usage:
        job = CoatingJob(shapes, settings, optimize_travel=True)
        result = job.execute()
        for item in result.shapes:
            print(item.shape.label, len(item.segments))
    """

    def __init__(
        self,
        shapes: Sequence[CoatingShape],
        settings: Optional[CoatingSettings] = None,
        optimize_travel: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.settings = settings or CoatingSettings()
        self.shapes = list(shapes)
        self.optimize_travel = optimize_travel
        self.mask_index = MaskIndex.from_shapes(self.shapes, self.settings)
        self.calculator = ToolpathCalculator(self.settings, self.mask_index)
        self._progress = progress_callback or _noop_callback

    def execute(self, token: Optional[CancellationToken] = None) -> JobResult:
        """Run the job to completion on a fresh event loop."""
        return asyncio.run(self.run(token))

    async def run(self, token: Optional[CancellationToken] = None) -> JobResult:
        """Plan all coating shapes, one after another."""
        result = JobResult()
        sequence = coating_sequence(self.shapes)
        position = Point(0.0, 0.0)
        t_job = time.perf_counter()

        logger.info(
            "coating_job_started",
            shapes=len(sequence),
            masks=len(self.mask_index.masks),
        )

        for index, shape in enumerate(sequence):
            self._progress(shape.label, index / len(sequence))
            with shape_context(shape.label, shape.coating_type.value):
                t0 = time.perf_counter()
                try:
                    item = await self._plan_shape(shape, position, token)
                except PlanningCancelledError:
                    logger.warning("coating_job_cancelled", completed=index)
                    raise
                except CoatPathError as e:
                    duration = time.perf_counter() - t0
                    logger.error("shape_failed", duration_s=round(duration, 2), error=str(e))
                    result.errors.append(f"{shape.label}: {e}")
                    continue

                item.duration_s = time.perf_counter() - t0
                result.timings[shape.label] = item.duration_s
                result.shapes.append(item)
                if item.segments:
                    position = item.segments[-1].end

                logger.info(
                    "shape_complete",
                    segments=len(item.segments),
                    skipped=item.skipped,
                    duration_s=round(item.duration_s, 2),
                )

        result.timings["total"] = time.perf_counter() - t_job
        self._progress("total", 1.0)
        logger.info(
            "coating_job_complete",
            shapes=len(result.shapes),
            errors=len(result.errors),
            duration_s=round(result.timings["total"], 2),
        )
        return result

    async def _plan_shape(
        self,
        shape: CoatingShape,
        position: Point,
        token: Optional[CancellationToken],
    ) -> ShapeToolpath:
        if self.mask_index.is_shape_inside_masks(shape):
            return ShapeToolpath(shape=shape, skipped=True, reason="inside_mask")

        segments = await self.calculator.calculate_absolute(shape, token=token)

        if self._needs_mask_split(shape):
            segments = self.mask_index.split_segments(segments)

        if self.optimize_travel:
            segments = order_segments(segments, start=position)

        return ShapeToolpath(shape=shape, segments=segments)

    def _needs_mask_split(self, shape: CoatingShape) -> bool:
        """
        Outline, concentric and lifted scanline output is clipped after planning.

        Route-around scanlines are exact already and are left alone.
        """
        if not self.mask_index.has_masks():
            return False
        if shape.coating_type == CoatingType.OUTLINE:
            return True
        params = resolve_parameters(shape, self.settings)
        if params.fill_pattern == FillPattern.CONCENTRIC:
            return True
        return self.settings.mask_avoidance == MaskAvoidanceStrategy.LIFT
