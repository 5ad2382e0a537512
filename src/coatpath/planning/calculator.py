"""
Toolpath Calculator - one shape in, ordered coating segments out.

Steps for every request:
1. Resolve the shape's parameter overrides against the settings
2. Dispatch on coating type (fill / outline; masking shapes produce nothing)
3. Rotate the local-frame segments about the shape's rotation center
4. Optionally convert to coordinates relative to the shape's position
"""

from typing import List, Optional

from coatpath.core.coating import CoatingType
from coatpath.core.config import CoatingSettings
from coatpath.core.geometry import Segment, rotate_segments, translate_segments
from coatpath.core.logging import get_logger
from coatpath.core.shapes import CoatingShape
from coatpath.planning.fill import FillPlanner
from coatpath.planning.mask_index import MaskIndex
from coatpath.planning.outline import plan_outline
from coatpath.planning.parameters import resolve_parameters
from coatpath.planning.scheduling import CancellationToken
from coatpath.planning.toolpath import ShapeTransform, ToolpathResult

logger = get_logger(__name__)


class ToolpathCalculator:
    """
    Coating toolpath calculator for design shapes.

    Holds only the settings and mask index, both immutable, so one instance
    may serve many shapes, sequentially or concurrently.

    Example:
        >>> calculator = ToolpathCalculator(CoatingSettings())
        >>> result = await calculator.calculate(shape)
        >>> print(len(result.segments))
    """

    def __init__(
        self,
        settings: Optional[CoatingSettings] = None,
        mask_index: Optional[MaskIndex] = None,
    ):
        self.settings = settings or CoatingSettings()
        self.mask_index = mask_index or MaskIndex()

    async def calculate(
        self,
        shape: CoatingShape,
        relative: bool = False,
        include_transform: bool = False,
        token: Optional[CancellationToken] = None,
    ) -> ToolpathResult:
        """
        Compute the coating segments of one shape.

        Args:
            shape: Shape to plan
            relative: Subtract the shape's ``(x, y)`` from every endpoint
            include_transform: Attach the shape's placement to the result
            token: Checked at every cooperative yield point

        Returns:
            ToolpathResult with segments in traversal order

        Raises:
            UnsupportedShapeKindError: Unknown boundary kind
            UnsupportedPatternError: Unknown fill pattern
            PlanningCancelledError: ``token`` was cancelled mid-plan
        """
        params = resolve_parameters(shape, self.settings)

        if shape.coating_type == CoatingType.FILL:
            planner = FillPlanner.from_settings(self.settings, self.mask_index, token)
            segments = await planner.plan(shape, params)
        elif shape.coating_type == CoatingType.OUTLINE:
            segments = plan_outline(shape.geometry, params)
        else:
            segments = []

        segments = rotate_segments(segments, shape.rotation_center(), shape.rotation)

        if relative:
            segments = translate_segments(segments, -shape.x, -shape.y)

        transform = None
        if include_transform:
            transform = ShapeTransform(
                x=shape.x,
                y=shape.y,
                rotation=shape.rotation,
                scale_x=shape.scale_x,
                scale_y=shape.scale_y,
            )

        logger.debug(
            "toolpath_calculated",
            shape=shape.label,
            coating_type=shape.coating_type.value,
            segments=len(segments),
            relative=relative,
        )
        return ToolpathResult(segments=segments, transform=transform)

    async def calculate_absolute(
        self, shape: CoatingShape, token: Optional[CancellationToken] = None
    ) -> List[Segment]:
        """World-coordinate segments of one shape."""
        result = await self.calculate(shape, token=token)
        return result.segments
