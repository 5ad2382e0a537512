"""
Per-shape parameter resolution.

Shapes may override any process-wide coating default. The overrides are
resolved once, when planning of a shape starts, so the planners never look
at CoatingSettings for these values themselves.
"""

from dataclasses import dataclass
from typing import Optional, TypeVar

from coatpath.core.coating import CoatingType, FillPattern, OutlineStartPoint
from coatpath.core.config import CoatingSettings
from coatpath.core.shapes import CoatingShape

T = TypeVar("T")


def effective(shape_value: Optional[T], settings_value: T) -> T:
    """A shape's own value when it sets one, otherwise the settings default."""
    return settings_value if shape_value is None else shape_value


@dataclass(frozen=True)
class PlanningParameters:
    """Coating parameters in force for one shape."""

    line_spacing: float
    coating_width: float
    fill_pattern: FillPattern
    outline_offset: float
    outline_passes: int
    outline_start_point: OutlineStartPoint


def resolve_parameters(shape: CoatingShape, settings: CoatingSettings) -> PlanningParameters:
    """Resolve a shape's overrides against the process-wide settings."""
    line_spacing = effective(shape.line_spacing, settings.line_spacing)

    is_outline = shape.coating_type == CoatingType.OUTLINE
    passes = shape.outline_passes if is_outline and shape.outline_passes > 0 else 1
    start_point = shape.outline_start_point if is_outline else OutlineStartPoint.CENTER

    return PlanningParameters(
        line_spacing=line_spacing,
        coating_width=effective(shape.coating_width, settings.coating_width),
        fill_pattern=FillPattern.parse(effective(shape.fill_pattern, settings.fill_pattern)),
        outline_offset=effective(shape.outline_offset, line_spacing),
        outline_passes=passes,
        outline_start_point=start_point,
    )
