"""
Planning module - Coating toolpath generation for design shapes.

- ToolpathCalculator: per-shape entry point (fill / outline dispatch, rotation)
- FillPlanner: snake scanline and concentric fills with mask avoidance
- plan_outline: offset boundary traces
- MaskIndex: masking regions and segment clipping
- order_segments: greedy travel ordering across a batch
"""

from coatpath.planning.calculator import ToolpathCalculator
from coatpath.planning.fill import FillPlanner
from coatpath.planning.mask_index import MaskIndex
from coatpath.planning.outline import plan_outline
from coatpath.planning.parameters import PlanningParameters, resolve_parameters
from coatpath.planning.scheduling import CancellationToken
from coatpath.planning.sequencing import order_segments
from coatpath.planning.toolpath import ShapeTransform, ToolpathResult

__all__ = [
    "CancellationToken",
    "FillPlanner",
    "MaskIndex",
    "PlanningParameters",
    "ShapeTransform",
    "ToolpathCalculator",
    "ToolpathResult",
    "order_segments",
    "plan_outline",
    "resolve_parameters",
]
