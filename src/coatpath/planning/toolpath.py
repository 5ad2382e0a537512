"""
Toolpath result types returned by the calculator.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from coatpath.core.geometry import Point, Segment


@dataclass(frozen=True)
class ShapeTransform:
    """
    Placement of a shape, returned alongside relative segments so a
    consumer can position them itself.

    Attributes:
        x, y: Shape position
        rotation: Rotation in degrees
        scale_x, scale_y: Scale factors (informational, never applied)
    """

    x: float
    y: float
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0


@dataclass
class ToolpathResult:
    """
    Coating segments for one shape, in traversal order.

    Attributes:
        segments: Ordered coating moves
        transform: Shape placement, when requested
    """

    segments: List[Segment] = field(default_factory=list)
    transform: Optional[ShapeTransform] = None

    def __len__(self) -> int:
        return len(self.segments)

    def get_total_length(self) -> float:
        """Coating distance, excluding travel between segments."""
        return sum(seg.length() for seg in self.segments)

    def get_bounds(self) -> Tuple[Point, Point]:
        """
        Get bounding box of the toolpath.

        Returns:
            Tuple of (min_point, max_point)
        """
        if not self.segments:
            raise ValueError("Toolpath has no segments")

        xs = [p.x for seg in self.segments for p in (seg.start, seg.end)]
        ys = [p.y for seg in self.segments for p in (seg.start, seg.end)]
        return Point(min(xs), min(ys)), Point(max(xs), max(ys))
