"""
Coating intent enumerations shared by shapes, settings and planners.
"""

from enum import Enum

from coatpath.core.exceptions import UnsupportedPatternError


class CoatingType(Enum):
    """What a shape asks of the coating head."""

    FILL = "fill"  # Cover the interior
    OUTLINE = "outline"  # Trace the boundary
    MASKING = "masking"  # Region the head must stay out of


class FillPattern(Enum):
    """Fill pattern types."""

    HORIZONTAL = "horizontal"  # Snake scanlines along x
    VERTICAL = "vertical"  # Snake scanlines along y
    AUTO = "auto"  # Direction picked per shape
    CONCENTRIC = "concentric"  # Nested rings shrinking inward

    @classmethod
    def parse(cls, value: "str | FillPattern") -> "FillPattern":
        """Convert a raw value, raising UnsupportedPatternError when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedPatternError(
                f"Unsupported fill pattern: {value!r}",
                pattern=str(value),
                details={"supported": [p.value for p in cls]},
            ) from None


class OutlineStartPoint(Enum):
    """Where the first outline pass sits relative to the boundary."""

    OUTSIDE = "outside"
    CENTER = "center"
    INSIDE = "inside"


class MaskAvoidanceStrategy(Enum):
    """How scanline fills treat masking regions."""

    LIFT = "lift"  # Sample the line, lift over masked samples
    ROUTE_AROUND = "route_around"  # Exact interval subtraction per line


class ScanAxis(Enum):
    """Axis a scanline runs along."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
