"""
coatpath - Coating toolpath planner for 2D design shapes

Turns rectangles, circles and polylines annotated with coating intent into
ordered line segments for a coating head, avoiding masked regions.
"""

__version__ = "0.1.0"
__author__ = "coatpath Contributors"

from coatpath.core.config import CoatingSettings, ConfigManager
from coatpath.planning.calculator import ToolpathCalculator
from coatpath.planning.mask_index import MaskIndex

__all__ = [
    "__version__",
    "CoatingSettings",
    "ConfigManager",
    "MaskIndex",
    "ToolpathCalculator",
]
