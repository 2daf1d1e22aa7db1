"""
Timeline package for slidereel.

Builds staggered animation cues and the self-contained slide document.
"""

from .composer import compose
from .cues import DEFAULT_TIMING, TimelineTiming, build_timeline

__all__ = ["compose", "build_timeline", "TimelineTiming", "DEFAULT_TIMING"]
