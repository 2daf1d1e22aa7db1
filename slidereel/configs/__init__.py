"""
Configs components for slidereel
"""

from .config import Config, config

__all__ = ["Config", "config"]
