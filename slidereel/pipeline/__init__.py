"""
Rendering pipeline for slidereel.
"""

from .renderer import RenderRequest, RenderResult, SlideRenderer, get_renderer

__all__ = ["RenderRequest", "RenderResult", "SlideRenderer", "get_renderer"]
