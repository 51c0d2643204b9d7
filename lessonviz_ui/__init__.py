"""Presentation shell for lesson visuals."""

from .visual_canvas import DEFAULT_TITLE, DynamicVisualCanvas

__all__ = ["DEFAULT_TITLE", "DynamicVisualCanvas"]
