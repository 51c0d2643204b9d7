from .canvas import (
    blend_coverage,
    fill_canvas,
    fill_circle,
    fill_polygon,
    fill_vertical_gradient,
    new_canvas,
    stroke_circle,
    stroke_polyline,
)
from .colors import RGBA, parse_color, with_opacity
from .draw_text import draw_text, text_size
from .scene_renderer import SceneRenderer

__all__ = [
    "RGBA",
    "SceneRenderer",
    "blend_coverage",
    "draw_text",
    "fill_canvas",
    "fill_circle",
    "fill_polygon",
    "fill_vertical_gradient",
    "new_canvas",
    "parse_color",
    "stroke_circle",
    "stroke_polyline",
    "text_size",
    "with_opacity",
]
