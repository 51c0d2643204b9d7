from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable, Iterable

import numpy as np

from lessonviz_scene.model import AnimationObject, AnimationScene, ObjectKind

from .canvas import fill_circle, fill_polygon, fill_vertical_gradient, new_canvas, stroke_circle, stroke_polyline
from .colors import RGBA, parse_color, with_opacity
from .draw_text import DEFAULT_FONT_FAMILY, draw_text

GRADIENT_TOP: RGBA = (0x1A, 0x1A, 0x2E, 255)
GRADIENT_BOTTOM: RGBA = (0x16, 0x21, 0x3E, 255)
WHITE: RGBA = (255, 255, 255, 255)
AMBER: RGBA = (0xFF, 0xC1, 0x07, 255)
SHAPE_BLUE: RGBA = (0x34, 0x98, 0xDB, 255)
PATH_CYAN: RGBA = (0x00, 0xBC, 0xD4, 255)

ARROW_HEAD_LENGTH = 15.0
LABEL_FONT_PX = 14.0
FORMULA_FONT_PX = 18.0
TITLE_FONT_PX = 16.0


@dataclass
class SceneRenderer:
    """Rasterizes one frame of a scene: background, live objects, then static decorations."""

    font_family: str = DEFAULT_FONT_FAMILY

    def render(self, scene: AnimationScene, objects: Iterable[AnimationObject], width: int, height: int) -> np.ndarray:
        canvas = new_canvas(width, height)
        self.paint_background(canvas, scene.background)
        for obj in objects:
            self.draw_object(canvas, obj)
        self.draw_decorations(canvas, scene)
        return canvas

    def paint_background(self, canvas: np.ndarray, background: str | None) -> None:
        color = parse_color(background)
        if color is None:
            fill_vertical_gradient(canvas, GRADIENT_TOP, GRADIENT_BOTTOM)
            return
        fill_vertical_gradient(canvas, color, color)

    def draw_object(self, canvas: np.ndarray, obj: AnimationObject) -> None:
        opacity = 1.0 if obj.opacity is None else min(max(obj.opacity, 0.0), 1.0)
        if opacity <= 0:
            return
        drawer = _DRAWERS.get(obj.kind, _draw_nothing)
        drawer(self, canvas, obj, opacity)

    def draw_decorations(self, canvas: np.ndarray, scene: AnimationScene) -> None:
        height, width = canvas.shape[0], canvas.shape[1]
        for label in scene.labels:
            draw_text(
                canvas,
                label.x,
                label.y,
                label.text,
                parse_color(label.color) or WHITE,
                font_family=self.font_family,
                font_size_px=LABEL_FONT_PX,
                anchor="ls",
            )
        if scene.formula:
            draw_text(
                canvas,
                width / 2.0,
                height - 30.0,
                scene.formula,
                AMBER,
                font_family=self.font_family,
                font_size_px=FORMULA_FONT_PX,
                anchor="ms",
                embolden_px=2,
            )
        if scene.title:
            draw_text(
                canvas,
                width / 2.0,
                25.0,
                scene.title,
                WHITE,
                font_family=self.font_family,
                font_size_px=TITLE_FONT_PX,
                anchor="ms",
                embolden_px=2,
            )


def to_canvas_points(obj: AnimationObject, local: np.ndarray) -> np.ndarray:
    """Map points in the object's local frame (origin at x, y) through its rotation to canvas space."""
    pts = np.asarray(local, dtype=np.float64).reshape(-1, 2)
    if obj.rotation:
        theta = math.radians(obj.rotation)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        rot = np.asarray([[cos_t, -sin_t], [sin_t, cos_t]], dtype=np.float64)
        pts = pts @ rot.T
    return pts + np.asarray([obj.x, obj.y], dtype=np.float64)


def _fill_color(obj: AnimationObject) -> RGBA | None:
    if not (obj.fill or obj.color):
        return None
    return parse_color(obj.fill or obj.color) or SHAPE_BLUE


def _draw_circle(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    radius = obj.radius or 20.0
    fill = _fill_color(obj)
    if fill is not None:
        fill_circle(canvas, obj.x, obj.y, radius, with_opacity(fill, opacity))
    stroke = parse_color(obj.stroke)
    if stroke is not None:
        stroke_circle(canvas, obj.x, obj.y, radius, with_opacity(stroke, opacity), width=2.0)


def _draw_rect(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    w = obj.width or 50.0
    h = obj.height or 50.0
    corners = to_canvas_points(obj, np.asarray([[-w / 2, -h / 2], [w / 2, -h / 2], [w / 2, h / 2], [-w / 2, h / 2]]))
    fill = _fill_color(obj)
    if fill is not None:
        fill_polygon(canvas, corners, with_opacity(fill, opacity))
    stroke = parse_color(obj.stroke)
    if stroke is not None:
        stroke_polyline(canvas, corners, with_opacity(stroke, opacity), width=2.0, closed=True)


def _draw_text(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    color = parse_color(obj.color) or WHITE
    draw_text(
        canvas,
        obj.x,
        obj.y,
        obj.text or "",
        with_opacity(color, opacity),
        font_family=renderer.font_family,
        font_size_px=obj.font_size or 16.0,
        anchor="mm",
        rotate_deg=obj.rotation or 0.0,
    )


def _segment_end(obj: AnimationObject) -> tuple[float, float]:
    return ((obj.end_x or 50.0) - obj.x, (obj.end_y or 0.0) - obj.y)


def _draw_arrow(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    color = with_opacity(parse_color(obj.color) or AMBER, opacity)
    end_x, end_y = _segment_end(obj)
    stroke_polyline(canvas, to_canvas_points(obj, np.asarray([[0.0, 0.0], [end_x, end_y]])), color, width=3.0)
    angle = math.atan2(end_y, end_x)
    head = np.asarray(
        [
            [end_x, end_y],
            [
                end_x - ARROW_HEAD_LENGTH * math.cos(angle - math.pi / 6),
                end_y - ARROW_HEAD_LENGTH * math.sin(angle - math.pi / 6),
            ],
            [
                end_x - ARROW_HEAD_LENGTH * math.cos(angle + math.pi / 6),
                end_y - ARROW_HEAD_LENGTH * math.sin(angle + math.pi / 6),
            ],
        ]
    )
    fill_polygon(canvas, to_canvas_points(obj, head), color)


def _draw_line(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    color = with_opacity(parse_color(obj.color) or WHITE, opacity)
    end_x, end_y = _segment_end(obj)
    stroke_polyline(canvas, to_canvas_points(obj, np.asarray([[0.0, 0.0], [end_x, end_y]])), color, width=2.0)


def _draw_path(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    if not obj.points or len(obj.points) < 2:
        return
    color = with_opacity(parse_color(obj.color) or PATH_CYAN, opacity)
    local = np.asarray([[p.x - obj.x, p.y - obj.y] for p in obj.points], dtype=np.float64)
    stroke_polyline(canvas, to_canvas_points(obj, local), color, width=3.0)


def _draw_nothing(renderer: SceneRenderer, canvas: np.ndarray, obj: AnimationObject, opacity: float) -> None:
    # image and unknown kinds have no raster form.
    return


_DRAWERS: dict[ObjectKind | None, Callable[[SceneRenderer, np.ndarray, AnimationObject, float], None]] = {
    ObjectKind.CIRCLE: _draw_circle,
    ObjectKind.RECT: _draw_rect,
    ObjectKind.TEXT: _draw_text,
    ObjectKind.ARROW: _draw_arrow,
    ObjectKind.LINE: _draw_line,
    ObjectKind.PATH: _draw_path,
    ObjectKind.IMAGE: _draw_nothing,
}
