from __future__ import annotations

import unittest

import numpy as np

from lessonviz_core.render.canvas import fill_circle, fill_polygon, new_canvas, stroke_polyline
from lessonviz_core.render.colors import parse_color, with_opacity
from lessonviz_core.render.draw_text import draw_text, text_size
from lessonviz_core.render.scene_renderer import GRADIENT_BOTTOM, GRADIENT_TOP, SceneRenderer, to_canvas_points
from lessonviz_scene.model import AnimationObject, AnimationScene


def _render(payload: dict, width: int = 100, height: int = 80) -> np.ndarray:
    scene = AnimationScene.from_dict(payload)
    return SceneRenderer().render(scene, scene.objects, width, height)


class ColorTests(unittest.TestCase):
    def test_parses_css_color_forms(self) -> None:
        self.assertEqual(parse_color("#fff"), (255, 255, 255, 255))
        self.assertEqual(parse_color("#3498db"), (0x34, 0x98, 0xDB, 255))
        self.assertEqual(parse_color("#11223380"), (0x11, 0x22, 0x33, 0x80))
        self.assertEqual(parse_color("rgba(10, 20, 30, 0.5)"), (10, 20, 30, 128))
        self.assertEqual(parse_color("red"), (255, 0, 0, 255))

    def test_unknown_or_empty_color_is_none(self) -> None:
        self.assertIsNone(parse_color(None))
        self.assertIsNone(parse_color(""))
        self.assertIsNone(parse_color("not-a-color"))
        self.assertIsNone(parse_color("#12"))

    def test_with_opacity_scales_and_clamps_alpha(self) -> None:
        self.assertEqual(with_opacity((1, 2, 3, 200), 0.5), (1, 2, 3, 100))
        self.assertEqual(with_opacity((1, 2, 3, 200), 4.0), (1, 2, 3, 200))


class CanvasTests(unittest.TestCase):
    def test_fill_circle_covers_center_only(self) -> None:
        canvas = new_canvas(20, 20)
        fill_circle(canvas, 10, 10, 4, (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[10, 10]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[0, 0]), (0, 0, 0, 255))

    def test_fill_polygon_even_odd(self) -> None:
        canvas = new_canvas(10, 10)
        fill_polygon(canvas, np.asarray([[2, 2], [8, 2], [8, 8], [2, 8]]), (0, 255, 0, 255))
        self.assertEqual(tuple(canvas[5, 5]), (0, 255, 0, 255))
        self.assertEqual(tuple(canvas[1, 1]), (0, 0, 0, 255))

    def test_stroke_polyline_marks_segment(self) -> None:
        canvas = new_canvas(10, 10)
        stroke_polyline(canvas, np.asarray([[0, 5], [10, 5]]), (0, 0, 255, 255), width=2.0)
        self.assertEqual(tuple(canvas[5, 5]), (0, 0, 255, 255))
        self.assertEqual(tuple(canvas[0, 5]), (0, 0, 0, 255))

    def test_shapes_outside_canvas_are_clipped(self) -> None:
        canvas = new_canvas(10, 10)
        fill_circle(canvas, -50, -50, 5, (255, 0, 0, 255))
        stroke_polyline(canvas, np.asarray([[100, 100], [120, 120]]), (255, 0, 0, 255))
        self.assertTrue(np.all(canvas[:, :, 0] == 0))

    def test_text_draws_pixels_near_anchor(self) -> None:
        canvas = new_canvas(80, 40)
        draw_text(canvas, 40, 20, "Hi", (255, 255, 255, 255), font_size_px=16)
        self.assertGreater(int(canvas[:, :, 0].max()), 0)
        width, height = text_size("Hi", font_size_px=16)
        self.assertGreater(width, 0)
        self.assertGreater(height, 0)


class SceneRendererTests(unittest.TestCase):
    def test_default_background_is_vertical_gradient(self) -> None:
        frame = _render({"objects": []})
        self.assertEqual(frame.shape, (80, 100, 4))
        self.assertEqual(tuple(frame[0, 0]), GRADIENT_TOP)
        self.assertEqual(tuple(frame[-1, 0]), GRADIENT_BOTTOM)

    def test_explicit_background_fills_surface(self) -> None:
        frame = _render({"objects": [], "background": "#102030"})
        self.assertEqual(tuple(frame[40, 50]), (0x10, 0x20, 0x30, 255))

    def test_circle_uses_fill_color(self) -> None:
        frame = _render({"background": "#000", "objects": [{"id": "c", "type": "circle", "x": 50, "y": 40, "radius": 10, "fill": "#ff0000"}]})
        self.assertEqual(tuple(frame[40, 50]), (255, 0, 0, 255))

    def test_shape_without_fill_or_color_is_not_filled(self) -> None:
        frame = _render({"background": "#000", "objects": [{"id": "r", "type": "rect", "x": 50, "y": 40, "width": 20, "height": 20}]})
        self.assertEqual(tuple(frame[40, 50]), (0, 0, 0, 255))

    def test_opacity_blends_with_background(self) -> None:
        frame = _render(
            {"background": "#000", "objects": [{"id": "c", "type": "circle", "x": 50, "y": 40, "radius": 10, "fill": "#ffffff", "opacity": 0.5}]}
        )
        self.assertTrue(120 <= int(frame[40, 50, 0]) <= 135)

    def test_invisible_and_unknown_objects_draw_nothing(self) -> None:
        frame = _render(
            {
                "background": "#000",
                "objects": [
                    {"id": "c", "type": "circle", "x": 50, "y": 40, "radius": 10, "fill": "#fff", "opacity": 0},
                    {"id": "i", "type": "image", "x": 50, "y": 40},
                    {"id": "h", "type": "hexagon", "x": 50, "y": 40},
                ],
            }
        )
        self.assertTrue(np.all(frame[:, :, :3] == 0))

    def test_rotated_rect_turns_around_its_center(self) -> None:
        obj = AnimationObject(id="r", type="rect", x=10.0, y=10.0, rotation=90.0)
        corner = to_canvas_points(obj, np.asarray([[5.0, 0.0]]))[0]
        self.assertAlmostEqual(corner[0], 10.0)
        self.assertAlmostEqual(corner[1], 15.0)

    def test_line_and_arrow_reach_their_end_point(self) -> None:
        frame = _render(
            {
                "background": "#000",
                "objects": [
                    {"id": "l", "type": "line", "x": 10, "y": 20, "endX": 90, "endY": 20, "color": "#00ff00"},
                    {"id": "a", "type": "arrow", "x": 10, "y": 60, "endX": 90, "endY": 60},
                ],
            }
        )
        self.assertEqual(tuple(frame[20, 80]), (0, 255, 0, 255))
        self.assertEqual(tuple(frame[60, 50]), (0xFF, 0xC1, 0x07, 255))

    def test_path_strokes_through_points(self) -> None:
        frame = _render(
            {
                "background": "#000",
                "objects": [
                    {"id": "p", "type": "path", "x": 0, "y": 0, "points": [{"x": 10, "y": 10}, {"x": 90, "y": 10}]},
                ],
            }
        )
        self.assertEqual(tuple(frame[10, 50]), (0x00, 0xBC, 0xD4, 255))

    def test_title_and_formula_are_drawn(self) -> None:
        blank = _render({"background": "#000", "objects": []}, width=200, height=120)
        decorated = _render({"background": "#000", "objects": [], "title": "Title", "formula": "E = mc^2"}, width=200, height=120)
        self.assertTrue(np.all(blank[:, :, :3] == 0))
        self.assertGreater(int(decorated[:40, :, :3].max()), 0)
        self.assertGreater(int(decorated[60:, :, :3].max()), 0)


if __name__ == "__main__":
    unittest.main()
