from __future__ import annotations

import math
import unittest

from lessonviz_scene.model import AnimationScene
from lessonviz_scene.timeline import action_progress, advance_live_state, effective_elapsed, reset_live_state


def _scene(obj: dict, *actions: dict) -> AnimationScene:
    return AnimationScene.from_dict({"title": "t", "objects": [obj], "actions": list(actions)})


def _at(scene: AnimationScene, elapsed_ms: float):
    live = reset_live_state(scene)
    advance_live_state(scene, live, elapsed_ms)
    return live


class TimelineTests(unittest.TestCase):
    def test_move_interpolates_linearly_at_midpoint(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 100, "y": 100},
            {"objectId": "a", "type": "move", "toX": 300, "toY": 100, "duration": 1000, "easing": "linear"},
        )
        live = _at(scene, 500)
        self.assertAlmostEqual(live["a"].x, 200.0)
        self.assertEqual(live["a"].y, 100.0)

    def test_untouched_objects_keep_authored_attributes(self) -> None:
        scene = AnimationScene.from_dict(
            {
                "title": "t",
                "objects": [
                    {"id": "a", "type": "circle", "x": 0, "y": 0, "radius": 5},
                    {"id": "b", "type": "rect", "x": 40, "y": 60, "width": 20, "height": 10, "opacity": 0.5, "rotation": 15},
                ],
                "actions": [
                    {"objectId": "a", "type": "move", "toX": 100, "duration": 1000},
                    {"objectId": "a", "type": "rotate", "toRotation": 90, "duration": 1000, "repeat": True},
                ],
            }
        )
        live = reset_live_state(scene)
        for elapsed in (0, 250, 999, 1000, 1750, 4321):
            advance_live_state(scene, live, elapsed)
            self.assertEqual(live["b"], scene.objects[1])
            self.assertIsNot(live["b"], scene.objects[1])

    def test_move_only_touches_defined_axes(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 10, "y": 20},
            {"objectId": "a", "type": "move", "toY": 120, "duration": 100, "easing": "linear"},
        )
        live = _at(scene, 100)
        self.assertEqual(live["a"].x, 10.0)
        self.assertAlmostEqual(live["a"].y, 120.0)

    def test_rotate_adds_a_scaled_delta_to_the_authored_rotation(self) -> None:
        scene = _scene(
            {"id": "r", "type": "rect", "x": 0, "y": 0, "rotation": 10},
            {"objectId": "r", "type": "rotate", "toRotation": 90, "duration": 1000, "easing": "linear"},
        )
        self.assertAlmostEqual(_at(scene, 500)["r"].rotation, 55.0)
        self.assertAlmostEqual(_at(scene, 1000)["r"].rotation, 100.0)

    def test_fade_defaults_baseline_opacity_to_one(self) -> None:
        scene = _scene(
            {"id": "f", "type": "circle", "x": 0, "y": 0},
            {"objectId": "f", "type": "fade", "toOpacity": 0, "duration": 1000, "easing": "linear"},
        )
        self.assertAlmostEqual(_at(scene, 250)["f"].opacity, 0.75)

    def test_bounce_uses_raw_progress_not_eased(self) -> None:
        scene = _scene(
            {"id": "b", "type": "circle", "x": 0, "y": 100},
            {"objectId": "b", "type": "bounce", "amplitude": 40, "duration": 1000, "easing": "easeIn"},
        )
        progress = 0.125
        expected = 100 + abs(math.sin(progress * math.pi * 4)) * 40 * (1 - progress)
        self.assertAlmostEqual(_at(scene, 125)["b"].y, expected)

    def test_swing_overwrites_rotation_with_defaults(self) -> None:
        scene = _scene(
            {"id": "p", "type": "line", "x": 0, "y": 0, "rotation": 30},
            {"objectId": "p", "type": "swing", "duration": 1000},
        )
        progress = 0.1
        expected = math.sin(progress * math.pi * 2 * 2) * 45
        self.assertAlmostEqual(_at(scene, 100)["p"].rotation, expected)

    def test_wave_with_zero_amplitude_uses_default(self) -> None:
        scene = _scene(
            {"id": "w", "type": "circle", "x": 0, "y": 50},
            {"objectId": "w", "type": "wave", "amplitude": 0, "duration": 1000},
        )
        progress = 0.05
        expected = 50 + math.sin(progress * math.pi * 3 * 2) * 20
        self.assertAlmostEqual(_at(scene, 50)["w"].y, expected)

    def test_appear_and_disappear_follow_eased_progress(self) -> None:
        scene = AnimationScene.from_dict(
            {
                "objects": [{"id": "a", "type": "circle", "x": 0, "y": 0}, {"id": "d", "type": "circle", "x": 0, "y": 0}],
                "actions": [
                    {"objectId": "a", "type": "appear", "duration": 1000, "easing": "easeIn"},
                    {"objectId": "d", "type": "disappear", "duration": 1000, "easing": "easeIn"},
                ],
            }
        )
        live = _at(scene, 500)
        self.assertAlmostEqual(live["a"].opacity, 0.25)
        self.assertAlmostEqual(live["d"].opacity, 0.75)

    def test_reserved_and_unknown_actions_are_no_ops(self) -> None:
        scene = _scene(
            {"id": "s", "type": "circle", "x": 5, "y": 6, "radius": 7, "color": "red"},
            {"objectId": "s", "type": "scale", "toScale": 3, "duration": 100},
            {"objectId": "s", "type": "color", "toColor": "blue", "duration": 100},
            {"objectId": "s", "type": "teleport", "toX": 900, "duration": 100},
        )
        live = _at(scene, 50)
        self.assertEqual(live["s"], scene.objects[0])

    def test_dangling_object_reference_is_ignored(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 1, "y": 1},
            {"objectId": "ghost", "type": "move", "toX": 50, "duration": 100},
        )
        self.assertEqual(_at(scene, 50)["a"].x, 1.0)

    def test_actions_outside_their_window_do_nothing(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 100, "delay": 500, "duration": 500, "easing": "linear"},
        )
        self.assertEqual(_at(scene, 499)["a"].x, 0.0)
        self.assertAlmostEqual(_at(scene, 500)["a"].x, 0.0)
        self.assertAlmostEqual(_at(scene, 1000)["a"].x, 100.0)
        self.assertEqual(_at(scene, 1001)["a"].x, 0.0)

    def test_progress_is_inclusive_and_clamped(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 1, "delay": 100, "duration": 200},
        )
        action = scene.actions[0]
        self.assertIsNone(action_progress(action, 99))
        self.assertEqual(action_progress(action, 100), 0.0)
        self.assertEqual(action_progress(action, 300), 1.0)
        self.assertIsNone(action_progress(action, 301))

    def test_infinite_repeat_wraps_elapsed(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 100, "duration": 1000, "easing": "linear", "repeat": True},
        )
        self.assertAlmostEqual(effective_elapsed(scene.actions[0], 5250), 250.0)
        self.assertAlmostEqual(_at(scene, 5250)["a"].x, 25.0)

    def test_counted_repeat_stops_wrapping_after_n_cycles(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 100, "duration": 1000, "easing": "linear", "repeat": 2},
        )
        action = scene.actions[0]
        self.assertAlmostEqual(effective_elapsed(action, 1500), 500.0)
        self.assertAlmostEqual(effective_elapsed(action, 2500), 2500.0)
        self.assertIsNone(action_progress(action, 2500))

    def test_negative_repeat_does_not_wrap_elapsed(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 100, "duration": 1000, "easing": "linear", "repeat": -1},
        )
        self.assertAlmostEqual(effective_elapsed(scene.actions[0], 1500), 1500.0)
        self.assertIsNone(action_progress(scene.actions[0], 1500))

    def test_authored_scene_is_never_mutated(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 100, "duration": 1000, "easing": "linear"},
        )
        _at(scene, 800)
        self.assertEqual(scene.objects[0].x, 0.0)

    def test_later_actions_on_same_property_win(self) -> None:
        scene = _scene(
            {"id": "a", "type": "circle", "x": 0, "y": 0},
            {"objectId": "a", "type": "move", "toX": 100, "duration": 1000, "easing": "linear"},
            {"objectId": "a", "type": "move", "toX": -100, "duration": 1000, "easing": "linear"},
        )
        self.assertAlmostEqual(_at(scene, 500)["a"].x, -50.0)


if __name__ == "__main__":
    unittest.main()
