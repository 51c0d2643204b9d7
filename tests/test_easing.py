from __future__ import annotations

import unittest

from lessonviz_scene.easing import EASINGS, bounce, ease_in, ease_in_out, ease_out, elastic, linear, resolve_easing


class EasingTests(unittest.TestCase):
    def test_every_easing_is_pinned_at_endpoints(self) -> None:
        for name, fn in EASINGS.items():
            with self.subTest(easing=name):
                self.assertAlmostEqual(fn(0.0), 0.0, places=9)
                self.assertAlmostEqual(fn(1.0), 1.0, places=9)

    def test_polynomial_easings_match_closed_forms(self) -> None:
        self.assertAlmostEqual(linear(0.3), 0.3)
        self.assertAlmostEqual(ease_in(0.5), 0.25)
        self.assertAlmostEqual(ease_out(0.5), 0.75)
        self.assertAlmostEqual(ease_in_out(0.25), 0.125)
        self.assertAlmostEqual(ease_in_out(0.75), 0.875)
        self.assertAlmostEqual(ease_in_out(0.5), 0.5)

    def test_bounce_segments(self) -> None:
        self.assertAlmostEqual(bounce(0.2), 7.5625 * 0.2 * 0.2)
        t = 0.5
        shifted = t - 1.5 / 2.75
        self.assertAlmostEqual(bounce(t), 7.5625 * shifted * shifted + 0.75)
        t = 0.95
        shifted = t - 2.625 / 2.75
        self.assertAlmostEqual(bounce(t), 7.5625 * shifted * shifted + 0.984375)

    def test_elastic_overshoots_inside_the_interval(self) -> None:
        samples = [elastic(i / 100.0) for i in range(1, 100)]
        self.assertTrue(any(v < 0.0 for v in samples) or any(v > 1.0 for v in samples))

    def test_unknown_or_missing_name_falls_back_to_ease_in_out(self) -> None:
        self.assertIs(resolve_easing(None), ease_in_out)
        self.assertIs(resolve_easing("wobble"), ease_in_out)
        self.assertIs(resolve_easing("linear"), linear)
        self.assertIs(resolve_easing("easeOut"), ease_out)


if __name__ == "__main__":
    unittest.main()
