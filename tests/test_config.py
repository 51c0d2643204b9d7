from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lessonviz_core.core.config import EngineConfig, fit_surface_size, load_config


class EngineConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = EngineConfig()
        self.assertEqual(config.fps, 60)
        self.assertEqual(config.loop_pause_ms, 1000.0)
        self.assertEqual((config.max_width, config.max_height), (500, 350))

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            EngineConfig(fps=0)
        with self.assertRaises(ValueError):
            EngineConfig(loop_pause_ms=-5)
        with self.assertRaises(ValueError):
            EngineConfig(max_width=0)

    def test_from_env_overrides_and_ignores_garbage(self) -> None:
        env = {
            "LESSONVIZ_FPS": "30",
            "LESSONVIZ_LOOP_PAUSE_MS": "250",
            "LESSONVIZ_MAX_WIDTH": "abc",
            "LESSONVIZ_MAX_HEIGHT": "-4",
            "LESSONVIZ_FONT_FAMILY": "DejaVu Sans",
        }
        with mock.patch.dict(os.environ, env, clear=False):
            config = EngineConfig.from_env()
        self.assertEqual(config.fps, 30)
        self.assertEqual(config.loop_pause_ms, 250.0)
        self.assertEqual(config.max_width, 500)
        self.assertEqual(config.max_height, 350)
        self.assertEqual(config.font_family, "DejaVu Sans")

    def test_from_env_keeps_base_when_unset(self) -> None:
        base = EngineConfig(fps=24)
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(EngineConfig.from_env(base=base), base)

    def test_fit_surface_size_pads_and_caps(self) -> None:
        self.assertEqual(fit_surface_size(420, 300), (400, 240))
        self.assertEqual(fit_surface_size(2000, 2000), (500, 350))
        self.assertEqual(fit_surface_size(10, 20), (1, 1))
        self.assertEqual(EngineConfig(max_width=300, max_height=200).fit_surface_size(1000, 1000), (300, 200))

    def test_load_config_reads_engine_table(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "lessonviz.toml"
            path.write_text('[engine]\nfps = 24\nloop_pause_ms = 500\nfont_family = "Arial"\n', encoding="utf-8")
            config = load_config(path)
        self.assertEqual(config.fps, 24)
        self.assertEqual(config.loop_pause_ms, 500.0)
        self.assertEqual(config.font_family, "Arial")

    def test_load_config_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing.toml"
            with self.assertRaises(FileNotFoundError):
                load_config(missing)
            bad = Path(tmp) / "bad.toml"
            bad.write_text('fps = "fast"\n', encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(bad)


if __name__ == "__main__":
    unittest.main()
