from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from lessonviz_core.core import EngineConfig, ManualFrameScheduler, load_config
from lessonviz_core.targets import HeadlessTarget, ImageSequenceTarget, RenderTarget
from lessonviz_scene import (
    AnimationScene,
    generate_default_scene,
    parse_scene_from_text,
    scale_scene_to_surface,
    scene_from_payload,
)
from lessonviz_ui import DynamicVisualCanvas

LOGGER = logging.getLogger("lessonviz")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="lessonviz")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--config", type=Path, default=None, help="TOML file with an [engine] table.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Play a scene headlessly and write its frames.")
    _add_source_args(render)
    render.add_argument("--output", type=Path, default=None, help="PNG directory or .gif path. Omit to only count frames.")
    render.add_argument("--format", choices=["png", "gif"], default=None, help="Default: inferred from --output.")
    render.add_argument("--duration-ms", type=float, default=3000.0)
    render.add_argument("--fps", type=int, default=None, help="Default: engine config fps.")
    render.add_argument("--every-nth", type=int, default=1, help="Keep every n-th frame.")

    describe = sub.add_parser("describe", help="Print the resolved, scaled scene as JSON.")
    _add_source_args(describe)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config) if args.config is not None else EngineConfig()
    config = EngineConfig.from_env(base=config)

    scene = _resolve_scene(args)
    if scene is None:
        print("no scene could be resolved from the given source", file=sys.stderr)
        return 1

    if args.command == "describe":
        scaled = scale_scene_to_surface(scene, args.width, args.height)
        print(json.dumps(scaled.to_dict(), indent=2, sort_keys=True))
        return 0

    if args.command == "render":
        fps = args.fps if args.fps is not None else config.fps
        if fps <= 0:
            raise ValueError("--fps must be > 0")
        if args.duration_ms <= 0:
            raise ValueError("--duration-ms must be > 0")
        target = _build_target(args.output, args.format, args.every_nth)
        scheduler = ManualFrameScheduler(frame_interval_ms=1000.0 / float(fps))
        canvas = DynamicVisualCanvas(
            scheduler,
            config=config,
            targets=(target,),
            surface_size=(args.width, args.height),
        )
        try:
            canvas.show_scene(scene)
            scheduler.advance(args.duration_ms)
        finally:
            canvas.close()
        error = canvas.engine.last_error
        if error is not None:
            print(f"render failed: {error}", file=sys.stderr)
            return 1
        written = target.written if isinstance(target, ImageSequenceTarget) else []
        print(
            f"render complete: frames={canvas.engine.frame_count} loops={canvas.engine.loop_count} "
            f"files={len(written)}"
        )
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_source_args(cmd: argparse.ArgumentParser) -> None:
    source = cmd.add_mutually_exclusive_group(required=True)
    source.add_argument("--scene-json", type=Path, help="JSON file holding a scene object.")
    source.add_argument("--text-file", type=Path, help="Free text with an embedded scene JSON block.")
    source.add_argument("--concept", help="Concept keyword for a canned scene.")
    cmd.add_argument("--description", default="")
    cmd.add_argument("--width", type=int, default=400)
    cmd.add_argument("--height", type=int, default=300)


def _resolve_scene(args: argparse.Namespace) -> AnimationScene | None:
    if args.scene_json is not None:
        with args.scene_json.open("r", encoding="utf-8") as f:
            return scene_from_payload(json.load(f))
    if args.text_file is not None:
        text = args.text_file.read_text(encoding="utf-8")
        scene = parse_scene_from_text(text)
        if scene is None:
            LOGGER.info("no scene found in %s; using the default scene", args.text_file)
            return generate_default_scene(args.description or args.text_file.stem, args.description)
        return scene
    return generate_default_scene(args.concept, args.description)


def _build_target(output: Path | None, image_format: str | None, every_nth: int) -> RenderTarget:
    if output is None:
        return HeadlessTarget()
    if image_format is None:
        image_format = "gif" if output.suffix.lower() == ".gif" else "png"
    return ImageSequenceTarget(output, image_format=image_format, every_nth=every_nth)


if __name__ == "__main__":
    raise SystemExit(main())
