from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from PIL import Image

from .base import DisplayFrame, RenderTarget

LOGGER = logging.getLogger(__name__)


class ImageSequenceTarget(RenderTarget):
    """Writes presented frames to disk as numbered PNGs or a single looping GIF."""

    def __init__(self, output: str | Path, image_format: Literal["png", "gif"] = "png", every_nth: int = 1) -> None:
        if image_format not in ("png", "gif"):
            raise ValueError(f"unsupported image format: {image_format}")
        if every_nth <= 0:
            raise ValueError("every_nth must be > 0")
        self._output = Path(output)
        self._format = image_format
        self._every_nth = every_nth
        self._seen = 0
        self._frames: list[tuple[Image.Image, float]] = []
        self._written: list[Path] = []
        self._started = False

    @property
    def written(self) -> list[Path]:
        return list(self._written)

    def start(self) -> None:
        if self._format == "png":
            self._output.mkdir(parents=True, exist_ok=True)
        else:
            self._output.parent.mkdir(parents=True, exist_ok=True)
        self._frames.clear()
        self._seen = 0
        self._started = True

    def present_frame(self, frame: DisplayFrame) -> None:
        if not self._started:
            raise RuntimeError("image sequence target not started")
        index = self._seen
        self._seen += 1
        if index % self._every_nth != 0:
            return
        image = Image.fromarray(frame.rgba.contiguous().numpy())
        if self._format == "png":
            path = self._output / f"frame_{len(self._written):05d}.png"
            image.save(path)
            self._written.append(path)
            return
        self._frames.append((image.convert("RGB"), frame.timestamp_ms))

    def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        if self._format != "gif" or not self._frames:
            return
        images = [image for image, _ in self._frames]
        durations = _frame_durations_ms([ts for _, ts in self._frames])
        images[0].save(
            self._output,
            save_all=True,
            append_images=images[1:],
            duration=durations,
            loop=0,
        )
        self._written.append(self._output)
        LOGGER.info("wrote %d frames to %s", len(images), self._output)
        self._frames.clear()


def _frame_durations_ms(timestamps_ms: list[float]) -> list[int]:
    if len(timestamps_ms) < 2:
        return [100] * len(timestamps_ms)
    gaps = [max(10, int(round(b - a))) for a, b in zip(timestamps_ms, timestamps_ms[1:])]
    return gaps + [gaps[-1]]
