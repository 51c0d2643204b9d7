from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time

import numpy as np
import torch

from lessonviz_core.targets.base import DisplayFrame, RenderTarget

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FramePresented:
    revision: int
    width: int
    height: int
    ts_ns: int


class AnimationSurface:
    """RGBA255 drawing surface owned by one presentation shell.

    Frames are committed whole; every commit bumps the revision and is
    forwarded to the attached render targets.
    """

    def __init__(self, width: int, height: int, background: tuple[int, int, int, int] = (0, 0, 0, 255)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("surface width and height must be > 0")
        self._lock = threading.Lock()
        self._background = background
        self._width = width
        self._height = height
        self._matrix = _blank(width, height, background)
        self._revision = 0
        self._targets: list[RenderTarget] = []
        self._closed = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return (self._width, self._height)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def available(self) -> bool:
        return not self._closed

    def attach_target(self, target: RenderTarget) -> None:
        target.start()
        with self._lock:
            self._targets.append(target)

    def detach_target(self, target: RenderTarget) -> None:
        with self._lock:
            if target not in self._targets:
                return
            self._targets.remove(target)
        target.stop()

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("surface width and height must be > 0")
        with self._lock:
            if (width, height) == (self._width, self._height):
                return
            self._width = width
            self._height = height
            self._matrix = _blank(width, height, self._background)
        LOGGER.debug("surface resized to %dx%d", width, height)

    def present(self, rgba: np.ndarray, timestamp_ms: float = 0.0) -> FramePresented:
        if self._closed:
            raise RuntimeError("surface is closed")
        expected = (self._height, self._width, 4)
        if rgba.shape != expected:
            raise ValueError(f"frame has invalid shape: {rgba.shape} expected {expected}")
        if rgba.dtype != np.uint8:
            raise ValueError(f"frame must be uint8, got {rgba.dtype}")
        frame_tensor = torch.from_numpy(np.ascontiguousarray(rgba)).clone()
        with self._lock:
            self._matrix = frame_tensor
            self._revision += 1
            revision = self._revision
            targets = list(self._targets)
        frame = DisplayFrame(
            revision=revision,
            width=self._width,
            height=self._height,
            rgba=frame_tensor,
            timestamp_ms=timestamp_ms,
        )
        for target in targets:
            target.present_frame(frame)
        return FramePresented(revision=revision, width=frame.width, height=frame.height, ts_ns=time.time_ns())

    def read_snapshot(self) -> torch.Tensor:
        """Safe read copy for external consumers."""
        with self._lock:
            return self._matrix.clone()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            targets = list(self._targets)
            self._targets.clear()
        for target in targets:
            target.stop()


def _blank(width: int, height: int, background: tuple[int, int, int, int]) -> torch.Tensor:
    bg = torch.tensor(background, dtype=torch.uint8).view(1, 1, 4)
    return bg.expand(height, width, 4).clone()
