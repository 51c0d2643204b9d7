from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FrameRateController:
    """Paces a frame loop at a fixed cadence and counts frames that ran late."""

    target_fps: int
    late_frames: int = 0
    _next_frame_at: float | None = None

    def __post_init__(self) -> None:
        if self.target_fps <= 0:
            raise ValueError("target_fps must be > 0")

    @property
    def frame_interval_s(self) -> float:
        return 1.0 / float(self.target_fps)

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / float(self.target_fps)

    def time_until_next_frame(self, now: float) -> float:
        if self._next_frame_at is None:
            return 0.0
        return max(0.0, self._next_frame_at - now)

    def mark_frame(self, now: float) -> None:
        if self._next_frame_at is None:
            self._next_frame_at = now + self.frame_interval_s
            return
        self._next_frame_at += self.frame_interval_s
        if self._next_frame_at <= now:
            # Resynchronize after a stall instead of bursting to catch up.
            self.late_frames += 1
            self._next_frame_at = now + self.frame_interval_s

    def reset(self) -> None:
        self._next_frame_at = None
