from __future__ import annotations

from dataclasses import dataclass
import itertools
import logging
import threading
import time
from typing import Callable, Literal, Optional, Protocol

from .frame_rate_controller import FrameRateController

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
TimerCallback = Callable[[], None]


@dataclass(frozen=True)
class ScheduledHandle:
    handle_id: int
    kind: Literal["frame", "timer"]


class FrameScheduler(Protocol):
    """Host redraw mechanism the playback engine schedules itself on."""

    def now_ms(self) -> float:
        ...

    def request_frame(self, callback: FrameCallback) -> ScheduledHandle:
        ...

    def call_later(self, delay_ms: float, callback: TimerCallback) -> ScheduledHandle:
        ...

    def cancel(self, handle: ScheduledHandle | None) -> None:
        ...


class _CallbackQueue:
    """Pending frame callbacks and timers, shared by both scheduler flavours."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._frames: dict[int, FrameCallback] = {}
        self._timers: dict[int, tuple[float, TimerCallback]] = {}

    def add_frame(self, callback: FrameCallback) -> ScheduledHandle:
        handle = ScheduledHandle(next(self._ids), "frame")
        self._frames[handle.handle_id] = callback
        return handle

    def add_timer(self, due_ms: float, callback: TimerCallback) -> ScheduledHandle:
        handle = ScheduledHandle(next(self._ids), "timer")
        self._timers[handle.handle_id] = (due_ms, callback)
        return handle

    def remove(self, handle: ScheduledHandle | None) -> None:
        if handle is None:
            return
        if handle.kind == "frame":
            self._frames.pop(handle.handle_id, None)
        else:
            self._timers.pop(handle.handle_id, None)

    def pop_due_timer(self, now_ms: float) -> TimerCallback | None:
        due = [(due_ms, handle_id) for handle_id, (due_ms, _) in self._timers.items() if due_ms <= now_ms]
        if not due:
            return None
        _, handle_id = min(due)
        return self._timers.pop(handle_id)[1]

    def take_frames(self) -> list[FrameCallback]:
        callbacks = list(self._frames.values())
        self._frames.clear()
        return callbacks

    def next_timer_due(self) -> float | None:
        if not self._timers:
            return None
        return min(due_ms for due_ms, _ in self._timers.values())

    def has_frames(self) -> bool:
        return bool(self._frames)

    def pending(self) -> int:
        return len(self._frames) + len(self._timers)


class ManualFrameScheduler:
    """Deterministic scheduler driven by an explicit fake clock.

    Each ``step()`` advances the clock by one frame interval, fires the timers
    that came due, then runs the frame callbacks requested before the step.
    """

    def __init__(self, frame_interval_ms: float = 1000.0 / 60.0, start_ms: float = 0.0) -> None:
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be > 0")
        self.frame_interval_ms = float(frame_interval_ms)
        self._now = float(start_ms)
        self._queue = _CallbackQueue()
        self.frames_run = 0

    def now_ms(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> ScheduledHandle:
        return self._queue.add_frame(callback)

    def call_later(self, delay_ms: float, callback: TimerCallback) -> ScheduledHandle:
        return self._queue.add_timer(self._now + max(0.0, float(delay_ms)), callback)

    def cancel(self, handle: ScheduledHandle | None) -> None:
        self._queue.remove(handle)

    def pending_count(self) -> int:
        return self._queue.pending()

    def step(self) -> None:
        self._now += self.frame_interval_ms
        self._run_due_timers()
        for callback in self._queue.take_frames():
            callback(self._now)
            self.frames_run += 1

    def advance(self, duration_ms: float) -> None:
        target = self._now + duration_ms
        while self._now + self.frame_interval_ms <= target + 1e-9:
            self.step()
        if target > self._now:
            self._now = target
            self._run_due_timers()

    def _run_due_timers(self) -> None:
        while True:
            callback = self._queue.pop_due_timer(self._now)
            if callback is None:
                return
            callback()


class ThreadedFrameScheduler:
    """Real-clock scheduler: one daemon thread runs every callback at ``fps`` cadence."""

    def __init__(self, fps: int = 60) -> None:
        self._rate = FrameRateController(target_fps=fps)
        self._queue = _CallbackQueue()
        self._lock = threading.Lock()
        self._wake = threading.Condition(self._lock)
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._origin = time.perf_counter()
        self._last_error: Exception | None = None

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def late_frames(self) -> int:
        return self._rate.late_frames

    def now_ms(self) -> float:
        return (time.perf_counter() - self._origin) * 1000.0

    def request_frame(self, callback: FrameCallback) -> ScheduledHandle:
        with self._wake:
            handle = self._queue.add_frame(callback)
            self._wake.notify_all()
        return handle

    def call_later(self, delay_ms: float, callback: TimerCallback) -> ScheduledHandle:
        with self._wake:
            handle = self._queue.add_timer(self.now_ms() + max(0.0, float(delay_ms)), callback)
            self._wake.notify_all()
        return handle

    def cancel(self, handle: ScheduledHandle | None) -> None:
        with self._lock:
            self._queue.remove(handle)

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._running.set()
        self._rate.reset()
        self._thread = threading.Thread(target=self._run, name="lessonviz-frames", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running.clear()
        with self._wake:
            self._wake.notify_all()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _run(self) -> None:
        while self._running.is_set():
            try:
                self._tick()
            except Exception as exc:  # noqa: BLE001
                self._last_error = exc
                LOGGER.exception("frame scheduler callback failed: %s", exc)

    def _tick(self) -> None:
        with self._wake:
            wait_s = self._rate.time_until_next_frame(time.perf_counter())
            if self._queue.pending() == 0:
                wait_s = max(wait_s, 0.05)
            else:
                next_due = self._queue.next_timer_due()
                if next_due is not None and not self._queue.has_frames():
                    wait_s = max(wait_s, (next_due - self.now_ms()) / 1000.0)
            if wait_s > 0:
                self._wake.wait(timeout=wait_s)
            if not self._running.is_set():
                return
            now = self.now_ms()
            timers: list[TimerCallback] = []
            while True:
                callback = self._queue.pop_due_timer(now)
                if callback is None:
                    break
                timers.append(callback)
        for timer in timers:
            timer()
        with self._lock:
            frames = self._queue.take_frames()
        if not frames:
            return
        self._rate.mark_frame(time.perf_counter())
        now = self.now_ms()
        for callback in frames:
            callback(now)
