from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import threading
from typing import Callable, Optional

from lessonviz_core.render.scene_renderer import SceneRenderer
from lessonviz_scene.model import AnimationObject, AnimationScene
from lessonviz_scene.timeline import LiveState, advance_live_state, reset_live_state

from .scheduler import FrameScheduler, ScheduledHandle
from .surface import AnimationSurface

LOGGER = logging.getLogger(__name__)

DEFAULT_LOOP_PAUSE_MS = 1000.0


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSING = "pausing"


@dataclass(frozen=True)
class PlaybackStatus:
    is_playing: bool
    current_scene: AnimationScene | None


StatusListener = Callable[[PlaybackStatus], None]


class PlaybackEngine:
    """Drives one scene at a time onto one surface through a frame scheduler.

    Every scheduled callback carries the generation it was created in; a
    callback from an older generation is ignored, so a superseded loop can
    never draw again even if its cancellation raced with the scheduler.
    """

    def __init__(
        self,
        surface: AnimationSurface | None,
        scheduler: FrameScheduler,
        *,
        renderer: SceneRenderer | None = None,
        loop_pause_ms: float = DEFAULT_LOOP_PAUSE_MS,
    ) -> None:
        if loop_pause_ms < 0:
            raise ValueError("loop_pause_ms must be >= 0")
        self._surface = surface
        self._scheduler = scheduler
        self._renderer = renderer or SceneRenderer()
        self._loop_pause_ms = float(loop_pause_ms)
        self._lock = threading.RLock()
        self._state = PlaybackState.IDLE
        self._scene: AnimationScene | None = None
        self._live: LiveState = {}
        self._epoch_ms: Optional[float] = None
        self._handle: ScheduledHandle | None = None
        self._generation = 0
        self._loop_count = 0
        self._frame_count = 0
        self._last_error: Exception | None = None
        self._listeners: list[StatusListener] = []

    @property
    def surface(self) -> AnimationSurface | None:
        return self._surface

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is not PlaybackState.IDLE

    @property
    def current_scene(self) -> AnimationScene | None:
        return self._scene

    @property
    def status(self) -> PlaybackStatus:
        with self._lock:
            return PlaybackStatus(is_playing=self.is_playing, current_scene=self._scene)

    @property
    def loop_count(self) -> int:
        return self._loop_count

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def live_objects(self) -> dict[str, AnimationObject]:
        with self._lock:
            return {object_id: obj.copy() for object_id, obj in self._live.items()}

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def play(self, scene: AnimationScene) -> None:
        before = self.status
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            surface = self._surface
            if surface is None or not surface.available:
                LOGGER.debug("play() ignored: no drawing surface available")
                self._state = PlaybackState.IDLE
                self._live = {}
            else:
                self._scene = scene.clone()
                self._live = reset_live_state(self._scene)
                self._epoch_ms = None
                self._loop_count = 0
                self._last_error = None
                self._state = PlaybackState.PLAYING
                self._request_frame(self._generation)
        self._notify_if_changed(before)

    def stop(self) -> None:
        before = self.status
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self._state = PlaybackState.IDLE
            self._epoch_ms = None
        self._notify_if_changed(before)

    def attach_surface(self, surface: AnimationSurface | None) -> None:
        """Swap the drawing surface; any running loop is stopped first."""
        self.stop()
        with self._lock:
            self._surface = surface

    def _request_frame(self, generation: int) -> None:
        self._handle = self._scheduler.request_frame(lambda ts: self._on_frame(generation, ts))

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _on_frame(self, generation: int, timestamp_ms: float) -> None:
        before = self.status
        with self._lock:
            if generation != self._generation or self._state is not PlaybackState.PLAYING:
                return
            self._handle = None
            scene = self._scene
            surface = self._surface
            if scene is None or surface is None or not surface.available:
                self._halt()
            else:
                if self._epoch_ms is None:
                    self._epoch_ms = timestamp_ms
                elapsed = timestamp_ms - self._epoch_ms
                try:
                    advance_live_state(scene, self._live, elapsed)
                    frame = self._renderer.render(scene, self._live.values(), surface.width, surface.height)
                    surface.present(frame, timestamp_ms=timestamp_ms)
                except Exception as exc:  # noqa: BLE001
                    self._last_error = exc
                    LOGGER.exception("playback frame failed: %s", exc)
                    self._halt()
                else:
                    self._frame_count += 1
                    self._continue(scene, elapsed, generation)
        self._notify_if_changed(before)

    def _continue(self, scene: AnimationScene, elapsed: float, generation: int) -> None:
        if scene.has_repeating_actions() or elapsed < scene.max_duration():
            self._request_frame(generation)
            return
        self._state = PlaybackState.PAUSING
        self._handle = self._scheduler.call_later(self._loop_pause_ms, lambda: self._on_pause_elapsed(generation))

    def _on_pause_elapsed(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state is not PlaybackState.PAUSING:
                return
            self._handle = None
            if self._scene is None:
                self._halt()
                return
            self._live = reset_live_state(self._scene)
            self._epoch_ms = None
            self._loop_count += 1
            self._state = PlaybackState.PLAYING
            self._request_frame(generation)

    def _halt(self) -> None:
        self._cancel_pending()
        self._generation += 1
        self._state = PlaybackState.IDLE

    def _notify_if_changed(self, before: PlaybackStatus) -> None:
        after = self.status
        if after.is_playing == before.is_playing and after.current_scene is before.current_scene:
            return
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(after)
