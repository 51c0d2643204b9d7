from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from lessonviz_core.core.config import EngineConfig
from lessonviz_core.core.playback import PlaybackEngine, PlaybackStatus
from lessonviz_core.core.scheduler import FrameScheduler
from lessonviz_core.core.surface import AnimationSurface
from lessonviz_core.render.scene_renderer import SceneRenderer
from lessonviz_core.targets.base import RenderTarget
from lessonviz_scene.model import AnimationScene
from lessonviz_scene.scaler import scale_scene_to_surface
from lessonviz_scene.sources import generate_default_scene
from lessonviz_scene.stream import scene_for_event

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Visual Demonstration"
INITIAL_SURFACE_SIZE = (400, 300)


class DynamicVisualCanvas:
    """Presentation shell: owns a surface, keeps the authored source, and replays it scaled to fit.

    The source is either an explicit scene or a visual-type keyword plus a
    description. Every play path re-scales the authored scene to the current
    surface size; a running scene is never mutated in place.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        *,
        config: EngineConfig | None = None,
        targets: tuple[RenderTarget, ...] = (),
        surface_size: tuple[int, int] = INITIAL_SURFACE_SIZE,
    ) -> None:
        self._config = config or EngineConfig()
        self._surface = AnimationSurface(*surface_size)
        for target in targets:
            self._surface.attach_target(target)
        self._engine = PlaybackEngine(
            self._surface,
            scheduler,
            renderer=SceneRenderer(font_family=self._config.font_family),
            loop_pause_ms=self._config.loop_pause_ms,
        )
        self._scene: AnimationScene | None = None
        self._visual_type: str | None = None
        self._description = ""

    @property
    def engine(self) -> PlaybackEngine:
        return self._engine

    @property
    def surface(self) -> AnimationSurface:
        return self._surface

    @property
    def status(self) -> PlaybackStatus:
        return self._engine.status

    @property
    def has_source(self) -> bool:
        return self._scene is not None or bool(self._visual_type)

    @property
    def title_text(self) -> str:
        current = self._engine.current_scene
        if current is not None and current.title:
            return current.title
        return self._description or DEFAULT_TITLE

    @property
    def description_text(self) -> str:
        current = self._engine.current_scene
        if current is not None and current.description:
            return current.description
        return self._description

    def subscribe(self, listener: Callable[[PlaybackStatus], None]) -> Callable[[], None]:
        return self._engine.subscribe(listener)

    def show_scene(self, scene: AnimationScene | None, *, description: str = "") -> None:
        self._scene = scene
        self._description = description
        if scene is not None:
            self._visual_type = None
        self.replay()

    def show_visual(self, visual_type: str, *, description: str = "") -> None:
        self._scene = None
        self._visual_type = visual_type
        self._description = description
        self.replay()

    def handle_event(self, event: Mapping[str, Any]) -> bool:
        """Route a stream event to a scene; returns False when the event carries nothing to play."""
        scene = scene_for_event(event)
        if scene is None:
            return False
        description = event.get("description")
        self.show_scene(scene, description=description if isinstance(description, str) else "")
        return True

    def replay(self) -> None:
        scene = self._resolve_source()
        if scene is None:
            LOGGER.debug("replay requested with nothing to show")
            return
        self._engine.play(scale_scene_to_surface(scene, self._surface.width, self._surface.height))

    def toggle(self) -> None:
        if self._engine.is_playing:
            self._engine.stop()
        else:
            self.replay()

    def resize_container(self, container_width: float, container_height: float) -> tuple[int, int]:
        width, height = self._config.fit_surface_size(container_width, container_height)
        if (width, height) == self._surface.size:
            return (width, height)
        # Frames rendered for the old size must not reach the resized surface.
        self._engine.stop()
        self._surface.resize(width, height)
        if self.has_source:
            self.replay()
        return (width, height)

    def close(self) -> None:
        self._engine.stop()
        self._surface.close()

    def _resolve_source(self) -> AnimationScene | None:
        if self._scene is not None:
            return self._scene
        if self._visual_type:
            return generate_default_scene(self._visual_type, self._description)
        return None
