from lessonviz_scene.easing import EASINGS, resolve_easing
from lessonviz_scene.errors import SceneFormatError
from lessonviz_scene.model import (
    ActionKind,
    AnimationAction,
    AnimationObject,
    AnimationScene,
    ObjectKind,
    Point,
    Repeat,
    SceneLabel,
)
from lessonviz_scene.scaler import compute_scene_scale, scale_scene_to_surface
from lessonviz_scene.sources import generate_default_scene, parse_scene_from_text, scene_from_payload
from lessonviz_scene.stream import scene_for_event
from lessonviz_scene.timeline import advance_live_state, reset_live_state

__all__ = [
    "EASINGS",
    "ActionKind",
    "AnimationAction",
    "AnimationObject",
    "AnimationScene",
    "ObjectKind",
    "Point",
    "Repeat",
    "SceneFormatError",
    "SceneLabel",
    "advance_live_state",
    "compute_scene_scale",
    "generate_default_scene",
    "parse_scene_from_text",
    "reset_live_state",
    "resolve_easing",
    "scale_scene_to_surface",
    "scene_for_event",
    "scene_from_payload",
]
