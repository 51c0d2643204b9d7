from __future__ import annotations

import logging
from typing import Any, Mapping

from .model import AnimationScene
from .sources import generate_default_scene, parse_scene_from_text, scene_from_payload

LOGGER = logging.getLogger(__name__)

SCENE_EVENT_TYPES = frozenset({"animation_scene"})
VISUAL_EVENT_TYPES = frozenset({"visual", "visual_cue", "visual_update"})
_TEXT_FIELDS = ("full_text", "content", "message")


def scene_for_event(event: Mapping[str, Any]) -> AnimationScene | None:
    """Pick the scene an incoming stream event asks for.

    ``animation_scene`` events carry the scene itself, ``visual`` events carry a
    concept keyword, and anything else is searched for an embedded scene with a
    keyword fallback. Returns None when the event has nothing to show.
    """
    event_type = event.get("type")
    if event_type in SCENE_EVENT_TYPES:
        return scene_from_payload(event.get("scene"))

    if event_type in VISUAL_EVENT_TYPES:
        concept = _first_text(event, ("visual_type", "content", "action", "concept"))
        if concept is None:
            LOGGER.debug("visual event without a concept: %r", event)
            return None
        return generate_default_scene(concept, _text(event.get("description")) or "")

    text = _first_text(event, _TEXT_FIELDS)
    if text is None:
        return None
    scene = parse_scene_from_text(text)
    if scene is not None:
        return scene
    concept = _first_text(event, ("concept", "visual_type")) or text
    return generate_default_scene(concept, _text(event.get("description")) or "")


def _first_text(event: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = _text(event.get(key))
        if value:
            return value
    return None


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
