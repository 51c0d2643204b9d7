from __future__ import annotations

import json
import logging
import re
from typing import Any

from .errors import SceneFormatError
from .model import AnimationScene
from .presets import CANNED_SCENES, generic_scene

LOGGER = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\n?([\s\S]*?)\n?```")
_OBJECTS_BLOCK = re.compile(r"\{[\s\S]*\"objects\"[\s\S]*\}")


def scene_from_payload(payload: Any) -> AnimationScene | None:
    """Use an already-structured scene as-is; mappings only get structural checks."""
    if isinstance(payload, AnimationScene):
        return payload
    if payload is None:
        return None
    try:
        return AnimationScene.from_dict(payload)
    except SceneFormatError as exc:
        LOGGER.warning("rejecting scene payload: %s", exc)
        return None


def parse_scene_from_text(text: str | None) -> AnimationScene | None:
    """Extract an embedded scene from free text, or None when there is no usable one."""
    if not text:
        return None
    match = _FENCED_JSON.search(text)
    if match is not None:
        raw = match.group(1)
    else:
        match = _OBJECTS_BLOCK.search(text)
        if match is None:
            return None
        raw = match.group(0)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        LOGGER.warning("failed to parse animation JSON: %s", exc)
        return None
    try:
        return AnimationScene.from_dict(data)
    except SceneFormatError as exc:
        LOGGER.warning("embedded animation JSON is not a scene: %s", exc)
        return None


def generate_default_scene(concept: str, description: str = "") -> AnimationScene:
    """Canned scene for a concept keyword; never returns None."""
    wanted = (concept or "").lower()
    for triggers, factory in CANNED_SCENES:
        if any(trigger in wanted for trigger in triggers):
            return factory(description)
    LOGGER.debug("no canned scene for concept %r; using generic scene", concept)
    return generic_scene(concept, description)
