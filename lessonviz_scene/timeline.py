from __future__ import annotations

import logging
import math
from typing import Callable

from .easing import resolve_easing
from .model import ActionKind, AnimationAction, AnimationObject, AnimationScene

LOGGER = logging.getLogger(__name__)

LiveState = dict[str, AnimationObject]
ActionHandler = Callable[[AnimationAction, AnimationObject, AnimationObject, float, float], None]

DEFAULT_BOUNCE_AMPLITUDE = 30.0
DEFAULT_SWING_AMPLITUDE = 45.0
DEFAULT_SWING_FREQUENCY = 2.0
DEFAULT_WAVE_AMPLITUDE = 20.0
DEFAULT_WAVE_FREQUENCY = 3.0


def reset_live_state(scene: AnimationScene) -> LiveState:
    """Fresh working copies of every authored object, keyed by id (later duplicates win)."""
    live: LiveState = {}
    for obj in scene.objects:
        live[obj.id] = obj.copy()
    return live


def effective_elapsed(action: AnimationAction, elapsed_ms: float) -> float:
    if not action.repeat.active:
        return elapsed_ms
    cycle_ms = action.end
    if cycle_ms <= 0:
        return elapsed_ms
    cycle_index = math.floor(elapsed_ms / cycle_ms)
    if action.repeat.wraps(cycle_index):
        return elapsed_ms % cycle_ms
    return elapsed_ms


def action_progress(action: AnimationAction, elapsed_ms: float) -> float | None:
    """Raw linear progress of an action, or None while it is outside its window."""
    t = effective_elapsed(action, elapsed_ms)
    if t < action.delay or t > action.end:
        return None
    progress = (t - action.delay) / action.duration
    return min(max(progress, 0.0), 1.0)


def advance_live_state(scene: AnimationScene, live: LiveState, elapsed_ms: float) -> None:
    """Apply every action active at ``elapsed_ms`` to ``live``, always starting from authored values."""
    for action in scene.actions:
        progress = action_progress(action, elapsed_ms)
        if progress is None:
            continue
        target = live.get(action.object_id)
        if target is None:
            continue
        baseline = scene.find_object(action.object_id)
        if baseline is None:
            continue
        eased = resolve_easing(action.easing)(progress)
        apply_action(action, target, baseline, progress, eased)


def apply_action(
    action: AnimationAction,
    target: AnimationObject,
    baseline: AnimationObject,
    progress: float,
    eased: float,
) -> None:
    handler = _HANDLERS.get(action.kind, _ignore)
    handler(action, target, baseline, progress, eased)


def _move(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    if action.to_x is not None:
        target.x = baseline.x + (action.to_x - baseline.x) * eased
    if action.to_y is not None:
        target.y = baseline.y + (action.to_y - baseline.y) * eased


def _rotate(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    # to_rotation is a delta added to the authored rotation, not an absolute target.
    if action.to_rotation is not None:
        target.rotation = (baseline.rotation or 0.0) + action.to_rotation * eased


def _fade(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    if action.to_opacity is not None:
        start = 1.0 if baseline.opacity is None else baseline.opacity
        target.opacity = start + (action.to_opacity - start) * eased


def _bounce(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    amplitude = action.amplitude or DEFAULT_BOUNCE_AMPLITUDE
    target.y = baseline.y + abs(math.sin(progress * math.pi * 4.0)) * amplitude * (1.0 - progress)


def _swing(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    amplitude = action.amplitude or DEFAULT_SWING_AMPLITUDE
    frequency = action.frequency or DEFAULT_SWING_FREQUENCY
    target.rotation = math.sin(progress * math.pi * frequency * 2.0) * amplitude


def _wave(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    amplitude = action.amplitude or DEFAULT_WAVE_AMPLITUDE
    frequency = action.frequency or DEFAULT_WAVE_FREQUENCY
    target.y = baseline.y + math.sin(progress * math.pi * frequency * 2.0) * amplitude


def _appear(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    target.opacity = eased


def _disappear(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    target.opacity = 1.0 - eased


def _ignore(action: AnimationAction, target: AnimationObject, baseline: AnimationObject, progress: float, eased: float) -> None:
    # scale, color and unknown kinds are accepted without effect.
    LOGGER.debug("no-op action `%s` for object `%s`", action.type, action.object_id)


_HANDLERS: dict[ActionKind | None, ActionHandler] = {
    ActionKind.MOVE: _move,
    ActionKind.ROTATE: _rotate,
    ActionKind.FADE: _fade,
    ActionKind.BOUNCE: _bounce,
    ActionKind.SWING: _swing,
    ActionKind.WAVE: _wave,
    ActionKind.APPEAR: _appear,
    ActionKind.DISAPPEAR: _disappear,
    ActionKind.SCALE: _ignore,
    ActionKind.COLOR: _ignore,
}
