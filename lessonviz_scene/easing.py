from __future__ import annotations

import math
from typing import Callable

EasingFn = Callable[[float], float]

DEFAULT_EASING = "easeInOut"


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2.0 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return -1.0 + (4.0 - 2.0 * t) * t


def bounce(t: float) -> float:
    """Bounce-ease-out: decaying parabolic hops settling at 1."""
    if t < 1.0 / 2.75:
        return 7.5625 * t * t
    if t < 2.0 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


def elastic(t: float) -> float:
    if t == 0:
        return 0.0
    if t == 1:
        return 1.0
    return -math.pow(2.0, 10.0 * (t - 1.0)) * math.sin((t - 1.1) * 5.0 * math.pi)


EASINGS: dict[str, EasingFn] = {
    "linear": linear,
    "easeIn": ease_in,
    "easeOut": ease_out,
    "easeInOut": ease_in_out,
    "bounce": bounce,
    "elastic": elastic,
}


def resolve_easing(name: str | None) -> EasingFn:
    """Unknown or missing names fall back to easeInOut."""
    if name is None:
        return EASINGS[DEFAULT_EASING]
    return EASINGS.get(name, EASINGS[DEFAULT_EASING])
