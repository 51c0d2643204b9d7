from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Any, Literal, Mapping

from .errors import SceneFormatError

LOGGER = logging.getLogger(__name__)

DEFAULT_SCENE_WIDTH = 400.0
DEFAULT_SCENE_HEIGHT = 300.0


class ObjectKind(str, Enum):
    CIRCLE = "circle"
    RECT = "rect"
    LINE = "line"
    TEXT = "text"
    ARROW = "arrow"
    IMAGE = "image"
    PATH = "path"

    @classmethod
    def parse(cls, raw: object) -> "ObjectKind | None":
        try:
            return cls(raw)
        except ValueError:
            return None


class ActionKind(str, Enum):
    MOVE = "move"
    ROTATE = "rotate"
    SCALE = "scale"
    FADE = "fade"
    COLOR = "color"
    APPEAR = "appear"
    DISAPPEAR = "disappear"
    BOUNCE = "bounce"
    SWING = "swing"
    WAVE = "wave"

    @classmethod
    def parse(cls, raw: object) -> "ActionKind | None":
        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Repeat:
    """Repeat policy of an action.

    ``hold`` keeps the scene playing without wrapping the action's clock; it is
    what a negative count means on the wire.
    """

    kind: Literal["never", "infinite", "count", "hold"] = "never"
    times: int = 0

    @classmethod
    def never(cls) -> "Repeat":
        return cls("never", 0)

    @classmethod
    def infinite(cls) -> "Repeat":
        return cls("infinite", 0)

    @classmethod
    def hold(cls, times: int = -1) -> "Repeat":
        return cls("hold", int(times))

    @classmethod
    def count(cls, times: int) -> "Repeat":
        if times == 0:
            return cls.never()
        if times < 0:
            return cls.hold(times)
        return cls("count", int(times))

    @classmethod
    def from_wire(cls, raw: object) -> "Repeat":
        if raw is True:
            return cls.infinite()
        if raw is None or raw is False:
            return cls.never()
        if isinstance(raw, (int, float)):
            if math.isnan(raw) or raw == 0:
                return cls.never()
            if raw < 0:
                return cls.hold(-1 if math.isinf(raw) else math.floor(raw))
            if math.isinf(raw):
                return cls.infinite()
            return cls.count(math.ceil(raw))
        if raw:
            LOGGER.debug("treating non-numeric repeat value as infinite: %r", raw)
            return cls.infinite()
        return cls.never()

    def to_wire(self) -> bool | int:
        if self.kind == "infinite":
            return True
        if self.kind in ("count", "hold"):
            return self.times
        return False

    @property
    def active(self) -> bool:
        return self.kind != "never"

    def wraps(self, cycle_index: int) -> bool:
        if self.kind == "infinite":
            return True
        if self.kind == "count":
            return cycle_index < self.times
        return False


@dataclass
class AnimationObject:
    """Drawable primitive. Authored copies are treated as read-only; live copies are mutated per frame."""

    id: str
    type: str
    x: float
    y: float
    width: float | None = None
    height: float | None = None
    radius: float | None = None
    color: str | None = None
    fill: str | None = None
    stroke: str | None = None
    text: str | None = None
    font_size: float | None = None
    rotation: float | None = None
    opacity: float | None = None
    end_x: float | None = None
    end_y: float | None = None
    points: tuple[Point, ...] | None = None

    @property
    def kind(self) -> ObjectKind | None:
        return ObjectKind.parse(self.type)

    def copy(self) -> "AnimationObject":
        return copy.copy(self)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AnimationObject":
        object_id = raw.get("id")
        if object_id is None or isinstance(object_id, (dict, list, bool)):
            raise SceneFormatError("object is missing an id")
        values: dict[str, Any] = {}
        for attr, key in _OBJECT_NUMBER_FIELDS:
            values[attr] = _opt_float(raw.get(key))
        for attr in ("color", "fill", "stroke", "text"):
            values[attr] = _opt_str(raw.get(attr))
        return cls(
            id=str(object_id),
            type=str(raw.get("type", "")),
            x=_opt_float(raw.get("x")) or 0.0,
            y=_opt_float(raw.get("y")) or 0.0,
            points=_parse_points(raw.get("points")),
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "type": self.type, "x": self.x, "y": self.y}
        for attr, key in _OBJECT_NUMBER_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        for attr in ("color", "fill", "stroke", "text"):
            value = getattr(self, attr)
            if value is not None:
                out[attr] = value
        if self.points is not None:
            out["points"] = [{"x": p.x, "y": p.y} for p in self.points]
        return out


@dataclass(frozen=True)
class AnimationAction:
    object_id: str
    type: str
    duration: float
    delay: float = 0.0
    to_x: float | None = None
    to_y: float | None = None
    to_rotation: float | None = None
    to_scale: float | None = None
    to_opacity: float | None = None
    to_color: str | None = None
    amplitude: float | None = None
    frequency: float | None = None
    easing: str | None = None
    repeat: Repeat = field(default_factory=Repeat.never)

    def __post_init__(self) -> None:
        if not self.duration > 0:
            raise ValueError("action duration must be > 0")

    @property
    def kind(self) -> ActionKind | None:
        return ActionKind.parse(self.type)

    @property
    def end(self) -> float:
        return self.delay + self.duration

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AnimationAction":
        object_id = raw.get("objectId")
        if object_id is None or isinstance(object_id, (dict, list, bool)):
            raise SceneFormatError("action is missing an objectId")
        duration = _opt_float(raw.get("duration"))
        if duration is None or duration <= 0:
            raise SceneFormatError(f"action for `{object_id}` has a non-positive duration")
        values: dict[str, Any] = {}
        for attr, key in _ACTION_NUMBER_FIELDS:
            values[attr] = _opt_float(raw.get(key))
        return cls(
            object_id=str(object_id),
            type=str(raw.get("type", "")),
            duration=duration,
            delay=_opt_float(raw.get("delay")) or 0.0,
            to_color=_opt_str(raw.get("toColor")),
            easing=_opt_str(raw.get("easing")),
            repeat=Repeat.from_wire(raw.get("repeat")),
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"objectId": self.object_id, "type": self.type, "duration": self.duration}
        if self.delay:
            out["delay"] = self.delay
        for attr, key in _ACTION_NUMBER_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        if self.to_color is not None:
            out["toColor"] = self.to_color
        if self.easing is not None:
            out["easing"] = self.easing
        if self.repeat.active:
            out["repeat"] = self.repeat.to_wire()
        return out


@dataclass(frozen=True)
class SceneLabel:
    text: str
    x: float
    y: float
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"text": self.text, "x": self.x, "y": self.y}
        if self.color is not None:
            out["color"] = self.color
        return out


@dataclass(frozen=True)
class AnimationScene:
    """Declarative description of one teaching illustration."""

    title: str
    description: str
    objects: tuple[AnimationObject, ...] = ()
    actions: tuple[AnimationAction, ...] = ()
    background: str | None = None
    width: float | None = None
    height: float | None = None
    labels: tuple[SceneLabel, ...] = ()
    formula: str | None = None

    def base_size(self) -> tuple[float, float]:
        width = self.width if self.width else DEFAULT_SCENE_WIDTH
        height = self.height if self.height else DEFAULT_SCENE_HEIGHT
        return (width, height)

    def find_object(self, object_id: str) -> AnimationObject | None:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None

    def max_duration(self) -> float:
        if not self.actions:
            return 0.0
        return max(action.end for action in self.actions)

    def has_repeating_actions(self) -> bool:
        return any(action.repeat.active for action in self.actions)

    def clone(self) -> "AnimationScene":
        return copy.deepcopy(self)

    @classmethod
    def from_dict(cls, raw: object) -> "AnimationScene":
        if not isinstance(raw, Mapping):
            raise SceneFormatError(f"scene payload must be an object, got {type(raw).__name__}")
        raw_objects = raw.get("objects")
        if not isinstance(raw_objects, list):
            raise SceneFormatError("scene `objects` must be a list")
        raw_actions = raw.get("actions", [])
        if raw_actions is None:
            raw_actions = []
        if not isinstance(raw_actions, list):
            raise SceneFormatError("scene `actions` must be a list")

        objects: list[AnimationObject] = []
        for item in raw_objects:
            if not isinstance(item, Mapping):
                LOGGER.warning("skipping non-object scene entry: %r", item)
                continue
            try:
                objects.append(AnimationObject.from_dict(item))
            except SceneFormatError as exc:
                LOGGER.warning("skipping scene object: %s", exc)

        actions: list[AnimationAction] = []
        for item in raw_actions:
            if not isinstance(item, Mapping):
                LOGGER.warning("skipping non-object scene action: %r", item)
                continue
            try:
                actions.append(AnimationAction.from_dict(item))
            except SceneFormatError as exc:
                LOGGER.warning("skipping scene action: %s", exc)

        return cls(
            title=_opt_str(raw.get("title")) or "",
            description=_opt_str(raw.get("description")) or "",
            objects=tuple(objects),
            actions=tuple(actions),
            background=_opt_str(raw.get("background")),
            width=_opt_positive(raw.get("width")),
            height=_opt_positive(raw.get("height")),
            labels=_parse_labels(raw.get("labels")),
            formula=_opt_str(raw.get("formula")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "objects": [obj.to_dict() for obj in self.objects],
            "actions": [action.to_dict() for action in self.actions],
        }
        if self.background is not None:
            out["background"] = self.background
        if self.width is not None:
            out["width"] = self.width
        if self.height is not None:
            out["height"] = self.height
        if self.labels:
            out["labels"] = [label.to_dict() for label in self.labels]
        if self.formula is not None:
            out["formula"] = self.formula
        return out


_OBJECT_NUMBER_FIELDS = (
    ("width", "width"),
    ("height", "height"),
    ("radius", "radius"),
    ("font_size", "fontSize"),
    ("rotation", "rotation"),
    ("opacity", "opacity"),
    ("end_x", "endX"),
    ("end_y", "endY"),
)

_ACTION_NUMBER_FIELDS = (
    ("to_x", "toX"),
    ("to_y", "toY"),
    ("to_rotation", "toRotation"),
    ("to_scale", "toScale"),
    ("to_opacity", "toOpacity"),
    ("amplitude", "amplitude"),
    ("frequency", "frequency"),
)


def _opt_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        try:
            out = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(out):
        return None
    return out


def _opt_positive(value: object) -> float | None:
    out = _opt_float(value)
    if out is None or out <= 0:
        return None
    return out


def _opt_str(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _parse_points(value: object) -> tuple[Point, ...] | None:
    if not isinstance(value, list):
        return None
    points: list[Point] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        x = _opt_float(item.get("x"))
        y = _opt_float(item.get("y"))
        if x is None or y is None:
            continue
        points.append(Point(x, y))
    return tuple(points)


def _parse_labels(value: object) -> tuple[SceneLabel, ...]:
    if not isinstance(value, list):
        return ()
    labels: list[SceneLabel] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        text = _opt_str(item.get("text"))
        x = _opt_float(item.get("x"))
        y = _opt_float(item.get("y"))
        if text is None or x is None or y is None:
            LOGGER.warning("skipping incomplete scene label: %r", item)
            continue
        labels.append(SceneLabel(text=text, x=x, y=y, color=_opt_str(item.get("color"))))
    return tuple(labels)
