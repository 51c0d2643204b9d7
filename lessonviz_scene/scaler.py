from __future__ import annotations

from dataclasses import replace

from .model import AnimationAction, AnimationObject, AnimationScene, Point, SceneLabel


def compute_scene_scale(*, src_w: float, src_h: float, dst_w: float, dst_h: float) -> float:
    """Uniform factor that fits a ``src_w`` x ``src_h`` scene inside the destination box."""
    if src_w <= 0 or src_h <= 0:
        raise ValueError("source width/height must be > 0")
    if dst_w <= 0 or dst_h <= 0:
        raise ValueError("target width/height must be > 0")
    return min(float(dst_w) / float(src_w), float(dst_h) / float(src_h))


def scale_scene_to_surface(scene: AnimationScene, target_width: float, target_height: float) -> AnimationScene:
    """Return a copy of ``scene`` re-expressed in a ``target_width`` x ``target_height`` surface.

    Every coordinate-like field is multiplied by the same factor on both axes, so
    shapes keep their proportions; the content may not fill the whole box when the
    aspect ratios differ. Absent optional fields stay absent.
    """
    base_w, base_h = scene.base_size()
    scale = compute_scene_scale(src_w=base_w, src_h=base_h, dst_w=target_width, dst_h=target_height)
    return replace(
        scene,
        width=float(target_width),
        height=float(target_height),
        objects=tuple(_scale_object(obj, scale) for obj in scene.objects),
        actions=tuple(_scale_action(action, scale) for action in scene.actions),
        labels=tuple(_scale_label(label, scale) for label in scene.labels),
    )


def _scaled(value: float | None, scale: float) -> float | None:
    if value is None:
        return None
    return value * scale


def _scale_object(obj: AnimationObject, scale: float) -> AnimationObject:
    points = None
    if obj.points is not None:
        points = tuple(Point(p.x * scale, p.y * scale) for p in obj.points)
    return replace(
        obj,
        x=obj.x * scale,
        y=obj.y * scale,
        radius=_scaled(obj.radius, scale),
        width=_scaled(obj.width, scale),
        height=_scaled(obj.height, scale),
        end_x=_scaled(obj.end_x, scale),
        end_y=_scaled(obj.end_y, scale),
        font_size=_scaled(obj.font_size, scale),
        points=points,
    )


def _scale_action(action: AnimationAction, scale: float) -> AnimationAction:
    return replace(
        action,
        to_x=_scaled(action.to_x, scale),
        to_y=_scaled(action.to_y, scale),
        amplitude=_scaled(action.amplitude, scale),
    )


def _scale_label(label: SceneLabel, scale: float) -> SceneLabel:
    return replace(label, x=label.x * scale, y=label.y * scale)
