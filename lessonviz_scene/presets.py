from __future__ import annotations

from typing import Any, Callable

from .model import AnimationScene

SceneFactory = Callable[[str], AnimationScene]


def gravity_scene(description: str) -> AnimationScene:
    return AnimationScene.from_dict(
        {
            "title": "Gravity - Apple Falling",
            "description": description,
            "objects": [
                {"id": "tree", "type": "rect", "x": 200, "y": 150, "width": 20, "height": 100, "fill": "#8B4513"},
                {"id": "leaves", "type": "circle", "x": 200, "y": 80, "radius": 50, "fill": "#228B22"},
                {"id": "apple", "type": "circle", "x": 230, "y": 100, "radius": 12, "fill": "#E53935"},
                {"id": "ground", "type": "rect", "x": 200, "y": 280, "width": 400, "height": 40, "fill": "#4CAF50"},
                {"id": "arrow", "type": "arrow", "x": 260, "y": 150, "endX": 260, "endY": 200, "color": "#FFC107"},
            ],
            "actions": [
                {"objectId": "apple", "type": "move", "toY": 260, "duration": 2000, "easing": "easeIn", "repeat": True},
                {"objectId": "arrow", "type": "fade", "toOpacity": 0.5, "duration": 1000, "repeat": True},
            ],
            "labels": [{"text": "g = 9.8 m/s²", "x": 280, "y": 180, "color": "#FFC107"}],
            "formula": "F = mg (Force = mass × gravity)",
        }
    )


def pendulum_scene(description: str) -> AnimationScene:
    return AnimationScene.from_dict(
        {
            "title": "Pendulum Motion",
            "description": description,
            "objects": [
                {"id": "pivot", "type": "circle", "x": 200, "y": 50, "radius": 8, "fill": "#666"},
                {"id": "string", "type": "line", "x": 200, "y": 50, "endX": 200, "endY": 200, "color": "#aaa"},
                {"id": "bob", "type": "circle", "x": 200, "y": 200, "radius": 20, "fill": "#3498db"},
            ],
            "actions": [
                {"objectId": "bob", "type": "swing", "amplitude": 60, "frequency": 1, "duration": 4000, "repeat": True},
            ],
            "labels": [{"text": "Period: T = 2π√(L/g)", "x": 20, "y": 30, "color": "#fff"}],
            "formula": "T = 2π√(L/g)",
        }
    )


def wave_scene(description: str) -> AnimationScene:
    particles: list[dict[str, Any]] = []
    actions: list[dict[str, Any]] = []
    for index in range(7):
        object_id = f"particle{index + 1}"
        particles.append({"id": object_id, "type": "circle", "x": 50 + 50 * index, "y": 150, "radius": 8, "fill": "#00BCD4"})
        actions.append(
            {
                "objectId": object_id,
                "type": "wave",
                "amplitude": 40,
                "frequency": 2,
                "duration": 3000,
                "delay": 150 * index,
                "repeat": True,
            }
        )
    return AnimationScene.from_dict(
        {
            "title": "Wave Motion",
            "description": description,
            "objects": particles,
            "actions": actions,
            "formula": "y = A sin(kx - ωt)",
        }
    )


def spring_scene(description: str) -> AnimationScene:
    return AnimationScene.from_dict(
        {
            "title": "Spring Oscillation",
            "description": description,
            "objects": [
                {"id": "ceiling", "type": "rect", "x": 200, "y": 40, "width": 160, "height": 12, "fill": "#607D8B"},
                {
                    "id": "coil",
                    "type": "path",
                    "x": 200,
                    "y": 46,
                    "color": "#B0BEC5",
                    "points": [
                        {"x": 200, "y": 46},
                        {"x": 185, "y": 66},
                        {"x": 215, "y": 86},
                        {"x": 185, "y": 106},
                        {"x": 215, "y": 126},
                        {"x": 185, "y": 146},
                        {"x": 200, "y": 160},
                    ],
                },
                {"id": "mass", "type": "rect", "x": 200, "y": 180, "width": 50, "height": 40, "fill": "#FF7043"},
            ],
            "actions": [
                {"objectId": "mass", "type": "wave", "amplitude": 35, "frequency": 2, "duration": 3000, "repeat": True},
            ],
            "labels": [{"text": "k: spring constant", "x": 20, "y": 30, "color": "#fff"}],
            "formula": "F = -kx",
        }
    )


def orbit_scene(description: str) -> AnimationScene:
    return AnimationScene.from_dict(
        {
            "title": "Orbital Motion",
            "description": description,
            "objects": [
                {"id": "sun", "type": "circle", "x": 200, "y": 150, "radius": 28, "fill": "#FDB813"},
                {"id": "ring", "type": "circle", "x": 200, "y": 150, "radius": 100, "stroke": "#37474F"},
                {"id": "radius", "type": "arrow", "x": 200, "y": 150, "endX": 300, "endY": 150, "color": "#4FC3F7"},
                {"id": "label", "type": "text", "x": 200, "y": 150, "text": "Sun", "fontSize": 12, "color": "#1a1a2e"},
            ],
            "actions": [
                {"objectId": "radius", "type": "rotate", "toRotation": 360, "duration": 4000, "easing": "linear", "repeat": True},
            ],
            "formula": "F = GMm/r²",
        }
    )


def generic_scene(concept: str, description: str) -> AnimationScene:
    return AnimationScene.from_dict(
        {
            "title": concept,
            "description": description,
            "objects": [{"id": "main", "type": "circle", "x": 200, "y": 150, "radius": 30, "fill": "#3498db"}],
            "actions": [{"objectId": "main", "type": "bounce", "amplitude": 50, "duration": 2000, "repeat": True}],
            "formula": "",
        }
    )


# Checked in order; the first entry with a trigger contained in the concept wins.
CANNED_SCENES: tuple[tuple[tuple[str, ...], SceneFactory], ...] = (
    (("gravity", "falling", "apple"), gravity_scene),
    (("pendulum",), pendulum_scene),
    (("wave", "sound"), wave_scene),
    (("spring", "oscillation"), spring_scene),
    (("orbit", "planet", "solar"), orbit_scene),
)
