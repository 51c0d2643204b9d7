from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
import tomllib

from lessonviz_core.render.draw_text import DEFAULT_FONT_FAMILY

from .playback import DEFAULT_LOOP_PAUSE_MS

DEFAULT_FPS = 60
DEFAULT_MAX_WIDTH = 500
DEFAULT_MAX_HEIGHT = 350
CONTAINER_PADDING_X = 20
CONTAINER_PADDING_Y = 60


@dataclass(frozen=True)
class EngineConfig:
    fps: int = DEFAULT_FPS
    loop_pause_ms: float = DEFAULT_LOOP_PAUSE_MS
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    font_family: str = DEFAULT_FONT_FAMILY

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ValueError("fps must be > 0")
        if self.loop_pause_ms < 0:
            raise ValueError("loop_pause_ms must be >= 0")
        if self.max_width <= 0 or self.max_height <= 0:
            raise ValueError("max_width and max_height must be > 0")

    @classmethod
    def from_env(cls, *, prefix: str = "LESSONVIZ_", base: "EngineConfig | None" = None) -> "EngineConfig":
        """Overlay environment variables on ``base``; unset or invalid values keep the base value."""
        base = base or cls()
        fps = _parse_positive_int(f"{prefix}FPS")
        pause = _parse_non_negative_float(f"{prefix}LOOP_PAUSE_MS")
        max_w = _parse_positive_int(f"{prefix}MAX_WIDTH")
        max_h = _parse_positive_int(f"{prefix}MAX_HEIGHT")
        font = os.getenv(f"{prefix}FONT_FAMILY", "").strip()
        return replace(
            base,
            fps=fps if fps is not None else base.fps,
            loop_pause_ms=pause if pause is not None else base.loop_pause_ms,
            max_width=max_w if max_w is not None else base.max_width,
            max_height=max_h if max_h is not None else base.max_height,
            font_family=font or base.font_family,
        )

    def fit_surface_size(self, container_width: float, container_height: float) -> tuple[int, int]:
        return fit_surface_size(
            container_width,
            container_height,
            max_width=self.max_width,
            max_height=self.max_height,
        )


def fit_surface_size(
    container_width: float,
    container_height: float,
    *,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
) -> tuple[int, int]:
    width = min(int(container_width) - CONTAINER_PADDING_X, max_width)
    height = min(int(container_height) - CONTAINER_PADDING_Y, max_height)
    return (max(1, width), max(1, height))


def load_config(path: str | Path) -> EngineConfig:
    """Read an ``[engine]`` table (or top-level keys) from a TOML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("engine", raw)
    if not isinstance(table, dict):
        raise ValueError("`engine` must be a table")
    kwargs: dict[str, object] = {}
    try:
        if "fps" in table:
            kwargs["fps"] = int(table["fps"])
        if "loop_pause_ms" in table:
            kwargs["loop_pause_ms"] = float(table["loop_pause_ms"])
        if "max_width" in table:
            kwargs["max_width"] = int(table["max_width"])
        if "max_height" in table:
            kwargs["max_height"] = int(table["max_height"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid engine config value: {exc}") from exc
    if "font_family" in table:
        if not isinstance(table["font_family"], str):
            raise ValueError("`font_family` must be a string")
        kwargs["font_family"] = table["font_family"]
    return EngineConfig(**kwargs)


def _parse_positive_int(env_var: str) -> int | None:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    if value <= 0:
        return None
    return value


def _parse_non_negative_float(env_var: str) -> float | None:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if value < 0:
        return None
    return value
