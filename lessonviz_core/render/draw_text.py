from __future__ import annotations

from functools import lru_cache
import math
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .canvas import blend_coverage
from .colors import RGBA


DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE_PX = 16.0
SANS_FONT_FALLBACK_PATTERNS = (
    "arial",
    "helvetica",
    "liberationsans",
    "dejavusans",
    "notosans",
    "freesans",
)


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    anchor: str = "mm",
    embolden_px: int = 1,
    rotate_deg: float = 0.0,
) -> None:
    """Blend ``text`` into ``dst`` positioned by a Pillow anchor at (x, y), rotated about that point."""
    if not text:
        return
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    mask, origin_x, origin_y = _render_mask(text=text, font=font, anchor=anchor)
    if embolden_px > 1:
        mask = _embolden(mask, embolden_px)
    if rotate_deg:
        mask, origin_x, origin_y = _rotate_mask(mask, origin_x, origin_y, rotate_deg)
    coverage = mask.astype(np.float32) / 255.0
    blend_coverage(dst, int(round(x - origin_x)), int(round(y - origin_y)), coverage, color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int]:
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


def _embolden(mask: np.ndarray, embolden_px: int) -> np.ndarray:
    out = mask.copy()
    for shift in range(1, embolden_px):
        src = mask[:, : max(0, mask.shape[1] - shift)]
        dst = out[:, shift:]
        if src.size == 0 or dst.size == 0:
            break
        np.maximum(dst, src, out=dst)
    return out


@lru_cache(maxsize=128)
def _render_mask(
    text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont, anchor: str
) -> tuple[np.ndarray, int, int]:
    """Coverage mask plus the anchor position inside it."""
    left, top, right, bottom = font.getbbox(text, anchor=anchor)
    left, top = int(math.floor(left)), int(math.floor(top))
    width = max(1, int(math.ceil(right)) - left)
    height = max(1, int(math.ceil(bottom)) - top)
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font, anchor=anchor)
    return np.asarray(image, dtype=np.uint8), -left, -top


def _rotate_mask(mask: np.ndarray, origin_x: int, origin_y: int, rotate_deg: float) -> tuple[np.ndarray, int, int]:
    h, w = mask.shape
    reach = int(math.ceil(max(math.hypot(cx - origin_x, cy - origin_y) for cx in (0, w) for cy in (0, h)))) + 1
    side = 2 * reach + 1
    square = Image.new("L", (side, side), 0)
    square.paste(Image.fromarray(mask), (reach - origin_x, reach - origin_y))
    # Screen y points down, so a clockwise on-screen turn is a negative Pillow angle.
    rotated = square.rotate(-rotate_deg, resample=Image.Resampling.BILINEAR, center=(reach, reach))
    return np.asarray(rotated, dtype=np.uint8), reach, reach


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + SANS_FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p in stem and "mono" not in stem:
                return path
    return None
