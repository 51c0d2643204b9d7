from __future__ import annotations

import math

import numpy as np

from .colors import RGBA


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be > 0")
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    fill_canvas(canvas, color)
    return canvas


def fill_canvas(dst: np.ndarray, color: RGBA) -> None:
    dst[:, :, 0] = color[0]
    dst[:, :, 1] = color[1]
    dst[:, :, 2] = color[2]
    dst[:, :, 3] = color[3]


def fill_vertical_gradient(dst: np.ndarray, top: RGBA, bottom: RGBA) -> None:
    height = dst.shape[0]
    if height == 1:
        t = np.zeros((1, 1), dtype=np.float32)
    else:
        t = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, None]
    top_arr = np.asarray(top, dtype=np.float32)[None, :]
    bottom_arr = np.asarray(bottom, dtype=np.float32)[None, :]
    rows = top_arr * (1.0 - t) + bottom_arr * t
    dst[:, :, :] = np.clip(np.rint(rows), 0, 255).astype(np.uint8)[:, None, :]


def fill_polygon(dst: np.ndarray, points: np.ndarray, color: RGBA) -> None:
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < 3:
        return
    region = _pixel_region(dst, pts, pad=0.0)
    if region is None:
        return
    x0, y0, gx, gy = region
    _blend_mask(dst, x0, y0, _even_odd_mask(gx, gy, pts), color)


def stroke_polyline(
    dst: np.ndarray,
    points: np.ndarray,
    color: RGBA,
    width: float = 1.0,
    *,
    closed: bool = False,
) -> None:
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < 2:
        return
    if closed:
        pts = np.vstack([pts, pts[:1]])
    half = max(0.5, float(width) / 2.0)
    region = _pixel_region(dst, pts, pad=half + 1.0)
    if region is None:
        return
    x0, y0, gx, gy = region
    mask = np.zeros(gx.shape, dtype=bool)
    for a, b in zip(pts[:-1], pts[1:]):
        mask |= _segment_mask(gx, gy, a, b, half)
    _blend_mask(dst, x0, y0, mask, color)


def fill_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    if radius <= 0:
        return
    region = _pixel_region(dst, np.asarray([[cx - radius, cy - radius], [cx + radius, cy + radius]]), pad=1.0)
    if region is None:
        return
    x0, y0, gx, gy = region
    mask = (gx - cx) ** 2 + (gy - cy) ** 2 <= radius * radius
    _blend_mask(dst, x0, y0, mask, color)


def stroke_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA, width: float = 1.0) -> None:
    if radius <= 0:
        return
    half = max(0.5, float(width) / 2.0)
    outer = radius + half
    region = _pixel_region(dst, np.asarray([[cx - outer, cy - outer], [cx + outer, cy + outer]]), pad=1.0)
    if region is None:
        return
    x0, y0, gx, gy = region
    dist = np.sqrt((gx - cx) ** 2 + (gy - cy) ** 2)
    _blend_mask(dst, x0, y0, np.abs(dist - radius) <= half, color)


def blend_coverage(dst: np.ndarray, x: int, y: int, coverage: np.ndarray, color: RGBA) -> None:
    """Alpha-blend ``color`` through a float coverage patch whose top-left sits at (x, y)."""
    h, w = coverage.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    cov = coverage[y0 - y : y1 - y, x0 - x : x1 - x]
    alpha = (color[3] / 255.0) * cov.astype(np.float32)
    if not np.any(alpha > 0):
        return
    patch = dst[y0:y1, x0:x1]
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out = src_rgb * alpha[:, :, None] + patch[:, :, :3].astype(np.float32) * (1.0 - alpha[:, :, None])
    patch[:, :, :3] = np.clip(np.rint(out), 0, 255).astype(np.uint8)
    patch[:, :, 3] = 255


def _blend_mask(dst: np.ndarray, x0: int, y0: int, mask: np.ndarray, color: RGBA) -> None:
    if color[3] <= 0 or not np.any(mask):
        return
    blend_coverage(dst, x0, y0, mask.astype(np.float32), color)


def _pixel_region(
    dst: np.ndarray, pts: np.ndarray, pad: float
) -> tuple[int, int, np.ndarray, np.ndarray] | None:
    if not np.all(np.isfinite(pts)):
        return None
    h, w = dst.shape[0], dst.shape[1]
    x0 = max(0, int(math.floor(float(pts[:, 0].min()) - pad)))
    y0 = max(0, int(math.floor(float(pts[:, 1].min()) - pad)))
    x1 = min(w - 1, int(math.ceil(float(pts[:, 0].max()) + pad)))
    y1 = min(h - 1, int(math.ceil(float(pts[:, 1].max()) + pad)))
    if x1 < x0 or y1 < y0:
        return None
    # Sample pixel centers.
    xs = np.arange(x0, x1 + 1, dtype=np.float64) + 0.5
    ys = np.arange(y0, y1 + 1, dtype=np.float64) + 0.5
    gx, gy = np.meshgrid(xs, ys)
    return x0, y0, gx, gy


def _even_odd_mask(gx: np.ndarray, gy: np.ndarray, pts: np.ndarray) -> np.ndarray:
    inside = np.zeros(gx.shape, dtype=bool)
    xj, yj = pts[-1]
    for xi, yi in pts:
        crosses = (yi > gy) != (yj > gy)
        with np.errstate(divide="ignore", invalid="ignore"):
            x_cross = (xj - xi) * (gy - yi) / (yj - yi) + xi
        inside ^= crosses & (gx < x_cross)
        xj, yj = xi, yi
    return inside


def _segment_mask(gx: np.ndarray, gy: np.ndarray, a: np.ndarray, b: np.ndarray, half: float) -> np.ndarray:
    ax, ay = float(a[0]), float(a[1])
    dx = float(b[0]) - ax
    dy = float(b[1]) - ay
    length2 = dx * dx + dy * dy
    if length2 <= 1e-12:
        t = np.zeros(gx.shape, dtype=np.float64)
    else:
        t = np.clip(((gx - ax) * dx + (gy - ay) * dy) / length2, 0.0, 1.0)
    px = ax + t * dx
    py = ay + t * dy
    return (gx - px) ** 2 + (gy - py) ** 2 <= half * half
