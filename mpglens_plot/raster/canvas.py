from __future__ import annotations

import numpy as np

from mpglens_plot.palette import RGBA


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_span(dst: np.ndarray, y: int, xa: int, xb: int, color: RGBA) -> None:
    """Alpha-blend ``color`` over row ``y`` for columns ``xa..xb`` inclusive, clipped."""

    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(xa, xb))
    xb = min(dst.shape[1] - 1, max(xa, xb))
    if xa > xb:
        return
    segment = dst[y, xa : xb + 1]
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv).astype(np.uint8)
    segment[:, 3] = np.maximum(segment[:, 3], color[3])


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    blend_span(dst, y, x, x, color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    blend_span(dst, y, min(x0, x1), max(x0, x1), color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    for y in range(max(0, min(y0, y1)), min(dst.shape[0] - 1, max(y0, y1)) + 1):
        blend_span(dst, y, x, x, color)


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    for y in range(min(y0, y1), max(y0, y1) + 1):
        blend_span(dst, y, x0, x1, color)
