from __future__ import annotations

import math

import numpy as np

from mpglens_plot.palette import RGBA
from mpglens_plot.raster.canvas import blend_span, draw_pixel, fill_rect


def draw_disc(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    """Filled circle, rasterized one horizontal span per row."""

    if radius <= 0:
        return
    top = int(math.floor(cy - radius))
    bottom = int(math.ceil(cy + radius))
    for y in range(top, bottom + 1):
        dy = (y + 0.5) - cy
        if abs(dy) > radius:
            continue
        half = math.sqrt(radius * radius - dy * dy)
        blend_span(dst, y, int(math.ceil(cx - half - 0.5)), int(math.floor(cx + half - 0.5)), color)


def draw_cross(dst: np.ndarray, cx: float, cy: float, arm_half_width: float, color: RGBA) -> None:
    """Plus glyph of five ``2r × 2r`` squares centered on ``(cx, cy)``."""

    r = arm_half_width
    ext = 3.0 * r
    fill_rect(dst, int(round(cx - ext)), int(round(cy - r)), int(round(cx + ext)) - 1, int(round(cy + r)) - 1, color)
    # Vertical arms skip the center square already covered by the horizontal bar.
    fill_rect(dst, int(round(cx - r)), int(round(cy - ext)), int(round(cx + r)) - 1, int(round(cy - r)) - 1, color)
    fill_rect(dst, int(round(cx - r)), int(round(cy + r)), int(round(cx + r)) - 1, int(round(cy + ext)) - 1, color)


def draw_polyline(
    dst: np.ndarray,
    points: tuple[tuple[float, float], ...],
    color: RGBA,
    width: float = 1.0,
) -> None:
    if len(points) < 2:
        return
    for (x0, y0), (x1, y1) in zip(points[:-1], points[1:], strict=True):
        _draw_line_segment(dst, int(round(x0)), int(round(y0)), int(round(x1)), int(round(y1)), color=color, width=width)


def _draw_line_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: float) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    radius = max(0, int(width) // 2)

    while True:
        for yy in range(y0 - radius, y0 + radius + 1):
            for xx in range(x0 - radius, x0 + radius + 1):
                draw_pixel(dst, xx, yy, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
