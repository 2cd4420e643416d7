from __future__ import annotations

import numpy as np

from mpglens_plot.frame import Axis, Frame
from mpglens_plot.palette import RGBA
from mpglens_plot.raster.canvas import draw_hline, draw_vline, new_canvas
from mpglens_plot.raster.shapes import draw_cross, draw_disc, draw_polyline
from mpglens_plot.raster.text import draw_text


def rasterize_frame(frame: Frame, *, background: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    """Paint ``frame`` onto a fresh ``H x W x 4`` uint8 canvas in frame draw order."""

    canvas = new_canvas(frame.width, frame.height, color=background)
    for axis in frame.axes:
        _draw_axis(canvas, axis)
    for label in frame.labels:
        draw_text(
            canvas,
            label.x,
            label.y,
            label.text,
            label.color,
            anchor=label.anchor,
            font_size_px=label.font_size_px,
            rotate_deg=label.rotate_deg,
        )
    for line in frame.polylines:
        draw_polyline(canvas, line.points, line.stroke, width=line.width)
    for marker in frame.markers:
        draw_disc(canvas, marker.cx, marker.cy, marker.radius, marker.fill)
    for centroid in frame.centroids:
        draw_cross(canvas, centroid.cx, centroid.cy, centroid.arm_half_width, centroid.fill)
    return canvas


def _draw_axis(canvas: np.ndarray, axis: Axis) -> None:
    (sx, sy), (ex, ey) = axis.start, axis.end
    tick_len = int(round(axis.tick_length))
    font_px = axis.tick_font_px
    if axis.side == "bottom":
        y = int(round(sy))
        draw_hline(canvas, int(round(sx)), int(round(ex)), y, axis.color)
        for tick in axis.ticks:
            tx = int(round(tick.position))
            draw_vline(canvas, tx, y, y + tick_len, axis.color)
            draw_text(canvas, tx, y + tick_len + font_px * 0.9, tick.label, axis.color, anchor="middle", font_size_px=font_px)
        return
    x = int(round(sx))
    draw_vline(canvas, x, int(round(sy)), int(round(ey)), axis.color)
    for tick in axis.ticks:
        ty = int(round(tick.position))
        draw_hline(canvas, x - tick_len, x, ty, axis.color)
        draw_text(canvas, x - tick_len - 3, ty, tick.label, axis.color, anchor="end", font_size_px=font_px)
