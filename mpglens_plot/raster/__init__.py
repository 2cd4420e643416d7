from .canvas import draw_hline, draw_pixel, draw_vline, fill_rect, new_canvas
from .rasterize import rasterize_frame
from .shapes import draw_cross, draw_disc, draw_polyline
from .text import draw_text

__all__ = [
    "draw_cross",
    "draw_disc",
    "draw_hline",
    "draw_pixel",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "rasterize_frame",
]
