from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from mpglens_plot.palette import RGBA


DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "helvetica",
    "arial",
    "liberationsans",
    "menlo",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    anchor: str = "start",
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Blend ``text`` into ``dst``.

    ``(x, y)`` is the vertical center of the text line; ``anchor`` picks which
    horizontal edge (``start``/``middle``/``end``) sits on ``x``. With
    ``rotate_deg`` the mask is turned counter-clockwise in quarter turns and the
    anchor applies along the rotated baseline.
    """

    if not text:
        return
    font = _load_font(DEFAULT_FONT_FAMILY, font_size_px)
    mask = _rotate_mask(_render_mask(text, font), rotate_deg=rotate_deg)
    h, w = mask.shape
    if _normalize_quarter_turns(rotate_deg) % 2 == 1:
        left = int(round(x - w / 2.0))
        top = int(round(y - _anchor_offset(h, anchor)))
    else:
        left = int(round(x - _anchor_offset(w, anchor)))
        top = int(round(y - h / 2.0))
    _blend_mask(dst, left, top, mask, color)


def _anchor_offset(length: int, anchor: str) -> float:
    if anchor == "middle":
        return length / 2.0
    if anchor == "end":
        return float(length)
    return 0.0


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)

    patch[:, :, :3] = np.clip(out_rgb_num / safe_alpha[:, :, None], 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(out_alpha * 255.0, 0, 255).astype(np.uint8)


@lru_cache(maxsize=256)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=32)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default()


def _resolve_font_path(font_family: str) -> Path | None:
    patterns = (font_family.strip().lower().replace(" ", ""),) + FONT_FALLBACK_PATTERNS
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        for path in candidates:
            if path.stem.lower().replace(" ", "").replace("-", "") == pattern:
                return path
        for path in candidates:
            if pattern in path.stem.lower().replace(" ", ""):
                return path
    return None


def _normalize_quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4


def _rotate_mask(mask: np.ndarray, *, rotate_deg: int) -> np.ndarray:
    turns = _normalize_quarter_turns(rotate_deg)
    if turns == 0:
        return mask
    return np.rot90(mask, k=turns)
