from __future__ import annotations

import re


RGBA = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)

DARKER_FACTOR = 0.7


def parse_hex_color(value: str) -> RGBA:
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        raise ValueError(f"color must be a hex string (#RRGGBB or #RRGGBBAA): {value!r}")
    r = int(value[1:3], 16)
    g = int(value[3:5], 16)
    b = int(value[5:7], 16)
    a = int(value[7:9], 16) if len(value) == 9 else 255
    return (r, g, b, a)


def darker(color: RGBA, steps: float = 1.0) -> RGBA:
    """Scale RGB channels by ``0.7 ** steps``; alpha is preserved."""

    k = DARKER_FACTOR**steps
    r, g, b, a = color
    return (
        max(0, min(255, int(round(r * k)))),
        max(0, min(255, int(round(g * k)))),
        max(0, min(255, int(round(b * k)))),
        a,
    )


def mix(a: RGBA, b: RGBA, t: float) -> RGBA:
    t = max(0.0, min(1.0, float(t)))
    return tuple(int(round(ca * (1.0 - t) + cb * t)) for ca, cb in zip(a, b, strict=True))  # type: ignore[return-value]


class CategoricalPalette:
    """Fixed color list indexed by category id, cycling past the end."""

    def __init__(self, colors: tuple[str, ...] = CATEGORY10) -> None:
        if not colors:
            raise ValueError("palette must contain at least one color")
        self._colors = tuple(parse_hex_color(c) for c in colors)

    def __len__(self) -> int:
        return len(self._colors)

    def color_for(self, category: int) -> RGBA:
        return self._colors[int(category) % len(self._colors)]
