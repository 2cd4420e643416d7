from __future__ import annotations

import dataclasses
from dataclasses import dataclass
import math
from typing import Literal

from mpglens_plot.palette import RGBA


AxisSide = Literal["bottom", "left"]
TextAnchor = Literal["start", "middle", "end"]


@dataclass(frozen=True)
class Tick:
    value: float
    position: float
    label: str


@dataclass(frozen=True)
class Axis:
    side: AxisSide
    start: tuple[float, float]
    end: tuple[float, float]
    ticks: tuple[Tick, ...]
    color: RGBA
    tick_length: float = 6.0
    tick_font_px: float = 10.0


@dataclass(frozen=True)
class TextLabel:
    text: str
    x: float
    y: float
    color: RGBA
    anchor: TextAnchor = "middle"
    rotate_deg: int = 0
    font_size_px: float = 12.0


@dataclass(frozen=True)
class CircleMarker:
    marker_id: str
    index: int
    cx: float
    cy: float
    radius: float
    fill: RGBA
    hoverable: bool = True

    def contains(self, x: float, y: float) -> bool:
        return (x - self.cx) ** 2 + (y - self.cy) ** 2 <= self.radius**2


@dataclass(frozen=True)
class CrossMarker:
    """Plus-shaped glyph whose ``size`` is its area in px², as symbol generators use."""

    marker_id: str
    cx: float
    cy: float
    size: float
    fill: RGBA

    @property
    def arm_half_width(self) -> float:
        return math.sqrt(self.size / 5.0) / 2.0

    @property
    def extent(self) -> float:
        return 3.0 * self.arm_half_width


@dataclass(frozen=True)
class Polyline:
    points: tuple[tuple[float, float], ...]
    stroke: RGBA
    width: float = 2.0


@dataclass(frozen=True)
class Frame:
    """Complete, immutable description of one chart frame.

    Draw order is ``axes``, ``labels``, ``polylines``, ``markers`` then
    ``centroids``, so centroids are never occluded by data markers.
    """

    width: int
    height: int
    plot_rect: tuple[float, float, float, float]
    axes: tuple[Axis, ...] = ()
    labels: tuple[TextLabel, ...] = ()
    polylines: tuple[Polyline, ...] = ()
    markers: tuple[CircleMarker, ...] = ()
    centroids: tuple[CrossMarker, ...] = ()

    def marker(self, marker_id: str) -> CircleMarker | None:
        for marker in self.markers:
            if marker.marker_id == marker_id:
                return marker
        return None

    def replace_marker(self, marker: CircleMarker) -> "Frame":
        replaced = False
        out: list[CircleMarker] = []
        for current in self.markers:
            if current.marker_id == marker.marker_id:
                out.append(marker)
                replaced = True
            else:
                out.append(current)
        if not replaced:
            raise KeyError(marker.marker_id)
        return dataclasses.replace(self, markers=tuple(out))

    def marker_positions(self) -> tuple[tuple[str, float, float], ...]:
        return tuple((m.marker_id, m.cx, m.cy) for m in self.markers) + tuple(
            (c.marker_id, c.cx, c.cy) for c in self.centroids
        )

    def element_count(self) -> int:
        return len(self.axes) + len(self.labels) + len(self.polylines) + len(self.markers) + len(self.centroids)


@dataclass(frozen=True)
class FrameDiff:
    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    changed: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def diff_frames(previous: Frame | None, current: Frame | None) -> FrameDiff:
    before = _marker_index(previous)
    after = _marker_index(current)
    added = tuple(k for k in after if k not in before)
    removed = tuple(k for k in before if k not in after)
    changed = tuple(k for k in after if k in before and before[k] != after[k])
    return FrameDiff(added=added, removed=removed, changed=changed)


def _marker_index(frame: Frame | None) -> dict[str, CircleMarker | CrossMarker]:
    if frame is None:
        return {}
    out: dict[str, CircleMarker | CrossMarker] = {m.marker_id: m for m in frame.markers}
    out.update({c.marker_id: c for c in frame.centroids})
    return out
