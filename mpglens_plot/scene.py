from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import math

import numpy as np

from mpglens_plot.frame import Axis, CircleMarker, CrossMarker, Frame, Polyline, TextLabel, Tick
from mpglens_plot.palette import CATEGORY10, RGBA, CategoricalPalette
from mpglens_plot.projector import CoordinateProjector
from mpglens_plot.records import ScatterDataset, TrendRecord
from mpglens_plot.scales import LinearScale, format_ticks_for_axis


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneStyle:
    width: int = 800
    height: int = 600
    # top, right, bottom, left
    margin: tuple[int, int, int, int] = (20, 30, 50, 50)
    x_label: str = "x"
    y_label: str = "y"
    x_label_offset: float = 40.0
    y_label_offset: float = 40.0
    tick_count: int = 10
    integer_x_ticks: bool = False
    axis_color: RGBA = (208, 218, 232, 255)
    text_color: RGBA = (255, 255, 255, 255)
    tick_font_px: float = 10.0
    label_font_px: float = 12.0
    marker_radius: float = 5.0
    palette: tuple[str, ...] = CATEGORY10
    marker_color: RGBA = (255, 171, 0, 255)
    centroid_color: RGBA = (255, 0, 0, 255)
    centroid_size: float = 200.0
    line_color: RGBA = (105, 179, 162, 255)
    line_width: float = 2.0
    y_headroom: float = 5.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("scene width/height must be > 0")
        top, right, bottom, left = self.margin
        if min(self.margin) < 0:
            raise ValueError("scene margins must be >= 0")
        if self.width - left - right <= 1 or self.height - top - bottom <= 1:
            raise ValueError("scene margins leave no drawable plot area")
        if self.tick_count <= 0:
            raise ValueError("tick_count must be > 0")
        if self.tick_font_px <= 0 or self.label_font_px <= 0:
            raise ValueError("font sizes must be > 0")
        if self.marker_radius <= 0:
            raise ValueError("marker_radius must be > 0")

    @property
    def plot_rect(self) -> tuple[float, float, float, float]:
        top, right, bottom, left = self.margin
        return (float(left), float(top), float(self.width - left - right), float(self.height - top - bottom))


class SceneRenderer:
    """Turns a dataset snapshot into a complete ``Frame``.

    Rendering is a pure function of the snapshot and the style: scales are rebuilt
    from the records handed in on every call, so rendering the same data twice
    yields equal frames.
    """

    def __init__(self, style: SceneStyle) -> None:
        self.style = style
        self._palette = CategoricalPalette(style.palette)

    def render_scatter(self, dataset: ScatterDataset) -> Frame:
        projector = CoordinateProjector.for_scatter(dataset, self.style.plot_rect)

        markers = []
        for index, point in enumerate(dataset.points):
            if not (math.isfinite(point.x) and math.isfinite(point.y)):
                LOGGER.debug("skipping non-finite scatter point %d", index)
                continue
            cx, cy = projector.project_point(point)
            markers.append(
                CircleMarker(
                    marker_id=f"point-{index}",
                    index=index,
                    cx=cx,
                    cy=cy,
                    radius=self.style.marker_radius,
                    fill=self._palette.color_for(point.cluster_id),
                )
            )

        centroids = []
        for index, centroid in enumerate(dataset.centroids):
            if not (math.isfinite(centroid.x) and math.isfinite(centroid.y)):
                continue
            cx, cy = projector.project_point(centroid)
            centroids.append(
                CrossMarker(
                    marker_id=f"centroid-{index}",
                    cx=cx,
                    cy=cy,
                    size=self.style.centroid_size,
                    fill=self.style.centroid_color,
                )
            )

        return Frame(
            width=self.style.width,
            height=self.style.height,
            plot_rect=self.style.plot_rect,
            axes=self._axes(projector),
            labels=self._axis_labels(),
            markers=tuple(markers),
            centroids=tuple(centroids),
        )

    def render_trend(self, records: Sequence[TrendRecord]) -> Frame:
        projector = CoordinateProjector.for_trend(records, self.style.plot_rect, headroom=self.style.y_headroom)

        vertices: list[tuple[float, float]] = []
        markers = []
        for index, record in enumerate(records):
            if not math.isfinite(record.value):
                LOGGER.debug("skipping non-finite trend record %d", index)
                continue
            cx, cy = projector.project_index(index, record.value)
            vertices.append((cx, cy))
            markers.append(
                CircleMarker(
                    marker_id=f"record-{index}",
                    index=index,
                    cx=cx,
                    cy=cy,
                    radius=self.style.marker_radius,
                    fill=self.style.marker_color,
                )
            )

        polylines: tuple[Polyline, ...] = ()
        if vertices:
            polylines = (Polyline(points=tuple(vertices), stroke=self.style.line_color, width=self.style.line_width),)

        return Frame(
            width=self.style.width,
            height=self.style.height,
            plot_rect=self.style.plot_rect,
            axes=self._axes(projector),
            labels=self._axis_labels(),
            polylines=polylines,
            markers=tuple(markers),
        )

    def empty_frame(self) -> Frame:
        return self.render_scatter(ScatterDataset.empty())

    def _axes(self, projector: CoordinateProjector) -> tuple[Axis, ...]:
        x0, y0, w, h = self.style.plot_rect
        bottom = Axis(
            side="bottom",
            start=(x0, y0 + h),
            end=(x0 + w, y0 + h),
            ticks=self._ticks(projector.x_scale, integer_only=self.style.integer_x_ticks),
            color=self.style.axis_color,
            tick_font_px=self.style.tick_font_px,
        )
        left = Axis(
            side="left",
            start=(x0, y0 + h),
            end=(x0, y0),
            ticks=self._ticks(projector.y_scale, integer_only=False),
            color=self.style.axis_color,
            tick_font_px=self.style.tick_font_px,
        )
        return (bottom, left)

    def _ticks(self, scale: LinearScale, *, integer_only: bool) -> tuple[Tick, ...]:
        values = scale.ticks(self.style.tick_count)
        if integer_only:
            values = values[np.isclose(values, np.rint(values), rtol=0.0, atol=1e-9)]
        labels = format_ticks_for_axis(values)
        return tuple(
            Tick(value=float(v), position=scale(float(v)), label=label)
            for v, label in zip(values.tolist(), labels, strict=True)
        )

    def _axis_labels(self) -> tuple[TextLabel, ...]:
        x0, y0, w, h = self.style.plot_rect
        return (
            TextLabel(
                text=self.style.x_label,
                x=x0 + w / 2.0,
                y=y0 + h + self.style.x_label_offset,
                color=self.style.text_color,
                font_size_px=self.style.label_font_px,
            ),
            TextLabel(
                text=self.style.y_label,
                x=x0 - self.style.y_label_offset,
                y=y0 + h / 2.0,
                color=self.style.text_color,
                rotate_deg=90,
                font_size_px=self.style.label_font_px,
            ),
        )
