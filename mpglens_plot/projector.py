from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from mpglens_plot.records import Centroid, DataPoint, ScatterDataset, TrendRecord
from mpglens_plot.scales import DataLimits, LinearScale, resolve_limits


PlotRect = tuple[float, float, float, float]


@dataclass(frozen=True)
class CoordinateProjector:
    """Composes an x and a y scale into data → screen projection."""

    x_scale: LinearScale
    y_scale: LinearScale

    @classmethod
    def from_limits(cls, limits: DataLimits, plot_rect: PlotRect) -> "CoordinateProjector":
        x0, y0, w, h = plot_rect
        return cls(
            x_scale=LinearScale(limits.xmin, limits.xmax, float(x0), float(x0 + w)),
            # Screen y grows downward: the domain minimum sits on the bottom edge.
            y_scale=LinearScale(limits.ymin, limits.ymax, float(y0 + h), float(y0)),
        )

    @classmethod
    def for_scatter(cls, dataset: ScatterDataset, plot_rect: PlotRect) -> "CoordinateProjector":
        finite = [p for p in dataset.points if math.isfinite(p.x) and math.isfinite(p.y)]
        limits = resolve_limits((p.x for p in finite), (p.y for p in finite))
        return cls.from_limits(limits, plot_rect)

    @classmethod
    def for_trend(
        cls,
        records: Sequence[TrendRecord],
        plot_rect: PlotRect,
        *,
        headroom: float = 5.0,
    ) -> "CoordinateProjector":
        # Ordinal x: arrival position, not a data field.
        limits = resolve_limits(
            range(len(records)),
            (r.value for r in records if math.isfinite(r.value)),
            y_floor=0.0,
            y_headroom=headroom,
        )
        return cls.from_limits(limits, plot_rect)

    def project(self, x: float, y: float) -> tuple[float, float]:
        return (self.x_scale(x), self.y_scale(y))

    def project_point(self, point: DataPoint | Centroid) -> tuple[float, float]:
        return self.project(point.x, point.y)

    def project_index(self, index: int, value: float) -> tuple[float, float]:
        return self.project(float(index), value)
