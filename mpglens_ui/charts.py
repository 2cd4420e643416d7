from __future__ import annotations

from collections.abc import Callable
import logging
import time

import numpy as np

from mpglens_plot.buffer import BufferChange, TrendBuffer
from mpglens_plot.frame import CircleMarker, Frame
from mpglens_plot.palette import parse_hex_color
from mpglens_plot.records import ScatterDataset, TrendRecord
from mpglens_plot.scene import SceneRenderer
from mpglens_plot.surface import DrawingSurface

from .config import SCATTER_DEFAULTS, TREND_DEFAULTS, ChartConfig
from .interaction import HoverController, MarkerState
from .tooltip import HIDDEN, Tooltip, TooltipState, scatter_tooltip, trend_tooltip


LOGGER = logging.getLogger(__name__)


class _ChartBase:
    """Shared lifecycle for a chart that owns one surface and one tooltip overlay."""

    def __init__(self, config: ChartConfig, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.config = config
        self.renderer = SceneRenderer(config.scene_style())
        self.surface = DrawingSurface(
            config.width,
            config.height,
            background=parse_hex_color(config.theme.background),
        )
        self._tooltip: Tooltip | None = None
        self.hover = HoverController(
            self.surface,
            self._ensure_tooltip,
            self._tooltip_content,
            emphasis=config.emphasis(),
            clock=clock,
        )
        self._redraw_count = 0
        self._destroyed = False

    @property
    def frame(self) -> Frame | None:
        return self.surface.frame

    @property
    def redraw_count(self) -> int:
        return self._redraw_count

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def tooltip_state(self) -> TooltipState:
        if self._tooltip is None:
            return HIDDEN
        return self._tooltip.state

    def pointer_move(self, x: float, y: float) -> MarkerState:
        if self._destroyed:
            return "idle"
        return self.hover.pointer_move(x, y)

    def pointer_leave(self) -> None:
        if self._destroyed:
            return
        self.hover.pointer_leave()

    def tick(self, now: float | None = None) -> bool:
        if self._destroyed:
            return False
        return self.hover.tick(now)

    def to_rgba(self) -> np.ndarray:
        return self.surface.to_rgba()

    def destroy(self) -> None:
        """Tear down the overlay and drop the surface; later calls become no-ops."""

        if self._destroyed:
            return
        self.hover.reset()
        if self._tooltip is not None:
            self._tooltip.destroy()
            self._tooltip = None
        self.surface.release()
        self._destroyed = True

    def _ensure_tooltip(self) -> Tooltip:
        if self._tooltip is None:
            self._tooltip = Tooltip(offset=self.config.tooltip_offset)
        return self._tooltip

    def _present(self, frame: Frame) -> None:
        self.hover.reset()
        diff = self.surface.present(frame)
        self._redraw_count += 1
        LOGGER.debug(
            "%s redraw #%d (+%d -%d ~%d markers)",
            type(self).__name__,
            self._redraw_count,
            len(diff.added),
            len(diff.removed),
            len(diff.changed),
        )

    def _tooltip_content(self, marker: CircleMarker) -> str:
        raise NotImplementedError


class ClusterScatterChart(_ChartBase):
    """Scatter plot of cluster-assigned points with centroid crosses."""

    def __init__(self, config: ChartConfig = SCATTER_DEFAULTS, *, clock: Callable[[], float] = time.monotonic) -> None:
        if config.kind != "scatter":
            raise ValueError("ClusterScatterChart requires a scatter config")
        super().__init__(config, clock=clock)
        self._dataset = ScatterDataset.empty()
        self._last_sequence: int | None = None

    @property
    def dataset(self) -> ScatterDataset:
        return self._dataset

    @property
    def last_sequence(self) -> int | None:
        return self._last_sequence

    def set_dataset(self, dataset: ScatterDataset, *, sequence: int | None = None) -> bool:
        """Replace the dataset wholesale and redraw once; ``False`` if ignored."""

        if self._destroyed:
            LOGGER.debug("set_dataset() after destroy ignored")
            return False
        if not self._accept_sequence(sequence):
            return False
        self._dataset = dataset
        self._present(self.renderer.render_scatter(dataset))
        return True

    def _accept_sequence(self, sequence: int | None) -> bool:
        # Unsequenced results apply in arrival order.
        if sequence is None:
            return True
        if self._last_sequence is not None and sequence < self._last_sequence:
            LOGGER.warning("dropped stale cluster dataset (sequence %d < %d)", sequence, self._last_sequence)
            return False
        self._last_sequence = sequence
        return True

    def _tooltip_content(self, marker: CircleMarker) -> str:
        return scatter_tooltip(self._dataset.points[marker.index])


class PredictionTrendChart(_ChartBase):
    """Line chart over the accumulated prediction history."""

    def __init__(self, config: ChartConfig = TREND_DEFAULTS, *, clock: Callable[[], float] = time.monotonic) -> None:
        if config.kind != "trend":
            raise ValueError("PredictionTrendChart requires a trend config")
        super().__init__(config, clock=clock)
        self.buffer = TrendBuffer()
        self._unsubscribe = self.buffer.subscribe(self._on_buffer_change)

    def append(self, record: TrendRecord) -> bool:
        if self._destroyed:
            LOGGER.debug("append() after destroy ignored")
            return False
        self.buffer.append(record)
        return True

    def add_prediction(self, value: float, label: str) -> bool:
        return self.append(TrendRecord(label=label, value=float(value)))

    def reset(self) -> None:
        if self._destroyed:
            return
        self.buffer.reset()

    def destroy(self) -> None:
        if not self._destroyed:
            self._unsubscribe()
        super().destroy()

    def _on_buffer_change(self, change: BufferChange) -> None:
        if change.kind == "clear":
            self.hover.reset()
            self.surface.clear()
            LOGGER.debug("trend chart cleared")
            return
        self._present(self.renderer.render_trend(self.buffer.records()))

    def _tooltip_content(self, marker: CircleMarker) -> str:
        return trend_tooltip(self.buffer.records()[marker.index])
