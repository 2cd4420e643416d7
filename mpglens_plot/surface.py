from __future__ import annotations

import logging

import numpy as np

from mpglens_plot.frame import CircleMarker, Frame, FrameDiff, diff_frames
from mpglens_plot.palette import RGBA
from mpglens_plot.raster import new_canvas, rasterize_frame


LOGGER = logging.getLogger(__name__)


class DrawingSurface:
    """Drawing target owned by exactly one chart.

    The surface never accumulates elements: ``present`` swaps in a complete frame
    and ``clear`` drops it, so nothing from an earlier frame can linger.
    """

    def __init__(self, width: int, height: int, *, background: RGBA = (0, 0, 0, 0)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("surface width/height must be > 0")
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self._frame: Frame | None = None
        self._revision = 0
        self._released = False

    @property
    def frame(self) -> Frame | None:
        return self._frame

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def released(self) -> bool:
        return self._released

    def present(self, frame: Frame) -> FrameDiff:
        if self._released:
            LOGGER.debug("present() on released surface ignored")
            return FrameDiff()
        if (frame.width, frame.height) != (self.width, self.height):
            raise ValueError(
                f"frame size {frame.width}x{frame.height} does not match surface {self.width}x{self.height}"
            )
        diff = diff_frames(self._frame, frame)
        self._frame = frame
        self._revision += 1
        return diff

    def clear(self) -> FrameDiff:
        if self._released:
            return FrameDiff()
        diff = diff_frames(self._frame, None)
        self._frame = None
        self._revision += 1
        return diff

    def update_marker(self, marker: CircleMarker) -> bool:
        """Swap one marker in the current frame; ``False`` if it is no longer shown."""

        if self._released or self._frame is None or self._frame.marker(marker.marker_id) is None:
            return False
        self._frame = self._frame.replace_marker(marker)
        self._revision += 1
        return True

    def hit_test(self, x: float, y: float) -> CircleMarker | None:
        if self._frame is None:
            return None
        # Later markers paint over earlier ones, so search top-down.
        for marker in reversed(self._frame.markers):
            if marker.hoverable and marker.contains(x, y):
                return marker
        return None

    def to_rgba(self) -> np.ndarray:
        if self._frame is None:
            return new_canvas(self.width, self.height, color=self.background)
        return rasterize_frame(self._frame, background=self.background)

    def release(self) -> None:
        self._frame = None
        self._released = True
