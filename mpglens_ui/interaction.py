from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import dataclasses
import time
from typing import Literal

from mpglens_plot.frame import CircleMarker
from mpglens_plot.palette import RGBA, darker, mix
from mpglens_plot.surface import DrawingSurface

from .tooltip import HIDDEN, Tooltip, TooltipState


MarkerState = Literal["idle", "hovered"]


@dataclass(frozen=True)
class EmphasisStyle:
    hover_radius: float = 8.0
    darken_steps: float = 1.0
    duration_s: float = 0.2

    def __post_init__(self) -> None:
        if self.hover_radius <= 0:
            raise ValueError("hover_radius must be > 0")
        if self.duration_s < 0:
            raise ValueError("duration_s must be >= 0")


@dataclass(frozen=True)
class MarkerTransition:
    """Fixed-duration radius/fill tween; sampling never blocks input handling."""

    marker_id: str
    from_radius: float
    to_radius: float
    from_fill: RGBA
    to_fill: RGBA
    start_s: float
    duration_s: float

    def progress(self, now: float) -> float:
        if self.duration_s <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.start_s) / self.duration_s))

    def sample(self, now: float) -> tuple[float, RGBA]:
        t = self.progress(now)
        radius = self.from_radius + (self.to_radius - self.from_radius) * t
        return radius, mix(self.from_fill, self.to_fill, t)


class HoverController:
    """Idle → Hovered → Idle state machine over a surface's hoverable markers.

    At most one marker is hovered at a time. Entering a marker shows the tooltip
    and starts the emphasis transition, moving only repositions the tooltip, and
    leaving hides the tooltip and transitions the marker back to its baseline.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        tooltip: Callable[[], Tooltip],
        content_for: Callable[[CircleMarker], str],
        *,
        emphasis: EmphasisStyle = EmphasisStyle(),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.surface = surface
        self.emphasis = emphasis
        self._tooltip = tooltip
        self._content_for = content_for
        self._clock = clock
        self._hovered: str | None = None
        self._baselines: dict[str, tuple[float, RGBA]] = {}
        self._transitions: dict[str, MarkerTransition] = {}
        self._active_tooltip: Tooltip | None = None

    @property
    def hovered_marker_id(self) -> str | None:
        return self._hovered

    @property
    def tooltip_state(self) -> TooltipState:
        if self._active_tooltip is None:
            return HIDDEN
        return self._active_tooltip.state

    @property
    def animating(self) -> bool:
        return bool(self._transitions)

    def state_of(self, marker_id: str) -> MarkerState:
        return "hovered" if marker_id == self._hovered else "idle"

    def pointer_enter(self, marker_id: str, x: float, y: float) -> bool:
        frame = self.surface.frame
        marker = frame.marker(marker_id) if frame is not None else None
        if marker is None or not marker.hoverable:
            return False
        if self._hovered == marker_id:
            self.pointer_move_within(x, y)
            return True
        if self._hovered is not None:
            self.pointer_leave()

        baseline = self._baselines.setdefault(marker_id, (marker.radius, marker.fill))
        self._hovered = marker_id
        self._active_tooltip = self._tooltip()
        self._active_tooltip.show(self._content_for(marker), x, y)
        self._start_transition(
            marker,
            to_radius=self.emphasis.hover_radius,
            to_fill=darker(baseline[1], self.emphasis.darken_steps),
        )
        return True

    def pointer_move_within(self, x: float, y: float) -> None:
        if self._hovered is not None and self._active_tooltip is not None:
            self._active_tooltip.move(x, y)

    def pointer_move(self, x: float, y: float) -> MarkerState:
        """Hit-test ``(x, y)`` and dispatch the enter/move/leave transition it implies."""

        hit = self.surface.hit_test(x, y)
        if hit is None:
            if self._hovered is not None:
                self.pointer_leave()
            return "idle"
        if hit.marker_id == self._hovered:
            self.pointer_move_within(x, y)
            return "hovered"
        self.pointer_enter(hit.marker_id, x, y)
        return "hovered"

    def pointer_leave(self) -> None:
        if self._hovered is None:
            return
        marker_id = self._hovered
        self._hovered = None
        if self._active_tooltip is not None:
            self._active_tooltip.hide()
        frame = self.surface.frame
        marker = frame.marker(marker_id) if frame is not None else None
        baseline = self._baselines.get(marker_id)
        if marker is None or baseline is None:
            self._baselines.pop(marker_id, None)
            return
        self._start_transition(marker, to_radius=baseline[0], to_fill=baseline[1])

    def reset(self) -> None:
        """Forget hover state after the surface was redrawn or cleared."""

        self._hovered = None
        self._baselines.clear()
        self._transitions.clear()
        if self._active_tooltip is not None:
            self._active_tooltip.hide()

    def tick(self, now: float | None = None) -> bool:
        """Advance running transitions; ``True`` while any are still in flight."""

        if not self._transitions:
            return False
        now = self._clock() if now is None else now
        for marker_id, transition in tuple(self._transitions.items()):
            self._apply(transition, now)
            if transition.progress(now) >= 1.0:
                del self._transitions[marker_id]
                if marker_id != self._hovered:
                    self._baselines.pop(marker_id, None)
        return bool(self._transitions)

    def _start_transition(self, marker: CircleMarker, *, to_radius: float, to_fill: RGBA) -> None:
        now = self._clock()
        transition = MarkerTransition(
            marker_id=marker.marker_id,
            from_radius=marker.radius,
            to_radius=to_radius,
            from_fill=marker.fill,
            to_fill=to_fill,
            start_s=now,
            duration_s=self.emphasis.duration_s,
        )
        self._transitions[marker.marker_id] = transition
        self.tick(now)

    def _apply(self, transition: MarkerTransition, now: float) -> None:
        frame = self.surface.frame
        marker = frame.marker(transition.marker_id) if frame is not None else None
        if marker is None:
            return
        radius, fill = transition.sample(now)
        self.surface.update_marker(dataclasses.replace(marker, radius=radius, fill=fill))
