from __future__ import annotations

from dataclasses import dataclass

from mpglens_plot.records import DataPoint, TrendRecord


@dataclass(frozen=True)
class TooltipState:
    visible: bool = False
    content: str = ""
    screen_x: float = 0.0
    screen_y: float = 0.0


HIDDEN = TooltipState()


class Tooltip:
    """Floating detail overlay scoped to one chart instance."""

    def __init__(self, offset: tuple[float, float] = (10.0, -20.0)) -> None:
        self.offset = offset
        self._state = HIDDEN
        self._destroyed = False

    @property
    def state(self) -> TooltipState:
        return self._state

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def show(self, content: str, pointer_x: float, pointer_y: float) -> TooltipState:
        if self._destroyed:
            return self._state
        self._state = TooltipState(True, content, *self._anchor(pointer_x, pointer_y))
        return self._state

    def move(self, pointer_x: float, pointer_y: float) -> TooltipState:
        if self._destroyed or not self._state.visible:
            return self._state
        self._state = TooltipState(True, self._state.content, *self._anchor(pointer_x, pointer_y))
        return self._state

    def hide(self) -> TooltipState:
        self._state = HIDDEN
        return self._state

    def destroy(self) -> None:
        self._state = HIDDEN
        self._destroyed = True

    def _anchor(self, pointer_x: float, pointer_y: float) -> tuple[float, float]:
        # Offset keeps the overlay from covering the cursor.
        return (float(pointer_x) + self.offset[0], float(pointer_y) + self.offset[1])


def scatter_tooltip(point: DataPoint) -> str:
    detail = point.detail
    return "\n".join(
        (
            f"Car: {_text(detail.car_model_year)}",
            f"Combined FE: {_text(detail.combined_fe)} MPG",
            f"Annual Cost: ${_text(detail.annual_fuel_cost)}",
            f"Cluster: {_text(detail.cluster)}",
            f"Distance from Avg: {_text(detail.distance_from_cluster)}",
        )
    )


def trend_tooltip(record: TrendRecord) -> str:
    return f"Input: {record.label}\nEfficiency: {record.value:.2f}"


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
