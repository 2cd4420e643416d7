from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import numpy as np

from mpglens_plot.errors import PlotDataError


DEFAULT_DOMAIN = (0.0, 1.0)


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class LinearScale:
    """Linear map from a data domain onto a pixel range.

    A degenerate domain (``domain_min == domain_max``) maps every input onto the
    midpoint of the pixel range instead of dividing by zero.
    """

    domain_min: float
    domain_max: float
    range_start: float
    range_end: float

    def __post_init__(self) -> None:
        for name in ("domain_min", "domain_max", "range_start", "range_end"):
            if not np.isfinite(getattr(self, name)):
                raise PlotDataError(f"{name} must be finite")
        if self.domain_min > self.domain_max:
            raise PlotDataError("domain_min must be <= domain_max")

    @property
    def degenerate(self) -> bool:
        # A span that underflows to zero once halved is as flat as an equal pair.
        return self.domain_min == self.domain_max or self._half_span == 0.0

    @property
    def midpoint(self) -> float:
        return (self.range_start + self.range_end) / 2.0

    @property
    def _half_span(self) -> float:
        # Halving first keeps spans near the float max from overflowing to inf.
        return self.domain_max / 2.0 - self.domain_min / 2.0

    def __call__(self, value: float) -> float:
        if self.degenerate:
            return self.midpoint
        t = (float(value) / 2.0 - self.domain_min / 2.0) / self._half_span
        # Interpolating from both ends keeps the endpoints exact under float rounding.
        return self.range_start * (1.0 - t) + self.range_end * t

    def map_array(self, values: np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        if self.degenerate:
            return np.full(arr.shape, self.midpoint, dtype=np.float64)
        t = (arr / 2.0 - self.domain_min / 2.0) / self._half_span
        return self.range_start * (1.0 - t) + self.range_end * t

    def ticks(self, count: int = 10) -> np.ndarray:
        ticks = generate_nice_ticks(self.domain_min, self.domain_max, count)
        return ticks_within_range(ticks, vmin=self.domain_min, vmax=self.domain_max)


def extent(values: Iterable[float]) -> tuple[float, float]:
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        raise PlotDataError("cannot compute the extent of an empty collection")
    if not np.all(np.isfinite(arr)):
        raise PlotDataError("extent values must be finite")
    return (float(np.min(arr)), float(np.max(arr)))


def build_scale(values: Iterable[float], pixel_range: tuple[float, float]) -> LinearScale:
    vmin, vmax = extent(values)
    return LinearScale(
        domain_min=vmin,
        domain_max=vmax,
        range_start=float(pixel_range[0]),
        range_end=float(pixel_range[1]),
    )


def ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    span = abs(vmax - vmin)
    eps = max(1e-12, span * 1e-9)
    keep = (ticks >= vmin - eps) & (ticks <= vmax + eps)
    return ticks[keep]


def resolve_limits(
    xs: Iterable[float],
    ys: Iterable[float],
    *,
    y_floor: float | None = None,
    y_headroom: float = 0.0,
) -> DataLimits:
    """Data limits for one render pass, recomputed from the records handed in.

    Empty inputs fall back to ``DEFAULT_DOMAIN`` so axes can still be drawn.
    ``y_floor`` caps the lower y bound from above, so values below it still extend
    the domain, and ``y_headroom`` is added above the max.
    """

    x_list = list(xs)
    y_list = list(ys)
    xmin, xmax = extent(x_list) if x_list else DEFAULT_DOMAIN
    if y_list:
        ymin, ymax = extent(y_list)
        ymax += y_headroom
    else:
        ymin, ymax = DEFAULT_DOMAIN
    if y_floor is not None:
        ymin = min(float(y_floor), ymin) if y_list else float(y_floor)
        ymax = max(ymax, ymin)
    return DataLimits(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    endpoints = np.asarray([vmin, vmax], dtype=np.float64)
    raw_span = vmax - vmin
    if not np.isfinite(raw_span) or raw_span <= 0:
        return endpoints
    # Spans near the float limits overflow or underflow below; those fall back to the endpoints.
    with np.errstate(over="ignore", under="ignore", divide="ignore", invalid="ignore"):
        span = _nice_number(raw_span, round_result=False)
        step = _nice_number(span / max(target - 1, 1), round_result=True)
        if not (np.isfinite(span) and np.isfinite(step) and step > 0):
            return endpoints
        tick_min = np.floor(vmin / step) * step
        tick_max = np.ceil(vmax / step) * step
        stop = tick_max + 0.5 * step
        count = (tick_max - tick_min) / step
    if not (np.isfinite(stop) and np.isfinite(count)) or count > 10 * target:
        return endpoints

    ticks = np.arange(tick_min, stop, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = abs(float(ticks[1]) - float(ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
