from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from mpglens_plot.errors import PlotDataError
from mpglens_plot.records import Centroid, ClusterDetail, DataPoint, ScatterDataset


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_scatter(
    x: Any = "x",
    y: Any = "y",
    cluster: Any = "cluster",
    *,
    data: Any = None,
    details: Sequence[ClusterDetail] | None = None,
    centroids: Any = None,
) -> ScatterDataset:
    """Build a ``ScatterDataset`` from column-oriented inputs.

    ``x``/``y``/``cluster`` may be sequences, numpy arrays, torch tensors or, when
    ``data`` is a pandas DataFrame, column names. ``centroids`` accepts an ``(k, 2)``
    array whose row index is the cluster id.
    """

    x_arr = _coerce_1d_numeric(_resolve_input(x, key="x", data=data), label="x")
    y_arr = _coerce_1d_numeric(_resolve_input(y, key="y", data=data), label="y")
    c_arr = _coerce_1d_numeric(_resolve_input(cluster, key="cluster", data=data), label="cluster")

    if not (x_arr.shape == y_arr.shape == c_arr.shape):
        raise PlotDataError(f"x, y and cluster length mismatch: {x_arr.size}, {y_arr.size}, {c_arr.size}")
    if details is not None and len(details) != x_arr.size:
        raise PlotDataError(f"details length mismatch: {len(details)} != {x_arr.size}")
    if not np.all(np.isfinite(x_arr) & np.isfinite(y_arr)):
        raise PlotDataError("scatter coordinates must be finite")
    if not np.all(np.isfinite(c_arr)) or not np.all(np.equal(np.mod(c_arr, 1.0), 0.0)):
        raise PlotDataError("cluster ids must be integers")

    points = tuple(
        DataPoint(
            x=float(px),
            y=float(py),
            cluster_id=int(pc),
            detail=details[i] if details is not None else ClusterDetail(),
        )
        for i, (px, py, pc) in enumerate(zip(x_arr.tolist(), y_arr.tolist(), c_arr.tolist(), strict=True))
    )
    return ScatterDataset(points=points, centroids=_coerce_centroids(centroids))


def _coerce_centroids(value: Any) -> tuple[Centroid, ...]:
    if value is None:
        return ()
    if torch is not None and isinstance(value, torch.Tensor):
        value = value.detach().cpu().to(torch.float64).numpy()
    arr = np.asarray(value, dtype=np.float64)
    if arr.size == 0:
        return ()
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise PlotDataError("centroids must have shape (k, 2)")
    if not np.all(np.isfinite(arr)):
        raise PlotDataError("centroid coordinates must be finite")
    return tuple(Centroid(x=float(row[0]), y=float(row[1]), cluster_id=i) for i, row in enumerate(arr.tolist()))


def _resolve_input(value: Any, key: str, data: Any) -> Any:
    if data is not None:
        if pd is None:
            raise PlotDataError("pandas is required when using `data=`")
        if not isinstance(data, pd.DataFrame):
            raise PlotDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise PlotDataError(f"column not found: {value}")
            return data[value]
        return value
    if isinstance(value, str):
        raise PlotDataError(f"`{key}` given as column name without `data=`")
    if value is None:
        raise PlotDataError(f"{key} input is required")
    return value


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
