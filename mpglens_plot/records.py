from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import math
from typing import Any

from mpglens_plot.errors import PlotDataError


DETAIL_KEYS = {
    "car_model_year": "Car Model and Year",
    "combined_fe": "Combined FE",
    "annual_fuel_cost": "Annual Fuel Cost",
    "cluster": "Cluster",
    "distance_from_cluster": "Distance from Cluster",
}


@dataclass(frozen=True)
class ClusterDetail:
    """Display-only payload carried by a scatter point for its tooltip."""

    car_model_year: str | None = None
    combined_fe: float | None = None
    annual_fuel_cost: float | None = None
    cluster: int | None = None
    distance_from_cluster: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "ClusterDetail":
        if not raw:
            return cls()
        values = {attr: raw.get(key) for attr, key in DETAIL_KEYS.items()}
        car = values["car_model_year"]
        return cls(
            car_model_year=None if car is None else str(car),
            combined_fe=_optional_float(values["combined_fe"]),
            annual_fuel_cost=_optional_float(values["annual_fuel_cost"]),
            cluster=_optional_int(values["cluster"]),
            distance_from_cluster=_optional_float(values["distance_from_cluster"]),
        )


@dataclass(frozen=True)
class DataPoint:
    x: float
    y: float
    cluster_id: int
    detail: ClusterDetail = ClusterDetail()


@dataclass(frozen=True)
class Centroid:
    x: float
    y: float
    cluster_id: int


@dataclass(frozen=True)
class TrendRecord:
    label: str
    value: float


@dataclass(frozen=True)
class ScatterDataset:
    points: tuple[DataPoint, ...] = ()
    centroids: tuple[Centroid, ...] = ()

    @classmethod
    def empty(cls) -> "ScatterDataset":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.points and not self.centroids

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScatterDataset":
        """Build a dataset from the cluster-graph response body."""

        if not isinstance(payload, Mapping):
            raise PlotDataError("cluster payload must be a mapping")
        raw_points = payload.get("points") or []
        raw_centroids = payload.get("centroids") or []
        if not isinstance(raw_points, Sequence) or not isinstance(raw_centroids, Sequence):
            raise PlotDataError("`points` and `centroids` must be lists")
        points = tuple(_point_from_mapping(raw, index=i) for i, raw in enumerate(raw_points))
        centroids = tuple(_centroid_from_mapping(raw, index=i) for i, raw in enumerate(raw_centroids))
        return cls(points=points, centroids=centroids)


def _point_from_mapping(raw: Any, *, index: int) -> DataPoint:
    if not isinstance(raw, Mapping):
        raise PlotDataError(f"point {index} must be a mapping")
    details = raw.get("details")
    return DataPoint(
        x=_required_float(raw, "x", index=index),
        y=_required_float(raw, "y", index=index),
        cluster_id=_required_int(raw, "cluster", index=index),
        detail=ClusterDetail.from_mapping(details if isinstance(details, Mapping) else None),
    )


def _centroid_from_mapping(raw: Any, *, index: int) -> Centroid:
    if not isinstance(raw, Mapping):
        raise PlotDataError(f"centroid {index} must be a mapping")
    return Centroid(
        x=_required_float(raw, "x", index=index),
        y=_required_float(raw, "y", index=index),
        cluster_id=_required_int(raw, "cluster", index=index),
    )


def _required_float(raw: Mapping[str, Any], key: str, *, index: int) -> float:
    if key not in raw:
        raise PlotDataError(f"record {index} missing `{key}`")
    try:
        value = float(raw[key])
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"record {index} has non-numeric `{key}`: {raw[key]!r}") from exc
    if not math.isfinite(value):
        raise PlotDataError(f"record {index} has non-finite `{key}`")
    return value


def _required_int(raw: Mapping[str, Any], key: str, *, index: int) -> int:
    value = _required_float(raw, key, index=index)
    if not value.is_integer():
        raise PlotDataError(f"record {index} `{key}` must be an integer")
    return int(value)


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> int | None:
    out = _optional_float(value)
    if out is None or not math.isfinite(out):
        return None
    return int(out)
