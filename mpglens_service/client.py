from __future__ import annotations

from dataclasses import dataclass
import itertools
import json
import logging
import math
import threading
from typing import Any
import urllib.error
import urllib.parse
import urllib.request

from mpglens_plot.errors import PlotDataError
from mpglens_plot.records import ScatterDataset, TrendRecord

from .inputs import ClusterInputs, PredictionInputs


LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:5000"
USER_AGENT = "mpglens-dashboard/1.0"


class ServiceError(RuntimeError):
    """Raised when the prediction service cannot produce a usable response."""


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one request, stamped with the order in which it was issued."""

    sequence: int
    payload: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ServiceClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, *, timeout_s: float = 10.0) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def request_json(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        data = None
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urllib.request.Request(url=url, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            err = exc.read().decode("utf-8", errors="ignore")
            raise ServiceError(f"service error {exc.code} on {method} {path}: {_error_message(err)}") from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            raise ServiceError(f"service unreachable on {method} {path}: {exc}") from exc
        try:
            return json.loads(body) if body else None
        except json.JSONDecodeError as exc:
            raise ServiceError(f"invalid JSON from {method} {path}") from exc

    def fetch_cluster_graph(self) -> FetchResult:
        return self._call("GET", "/cluster-graph")

    def predict_fuel_efficiency(self, inputs: PredictionInputs) -> FetchResult:
        return self._call("POST", "/predict-fuel-efficiency", inputs.to_payload())

    def predict_cluster(self, inputs: ClusterInputs) -> FetchResult:
        return self._call("POST", "/predict-cluster", inputs.to_payload())

    def list_cars(self) -> FetchResult:
        return self._call("GET", "/cars")

    def car_details(self, name: str) -> FetchResult:
        return self._call("GET", f"/car-details?name={urllib.parse.quote(name)}")

    def load_scatter_dataset(self) -> FetchResult:
        """Cluster graph as a ``ScatterDataset``; any failure yields an empty dataset."""

        result = self.fetch_cluster_graph()
        if not result.ok:
            return FetchResult(sequence=result.sequence, payload=ScatterDataset.empty(), error=result.error)
        try:
            dataset = ScatterDataset.from_payload(result.payload)
        except PlotDataError as exc:
            LOGGER.warning("malformed cluster graph payload: %s", exc)
            return FetchResult(sequence=result.sequence, payload=ScatterDataset.empty(), error=str(exc))
        return FetchResult(sequence=result.sequence, payload=dataset)

    def fetch_prediction(self, inputs: PredictionInputs) -> TrendRecord | None:
        """Prediction as a labelled ``TrendRecord``, or ``None`` when the call failed."""

        result = self.predict_fuel_efficiency(inputs)
        if not result.ok:
            return None
        raw = result.payload.get("predicted_comb_fe") if isinstance(result.payload, dict) else None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            LOGGER.warning("prediction response missing numeric `predicted_comb_fe`: %r", raw)
            return None
        if not math.isfinite(value):
            LOGGER.warning("prediction response is not finite: %r", raw)
            return None
        return TrendRecord(label=inputs.label(), value=value)

    def _next_sequence(self) -> int:
        with self._lock:
            return next(self._sequence)

    def _call(self, method: str, path: str, payload: dict[str, Any] | None = None) -> FetchResult:
        sequence = self._next_sequence()
        try:
            body = self.request_json(method, path, payload)
        except ServiceError as exc:
            LOGGER.warning("%s", exc)
            return FetchResult(sequence=sequence, error=str(exc))
        return FetchResult(sequence=sequence, payload=body)


def _error_message(body: str) -> str:
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body.strip()
    if isinstance(parsed, dict) and "error" in parsed:
        return str(parsed["error"])
    return body.strip()
