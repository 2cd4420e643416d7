from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from mpglens_service import DEFAULT_BASE_URL, PredictionInputs, ServiceClient, insight_for
from mpglens_ui import (
    SCATTER_DEFAULTS,
    TREND_DEFAULTS,
    ChartConfig,
    ClusterScatterChart,
    PredictionTrendChart,
    load_chart_config,
)


def run_cluster(client: ServiceClient, config: ChartConfig = SCATTER_DEFAULTS) -> dict[str, Any]:
    chart = ClusterScatterChart(config)
    try:
        result = client.load_scatter_dataset()
        chart.set_dataset(result.payload, sequence=result.sequence)
        frame = chart.frame
        clusters: dict[str, str | None] = {}
        for cluster_id in sorted({p.cluster_id for p in chart.dataset.points}):
            insight = insight_for(cluster_id)
            clusters[str(cluster_id)] = None if insight is None else insight.description
        return {
            "ok": result.ok,
            "error": result.error,
            "points": 0 if frame is None else len(frame.markers),
            "centroids": 0 if frame is None else len(frame.centroids),
            "elements": 0 if frame is None else frame.element_count(),
            "redraws": chart.redraw_count,
            "clusters": clusters,
        }
    finally:
        chart.destroy()


def run_predictions(
    client: ServiceClient,
    inputs: list[PredictionInputs],
    config: ChartConfig = TREND_DEFAULTS,
) -> dict[str, Any]:
    chart = PredictionTrendChart(config)
    try:
        failed = 0
        for item in inputs:
            record = client.fetch_prediction(item)
            if record is None:
                failed += 1
                continue
            chart.append(record)
        left_axis = chart.frame.axes[1] if chart.frame is not None else None
        return {
            "predictions": [{"label": r.label, "value": r.value} for r in chart.buffer.records()],
            "failed": failed,
            "redraws": chart.redraw_count,
            "y_ticks": [] if left_axis is None else [t.label for t in left_axis.ticks],
        }
    finally:
        chart.destroy()


def main() -> None:
    parser = argparse.ArgumentParser(prog="mpglens")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--timeout", type=float, default=10.0)
    parser.add_argument("--config", type=Path, default=None, help="TOML file with [scatter] / [trend] tables.")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("cluster", help="Fetch the cluster graph and render the scatter chart headlessly.")

    predict = sub.add_parser("predict", help="Request predictions and accumulate them on the trend chart.")
    predict.add_argument("--engine-displacement", type=float, nargs="+", default=[3.5])
    predict.add_argument("--cylinders", type=int, default=6)
    predict.add_argument("--city-fe", type=float, default=20.0)
    predict.add_argument("--highway-fe", type=float, default=28.0)
    predict.add_argument("--co2", type=float, default=300.0)
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    client = ServiceClient(args.base_url, timeout_s=args.timeout)

    if args.command == "cluster":
        config = load_chart_config(args.config, "scatter") if args.config else SCATTER_DEFAULTS
        print(json.dumps(run_cluster(client, config), indent=2, sort_keys=True))
        return

    if args.command == "predict":
        config = load_chart_config(args.config, "trend") if args.config else TREND_DEFAULTS
        inputs = [
            PredictionInputs(
                engine_displacement=displacement,
                cylinders=args.cylinders,
                city_fe=args.city_fe,
                highway_fe=args.highway_fe,
                co2=args.co2,
            )
            for displacement in args.engine_displacement
        ]
        print(json.dumps(run_predictions(client, inputs, config), indent=2, sort_keys=True))
        return

    raise RuntimeError(f"unsupported command: {args.command}")


if __name__ == "__main__":
    main()
