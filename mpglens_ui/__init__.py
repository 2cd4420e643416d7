"""Interactive chart components for the fuel-efficiency dashboard."""

from .charts import ClusterScatterChart, PredictionTrendChart
from .config import (
    SCATTER_DEFAULTS,
    TREND_DEFAULTS,
    ChartConfig,
    ChartTheme,
    config_from_mapping,
    load_chart_config,
    validate_theme,
)
from .interaction import EmphasisStyle, HoverController, MarkerTransition
from .tooltip import HIDDEN, Tooltip, TooltipState, scatter_tooltip, trend_tooltip

__all__ = [
    "ChartConfig",
    "ChartTheme",
    "ClusterScatterChart",
    "EmphasisStyle",
    "HIDDEN",
    "HoverController",
    "MarkerTransition",
    "PredictionTrendChart",
    "SCATTER_DEFAULTS",
    "TREND_DEFAULTS",
    "Tooltip",
    "TooltipState",
    "config_from_mapping",
    "load_chart_config",
    "scatter_tooltip",
    "trend_tooltip",
    "validate_theme",
]
