from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import tomllib
from typing import Any, Literal, Mapping

from mpglens_plot.palette import CATEGORY10, parse_hex_color
from mpglens_plot.scene import SceneStyle

from .interaction import EmphasisStyle


ChartKind = Literal["scatter", "trend"]


@dataclass(frozen=True)
class ChartTheme:
    """Color tokens for one chart, as hex strings."""

    background: str = "#00000000"
    axis: str = "#D0DAE8"
    text: str = "#FFFFFF"
    marker: str = "#FFAB00"
    line: str = "#69B3A2"
    centroid: str = "#FF0000"
    palette: tuple[str, ...] = CATEGORY10


DEFAULT_THEME = ChartTheme()


def validate_theme(overrides: Mapping[str, Any] | None = None) -> ChartTheme:
    """Merge theme overrides onto the defaults, rejecting unknown or malformed tokens."""

    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in ("background", "axis", "text", "marker", "line", "centroid"):
        try:
            parse_hex_color(raw[key])
        except ValueError as exc:
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)") from exc

    palette = raw["palette"]
    if isinstance(palette, str) or not isinstance(palette, (list, tuple)) or not palette:
        raise ValueError("Token `palette` must be a non-empty list of hex colors")
    for color in palette:
        parse_hex_color(color)

    return ChartTheme(
        background=str(raw["background"]),
        axis=str(raw["axis"]),
        text=str(raw["text"]),
        marker=str(raw["marker"]),
        line=str(raw["line"]),
        centroid=str(raw["centroid"]),
        palette=tuple(str(c) for c in palette),
    )


@dataclass(frozen=True)
class ChartConfig:
    kind: ChartKind
    width: int
    height: int
    margin_top: int
    margin_right: int
    margin_bottom: int
    margin_left: int
    x_label: str
    y_label: str
    x_label_offset: float = 40.0
    y_label_offset: float = 40.0
    tick_count: int = 10
    marker_radius: float = 5.0
    hover_radius: float = 8.0
    hover_darken_steps: float = 1.0
    transition_ms: float = 200.0
    tooltip_offset_x: float = 10.0
    tooltip_offset_y: float = -20.0
    centroid_size: float = 200.0
    line_width: float = 2.0
    y_headroom: float = 5.0
    theme: ChartTheme = DEFAULT_THEME

    def __post_init__(self) -> None:
        if self.kind not in ("scatter", "trend"):
            raise ValueError(f"unknown chart kind: {self.kind}")
        if self.hover_radius < self.marker_radius:
            raise ValueError("hover_radius must be >= marker_radius")
        if self.transition_ms < 0:
            raise ValueError("transition_ms must be >= 0")
        if self.y_headroom < 0:
            raise ValueError("y_headroom must be >= 0")
        # Surface geometry is validated by SceneStyle itself.
        self.scene_style()

    def scene_style(self) -> SceneStyle:
        return SceneStyle(
            width=self.width,
            height=self.height,
            margin=(self.margin_top, self.margin_right, self.margin_bottom, self.margin_left),
            x_label=self.x_label,
            y_label=self.y_label,
            x_label_offset=self.x_label_offset,
            y_label_offset=self.y_label_offset,
            tick_count=self.tick_count,
            integer_x_ticks=self.kind == "trend",
            axis_color=parse_hex_color(self.theme.axis),
            text_color=parse_hex_color(self.theme.text),
            marker_radius=self.marker_radius,
            palette=self.theme.palette,
            marker_color=parse_hex_color(self.theme.marker),
            centroid_color=parse_hex_color(self.theme.centroid),
            centroid_size=self.centroid_size,
            line_color=parse_hex_color(self.theme.line),
            line_width=self.line_width,
            y_headroom=self.y_headroom,
        )

    def emphasis(self) -> EmphasisStyle:
        return EmphasisStyle(
            hover_radius=self.hover_radius,
            darken_steps=self.hover_darken_steps,
            duration_s=self.transition_ms / 1000.0,
        )

    @property
    def tooltip_offset(self) -> tuple[float, float]:
        return (self.tooltip_offset_x, self.tooltip_offset_y)


SCATTER_DEFAULTS = ChartConfig(
    kind="scatter",
    width=800,
    height=600,
    margin_top=20,
    margin_right=30,
    margin_bottom=50,
    margin_left=50,
    x_label="PCA Component 1",
    y_label="PCA Component 2",
)

TREND_DEFAULTS = ChartConfig(
    kind="trend",
    width=600,
    height=400,
    margin_top=20,
    margin_right=30,
    margin_bottom=60,
    margin_left=70,
    x_label="Prediction Number",
    y_label="Predicted Fuel Efficiency (MPG)",
    y_label_offset=50.0,
)

_DEFAULTS: dict[str, ChartConfig] = {"scatter": SCATTER_DEFAULTS, "trend": TREND_DEFAULTS}


def config_from_mapping(kind: ChartKind, raw: Mapping[str, Any] | None = None) -> ChartConfig:
    if kind not in _DEFAULTS:
        raise ValueError(f"unknown chart kind: {kind}")
    base = _DEFAULTS[kind]
    values: dict[str, Any] = {f.name: getattr(base, f.name) for f in fields(ChartConfig)}
    raw = dict(raw or {})
    theme_overrides = raw.pop("theme", None)
    for key, value in raw.items():
        if key == "kind" or key not in values:
            raise ValueError(f"unknown {kind} chart setting: {key}")
        values[key] = _coerce_setting(key, value, type(values[key]))
    if theme_overrides is not None:
        if not isinstance(theme_overrides, Mapping):
            raise ValueError("`theme` must be a table")
        values["theme"] = validate_theme(theme_overrides)
    return ChartConfig(**values)


def load_chart_config(path: str | Path, kind: ChartKind) -> ChartConfig:
    """Read the ``[scatter]`` or ``[trend]`` table of a TOML file over the defaults."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    section = raw.get(kind, {})
    if not isinstance(section, dict):
        raise ValueError(f"`{kind}` must be a table")
    return config_from_mapping(kind, section)


def _coerce_setting(key: str, value: Any, expected: type) -> Any:
    if expected is bool or isinstance(value, bool):
        raise ValueError(f"setting `{key}` has unsupported type")
    if expected is int:
        if not isinstance(value, int):
            raise ValueError(f"setting `{key}` must be an integer")
        return value
    if expected is float:
        if not isinstance(value, (int, float)):
            raise ValueError(f"setting `{key}` must be a number")
        return float(value)
    if expected is str:
        if not isinstance(value, str):
            raise ValueError(f"setting `{key}` must be a string")
        return value
    raise ValueError(f"setting `{key}` cannot be overridden")
