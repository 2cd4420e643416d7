from mpglens_plot.adapters import normalize_scatter
from mpglens_plot.buffer import BufferChange, TrendBuffer
from mpglens_plot.errors import PlotDataError
from mpglens_plot.frame import Axis, CircleMarker, CrossMarker, Frame, FrameDiff, Polyline, TextLabel, Tick
from mpglens_plot.palette import CATEGORY10, CategoricalPalette, darker
from mpglens_plot.projector import CoordinateProjector
from mpglens_plot.records import Centroid, ClusterDetail, DataPoint, ScatterDataset, TrendRecord
from mpglens_plot.scales import DataLimits, LinearScale, build_scale
from mpglens_plot.scene import SceneRenderer, SceneStyle
from mpglens_plot.surface import DrawingSurface

__all__ = [
    "Axis",
    "BufferChange",
    "CATEGORY10",
    "CategoricalPalette",
    "Centroid",
    "CircleMarker",
    "ClusterDetail",
    "CoordinateProjector",
    "CrossMarker",
    "DataLimits",
    "DataPoint",
    "DrawingSurface",
    "Frame",
    "FrameDiff",
    "LinearScale",
    "PlotDataError",
    "Polyline",
    "ScatterDataset",
    "SceneRenderer",
    "SceneStyle",
    "TextLabel",
    "Tick",
    "TrendBuffer",
    "TrendRecord",
    "build_scale",
    "darker",
    "normalize_scatter",
]
