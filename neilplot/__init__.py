from neilplot.axis import AutoTicks, Axis, FixedTicks
from neilplot.bounds import Bounds, CategoricalRange, ContinuousRange, DataBounds, Range, RangeUnit, Scale
from neilplot.columns import Column, ColumnDType, as_column
from neilplot.errors import (
    DataExtractionError,
    EmptyRangeError,
    IncompatibleRangeError,
    PlotDataError,
    PlotError,
    TransformError,
)
from neilplot.marker import Marker
from neilplot.plot import Plot
from neilplot.series import BarChartSeries, HistogramSeries, LineSeries, ScatterSeries
from neilplot.style import LegendStyle, PlotStyle
from neilplot.theme import ROCKET, LinearPalette, Oklch

__all__ = [
    "AutoTicks",
    "Axis",
    "BarChartSeries",
    "Bounds",
    "CategoricalRange",
    "Column",
    "ColumnDType",
    "ContinuousRange",
    "DataBounds",
    "DataExtractionError",
    "EmptyRangeError",
    "FixedTicks",
    "HistogramSeries",
    "IncompatibleRangeError",
    "LegendStyle",
    "LineSeries",
    "LinearPalette",
    "Marker",
    "Oklch",
    "Plot",
    "PlotDataError",
    "PlotError",
    "PlotStyle",
    "ROCKET",
    "Range",
    "RangeUnit",
    "Scale",
    "ScatterSeries",
    "TransformError",
    "as_column",
]
