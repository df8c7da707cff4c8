from neilplot.series.bar_chart import BarChartSeries
from neilplot.series.base import LegendItem, Series
from neilplot.series.histogram import HistogramSeries
from neilplot.series.line import LineSeries
from neilplot.series.scatter import ScatterSeries, Trendline

__all__ = [
    "BarChartSeries",
    "HistogramSeries",
    "LegendItem",
    "LineSeries",
    "ScatterSeries",
    "Series",
    "Trendline",
]
