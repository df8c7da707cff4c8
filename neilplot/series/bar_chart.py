from __future__ import annotations

import logging

import numpy as np

from neilplot.affine import Affine
from neilplot.bounds import CategoricalRange, ContinuousRange, DataBounds, Range, ViewportTransform
from neilplot.columns import Column
from neilplot.errors import DataExtractionError, PlotDataError
from neilplot.render import Path, Render
from neilplot.render.raster.canvas import RGBA
from neilplot.series.base import Series, coerce_color
from neilplot.theme import ROCKET


LOGGER = logging.getLogger(__name__)

# Bars span this far either side of their category index.
BAR_HALF_WIDTH = 0.3


class BarChartSeries(Series):
    """One bar per label, rising from zero to its value."""

    def __init__(self, labels: Column, values: Column) -> None:
        if len(labels) != len(values):
            raise PlotDataError(f"labels and values length mismatch: {len(labels)} != {len(values)}")
        self.labels = labels
        self.values = values
        self.half_width = BAR_HALF_WIDTH
        self.color: RGBA = ROCKET.sample(0.0)
        self.label: str | None = None

    def set_color(self, color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> "BarChartSeries":
        self.color = coerce_color(color, alpha)
        return self

    def set_bar_width(self, width: float) -> "BarChartSeries":
        if not np.isfinite(width) or width <= 0 or width > 1:
            raise ValueError("bar width must be in (0, 1]")
        self.half_width = float(width) / 2.0
        return self

    def legend_color(self) -> RGBA:
        return self.color

    def data_bounds(self) -> DataBounds:
        lo = min(0.0, self.values.min_reduce())
        hi = max(0.0, self.values.max_reduce())
        return DataBounds(
            x=CategoricalRange(self.labels),
            # Bars resting on zero keep the baseline flush with the axis.
            y=ContinuousRange(Range(lo, hi), margin_min=lo < 0.0, margin_max=hi > 0.0),
        )

    def draw(self, render: Render, transform: ViewportTransform) -> None:
        path = Path()
        for i in range(len(self.labels)):
            try:
                value = self.values.get(i)
            except DataExtractionError:
                LOGGER.debug("no bar for %r: value missing", self.labels.label(i))
                continue
            x0, y0 = transform.apply_point(i - self.half_width, 0.0)
            x1, y1 = transform.apply_point(i + self.half_width, value)
            if not all(np.isfinite(v) for v in (x0, y0, x1, y1)):
                continue
            path.move_to(x0, y0).line_to(x1, y0).line_to(x1, y1).line_to(x0, y1).close_path()
        if path.is_empty():
            return
        render.fill(path, Affine.identity(), self.color)
