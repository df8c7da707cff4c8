from __future__ import annotations

from typing import Sequence

import numpy as np

from neilplot.affine import Affine
from neilplot.bounds import ContinuousRange, DataBounds, ViewportTransform
from neilplot.columns import Column
from neilplot.render import Path, Render, StrokeStyle
from neilplot.render.raster.canvas import RGBA
from neilplot.series.base import DEFAULT_COLOR, Series, coerce_color, contiguous_true_runs, require_paired


class LineSeries(Series):
    """Polyline through the points in data order.

    Rows without a drawable position break the line instead of being bridged.
    """

    def __init__(self, x: Column, y: Column) -> None:
        self.x = x
        self.y = y
        self.width = 2.0
        self.dashes: tuple[float, ...] = ()
        self.color: RGBA = DEFAULT_COLOR
        self.label: str | None = None

    def set_width(self, width: float) -> "LineSeries":
        if not np.isfinite(width) or width <= 0:
            raise ValueError("line width must be > 0")
        self.width = float(width)
        return self

    def set_dashes(self, dashes: Sequence[float]) -> "LineSeries":
        pattern = tuple(float(d) for d in dashes)
        if any(d < 0 or not np.isfinite(d) for d in pattern):
            raise ValueError("dash lengths must be finite and >= 0")
        if pattern and sum(pattern) <= 0:
            raise ValueError("dash pattern must have a positive total length")
        self.dashes = pattern
        return self

    def set_color(self, color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> "LineSeries":
        self.color = coerce_color(color, alpha)
        return self

    def legend_color(self) -> RGBA:
        return self.color

    def data_bounds(self) -> DataBounds:
        require_paired(self.x, self.y)
        return DataBounds(x=ContinuousRange.from_column(self.x), y=ContinuousRange.from_column(self.y))

    def draw(self, render: Render, transform: ViewportTransform) -> None:
        require_paired(self.x, self.y)
        px, py = transform.apply(self.x.to_numpy(), self.y.to_numpy())
        visible = np.isfinite(px) & np.isfinite(py)
        path = Path()
        for start, end in contiguous_true_runs(visible):
            if end - start < 2:
                continue
            path.move_to(float(px[start]), float(py[start]))
            for i in range(start + 1, end):
                path.line_to(float(px[i]), float(py[i]))
        if path.is_empty():
            return
        render.stroke(path, Affine.identity(), self.color, StrokeStyle(width=self.width, dashes=self.dashes))
