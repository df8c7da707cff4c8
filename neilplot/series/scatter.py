from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Sequence

import numpy as np

from neilplot.affine import Affine
from neilplot.bounds import ContinuousRange, DataBounds, ViewportTransform
from neilplot.columns import Column, as_column
from neilplot.errors import PlotDataError
from neilplot.marker import Marker
from neilplot.render import Path, Render, StrokeStyle
from neilplot.render.raster.canvas import RGBA
from neilplot.series.base import DEFAULT_COLOR, LegendItem, Series, coerce_color, finite_xy, require_paired
from neilplot.theme import ROCKET


LOGGER = logging.getLogger(__name__)

DEFAULT_MARKER_SIZE = 12.0
DEFAULT_LABEL = "scatter"


@dataclass(frozen=True)
class Trendline:
    degree: int = 1
    color: RGBA = (200, 50, 50, 255)
    width: float = 2.0
    label: str = "trendline"

    def __post_init__(self) -> None:
        if self.degree < 1:
            raise ValueError("trendline degree must be >= 1")
        if self.width <= 0:
            raise ValueError("trendline width must be > 0")

    def sample_count(self) -> int:
        # A straight line needs only its endpoints.
        return 2 if self.degree == 1 else 64


class ScatterSeries(Series):
    """Markers at each (x, y) pair, optionally coloured by a hue column."""

    def __init__(self, x: Column, y: Column) -> None:
        self.x = x
        self.y = y
        self.size = DEFAULT_MARKER_SIZE
        self.marker = Marker.CIRCLE
        self.color: RGBA = DEFAULT_COLOR
        self.label: str | None = DEFAULT_LABEL
        self.hue: Column | None = None
        self.hue_keys: tuple[Any, ...] | None = None
        self.trend: Trendline | None = None

    def set_size(self, size: float) -> "ScatterSeries":
        if not np.isfinite(size) or size <= 0:
            raise ValueError("marker size must be > 0")
        self.size = float(size)
        return self

    def set_marker(self, marker: Marker | str) -> "ScatterSeries":
        self.marker = Marker(marker)
        return self

    def set_color(self, color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> "ScatterSeries":
        self.color = coerce_color(color, alpha)
        return self

    def hue_from(self, column: Any, keys: Sequence[Any] | None = None, *, data: Any = None) -> "ScatterSeries":
        """Colour each point by its hue value, spread evenly over the palette.

        ``keys`` fixes the category order; otherwise categories appear in first-seen order.
        """
        column = as_column(column, data=data, name="hue")
        if len(column) != len(self.x):
            raise PlotDataError(f"hue length mismatch: {len(column)} != {len(self.x)}")
        self.hue = column
        self.hue_keys = tuple(keys) if keys is not None else None
        return self

    def trendline(
        self,
        degree: int = 1,
        *,
        color: tuple[int, int, int] | tuple[int, int, int, int] = (200, 50, 50, 255),
        width: float = 2.0,
    ) -> "ScatterSeries":
        self.trend = Trendline(degree=int(degree), color=coerce_color(color), width=float(width))
        return self

    def legend_color(self) -> RGBA:
        return self.color

    def legend_items(self) -> list[LegendItem]:
        items = super().legend_items()
        if self.trend is not None:
            items.append(LegendItem(label=self.trend.label, color=self.trend.color))
        return items

    def data_bounds(self) -> DataBounds:
        require_paired(self.x, self.y)
        return DataBounds(x=ContinuousRange.from_column(self.x), y=ContinuousRange.from_column(self.y))

    def draw(self, render: Render, transform: ViewportTransform) -> None:
        require_paired(self.x, self.y)
        xs = self.x.to_numpy()
        ys = self.y.to_numpy()
        px, py = transform.apply(xs, ys)
        visible = np.isfinite(px) & np.isfinite(py)
        colors = self._point_colors()
        shape = self.marker.shape()
        for i in np.flatnonzero(visible):
            placement = Affine.scale(self.size).then_translate(float(px[i]), float(py[i]))
            render.fill(shape, placement, colors[i] if colors is not None else self.color)

        if self.trend is not None:
            self._draw_trendline(render, transform)

    def _point_colors(self) -> list[RGBA] | None:
        if self.hue is None:
            return None
        keys = self.hue_keys if self.hue_keys is not None else tuple(self.hue.unique_stable())
        index = {key: i for i, key in enumerate(keys)}
        count = max(1, len(index))
        colors: list[RGBA] = []
        for raw in self.hue.raw:
            try:
                slot = index.get(raw, 0)
            except TypeError:
                slot = 0
            colors.append(ROCKET.sample(slot / count))
        return colors

    def _draw_trendline(self, render: Render, transform: ViewportTransform) -> None:
        trend = self.trend
        xs, ys = finite_xy(self.x, self.y)
        if xs.size <= trend.degree:
            LOGGER.warning(
                "trendline of degree %d needs more than %d points, skipping", trend.degree, xs.size
            )
            return
        try:
            coefficients = np.polyfit(xs, ys, trend.degree)
        except np.linalg.LinAlgError:
            LOGGER.warning("trendline fit did not converge, skipping")
            return
        sample_x = np.linspace(float(xs.min()), float(xs.max()), trend.sample_count())
        sample_y = np.polyval(coefficients, sample_x)
        px, py = transform.apply(sample_x, sample_y)
        keep = np.isfinite(px) & np.isfinite(py)
        path = Path.from_points(px[keep], py[keep])
        if path.is_empty():
            return
        render.stroke(path, Affine.identity(), trend.color, StrokeStyle(width=trend.width))
