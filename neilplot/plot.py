from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from neilplot.affine import Affine
from neilplot.axis import Axis, Tick
from neilplot.bounds import Bounds, DataBounds, Range, ViewportTransform
from neilplot.columns import as_column
from neilplot.display import resolve_window_size
from neilplot.errors import PlotDataError
from neilplot.legend import draw_legend
from neilplot.render import Align, DrawText, Line, Render, RenderConfig, StrokeStyle
from neilplot.render.raster.canvas import RGBA
from neilplot.render.texture import save_rgba
from neilplot.series import BarChartSeries, HistogramSeries, LegendItem, LineSeries, ScatterSeries, Series
from neilplot.style import DEFAULT_SAVE_SIZE, LegendStyle, PlotStyle


LOGGER = logging.getLogger(__name__)


class Plot:
    """A single chart: two axes, an ordered list of series and decorations.

    Each draw pass unions the series' data bounds, derives the pretty ranges and
    ticks from the axes, then maps data onto the viewport inside the render.
    """

    def __init__(self, title: str | None = None, *, style: PlotStyle | None = None) -> None:
        self.title = title
        self.x = Axis()
        self.y = Axis()
        self.style = style or PlotStyle()
        self.legend_style = LegendStyle()
        self.show_legend = True
        self.border: StrokeStyle | None = StrokeStyle(width=1.0)
        self.border_color: RGBA | None = None
        self.grid: StrokeStyle | None = None
        self.grid_color: RGBA = (220, 220, 220, 255)
        self._series: list[Series] = []

    @property
    def series(self) -> tuple[Series, ...]:
        return tuple(self._series)

    def set_title(self, title: str | None) -> "Plot":
        self.title = title
        return self

    def set_style(self, style: PlotStyle) -> "Plot":
        self.style = style
        return self

    def no_border(self) -> "Plot":
        self.border = None
        return self

    def set_border(self, width: float = 1.0, *, dashes: Sequence[float] = (), color: RGBA | None = None) -> "Plot":
        self.border = StrokeStyle(width=float(width), dashes=tuple(dashes))
        self.border_color = color
        return self

    def set_grid(
        self,
        width: float = 1.0,
        *,
        dashes: Sequence[float] = (),
        color: RGBA = (220, 220, 220, 255),
    ) -> "Plot":
        self.grid = StrokeStyle(width=float(width), dashes=tuple(dashes))
        self.grid_color = color
        return self

    def no_grid(self) -> "Plot":
        self.grid = None
        return self

    def set_legend(self, show: bool, *, style: LegendStyle | None = None) -> "Plot":
        self.show_legend = bool(show)
        if style is not None:
            self.legend_style = style
        return self

    def add_series(self, series: Series) -> Series:
        self._series.append(series)
        return series

    def scatter(self, x: Any, y: Any, *, data: Any = None) -> ScatterSeries:
        series = ScatterSeries(as_column(x, data=data, name="x"), as_column(y, data=data, name="y"))
        self._series.append(series)
        return series

    def line(self, x: Any, y: Any, *, data: Any = None) -> LineSeries:
        series = LineSeries(as_column(x, data=data, name="x"), as_column(y, data=data, name="y"))
        self._series.append(series)
        return series

    def histogram(self, values: Any, bins: int, *, data: Any = None) -> HistogramSeries:
        if bins <= 0:
            raise ValueError("bins must be > 0")
        series = HistogramSeries.binned(as_column(values, data=data, name="values"), bins)
        # One tick per bin edge.
        self.x.set_ticks_fixed(bins + 1)
        self._series.append(series)
        return series

    def histogram_counted(self, counts: Any, *, data: Any = None) -> HistogramSeries:
        series = HistogramSeries.counted(as_column(counts, data=data, name="counts"))
        self._series.append(series)
        return series

    def bar_chart(self, labels: Any, values: Any, *, data: Any = None) -> BarChartSeries:
        series = BarChartSeries(as_column(labels, data=data, name="labels"), as_column(values, data=data, name="values"))
        self._series.append(series)
        return series

    def bounds(self) -> DataBounds:
        """Union of every usable series' data bounds, or the unit square when none are."""
        combined: DataBounds | None = None
        for series in self._series:
            try:
                current = series.data_bounds()
                combined = current if combined is None else combined.union(current)
            except PlotDataError as exc:
                LOGGER.warning("skipping %s in bounds: %s", type(series).__name__, exc)
        if combined is None:
            return DataBounds.default()
        return combined

    def pretty_bounds(self, data_bounds: DataBounds) -> Bounds:
        return Bounds(self.x.pretty_range(data_bounds.x), self.y.pretty_range(data_bounds.y))

    def viewport_transform(self, data_bounds: DataBounds, viewport: Bounds) -> ViewportTransform:
        scaled = Bounds(self.x.scaled_range(data_bounds.x), self.y.scaled_range(data_bounds.y))
        return ViewportTransform(scaled.transform_to(viewport), x_scale=self.x.scale, y_scale=self.y.scale)

    def layout(self, render: Render) -> tuple[Bounds, Bounds]:
        """Outer plot area and data viewport in logical units, y growing downwards."""
        width, height = render.size()
        outer = Bounds(Range(0.0, width), Range(height, 0.0))
        return outer, outer.shrink(self.style.viewport_margin)

    def draw(self, render: Render) -> None:
        outer, viewport = self.layout(render)
        data_bounds = self.bounds()
        # Axis failures abort the pass before anything reaches the canvas.
        transform = self.viewport_transform(data_bounds, viewport)
        x_ticks = list(self.x.iter_ticks(data_bounds.x))
        y_ticks = list(self.y.iter_ticks(data_bounds.y))

        y_label_width = self._draw_y_ticks(render, viewport, transform, y_ticks)
        self._draw_x_ticks(render, viewport, transform, x_ticks)
        self._draw_titles(render, outer, viewport, y_label_width)
        if self.border is not None:
            self._draw_border(render, viewport)

        legend: list[LegendItem] = []
        for series in self._series:
            try:
                series.draw(render, transform)
            except PlotDataError as exc:
                LOGGER.warning("skipping %s in draw: %s", type(series).__name__, exc)
                continue
            legend.extend(series.legend_items())

        if self.show_legend and legend:
            draw_legend(render, viewport, legend, self.legend_style)

    def render(self, width: int, height: int) -> Render:
        render = Render(RenderConfig(width=int(width), height=int(height), background=self.style.background))
        self.draw(render)
        return render

    def to_rgba(self, width: int = DEFAULT_SAVE_SIZE[0], height: int = DEFAULT_SAVE_SIZE[1]) -> np.ndarray:
        return self.render(width, height).to_rgba()

    def save(self, path: str | Path, *, width: int = DEFAULT_SAVE_SIZE[0], height: int = DEFAULT_SAVE_SIZE[1]) -> Path:
        try:
            return save_rgba(self.to_rgba(width, height), path)
        except Exception:
            LOGGER.error("failed to save plot to %s", path)
            raise

    def show(self, *, width: int | None = None, height: int | None = None) -> None:
        from neilplot.render.window import PlotWindow

        if width is None or height is None:
            width, height = resolve_window_size()
        PlotWindow(self.to_rgba, title=self.title or "neilplot", width=width, height=height).run()

    def _visible(self, axis_range: Range, position: float) -> bool:
        eps = self.style.tick_clip_epsilon
        lo, hi = min(axis_range.min, axis_range.max), max(axis_range.min, axis_range.max)
        return np.isfinite(position) and lo - eps <= position <= hi + eps

    def _draw_y_ticks(self, render: Render, viewport: Bounds, transform: ViewportTransform, ticks: list[Tick]) -> float:
        style = self.style
        identity = Affine.identity()
        left = viewport.x.min
        widest = 0.0
        for tick in ticks:
            py = transform.y_to_pixel(tick.position)
            if not self._visible(viewport.y, py):
                continue
            render.stroke(Line(left - style.tick_length, py, left, py), identity, style.line_color, StrokeStyle(style.tick_width))
            if self.grid is not None:
                render.stroke(Line(left, py, viewport.x.max, py), identity, self.grid_color, self.grid)
            label = DrawText(
                tick.text(),
                size=style.tick_label_size,
                color=style.text_color,
                position=(left - style.tick_label_gap, py),
                horizontal_align=Align.END,
                vertical_align=Align.CENTER,
            )
            widest = max(widest, render.layout_text(label).width)
            render.draw_text(label)
        return widest

    def _draw_x_ticks(self, render: Render, viewport: Bounds, transform: ViewportTransform, ticks: list[Tick]) -> None:
        style = self.style
        identity = Affine.identity()
        bottom = viewport.y.min
        for tick in ticks:
            px = transform.x_to_pixel(tick.position)
            if not self._visible(viewport.x, px):
                continue
            render.stroke(Line(px, bottom, px, bottom + style.tick_length), identity, style.line_color, StrokeStyle(style.tick_width))
            if self.grid is not None:
                render.stroke(Line(px, bottom, px, viewport.y.max), identity, self.grid_color, self.grid)
            render.draw_text(
                DrawText(
                    tick.text(),
                    size=style.tick_label_size,
                    color=style.text_color,
                    position=(px, bottom + style.tick_label_gap),
                    horizontal_align=Align.CENTER,
                    vertical_align=Align.START,
                )
            )

    def _draw_titles(self, render: Render, outer: Bounds, viewport: Bounds, y_label_width: float) -> None:
        style = self.style
        center_x = (viewport.x.min + viewport.x.max) / 2.0
        if self.title:
            render.draw_text(
                DrawText(
                    self.title,
                    size=style.title_size,
                    bold=True,
                    color=style.text_color,
                    position=(center_x, viewport.y.max - style.title_gap),
                    horizontal_align=Align.CENTER,
                    vertical_align=Align.END,
                )
            )
        if self.x.title:
            render.draw_text(
                DrawText(
                    self.x.title,
                    size=style.axis_title_size,
                    color=style.text_color,
                    position=(center_x, viewport.y.min + style.axis_title_gap),
                    horizontal_align=Align.CENTER,
                    vertical_align=Align.START,
                )
            )
        if self.y.title:
            # Keep clear of the widest tick label.
            gap = max(style.axis_title_gap, style.tick_label_gap + y_label_width + style.title_gap)
            render.draw_text(
                DrawText(
                    self.y.title,
                    size=style.axis_title_size,
                    color=style.text_color,
                    position=(max(outer.x.min, viewport.x.min - gap), (viewport.y.min + viewport.y.max) / 2.0),
                    rotate_deg=90,
                    horizontal_align=Align.END if viewport.x.min - gap > outer.x.min else Align.START,
                    vertical_align=Align.CENTER,
                )
            )

    def _draw_border(self, render: Render, viewport: Bounds) -> None:
        color = self.border_color or self.style.line_color
        identity = Affine.identity()
        left, right = viewport.x.min, viewport.x.max
        bottom, top = viewport.y.min, viewport.y.max
        render.stroke(Line(left, bottom, right, bottom), identity, color, self.border)
        render.stroke(Line(left, bottom, left, top), identity, color, self.border)
