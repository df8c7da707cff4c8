from __future__ import annotations

from pathlib import Path
import tempfile
import unittest
from unittest import mock

import numpy as np
import pandas as pd
from PIL import Image

from neilplot import Plot, PlotDataError, TransformError
from neilplot.axis import FixedTicks
from neilplot.bounds import CategoricalRange, ContinuousRange, DataBounds, Range, RangeUnit
from neilplot.display import resolve_window_size
from neilplot.render import Render, RenderConfig
from neilplot.render.window import FramePresenter
from neilplot.series import BarChartSeries, HistogramSeries, LegendItem


class PlotBoundsTests(unittest.TestCase):
    def test_empty_plot_uses_unit_square(self) -> None:
        plot = Plot()
        bounds = plot.bounds()
        self.assertEqual(bounds, DataBounds.default())
        pretty = plot.pretty_bounds(bounds)
        self.assertEqual(pretty.x, Range(0.0, 1.0))
        self.assertEqual(pretty.y, Range(0.0, 1.0))

    def test_empty_plot_renders(self) -> None:
        rgba = Plot("empty").to_rgba(300, 300)
        self.assertEqual(rgba.shape, (300, 300, 4))
        self.assertTrue(np.any(rgba[:, :, 0] < 200))

    def test_series_bounds_are_unioned(self) -> None:
        plot = Plot()
        plot.scatter([0.0, 1.0, 2.0], [5.0, 6.0, 7.0])
        plot.line([-4.0, 3.0], [1.0, 2.0])
        bounds = plot.bounds()
        self.assertEqual(bounds.x.range, Range(-4.0, 3.0))
        self.assertEqual(bounds.y.range, Range(1.0, 7.0))

    def test_bad_series_is_skipped(self) -> None:
        plot = Plot()
        plot.scatter([1.0, 2.0], [3.0, 4.0])
        plot.line(["a", "b"], [1.0, 2.0])
        with self.assertLogs("neilplot.plot", level="WARNING") as logs:
            bounds = plot.bounds()
        self.assertEqual(bounds.x.range, Range(1.0, 2.0))
        self.assertIn("skipping LineSeries", logs.output[0])

    def test_mixed_units_skip_the_later_series(self) -> None:
        plot = Plot()
        plot.line([1.0, 2.0], [1.0, 2.0])
        plot.line(pd.Series(pd.to_datetime(["2024-01-01", "2024-01-02"])), [1.0, 2.0])
        with self.assertLogs("neilplot.plot", level="WARNING"):
            bounds = plot.bounds()
        self.assertEqual(bounds.x.unit, RangeUnit.ABSOLUTE)

    def test_viewport_transform_maps_pretty_bounds(self) -> None:
        plot = Plot()
        plot.x.set_margin(0.0)
        plot.y.set_margin(0.0)
        plot.scatter([0.0, 10.0], [0.0, 100.0])
        render = Render(RenderConfig(width=1000, height=1000))
        _, viewport = plot.layout(render)
        self.assertEqual(viewport.x, Range(80.0, 920.0))
        self.assertEqual(viewport.y, Range(920.0, 80.0))
        transform = plot.viewport_transform(plot.bounds(), viewport)
        self.assertEqual(transform.apply_point(0.0, 0.0), (80.0, 920.0))
        x, y = transform.apply_point(10.0, 100.0)
        self.assertAlmostEqual(x, 920.0)
        self.assertAlmostEqual(y, 80.0)

    def test_log_axis_without_positive_range_fails_draw(self) -> None:
        plot = Plot()
        plot.y.set_scale("log")
        plot.line([0.0, 1.0], [-1.0, 5.0])
        with self.assertRaises(TransformError):
            plot.to_rgba(200, 200)

    def test_log_bar_chart_with_limits_renders(self) -> None:
        plot = Plot()
        plot.y.set_scale("log").set_limits(min=1.0, max=1000.0)
        plot.bar_chart(["a", "b"], [10.0, 500.0])
        self.assertEqual(plot.pretty_bounds(plot.bounds()).y, Range(1.0, 1000.0))
        self.assertEqual(plot.to_rgba(200, 200).shape, (200, 200, 4))

    def test_unresolvable_tick_step_fails_draw(self) -> None:
        plot = Plot()
        plot.scatter([1e16, 1e16 + 2.0], [0.0, 1.0])
        with self.assertRaises(TransformError):
            plot.to_rgba(200, 200)

    def test_mismatched_xy_is_skipped_in_bounds(self) -> None:
        plot = Plot()
        plot.scatter([1.0, 2.0], [3.0, 4.0])
        plot.line([0.0, 50.0, 100.0], [1.0, 2.0])
        with self.assertLogs("neilplot.plot", level="WARNING") as logs:
            bounds = plot.bounds()
        self.assertEqual(bounds.x.range, Range(1.0, 2.0))
        self.assertIn("length mismatch", logs.output[0])


class PlotSeriesTests(unittest.TestCase):
    def test_dataframe_columns_feed_series(self) -> None:
        frame = pd.DataFrame({"x": [1.0, 2.0, 3.0], "y": [2.0, 4.0, 8.0], "kind": ["a", "b", "a"]})
        plot = Plot("frame")
        series = plot.scatter("x", "y", data=frame).hue_from(frame["kind"]).trendline()
        self.assertEqual(plot.series, (series,))
        self.assertEqual([item.label for item in series.legend_items()], ["scatter", "trendline"])
        rgba = plot.to_rgba(400, 400)
        self.assertEqual(rgba.shape, (400, 400, 4))

    def test_histogram_sets_fixed_ticks(self) -> None:
        plot = Plot()
        series = plot.histogram(np.array([1.0, 2.0, 2.0, 3.0, 3.0, 3.0]), bins=4)
        self.assertIsInstance(series, HistogramSeries)
        self.assertEqual(plot.x.ticks, FixedTicks(5))
        edges, counts = series.histogram()
        self.assertEqual(counts.sum(), 6.0)
        bounds = series.data_bounds()
        self.assertEqual(bounds.x.range, Range(1.0, 3.0))
        self.assertFalse(bounds.x.margin_min or bounds.x.margin_max)
        self.assertEqual(bounds.y.range, Range(0.0, 3.0))
        self.assertFalse(bounds.y.margin_min)

    def test_histogram_counted_spans_bins(self) -> None:
        series = Plot().histogram_counted([4, 0, 7])
        self.assertEqual(series.data_bounds().x.range, Range(0.0, 3.0))
        self.assertEqual(series.data_bounds().y.range, Range(0.0, 7.0))

    def test_bar_chart_is_categorical(self) -> None:
        plot = Plot("bars")
        series = plot.bar_chart(["a", "b", "c", "d"], [3.0, 5.0, 1.0, 4.0])
        self.assertIsInstance(series, BarChartSeries)
        bounds = plot.bounds()
        self.assertIsInstance(bounds.x, CategoricalRange)
        self.assertEqual(plot.pretty_bounds(bounds).x, Range(-0.5, 3.5))
        self.assertEqual(bounds.y, ContinuousRange(Range(0.0, 5.0), margin_min=False, margin_max=True))
        rgba = plot.to_rgba(400, 400)
        bar_color = np.array(series.color[:3])
        self.assertTrue(np.any(np.all(rgba[:, :, :3] == bar_color, axis=2)))

    def test_bar_chart_length_mismatch(self) -> None:
        with self.assertRaises(PlotDataError):
            Plot().bar_chart(["a", "b"], [1.0])

    def test_legend_collects_labelled_series(self) -> None:
        plot = Plot()
        plot.line([0.0, 1.0], [0.0, 1.0]).set_label("first")
        plot.line([0.0, 1.0], [1.0, 0.0])
        items = [item for s in plot.series for item in s.legend_items()]
        self.assertEqual(items, [LegendItem("first", plot.series[0].color)])


class PlotOutputTests(unittest.TestCase):
    def _plot(self) -> Plot:
        plot = Plot("output").set_grid(dashes=(4.0, 4.0))
        plot.x.set_title("x")
        plot.y.set_title("y")
        plot.line(np.linspace(0.0, 1.0, 20), np.linspace(0.0, 1.0, 20) ** 2).set_label("square")
        return plot

    def test_rendering_is_deterministic(self) -> None:
        plot = self._plot()
        np.testing.assert_array_equal(plot.to_rgba(320, 240), plot.to_rgba(320, 240))

    def test_save_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = self._plot().save(Path(tmp) / "plot.png", width=256, height=200)
            with Image.open(out) as image:
                self.assertEqual(image.size, (256, 200))
                self.assertEqual(image.mode, "RGBA")

    def test_save_flattens_jpeg(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = self._plot().save(Path(tmp) / "plot.jpg", width=128, height=128)
            with Image.open(out) as image:
                self.assertEqual(image.mode, "RGB")

    def test_save_failure_is_logged_and_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertLogs("neilplot.plot", level="ERROR"):
                with self.assertRaises(ValueError):
                    self._plot().save(Path(tmp) / "plot.unknown", width=64, height=64)
            self.assertFalse((Path(tmp) / "plot.unknown").exists())

    def test_default_window_size_scales_with_display(self) -> None:
        with mock.patch("neilplot.display._detect_screen_size", return_value=(2560, 1600)):
            self.assertEqual(resolve_window_size(), (1280, 1280))
        with mock.patch("neilplot.display._detect_screen_size", return_value=None):
            self.assertEqual(resolve_window_size(), (1000, 1000))


class FramePresenterTests(unittest.TestCase):
    def test_failed_redraw_keeps_last_frame(self) -> None:
        good = np.zeros((2, 2, 4), dtype=np.uint8)
        calls: list[tuple[int, int]] = []

        def draw(width: int, height: int) -> np.ndarray:
            calls.append((width, height))
            if width > 10:
                raise TransformError("boom")
            return good

        presenter = FramePresenter(draw)
        self.assertIs(presenter.present(5, 5), good)
        with self.assertLogs("neilplot.render.window", level="ERROR"):
            self.assertIs(presenter.present(50, 50), good)
        self.assertIs(presenter.present(5, 5), good)
        self.assertEqual(calls, [(5, 5), (50, 50)])


if __name__ == "__main__":
    unittest.main()
