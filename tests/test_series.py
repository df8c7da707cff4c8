from __future__ import annotations

import unittest
from unittest import mock

import numpy as np

from neilplot.bounds import Bounds, Range, ViewportTransform
from neilplot.columns import as_column
from neilplot.errors import EmptyRangeError, PlotDataError
from neilplot.marker import Marker
from neilplot.render import Render, RenderConfig
from neilplot.series import HistogramSeries, LineSeries, ScatterSeries
from neilplot.series.base import contiguous_true_runs, finite_xy
from neilplot.theme import ROCKET


def _identity_transform() -> ViewportTransform:
    unit = Bounds(Range(0.0, 1000.0), Range(0.0, 1000.0))
    return ViewportTransform(unit.transform_to(unit))


class SeriesHelperTests(unittest.TestCase):
    def test_contiguous_runs(self) -> None:
        mask = np.array([True, True, False, True, False, False, True, True, True])
        self.assertEqual(contiguous_true_runs(mask), [(0, 2), (3, 4), (6, 9)])
        self.assertEqual(contiguous_true_runs(np.zeros(3, dtype=bool)), [])

    def test_finite_xy_drops_gaps(self) -> None:
        xs, ys = finite_xy(as_column([1.0, None, 3.0]), as_column([4.0, 5.0, np.nan]))
        self.assertEqual(xs.tolist(), [1.0])
        self.assertEqual(ys.tolist(), [4.0])
        with self.assertRaises(PlotDataError):
            finite_xy(as_column([1.0]), as_column([1.0, 2.0]))


class ScatterSeriesTests(unittest.TestCase):
    def test_builders_validate(self) -> None:
        series = ScatterSeries(as_column([1.0, 2.0]), as_column([1.0, 2.0]))
        self.assertIs(series.set_marker("star").set_size(20.0), series)
        self.assertEqual(series.marker, Marker.STAR)
        with self.assertRaises(ValueError):
            series.set_size(0.0)
        with self.assertRaises(ValueError):
            series.trendline(degree=0)
        with self.assertRaises(PlotDataError):
            series.hue_from(["a"])

    def test_hue_colours_follow_key_order(self) -> None:
        series = ScatterSeries(as_column([100.0, 500.0]), as_column([500.0, 500.0]))
        series.set_size(100.0).hue_from(["late", "early"], keys=["early", "late"])
        render = Render(RenderConfig(width=1000, height=1000))
        series.draw(render, _identity_transform())
        rgba = render.to_rgba()
        self.assertEqual(tuple(rgba[500, 100]), ROCKET.sample(0.5))
        self.assertEqual(tuple(rgba[500, 500]), ROCKET.sample(0.0))

    def test_trendline_needs_enough_points(self) -> None:
        series = ScatterSeries(as_column([1.0, 2.0]), as_column([1.0, 2.0])).trendline(degree=2)
        render = Render(RenderConfig(width=100, height=100))
        with self.assertLogs("neilplot.series.scatter", level="WARNING"):
            series.draw(render, _identity_transform())

    def test_straight_trendline_samples_two_points(self) -> None:
        series = ScatterSeries(as_column([0.0, 1.0, 2.0]), as_column([0.0, 2.0, 4.0])).trendline()
        render = Render(RenderConfig(width=100, height=100))
        with mock.patch.object(render, "stroke") as stroke:
            series.draw(render, _identity_transform())
        path = stroke.call_args[0][0]
        np.testing.assert_allclose(path.polylines()[0], [[0.0, 0.0], [2.0, 4.0]], atol=1e-9)


class LineSeriesTests(unittest.TestCase):
    def test_missing_values_break_the_line(self) -> None:
        series = LineSeries(as_column([0.0, 1.0, 2.0, 3.0, 4.0]), as_column([0.0, 1.0, None, 3.0, 4.0]))
        render = Render(RenderConfig(width=100, height=100))
        with mock.patch.object(render, "stroke") as stroke:
            series.draw(render, _identity_transform())
        path = stroke.call_args[0][0]
        self.assertEqual(len(path.subpaths), 2)

    def test_length_mismatch_has_no_bounds(self) -> None:
        with self.assertRaises(PlotDataError):
            LineSeries(as_column([0.0, 1.0]), as_column([0.0])).data_bounds()
        with self.assertRaises(PlotDataError):
            ScatterSeries(as_column([0.0]), as_column([0.0, 1.0])).data_bounds()

    def test_dash_validation(self) -> None:
        series = LineSeries(as_column([0.0]), as_column([0.0]))
        with self.assertRaises(ValueError):
            series.set_dashes([0.0, 0.0])
        self.assertEqual(series.set_dashes([5, 2]).dashes, (5.0, 2.0))

    def test_no_legend_without_label(self) -> None:
        series = LineSeries(as_column([0.0]), as_column([0.0]))
        self.assertEqual(series.legend_items(), [])


class HistogramSeriesTests(unittest.TestCase):
    def test_requires_one_source(self) -> None:
        with self.assertRaises(ValueError):
            HistogramSeries()
        with self.assertRaises(ValueError):
            HistogramSeries.binned(as_column([1.0]), 0)

    def test_empty_values_have_no_range(self) -> None:
        series = HistogramSeries.binned(as_column([np.nan]), 3)
        with self.assertRaises(EmptyRangeError):
            series.data_bounds()


if __name__ == "__main__":
    unittest.main()
