from __future__ import annotations

from decimal import Decimal
import unittest

import numpy as np
import pandas as pd

from neilplot.bounds import RangeUnit
from neilplot.columns import Column, ColumnDType, as_column
from neilplot.errors import DataExtractionError, EmptyRangeError, PlotDataError


class ColumnTests(unittest.TestCase):
    def test_numeric_sequence_with_gaps(self) -> None:
        col = as_column([3, None, 1.5, 2.25])
        self.assertEqual(col.dtype, ColumnDType.NUMERIC)
        self.assertEqual(len(col), 4)
        self.assertEqual(col.get(0), 3.0)
        self.assertEqual(col.get(3), 2.25)
        with self.assertRaises(DataExtractionError):
            col.get(1)
        self.assertEqual(col.min_reduce(), 1.5)
        self.assertEqual(col.max_reduce(), 3.0)

    def test_decimal_values_convert(self) -> None:
        col = as_column([Decimal("0.5"), Decimal("1.25")])
        self.assertEqual(col.dtype, ColumnDType.NUMERIC)
        self.assertEqual(col.to_numpy().tolist(), [0.5, 1.25])

    def test_get_out_of_range(self) -> None:
        col = as_column(np.arange(3, dtype=np.float64))
        with self.assertRaises(DataExtractionError):
            col.get(3)
        with self.assertRaises(DataExtractionError):
            col.get(-1)

    def test_dataframe_lookup(self) -> None:
        frame = pd.DataFrame({"speed": [1.0, 2.0], "name": ["a", "b"]})
        speed = as_column("speed", data=frame)
        self.assertEqual(speed.name, "speed")
        self.assertEqual(speed.to_numpy().tolist(), [1.0, 2.0])
        with self.assertRaises(PlotDataError):
            as_column("missing", data=frame)

    def test_string_column_has_labels_only(self) -> None:
        col = as_column(pd.Series(["x", "y", "x"]))
        self.assertEqual(col.dtype, ColumnDType.STRING)
        self.assertFalse(col.is_numeric)
        self.assertEqual(col.label(1), "y")
        self.assertEqual(col.unique_stable(), ["x", "y"])
        with self.assertRaises(DataExtractionError):
            col.get(0)
        with self.assertRaises(DataExtractionError):
            col.min_reduce()

    def test_all_null_column_has_no_range(self) -> None:
        col = as_column(pd.Series([np.nan, np.nan]))
        with self.assertRaises(EmptyRangeError):
            col.max_reduce()

    def test_dates_become_days_since_epoch(self) -> None:
        col = as_column(pd.Series(pd.to_datetime(["1970-01-02", "1970-01-11"])))
        self.assertEqual(col.dtype, ColumnDType.DATE)
        self.assertEqual(RangeUnit.for_column(col), RangeUnit.DATE)
        self.assertEqual(col.to_numpy().tolist(), [1.0, 10.0])

    def test_durations_become_nanoseconds(self) -> None:
        col = as_column(pd.Series(pd.to_timedelta(["1s", "2ms"])))
        self.assertEqual(col.dtype, ColumnDType.DURATION)
        self.assertEqual(col.to_numpy().tolist(), [1e9, 2e6])

    def test_booleans_are_numeric(self) -> None:
        col = as_column(np.array([True, False, True]))
        self.assertEqual(col.dtype, ColumnDType.BOOLEAN)
        self.assertEqual(col.max_reduce(), 1.0)

    def test_rejects_unsupported_inputs(self) -> None:
        with self.assertRaises(PlotDataError):
            as_column(np.zeros((2, 2)))
        with self.assertRaises(PlotDataError):
            as_column(42)
        with self.assertRaises(PlotDataError):
            as_column("speed", data={"speed": [1]})

    def test_column_passthrough(self) -> None:
        col = Column(np.array([1.0]), np.array([1.0]), ColumnDType.NUMERIC)
        self.assertIs(as_column(col), col)


if __name__ == "__main__":
    unittest.main()
