from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from neilplot.errors import DataExtractionError, EmptyRangeError, PlotDataError


class ColumnDType(str, Enum):
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    DURATION = "duration"
    DATE = "date"
    STRING = "string"


_NUMERIC_KINDS = {"integer", "floating", "mixed-integer-float", "decimal", "empty"}
_DATE_KINDS = {"date", "datetime", "datetime64"}
_DURATION_KINDS = {"timedelta", "timedelta64"}


class Column:
    """Read-only view over one column of caller data.

    Numeric values are exposed as float64 with NaN marking nulls. Durations are
    nanoseconds and dates are days since 1970-01-01, so every non-label column
    shares one numeric representation.
    """

    def __init__(
        self,
        raw: np.ndarray,
        values: np.ndarray | None,
        dtype: ColumnDType,
        *,
        name: str | None = None,
    ) -> None:
        if raw.ndim != 1:
            raise PlotDataError("column must be 1-D")
        if values is not None and values.shape != raw.shape:
            raise PlotDataError("column values and raw data must have the same length")
        self._raw = raw
        self._values = values
        self.dtype = dtype
        self.name = name

    def __len__(self) -> int:
        return int(self._raw.shape[0])

    def __repr__(self) -> str:
        return f"Column(name={self.name!r}, dtype={self.dtype.value}, len={len(self)})"

    @property
    def raw(self) -> np.ndarray:
        return self._raw

    @property
    def is_numeric(self) -> bool:
        return self._values is not None

    def get(self, index: int) -> float:
        values = self._require_numeric()
        if index < 0 or index >= len(self):
            raise DataExtractionError(f"index {index} out of range for column {self._display_name()}")
        value = float(values[index])
        if not np.isfinite(value):
            raise DataExtractionError(f"column {self._display_name()} has no value at index {index}")
        return value

    def label(self, index: int) -> str:
        if index < 0 or index >= len(self):
            raise DataExtractionError(f"index {index} out of range for column {self._display_name()}")
        raw = self._raw[index]
        if raw is None or (isinstance(raw, float) and np.isnan(raw)):
            return ""
        return str(raw)

    def min_reduce(self) -> float:
        return float(np.min(self._finite_values()))

    def max_reduce(self) -> float:
        return float(np.max(self._finite_values()))

    def unique_stable(self) -> list[Any]:
        return list(pd.unique(pd.Series(self._raw, dtype=object)))

    def to_numpy(self) -> np.ndarray:
        return self._require_numeric()

    def _finite_values(self) -> np.ndarray:
        values = self._require_numeric()
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            raise EmptyRangeError(f"column {self._display_name()} contains no finite values")
        return finite

    def _require_numeric(self) -> np.ndarray:
        if self._values is None:
            raise DataExtractionError(f"column {self._display_name()} holds labels, not numbers")
        return self._values

    def _display_name(self) -> str:
        return repr(self.name) if self.name is not None else "<unnamed>"


def as_column(value: Any, *, data: Any = None, name: str | None = None) -> Column:
    """Wrap caller data as a Column without copying numeric buffers where possible.

    ``value`` may be a Column, a pandas Series, a 1-D numpy array, a sequence, or a
    column name when ``data`` is a pandas DataFrame.
    """
    if isinstance(value, Column):
        return value
    if data is not None:
        if not isinstance(data, pd.DataFrame):
            raise PlotDataError("`data` must be a pandas DataFrame")
        if isinstance(value, str):
            if value not in data.columns:
                raise PlotDataError(f"column not found: {value}")
            return column_from_series(data[value], name=value)
    if isinstance(value, pd.Series):
        return column_from_series(value, name=name if name is not None else _series_name(value))
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError("column input must be 1-D")
        return column_from_series(pd.Series(value, copy=False), name=name)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return column_from_series(pd.Series(list(value), dtype=object), name=name)
    raise PlotDataError(f"unsupported column input type: {type(value)!r}")


def column_from_series(series: pd.Series, *, name: str | None = None) -> Column:
    raw = series.to_numpy()
    dtype = series.dtype

    if isinstance(dtype, pd.CategoricalDtype) or pd.api.types.is_string_dtype(dtype) and dtype != object:
        return Column(raw, None, ColumnDType.STRING, name=name)
    if pd.api.types.is_bool_dtype(dtype):
        values = series.to_numpy(dtype=np.float64, na_value=np.nan)
        return Column(raw, values, ColumnDType.BOOLEAN, name=name)
    if pd.api.types.is_numeric_dtype(dtype):
        values = series.to_numpy(dtype=np.float64, na_value=np.nan)
        return Column(raw, values, ColumnDType.NUMERIC, name=name)
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return Column(raw, _days_since_epoch(series), ColumnDType.DATE, name=name)
    if pd.api.types.is_timedelta64_dtype(dtype):
        return Column(raw, _nanoseconds(series), ColumnDType.DURATION, name=name)

    kind = pd.api.types.infer_dtype(series, skipna=True)
    if kind in _NUMERIC_KINDS:
        return Column(raw, _coerce_objects(raw, label=name or "column"), ColumnDType.NUMERIC, name=name)
    if kind == "boolean":
        return Column(raw, _coerce_objects(raw, label=name or "column"), ColumnDType.BOOLEAN, name=name)
    if kind in _DATE_KINDS:
        try:
            converted = pd.to_datetime(series)
        except (TypeError, ValueError) as exc:
            raise DataExtractionError(f"{name or 'column'} contains values that are not dates") from exc
        return Column(raw, _days_since_epoch(converted), ColumnDType.DATE, name=name)
    if kind in _DURATION_KINDS:
        try:
            converted = pd.to_timedelta(series)
        except (TypeError, ValueError) as exc:
            raise DataExtractionError(f"{name or 'column'} contains values that are not durations") from exc
        return Column(raw, _nanoseconds(converted), ColumnDType.DURATION, name=name)
    return Column(raw, None, ColumnDType.STRING, name=name)


def _series_name(series: pd.Series) -> str | None:
    return None if series.name is None else str(series.name)


def _days_since_epoch(series: pd.Series) -> np.ndarray:
    if isinstance(series.dtype, pd.DatetimeTZDtype):
        series = series.dt.tz_convert("UTC").dt.tz_localize(None)
    stamps = series.to_numpy(dtype="datetime64[ns]")
    return (stamps - np.datetime64(0, "ns")) / np.timedelta64(1, "D")


def _nanoseconds(series: pd.Series) -> np.ndarray:
    deltas = series.to_numpy(dtype="timedelta64[ns]")
    return deltas / np.timedelta64(1, "ns")


def _coerce_objects(arr: np.ndarray, *, label: str) -> np.ndarray:
    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None or raw is pd.NA:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise DataExtractionError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
