from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Iterator, Union

import numpy as np

from neilplot.affine import Affine
from neilplot.columns import Column, ColumnDType
from neilplot.errors import EmptyRangeError, IncompatibleRangeError, TransformError


NICE_BASES = (1.0, 2.0, 2.5, 5.0)


def _sign(value: float) -> float:
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


@dataclass(frozen=True)
class Range:
    """Closed interval; ``min`` may exceed ``max`` for inverted (pixel) axes."""

    min: float
    max: float

    @classmethod
    def empty(cls) -> "Range":
        return cls(0.0, 0.0)

    def size(self) -> float:
        return self.max - self.min

    def expand(self, amount: float) -> "Range":
        direction = _sign(self.size())
        return Range(self.min - amount * direction, self.max + amount * direction)

    def shrink(self, amount: float) -> "Range":
        return self.expand(-amount)

    def expand_by(self, fraction: float) -> "Range":
        return self.expand(self.size() * fraction)

    def shrink_by(self, fraction: float) -> "Range":
        return self.shrink(self.size() * fraction)

    def contains(self, value: float) -> bool:
        return (self.min <= value <= self.max) or (self.max <= value <= self.min)

    def union(self, other: "Range") -> "Range":
        # A single-point series must not collapse an otherwise valid union.
        if self.size() == 0.0:
            return other
        if other.size() == 0.0:
            return self
        return Range(min(self.min, other.min), max(self.max, other.max))

    def is_finite(self) -> bool:
        return math.isfinite(self.min) and math.isfinite(self.max)

    def nice_ticks(self, count: int) -> "NiceTicks":
        """Round-number tick positions covering the range with about ``count`` steps.

        The raw step ``size / count`` is snapped to the smallest of
        ``{1, 2, 2.5, 5, 10} * 10**k`` above it; the sequence runs from the step
        multiple at or below ``min`` to the one at or above ``max``.
        """
        if count <= 0:
            raise ValueError("count must be > 0")
        lo_value = min(self.min, self.max)
        hi_value = max(self.min, self.max)
        span = hi_value - lo_value
        if not math.isfinite(span):
            raise EmptyRangeError(f"cannot place ticks on a non-finite range [{self.min}, {self.max}]")
        if span == 0.0:
            raise EmptyRangeError(f"cannot place ticks on a zero-size range at {self.min}")

        raw_step = span / float(count)
        k = math.floor(math.log10(raw_step))
        base = raw_step / 10.0**k
        nice_base = 10.0
        for candidate in NICE_BASES:
            if base < candidate:
                nice_base = candidate
                break

        step = nice_base * 10.0**k
        if lo_value + step == lo_value or hi_value - step == hi_value:
            raise EmptyRangeError(f"tick step {step} is below float resolution for [{self.min}, {self.max}]")
        lo = math.floor(lo_value / step) * step
        hi = math.ceil(hi_value / step) * step
        precision = max(0, -k + 4)
        return NiceTicks(lo=lo, hi=hi, step=step, precision=precision)


@dataclass(frozen=True)
class NiceTicks:
    lo: float
    hi: float
    step: float
    precision: int

    def __iter__(self) -> Iterator[float]:
        # Rounding to the nearest count keeps float drift from dropping the last tick.
        count = math.floor((self.hi - self.lo) / self.step + 0.5) + 1
        for i in range(count):
            # Adding 0.0 turns a rounded -0.0 into 0.0.
            yield round(self.lo + i * self.step, self.precision) + 0.0


@dataclass(frozen=True)
class EvenTicks:
    """``count`` evenly spaced values from ``range.min`` to ``range.max`` inclusive."""

    range: Range
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must be >= 0")

    def __iter__(self) -> Iterator[float]:
        if self.count == 0:
            return
        if self.count == 1:
            yield self.range.min
            return
        size = self.range.size()
        for i in range(self.count):
            yield self.range.min + (i / (self.count - 1)) * size


class RangeUnit(str, Enum):
    ABSOLUTE = "absolute"
    DURATION = "duration"
    DATE = "date"

    @classmethod
    def for_column(cls, column: Column) -> "RangeUnit":
        if column.dtype is ColumnDType.DURATION:
            return cls.DURATION
        if column.dtype is ColumnDType.DATE:
            return cls.DATE
        return cls.ABSOLUTE


class Scale(str, Enum):
    LINEAR = "linear"
    LOGARITHMIC = "log"

    def apply(self, value):
        """Map data values into the space the viewport affine operates in."""
        if self is Scale.LINEAR:
            return value
        with np.errstate(divide="ignore", invalid="ignore"):
            out = np.log10(value)
        if np.ndim(out) == 0:
            return float(out)
        return out

    def invert(self, value):
        if self is Scale.LINEAR:
            return value
        out = np.power(10.0, value)
        if np.ndim(out) == 0:
            return float(out)
        return out


@dataclass(frozen=True)
class ContinuousRange:
    range: Range
    unit: RangeUnit = RangeUnit.ABSOLUTE
    margin_min: bool = True
    margin_max: bool = True

    @classmethod
    def from_column(cls, column: Column) -> "ContinuousRange":
        return cls(
            range=Range(column.min_reduce(), column.max_reduce()),
            unit=RangeUnit.for_column(column),
        )

    def union(self, other: "DataRange") -> "ContinuousRange":
        if not isinstance(other, ContinuousRange):
            raise IncompatibleRangeError("cannot combine a continuous axis with a categorical axis")
        if self.unit is not other.unit:
            raise IncompatibleRangeError(f"cannot combine {self.unit.value} and {other.unit.value} ranges on one axis")
        return ContinuousRange(
            range=self.range.union(other.range),
            unit=self.unit,
            margin_min=self.margin_min or other.margin_min,
            margin_max=self.margin_max or other.margin_max,
        )


@dataclass(frozen=True)
class CategoricalRange:
    """Axis driven by a label column; category ``i`` sits at position ``i``."""

    labels: Column

    def __len__(self) -> int:
        return len(self.labels)

    def union(self, other: "DataRange") -> "CategoricalRange":
        raise IncompatibleRangeError("categorical axes cannot be combined with other ranges")


DataRange = Union[ContinuousRange, CategoricalRange]


@dataclass(frozen=True)
class DataBounds:
    x: DataRange
    y: DataRange

    @classmethod
    def default(cls) -> "DataBounds":
        unit_range = ContinuousRange(Range(0.0, 1.0), margin_min=False, margin_max=False)
        return cls(x=unit_range, y=unit_range)

    def union(self, other: "DataBounds") -> "DataBounds":
        return DataBounds(x=self.x.union(other.x), y=self.y.union(other.y))


@dataclass(frozen=True)
class Bounds:
    x: Range
    y: Range

    @classmethod
    def empty(cls) -> "Bounds":
        return cls(Range.empty(), Range.empty())

    def width(self) -> float:
        return self.x.size()

    def height(self) -> float:
        return self.y.size()

    def expand(self, amount: float) -> "Bounds":
        return Bounds(self.x.expand(amount), self.y.expand(amount))

    def shrink(self, amount: float) -> "Bounds":
        return Bounds(self.x.shrink(amount), self.y.shrink(amount))

    def expand_by(self, fraction: float) -> "Bounds":
        return Bounds(self.x.expand_by(fraction), self.y.expand_by(fraction))

    def shrink_by(self, fraction: float) -> "Bounds":
        return Bounds(self.x.shrink_by(fraction), self.y.shrink_by(fraction))

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(self.x.union(other.x), self.y.union(other.y))

    def contains(self, x: float, y: float) -> bool:
        return self.x.contains(x) and self.y.contains(y)

    def transform_to(self, viewport: "Bounds") -> Affine:
        """Affine mapping this rectangle onto ``viewport`` axis by axis."""
        for name, source in (("x", self.x), ("y", self.y)):
            if not source.is_finite():
                raise TransformError(f"{name} range [{source.min}, {source.max}] is not finite")
            if source.size() == 0.0:
                raise TransformError(f"{name} range has zero size at {source.min}")
        scale_x = viewport.x.size() / self.x.size()
        scale_y = viewport.y.size() / self.y.size()
        translate_x = viewport.x.min - self.x.min * scale_x
        translate_y = viewport.y.min - self.y.min * scale_y
        return Affine(a=scale_x, d=scale_y, e=translate_x, f=translate_y)


@dataclass(frozen=True)
class ViewportTransform:
    """Data-to-pixel mapping for one draw pass.

    The affine operates on scaled coordinates, so logarithmic axes take log10 of
    their data before the affine is applied.
    """

    affine: Affine
    x_scale: Scale = Scale.LINEAR
    y_scale: Scale = Scale.LINEAR

    def apply(self, xs, ys) -> tuple[np.ndarray, np.ndarray]:
        sx = self.x_scale.apply(np.asarray(xs, dtype=np.float64))
        sy = self.y_scale.apply(np.asarray(ys, dtype=np.float64))
        return self.affine.apply(sx, sy)

    def apply_point(self, x: float, y: float) -> tuple[float, float]:
        return self.affine.apply_point(self.x_scale.apply(float(x)), self.y_scale.apply(float(y)))

    def invert_point(self, px: float, py: float) -> tuple[float, float]:
        sx, sy = self.affine.inverse().apply_point(px, py)
        return (self.x_scale.invert(sx), self.y_scale.invert(sy))

    def x_to_pixel(self, x: float) -> float:
        return self.affine.a * self.x_scale.apply(float(x)) + self.affine.e

    def y_to_pixel(self, y: float) -> float:
        return self.affine.d * self.y_scale.apply(float(y)) + self.affine.f

    def invert(self, px, py) -> tuple[np.ndarray, np.ndarray]:
        sx, sy = self.affine.inverse().apply(px, py)
        return self.x_scale.invert(sx), self.y_scale.invert(sy)
