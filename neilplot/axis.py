from __future__ import annotations

from dataclasses import dataclass
import datetime
import math
from typing import Iterator, Union

from neilplot.bounds import (
    CategoricalRange,
    ContinuousRange,
    DataRange,
    EvenTicks,
    Range,
    RangeUnit,
    Scale,
)
from neilplot.errors import EmptyRangeError, TransformError


DEFAULT_AUTO_TICK_COUNT = 10
DEFAULT_MARGIN = 0.05
# Auto tick precision carries this many guard digits beyond the step's magnitude.
NICE_PRECISION_GUARD = 3
FIXED_TICK_DECIMALS = 2

_EPOCH = datetime.date(1970, 1, 1)
_DURATION_UNITS = (
    ("d", 86_400 * 10**9),
    ("h", 3_600 * 10**9),
    ("m", 60 * 10**9),
    ("s", 10**9),
    ("ms", 10**6),
    ("us", 10**3),
    ("ns", 1),
)


@dataclass(frozen=True)
class AutoTicks:
    count: int = DEFAULT_AUTO_TICK_COUNT

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ValueError("auto tick count must be > 0")


@dataclass(frozen=True)
class FixedTicks:
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("fixed tick count must be >= 0")


TickStrategy = Union[AutoTicks, FixedTicks]


@dataclass(frozen=True)
class AutoTick:
    value: float
    precision: int
    unit: RangeUnit = RangeUnit.ABSOLUTE

    @property
    def position(self) -> float:
        return self.value

    def text(self) -> str:
        if self.unit is RangeUnit.DURATION:
            return format_duration(self.value)
        if self.unit is RangeUnit.DATE:
            return format_date(self.value)
        decimals = max(0, self.precision - NICE_PRECISION_GUARD)
        return f"{self.value:.{decimals}f}"


@dataclass(frozen=True)
class FixedTick:
    value: float

    @property
    def position(self) -> float:
        return self.value

    def text(self) -> str:
        return f"{self.value:.{FIXED_TICK_DECIMALS}f}"


@dataclass(frozen=True)
class LabelTick:
    label: str
    index: int

    @property
    def position(self) -> float:
        return float(self.index)

    def text(self) -> str:
        return self.label


Tick = Union[AutoTick, FixedTick, LabelTick]


@dataclass
class Axis:
    """Display configuration for one plot axis.

    Configure through the ``set_*`` methods before drawing; drawing only reads it.
    """

    title: str | None = None
    scale: Scale = Scale.LINEAR
    min: float | None = None
    max: float | None = None
    margin: float = DEFAULT_MARGIN
    ticks: TickStrategy = AutoTicks()

    def set_title(self, title: str | None) -> "Axis":
        self.title = title
        return self

    def set_scale(self, scale: Scale | str) -> "Axis":
        self.scale = Scale(scale)
        return self

    def set_min(self, value: float | None) -> "Axis":
        self.min = None if value is None else float(value)
        return self

    def set_max(self, value: float | None) -> "Axis":
        self.max = None if value is None else float(value)
        return self

    def set_limits(self, *, min: float | None = None, max: float | None = None) -> "Axis":
        return self.set_min(min).set_max(max)

    def set_margin(self, margin: float) -> "Axis":
        if not math.isfinite(margin) or margin < 0:
            raise ValueError("margin must be a finite value >= 0")
        self.margin = float(margin)
        return self

    def set_ticks_auto(self, count: int = DEFAULT_AUTO_TICK_COUNT) -> "Axis":
        self.ticks = AutoTicks(count)
        return self

    def set_ticks_fixed(self, count: int) -> "Axis":
        self.ticks = FixedTicks(count)
        return self

    def pretty_range(self, data_range: DataRange) -> Range:
        """Displayed extent: margins on flagged sides, then explicit overrides."""
        if isinstance(data_range, CategoricalRange):
            # Centre every category index inside its own unit-wide cell.
            return Range(-0.5, len(data_range) - 0.5)

        if self.min is not None and self.max is not None:
            return Range(self.min, self.max)

        observed = data_range.range
        if self.scale is Scale.LOGARITHMIC:
            # A limit on one side stands in for a non-positive data endpoint there.
            lo_anchor = self.min if self.min is not None and observed.min <= 0.0 else observed.min
            hi_anchor = self.max if self.max is not None and observed.max <= 0.0 else observed.max
            if lo_anchor <= 0.0 or hi_anchor <= 0.0:
                raise TransformError(
                    f"logarithmic axis needs positive data, got [{observed.min}, {observed.max}]"
                )
            with_margin = 10.0 ** (abs(math.log10(hi_anchor) - math.log10(lo_anchor)) * self.margin)
        else:
            if observed.size() == 0.0:
                # Single-valued data: open a unit-scale window around the value.
                delta = max(1.0, abs(observed.min) * self.margin)
                observed = Range(observed.min - delta, observed.max + delta)
            with_margin = abs(observed.size() * self.margin)

        lo = observed.min - with_margin if data_range.margin_min else observed.min
        hi = observed.max + with_margin if data_range.margin_max else observed.max
        return Range(
            self.min if self.min is not None else lo,
            self.max if self.max is not None else hi,
        )

    def scaled_range(self, data_range: DataRange) -> Range:
        pretty = self.pretty_range(data_range)
        scaled = Range(self.scale.apply(pretty.min), self.scale.apply(pretty.max))
        if not scaled.is_finite():
            raise TransformError(
                f"{self.scale.value} scale cannot display [{pretty.min}, {pretty.max}]; set explicit axis limits"
            )
        return scaled

    def iter_ticks(self, data_range: DataRange) -> Iterator[Tick]:
        """Lazily produce the ticks to display for ``data_range``."""
        if isinstance(self.ticks, FixedTicks):
            for value in EvenTicks(self.pretty_range(data_range), self.ticks.count):
                yield FixedTick(value)
            return

        if isinstance(data_range, CategoricalRange):
            for index in range(len(data_range)):
                yield LabelTick(label=data_range.labels.label(index), index=index)
            return

        unit = data_range.unit if isinstance(data_range, ContinuousRange) else RangeUnit.ABSOLUTE
        try:
            nice = self.scaled_range(data_range).nice_ticks(self.ticks.count)
        except EmptyRangeError as exc:
            raise TransformError(str(exc)) from exc
        for value in nice:
            yield AutoTick(value=self.scale.invert(value), precision=nice.precision, unit=unit)


def format_duration(nanoseconds: float) -> str:
    if not math.isfinite(nanoseconds):
        return str(nanoseconds)
    remaining = int(round(nanoseconds))
    if remaining == 0:
        return "0s"
    sign = "-" if remaining < 0 else ""
    remaining = abs(remaining)
    parts: list[str] = []
    for suffix, size in _DURATION_UNITS:
        amount, remaining = divmod(remaining, size)
        if amount:
            parts.append(f"{amount}{suffix}")
    return sign + " ".join(parts)


def format_date(days: float) -> str:
    if not math.isfinite(days):
        return str(days)
    try:
        return (_EPOCH + datetime.timedelta(days=int(math.floor(days)))).isoformat()
    except OverflowError:
        return f"{days:.0f}d"
