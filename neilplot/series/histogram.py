from __future__ import annotations

import logging

import numpy as np

from neilplot.affine import Affine
from neilplot.bounds import ContinuousRange, DataBounds, Range, RangeUnit, ViewportTransform
from neilplot.columns import Column
from neilplot.errors import EmptyRangeError, PlotDataError
from neilplot.render import Path, Render
from neilplot.render.raster.canvas import RGBA
from neilplot.series.base import Series, coerce_color
from neilplot.theme import ROCKET


LOGGER = logging.getLogger(__name__)


class HistogramSeries(Series):
    """Filled step outline over bin edges.

    Built either from raw values, binned here, or from precomputed counts where
    bin ``i`` spans ``[i, i + 1)``.
    """

    def __init__(self, *, values: Column | None = None, counts: Column | None = None, bins: int | None = None) -> None:
        if (values is None) == (counts is None):
            raise ValueError("exactly one of values or counts is required")
        if values is not None:
            if bins is None or bins <= 0:
                raise ValueError("bins must be > 0")
        self.values = values
        self.counts = counts
        self.bins = bins
        self.color: RGBA = ROCKET.sample(0.0)
        self.label: str | None = None

    @classmethod
    def binned(cls, values: Column, bins: int) -> "HistogramSeries":
        return cls(values=values, bins=int(bins))

    @classmethod
    def counted(cls, counts: Column) -> "HistogramSeries":
        return cls(counts=counts)

    def set_color(self, color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> "HistogramSeries":
        self.color = coerce_color(color, alpha)
        return self

    def legend_color(self) -> RGBA:
        return self.color

    def histogram(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(edges, counts)`` with ``len(edges) == len(counts) + 1``."""
        if self.values is not None:
            raw = self.values.to_numpy()
            finite = raw[np.isfinite(raw)]
            if finite.size == 0:
                raise EmptyRangeError("histogram values contain no finite entries")
            counts, edges = np.histogram(finite, bins=self.bins)
            return edges.astype(np.float64), counts.astype(np.float64)

        counts = self.counts.to_numpy().copy()
        if counts.size == 0:
            raise EmptyRangeError("histogram counts are empty")
        missing = ~np.isfinite(counts)
        if missing.any():
            LOGGER.debug("treating %d missing histogram counts as zero", int(missing.sum()))
            counts[missing] = 0.0
        edges = np.arange(counts.size + 1, dtype=np.float64)
        return edges, counts

    def data_bounds(self) -> DataBounds:
        edges, counts = self.histogram()
        unit = RangeUnit.for_column(self.values) if self.values is not None else RangeUnit.ABSOLUTE
        top = float(counts.max())
        if top < 0:
            raise PlotDataError("histogram counts must be >= 0")
        return DataBounds(
            x=ContinuousRange(Range(float(edges[0]), float(edges[-1])), unit=unit, margin_min=False, margin_max=False),
            y=ContinuousRange(Range(0.0, top), margin_min=False, margin_max=True),
        )

    def draw(self, render: Render, transform: ViewportTransform) -> None:
        edges, counts = self.histogram()
        xs = [edges[0]]
        ys = [0.0]
        for i, count in enumerate(counts):
            xs.extend((edges[i], edges[i + 1]))
            ys.extend((count, count))
        xs.append(edges[-1])
        ys.append(0.0)
        px, py = transform.apply(np.asarray(xs), np.asarray(ys))
        keep = np.isfinite(px) & np.isfinite(py)
        if not keep.all():
            LOGGER.warning("histogram outline has %d undrawable vertices", int((~keep).sum()))
        path = Path.from_points(px[keep], py[keep], closed=True)
        render.fill(path, Affine.identity(), self.color)
