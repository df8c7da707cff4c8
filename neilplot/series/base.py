from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

import numpy as np

from neilplot.bounds import DataBounds, ViewportTransform
from neilplot.columns import Column
from neilplot.errors import PlotDataError
from neilplot.render import Render
from neilplot.render.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

DEFAULT_COLOR: RGBA = (117, 158, 208, 255)


@dataclass(frozen=True)
class LegendItem:
    label: str
    color: RGBA


class Series(ABC):
    """One plotted data set: reports its data extent and draws itself."""

    label: str | None = None

    @abstractmethod
    def data_bounds(self) -> DataBounds:
        ...

    @abstractmethod
    def draw(self, render: Render, transform: ViewportTransform) -> None:
        ...

    def legend_color(self) -> RGBA:
        return DEFAULT_COLOR

    def legend_items(self) -> list[LegendItem]:
        if self.label is None or not self.label.strip():
            return []
        return [LegendItem(label=self.label, color=self.legend_color())]

    def set_label(self, label: str | None):
        self.label = label
        return self


def coerce_color(color: tuple[int, int, int] | tuple[int, int, int, int], alpha: float = 1.0) -> RGBA:
    if len(color) == 3:
        r, g, b = color
        a = int(max(0.0, min(1.0, alpha)) * 255)
        return (int(r), int(g), int(b), a)
    r, g, b, a = color
    out_a = int(max(0.0, min(1.0, alpha)) * a)
    return (int(r), int(g), int(b), out_a)


def require_paired(x: Column, y: Column) -> None:
    if len(x) != len(y):
        raise PlotDataError(f"x and y length mismatch: {len(x)} != {len(y)}")


def finite_xy(x: Column, y: Column) -> tuple[np.ndarray, np.ndarray]:
    """Paired values of two numeric columns with null or non-finite rows dropped."""
    require_paired(x, y)
    xs = x.to_numpy()
    ys = y.to_numpy()
    mask = np.isfinite(xs) & np.isfinite(ys)
    dropped = int(mask.size - np.count_nonzero(mask))
    if dropped:
        LOGGER.debug("dropping %d rows without finite x/y values", dropped)
    return xs[mask], ys[mask]


def contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    """Half-open ``(start, end)`` index pairs of each run of True values."""
    padded = np.concatenate(([False], np.asarray(mask, dtype=bool), [False])).astype(np.int8)
    edges = np.flatnonzero(np.diff(padded))
    return [(int(start), int(end)) for start, end in zip(edges[::2], edges[1::2])]
