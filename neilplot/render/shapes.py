from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Protocol

import numpy as np

from neilplot.affine import Affine


DEFAULT_TOLERANCE = 0.1


class Shape(Protocol):
    def to_path(self, tolerance: float = DEFAULT_TOLERANCE) -> "Path":
        ...


@dataclass
class Subpath:
    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False

    def as_array(self) -> np.ndarray:
        if not self.points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.asarray(self.points, dtype=np.float64)


class Path:
    """Polyline path made of straight segments, grouped into subpaths."""

    def __init__(self) -> None:
        self.subpaths: list[Subpath] = []

    def __repr__(self) -> str:
        return f"Path(subpaths={len(self.subpaths)})"

    def move_to(self, x: float, y: float) -> "Path":
        self.subpaths.append(Subpath(points=[(float(x), float(y))]))
        return self

    def line_to(self, x: float, y: float) -> "Path":
        if not self.subpaths or self.subpaths[-1].closed:
            return self.move_to(x, y)
        self.subpaths[-1].points.append((float(x), float(y)))
        return self

    def close_path(self) -> "Path":
        if self.subpaths:
            self.subpaths[-1].closed = True
        return self

    def is_empty(self) -> bool:
        return not any(sub.points for sub in self.subpaths)

    def to_path(self, tolerance: float = DEFAULT_TOLERANCE) -> "Path":
        return self

    def transformed(self, affine: Affine) -> "Path":
        out = Path()
        for sub in self.subpaths:
            pts = sub.as_array()
            if pts.size == 0:
                continue
            xs, ys = affine.apply(pts[:, 0], pts[:, 1])
            out.subpaths.append(Subpath(points=list(zip(xs.tolist(), ys.tolist())), closed=sub.closed))
        return out

    def polygons(self) -> list[np.ndarray]:
        return [sub.as_array() for sub in self.subpaths if len(sub.points) >= 3]

    def polylines(self) -> list[np.ndarray]:
        lines: list[np.ndarray] = []
        for sub in self.subpaths:
            pts = sub.as_array()
            if pts.shape[0] < 2:
                continue
            if sub.closed:
                pts = np.vstack([pts, pts[:1]])
            lines.append(pts)
        return lines

    @classmethod
    def from_points(cls, xs: np.ndarray, ys: np.ndarray, *, closed: bool = False) -> "Path":
        path = cls()
        if len(xs) == 0:
            return path
        path.subpaths.append(
            Subpath(points=list(zip(np.asarray(xs, dtype=np.float64).tolist(), np.asarray(ys, dtype=np.float64).tolist())), closed=closed)
        )
        return path


@dataclass(frozen=True)
class Line:
    x0: float
    y0: float
    x1: float
    y1: float

    def to_path(self, tolerance: float = DEFAULT_TOLERANCE) -> Path:
        return Path().move_to(self.x0, self.y0).line_to(self.x1, self.y1)


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_origin_size(cls, x: float, y: float, width: float, height: float) -> "Rect":
        return cls(x, y, x + width, y + height)

    def to_path(self, tolerance: float = DEFAULT_TOLERANCE) -> Path:
        return (
            Path()
            .move_to(self.x0, self.y0)
            .line_to(self.x1, self.y0)
            .line_to(self.x1, self.y1)
            .line_to(self.x0, self.y1)
            .close_path()
        )


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    radius: float

    def to_path(self, tolerance: float = DEFAULT_TOLERANCE) -> Path:
        xs, ys = _arc(self.cx, self.cy, self.radius, 0.0, 2.0 * math.pi, tolerance, endpoint=False)
        return Path.from_points(xs, ys, closed=True)


@dataclass(frozen=True)
class RoundedRect:
    x0: float
    y0: float
    x1: float
    y1: float
    radius: float

    @classmethod
    def from_rect(cls, rect: Rect, radius: float) -> "RoundedRect":
        return cls(rect.x0, rect.y0, rect.x1, rect.y1, radius)

    def to_path(self, tolerance: float = DEFAULT_TOLERANCE) -> Path:
        left, right = min(self.x0, self.x1), max(self.x0, self.x1)
        top, bottom = min(self.y0, self.y1), max(self.y0, self.y1)
        r = max(0.0, min(self.radius, (right - left) / 2.0, (bottom - top) / 2.0))
        if r == 0.0:
            return Rect(left, top, right, bottom).to_path(tolerance)
        corners = (
            (right - r, top + r, -0.5 * math.pi),
            (right - r, bottom - r, 0.0),
            (left + r, bottom - r, 0.5 * math.pi),
            (left + r, top + r, math.pi),
        )
        xs: list[float] = []
        ys: list[float] = []
        for cx, cy, start in corners:
            ax, ay = _arc(cx, cy, r, start, start + 0.5 * math.pi, tolerance, endpoint=True)
            xs.extend(ax.tolist())
            ys.extend(ay.tolist())
        return Path.from_points(np.asarray(xs), np.asarray(ys), closed=True)


def _arc(
    cx: float,
    cy: float,
    radius: float,
    start: float,
    end: float,
    tolerance: float,
    *,
    endpoint: bool,
) -> tuple[np.ndarray, np.ndarray]:
    radius = abs(radius)
    sweep = abs(end - start)
    if radius <= tolerance or tolerance <= 0:
        segments = 8
    else:
        # Chord error of a segment spanning angle t is r * (1 - cos(t / 2)).
        max_angle = 2.0 * math.acos(max(-1.0, 1.0 - tolerance / radius))
        segments = int(math.ceil(sweep / max(max_angle, 1e-6)))
    segments = max(4, min(segments, 512))
    angles = np.linspace(start, end, segments + (1 if endpoint else 0), endpoint=endpoint)
    return cx + radius * np.cos(angles), cy + radius * np.sin(angles)
