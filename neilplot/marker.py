from __future__ import annotations

from enum import Enum
import math

from neilplot.render.shapes import Circle, Path, Rect, Shape


_INSET = 0.15
_TRI_Y = math.sqrt(3.0) / 4.0


class Marker(str, Enum):
    """Scatter marker outlines, each fitting a unit box centred on the origin."""

    CIRCLE = "circle"
    PLUS = "plus"
    CROSS = "cross"
    STAR = "star"
    SQUARE = "square"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"
    HEXAGON = "hexagon"
    OCTAGON = "octagon"

    def shape(self) -> Shape:
        if self is Marker.CIRCLE:
            return Circle(0.0, 0.0, 0.5)
        if self is Marker.SQUARE:
            return Rect(-0.5, -0.5, 0.5, 0.5)
        return _polygon(_OUTLINES[self])


def _polygon(points: tuple[tuple[float, float], ...]) -> Path:
    path = Path().move_to(*points[0])
    for x, y in points[1:]:
        path.line_to(x, y)
    return path.close_path()


def _regular(sides: int, radius: float, rotation: float) -> tuple[tuple[float, float], ...]:
    return tuple(
        (radius * math.cos(rotation + 2.0 * math.pi * i / sides), radius * math.sin(rotation + 2.0 * math.pi * i / sides))
        for i in range(sides)
    )


def _star(points: int, outer: float, inner: float) -> tuple[tuple[float, float], ...]:
    out: list[tuple[float, float]] = []
    for i in range(points * 2):
        radius = outer if i % 2 == 0 else inner
        angle = -math.pi / 2.0 + math.pi * i / points
        out.append((radius * math.cos(angle), radius * math.sin(angle)))
    return tuple(out)


_OUTLINES: dict[Marker, tuple[tuple[float, float], ...]] = {
    Marker.PLUS: (
        (-_INSET, -0.5),
        (_INSET, -0.5),
        (_INSET, -_INSET),
        (0.5, -_INSET),
        (0.5, _INSET),
        (_INSET, _INSET),
        (_INSET, 0.5),
        (-_INSET, 0.5),
        (-_INSET, _INSET),
        (-0.5, _INSET),
        (-0.5, -_INSET),
        (-_INSET, -_INSET),
    ),
    Marker.CROSS: (
        (-0.5 + _INSET, -0.5),
        (0.0, -_INSET),
        (0.5 - _INSET, -0.5),
        (0.5, -0.5 + _INSET),
        (_INSET, 0.0),
        (0.5, 0.5 - _INSET),
        (0.5 - _INSET, 0.5),
        (0.0, _INSET),
        (-0.5 + _INSET, 0.5),
        (-0.5, 0.5 - _INSET),
        (-_INSET, 0.0),
        (-0.5, -0.5 + _INSET),
    ),
    Marker.STAR: _star(5, 0.5, 0.2),
    Marker.TRIANGLE: ((0.0, -_TRI_Y), (0.5, _TRI_Y), (-0.5, _TRI_Y)),
    Marker.DIAMOND: ((0.0, -0.5), (0.5, 0.0), (0.0, 0.5), (-0.5, 0.0)),
    Marker.HEXAGON: (
        (-0.25, -_TRI_Y),
        (0.25, -_TRI_Y),
        (0.5, 0.0),
        (0.25, _TRI_Y),
        (-0.25, _TRI_Y),
        (-0.5, 0.0),
    ),
    Marker.OCTAGON: _regular(8, 0.5, math.pi / 8.0),
}
