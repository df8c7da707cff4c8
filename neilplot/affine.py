from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from neilplot.errors import TransformError


@dataclass(frozen=True)
class Affine:
    """2D affine map ``(x, y) -> (a*x + c*y + e, b*x + d*y + f)``."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Affine":
        return cls()

    @classmethod
    def scale(cls, sx: float, sy: float | None = None) -> "Affine":
        return cls(a=float(sx), d=float(sx if sy is None else sy))

    @classmethod
    def translate(cls, tx: float, ty: float) -> "Affine":
        return cls(e=float(tx), f=float(ty))

    @classmethod
    def rotate(cls, radians: float) -> "Affine":
        cos = math.cos(radians)
        sin = math.sin(radians)
        return cls(a=cos, b=sin, c=-sin, d=cos)

    def then(self, other: "Affine") -> "Affine":
        """Return the map that applies ``self`` first and ``other`` second."""
        return Affine(
            a=other.a * self.a + other.c * self.b,
            b=other.b * self.a + other.d * self.b,
            c=other.a * self.c + other.c * self.d,
            d=other.b * self.c + other.d * self.d,
            e=other.a * self.e + other.c * self.f + other.e,
            f=other.b * self.e + other.d * self.f + other.f,
        )

    def then_translate(self, tx: float, ty: float) -> "Affine":
        return Affine(a=self.a, b=self.b, c=self.c, d=self.d, e=self.e + tx, f=self.f + ty)

    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def scale_factor(self) -> float:
        return math.sqrt(abs(self.determinant()))

    def inverse(self) -> "Affine":
        det = self.determinant()
        if det == 0.0 or not math.isfinite(det):
            raise TransformError("affine transform is not invertible")
        a = self.d / det
        b = -self.b / det
        c = -self.c / det
        d = self.a / det
        return Affine(a=a, b=b, c=c, d=d, e=-(a * self.e + c * self.f), f=-(b * self.e + d * self.f))

    def apply_point(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def apply(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        return (self.a * xs + self.c * ys + self.e, self.b * xs + self.d * ys + self.f)
