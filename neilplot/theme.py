from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class Oklch:
    lightness: float
    chroma: float
    hue: float

    def to_rgba(self, alpha: int = 255) -> RGBA:
        """Convert to 8-bit sRGB, clipping out-of-gamut channels."""
        a = self.chroma * math.cos(math.radians(self.hue))
        b = self.chroma * math.sin(math.radians(self.hue))
        l_ = self.lightness + 0.3963377774 * a + 0.2158037573 * b
        m_ = self.lightness - 0.1055613458 * a - 0.0638541728 * b
        s_ = self.lightness - 0.0894841775 * a - 1.2914855480 * b
        lms = np.asarray([l_, m_, s_], dtype=np.float64) ** 3
        linear = np.asarray(
            [
                [4.0767416621, -3.3077115913, 0.2309699292],
                [-1.2684380046, 2.6097574011, -0.3413193965],
                [-0.0041960863, -0.7034186147, 1.7076147010],
            ],
            dtype=np.float64,
        ) @ lms
        linear = np.clip(linear, 0.0, 1.0)
        srgb = np.where(linear <= 0.0031308, 12.92 * linear, 1.055 * np.power(linear, 1.0 / 2.4) - 0.055)
        r, g, b_ = (int(round(float(v) * 255.0)) for v in np.clip(srgb, 0.0, 1.0))
        return (r, g, b_, int(alpha))


@dataclass(frozen=True)
class LinearPalette:
    start: Oklch
    end: Oklch

    def sample(self, t: float) -> RGBA:
        t = min(1.0, max(0.0, float(t)))
        # Interpolate hue along the shorter arc.
        dh = ((self.end.hue - self.start.hue + 180.0) % 360.0) - 180.0
        color = Oklch(
            lightness=self.start.lightness + (self.end.lightness - self.start.lightness) * t,
            chroma=self.start.chroma + (self.end.chroma - self.start.chroma) * t,
            hue=(self.start.hue + dh * t) % 360.0,
        )
        return color.to_rgba()


ROCKET = LinearPalette(Oklch(0.7, 0.13, 50.0), Oklch(0.7, 0.13, 290.0))
