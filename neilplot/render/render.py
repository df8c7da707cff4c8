from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
from PIL import Image

from neilplot.affine import Affine
from neilplot.render.raster.canvas import RGBA, blend_mask, new_canvas
from neilplot.render.raster.coverage import dash_polyline, polygon_coverage, polyline_coverage
from neilplot.render.raster.text import DEFAULT_FONT_FAMILY, draw_text, text_size
from neilplot.render.shapes import Shape


# Drawing coordinates are logical units with this many units on the short side.
LOGICAL_SHORT_SIDE = 1000.0
# Flattening tolerance for curves, in device pixels.
PIXEL_TOLERANCE = 0.25
BOLD_EMBOLDEN_PX = 2

WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)


class Align(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"

    def offset(self, extent: float) -> float:
        if self is Align.CENTER:
            return -extent / 2.0
        if self is Align.END:
            return -extent
        return 0.0


@dataclass(frozen=True)
class RenderConfig:
    width: int = 1000
    height: int = 1000
    background: RGBA = WHITE
    font_family: str = DEFAULT_FONT_FAMILY

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")


@dataclass(frozen=True)
class StrokeStyle:
    width: float = 1.0
    dashes: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("stroke width must be > 0")


@dataclass(frozen=True)
class DrawText:
    text: str
    size: float = 12.0
    bold: bool = False
    color: RGBA = BLACK
    position: tuple[float, float] = (0.0, 0.0)
    rotate_deg: int = 0
    horizontal_align: Align = Align.START
    vertical_align: Align = Align.START


@dataclass(frozen=True)
class TextLayout:
    width: float
    height: float


class Render:
    """Raster drawing sink for one frame.

    Callers draw in logical units; the render maps them to device pixels and
    accumulates everything into one RGBA canvas.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()
        self._canvas = new_canvas(self.config.width, self.config.height, color=self.config.background)

    @property
    def pixel_scale(self) -> float:
        return min(self.config.width, self.config.height) / LOGICAL_SHORT_SIDE

    @property
    def transform(self) -> Affine:
        return Affine.scale(self.pixel_scale)

    def size(self) -> tuple[float, float]:
        scale = self.pixel_scale
        return (self.config.width / scale, self.config.height / scale)

    def resize(self, config: RenderConfig) -> None:
        self.config = config
        self.reset()

    def reset(self) -> None:
        self._canvas = new_canvas(self.config.width, self.config.height, color=self.config.background)

    def fill(self, shape: Shape, transform: Affine, brush: RGBA) -> None:
        full = transform.then(self.transform)
        path = shape.to_path(PIXEL_TOLERANCE / max(full.scale_factor(), 1e-12)).transformed(full)
        coverage = polygon_coverage(path.polygons(), width=self.config.width, height=self.config.height)
        if coverage is None:
            return
        x0, y0, mask = coverage
        blend_mask(self._canvas, x0, y0, mask, brush)

    def stroke(self, shape: Shape, transform: Affine, brush: RGBA, stroke: StrokeStyle) -> None:
        full = transform.then(self.transform)
        scale = full.scale_factor()
        path = shape.to_path(PIXEL_TOLERANCE / max(scale, 1e-12)).transformed(full)
        lines = path.polylines()
        if stroke.dashes:
            dashes = [d * scale for d in stroke.dashes]
            lines = [piece for line in lines for piece in dash_polyline(line, dashes)]
        coverage = polyline_coverage(
            lines,
            line_width=stroke.width * scale,
            width=self.config.width,
            height=self.config.height,
        )
        if coverage is None:
            return
        x0, y0, mask = coverage
        blend_mask(self._canvas, x0, y0, mask, brush)

    def layout_text(self, text: DrawText) -> TextLayout:
        w, h = text_size(
            text.text,
            font_family=self.config.font_family,
            font_size_px=text.size * self.pixel_scale,
            embolden_px=BOLD_EMBOLDEN_PX if text.bold else 1,
            rotate_deg=text.rotate_deg,
        )
        scale = self.pixel_scale
        return TextLayout(width=w / scale, height=h / scale)

    def draw_text(self, text: DrawText) -> None:
        if not text.text:
            return
        layout = self.layout_text(text)
        x = text.position[0] + text.horizontal_align.offset(layout.width)
        y = text.position[1] + text.vertical_align.offset(layout.height)
        px, py = self.transform.apply_point(x, y)
        draw_text(
            self._canvas,
            int(round(px)),
            int(round(py)),
            text.text,
            text.color,
            font_family=self.config.font_family,
            font_size_px=text.size * self.pixel_scale,
            embolden_px=BOLD_EMBOLDEN_PX if text.bold else 1,
            rotate_deg=text.rotate_deg,
        )

    def to_rgba(self) -> np.ndarray:
        return self._canvas.copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._canvas.copy())
