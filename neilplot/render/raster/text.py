from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from neilplot.render.raster.canvas import RGBA, blend_mask


DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0
FALLBACK_FAMILIES = ("DejaVu Sans", "Liberation Sans", "Helvetica", "Arial", "Menlo")
FONT_DIRS = (
    Path.home() / ".fonts",
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("C:/Windows/Fonts"),
)
FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}


@dataclass(frozen=True)
class FontSpec:
    family: str = DEFAULT_FONT_FAMILY
    size_px: float = DEFAULT_FONT_SIZE_PX
    # Faux bold: glyph coverage is smeared this many pixels to the right.
    embolden_px: int = 1

    def font(self) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        return _load_font(self.family, max(1, int(round(self.size_px))))


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    embolden_px: int = 1,
    rotate_deg: int = 0,
) -> None:
    """Draw ``text`` with its rotated bounding box's top-left corner at ``(x, y)``."""
    if not text:
        return
    spec = FontSpec(font_family, font_size_px, embolden_px)
    blend_mask(dst, x, y, text_mask(text, spec, rotate_deg=rotate_deg), color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    embolden_px: int = 1,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    spec = FontSpec(font_family, font_size_px, embolden_px)
    if not text:
        ascent, descent = spec.font().getmetrics()
        return (0, max(1, int(ascent + descent)))
    h, w = text_mask(text, spec, rotate_deg=rotate_deg).shape
    return (w, h)


def text_mask(text: str, spec: FontSpec, *, rotate_deg: int = 0) -> np.ndarray:
    """Coverage mask of ``text``, emboldened and turned by a multiple of 90 degrees."""
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    mask = _glyph_mask(text, spec)
    turns = (rotate_deg // 90) % 4
    return np.rot90(mask, k=turns) if turns else mask


@lru_cache(maxsize=256)
def _glyph_mask(text: str, spec: FontSpec) -> np.ndarray:
    font = spec.font()
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    mask = np.asarray(image, dtype=np.uint8)
    extra = max(0, spec.embolden_px - 1)
    if extra:
        bold = np.zeros((mask.shape[0], mask.shape[1] + extra), dtype=np.uint8)
        for shift in range(extra + 1):
            view = bold[:, shift : shift + mask.shape[1]]
            np.maximum(view, mask, out=view)
        mask = bold
    mask.flags.writeable = False
    return mask


@lru_cache(maxsize=64)
def _load_font(family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    path = find_font(family)
    if path is not None:
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


def find_font(family: str) -> Path | None:
    """Best font file for ``family``: exact stem match first, then substring, then fallbacks."""
    index = _font_index()
    for name in (family,) + FALLBACK_FAMILIES:
        key = _normalize(name)
        if not key:
            continue
        if key in index:
            return index[key]
        for stem, path in index.items():
            if key in stem:
                return path
    return None


@lru_cache(maxsize=1)
def _font_index() -> dict[str, Path]:
    index: dict[str, Path] = {}
    for base in FONT_DIRS:
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("*")):
            if path.suffix.lower() in FONT_SUFFIXES:
                index.setdefault(_normalize(path.stem), path)
    return index


def _normalize(name: str) -> str:
    return name.strip().lower().replace(" ", "").replace("-", "")
