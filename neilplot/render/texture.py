from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image


LOGGER = logging.getLogger(__name__)

# Formats without an alpha channel get the frame flattened onto this colour.
_OPAQUE_FORMATS = {".jpg", ".jpeg", ".bmp"}


def rgba_to_image(rgba: np.ndarray) -> Image.Image:
    if rgba.ndim != 3 or rgba.shape[2] != 4 or rgba.dtype != np.uint8:
        raise ValueError("frame must be a uint8 array of shape (height, width, 4)")
    return Image.fromarray(np.ascontiguousarray(rgba))


def save_rgba(rgba: np.ndarray, path: str | Path) -> Path:
    """Encode ``rgba`` to ``path``; the file suffix picks the format."""
    out_path = Path(path)
    image = rgba_to_image(rgba)
    if out_path.suffix.lower() in _OPAQUE_FORMATS:
        flat = Image.new("RGB", image.size, (255, 255, 255))
        flat.paste(image, mask=image.getchannel("A"))
        image = flat
    image.save(out_path)
    LOGGER.debug("saved %dx%d frame to %s", image.width, image.height, out_path)
    return out_path
