from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be > 0")
    return np.tile(np.asarray(color, dtype=np.uint8), (height, width, 1))


def blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    """Composite ``color`` over ``dst`` with ``mask`` (0-255) as coverage, top-left at ``(x, y)``."""
    window = _overlap(dst.shape[1], dst.shape[0], x, y, mask.shape[1], mask.shape[0])
    if window is None:
        return
    dst_view, mask_view = window
    src_a = mask[mask_view].astype(np.float32) * (color[3] / (255.0 * 255.0))
    if not np.any(src_a > 0):
        return

    patch = dst[dst_view]
    dst_a = patch[..., 3].astype(np.float32) / 255.0
    keep = dst_a * (1.0 - src_a)
    out_a = src_a + keep
    weight_src = np.divide(src_a, out_a, out=np.zeros_like(out_a), where=out_a > 1e-6)[..., None]
    weight_dst = np.divide(keep, out_a, out=np.zeros_like(out_a), where=out_a > 1e-6)[..., None]
    rgb = np.asarray(color[:3], dtype=np.float32) * weight_src + patch[..., :3].astype(np.float32) * weight_dst

    patch[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    patch[..., 3] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)


def _overlap(
    width: int, height: int, x: int, y: int, w: int, h: int
) -> tuple[tuple[slice, slice], tuple[slice, slice]] | None:
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(width, x + w), min(height, y + h)
    if w <= 0 or h <= 0 or x1 <= x0 or y1 <= y0:
        return None
    dst_view = (slice(y0, y1), slice(x0, x1))
    mask_view = (slice(y0 - y, y1 - y), slice(x0 - x, x1 - x))
    return dst_view, mask_view
