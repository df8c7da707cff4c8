from __future__ import annotations

from collections.abc import Sequence
import math

import numpy as np
from PIL import Image, ImageDraw


SUPERSAMPLE = 4
# Keeps far off-canvas geometry inside the rasterizer's integer range.
COORD_LIMIT = 1.0e6


def polygon_coverage(
    polygons: Sequence[np.ndarray],
    *,
    width: int,
    height: int,
) -> tuple[int, int, np.ndarray] | None:
    """Anti-aliased coverage of filled polygons, clipped to the canvas.

    Returns ``(x0, y0, mask)`` where ``mask`` covers only the polygons' bounding box.
    """
    shapes = [_sanitize(poly) for poly in polygons]
    shapes = [poly for poly in shapes if poly.shape[0] >= 3]
    if not shapes:
        return None
    box = _clip_box(np.vstack(shapes), pad=0.0, width=width, height=height)
    if box is None:
        return None
    x0, y0, x1, y1 = box
    image = Image.new("L", ((x1 - x0) * SUPERSAMPLE, (y1 - y0) * SUPERSAMPLE), 0)
    draw = ImageDraw.Draw(image)
    for poly in shapes:
        draw.polygon(_local_coords(poly, x0, y0), fill=255)
    return x0, y0, _downsample(image, x1 - x0, y1 - y0)


def polyline_coverage(
    polylines: Sequence[np.ndarray],
    *,
    line_width: float,
    width: int,
    height: int,
) -> tuple[int, int, np.ndarray] | None:
    lines = [_sanitize(line) for line in polylines]
    lines = [line for line in lines if line.shape[0] >= 2]
    if not lines or line_width <= 0:
        return None
    box = _clip_box(np.vstack(lines), pad=line_width, width=width, height=height)
    if box is None:
        return None
    x0, y0, x1, y1 = box
    image = Image.new("L", ((x1 - x0) * SUPERSAMPLE, (y1 - y0) * SUPERSAMPLE), 0)
    draw = ImageDraw.Draw(image)
    stroke_px = max(1, int(round(line_width * SUPERSAMPLE)))
    for line in lines:
        draw.line(_local_coords(line, x0, y0), fill=255, width=stroke_px, joint="curve")
    return x0, y0, _downsample(image, x1 - x0, y1 - y0)


def dash_polyline(points: np.ndarray, pattern: Sequence[float]) -> list[np.ndarray]:
    """Split a polyline into its visible dash pieces; odd patterns repeat as in SVG."""
    if points.shape[0] < 2:
        return []
    dashes = [float(v) for v in pattern if v > 0]
    if not dashes:
        return [points]
    if len(dashes) % 2 == 1:
        dashes = dashes * 2

    pieces: list[np.ndarray] = []
    current: list[tuple[float, float]] = [(float(points[0, 0]), float(points[0, 1]))]
    index = 0
    left = dashes[0]
    drawing = True
    for i in range(points.shape[0] - 1):
        ax, ay = float(points[i, 0]), float(points[i, 1])
        bx, by = float(points[i + 1, 0]), float(points[i + 1, 1])
        seg_len = math.hypot(bx - ax, by - ay)
        pos = 0.0
        while seg_len - pos > left:
            pos += left
            t = pos / seg_len
            px, py = ax + (bx - ax) * t, ay + (by - ay) * t
            if drawing:
                current.append((px, py))
                pieces.append(np.asarray(current, dtype=np.float64))
                current = []
            else:
                current = [(px, py)]
            drawing = not drawing
            index = (index + 1) % len(dashes)
            left = dashes[index]
        left -= seg_len - pos
        if drawing:
            current.append((bx, by))
    if drawing and len(current) >= 2:
        pieces.append(np.asarray(current, dtype=np.float64))
    return pieces


def _sanitize(points: np.ndarray) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    pts = pts[np.all(np.isfinite(pts), axis=1)]
    return np.clip(pts, -COORD_LIMIT, COORD_LIMIT)


def _clip_box(points: np.ndarray, *, pad: float, width: int, height: int) -> tuple[int, int, int, int] | None:
    x0 = max(0, int(math.floor(float(points[:, 0].min()) - pad)))
    y0 = max(0, int(math.floor(float(points[:, 1].min()) - pad)))
    x1 = min(width, int(math.ceil(float(points[:, 0].max()) + pad)) + 1)
    y1 = min(height, int(math.ceil(float(points[:, 1].max()) + pad)) + 1)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1


def _local_coords(points: np.ndarray, x0: int, y0: int) -> list[tuple[float, float]]:
    local = (points - np.asarray([x0, y0], dtype=np.float64)) * SUPERSAMPLE
    return [(float(x), float(y)) for x, y in local.tolist()]


def _downsample(image: Image.Image, width: int, height: int) -> np.ndarray:
    return np.asarray(image.resize((width, height), Image.Resampling.BOX), dtype=np.uint8)
