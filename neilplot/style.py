from __future__ import annotations

from dataclasses import dataclass

from neilplot.render.raster.canvas import RGBA


DEFAULT_SAVE_SIZE = (2048, 2048)


@dataclass(frozen=True)
class PlotStyle:
    """Layout and colours shared by every plot element, in logical units."""

    background: RGBA = (255, 255, 255, 255)
    text_color: RGBA = (32, 32, 32, 255)
    line_color: RGBA = (128, 128, 128, 255)
    viewport_margin: float = 80.0
    title_size: float = 32.0
    title_gap: float = 10.0
    axis_title_size: float = 24.0
    axis_title_gap: float = 40.0
    tick_label_size: float = 12.0
    tick_length: float = 10.0
    tick_label_gap: float = 15.0
    tick_width: float = 1.0
    # Slack when deciding whether a tick's pixel position is inside the viewport.
    tick_clip_epsilon: float = 1e-6


@dataclass(frozen=True)
class LegendStyle:
    margin: float = 20.0
    padding: float = 10.0
    font_size: float = 20.0
    line_height: float = 20.0
    marker_width: float = 40.0
    corner_radius: float = 5.0
    outline_width: float = 2.0
    background: RGBA = (255, 255, 255, 200)
    outline: RGBA = (128, 128, 128, 255)
    text_color: RGBA = (32, 32, 32, 255)
