from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from neilplot.affine import Affine
from neilplot.bounds import Bounds
from neilplot.render import Align, Circle, DrawText, Line, Rect, Render, RoundedRect, StrokeStyle
from neilplot.series.base import LegendItem
from neilplot.style import LegendStyle


@dataclass(frozen=True)
class LegendLayout:
    items: tuple[LegendItem, ...]
    box: Rect
    text_width: float


def build_legend_layout(
    render: Render,
    viewport: Bounds,
    items: Sequence[LegendItem],
    style: LegendStyle,
) -> LegendLayout | None:
    """Size the legend box and pin it to the top-right corner of ``viewport``."""
    entries = tuple(items)
    if not entries:
        return None
    text_w = max(
        render.layout_text(DrawText(item.label, size=style.font_size)).width for item in entries
    )
    box_w = style.padding * 3 + style.marker_width + text_w
    box_h = style.padding * 2 + style.line_height * len(entries)
    right = max(viewport.x.min, viewport.x.max) - style.margin
    top = min(viewport.y.min, viewport.y.max) + style.margin
    return LegendLayout(items=entries, box=Rect(right - box_w, top, right, top + box_h), text_width=text_w)


def draw_legend(render: Render, viewport: Bounds, items: Sequence[LegendItem], style: LegendStyle) -> LegendLayout | None:
    layout = build_legend_layout(render, viewport, items, style)
    if layout is None:
        return None
    identity = Affine.identity()
    box = RoundedRect.from_rect(layout.box, style.corner_radius)
    render.fill(box, identity, style.background)
    render.stroke(box, identity, style.outline, StrokeStyle(width=style.outline_width))

    swatch_x0 = layout.box.x0 + style.padding
    swatch_x1 = swatch_x0 + style.marker_width
    for i, item in enumerate(layout.items):
        row_y = layout.box.y0 + style.padding + style.line_height * (i + 0.5)
        render.stroke(Line(swatch_x0, row_y, swatch_x1, row_y), identity, item.color, StrokeStyle(width=2.0))
        render.fill(Circle((swatch_x0 + swatch_x1) / 2.0, row_y, style.line_height * 0.25), identity, item.color)
        render.draw_text(
            DrawText(
                item.label,
                size=style.font_size,
                color=style.text_color,
                position=(swatch_x1 + style.padding, row_y),
                horizontal_align=Align.START,
                vertical_align=Align.CENTER,
            )
        )
    return layout
