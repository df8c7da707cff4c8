from neilplot.render.render import (
    BLACK,
    LOGICAL_SHORT_SIDE,
    WHITE,
    Align,
    DrawText,
    Render,
    RenderConfig,
    StrokeStyle,
    TextLayout,
)
from neilplot.render.shapes import Circle, Line, Path, Rect, RoundedRect, Shape

__all__ = [
    "Align",
    "BLACK",
    "Circle",
    "DrawText",
    "LOGICAL_SHORT_SIDE",
    "Line",
    "Path",
    "Rect",
    "Render",
    "RenderConfig",
    "RoundedRect",
    "Shape",
    "StrokeStyle",
    "TextLayout",
    "WHITE",
]
