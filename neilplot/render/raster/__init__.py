from neilplot.render.raster.canvas import RGBA, blend_mask, new_canvas
from neilplot.render.raster.coverage import dash_polyline, polygon_coverage, polyline_coverage
from neilplot.render.raster.text import draw_text, text_size

__all__ = [
    "RGBA",
    "blend_mask",
    "dash_polyline",
    "draw_text",
    "new_canvas",
    "polygon_coverage",
    "polyline_coverage",
    "text_size",
]
