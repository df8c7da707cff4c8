from __future__ import annotations

import unittest

import numpy as np

from neilplot.affine import Affine
from neilplot.marker import Marker
from neilplot.render import Align, Circle, DrawText, Line, Path, Rect, Render, RenderConfig, RoundedRect, StrokeStyle
from neilplot.render.raster.canvas import blend_mask, new_canvas
from neilplot.render.raster.coverage import dash_polyline
from neilplot.render.raster.text import draw_text, text_size

RED = (220, 30, 30, 255)


class RenderTests(unittest.TestCase):
    def test_logical_size_keeps_short_side_at_1000(self) -> None:
        self.assertEqual(Render(RenderConfig(width=2000, height=1000)).size(), (2000.0, 1000.0))
        self.assertEqual(Render(RenderConfig(width=500, height=1000)).size(), (1000.0, 2000.0))

    def test_config_rejects_empty_canvas(self) -> None:
        with self.assertRaises(ValueError):
            RenderConfig(width=0, height=10)
        with self.assertRaises(ValueError):
            StrokeStyle(width=0.0)

    def test_fill_covers_interior_in_device_pixels(self) -> None:
        render = Render(RenderConfig(width=500, height=500))
        render.fill(Rect(100.0, 100.0, 300.0, 300.0), Affine.identity(), RED)
        rgba = render.to_rgba()
        # Half-size canvas: logical 200 lands on pixel 100.
        self.assertEqual(tuple(rgba[100, 100]), RED)
        self.assertEqual(tuple(rgba[20, 20]), (255, 255, 255, 255))
        self.assertEqual(tuple(rgba[200, 200]), (255, 255, 255, 255))

    def test_fill_applies_shape_transform(self) -> None:
        render = Render(RenderConfig(width=1000, height=1000))
        render.fill(Marker.SQUARE.shape(), Affine.scale(40.0).then_translate(500.0, 500.0), RED)
        rgba = render.to_rgba()
        self.assertEqual(tuple(rgba[500, 500]), RED)
        self.assertEqual(tuple(rgba[500, 530]), (255, 255, 255, 255))

    def test_stroke_draws_line(self) -> None:
        render = Render(RenderConfig(width=200, height=200))
        render.stroke(Line(10.0, 100.0, 900.0, 100.0), Affine.identity(), RED, StrokeStyle(width=20.0))
        rgba = render.to_rgba()
        self.assertEqual(tuple(rgba[20, 100]), RED)
        self.assertEqual(tuple(rgba[60, 100]), (255, 255, 255, 255))

    def test_dashed_stroke_leaves_gaps(self) -> None:
        render = Render(RenderConfig(width=1000, height=1000))
        render.stroke(Line(0.0, 500.0, 1000.0, 500.0), Affine.identity(), RED, StrokeStyle(width=4.0, dashes=(50.0, 50.0)))
        row = render.to_rgba()[500, :, 1]
        self.assertEqual(int(row[25]), RED[1])
        self.assertEqual(int(row[75]), 255)

    def test_text_layout_and_draw(self) -> None:
        render = Render(RenderConfig(width=400, height=400))
        label = DrawText("hello", size=40.0, position=(500.0, 500.0), horizontal_align=Align.CENTER, vertical_align=Align.CENTER)
        layout = render.layout_text(label)
        self.assertGreater(layout.width, layout.height)
        rotated = render.layout_text(DrawText("hello", size=40.0, rotate_deg=90))
        self.assertAlmostEqual(rotated.width, layout.height)
        self.assertAlmostEqual(rotated.height, layout.width)
        render.draw_text(label)
        self.assertTrue(np.any(render.to_rgba()[:, :, 0] < 128))

    def test_reset_clears_canvas(self) -> None:
        render = Render(RenderConfig(width=50, height=50))
        render.fill(Circle(500.0, 500.0, 400.0), Affine.identity(), RED)
        render.reset()
        self.assertTrue(np.all(render.to_rgba() == 255))

    def test_to_rgba_is_a_copy(self) -> None:
        render = Render(RenderConfig(width=10, height=10))
        frame = render.to_rgba()
        frame[:] = 0
        self.assertEqual(int(render.to_rgba()[0, 0, 0]), 255)
        self.assertEqual(render.to_image().size, (10, 10))


class ShapeTests(unittest.TestCase):
    def test_closed_path_polyline_returns_to_start(self) -> None:
        path = Path().move_to(0, 0).line_to(1, 0).line_to(1, 1).close_path()
        line = path.polylines()[0]
        self.assertEqual(line.shape, (4, 2))
        self.assertEqual(line[-1].tolist(), [0.0, 0.0])

    def test_rounded_rect_stays_inside_its_box(self) -> None:
        pts = RoundedRect(0.0, 0.0, 10.0, 4.0, 2.0).to_path(0.01).polygons()[0]
        self.assertGreaterEqual(pts[:, 0].min(), -1e-9)
        self.assertLessEqual(pts[:, 0].max(), 10.0 + 1e-9)
        self.assertLessEqual(pts[:, 1].max(), 4.0 + 1e-9)

    def test_every_marker_fits_unit_box(self) -> None:
        for marker in Marker:
            polys = marker.shape().to_path(0.01).polygons()
            self.assertTrue(polys, marker)
            pts = np.vstack(polys)
            self.assertLessEqual(float(np.abs(pts).max()), 0.5 + 1e-9, marker)

    def test_dash_pattern_splits_polyline(self) -> None:
        pieces = dash_polyline(np.array([[0.0, 0.0], [10.0, 0.0]]), [2.0, 3.0])
        self.assertEqual([p[0, 0] for p in pieces], [0.0, 5.0])
        self.assertAlmostEqual(pieces[0][-1, 0], 2.0)


class RasterTests(unittest.TestCase):
    def test_blend_mask_clips_to_canvas(self) -> None:
        canvas = new_canvas(4, 4, color=(0, 0, 0, 255))
        blend_mask(canvas, -1, -1, np.full((3, 3), 255, dtype=np.uint8), (255, 255, 255, 255))
        self.assertEqual(int(canvas[1, 1, 0]), 255)
        self.assertEqual(int(canvas[2, 2, 0]), 0)

    def test_text_renderer_uses_antialias_coverage(self) -> None:
        canvas = new_canvas(220, 80, color=(0, 0, 0, 0))
        draw_text(canvas, 10, 20, "Scatter plot", (255, 255, 255, 255), font_size_px=24.0)
        alpha = canvas[:, :, 3]
        self.assertTrue(np.any((alpha > 0) & (alpha < 255)))
        self.assertEqual(int(canvas[0, 0, 3]), 0)

    def test_rotated_text_size_swaps_dimensions(self) -> None:
        w0, h0 = text_size("value", font_size_px=18.0, rotate_deg=0)
        w1, h1 = text_size("value", font_size_px=18.0, rotate_deg=270)
        self.assertEqual((w0, h0), (h1, w1))


if __name__ == "__main__":
    unittest.main()
