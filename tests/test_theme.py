from __future__ import annotations

import unittest

from neilplot.theme import ROCKET, LinearPalette, Oklch


class ThemeTests(unittest.TestCase):
    def test_oklch_extremes_map_to_black_and_white(self) -> None:
        self.assertEqual(Oklch(0.0, 0.0, 0.0).to_rgba(), (0, 0, 0, 255))
        self.assertEqual(Oklch(1.0, 0.0, 0.0).to_rgba(), (255, 255, 255, 255))

    def test_alpha_passes_through(self) -> None:
        self.assertEqual(Oklch(0.5, 0.0, 0.0).to_rgba(alpha=100)[3], 100)

    def test_palette_endpoints_and_clamping(self) -> None:
        self.assertEqual(ROCKET.sample(0.0), ROCKET.start.to_rgba())
        self.assertEqual(ROCKET.sample(1.0), ROCKET.end.to_rgba())
        self.assertEqual(ROCKET.sample(-3.0), ROCKET.sample(0.0))
        self.assertEqual(ROCKET.sample(7.0), ROCKET.sample(1.0))

    def test_hue_follows_shorter_arc(self) -> None:
        palette = LinearPalette(Oklch(0.7, 0.1, 350.0), Oklch(0.7, 0.1, 10.0))
        self.assertEqual(palette.sample(0.5), Oklch(0.7, 0.1, 0.0).to_rgba())

    def test_samples_differ_along_palette(self) -> None:
        samples = {ROCKET.sample(i / 4) for i in range(5)}
        self.assertEqual(len(samples), 5)


if __name__ == "__main__":
    unittest.main()
