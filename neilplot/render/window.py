from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from neilplot.render.texture import rgba_to_image


LOGGER = logging.getLogger(__name__)

# Resize events arrive in bursts; redraw once they settle.
RESIZE_DEBOUNCE_MS = 50

FrameSource = Callable[[int, int], np.ndarray]


class FramePresenter:
    """Produces frames for a window, falling back to the last good one on failure."""

    def __init__(self, draw_frame: FrameSource) -> None:
        self._draw_frame = draw_frame
        self._last_frame: np.ndarray | None = None
        self._last_size: tuple[int, int] | None = None

    @property
    def last_frame(self) -> np.ndarray | None:
        return self._last_frame

    def present(self, width: int, height: int) -> np.ndarray | None:
        if width <= 0 or height <= 0:
            return self._last_frame
        if self._last_size == (width, height) and self._last_frame is not None:
            return self._last_frame
        try:
            frame = self._draw_frame(width, height)
        except Exception:
            LOGGER.exception("redraw at %dx%d failed, keeping the previous frame", width, height)
            return self._last_frame
        self._last_frame = frame
        self._last_size = (width, height)
        return frame


class PlotWindow:
    """Tk window that re-renders its frame source whenever it is resized."""

    def __init__(self, draw_frame: FrameSource, *, title: str = "neilplot", width: int, height: int) -> None:
        import tkinter as tk

        from PIL import ImageTk

        self._presenter = FramePresenter(draw_frame)
        self._root = tk.Tk()
        self._root.title(title)
        self._root.geometry(f"{int(width)}x{int(height)}")
        self._label = tk.Label(self._root, borderwidth=0, highlightthickness=0)
        self._label.pack(fill=tk.BOTH, expand=True)
        self._photo_type = ImageTk.PhotoImage
        self._photo = None
        self._pending: str | None = None
        self._root.bind("<Configure>", self._on_configure)

    def _on_configure(self, event) -> None:
        if event.widget is not self._root:
            return
        if self._pending is not None:
            self._root.after_cancel(self._pending)
        self._pending = self._root.after(RESIZE_DEBOUNCE_MS, self._redraw)

    def _redraw(self) -> None:
        self._pending = None
        frame = self._presenter.present(self._root.winfo_width(), self._root.winfo_height())
        if frame is None:
            return
        self._photo = self._photo_type(rgba_to_image(frame))
        self._label.configure(image=self._photo)

    def run(self) -> None:
        self._root.mainloop()
