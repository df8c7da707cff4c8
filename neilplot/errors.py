from __future__ import annotations


class PlotError(Exception):
    pass


class PlotDataError(PlotError, ValueError):
    """Raised when caller data cannot be turned into ranges or points."""


class DataExtractionError(PlotDataError):
    pass


class EmptyRangeError(PlotDataError):
    pass


class IncompatibleRangeError(PlotDataError):
    pass


class TransformError(PlotError):
    """Raised when an axis cannot produce a usable data-to-pixel mapping."""
