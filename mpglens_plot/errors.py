from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when chart input cannot be coerced into plottable records."""
