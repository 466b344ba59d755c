"""Plain-text time log parsing and weekly totals."""

__version__ = "0.1.0"
