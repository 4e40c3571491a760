"""gridcalc - spreadsheet grid backend with formula evaluation."""

__version__ = "0.1.0"
