"""BeerStock — beer inventory with bounded stock adjustments."""

__version__ = "1.0.0"
