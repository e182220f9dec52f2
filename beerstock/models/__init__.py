"""SQLAlchemy ORM models — one file per table."""

from beerstock.models.beer import Beer, BeerType

__all__ = [
    "Beer",
    "BeerType",
]
