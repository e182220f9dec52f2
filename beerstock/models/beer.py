"""beers table."""

import enum

from sqlalchemy import CheckConstraint, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from beerstock.core.database import Base, TimestampMixin


class BeerType(str, enum.Enum):
    """Closed set of beer styles. Serialized by member name."""

    LAGER = "LAGER"
    MALZBIER = "MALZBIER"
    WITBIER = "WITBIER"
    WEISS = "WEISS"
    ALE = "ALE"
    IPA = "IPA"
    STOUT = "STOUT"


beer_type_enum = Enum(BeerType, name="beer_type", validate_strings=True)

NAME_MAX_LENGTH = 200
BRAND_MAX_LENGTH = 200

# Columns are 32-bit INTEGER on PostgreSQL.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class Beer(TimestampMixin, Base):
    __tablename__ = "beers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), unique=True, nullable=False)
    brand: Mapped[str] = mapped_column(String(BRAND_MAX_LENGTH), nullable=False)
    # ``max`` is a SQL aggregate name; keep the column name unambiguous.
    max: Mapped[int] = mapped_column("max_quantity", Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[BeerType] = mapped_column(beer_type_enum, nullable=False)

    __table_args__ = (
        CheckConstraint("max_quantity > 0", name="max_positive"),
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        CheckConstraint("quantity <= max_quantity", name="quantity_within_max"),
    )

    def __repr__(self) -> str:
        return f"<Beer id={self.id} name={self.name!r} quantity={self.quantity}/{self.max}>"
