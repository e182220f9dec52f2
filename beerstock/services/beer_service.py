"""BeerService — beer catalogue and stock adjustment rules."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from beerstock.dao.beer_dao import BeerDAO
from beerstock.models.beer import Beer, BeerType
from beerstock.services import (
    AlreadyRegisteredError,
    NotFoundError,
    StockBelowZeroError,
    StockExceededError,
    ValidationError,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NewBeer:
    """Candidate beer record, before the store assigns an id."""

    name: str
    brand: str
    max: int
    quantity: int
    type: BeerType


def _validate_new_beer(beer: NewBeer) -> None:
    for field in ("name", "brand"):
        value = getattr(beer, field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field} must be a non-empty string")
    if not isinstance(beer.type, BeerType):
        raise ValidationError("type is required")
    if beer.max is None or beer.max <= 0:
        raise ValidationError("max must be a positive integer")
    if beer.quantity is None or beer.quantity < 0:
        raise ValidationError("quantity must be a non-negative integer")
    if beer.quantity > beer.max:
        raise ValidationError(f"quantity {beer.quantity} exceeds max {beer.max}")


def _require_positive(quantity: int) -> None:
    if quantity is None or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")


class BeerService:
    """Stateless service for beer CRUD and bounded stock adjustments."""

    def __init__(self, beer_dao: BeerDAO) -> None:
        self._beer_dao = beer_dao

    # ── reads ─────────────────────────────────────────────────────────────

    async def find_by_name(self, session: AsyncSession, name: str) -> Beer:
        """Return the beer named exactly *name*.

        Raises :class:`NotFoundError` if no beer has that name.
        """
        if not name:
            raise ValidationError("name must be a non-empty string")
        beer = await self._beer_dao.get_by_name(session, name)
        if beer is None:
            raise NotFoundError(f"beer with name {name!r} not found")
        return beer

    async def list_all(self, session: AsyncSession) -> list[Beer]:
        """Return every stored beer in insertion order (possibly empty)."""
        return await self._beer_dao.list_all(session)

    # ── writes ────────────────────────────────────────────────────────────

    async def create_beer(self, session: AsyncSession, beer: NewBeer) -> Beer:
        """Register a new beer.

        Raises :class:`ValidationError` on bad input and
        :class:`AlreadyRegisteredError` if the name is taken; an existing
        record with that name is left untouched.
        """
        _validate_new_beer(beer)
        created = await self._beer_dao.create_if_absent(
            session,
            name=beer.name,
            brand=beer.brand,
            max=beer.max,
            quantity=beer.quantity,
            type=beer.type,
        )
        if created is None:
            log.info("beer.create_rejected", name=beer.name, reason="already_registered")
            raise AlreadyRegisteredError(beer.name)
        log.info("beer.created", beer_id=created.id, name=created.name)
        return created

    async def delete_by_id(self, session: AsyncSession, beer_id: int) -> None:
        """Remove a beer. Raises :class:`NotFoundError` for an unknown id."""
        deleted = await self._beer_dao.delete(session, beer_id)
        if not deleted:
            raise NotFoundError(f"beer with id {beer_id} not found")
        log.info("beer.deleted", beer_id=beer_id)

    async def increment(self, session: AsyncSession, beer_id: int, quantity: int) -> Beer:
        """Add *quantity* units to a beer's stock.

        Raises :class:`StockExceededError` if the result would exceed
        ``max``; the stored quantity is unchanged in that case.
        """
        _require_positive(quantity)
        beer = await self._get_or_404(session, beer_id)
        if beer.quantity + quantity > beer.max:
            log.warning(
                "beer.stock_exceeded",
                beer_id=beer_id,
                current=beer.quantity,
                max=beer.max,
                requested=quantity,
            )
            raise StockExceededError(beer_id, quantity)

        updated = await self._beer_dao.adjust_quantity(session, beer_id, quantity)
        if updated is None:
            # Lost a race with a concurrent adjustment or delete.
            await self._require_exists(session, beer_id)
            raise StockExceededError(beer_id, quantity)
        log.info("beer.stock_incremented", beer_id=beer_id, by=quantity, quantity=updated.quantity)
        return updated

    async def decrement(self, session: AsyncSession, beer_id: int, quantity: int) -> Beer:
        """Remove *quantity* units from a beer's stock.

        Raises :class:`StockBelowZeroError` if the result would be
        negative; the stored quantity is unchanged in that case.
        """
        _require_positive(quantity)
        beer = await self._get_or_404(session, beer_id)
        if beer.quantity - quantity < 0:
            log.warning(
                "beer.stock_below_zero",
                beer_id=beer_id,
                current=beer.quantity,
                requested=quantity,
            )
            raise StockBelowZeroError(beer_id, quantity)

        updated = await self._beer_dao.adjust_quantity(session, beer_id, -quantity)
        if updated is None:
            await self._require_exists(session, beer_id)
            raise StockBelowZeroError(beer_id, quantity)
        log.info("beer.stock_decremented", beer_id=beer_id, by=quantity, quantity=updated.quantity)
        return updated

    # ── helpers ───────────────────────────────────────────────────────────

    async def _get_or_404(self, session: AsyncSession, beer_id: int) -> Beer:
        beer = await self._beer_dao.get_by_id(session, beer_id)
        if beer is None:
            raise NotFoundError(f"beer with id {beer_id} not found")
        return beer

    async def _require_exists(self, session: AsyncSession, beer_id: int) -> None:
        # Hits the database; the identity map may still hold a deleted row.
        if not await self._beer_dao.exists(session, beer_id):
            raise NotFoundError(f"beer with id {beer_id} not found")
