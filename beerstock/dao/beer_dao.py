"""BeerDAO — beers table operations."""

from collections.abc import Callable
from typing import Any

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from beerstock.dao.base import BaseDAO
from beerstock.models.beer import Beer, BeerType

# Dialects whose INSERT supports ON CONFLICT ... DO NOTHING.
_UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BeerDAO(BaseDAO[Beer]):
    model = Beer

    # ── read ──────────────────────────────────────────────────────────────

    async def get_by_name(self, session: AsyncSession, name: str) -> Beer | None:
        """Exact, case-sensitive lookup on the unique ``name`` column."""
        return await self.get_by_field(session, name=name)

    # ── write ─────────────────────────────────────────────────────────────

    async def create_if_absent(
        self,
        session: AsyncSession,
        *,
        name: str,
        brand: str,
        max: int,
        quantity: int,
        type: BeerType,
    ) -> Beer | None:
        """Insert a beer unless one with the same name already exists.

        Runs as a single ``INSERT ... ON CONFLICT (name) DO NOTHING``, so
        two concurrent creates with the same name cannot both succeed.
        Returns the new row, or None when the name is already taken.
        """
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"insert-if-absent is not supported on {dialect!r}")

        table = Beer.__table__
        stmt = (
            insert(table)
            .values(
                {
                    table.c.name: name,
                    table.c.brand: brand,
                    table.c.max_quantity: max,
                    table.c.quantity: quantity,
                    table.c.type: type,
                }
            )
            .on_conflict_do_nothing(index_elements=["name"])
            .returning(table.c.id)
        )
        result = await session.execute(stmt)
        new_id = result.scalar_one_or_none()
        if new_id is None:
            return None
        return await session.get(Beer, new_id)

    async def adjust_quantity(self, session: AsyncSession, pk: int, delta: int) -> Beer | None:
        """Add *delta* (may be negative) to a beer's quantity.

        The bound check and the write happen in one conditional UPDATE:
        the row only changes while ``0 <= quantity + delta <= max`` holds
        at write time. Returns the refreshed row, or None when the guard
        rejected the change or the row no longer exists.
        """
        self._require_pk(pk)
        table = Beer.__table__
        new_quantity = table.c.quantity + delta
        stmt = (
            update(table)
            .where(
                table.c.id == pk,
                new_quantity >= 0,
                new_quantity <= table.c.max_quantity,
            )
            .values(quantity=new_quantity)
            .returning(table.c.id)
        )
        result = await session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None
        return await session.get(Beer, pk, populate_existing=True)
