"""Async database engine construction, declarative base, and column mixins."""

from __future__ import annotations

import os
from datetime import datetime

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/beerstock"

# Naming convention for constraints (Alembic auto-migration friendly)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all ORM models."""

    metadata = MetaData(naming_convention=convention)


class TimestampMixin:
    """Mixin that adds created_at / updated_at columns.

    updated_at is refreshed on every UPDATE issued through the ORM,
    including the bulk ``update()`` statements the DAOs run.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def database_url() -> str:
    """Return the configured database URL (``BEERSTOCK_DATABASE_URL``)."""
    return os.environ.get("BEERSTOCK_DATABASE_URL", DEFAULT_DATABASE_URL)


def build_engine(url: str | None = None) -> AsyncEngine:
    """Create an async engine for *url* (defaults to :func:`database_url`).

    Pool sizing only applies to server databases; SQLite uses the
    driver's own single-connection pool.
    """
    url = url or database_url()
    if url.startswith("sqlite"):
        return create_async_engine(url)
    return create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,
    )


async def create_all(engine: AsyncEngine) -> None:
    """Create every table registered on :class:`Base` (idempotent)."""
    # Import for the side effect of registering the tables on Base.metadata.
    import beerstock.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
