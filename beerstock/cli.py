"""CLI entry point: beerstock.

Subcommands:
    beerstock serve                 # Run the REST API under uvicorn
    beerstock init-db               # Create the database tables
    beerstock seed beers.json       # Register beers from a JSON array
"""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass, field
from pathlib import Path

import click
import structlog
from dotenv import load_dotenv
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import async_sessionmaker

from beerstock.api.schemas.beer import BeerCreateRequest, to_new_beer
from beerstock.core.database import build_engine, create_all
from beerstock.core.logging import setup_logging
from beerstock.dao.beer_dao import BeerDAO
from beerstock.services import AlreadyRegisteredError, ValidationError
from beerstock.services.beer_service import BeerService

log = structlog.get_logger(__name__)


@dataclass
class SeedReport:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)


def _load_seed_file(path: Path) -> list[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, list):
        raise click.ClickException(f"{path}: expected a JSON array of beers")
    return data


async def _seed(database_url: str | None, entries: list[dict]) -> SeedReport:
    """Create each entry in its own transaction so one bad row doesn't undo the rest."""
    engine = build_engine(database_url)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    service = BeerService(BeerDAO())
    report = SeedReport()
    try:
        for index, raw in enumerate(entries):
            label = raw.get("name", f"#{index}") if isinstance(raw, dict) else f"#{index}"
            try:
                body = BeerCreateRequest.model_validate(raw)
            except SchemaValidationError as exc:
                report.invalid.append(f"{label}: {exc.error_count()} validation error(s)")
                continue
            async with factory() as session:
                async with session.begin():
                    try:
                        await service.create_beer(session, to_new_beer(body))
                    except AlreadyRegisteredError:
                        report.skipped.append(body.name)
                        continue
                    except ValidationError as exc:
                        report.invalid.append(f"{label}: {exc}")
                        continue
            report.created.append(body.name)
    finally:
        await engine.dispose()
    return report


async def _init_db(database_url: str | None) -> None:
    engine = build_engine(database_url)
    try:
        await create_all(engine)
    finally:
        await engine.dispose()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--database-url",
    default=None,
    help="Database URL (default: $BEERSTOCK_DATABASE_URL)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, database_url: str | None) -> None:
    """BeerStock: beer inventory service."""
    load_dotenv(Path.cwd() / ".env")
    setup_logging(level="DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url


@main.command()
@click.option("--host", default=lambda: os.environ.get("BEERSTOCK_HOST", "127.0.0.1"))
@click.option("--port", type=int, default=lambda: int(os.environ.get("BEERSTOCK_PORT", "8000")))
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool) -> None:
    """Run the REST API."""
    import uvicorn

    if ctx.obj["database_url"]:
        os.environ["BEERSTOCK_DATABASE_URL"] = ctx.obj["database_url"]
    uvicorn.run(
        "beerstock.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@main.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create all tables (safe to re-run)."""
    asyncio.run(_init_db(ctx.obj["database_url"]))
    click.echo("Tables created.")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def seed(ctx: click.Context, path: Path) -> None:
    """Register every beer listed in PATH (a JSON array)."""
    entries = _load_seed_file(path)
    report = asyncio.run(_seed(ctx.obj["database_url"], entries))

    for name in report.skipped:
        click.echo(f"  skipped {name}: already registered")
    for line in report.invalid:
        click.echo(f"  invalid {line}", err=True)
    click.echo(
        f"Seeded {len(report.created)} beer(s), "
        f"skipped {len(report.skipped)}, invalid {len(report.invalid)}."
    )
    log.info(
        "seed.completed",
        created=len(report.created),
        skipped=len(report.skipped),
        invalid=len(report.invalid),
    )
    if report.invalid:
        ctx.exit(1)


if __name__ == "__main__":
    main()
