"""Tests for the beerstock CLI — init-db and seed against a SQLite file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner
from sqlalchemy.ext.asyncio import async_sessionmaker

from beerstock.cli import _load_seed_file, main
from beerstock.core.database import build_engine
from beerstock.dao.beer_dao import BeerDAO


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'beerstock.db'}"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "beers.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _stored_names(db_url: str) -> list[str]:
    async def _fetch() -> list[str]:
        engine = build_engine(db_url)
        try:
            async with async_sessionmaker(engine)() as session:
                return [b.name for b in await BeerDAO().list_all(session)]
        finally:
            await engine.dispose()

    return asyncio.run(_fetch())


BEERS = [
    {"name": "Brahma", "brand": "Ambev", "max": 50, "quantity": 10, "type": "LAGER"},
    {"name": "Guinness", "brand": "Diageo", "max": 30, "quantity": 0, "type": "STOUT"},
]


class TestInitDb:
    def test_creates_tables(self, runner, db_url):
        result = runner.invoke(main, ["--database-url", db_url, "init-db"])
        assert result.exit_code == 0, result.output
        assert "Tables created." in result.output
        assert _stored_names(db_url) == []

    def test_is_idempotent(self, runner, db_url):
        runner.invoke(main, ["--database-url", db_url, "init-db"])
        result = runner.invoke(main, ["--database-url", db_url, "init-db"])
        assert result.exit_code == 0, result.output


class TestSeed:
    def test_seeds_all(self, runner, db_url, tmp_path):
        runner.invoke(main, ["--database-url", db_url, "init-db"])
        path = _write(tmp_path, BEERS)

        result = runner.invoke(main, ["--database-url", db_url, "seed", str(path)])

        assert result.exit_code == 0, result.output
        assert "Seeded 2 beer(s), skipped 0, invalid 0." in result.output
        assert _stored_names(db_url) == ["Brahma", "Guinness"]

    def test_rerun_skips_existing(self, runner, db_url, tmp_path):
        runner.invoke(main, ["--database-url", db_url, "init-db"])
        path = _write(tmp_path, BEERS)
        runner.invoke(main, ["--database-url", db_url, "seed", str(path)])

        result = runner.invoke(main, ["--database-url", db_url, "seed", str(path)])

        assert result.exit_code == 0, result.output
        assert "skipped Brahma: already registered" in result.output
        assert "Seeded 0 beer(s), skipped 2, invalid 0." in result.output
        assert _stored_names(db_url) == ["Brahma", "Guinness"]

    def test_invalid_entries_reported(self, runner, db_url, tmp_path):
        runner.invoke(main, ["--database-url", db_url, "init-db"])
        path = _write(
            tmp_path,
            [
                BEERS[0],
                {"name": "NoBrand", "max": 5, "quantity": 1, "type": "ALE"},
                {"name": "Overfull", "brand": "x", "max": 5, "quantity": 6, "type": "ALE"},
            ],
        )

        result = runner.invoke(main, ["--database-url", db_url, "seed", str(path)])

        assert result.exit_code == 1
        assert "Seeded 1 beer(s), skipped 0, invalid 2." in result.output
        assert _stored_names(db_url) == ["Brahma"]


class TestLoadSeedFile:
    def test_rejects_non_array(self, tmp_path):
        path = _write(tmp_path, {"name": "Brahma"})
        with pytest.raises(click.ClickException, match="expected a JSON array"):
            _load_seed_file(path)

    def test_rejects_bad_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(click.ClickException, match="invalid JSON"):
            _load_seed_file(path)


class TestServe:
    def test_runs_uvicorn_factory(self, runner):
        with patch("uvicorn.run") as run:
            result = runner.invoke(main, ["serve", "--host", "0.0.0.0", "--port", "9000"])

        assert result.exit_code == 0, result.output
        args, kwargs = run.call_args
        assert args == ("beerstock.api:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
