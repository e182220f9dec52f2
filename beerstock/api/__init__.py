"""BeerStock REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from beerstock.api.deps import dispose_engine, get_engine, init_session_factory
from beerstock.api.errors import register_error_handlers
from beerstock.api.middleware.request_id import RequestIDMiddleware
from beerstock.api.routers import beers
from beerstock.core.database import create_all
from beerstock.core.logging import setup_logging

log = structlog.get_logger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init engine (optionally create tables). Shutdown: dispose engine."""
    init_session_factory()
    if os.environ.get("BEERSTOCK_CREATE_TABLES", "").lower() in _TRUTHY:
        await create_all(get_engine())
        log.info("app.tables_created")
    log.info("app.started")
    yield
    await dispose_engine()
    log.info("app.stopped")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="BeerStock",
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get("BEERSTOCK_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(beers.router, prefix="/api/v1/beers", tags=["beers"])

    return app
