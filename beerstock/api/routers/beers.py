"""Beers router."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from beerstock.api.deps import get_beer_service, get_session
from beerstock.api.schemas.beer import (
    BeerCreateRequest,
    BeerResponse,
    QuantityRequest,
    to_new_beer,
    to_response,
)
from beerstock.models.beer import INT32_MAX, INT32_MIN
from beerstock.services.beer_service import BeerService

router = APIRouter()

BeerId = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]


@router.post("", response_model=BeerResponse, status_code=201)
async def create_beer(
    body: BeerCreateRequest,
    session: AsyncSession = Depends(get_session),
    svc: BeerService = Depends(get_beer_service),
) -> BeerResponse:
    beer = await svc.create_beer(session, to_new_beer(body))
    return to_response(beer)


@router.get("", response_model=list[BeerResponse])
async def list_beers(
    session: AsyncSession = Depends(get_session),
    svc: BeerService = Depends(get_beer_service),
) -> list[BeerResponse]:
    beers = await svc.list_all(session)
    return [to_response(b) for b in beers]


@router.get("/{name}", response_model=BeerResponse)
async def get_beer_by_name(
    name: str,
    session: AsyncSession = Depends(get_session),
    svc: BeerService = Depends(get_beer_service),
) -> BeerResponse:
    beer = await svc.find_by_name(session, name)
    return to_response(beer)


@router.delete("/{beer_id}", status_code=204)
async def delete_beer(
    beer_id: BeerId,
    session: AsyncSession = Depends(get_session),
    svc: BeerService = Depends(get_beer_service),
) -> None:
    await svc.delete_by_id(session, beer_id)


@router.patch("/{beer_id}/increment", response_model=BeerResponse)
async def increment_stock(
    beer_id: BeerId,
    body: QuantityRequest,
    session: AsyncSession = Depends(get_session),
    svc: BeerService = Depends(get_beer_service),
) -> BeerResponse:
    beer = await svc.increment(session, beer_id, body.quantity)
    return to_response(beer)


@router.patch("/{beer_id}/decrement", response_model=BeerResponse)
async def decrement_stock(
    beer_id: BeerId,
    body: QuantityRequest,
    session: AsyncSession = Depends(get_session),
    svc: BeerService = Depends(get_beer_service),
) -> BeerResponse:
    beer = await svc.decrement(session, beer_id, body.quantity)
    return to_response(beer)
