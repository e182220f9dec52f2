"""Beer request/response schemas and their entity conversions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from beerstock.models.beer import BRAND_MAX_LENGTH, INT32_MAX, NAME_MAX_LENGTH, Beer, BeerType
from beerstock.services.beer_service import NewBeer


class BeerCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    brand: str = Field(min_length=1, max_length=BRAND_MAX_LENGTH)
    max: int = Field(gt=0, le=INT32_MAX)
    quantity: int = Field(ge=0, le=INT32_MAX)
    type: BeerType

    @field_validator("name", "brand", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class QuantityRequest(BaseModel):
    """Body of the increment / decrement endpoints."""

    quantity: int = Field(gt=0, le=INT32_MAX)


class BeerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    brand: str
    max: int
    quantity: int
    type: BeerType


def to_new_beer(body: BeerCreateRequest) -> NewBeer:
    return NewBeer(
        name=body.name,
        brand=body.brand,
        max=body.max,
        quantity=body.quantity,
        type=body.type,
    )


def to_response(beer: Beer) -> BeerResponse:
    return BeerResponse(
        id=beer.id,
        name=beer.name,
        brand=beer.brand,
        max=beer.max,
        quantity=beer.quantity,
        type=beer.type,
    )
