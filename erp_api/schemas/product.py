# erp_api/schemas/product.py

from decimal import Decimal

from pydantic import Field

from erp_api.schemas.base import CamelModel


class ProductCreate(CamelModel):
    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    price: Decimal = Field(
        ...,
        ge=0,
        lt=100_000_000,
        description="Price must be below 100 million"
    )

    quantity: int = Field(..., ge=0)
    description: str | None = None

    # Path of an already stored upload, e.g. /uploads/products/a.png
    image: str | None = None


class ProductUpdate(CamelModel):
    sku: str | None = Field(None, min_length=1)
    name: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0, lt=100_000_000)
    quantity: int | None = Field(None, ge=0)
    description: str | None = None
    image: str | None = None


class ProductResponse(CamelModel):
    id: int
    sku: str
    image: str | None
    name: str
    price: float
    quantity: int
    description: str | None
