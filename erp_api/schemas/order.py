# erp_api/schemas/order.py

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from erp_api.schemas.base import CamelModel


class OrderCreate(CamelModel):
    number: str = Field(..., min_length=1)
    customer_id: int
    product_id: int
    company_id: int | None = None
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0, le=100)
    status: str | None = None
    phone: str | None = None
    state: str | None = None
    city: str | None = None
    note: str | None = None


class OrderResponse(CamelModel):
    id: int
    number: str
    customer_id: int
    customer_name: str
    product_id: int
    product_name: str
    company_id: int | None
    quantity: int
    price: float
    discount: float
    total: float
    status: str
    phone: str
    state: str
    city: str
    note: str
    created_at: datetime
    updated_at: datetime
