# erp_api/schemas/sale.py

import datetime
from decimal import Decimal

from pydantic import Field

from erp_api.schemas.base import CamelModel


class SaleCreate(CamelModel):
    customer_id: int
    product_id: int
    company_id: int | None = None
    date: datetime.date
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., gt=0, lt=100_000_000)

    # Discount tier label, e.g. "10% Off"
    discount: str | None = None

    payment_method: str | None = None
    status: str | None = None
    notes: str | None = None
    created_by: str | None = None


class SaleResponse(CamelModel):
    id: int
    sale_id: str
    customer_id: int
    customer_name: str
    product_id: int
    product_name: str
    company_id: int | None
    date: datetime.date
    quantity: int
    unit_price: float
    discount: str
    discount_percent: float
    amount: float
    payment_method: str
    status: str
    notes: str
    created_by: str
    created_at: datetime.datetime
    updated_at: datetime.datetime
