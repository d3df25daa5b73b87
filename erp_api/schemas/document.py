# erp_api/schemas/document.py
# Shared shape of invoices and quotes: a header plus an ordered item list.

import datetime
from decimal import Decimal
from typing import List

from pydantic import Field

from erp_api.schemas.base import CamelModel


class DocumentItemIn(CamelModel):
    item: str = Field(..., min_length=1)
    description: str | None = None
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)


class DocumentItemResponse(CamelModel):
    id: int
    item: str
    description: str
    quantity: float
    price: float
    total: float


class DocumentCreate(CamelModel):
    number: str = Field(..., min_length=1)
    customer_id: int
    company_id: int | None = None
    date: datetime.date
    expire_date: datetime.date
    year: int | None = None
    currency: str | None = None
    status: str | None = None
    paid: Decimal = Field(Decimal("0"), ge=0)
    note: str | None = None
    tax: Decimal = Field(Decimal("0"), ge=0)
    created_by: str | None = None
    items: List[DocumentItemIn] = Field(..., min_length=1)


class DocumentResponse(CamelModel):
    id: int
    number: str
    customer_id: int
    customer_name: str
    company_id: int | None
    date: datetime.date
    expire_date: datetime.date
    year: int | None
    currency: str
    status: str
    paid: float
    note: str
    tax: float
    created_by: str
    created_at: datetime.datetime
    updated_at: datetime.datetime
    items: List[DocumentItemResponse]
    item_count: int
    total: float
