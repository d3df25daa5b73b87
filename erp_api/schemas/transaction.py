# erp_api/schemas/transaction.py

import datetime
from decimal import Decimal

from pydantic import Field

from erp_api.schemas.base import CamelModel


class TransactionCreate(CamelModel):
    type: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    bank: str = Field(..., min_length=1)
    check_number: str | None = None
    status: str | None = None
    category: str = Field(..., min_length=1)
    date: datetime.date
    received_payment: Decimal = Field(Decimal("0"), ge=0)
    description: str | None = None
    created_by: str | None = None
    company_id: int | None = None


class TransactionResponse(CamelModel):
    id: int
    type: str
    amount: float
    bank: str
    check_number: str
    status: str
    category: str
    date: datetime.date
    received_payment: float
    description: str
    created_by: str
    company_id: int | None
    created_at: datetime.datetime
    updated_at: datetime.datetime
