# erp_api/schemas/payment.py

import datetime
from decimal import Decimal

from pydantic import Field

from erp_api.schemas.base import CamelModel


class PaymentCreate(CamelModel):
    receipt_number: str = Field(..., min_length=1)
    customer_id: int
    company_id: int | None = None
    amount: Decimal = Field(..., gt=0)
    date: datetime.date | None = None
    number: str | None = None
    transaction_date: datetime.date | None = None
    payment_mode: str = Field(..., min_length=1)
    payment_transaction: str | None = None
    status: str | None = None
    notes: str | None = None
    created_by: str | None = None


class PaymentResponse(CamelModel):
    id: int
    receipt_number: str
    customer_id: int
    client: str
    company_id: int | None
    amount: float
    date: datetime.date
    number: str
    transaction_date: datetime.date | None
    payment_mode: str
    payment_transaction: str
    status: str
    notes: str
    created_by: str
    created_at: datetime.datetime
    updated_at: datetime.datetime
