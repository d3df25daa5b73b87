# erp_api/schemas/customer.py

from pydantic import EmailStr, Field

from erp_api.schemas.base import CamelModel


class CustomerCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str | None = None
    address: str | None = None
    company_id: int | None = None


class CustomerUpdate(CamelModel):
    name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    company_id: int | None = None


class CustomerResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    address: str
    company_id: int | None
    company_name: str
