# erp_api/schemas/company.py

from pydantic import EmailStr, Field, field_validator

from erp_api.schemas.base import CamelModel, check_website


class CompanyCreate(CamelModel):
    name: str = Field(..., min_length=1)
    contact: str | None = None
    country: str | None = None
    phone: str | None = None
    email: EmailStr
    website: str | None = None

    @field_validator("website")
    @classmethod
    def validate_website(cls, value):
        return check_website(value)


class CompanyResponse(CamelModel):
    id: int
    name: str
    contact: str
    country: str
    phone: str
    email: str
    website: str
