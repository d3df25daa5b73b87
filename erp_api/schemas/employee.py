# erp_api/schemas/employee.py

import datetime
from decimal import Decimal

from pydantic import EmailStr, Field, field_validator

from erp_api.schemas.base import CamelModel, check_website


class EmployeeCreate(CamelModel):
    name: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    department: str
    position: str = Field(..., min_length=1)
    salary: Decimal = Field(..., gt=0)
    hire_date: datetime.date
    email: EmailStr
    website: str | None = None
    status: str = "Active"

    @field_validator("website")
    @classmethod
    def validate_website(cls, value):
        return check_website(value)


class EmployeeUpdate(CamelModel):
    name: str | None = Field(None, min_length=1)
    employee_id: str | None = Field(None, min_length=1)
    department: str | None = None
    position: str | None = Field(None, min_length=1)
    salary: Decimal | None = Field(None, gt=0)
    hire_date: datetime.date | None = None
    email: EmailStr | None = None
    website: str | None = None
    status: str | None = None

    @field_validator("website")
    @classmethod
    def validate_website(cls, value):
        return check_website(value)


class EmployeeResponse(CamelModel):
    id: int
    name: str
    employee_id: str
    department: str
    position: str
    salary: float
    hire_date: datetime.date
    email: str
    website: str
    status: str
    created_at: datetime.datetime
    updated_at: datetime.datetime
