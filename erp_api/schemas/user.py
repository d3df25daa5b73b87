# erp_api/schemas/user.py

from datetime import datetime

from pydantic import EmailStr, Field

from erp_api.schemas.base import CamelModel


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    role: str
    status: str = "Active"
    current_challenge: str | None = None
    password: str = Field(..., min_length=8, max_length=128)


class UserUpdate(CamelModel):
    name: str | None = Field(None, min_length=1)
    username: str | None = Field(None, min_length=3, max_length=50)
    email: EmailStr | None = None
    role: str | None = None
    status: str | None = None
    current_challenge: str | None = None
    password: str | None = Field(None, min_length=8, max_length=128)


class UserResponse(CamelModel):
    id: int
    user_id: str
    name: str
    username: str
    email: str
    role: str
    status: str
    created_at: datetime
    updated_at: datetime
