from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import ApiModel


class UserRegister(ApiModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["applicant", "admin"] = "applicant"

    @field_validator("name")
    @classmethod
    def name_trimmed(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be between 2 and 50 characters")
        return v

    @field_validator("email")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return v.lower()


class UserLogin(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return v.lower()


class UserSummary(ApiModel):
    id: str
    name: str
    email: str


class UserResponse(ApiModel):
    id: str
    name: str
    email: str
    role: str
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
