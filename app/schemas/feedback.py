from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import ApiModel

FeedbackCategory = Literal["general", "feature", "bug", "improvement"]
FeedbackStatus = Literal["pending", "reviewed", "resolved"]


class FeedbackCreate(ApiModel):
    name: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    feedback: str = Field(min_length=1, max_length=1000)
    rating: int = Field(ge=1, le=5)
    category: FeedbackCategory = "general"
    is_public: bool = True

    @field_validator("name", "feedback", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class FeedbackStatusUpdate(ApiModel):
    status: FeedbackStatus


class FeedbackPublicResponse(ApiModel):
    id: str
    name: str | None = None
    feedback: str
    rating: int
    category: str
    is_public: bool
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FeedbackResponse(FeedbackPublicResponse):
    email: str | None = None
