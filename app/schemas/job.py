from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator

from app.schemas.auth import UserSummary
from app.schemas.common import ApiModel

JobStatus = Literal["applied", "interview", "offer", "rejected", "accepted"]


def _parse_applied_date(v):
    # Plain dates ("2024-01-01") mean midnight of that day.
    if isinstance(v, str) and len(v) == 10:
        try:
            d = date.fromisoformat(v)
        except ValueError:
            return v
        return datetime(d.year, d.month, d.day)
    return v


class JobCreate(ApiModel):
    company: str = Field(min_length=1, max_length=100)
    position: str = Field(min_length=1, max_length=100)
    status: JobStatus = "applied"
    applied_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=500)
    salary: float | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=100)
    job_url: str | None = None

    @field_validator("company", "position", "location", "job_url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("applied_date", mode="before")
    @classmethod
    def applied_date_from_date(cls, v):
        return _parse_applied_date(v)


class JobUpdate(ApiModel):
    """Partial update; only fields present in the body are written."""

    company: str | None = Field(default=None, min_length=1, max_length=100)
    position: str | None = Field(default=None, min_length=1, max_length=100)
    status: JobStatus | None = None
    applied_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=500)
    salary: float | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=100)
    job_url: str | None = None

    @field_validator("company", "position", "location", "job_url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("applied_date", mode="before")
    @classmethod
    def applied_date_from_date(cls, v):
        return _parse_applied_date(v)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("company", "position", "status", "applied_date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class JobResponse(ApiModel):
    id: str
    company: str
    position: str
    status: str
    applied_date: datetime | None = None
    notes: str | None = None
    salary: float | None = None
    location: str | None = None
    job_url: str | None = None
    user_id: str
    user: UserSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
