# app/schemas/service.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ServiceRead(SQLModel):
    """Catalog item as stored in the `services` table."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str | None = None
    price: float = 0.0
    duration: str | None = None
    image_url: str | None = None
    active: bool = True
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_str(cls, v) -> str:
        return str(v)


class ServiceSummary(SQLModel):
    """Embedded `services(...)` columns on booking rows."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None
    description: str | None = None
    price: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_str(cls, v) -> str:
        return str(v)


class ServiceCreate(SQLModel):
    """
    Payload for creating a catalog item (admin only).

    Price strings such as "499.90" are coerced to float.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    description: str | None = None
    price: float = Field(ge=0)
    duration: str | None = None
    image_url: str | None = None
    active: bool = True

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("image_url")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class ServiceUpdate(SQLModel):
    """Partial update; only fields that are set are sent."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration: str | None = None
    image_url: str | None = None
    active: bool | None = None


class ServiceActiveUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    active: bool
