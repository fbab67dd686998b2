# app/schemas/profile.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProfileRead(SQLModel):
    """
    Row of the `profiles` table.

    One-to-one with the auth identity (same id). Created lazily on
    sign-up/sign-in when missing.
    """

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    nationality: str | None = None
    role: str | None = "user"
    updated_at: datetime | None = None


class ProfileSummary(SQLModel):
    """Subset of the profile merged into booking rows."""

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None


class ProfileUpdate(SQLModel):
    """
    Partial profile update.

    `role` and `email` are intentionally absent: role changes belong to
    the store's admin tooling, email follows the auth identity.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=30)
    nationality: str | None = Field(default=None, max_length=100)

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty")
        return v
