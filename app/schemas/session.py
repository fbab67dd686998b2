# app/schemas/session.py
import uuid

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel


class SessionUser(SQLModel):
    """
    Locally cached projection of the signed-in identity.

    Derived from auth identity + profile at sign-in time. It is a cache for
    UI gating only; access decisions must re-read the profile.
    """

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    role: str = "user"

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: str | None) -> str:
        return (v or "user").strip().lower() or "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
