# app/schemas/auth.py
import uuid

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.session import SessionUser


def _normalize_email(v):
    if not isinstance(v, str):
        return v
    v = v.strip().lower()
    if not v:
        raise ValueError("email cannot be empty")
    return v


class SignUpRequest(SQLModel):
    """
    Sign-up payload.

    Email is trimmed and lower-cased, then checked as an EmailStr, before
    it reaches the auth provider.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(max_length=200)
    phone: str | None = None
    nationality: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty")
        return v

    @field_validator("phone", "nationality")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class SignInRequest(SQLModel):
    """`redirect` is an optional return-to page, checked against the allow-list."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str
    redirect: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class EmailRequest(SQLModel):
    """Payload for password-reset and resend-confirmation."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    redirect_to: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class PasswordUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    password: str = Field(min_length=6)


class SignUpResult(SQLModel):
    """
    Outcome of a sign-up.

    `user` is set only when the provider returned a live session;
    otherwise the address must be confirmed first.
    """

    user_id: uuid.UUID
    email: str | None = None
    confirmation_required: bool = False
    user: SessionUser | None = None
