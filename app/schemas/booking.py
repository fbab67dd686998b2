# app/schemas/booking.py
import uuid
from datetime import date, datetime, time
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.profile import ProfileSummary
from app.schemas.service import ServiceSummary

BookingStatus = Literal["pending", "approved", "rejected"]
# Targets an admin decision may set; "pending" is only ever the initial state.
DecisionStatus = Literal["approved", "rejected"]


class BookingCreate(SQLModel):
    """
    Payload for a new booking.

    User provides:
      - service_id, booking_date, booking_time
      - participants (coerced to int, must be >= 1)
      - total_price (coerced to float, must be >= 0)
      - notes (optional)

    Backend derives:
      - user_id from the signed-in session
      - status = 'pending'

    Unknown keys (including any client-sent `status` or `user_id`) are
    dropped rather than rejected.
    """

    model_config = ConfigDict(extra="ignore")

    service_id: str
    booking_date: date
    booking_time: time
    participants: int = Field(ge=1)
    total_price: float = Field(ge=0)
    notes: str | None = None

    @field_validator("service_id", mode="before")
    @classmethod
    def service_id_as_str(cls, v) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("service_id cannot be empty")
        return v

    @field_validator("notes")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class BookingRead(SQLModel):
    """
    Booking row with optional embedded service and merged profile.

    `profiles` is filled by a separate lookup; it stays None when the
    owner's profile row is missing or could not be loaded.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: uuid.UUID
    service_id: str | None = None
    booking_date: date | None = None
    booking_time: str | None = None
    participants: int = 1
    total_price: float = 0.0
    notes: str | None = None
    status: BookingStatus = "pending"
    admin_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    services: ServiceSummary | None = None
    profiles: ProfileSummary | None = None

    @field_validator("id", "service_id", "booking_time", mode="before")
    @classmethod
    def as_str(cls, v):
        return None if v is None else str(v)


class BookingStatusUpdate(SQLModel):
    """
    Admin decision on a pending booking.

    `admin_message` is only written when it is non-blank after trimming.
    """

    model_config = ConfigDict(extra="forbid")

    status: DecisionStatus
    admin_message: str | None = None
