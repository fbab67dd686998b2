# app/core/formatting.py
"""
Display and input helpers shared by the API and the static pages.

format_currency renders money in API responses (see DashboardStats).
format_date, format_time and get_status_badge_class are library helpers
for page code that renders booking tables; the API itself returns raw
ISO dates, times and status values.
"""
import html
import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.config import get_settings

_email_adapter = TypeAdapter(EmailStr)

# Malaysian mobile numbers, e.g. 012-3456789, +60123456789
PHONE_RE = re.compile(r"^(\+?6?01)[0-46-9]-*[0-9]{7,8}$")

CENT = Decimal("0.01")


def format_currency(amount, prefix: str | None = None) -> str:
    """
    Format an amount in Malaysian Ringgit with thousand separators.

    Cents are shown only when non-zero, always with two digits:
        100000    -> "RM 100,000"
        1200.5    -> "RM 1,200.50"
        1200      -> "RM 1,200"
        0 / NaN   -> "RM 0"

    Strings are parsed as numbers; anything unparsable formats as zero.
    The prefix defaults to CURRENCY_PREFIX.
    """
    prefix = prefix or get_settings().CURRENCY_PREFIX
    try:
        num = float(amount)
    except (TypeError, ValueError):
        return f"{prefix} 0"
    if not math.isfinite(num):
        return f"{prefix} 0"

    rounded = Decimal(str(num)).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    rounded = abs(rounded)

    whole = int(rounded)
    cents = int((rounded - whole) * 100)

    text = f"{whole:,}"
    if cents:
        text += f".{cents:02d}"
    return f"{prefix} {sign}{text}"


def _to_date(value: str | date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value.strip()).date()


def format_date(value: str | date | datetime) -> str:
    """'2025-03-07' -> 'March 7, 2025'."""
    d = _to_date(value)
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def format_time(value: str) -> str:
    """'14:05' or '14:05:00' -> '2:05 PM'."""
    hours, minutes = value.split(":")[:2]
    hour = int(hours)
    ampm = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {ampm}"


def get_status_badge_class(status: str | None) -> str:
    """CSS badge class for a booking status; unknown values render as pending."""
    s = (status or "").lower()
    if s in ("approved", "rejected"):
        return s
    return "pending"


def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


def is_valid_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return PHONE_RE.match(re.sub(r"[\s-]", "", phone)) is not None


def escape_html(value) -> str:
    """Escape &, <, >, double and single quotes. Non-strings become ''."""
    if not isinstance(value, str):
        return ""
    return html.escape(value, quote=True)
