from datetime import date

import pytest

from app.core.errors import get_safe_error_message
from app.core.formatting import (
    escape_html,
    format_currency,
    format_date,
    format_time,
    get_status_badge_class,
    is_valid_email,
    is_valid_phone,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (100000, "RM 100,000"),
        (1200.5, "RM 1,200.50"),
        (1200, "RM 1,200"),
        (0, "RM 0"),
        ("499.90", "RM 499.90"),
        (2.675, "RM 2.68"),
        (-1500.25, "RM -1,500.25"),
        (float("nan"), "RM 0"),
        (float("inf"), "RM 0"),
        ("abc", "RM 0"),
        (None, "RM 0"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_custom_prefix():
    assert format_currency(10, prefix="MYR") == "MYR 10"


def test_format_date_and_time():
    assert format_date("2025-03-07") == "March 7, 2025"
    assert format_date(date(2024, 12, 25)) == "December 25, 2024"
    assert format_time("14:05") == "2:05 PM"
    assert format_time("00:30:00") == "12:30 AM"
    assert format_time("12:00") == "12:00 PM"


def test_status_badge_class():
    assert get_status_badge_class("Approved") == "approved"
    assert get_status_badge_class("rejected") == "rejected"
    assert get_status_badge_class("cancelled") == "pending"
    assert get_status_badge_class(None) == "pending"


def test_email_and_phone_validation():
    assert is_valid_email("pilot@example.com")
    assert not is_valid_email("pilot@example")
    assert not is_valid_email("")
    assert not is_valid_email("pilot@@example.com")
    assert not is_valid_email("pilot@exa mple.com")
    assert not is_valid_email(None)

    assert is_valid_phone("012-345 6789")
    assert is_valid_phone("+60123456789")
    assert not is_valid_phone("0153456789")
    assert not is_valid_phone("12345")
    assert not is_valid_phone(None)


def test_escape_html():
    assert escape_html("<b>\"Tom\" & 'Jerry'</b>") == "&lt;b&gt;&quot;Tom&quot; &amp; &#x27;Jerry&#x27;&lt;/b&gt;"
    assert escape_html(42) == ""
    assert escape_html(None) == ""


def test_safe_error_messages():
    assert get_safe_error_message("auth") == "Invalid email or password. Please try again."
    assert get_safe_error_message("reset") == "Failed to send reset link. Please try again later."
    assert get_safe_error_message("profile") == "Failed to update. Please try again."
    assert get_safe_error_message("booking") == "Failed to save booking. Please try again."
    assert get_safe_error_message("anything-else") == "An error occurred. Please try again."
    assert get_safe_error_message() == "An error occurred. Please try again."
