import pytest

from app.core.redirects import ALLOWED_REDIRECT_PATHS, get_safe_redirect_url


@pytest.mark.parametrize("path", ALLOWED_REDIRECT_PATHS)
def test_allowed_paths_pass(path):
    assert get_safe_redirect_url(path) == path


@pytest.mark.parametrize(
    "value, expected",
    [
        ("dashboard.html?tab=bookings", "dashboard.html"),
        ("  Profile.HTML ", "profile.html"),
        ("https://evil.com", None),
        ("//evil.com/dashboard.html", None),
        ("javascript:alert(1)", None),
        ("../admin/index.html", None),
        ("/dashboard.html", None),
        ("login.html", None),
        ("", None),
        (None, None),
        (123, None),
    ],
)
def test_redirect_validation(value, expected):
    assert get_safe_redirect_url(value) == expected
