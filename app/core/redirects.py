# app/core/redirects.py

# Pages a user may be sent back to after signing in. Relative, same-origin only.
ALLOWED_REDIRECT_PATHS: tuple[str, ...] = (
    "dashboard.html",
    "profile.html",
    "booking.html",
    "index.html",
    "admin/index.html",
    "admin/bookings.html",
    "admin/services.html",
    "admin/users.html",
    "admin/admins.html",
    "admin/slider.html",
)


def get_safe_redirect_url(redirect_param) -> str | None:
    """
    Validate a user-supplied "return to" value.

    Rejects anything with a scheme separator, '//', '..' or a leading '/',
    then matches the path (query string ignored) against
    ALLOWED_REDIRECT_PATHS. Returns the allow-listed path or None.

        get_safe_redirect_url("https://evil.com")      -> None
        get_safe_redirect_url("../admin/index.html")   -> None
        get_safe_redirect_url("dashboard.html?x=1")    -> "dashboard.html"
    """
    if not redirect_param or not isinstance(redirect_param, str):
        return None

    s = redirect_param.strip().lower()
    if "//" in s or ":" in s or ".." in s or s.startswith("/"):
        return None

    base = s.split("?", 1)[0]
    if base in ALLOWED_REDIRECT_PATHS:
        return base
    return None
