# app/routers/layout.py
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from app.core.auth import get_optional_user
from app.core.config import get_settings
from app.presentation.i18n import Translator
from app.presentation.navbar import (
    admin_nav_items,
    regular_nav_items,
    render_footer,
    render_navbar,
)
from app.schemas.session import SessionUser

router = APIRouter(prefix="/layout", tags=["Layout"])


def _translator(lang: str | None) -> Translator:
    return Translator(lang or get_settings().DEFAULT_LANGUAGE)


@router.get("/navbar", response_class=HTMLResponse)
def navbar(
    page: str = "",
    lang: str | None = None,
    current_user: SessionUser | None = Depends(get_optional_user),
):
    """
    Navbar HTML for a public page, adjusted to the caller's role.

    An unverifiable token renders the guest navbar rather than an error.
    """
    translator = _translator(lang)
    items = regular_nav_items(current_user, page, translator)
    return render_navbar(items, translator, signed_in=current_user is not None)


@router.get("/admin-navbar", response_class=HTMLResponse)
def admin_navbar(page: str = "", lang: str | None = None):
    translator = _translator(lang)
    return render_navbar(
        admin_nav_items(page, translator),
        translator,
        signed_in=True,
        home_href="../index.html",
    )


@router.get("/footer", response_class=HTMLResponse)
def footer(lang: str | None = None):
    return render_footer(_translator(lang))
