import uuid

from app.presentation.i18n import Translator
from app.presentation.navbar import (
    admin_nav_items,
    regular_nav_items,
    render_footer,
    render_navbar,
)
from app.schemas.session import SessionUser


def hrefs(items):
    return [i.href for i in items]


def test_signed_out_shows_login():
    items = regular_nav_items(None, "index.html", Translator())

    assert hrefs(items) == ["index.html", "services.html", "about.html", "login.html"]
    assert [i.href for i in items if i.active] == ["index.html"]


def test_regular_user_shows_dashboard():
    user = SessionUser(id=uuid.uuid4(), role="user")
    items = regular_nav_items(user, "dashboard.html", Translator())

    assert "dashboard.html" in hrefs(items)
    assert "login.html" not in hrefs(items)
    assert [i.href for i in items if i.active] == ["dashboard.html"]


def test_admin_shows_admin_pages():
    admin = SessionUser(id=uuid.uuid4(), role="Admin")
    items = regular_nav_items(admin, "services.html", Translator())

    assert "admin/index.html" in hrefs(items)
    assert "dashboard.html" not in hrefs(items)
    # substring matching highlights both services links
    assert [i.href for i in items if i.active] == ["services.html", "admin/services.html"]


def test_default_active_is_home():
    items = regular_nav_items(None, "", Translator())
    assert [i.href for i in items if i.active] == ["index.html"]


def test_admin_nav_items():
    items = admin_nav_items("bookings.html", Translator())

    assert hrefs(items)[0] == "../index.html"
    assert [i.href for i in items if i.active] == ["bookings.html"]


def test_render_navbar_signed_in_arabic():
    t = Translator("ar")
    html = render_navbar(regular_nav_items(None, "index.html", t), t, signed_in=True)

    assert 'dir="rtl"' in html
    assert 'id="navLogout"' in html
    assert "الرئيسية" in html
    assert '<span class="lang-text">EN</span>' in html
    assert '<a href="index.html" class="active">' in html


def test_render_navbar_signed_out_has_no_logout():
    t = Translator()
    html = render_navbar(regular_nav_items(None, "index.html", t), t)

    assert "navLogout" not in html
    assert 'dir="rtl"' not in html
    assert '<span class="lang-text">AR</span>' in html


def test_footer_falls_back_to_english():
    html = render_footer(Translator("ar"))

    assert "تواصل معنا" in html
    # no Arabic description, English one is used
    assert "Experience the sky like never before." in html
    assert 'href="tel:+601121082839"' in html


def test_translator_switching():
    t = Translator("fr")
    assert t.language == "en"

    assert t.switch_language("ar") is True
    assert t.is_rtl
    assert t.switch_language("ar") is False
    assert t.switch_language("de") is False
    assert t.language == "ar"
    assert t.t("no.such.key") == "no.such.key"
