# app/presentation/navbar.py
from dataclasses import dataclass

from app.core.formatting import escape_html
from app.presentation.i18n import Translator
from app.schemas.session import SessionUser

BRAND = "Two Days Pilot"
CONTACT_PHONE = "+60 11 2108 2839"
CONTACT_EMAIL = "m.h.jibreel@gmail.com"
CONTACT_LOCATION = "Cyberjaya, Selangor"


@dataclass
class NavItem:
    href: str
    label: str
    active: bool = False


def _is_active(href: str, active_page: str) -> bool:
    if active_page == "index.html":
        return href == "index.html"
    if active_page:
        return active_page in href
    return href == "index.html"


def regular_nav_items(
    user: SessionUser | None,
    active_page: str,
    translator: Translator,
) -> list[NavItem]:
    """
    Links for the public site.

    Public pages, then admin pages for an admin session, the dashboard
    for a regular session, or Login when signed out. Role gating here is
    cosmetic; the admin pages check again server-side.
    """
    t = translator.t
    pages = [
        ("index.html", t("nav.home")),
        ("services.html", t("nav.services")),
        ("about.html", t("nav.about")),
    ]
    if user is not None and user.is_admin:
        pages += [
            ("admin/index.html", t("nav.admin")),
            ("admin/bookings.html", t("nav.bookings")),
            ("admin/services.html", t("nav.services")),
            ("admin/users.html", t("nav.users")),
            ("admin/admins.html", t("nav.admins")),
        ]
    elif user is not None:
        pages.append(("dashboard.html", t("nav.dashboard")))
    else:
        pages.append(("login.html", t("nav.login")))

    return [NavItem(href, label, _is_active(href, active_page)) for href, label in pages]


def admin_nav_items(active_page: str, translator: Translator) -> list[NavItem]:
    """Links for pages under admin/ (relative to that folder)."""
    t = translator.t
    pages = [
        ("../index.html", t("nav.home")),
        ("index.html", t("nav.admin")),
        ("bookings.html", t("nav.bookings")),
        ("services.html", t("nav.services")),
        ("slider.html", t("nav.slider")),
        ("users.html", t("nav.users")),
        ("admins.html", t("nav.admins")),
    ]
    return [
        NavItem(href, label, bool(active_page) and active_page in href)
        for href, label in pages
    ]


def render_navbar(
    items: list[NavItem],
    translator: Translator,
    signed_in: bool = False,
    home_href: str = "index.html",
) -> str:
    links = []
    for item in items:
        active = ' class="active"' if item.active else ""
        links.append(
            f'<li><a href="{escape_html(item.href)}"{active}>{escape_html(item.label)}</a></li>'
        )
    if signed_in:
        links.append(f'<li><a href="#" id="navLogout">{escape_html(translator.t("nav.logout"))}</a></li>')

    direction = ' dir="rtl"' if translator.is_rtl else ""
    return (
        f'<nav class="navbar"{direction}>'
        f'<a class="brand" href="{escape_html(home_href)}">{escape_html(BRAND)}</a>'
        f'<ul class="nav-links">{"".join(links)}</ul>'
        f'<button id="langToggle"><span class="lang-text">{translator.toggle_label}</span></button>'
        "</nav>"
    )


def render_footer(translator: Translator) -> str:
    t = translator.t
    nav = "".join(
        f'<a href="{href}" class="footer-nav-link">{escape_html(label)}</a>'
        for href, label in (
            ("index.html", t("nav.home")),
            ("services.html", t("nav.services")),
            ("about.html", t("nav.about")),
            ("booking.html", t("nav.book_now")),
        )
    )
    phone_href = "tel:" + CONTACT_PHONE.replace(" ", "")
    return (
        '<footer class="footer-modern">'
        f'<h1 class="footer-title">{escape_html(BRAND)}</h1>'
        f'<p class="footer-description">{escape_html(t("footer.description"))}</p>'
        f'<span class="footer-label">{escape_html(t("footer.navigate"))}</span>'
        f'<nav class="footer-nav">{nav}</nav>'
        f'<span class="footer-label">{escape_html(t("footer.contact"))}</span>'
        f'<a href="{phone_href}" class="footer-contact-link">'
        f'<span class="contact-label">{escape_html(t("footer.phone"))}</span>'
        f'<span class="contact-value">{escape_html(CONTACT_PHONE)}</span></a>'
        f'<a href="mailto:{CONTACT_EMAIL}" class="footer-contact-link">'
        f'<span class="contact-label">{escape_html(t("footer.email"))}</span>'
        f'<span class="contact-value">{escape_html(CONTACT_EMAIL)}</span></a>'
        '<div class="footer-contact-link">'
        f'<span class="contact-label">{escape_html(t("footer.location"))}</span>'
        f'<span class="contact-value">{escape_html(CONTACT_LOCATION)}</span></div>'
        "</footer>"
    )
