# app/presentation/i18n.py
import logging

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("en", "ar")
FALLBACK_LANGUAGE = "en"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "nav.home": "Home",
        "nav.services": "Services",
        "nav.about": "About",
        "nav.admin": "Admin",
        "nav.bookings": "Bookings",
        "nav.users": "Users",
        "nav.admins": "Admins",
        "nav.slider": "Slider",
        "nav.dashboard": "Dashboard",
        "nav.login": "Login",
        "nav.logout": "Logout",
        "nav.book_now": "Book Now",
        "footer.navigate": "Navigate",
        "footer.contact": "Get in Touch",
        "footer.phone": "Phone",
        "footer.email": "Email",
        "footer.location": "Location",
        "footer.description": (
            "Experience the sky like never before. "
            "Your journey to aviation excellence starts here."
        ),
    },
    "ar": {
        "nav.home": "الرئيسية",
        "nav.services": "الخدمات",
        "nav.about": "من نحن",
        "nav.admin": "الإدارة",
        "nav.bookings": "الحجوزات",
        "nav.users": "المستخدمون",
        "nav.admins": "المشرفون",
        "nav.slider": "العارض",
        "nav.dashboard": "لوحة التحكم",
        "nav.login": "تسجيل الدخول",
        "nav.logout": "تسجيل الخروج",
        "nav.book_now": "احجز الآن",
        "footer.navigate": "تصفح",
        "footer.contact": "تواصل معنا",
        "footer.phone": "الهاتف",
        "footer.email": "البريد الإلكتروني",
        "footer.location": "الموقع",
    },
}


class Translator:
    """
    Key-based string lookup for the current language.

    Missing keys fall back to English, then to the key itself.
    """

    def __init__(self, language: str = FALLBACK_LANGUAGE):
        self.language = language if language in SUPPORTED_LANGUAGES else FALLBACK_LANGUAGE

    def t(self, key: str) -> str:
        table = TRANSLATIONS.get(self.language, {})
        if key in table:
            return table[key]
        return TRANSLATIONS[FALLBACK_LANGUAGE].get(key, key)

    def switch_language(self, language: str) -> bool:
        """Change language; unsupported codes are ignored. Returns True on change."""
        if language not in SUPPORTED_LANGUAGES:
            logger.warning("Unsupported language %r, keeping %s", language, self.language)
            return False
        changed = language != self.language
        self.language = language
        return changed

    @property
    def is_rtl(self) -> bool:
        return self.language == "ar"

    @property
    def toggle_label(self) -> str:
        """Text of the language switch button: the language you'd switch to."""
        return "EN" if self.language == "ar" else "AR"
