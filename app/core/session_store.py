# app/core/session_store.py
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.schemas.session import SessionUser

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


class SessionStore:
    """
    Single-key store for the cached SessionUser.

    Presence of the key means "signed in" from the client's point of view.
    With a `path` the value survives restarts (JSON file holding
    {"user": {...}}); without one it lives only as long as this object,
    which is what the HTTP layer uses per request.

    Reads and writes are synchronous and whole-value: every sign-in or
    sign-out overwrites the entry.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._memory: dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SessionStore":
        """Store at SESSION_FILE, or memory-only when it is unset."""
        settings = settings or get_settings()
        return cls(settings.SESSION_FILE)

    # ---- raw key/value ----

    def _load(self) -> dict[str, Any]:
        if self.path is None:
            return dict(self._memory)
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable session file %s, treating as signed out", self.path)
            return {}
        return raw if isinstance(raw, dict) else {}

    def _save(self, values: dict[str, Any]) -> None:
        if self.path is None:
            self._memory = dict(values)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values), encoding="utf-8")

    # ---- session ----

    def get(self) -> SessionUser | None:
        """Return the cached user, or None if signed out or the entry is corrupt."""
        raw = self._load().get(SESSION_KEY)
        if not raw:
            return None
        try:
            return SessionUser.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding malformed cached session")
            return None

    def set(self, user: SessionUser | None) -> None:
        """Overwrite the cached user; None removes the key."""
        values = self._load()
        if user is None:
            values.pop(SESSION_KEY, None)
        else:
            values[SESSION_KEY] = user.model_dump(mode="json")
        self._save(values)

    def clear(self) -> None:
        self.set(None)

    def merge(self, user_id, updates: dict[str, Any]) -> SessionUser | None:
        """
        Merge partial fields into the cached user if it belongs to `user_id`.

        Returns the updated user, or None when nothing was cached for that id.
        """
        current = self.get()
        if current is None or str(current.id) != str(user_id):
            return None
        known = {k: v for k, v in updates.items() if k in SessionUser.model_fields and k != "id"}
        merged = SessionUser.model_validate({**current.model_dump(), **known})
        self.set(merged)
        return merged

    # ---- UI gating helpers (advisory only) ----

    def is_authenticated(self) -> bool:
        return self.get() is not None

    def is_admin(self) -> bool:
        user = self.get()
        return bool(user and user.is_admin)
