import json
import uuid

from app.core.session_store import SessionStore
from app.schemas.session import SessionUser


def make_user(**fields):
    return SessionUser(id=uuid.uuid4(), email="ali@example.com", full_name="Ali", **fields)


def test_memory_store_roundtrip():
    store = SessionStore()
    assert store.get() is None
    assert not store.is_authenticated()

    user = make_user(role="ADMIN")
    store.set(user)

    assert store.get() == user
    assert store.is_authenticated()
    assert store.is_admin()

    store.clear()
    assert store.get() is None
    assert not store.is_admin()


def test_file_store_layout(tmp_path):
    path = tmp_path / "nested" / "session.json"
    user = make_user(phone="0123456789")

    SessionStore(path).set(user)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["user"]["id"] == str(user.id)
    assert raw["user"]["role"] == "user"
    assert SessionStore(path).get() == user


def test_corrupt_file_is_signed_out(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert SessionStore(path).get() is None

    path.write_text(json.dumps({"user": {"email": "no-id@example.com"}}), encoding="utf-8")
    assert SessionStore(path).get() is None


def test_merge_only_for_same_user():
    store = SessionStore()
    user = make_user()
    store.set(user)

    assert store.merge(uuid.uuid4(), {"full_name": "Other"}) is None
    assert store.get().full_name == "Ali"

    merged = store.merge(user.id, {"full_name": "Ali B", "nationality": "MY", "id": str(uuid.uuid4())})

    assert merged.full_name == "Ali B"
    assert merged.id == user.id
    assert store.get().full_name == "Ali B"


def test_role_is_normalized():
    assert make_user(role=" Admin ").role == "admin"
    assert make_user(role=None).role == "user"


def test_store_from_settings(tmp_path, settings):
    assert SessionStore.from_settings(settings).path is None

    settings.SESSION_FILE = str(tmp_path / "session.json")
    store = SessionStore.from_settings(settings)
    store.set(make_user())

    assert (tmp_path / "session.json").exists()
