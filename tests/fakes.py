import itertools
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from supabase import AuthApiError, PostgrestAPIError

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def missing_column_error(table, column):
    return PostgrestAPIError(
        {
            "message": f"Could not find the '{column}' column of '{table}' in the schema cache",
            "code": "PGRST204",
            "hint": None,
            "details": None,
        }
    )


class FakeResponse:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest fluent builder for the repositories."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.action = None
        self.columns = "*"
        self.values = None
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.single_mode = None
        self.count_mode = None
        self.head = False

    # ---- builders ----

    def select(self, *columns, count=None, head=None):
        self.action = "select"
        self.columns = ", ".join(columns) if columns else "*"
        self.count_mode = count
        self.head = bool(head)
        return self

    def insert(self, values):
        self.action, self.values = "insert", values
        return self

    def upsert(self, values, on_conflict=None):
        self.action, self.values = "upsert", values
        return self

    def update(self, values):
        self.action, self.values = "update", values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    # ---- execution ----

    def _matches(self, row):
        for op, column, value in self.filters:
            if op == "eq" and row.get(column) != value:
                return False
            if op == "in" and row.get(column) not in value:
                return False
        return True

    def _check_columns(self, values):
        allowed = self.client.columns.get(self.table)
        if allowed is None:
            return
        for key in values:
            if key not in allowed:
                raise missing_column_error(self.table, key)

    def _project(self, row):
        columns = self.columns.replace(" ", "")
        embed = None
        if "services(" in columns:
            head, _, rest = columns.partition("services(")
            embed = rest.rstrip(")").split(",")
            columns = head.rstrip(",")
        if columns in ("*", ""):
            out = dict(row)
        else:
            out = {c: row.get(c) for c in columns.split(",")}
        if embed is not None:
            service = next(
                (s for s in self.client.tables["services"] if s["id"] == row.get("service_id")),
                None,
            )
            out["services"] = {c: service.get(c) for c in embed} if service else None
        return out

    def execute(self):
        self.client.calls.append(
            SimpleNamespace(table=self.table, action=self.action, columns=self.columns, filters=list(self.filters))
        )
        failure = self.client.failures.get((self.table, self.action))
        if failure is not None:
            raise failure

        rows = self.client.tables.setdefault(self.table, [])

        if self.action == "select":
            found = [r for r in rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                found.sort(key=lambda r: r.get(column) or "", reverse=desc)
            if self.limit_n is not None:
                found = found[: self.limit_n]
            count = len(found) if self.count_mode else None
            if self.head:
                return FakeResponse(data=[], count=count)
            data = [self._project(r) for r in found]
            if self.single_mode:
                return FakeResponse(data=data[0] if data else None, count=count)
            return FakeResponse(data=data, count=count)

        if self.action in ("insert", "upsert"):
            self._check_columns(self.values)
            row = dict(self.values)
            existing = next((r for r in rows if "id" in row and r.get("id") == row["id"]), None)
            if existing is not None and self.action == "upsert":
                existing.update(row)
                return FakeResponse(data=[dict(existing)])
            if existing is not None:
                raise PostgrestAPIError({"message": "duplicate key value", "code": "23505", "hint": None, "details": None})
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", self.client.next_timestamp())
            rows.append(row)
            return FakeResponse(data=[dict(row)])

        if self.action == "update":
            self._check_columns(self.values)
            changed = []
            for r in rows:
                if self._matches(r):
                    r.update(self.values)
                    changed.append(dict(r))
            return FakeResponse(data=changed)

        if self.action == "delete":
            kept = [r for r in rows if not self._matches(r)]
            removed = [r for r in rows if self._matches(r)]
            self.client.tables[self.table] = kept
            return FakeResponse(data=removed)

        raise AssertionError(f"unsupported action {self.action}")


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.current = None
        self.confirm_email = False
        self.sent = []
        self.error = None
        self.revoked = []
        self.admin = SimpleNamespace(sign_out=self._admin_sign_out)

    def add_user(self, email, password="secret123", metadata=None, confirmed=True, user_id=None):
        user = SimpleNamespace(
            id=user_id or str(uuid.uuid4()),
            email=email,
            user_metadata=metadata or {},
        )
        self.users[email] = {"user": user, "password": password, "confirmed": confirmed}
        return user

    def _raise_if_set(self):
        if self.error is not None:
            raise self.error

    def sign_up(self, credentials):
        self._raise_if_set()
        email = credentials["email"]
        if email in self.users:
            raise AuthApiError("User already registered", 422, "user_already_exists")
        metadata = credentials.get("options", {}).get("data", {})
        user = self.add_user(email, credentials["password"], metadata, confirmed=not self.confirm_email)
        if self.confirm_email:
            return SimpleNamespace(user=user, session=None)
        self.current = user
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=f"token-{user.id}"))

    def sign_in_with_password(self, credentials):
        self._raise_if_set()
        entry = self.users.get(credentials["email"])
        if entry is None or entry["password"] != credentials["password"]:
            raise AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        if not entry["confirmed"]:
            raise AuthApiError("Email not confirmed", 400, "email_not_confirmed")
        self.current = entry["user"]
        return SimpleNamespace(user=entry["user"], session=SimpleNamespace(access_token=f"token-{entry['user'].id}"))

    def sign_out(self):
        self._raise_if_set()
        self.current = None

    def _admin_sign_out(self, jwt, scope="global"):
        self._raise_if_set()
        self.revoked.append(jwt)

    def get_user(self, jwt=None):
        self._raise_if_set()
        if self.current is None:
            return None
        return SimpleNamespace(user=self.current)

    def get_session(self):
        if self.current is None:
            return None
        return SimpleNamespace(access_token=f"token-{self.current.id}")

    def reset_password_for_email(self, email, options=None):
        self._raise_if_set()
        self.sent.append(("reset", email, options))

    def update_user(self, attributes):
        self._raise_if_set()
        self.sent.append(("update_user", attributes))
        return SimpleNamespace(user=self.current)

    def resend(self, credentials):
        self._raise_if_set()
        self.sent.append(("resend", credentials))

    def sign_in_with_oauth(self, credentials):
        self._raise_if_set()
        self.sent.append(("oauth", credentials))
        return SimpleNamespace(provider=credentials["provider"], url="https://accounts.google.com/o/oauth2/auth?x=1")


class FakeClient:
    """In-memory stand-in for supabase.Client."""

    def __init__(self):
        self.tables = {"profiles": [], "bookings": [], "services": []}
        self.columns = {}
        self.failures = {}
        self.calls = []
        self.auth = FakeAuth()
        self._clock = itertools.count()

    def table(self, name):
        return FakeQuery(self, name)

    def next_timestamp(self):
        return (BASE_TIME + timedelta(minutes=next(self._clock))).isoformat()

    def calls_to(self, table, action=None):
        return [c for c in self.calls if c.table == table and (action is None or c.action == action)]


def add_profile(client, user_id, **fields):
    row = {"id": str(user_id), "full_name": "Test User", "email": None, "phone": None, "role": "user"}
    row.update(fields)
    client.tables["profiles"].append(row)
    return row


def add_service(client, service_id="svc-1", **fields):
    row = {
        "id": service_id,
        "name": "Two Days Pilot",
        "description": "Fly a real aircraft",
        "price": 500,
        "duration": "2 hours",
        "image_url": None,
        "active": True,
        "created_at": client.next_timestamp(),
    }
    row.update(fields)
    client.tables["services"].append(row)
    return row


def add_booking(client, user_id, service_id="svc-1", **fields):
    row = {
        "id": str(uuid.uuid4()),
        "user_id": str(user_id),
        "service_id": service_id,
        "booking_date": "2025-03-07",
        "booking_time": "09:00:00",
        "participants": 1,
        "total_price": 500,
        "notes": None,
        "status": "pending",
        "admin_message": None,
        "created_at": client.next_timestamp(),
        "updated_at": None,
    }
    row.update(fields)
    client.tables["bookings"].append(row)
    return row
