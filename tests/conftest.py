import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AUTH_MODE", "supabase")

import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token, hash_password
from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.routes import get_auth_client_factory


class FakeAuthError(Exception):
    pass


class _Result:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Enough of the PostgREST builder for the services under test."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.count = None
        self.embed = None
        self.filters = []
        self.order_by = None
        self.bounds = None
        self.max_rows = None

    def select(self, columns="*", count=None):
        self.action = "select"
        self.count = count
        if "course:courses(*)" in columns:
            self.embed = ("course", "courses", "course_id")
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def or_(self, expression):
        clauses = []
        for part in expression.split(","):
            column, op, pattern = part.split(".", 2)
            assert op == "ilike"
            clauses.append((column, pattern.strip("%").lower()))
        self.filters.append(
            lambda row: any(term in (row.get(col) or "").lower() for col, term in clauses)
        )
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def range(self, start, end):
        self.bounds = (start, end)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matching(self):
        return [row for row in self.db.tables.setdefault(self.table, []) if all(f(row) for f in self.filters)]

    def execute(self):
        if self.db.fail_tables and self.table in self.db.fail_tables:
            raise RuntimeError(f"database unavailable: {self.table}")
        if self.action == "insert":
            return _Result([dict(self.db.insert(self.table, self.payload))])
        if self.action == "update":
            rows = self._matching()
            for row in rows:
                row.update(self.payload)
            return _Result([dict(r) for r in rows])
        if self.action == "delete":
            rows = self._matching()
            self.db.tables[self.table] = [r for r in self.db.tables[self.table] if r not in rows]
            return _Result([dict(r) for r in rows])

        rows = self._matching()
        total = len(rows)
        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: r.get(column) or "", reverse=desc)
        if self.bounds:
            rows = rows[self.bounds[0]:self.bounds[1] + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        rows = [dict(r) for r in rows]
        if self.embed:
            alias, other, key = self.embed
            for row in rows:
                match = [r for r in self.db.tables.get(other, []) if r["id"] == row.get(key)]
                row[alias] = dict(match[0]) if match else None
        return _Result(rows, total if self.count else None)


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth

    def create_user(self, attributes):
        email = attributes["email"]
        if email in self.auth.accounts:
            raise FakeAuthError("A user with this email address has already been registered")
        user_id = str(uuid.uuid4())
        self.auth.accounts[email] = {"id": user_id, "password": attributes["password"]}
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))

    def delete_user(self, user_id):
        self.auth.accounts = {e: a for e, a in self.auth.accounts.items() if a["id"] != user_id}


class FakeAuth:
    def __init__(self):
        self.accounts = {}
        self.admin = FakeAuthAdmin(self)

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if not account or account["password"] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        return SimpleNamespace(
            user=SimpleNamespace(id=account["id"], email=credentials["email"]),
            session=SimpleNamespace(access_token="supabase-session-token"),
        )


class FakeSupabase:
    def __init__(self):
        self.tables = {"users": [], "courses": [], "enrollments": []}
        self.auth = FakeAuth()
        self.fail_tables = set()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def table(self, name):
        return FakeQuery(self, name)

    def insert(self, table, payload):
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        if table == "enrollments":
            row.setdefault("enrolled_at", self._tick())
        else:
            now = self._tick()
            row.setdefault("created_at", now)
            row.setdefault("updated_at", now)
        if table == "courses":
            row.setdefault("price", 0)
            row.setdefault("is_published", False)
        if table == "users":
            row.setdefault("role", "student")
        self.tables.setdefault(table, []).append(row)
        return row


@pytest.fixture
def fake_supabase():
    fake = FakeSupabase()
    app.dependency_overrides[get_supabase] = lambda: fake
    app.dependency_overrides[get_auth_client_factory] = lambda: (lambda: fake)
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(fake_supabase):
    return TestClient(app)


@pytest.fixture
def make_user(fake_supabase):
    def _make_user(role="student", email=None, name="Test User", password=None):
        email = email or f"{role}-{uuid.uuid4().hex[:8]}@example.com"
        row = {"name": name, "email": email, "role": role}
        if password is not None:
            row["password_hash"] = hash_password(password)
        return fake_supabase.insert("users", row)
    return _make_user


@pytest.fixture
def make_course(fake_supabase):
    def _make_course(instructor_id, **overrides):
        course = {
            "title": "Python Basics",
            "description": "Learn Python from scratch",
            "category": "programming",
            "level": "beginner",
            "price": 0,
            "duration": 120,
            "instructor_id": instructor_id,
        }
        course.update(overrides)
        return fake_supabase.insert("courses", course)
    return _make_course


@pytest.fixture
def auth_headers():
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _auth_headers
