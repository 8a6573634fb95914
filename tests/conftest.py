"""
Pytest configuration and shared fixtures for the Kaskad API tests.

Supabase is replaced by FakeSupabase, an in-memory stand-in for the subset of
the postgrest query builder the services use. Supabase Auth is replaced by
FakeAuthService, which accepts "Bearer <user_id>" tokens.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from kaskad.core.dependencies import get_auth_service
from kaskad.database.supabase_client import get_supabase
from kaskad.main import app, limiter


KASKAD_ID = "123e4567-e89b-12d3-a456-426614174000"
RIVAL_ID = "223e4567-e89b-12d3-a456-426614174001"
CLOSED_ID = "323e4567-e89b-12d3-a456-426614174002"

TABLE_DEFAULTS = {
    "studios": {
        "description": None, "address": None, "phone": None, "email": None,
        "website": None, "subscription_plan": "free", "active": True,
    },
    "profiles": {
        "studio_id": None, "phone": None, "avatar_url": None,
        "role": "child", "is_superadmin": False,
    },
    "gallery_items": {
        "studio_id": None, "description": None, "category": None, "tags": None,
        "is_public": False, "likes_count": 0, "created_by": None,
    },
}

CHECKS = {
    ("profiles", "role"): {"superadmin", "admin", "teacher", "parent", "child"},
    ("gallery_items", "media_type"): {"photo", "video"},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.offset_n = 0

    # operations
    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, values):
        self.op = "update"
        self.payload = values
        return self

    def delete(self):
        self.op = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: set(values) <= set(row.get(column) or []))
        return self

    def or_(self, expression):
        clauses = []
        for clause in expression.split(","):
            column, op, raw = clause.split(".", 2)
            assert op == "eq", f"unsupported operator {op}"
            value = {"true": True, "false": False}.get(raw, raw)
            clauses.append((column, value))
        self.filters.append(lambda row: any(row.get(c) == v for c, v in clauses))
        return self

    # modifiers
    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def offset(self, n):
        self.offset_n = n
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def _project(self, row):
        if self.columns.strip() == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self.columns.split(",")}

    def _check(self, row):
        for (table, column), allowed in CHECKS.items():
            if table == self.table and column in row and row[column] not in allowed:
                raise APIError({
                    "code": "23514",
                    "message": f'new row for relation "{table}" violates check constraint "{table}_{column}_check"',
                })

    def execute(self):
        error = self.db.failures.get((self.table, self.op))
        if error is not None:
            raise error
        rows = self.db.rows(self.table)
        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for values in payload:
                row = {**TABLE_DEFAULTS.get(self.table, {}), **values}
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", _now())
                row.setdefault("updated_at", row["created_at"])
                self._check(row)
                if any(r["id"] == row["id"] for r in rows):
                    raise APIError({"code": "23505", "message": "duplicate key value violates unique constraint"})
                rows.append(row)
                created.append(dict(row))
            return FakeResult(created)
        if self.op == "update":
            self._check(self.payload)
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResult(updated)
        if self.op == "delete":
            deleted = [r for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return FakeResult([dict(r) for r in deleted])

        selected = [r for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        selected = selected[self.offset_n:]
        if self.limit_n is not None:
            selected = selected[:self.limit_n]
        return FakeResult([self._project(r) for r in selected])


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "studios": [],
            "profiles": [],
            "gallery_items": [],
        }
        self.failures: Dict[Tuple[str, str], APIError] = {}

    def rows(self, table: str) -> List[Dict[str, Any]]:
        if table == "profiles_with_studio":
            studios = {s["id"]: s for s in self.tables["studios"]}
            joined = []
            for profile in self.tables["profiles"]:
                studio = studios.get(profile.get("studio_id")) or {}
                joined.append({
                    **profile,
                    "studio_name": studio.get("name"),
                    "studio_description": studio.get("description"),
                })
            return joined
        return self.tables[table]

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add(self, table: str, **values) -> Dict[str, Any]:
        return self.table(table).insert(values).execute().data[0]

    def find(self, table: str, row_id: str):
        return next((dict(r) for r in self.tables[table] if r["id"] == row_id), None)

    def fail(self, table: str, op: str, code: str, message: str = "simulated failure") -> None:
        """Make every later 'op' on 'table' raise a PostgREST APIError with this SQLSTATE."""
        self.failures[(table, op)] = APIError({"code": code, "message": message})


class FakeAuthService:
    """Resolves "Bearer <user_id>" to that user; "Bearer expired" is rejected."""

    def get_current_user(self, token: str) -> dict:
        if token == "expired":
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return {"id": token, "email": f"{token}@example.com", "user_metadata": {}, "app_metadata": {}}

    def logout(self, token: str) -> bool:
        return True


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {user_id}"}


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_auth_service] = lambda: FakeAuthService()
    limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db) -> FakeSupabase:
    """Three studios (one inactive), a member of every role and a few gallery items.

    Profiles are keyed by short user ids, e.g. "admin-a" is the admin of Kaskad.
    """
    db.add("studios", id=KASKAD_ID, name="Kaskad", description="Танцевальная студия Kaskad", subscription_plan="premium")
    db.add("studios", id=RIVAL_ID, name="Rival Dance")
    db.add("studios", id=CLOSED_ID, name="Closed Studio", active=False)

    db.add("profiles", id="super", email="super@example.com", full_name="Root", role="superadmin", is_superadmin=True)
    for role in ("admin", "teacher", "parent", "child"):
        db.add("profiles", id=f"{role}-a", studio_id=KASKAD_ID, email=f"{role}-a@example.com",
               full_name=f"Kaskad {role}", role=role)
    db.add("profiles", id="admin-b", studio_id=RIVAL_ID, email="admin-b@example.com", full_name="Rival admin", role="admin")
    db.add("profiles", id="admin-c", studio_id=CLOSED_ID, email="admin-c@example.com", full_name="Closed admin", role="admin")
    db.add("profiles", id="loner", email="loner@example.com", full_name="No studio")

    db.add("gallery_items", id="a-public", studio_id=KASKAD_ID, title="Spring show", media_url="https://cdn/a1.jpg",
           media_type="photo", is_public=True, tags=["show", "spring"], created_by="teacher-a",
           created_at="2024-03-01T10:00:00+00:00", updated_at="2024-03-01T10:00:00+00:00")
    db.add("gallery_items", id="a-private", studio_id=KASKAD_ID, title="Rehearsal", media_url="https://cdn/a2.mp4",
           media_type="video", category="rehearsal", tags=["practice"], created_by="teacher-a",
           created_at="2024-03-02T10:00:00+00:00", updated_at="2024-03-02T10:00:00+00:00")
    db.add("gallery_items", id="b-private", studio_id=RIVAL_ID, title="Rival class", media_url="https://cdn/b1.jpg",
           media_type="photo", created_by="admin-b",
           created_at="2024-03-03T10:00:00+00:00", updated_at="2024-03-03T10:00:00+00:00")
    db.add("gallery_items", id="c-private", studio_id=CLOSED_ID, title="Old photo", media_url="https://cdn/c1.jpg",
           media_type="photo", created_by="admin-c",
           created_at="2024-03-04T10:00:00+00:00", updated_at="2024-03-04T10:00:00+00:00")
    return db


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an API-level test against the in-memory Supabase")
