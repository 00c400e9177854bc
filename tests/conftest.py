import copy
import itertools
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

import database.supabase_client as supabase_client
from core import timewindow
from services.auth_service import create_jwt_token
from factories import FakeClock


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest query builder for the services."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self._op = "select"
        self._payload = None
        self._filters = []
        self._order = []
        self._limit = None

    def select(self, *columns, count=None):
        self._op = "select"
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload):
        self._op = "update"
        self._payload = payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def in_(self, column, values):
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self._order.append((column, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def execute(self):
        self.db.calls.append((self.table, self._op))
        rows = self.db.tables.setdefault(self.table, [])

        if self._op == "insert":
            payloads = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for payload in payloads:
                row = {"id": f"{self.table}-{next(self.db.ids)}", **payload}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResult(inserted)

        matched = [row for row in rows if all(f(row) for f in self._filters)]

        if self._op == "update":
            for row in matched:
                row.update(self._payload)
            return FakeResult(copy.deepcopy(matched))

        if self._op == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResult(copy.deepcopy(matched))

        for column, desc in reversed(self._order):
            matched = sorted(matched, key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self._limit is not None:
            matched = matched[:self._limit]
        return FakeResult(copy.deepcopy(matched), count=len(matched))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)

    from_ = table

    def seed(self, table, *rows):
        self.tables.setdefault(table, []).extend(copy.deepcopy(list(rows)))


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeSupabase()
    monkeypatch.setattr(supabase_client, "_supabase_client", db)
    return db


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock(datetime(2024, 1, 1, 10, 0, 0))
    monkeypatch.setattr(timewindow, "now_local", fake)
    return fake


@pytest.fixture
def client(fake_db, clock, monkeypatch, tmp_path):
    import app as app_module

    monkeypatch.setattr(app_module, "SETTINGS_FILE", str(tmp_path / "settings.json"))
    with TestClient(app_module.app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def make(branch_id="b1"):
        return {"Authorization": f"Bearer {create_jwt_token('admin', branch_id)}"}
    return make
