import os
import sys
import threading

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Must be set before searchpulse.db builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SUPABASE_URL", "")
os.environ.setdefault("SUPABASE_ANON_KEY", "")
os.environ.setdefault("TMDB_API_KEY", "test-key")

import pytest
from postgrest.exceptions import APIError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from searchpulse.db import Base
from searchpulse import models  # noqa: F401


def api_error(code: str, message: str = "error") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the PostgREST query builder for the metrics table"""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.action = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.row_limit = None

    def select(self, columns="*"):
        self.action = "select"
        return self

    def update(self, values):
        self.action = "update"
        self.payload = values
        return self

    def insert(self, rows):
        self.action = "insert"
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def _matches(self, row):
        return all(row.get(c) == v for c, v in self.filters)

    def execute(self):
        self.client.calls.append((self.action, self.table, list(self.filters), self.payload))
        error = self.client.fail_on.get(self.action)
        if error is not None:
            raise error

        with self.client.lock:
            rows = self.client.tables.setdefault(self.table, [])
            if self.action == "select":
                found = [dict(r) for r in rows if self._matches(r)]
                if self.order_by:
                    column, desc = self.order_by
                    found.sort(key=lambda r: r[column], reverse=desc)
                if self.row_limit is not None:
                    found = found[:self.row_limit]
                return FakeResponse(found)
            if self.action == "update":
                updated = []
                for row in rows:
                    if self._matches(row):
                        row.update(self.payload)
                        updated.append(dict(row))
                return FakeResponse(updated)
            if self.action == "insert":
                inserted = []
                for payload in self.payload:
                    row = {"id": self.client.next_id(), "created_at": "2024-01-01T00:00:00+00:00", **payload}
                    rows.append(row)
                    inserted.append(dict(row))
                return FakeResponse(inserted)
        raise AssertionError(f"unsupported action {self.action}")


class FakeRpc:
    def __init__(self, client, name, params):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        self.client.calls.append(("rpc", self.name, [], self.params))
        error = self.client.fail_on.get("rpc")
        if error is not None:
            raise error
        with self.client.lock:
            rows = self.client.tables.setdefault("metrics", [])
            for row in rows:
                if row["searchTerm"] == self.params["p_search_term"]:
                    row["count"] += 1
                    return FakeResponse([dict(row)])
            row = {
                "id": self.client.next_id(),
                "searchTerm": self.params["p_search_term"],
                "count": 1,
                "movie_id": self.params["p_movie_id"],
                "poster_url": self.params["p_poster_url"],
                "created_at": "2024-01-01T00:00:00+00:00",
            }
            rows.append(row)
            return FakeResponse([dict(row)])


class FakeSupabaseClient:
    """In-memory stand-in for supabase.Client"""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_on = {}
        self.lock = threading.Lock()
        self._id = 0

    def next_id(self):
        self._id += 1
        return self._id

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        return FakeRpc(self, name, params)

    def rows(self, table="metrics"):
        return self.tables.get(table, [])

    def actions(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def supabase_client():
    return FakeSupabaseClient()


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
