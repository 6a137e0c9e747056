"""Pytest fixtures and an async Supabase mock for testing."""
import uuid
from collections import defaultdict
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError
from realtime import RealtimeSubscribeStates

from main import app
from studio import StudioData, get_studio

PUBLIC_URL_BASE = "https://example.supabase.co/storage/v1/object/public"
SIGNED_IN_USER_ID = "user-123"


def make_mock_store():
    """Create in-memory store and an async mock of the Supabase client."""

    store = defaultdict(list)
    # Every request that would have gone over the network.
    calls = []
    failing = set()
    # Tables whose inserts succeed without returning the row.
    rowless = set()
    clock = {"now": datetime(2024, 1, 1, 12, 0, 0)}

    def add_row(table: str, data: dict) -> dict:
        row = dict(data)
        if "id" not in row:
            row["id"] = str(uuid.uuid4())
        clock["now"] += timedelta(seconds=1)
        row.setdefault("created_at", clock["now"].isoformat())
        store[table].append(row)
        return row

    def find_rows(table: str, filters: dict) -> list:
        rows = list(store.get(table, []))
        for col, val in filters.items():
            rows = [r for r in rows if str(r.get(col)) == str(val)]
        return rows

    def check_failure(target: str) -> None:
        if target in failing:
            raise APIError(
                {"message": f"{target} is unavailable", "code": "500", "hint": None, "details": None}
            )

    class InsertMock:
        def __init__(self, table_name: str, data: dict):
            self._table = table_name
            self._data = data

        async def execute(self):
            calls.append(("insert", self._table))
            check_failure(self._table)
            row = add_row(self._table, self._data)
            if self._table in rowless:
                return SimpleNamespace(data=[])
            return SimpleNamespace(data=[row])

    class TableMock:
        def __init__(self, table_name: str):
            self._table = table_name
            self._filters = {}
            self._order = None
            self._single = False

        def insert(self, data: dict):
            return InsertMock(self._table, data)

        def select(self, cols: str = "*"):
            return self

        def eq(self, col: str, val: Any):
            self._filters[col] = val
            return self

        def order(self, col: str, desc: bool = False):
            self._order = (col, desc)
            return self

        def single(self):
            self._single = True
            return self

        async def execute(self):
            calls.append(("select", self._table))
            check_failure(self._table)
            rows = find_rows(self._table, self._filters)
            if self._single:
                if len(rows) != 1:
                    raise APIError(
                        {
                            "message": "JSON object requested, multiple (or no) rows returned",
                            "code": "PGRST116",
                            "hint": None,
                            "details": f"The result contains {len(rows)} rows",
                        }
                    )
                return SimpleNamespace(data=rows[0])
            if self._order:
                col, desc = self._order
                rows = sorted(rows, key=lambda r: r.get(col, ""), reverse=desc)
            return SimpleNamespace(data=rows)

    class BucketMock:
        def __init__(self, bucket: str):
            self._bucket = bucket

        async def upload(self, path: str, file: bytes, file_options: Optional[dict] = None):
            calls.append(("upload", self._bucket))
            check_failure("storage")
            store[f"storage:{self._bucket}"].append(
                {"path": path, "content": file, "options": file_options}
            )
            return SimpleNamespace(path=path)

        async def get_public_url(self, path: str) -> str:
            return f"{PUBLIC_URL_BASE}/{self._bucket}/{path}"

    class StorageMock:
        def from_(self, bucket: str):
            return BucketMock(bucket)

    class AuthMock:
        def __init__(self):
            self.user_id = SIGNED_IN_USER_ID

        async def get_user(self):
            calls.append(("auth", "get_user"))
            if self.user_id is None:
                return None
            return SimpleNamespace(user=SimpleNamespace(id=self.user_id))

    class ChannelMock:
        def __init__(self, name: str):
            self.name = name
            self.listeners = []
            self.status_callback = None

        def on_postgres_changes(self, event, callback, table="*", schema="public", filter=None):
            self.listeners.append(
                {"event": event, "table": table, "schema": schema, "filter": filter, "callback": callback}
            )
            return self

        async def subscribe(self, callback=None):
            calls.append(("subscribe", self.name))
            self.status_callback = callback
            if callback:
                callback(RealtimeSubscribeStates.SUBSCRIBED, None)
            return self

        def emit_insert(self, record: dict) -> dict:
            payload = {
                "data": {
                    "type": "INSERT",
                    "schema": "public",
                    "table": "messages",
                    "record": record,
                },
                "ids": [1],
            }
            for listener in self.listeners:
                listener["callback"](payload)
            return payload

        def emit_status(self, status, err=None) -> None:
            self.status_callback(status, err)

    class SupabaseMock:
        def __init__(self):
            self.storage = StorageMock()
            self.auth = AuthMock()
            self.channels = []
            self.removed_channels = []

        def table(self, name: str):
            return TableMock(name)

        def channel(self, name: str):
            channel = ChannelMock(name)
            self.channels.append(channel)
            return channel

        async def remove_channel(self, channel):
            self.removed_channels.append(channel)

    supabase = SupabaseMock()
    supabase.calls = calls
    supabase.failing = failing
    supabase.rowless = rowless
    return store, supabase


@pytest.fixture
def mock_supabase():
    """Fresh in-memory store and mocked Supabase client per test."""
    return make_mock_store()


@pytest.fixture
def studio(mock_supabase):
    _, supabase = mock_supabase
    return StudioData(supabase)


@pytest.fixture
def offline_studio():
    """Data access with no Supabase credentials configured."""
    return StudioData(None)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def mock_db(mock_supabase):
    """Route every request's data access through the mocked Supabase."""
    store, supabase = mock_supabase
    app.dependency_overrides[get_studio] = lambda: StudioData(supabase)
    yield store, supabase
    app.dependency_overrides.clear()


@pytest.fixture
def offline_db():
    """Serve requests as if Supabase credentials were missing."""
    app.dependency_overrides[get_studio] = lambda: StudioData(None)
    yield
    app.dependency_overrides.clear()
