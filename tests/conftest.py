import os
from collections import defaultdict
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

# Never talk to real backends from tests
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("STORAGE_BACKEND", "supabase")

from reflectai.features.analysis.client import ANALYSIS_TOOL_NAME, AnalysisClient  # noqa: E402
from reflectai.features.auth.models import User  # noqa: E402
from reflectai.features.journal.models import JournalEntry  # noqa: E402


def _parse_ts(value):
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


# =============================================================================
# FAKE SUPABASE
# =============================================================================

class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, table, op, payload=None):
        self.table = table
        self.op = op
        self.payload = payload
        self.filters = []
        self.order_by = None
        self.desc = False

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = column
        self.desc = desc
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self.filters)

    def execute(self):
        self.table.calls.append(self.op)
        if self.op in self.table.fail_on:
            raise RuntimeError(f"{self.op} failed: backend unavailable")

        if self.op == "select":
            rows = [dict(r) for r in self.table.rows.values() if self._matches(r)]
            if self.order_by:
                rows.sort(key=lambda r: _parse_ts(r[self.order_by]), reverse=self.desc)
            return SimpleNamespace(data=rows)

        if self.op == "upsert":
            row = dict(self.payload)
            self.table.rows[row["id"]] = row
            return SimpleNamespace(data=[dict(row)])

        if self.op == "delete":
            deleted = [r for r in self.table.rows.values() if self._matches(r)]
            for r in deleted:
                del self.table.rows[r["id"]]
            return SimpleNamespace(data=deleted)

        raise AssertionError(f"unexpected op {self.op}")


class FakeTable:
    def __init__(self):
        self.rows = {}
        self.calls = []
        self.fail_on = set()

    def select(self, columns="*"):
        return FakeQuery(self, "select")

    def upsert(self, payload):
        return FakeQuery(self, "upsert", payload)

    def delete(self):
        return FakeQuery(self, "delete")


class FakeSupabase:
    """In-memory Supabase client: tables plus a MagicMock auth API."""

    def __init__(self):
        self.tables = defaultdict(FakeTable)
        self.auth = MagicMock()

    def table(self, name):
        return self.tables[name]


def auth_user(user_id="user-1", email="ada@example.com", name="Ada"):
    metadata = {"name": name} if name else {}
    return SimpleNamespace(id=user_id, email=email, user_metadata=metadata)


def signed_in(client, user_id="user-1", email="ada@example.com", name="Ada"):
    """Configure a FakeSupabase auth mock as a successful sign-in."""
    user = auth_user(user_id, email, name)
    client.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=user, session=SimpleNamespace(user=user)
    )
    client.auth.get_session.return_value = SimpleNamespace(user=user)
    return client


# =============================================================================
# FAKE ANTHROPIC
# =============================================================================

ANALYSIS_PAYLOAD = {
    "sentiment": "Positive",
    "summary": "A good day with friends.",
    "advice": "Keep making time for the people who lift you up.",
    "tags": ["friends", "gratitude", "weekend"],
}


def tool_response(payload=None):
    block = SimpleNamespace(
        type="tool_use",
        name=ANALYSIS_TOOL_NAME,
        id="toolu_1",
        input=dict(ANALYSIS_PAYLOAD if payload is None else payload),
    )
    return SimpleNamespace(
        content=[block],
        usage=SimpleNamespace(input_tokens=120, output_tokens=60),
        stop_reason="tool_use",
    )


def text_response(text):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=60),
        stop_reason="end_turn",
    )


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture()
def user():
    return User(id="user-1", email="ada@example.com", name="Ada")


@pytest.fixture()
def supabase():
    return FakeSupabase()


@pytest.fixture()
def entries_table(supabase):
    return supabase.table("entries")


@pytest.fixture()
def anthropic_client():
    client = MagicMock()
    client.messages.create.return_value = tool_response()
    return client


@pytest.fixture()
def analyzer(anthropic_client):
    return AnalysisClient(api_key="test-key", model="claude-test", client=anthropic_client)


@pytest.fixture()
def make_entry():
    def _make(entry_id="entry-1", user_id="user-1", title="Day 1", content="Felt good",
              created_at=None, updated_at=None, ai_analysis=None):
        created = created_at or datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
        return JournalEntry(
            id=entry_id,
            user_id=user_id,
            title=title,
            content=content,
            created_at=created,
            updated_at=updated_at or created,
            ai_analysis=ai_analysis,
        )
    return _make
