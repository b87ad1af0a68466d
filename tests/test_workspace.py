"""
Tests for the workspace registry
"""
import pytest

from reflectai.features.auth.session import SessionStore
from reflectai.features.journal.repository import EntryRepository
from reflectai.features.workspace import WorkspaceRegistry


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


async def _open(registry, supabase, user, analyzer):
    return await registry.open(SessionStore(supabase), user, EntryRepository(supabase), analyzer)


@pytest.mark.asyncio
async def test_open_get_close(supabase, user, analyzer):
    registry = WorkspaceRegistry()
    workspace_id = await _open(registry, supabase, user, analyzer)

    assert registry.get(workspace_id).user == user
    assert registry.close(workspace_id) is not None
    assert registry.close(workspace_id) is None
    assert registry.get(workspace_id) is None


@pytest.mark.asyncio
async def test_idle_workspace_expires(supabase, user, analyzer, clock):
    registry = WorkspaceRegistry(idle_timeout=60, clock=clock)
    workspace_id = await _open(registry, supabase, user, analyzer)

    clock.now += 61

    assert registry.get(workspace_id) is None
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_access_keeps_workspace_alive(supabase, user, analyzer, clock):
    registry = WorkspaceRegistry(idle_timeout=60, clock=clock)
    workspace_id = await _open(registry, supabase, user, analyzer)

    for _ in range(3):
        clock.now += 45
        assert registry.get(workspace_id) is not None


@pytest.mark.asyncio
async def test_opening_prunes_stale_workspaces(supabase, user, analyzer, clock):
    registry = WorkspaceRegistry(idle_timeout=60, clock=clock)
    stale = await _open(registry, supabase, user, analyzer)
    clock.now += 120

    fresh = await _open(registry, supabase, user, analyzer)

    assert len(registry) == 1
    assert registry.get(stale) is None
    assert registry.get(fresh) is not None


@pytest.mark.asyncio
async def test_capacity_evicts_least_recently_used(supabase, user, analyzer, clock):
    registry = WorkspaceRegistry(idle_timeout=3600, max_workspaces=2, clock=clock)
    first = await _open(registry, supabase, user, analyzer)
    clock.now += 1
    second = await _open(registry, supabase, user, analyzer)
    clock.now += 1
    registry.get(first)
    clock.now += 1

    third = await _open(registry, supabase, user, analyzer)

    assert len(registry) == 2
    assert registry.get(second) is None
    assert registry.get(first) is not None
    assert registry.get(third) is not None
