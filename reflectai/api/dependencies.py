from functools import lru_cache
from typing import Callable

from fastapi import Depends, Request

from reflectai.core.config import settings
from reflectai.core.database import create_supabase_client
from reflectai.features.analysis.client import AnalysisClient
from reflectai.features.journal.editor import EntryStore
from reflectai.features.journal.repository import EntryRepository
from reflectai.features.storage import LocalEntryRepository, LocalStorage
from reflectai.features.workspace import Workspace, WorkspaceRegistry
from reflectai.shared.errors import AuthError


@lru_cache(maxsize=1)
def get_analyzer() -> AnalysisClient:
    """Provide a singleton analysis client for request handlers."""
    return AnalysisClient()


@lru_cache(maxsize=1)
def get_registry() -> WorkspaceRegistry:
    """Provide the process-wide workspace registry."""
    return WorkspaceRegistry()


@lru_cache(maxsize=1)
def get_local_storage() -> LocalStorage:
    return LocalStorage(settings.LOCAL_STORAGE_DIR)


def get_client_factory() -> Callable:
    """Factory for per-session Supabase clients."""
    return create_supabase_client


def get_repository_factory() -> Callable[[object], EntryStore]:
    """Factory building the entry repository for a session's client."""
    if settings.STORAGE_BACKEND == "local":
        storage = get_local_storage()
        return lambda client: LocalEntryRepository(storage)
    return EntryRepository


def get_workspace_id(request: Request) -> str:
    return request.cookies.get(settings.SESSION_COOKIE_NAME, "")


def get_workspace(
    workspace_id: str = Depends(get_workspace_id),
    registry: WorkspaceRegistry = Depends(get_registry),
) -> Workspace:
    """The caller's workspace; 401 when not signed in."""
    workspace = registry.get(workspace_id)
    if workspace is None:
        raise AuthError("Not signed in")
    return workspace
