"""
Workspaces - server-side session state.

A workspace pairs one signed-in Session Store with the Editor Controller
built for its user. Clients hold only the opaque workspace id (a cookie).
A workspace never changes user: logging in again opens a new one.

Workspaces that sit unused longer than the idle timeout are dropped, and
the registry never holds more than `max_workspaces`; the least recently
used ones go first.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from reflectai.core.config import settings
from reflectai.features.analysis.client import AnalysisClient
from reflectai.features.auth.models import User
from reflectai.features.auth.session import SessionStore
from reflectai.features.journal.editor import EditorController, EntryStore

logger = logging.getLogger("Reflect.Workspaces")


@dataclass
class Workspace:
    session: SessionStore
    controller: EditorController
    last_used: float = field(default=0.0, compare=False)

    @property
    def user(self) -> User:
        return self.controller.user


class WorkspaceRegistry:
    """In-memory map of workspace id to Workspace."""

    def __init__(
        self,
        idle_timeout: Optional[float] = None,
        max_workspaces: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_timeout = settings.WORKSPACE_IDLE_TIMEOUT if idle_timeout is None else idle_timeout
        self.max_workspaces = settings.WORKSPACE_MAX_COUNT if max_workspaces is None else max_workspaces
        self._clock = clock
        self._workspaces: Dict[str, Workspace] = {}

    def __len__(self) -> int:
        return len(self._workspaces)

    async def open(
        self,
        session: SessionStore,
        user: User,
        repository: EntryStore,
        analyzer: AnalysisClient,
    ) -> str:
        """Create a workspace for a signed-in user and load their entries."""
        controller = EditorController(user, repository, analyzer)
        await controller.load()

        self.prune()
        while self._workspaces and len(self._workspaces) >= self.max_workspaces:
            oldest = min(self._workspaces, key=lambda key: self._workspaces[key].last_used)
            self._evict(oldest, "capacity")

        workspace_id = str(uuid.uuid4())
        self._workspaces[workspace_id] = Workspace(
            session=session, controller=controller, last_used=self._clock()
        )
        logger.info("Workspace opened", extra={"user_id": user.id})
        return workspace_id

    def get(self, workspace_id: Optional[str]) -> Optional[Workspace]:
        """The live workspace for an id; an idle-expired one is dropped instead."""
        if not workspace_id:
            return None
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            return None

        now = self._clock()
        if self._expired(workspace, now):
            self._evict(workspace_id, "idle")
            return None
        workspace.last_used = now
        return workspace

    def close(self, workspace_id: Optional[str]) -> Optional[Workspace]:
        """Forget a workspace. Unknown ids are ignored."""
        if not workspace_id:
            return None
        workspace = self._workspaces.pop(workspace_id, None)
        if workspace is not None:
            logger.info("Workspace closed", extra={"user_id": workspace.user.id})
        return workspace

    def prune(self) -> List[str]:
        """Drop every idle-expired workspace. Returns the dropped ids."""
        now = self._clock()
        stale = [key for key, ws in self._workspaces.items() if self._expired(ws, now)]
        for key in stale:
            self._evict(key, "idle")
        return stale

    def _expired(self, workspace: Workspace, now: float) -> bool:
        return now - workspace.last_used > self.idle_timeout

    def _evict(self, workspace_id: str, reason: str) -> None:
        workspace = self._workspaces.pop(workspace_id)
        logger.info("Workspace evicted (%s)", reason, extra={"user_id": workspace.user.id})
