from typing import List

from fastapi import APIRouter, Depends

from reflectai.api.dependencies import get_workspace
from reflectai.features.journal.models import JournalEntry
from reflectai.features.workspace import Workspace

router = APIRouter(prefix="/entries", tags=["Entries"])


@router.get("", response_model=List[JournalEntry])
async def list_entries(workspace: Workspace = Depends(get_workspace)):
    """The signed-in user's entries, newest first."""
    return workspace.controller.entries


@router.post("/reload", response_model=List[JournalEntry])
async def reload_entries(workspace: Workspace = Depends(get_workspace)):
    """Re-fetch the entry list from storage."""
    await workspace.controller.load()
    return workspace.controller.entries
