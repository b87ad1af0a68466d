"""
Editor API Routes

One endpoint per editor action. Every response carries the editor state
after the action, so clients can re-render from it.
"""

from fastapi import APIRouter, Depends

from reflectai.api.dependencies import get_workspace
from reflectai.api.models import DeleteRequest, DraftUpdateRequest, EditorActionResponse
from reflectai.features.journal.models import EditorState
from reflectai.features.workspace import Workspace
from reflectai.shared.errors import NotFoundError

router = APIRouter(prefix="/editor", tags=["Editor"])


def _respond(status: str, workspace: Workspace) -> EditorActionResponse:
    return EditorActionResponse(status=status, state=workspace.controller.state())


@router.get("", response_model=EditorState)
async def get_state(workspace: Workspace = Depends(get_workspace)):
    return workspace.controller.state()


@router.post("/new", response_model=EditorActionResponse)
async def new_entry(workspace: Workspace = Depends(get_workspace)):
    workspace.controller.new()
    return _respond("new", workspace)


@router.post("/select/{entry_id}", response_model=EditorActionResponse)
async def select_entry(entry_id: str, workspace: Workspace = Depends(get_workspace)):
    if not workspace.controller.select(entry_id):
        raise NotFoundError(
            f"Entry {entry_id} not found",
            details={"resource_type": "entry", "resource_id": entry_id},
        )
    return _respond("selected", workspace)


@router.put("/draft", response_model=EditorActionResponse)
async def update_draft(request: DraftUpdateRequest, workspace: Workspace = Depends(get_workspace)):
    workspace.controller.update_draft(title=request.title, content=request.content)
    return _respond("draft_updated", workspace)


@router.post("/save", response_model=EditorActionResponse)
async def save_entry(workspace: Workspace = Depends(get_workspace)):
    saved = await workspace.controller.save()
    return _respond("saved" if saved else "skipped", workspace)


@router.post("/delete", response_model=EditorActionResponse)
async def delete_entry(request: DeleteRequest, workspace: Workspace = Depends(get_workspace)):
    """Delete the selected entry; `confirm` is the user's yes/no answer."""
    controller = workspace.controller
    had_selection = controller.selected_id is not None

    deleted = await controller.delete(lambda _prompt: request.confirm)
    if deleted:
        status = "deleted"
    elif had_selection:
        status = "cancelled"
    else:
        status = "skipped"
    return _respond(status, workspace)


@router.post("/analyze", response_model=EditorActionResponse)
async def analyze_entry(workspace: Workspace = Depends(get_workspace)):
    analysis = await workspace.controller.analyze()
    return _respond("analyzed" if analysis else "skipped", workspace)
