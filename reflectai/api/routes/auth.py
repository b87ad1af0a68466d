"""
Auth API Routes

Signing in opens a workspace (session store + editor controller) and hands
the client its id in a cookie. Signing out closes it, and so does signing in
again: the replaced session is signed out with its workspace.
"""

import asyncio
import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Response

from reflectai.api.dependencies import (
    get_analyzer,
    get_client_factory,
    get_registry,
    get_repository_factory,
    get_workspace,
    get_workspace_id,
)
from reflectai.api.models import AuthResponse, LoginRequest, SignupRequest
from reflectai.core.config import settings
from reflectai.features.analysis.client import AnalysisClient
from reflectai.features.auth.models import User
from reflectai.features.auth.session import SessionStore
from reflectai.features.workspace import Workspace, WorkspaceRegistry
from reflectai.shared.errors import AuthError

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("Reflect.API.Auth")


async def _open_workspace(
    response: Response,
    previous_id: str,
    session: SessionStore,
    user: User,
    client,
    registry: WorkspaceRegistry,
    repository_factory: Callable,
    analyzer: AnalysisClient,
) -> None:
    previous = registry.close(previous_id)
    if previous is not None:
        await asyncio.to_thread(previous.session.logout)
    workspace_id = await registry.open(session, user, repository_factory(client), analyzer)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        workspace_id,
        httponly=True,
        samesite="lax",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    previous_id: str = Depends(get_workspace_id),
    registry: WorkspaceRegistry = Depends(get_registry),
    client_factory: Callable = Depends(get_client_factory),
    repository_factory: Callable = Depends(get_repository_factory),
    analyzer: AnalysisClient = Depends(get_analyzer),
) -> AuthResponse:
    """Sign in with email and password."""
    client = client_factory()
    session = SessionStore(client)
    user = await asyncio.to_thread(session.login, request.email, request.password)

    await _open_workspace(
        response, previous_id, session, user, client, registry, repository_factory, analyzer
    )
    return AuthResponse(status="signed_in", user=user)


@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: SignupRequest,
    response: Response,
    previous_id: str = Depends(get_workspace_id),
    registry: WorkspaceRegistry = Depends(get_registry),
    client_factory: Callable = Depends(get_client_factory),
    repository_factory: Callable = Depends(get_repository_factory),
    analyzer: AnalysisClient = Depends(get_analyzer),
) -> AuthResponse:
    """
    Create an account.

    When the backend requires email confirmation no session exists yet and
    the response status is `pending_confirmation`.
    """
    client = client_factory()
    session = SessionStore(client)
    user = await asyncio.to_thread(session.signup, request.email, request.name, request.password)

    current: Optional[User] = await asyncio.to_thread(session.get_current_user)
    if current is None:
        logger.info("Signup pending email confirmation", extra={"user_id": user.id})
        return AuthResponse(
            status="pending_confirmation",
            user=user,
            message=(
                "We've sent a confirmation link to your email. "
                "Please check your inbox to activate your account."
            ),
        )

    await _open_workspace(
        response, previous_id, session, current, client, registry, repository_factory, analyzer
    )
    return AuthResponse(status="signed_in", user=current)


@router.post("/logout", response_model=AuthResponse)
async def logout(
    response: Response,
    workspace_id: str = Depends(get_workspace_id),
    registry: WorkspaceRegistry = Depends(get_registry),
) -> AuthResponse:
    """Sign out. Always succeeds."""
    workspace = registry.close(workspace_id)
    if workspace is not None:
        await asyncio.to_thread(workspace.session.logout)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return AuthResponse(status="signed_out")


@router.get("/me", response_model=AuthResponse)
async def current_user(
    workspace_id: str = Depends(get_workspace_id),
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
) -> AuthResponse:
    """The signed-in user, re-checked against the auth backend."""
    user = await asyncio.to_thread(workspace.session.get_current_user)
    if user is None:
        registry.close(workspace_id)
        raise AuthError("Session expired, please sign in again")
    return AuthResponse(status="signed_in", user=user)
