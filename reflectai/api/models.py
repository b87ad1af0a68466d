from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from reflectai.features.auth.models import User
from reflectai.features.journal.models import EditorState


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignupRequest(BaseModel):
    email: str = ""
    name: str = ""
    password: str = ""


class AuthResponse(BaseModel):
    status: str
    user: Optional[User] = None
    message: Optional[str] = None


class DraftUpdateRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class DeleteRequest(BaseModel):
    """The user's answer to the delete confirmation prompt."""
    confirm: bool = False


class EditorActionResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    state: EditorState
