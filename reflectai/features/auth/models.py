from pydantic import BaseModel, ConfigDict

DEFAULT_DISPLAY_NAME = "User"


class User(BaseModel):
    """An authenticated user. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str = DEFAULT_DISPLAY_NAME
