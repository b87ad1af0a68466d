from reflectai.features.auth.models import User
from reflectai.features.auth.session import SessionStore

__all__ = ["User", "SessionStore"]
