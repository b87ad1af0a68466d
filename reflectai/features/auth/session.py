"""
Session Store - Supabase Auth wrapper.

Holds the auth state of one browser session. The Supabase client passed in
must not be shared between sessions: supabase-py keeps the signed-in session
on the client instance.
"""

import logging
from typing import Any, Optional

from reflectai.core.logging_utils import redact_emails
from reflectai.features.auth.models import DEFAULT_DISPLAY_NAME, User
from reflectai.shared.errors import AuthError, ValidationError

logger = logging.getLogger("Reflect.Auth.Session")

MIN_PASSWORD_LENGTH = 6


def _error_message(exc: Exception, fallback: str) -> str:
    return getattr(exc, "message", None) or str(exc) or fallback


def _to_user(auth_user: Any, name: Optional[str] = None) -> User:
    metadata = getattr(auth_user, "user_metadata", None) or {}
    return User(
        id=str(auth_user.id),
        email=auth_user.email or "",
        name=name or metadata.get("name") or DEFAULT_DISPLAY_NAME,
    )


class SessionStore:
    """Login, signup, logout and current-user lookup for one session."""

    def __init__(self, client):
        self.client = client

    def login(self, email: str, password: str) -> User:
        if not email or not email.strip() or not password:
            raise AuthError("Please enter your email and password.")

        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email.strip(), "password": password}
            )
        except Exception as exc:
            logger.warning("Login rejected for %s: %s", redact_emails(email), exc)
            raise AuthError(_error_message(exc, "Failed to login")) from exc

        if response is None or not response.user:
            raise AuthError("Login failed")

        user = _to_user(response.user)
        logger.info("User logged in", extra={"user_id": user.id})
        return user

    def signup(self, email: str, name: str, password: str) -> User:
        """
        Register a new account.

        The backend may hold the session until the email address is
        confirmed; call get_current_user() to tell an active session from a
        pending confirmation.
        """
        if not (email or "").strip() or not (name or "").strip() or not password:
            raise ValidationError("All fields are required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )

        try:
            response = self.client.auth.sign_up(
                {
                    "email": email.strip(),
                    "password": password,
                    "options": {"data": {"name": name.strip()}},
                }
            )
        except Exception as exc:
            logger.warning("Signup rejected for %s: %s", redact_emails(email), exc)
            raise AuthError(_error_message(exc, "Failed to create account")) from exc

        if response is None or not response.user:
            raise AuthError("Signup failed")

        user = _to_user(response.user, name=name.strip())
        logger.info("User signed up", extra={"user_id": user.id})
        return user

    def get_current_user(self) -> Optional[User]:
        """Return the session's user, or None when nobody is signed in."""
        try:
            session = self.client.auth.get_session()
        except Exception as exc:
            logger.error("Session lookup failed: %s", exc)
            raise AuthError(_error_message(exc, "Session lookup failed")) from exc

        if session is None or not getattr(session, "user", None):
            return None
        return _to_user(session.user)

    def logout(self) -> None:
        """Sign out. Safe to call repeatedly; never raises."""
        try:
            self.client.auth.sign_out()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Sign-out failed, ignoring: %s", exc)
