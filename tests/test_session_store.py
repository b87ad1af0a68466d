"""
Tests for the Supabase-backed session store
"""
from types import SimpleNamespace

import pytest

from reflectai.features.auth.session import SessionStore
from reflectai.shared.errors import AuthError, ValidationError

from conftest import FakeSupabase, auth_user, signed_in


class TestLogin:

    def test_login_returns_user_with_metadata_name(self):
        client = signed_in(FakeSupabase())
        user = SessionStore(client).login("ada@example.com", "secret123")

        assert user.id == "user-1"
        assert user.email == "ada@example.com"
        assert user.name == "Ada"
        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "ada@example.com", "password": "secret123"}
        )

    def test_login_defaults_display_name(self):
        client = signed_in(FakeSupabase(), name=None)
        user = SessionStore(client).login("ada@example.com", "secret123")
        assert user.name == "User"

    @pytest.mark.parametrize("email,password", [("", "secret123"), ("ada@example.com", ""), ("   ", "x")])
    def test_login_rejects_empty_fields_without_backend_call(self, email, password):
        client = FakeSupabase()
        with pytest.raises(AuthError):
            SessionStore(client).login(email, password)
        client.auth.sign_in_with_password.assert_not_called()

    def test_login_backend_rejection_carries_message(self):
        client = FakeSupabase()
        error = Exception("Invalid login credentials")
        error.message = "Invalid login credentials"
        client.auth.sign_in_with_password.side_effect = error

        with pytest.raises(AuthError) as exc_info:
            SessionStore(client).login("ada@example.com", "wrong-password")
        assert exc_info.value.message == "Invalid login credentials"

    def test_login_without_user_fails(self):
        client = FakeSupabase()
        client.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)
        with pytest.raises(AuthError):
            SessionStore(client).login("ada@example.com", "secret123")


class TestSignup:

    def test_signup_sends_name_metadata(self):
        client = FakeSupabase()
        client.auth.sign_up.return_value = SimpleNamespace(
            user=auth_user(name=None), session=None
        )

        user = SessionStore(client).signup("ada@example.com", "Ada", "secret123")

        assert user.name == "Ada"
        client.auth.sign_up.assert_called_once_with(
            {
                "email": "ada@example.com",
                "password": "secret123",
                "options": {"data": {"name": "Ada"}},
            }
        )

    def test_signup_requires_all_fields(self):
        client = FakeSupabase()
        with pytest.raises(ValidationError):
            SessionStore(client).signup("ada@example.com", "", "secret123")
        client.auth.sign_up.assert_not_called()

    def test_signup_rejects_short_password(self):
        client = FakeSupabase()
        with pytest.raises(ValidationError) as exc_info:
            SessionStore(client).signup("ada@example.com", "Ada", "12345")
        assert "6 characters" in exc_info.value.message
        client.auth.sign_up.assert_not_called()

    def test_signup_backend_rejection(self):
        client = FakeSupabase()
        client.auth.sign_up.side_effect = Exception("User already registered")
        with pytest.raises(AuthError) as exc_info:
            SessionStore(client).signup("ada@example.com", "Ada", "secret123")
        assert "already registered" in exc_info.value.message


class TestCurrentUserAndLogout:

    def test_no_session_returns_none(self):
        client = FakeSupabase()
        client.auth.get_session.return_value = None
        assert SessionStore(client).get_current_user() is None

    def test_active_session_returns_user(self):
        client = signed_in(FakeSupabase())
        user = SessionStore(client).get_current_user()
        assert user is not None and user.id == "user-1"

    def test_transport_failure_raises(self):
        client = FakeSupabase()
        client.auth.get_session.side_effect = ConnectionError("network down")
        with pytest.raises(AuthError):
            SessionStore(client).get_current_user()

    def test_logout_swallows_backend_errors(self):
        client = FakeSupabase()
        client.auth.sign_out.side_effect = ConnectionError("network down")
        store = SessionStore(client)

        store.logout()
        store.logout()

        assert client.auth.sign_out.call_count == 2
