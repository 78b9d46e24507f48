from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import streamlit as st

import auth
from infrastructure.auth_gateway import InvalidCredentialsError, SupabaseAuthGateway
from use_cases.session_models import AuthSession


def _sb_session(user_id="u-1", email="joana@example.com", token="jwt"):
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email), access_token=token)


class AuthApiError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


# --- gateway ---

def test_sign_in_returns_session():
    client = MagicMock()
    client.auth.sign_in_with_password.return_value = SimpleNamespace(session=_sb_session())

    session = SupabaseAuthGateway(client).sign_in(" joana@example.com ", "secret")

    client.auth.sign_in_with_password.assert_called_once_with({"email": "joana@example.com", "password": "secret"})
    assert session == AuthSession(user_id="u-1", email="joana@example.com", access_token="jwt")


def test_sign_in_surfaces_backend_message():
    client = MagicMock()
    client.auth.sign_in_with_password.side_effect = AuthApiError("Invalid login credentials")

    with pytest.raises(InvalidCredentialsError) as excinfo:
        SupabaseAuthGateway(client).sign_in("joana@example.com", "wrong")
    assert str(excinfo.value) == "Invalid login credentials"


def test_sign_in_without_session_is_rejected():
    client = MagicMock()
    client.auth.sign_in_with_password.return_value = SimpleNamespace(session=None)

    with pytest.raises(InvalidCredentialsError):
        SupabaseAuthGateway(client).sign_in("joana@example.com", "secret")


def test_get_session_projects_supabase_session():
    client = MagicMock()
    client.auth.get_session.return_value = None
    assert SupabaseAuthGateway(client).get_session() is None

    client.auth.get_session.return_value = _sb_session(user_id="u-2")
    assert SupabaseAuthGateway(client).get_session().user_id == "u-2"


def test_subscribe_relays_event_names_and_sessions():
    client = MagicMock()
    received = []
    SupabaseAuthGateway(client).subscribe(lambda event, session: received.append((event, session)))
    relay = client.auth.on_auth_state_change.call_args.args[0]

    relay(SimpleNamespace(value="SIGNED_IN"), _sb_session())
    relay("SIGNED_OUT", None)

    assert received[0] == ("SIGNED_IN", AuthSession("u-1", "joana@example.com", "jwt"))
    assert received[1] == ("SIGNED_OUT", None)


def test_sign_out_delegates():
    client = MagicMock()
    SupabaseAuthGateway(client).sign_out()
    client.auth.sign_out.assert_called_once()


# --- configuration ---

@patch("auth.get_secret", return_value=None)
def test_get_setting_falls_back_to_env(_mock_secret, monkeypatch):
    monkeypatch.setenv("AUTHOR_NAME", "Joana Agostinho")
    assert auth.get_setting("AUTHOR_NAME") == "Joana Agostinho"
    assert auth.get_setting("NOT_SET_ANYWHERE", "fallback") == "fallback"


@patch("auth.get_secret", return_value=None)
def test_check_config_lists_missing_keys(_mock_secret, monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

    with pytest.raises(auth.MissingConfigError, match="SUPABASE_URL"):
        auth.check_config()


@patch("auth.get_secret", return_value=None)
def test_redirect_delay_parsing(_mock_secret, monkeypatch):
    monkeypatch.setenv("REDIRECT_DELAY_SECONDS", "0.5")
    assert auth.get_redirect_delay() == 0.5
    monkeypatch.setenv("REDIRECT_DELAY_SECONDS", "soon")
    assert auth.get_redirect_delay() == auth.DEFAULT_REDIRECT_DELAY_SECONDS


@patch("auth.create_client")
@patch("auth.get_secret", return_value=None)
def test_get_client_is_cached_per_session(_mock_secret, mock_create, monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    st.session_state.clear()

    first = auth.get_client()
    second = auth.get_client()

    assert first is second
    mock_create.assert_called_once_with("https://project.supabase.co", "anon")


@patch("auth.get_setting", return_value=None)
def test_author_name_falls_back_to_email(_mock_setting):
    assert auth.author_name_for(AuthSession("u-1", "joana@example.com")) == "joana@example.com"
    assert auth.author_name_for(None) == ""
