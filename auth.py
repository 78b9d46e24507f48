import logging
import os

import streamlit as st
from supabase import Client, create_client

from infrastructure.auth_gateway import InvalidCredentialsError, SupabaseAuthGateway
from infrastructure.repositories.supabase_message_repository import SupabaseMessageRepository
from infrastructure.repositories.supabase_post_repository import SupabasePostRepository
from use_cases.session_models import AuthSession

__all__ = [
    "InvalidCredentialsError",
    "MissingConfigError",
    "get_secret",
    "get_setting",
    "get_client",
    "get_auth_gateway",
    "get_post_repo",
    "get_message_repo",
    "sign_in",
    "author_name_for",
]

log = logging.getLogger(__name__)


class MissingConfigError(Exception):
    pass


CLIENT_STATE_KEY = "supabase_client"
DEFAULT_REDIRECT_DELAY_SECONDS = 2.0


def get_secret(key):
    try:
        return st.secrets.get(key)
    except Exception:
        # No secrets.toml present
        return None


def get_setting(key, default=None):
    return get_secret(key) or os.getenv(key) or default


def get_redirect_delay() -> float:
    raw = get_setting("REDIRECT_DELAY_SECONDS")
    try:
        return float(raw) if raw is not None else DEFAULT_REDIRECT_DELAY_SECONDS
    except ValueError:
        log.warning(f"Invalid REDIRECT_DELAY_SECONDS={raw!r}, using {DEFAULT_REDIRECT_DELAY_SECONDS}")
        return DEFAULT_REDIRECT_DELAY_SECONDS


def check_config():
    missing = [k for k in ("SUPABASE_URL", "SUPABASE_ANON_KEY") if not get_setting(k)]
    if missing:
        raise MissingConfigError(f"Missing settings: {', '.join(missing)}")


def get_client() -> Client:
    # One client per browser session: the auth state lives inside it.
    client = st.session_state.get(CLIENT_STATE_KEY)
    if client is None:
        check_config()
        client = create_client(get_setting("SUPABASE_URL"), get_setting("SUPABASE_ANON_KEY"))
        st.session_state[CLIENT_STATE_KEY] = client
        log.info("Supabase client created for this browser session")
    return client


def get_auth_gateway() -> SupabaseAuthGateway:
    return SupabaseAuthGateway(get_client())


def get_post_repo() -> SupabasePostRepository:
    return SupabasePostRepository(get_client())


def get_message_repo() -> SupabaseMessageRepository:
    return SupabaseMessageRepository(get_client())


def sign_in(email, password) -> AuthSession:
    return get_auth_gateway().sign_in(email, password)


def author_name_for(session) -> str:
    name = get_setting("AUTHOR_NAME")
    if name:
        return name
    return session.email if session is not None else ""
