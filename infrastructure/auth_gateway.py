import logging
from typing import Any, Callable, Optional

from use_cases.session_models import AuthSession

log = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    pass


class SupabaseAuthGateway:
    """Adapts supabase-py's auth client to the session guard and login screen."""

    def __init__(self, client: Any):
        self.client = client

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_in_with_password({"email": email.strip(), "password": password})
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            log.warning(f"Sign-in rejected for {email.strip()}: {message}")
            raise InvalidCredentialsError(message) from e

        session = AuthSession.from_supabase(getattr(response, "session", None))
        if session is None:
            raise InvalidCredentialsError("Sign-in did not return a session.")
        log.info(f"Signed in user {session.user_id}")
        return session

    def get_session(self) -> Optional[AuthSession]:
        return AuthSession.from_supabase(self.client.auth.get_session())

    def subscribe(self, listener: Callable[[str, Optional[AuthSession]], None]) -> Any:
        def _relay(event: Any, session: Any) -> None:
            event_name = getattr(event, "value", event)
            listener(str(event_name), AuthSession.from_supabase(session))

        return self.client.auth.on_auth_state_change(_relay)

    def sign_out(self) -> None:
        self.client.auth.sign_out()
        log.info("Sign-out requested")
