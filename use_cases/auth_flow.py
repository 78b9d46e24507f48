"""Authentication flow orchestration (application layer)."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Literal, Optional

import auth
from use_cases import session_guard
from use_cases.session_guard import SessionGuard
from use_cases.session_models import AuthSession
from utils import session_manager

AuthFlowStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    session: Optional[AuthSession] = None
    guard: Optional[SessionGuard] = None

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id if self.session is not None else None


def _result_for(guard: SessionGuard) -> AuthFlowResult:
    if guard.is_authenticated:
        return AuthFlowResult(status="CONTINUE", reason="authenticated", session=guard.session, guard=guard)
    return AuthFlowResult(status="STOP", reason="auth_required", guard=guard)


@contextmanager
def protected_view() -> Iterator[AuthFlowResult]:
    """
    Run the auth gate around a protected screen.

    On STOP the guard has already recorded the replace-navigation to login;
    the caller renders nothing and reruns. The session subscription stays
    live for the body of the ``with`` block and is released on exit.
    """
    session_manager.init_session_state()
    with session_guard.guarded(auth.get_auth_gateway(), session_manager.set_route) as guard:
        yield _result_for(guard)


def redirect_if_signed_in() -> bool:
    """Login screen check: a visitor who already has a session goes to the overview."""
    session_manager.init_session_state()
    try:
        session = auth.get_auth_gateway().get_session()
    except Exception:
        session = None
    if session is None:
        return False
    session_manager.set_route(session_manager.OVERVIEW, replace=True)
    return True
