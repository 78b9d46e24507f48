"""
Session guard for protected screens.

The guard owns the dashboard's view of the current session while a protected
screen is rendered. It subscribes to auth-state notifications before asking
for the initial session, so a notification delivered while that query is
still pending wins over the query's eventual answer.

Navigation is injected as a callable ``navigate(route, replace=True)`` and is
only invoked on the transition into UNAUTHENTICATED. Navigation writes
Streamlit session state, so it only runs on the thread that built the guard;
a notification delivered on the Supabase refresh thread leaves the redirect
pending until ``settle_navigation`` runs on the script thread (at the latest
in ``deactivate``).
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Protocol

from use_cases.session_models import SIGNED_OUT, AuthSession, GuardStatus

log = logging.getLogger(__name__)

LOGIN_ROUTE = "login"

SessionListener = Callable[[str, Optional[AuthSession]], None]


class AuthGateway(Protocol):
    def get_session(self) -> Optional[AuthSession]: ...

    def subscribe(self, listener: SessionListener) -> Any: ...

    def sign_out(self) -> None: ...


class SessionGuard:
    def __init__(self, gateway: AuthGateway, navigate: Callable[..., None]):
        self._gateway = gateway
        self._navigate = navigate
        self._lock = threading.Lock()
        self._subscription = None
        self._notified = False
        self._owner_thread = threading.get_ident()
        self._redirect_pending = False
        self.status: GuardStatus = "CHECKING"
        self.session: Optional[AuthSession] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == "AUTHENTICATED"

    @property
    def email(self) -> str:
        return self.session.email if self.session else ""

    def activate(self) -> GuardStatus:
        """Subscribe to session changes, then resolve the initial session."""
        try:
            self._subscription = self._gateway.subscribe(self.handle_event)
        except Exception as e:
            log.warning(f"Session subscription failed, treating as signed out: {e}")
            self._apply(None)
            return self.status

        try:
            initial = self._gateway.get_session()
        except Exception as e:
            # A failed lookup is indistinguishable from "no session" here.
            log.warning(f"Session lookup failed, treating as signed out: {e}")
            initial = None
        self.resolve_initial(initial)
        return self.status

    def resolve_initial(self, session: Optional[AuthSession]) -> None:
        with self._lock:
            if self._notified:
                log.debug("Initial session answer ignored, a notification already arrived")
                return
            self._apply(session)

    def handle_event(self, event: str, session: Optional[AuthSession]) -> None:
        with self._lock:
            self._notified = True
            if event == SIGNED_OUT:
                session = None
            log.info(f"Auth event {event} (session present: {session is not None})")
            self._apply(session)

    def sign_out(self) -> None:
        """Ask the backend to end the session. The SIGNED_OUT notification moves the guard."""
        self._gateway.sign_out()

    def settle_navigation(self) -> None:
        """Perform a redirect recorded off the script thread."""
        with self._lock:
            pending, self._redirect_pending = self._redirect_pending, False
        if pending and self.status == "UNAUTHENTICATED":
            self._navigate(LOGIN_ROUTE, replace=True)

    def deactivate(self) -> None:
        self.settle_navigation()
        subscription, self._subscription = self._subscription, None
        if subscription is None:
            return
        try:
            subscription.unsubscribe()
        except Exception as e:
            log.error(f"Failed to release session subscription: {e}", exc_info=True)

    def _apply(self, session: Optional[AuthSession]) -> None:
        if session is None:
            was_unauthenticated = self.status == "UNAUTHENTICATED"
            self.session = None
            self.status = "UNAUTHENTICATED"
            if was_unauthenticated:
                return
            if threading.get_ident() == self._owner_thread:
                self._navigate(LOGIN_ROUTE, replace=True)
            else:
                self._redirect_pending = True
            return
        self.session = session
        self.status = "AUTHENTICATED"


@contextmanager
def guarded(gateway: AuthGateway, navigate: Callable[..., None]) -> Iterator[SessionGuard]:
    """Run a protected block with a live guard; the subscription is released on every exit path."""
    guard = SessionGuard(gateway, navigate)
    try:
        guard.activate()
        yield guard
    finally:
        guard.deactivate()
