import threading
from unittest.mock import MagicMock

import pytest

from use_cases.session_guard import LOGIN_ROUTE, SessionGuard, guarded
from use_cases.session_models import AuthSession


ALICE = AuthSession(user_id="u-1", email="alice@example.com", access_token="t")


class FakeGateway:
    """Records the listener so tests can push notifications at chosen moments."""

    def __init__(self, session=None, on_get_session=None):
        self.session = session
        self.on_get_session = on_get_session
        self.listener = None
        self.subscription = MagicMock()
        self.sign_out_calls = 0

    def subscribe(self, listener):
        self.listener = listener
        return self.subscription

    def get_session(self):
        if self.on_get_session:
            self.on_get_session(self)
        return self.session

    def sign_out(self):
        self.sign_out_calls += 1
        self.listener("SIGNED_OUT", None)


def test_guard_starts_in_checking():
    guard = SessionGuard(FakeGateway(), MagicMock())
    assert guard.status == "CHECKING"
    assert guard.is_authenticated is False


def test_activate_with_session_authenticates_without_navigation():
    navigate = MagicMock()
    guard = SessionGuard(FakeGateway(session=ALICE), navigate)

    assert guard.activate() == "AUTHENTICATED"
    assert guard.session == ALICE
    assert guard.email == "alice@example.com"
    navigate.assert_not_called()


def test_activate_without_session_redirects_once_with_replace():
    navigate = MagicMock()
    guard = SessionGuard(FakeGateway(session=None), navigate)

    assert guard.activate() == "UNAUTHENTICATED"
    navigate.assert_called_once_with(LOGIN_ROUTE, replace=True)


def test_subscription_registered_before_initial_query():
    order = []
    gateway = MagicMock()
    gateway.subscribe.side_effect = lambda listener: order.append("subscribe")
    gateway.get_session.side_effect = lambda: order.append("get_session")

    SessionGuard(gateway, MagicMock()).activate()

    assert order == ["subscribe", "get_session"]


def test_notification_during_pending_query_wins():
    # SIGNED_OUT arrives while get_session is still in flight; the stale answer must be ignored.
    gateway = FakeGateway(session=ALICE, on_get_session=lambda gw: gw.listener("SIGNED_OUT", None))
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)

    guard.activate()

    assert guard.status == "UNAUTHENTICATED"
    assert guard.session is None
    navigate.assert_called_once_with(LOGIN_ROUTE, replace=True)


def test_sign_in_notification_during_pending_query_wins():
    gateway = FakeGateway(session=None, on_get_session=lambda gw: gw.listener("SIGNED_IN", ALICE))
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)

    guard.activate()

    assert guard.is_authenticated
    navigate.assert_not_called()


def test_signed_out_event_after_authentication_redirects():
    gateway = FakeGateway(session=ALICE)
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)
    guard.activate()

    gateway.listener("SIGNED_OUT", None)

    assert guard.status == "UNAUTHENTICATED"
    navigate.assert_called_once_with(LOGIN_ROUTE, replace=True)


def test_signed_out_event_clears_session_even_if_payload_present():
    gateway = FakeGateway(session=ALICE)
    guard = SessionGuard(gateway, MagicMock())
    guard.activate()

    gateway.listener("SIGNED_OUT", ALICE)

    assert guard.session is None
    assert guard.status == "UNAUTHENTICATED"


def test_repeated_signed_out_navigates_once():
    gateway = FakeGateway(session=ALICE)
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)
    guard.activate()

    gateway.listener("SIGNED_OUT", None)
    gateway.listener("SIGNED_OUT", None)

    navigate.assert_called_once()


def test_token_refresh_keeps_authenticated_and_updates_session():
    gateway = FakeGateway(session=ALICE)
    guard = SessionGuard(gateway, MagicMock())
    guard.activate()

    refreshed = AuthSession(user_id="u-1", email="alice@example.com", access_token="t2")
    gateway.listener("TOKEN_REFRESHED", refreshed)

    assert guard.is_authenticated
    assert guard.session.access_token == "t2"


def test_failed_session_lookup_is_treated_as_signed_out():
    gateway = MagicMock()
    gateway.get_session.side_effect = RuntimeError("network down")
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)

    assert guard.activate() == "UNAUTHENTICATED"
    navigate.assert_called_once_with(LOGIN_ROUTE, replace=True)


def test_failed_subscription_is_treated_as_signed_out():
    gateway = MagicMock()
    gateway.subscribe.side_effect = RuntimeError("boom")
    guard = SessionGuard(gateway, MagicMock())

    assert guard.activate() == "UNAUTHENTICATED"
    gateway.get_session.assert_not_called()


def test_sign_out_delegates_to_gateway():
    gateway = FakeGateway(session=ALICE)
    guard = SessionGuard(gateway, MagicMock())
    guard.activate()

    guard.sign_out()

    assert gateway.sign_out_calls == 1
    assert guard.status == "UNAUTHENTICATED"


def test_deactivate_unsubscribes_once():
    gateway = FakeGateway(session=ALICE)
    guard = SessionGuard(gateway, MagicMock())
    guard.activate()

    guard.deactivate()
    guard.deactivate()

    gateway.subscription.unsubscribe.assert_called_once()


def test_deactivate_logs_unsubscribe_failure(caplog):
    gateway = FakeGateway(session=ALICE)
    gateway.subscription.unsubscribe.side_effect = RuntimeError("already closed")
    guard = SessionGuard(gateway, MagicMock())
    guard.activate()

    guard.deactivate()

    assert "Failed to release session subscription" in caplog.text


def test_guarded_releases_subscription_on_exception():
    gateway = FakeGateway(session=ALICE)

    with pytest.raises(ValueError):
        with guarded(gateway, MagicMock()) as guard:
            assert guard.is_authenticated
            raise ValueError("render failed")

    gateway.subscription.unsubscribe.assert_called_once()


def test_guarded_releases_subscription_on_normal_exit():
    gateway = FakeGateway(session=None)

    with guarded(gateway, MagicMock()) as guard:
        assert guard.status == "UNAUTHENTICATED"

    gateway.subscription.unsubscribe.assert_called_once()


def _deliver_on_other_thread(listener, event, session):
    worker = threading.Thread(target=listener, args=(event, session))
    worker.start()
    worker.join()


def test_signed_out_from_refresh_thread_defers_navigation_to_script_thread():
    gateway = FakeGateway(session=ALICE)
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)
    guard.activate()

    _deliver_on_other_thread(gateway.listener, "SIGNED_OUT", None)

    assert guard.status == "UNAUTHENTICATED"
    navigate.assert_not_called()

    guard.settle_navigation()
    navigate.assert_called_once_with(LOGIN_ROUTE, replace=True)
    guard.settle_navigation()
    navigate.assert_called_once()


def test_deactivate_applies_deferred_navigation():
    gateway = FakeGateway(session=ALICE)
    navigate = MagicMock()

    with guarded(gateway, navigate):
        _deliver_on_other_thread(gateway.listener, "SIGNED_OUT", None)
        navigate.assert_not_called()

    navigate.assert_called_once_with(LOGIN_ROUTE, replace=True)


def test_deferred_navigation_dropped_when_session_comes_back():
    gateway = FakeGateway(session=ALICE)
    navigate = MagicMock()
    guard = SessionGuard(gateway, navigate)
    guard.activate()

    _deliver_on_other_thread(gateway.listener, "SIGNED_OUT", None)
    _deliver_on_other_thread(gateway.listener, "SIGNED_IN", ALICE)
    guard.settle_navigation()

    assert guard.is_authenticated
    navigate.assert_not_called()
