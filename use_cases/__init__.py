"""Application layer contracts for orchestrating high-level flows."""

from .auth_flow import AuthFlowResult, AuthFlowStatus, protected_view, redirect_if_signed_in
from .bootstrap import StartupResult, StartupStatus, run_startup
from .dashboard_stats import DashboardStats, load_dashboard_stats
from .domain_models import Message, Post
from .post_flow import SaveResult, SaveStatus, submit_post
from .post_lifecycle import PublicationState, SaveIntent, SlugLatch, SlugMode, resolve_publication, suggest_slug
from .session_guard import SessionGuard, guarded
from .session_models import AuthSession, GuardStatus

__all__ = [
    "AuthFlowResult",
    "AuthFlowStatus",
    "AuthSession",
    "DashboardStats",
    "GuardStatus",
    "Message",
    "Post",
    "PublicationState",
    "SaveIntent",
    "SaveResult",
    "SaveStatus",
    "SessionGuard",
    "SlugLatch",
    "SlugMode",
    "StartupResult",
    "StartupStatus",
    "guarded",
    "load_dashboard_stats",
    "protected_view",
    "redirect_if_signed_in",
    "resolve_publication",
    "run_startup",
    "submit_post",
    "suggest_slug",
]
