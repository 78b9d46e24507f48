"""Startup orchestration for application bootstrap."""

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import auth
from utils import session_manager

log = logging.getLogger(__name__)

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]
    error: Optional[str] = None


def run_startup() -> StartupResult:
    """Prepare session state and the per-session Supabase client."""
    executed_steps = []

    session_manager.init_session_state()
    executed_steps.append("init_session_state")

    try:
        auth.check_config()
        executed_steps.append("check_config")
        auth.get_client()
        executed_steps.append("get_client")
    except auth.MissingConfigError as e:
        log.error(f"Startup halted: {e}")
        return StartupResult(status="STOP", planned_steps=tuple(executed_steps), error=str(e))

    return StartupResult(status="CONTINUE", planned_steps=tuple(executed_steps))
