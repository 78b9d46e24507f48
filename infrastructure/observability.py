"""
Centralized Observability Infrastructure.
Configures logging and Sentry for the dashboard from environment variables.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

import sentry_sdk

log = logging.getLogger(__name__)

# Supabase access/refresh tokens are JWTs; anon keys are JWTs too.
SENSITIVE_PATTERNS = [
    re.compile(r"eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+"),
    re.compile(r"[a-zA-Z0-9_\-]{40,}"),
    re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}"),
]

SENSITIVE_KEYS = {"password", "access_token", "refresh_token", "apikey", "authorization"}

NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "urllib3")


def mask_string(val: str) -> str:
    for pattern in SENSITIVE_PATTERNS:
        val = pattern.sub("[REDACTED]", val)
    return val


def scrub(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else scrub(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [scrub(i) for i in obj]
    if isinstance(obj, str):
        return mask_string(obj)
    return obj


def scrub_event(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """Sentry before_send hook: masks tokens, keys and e-mails in frames, breadcrumbs and messages."""
    for exc in event.get("exception", {}).get("values", []):
        for frame in exc.get("stacktrace", {}).get("frames", []):
            if "vars" in frame:
                frame["vars"] = scrub(frame["vars"])
        if isinstance(exc.get("value"), str):
            exc["value"] = mask_string(exc["value"])

    for crumb in event.get("breadcrumbs", {}).get("values", []):
        if isinstance(crumb.get("message"), str):
            crumb["message"] = mask_string(crumb["message"])
        if "data" in crumb:
            crumb["data"] = scrub(crumb["data"])

    if isinstance(event.get("logentry"), dict) and isinstance(event["logentry"].get("message"), str):
        event["logentry"]["message"] = mask_string(event["logentry"]["message"])

    return event


def setup_observability() -> None:
    """
    Initializes logging and Sentry (if SENTRY_DSN is set).
    Safe to call on every Streamlit rerun.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    # Format: 2026-10-18 15:00:00 | INFO    | module.name | The message
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        log.debug("SENTRY_DSN not provided. Running without Sentry.")
        return
    if sentry_sdk.get_client().is_active():
        return

    sentry_env = os.getenv("SENTRY_ENV", "development")
    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=sentry_env,
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.2")),
        send_default_pii=False,
        before_send=scrub_event,
    )
    log.info(f"Sentry SDK initialized (env: {sentry_env})")


def tag_user(user_id: Optional[str], screen: Optional[str] = None) -> None:
    """Attach the signed-in user id (never the e-mail) and screen to Sentry events."""
    if not sentry_sdk.get_client().is_active():
        return
    sentry_sdk.set_user({"id": user_id} if user_id else None)
    if screen:
        sentry_sdk.set_tag("app.screen", screen)
