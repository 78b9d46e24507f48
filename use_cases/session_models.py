"""Session DTOs shared across application layers."""

from dataclasses import dataclass
from typing import Any, Literal, Optional

GuardStatus = Literal["CHECKING", "AUTHENTICATED", "UNAUTHENTICATED"]

# Events pushed by the Supabase auth client.
SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str
    access_token: str = ""

    @classmethod
    def from_supabase(cls, session: Any) -> Optional["AuthSession"]:
        """Project a supabase-py Session onto the dashboard's view of it."""
        if session is None:
            return None
        user = getattr(session, "user", None)
        if user is None or not getattr(user, "id", None):
            return None
        return cls(
            user_id=str(user.id),
            email=getattr(user, "email", None) or "",
            access_token=getattr(session, "access_token", None) or "",
        )


def display_email(session: Optional[AuthSession]) -> str:
    return session.email if session is not None and session.email else "unknown"
