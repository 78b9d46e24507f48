from dataclasses import asdict, dataclass
from typing import Any, Dict

STATS_LOAD_FAILED = "Could not load dashboard data. Please refresh the page."


@dataclass(frozen=True)
class DashboardStats:
    """Counters shown on the overview screen."""
    total_posts: int = 0
    published_posts: int = 0
    draft_posts: int = 0
    total_messages: int = 0
    unread_messages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_dashboard_stats(post_repo: Any, message_repo: Any) -> DashboardStats:
    """Raises StoreError if any count fails."""
    return DashboardStats(
        total_posts=post_repo.count_posts(),
        published_posts=post_repo.count_posts(published=True),
        draft_posts=post_repo.count_posts(published=False),
        total_messages=message_repo.count_messages(),
        unread_messages=message_repo.count_messages(unread_only=True),
    )
