"""Delete flows for the listing screens, with local list updates."""

import logging
from typing import Any, List, Optional, Sequence, Tuple, TypeVar

from infrastructure.repositories.supabase_table import StoreError

log = logging.getLogger(__name__)

T = TypeVar("T")

MESSAGE_DELETE_FAILED = "Could not delete the message. Please try again."
POST_DELETE_FAILED = "Could not delete the post. Please try again."


def _without(rows: Sequence[T], row_id: Any) -> List[T]:
    return [row for row in rows if getattr(row, "id", None) != row_id]


def delete_message(messages: Sequence[T], message_id: Any, repo: Any) -> Tuple[List[T], Optional[str]]:
    """Delete remotely, then drop the row from the displayed list. List is unchanged on failure."""
    try:
        repo.delete_message(message_id)
    except StoreError as e:
        log.warning(f"Message {message_id} delete failed: {e}")
        return list(messages), MESSAGE_DELETE_FAILED
    return _without(messages, message_id), None


def delete_post(posts: Sequence[T], post_id: Any, repo: Any) -> Tuple[List[T], Optional[str]]:
    try:
        repo.delete_post(post_id)
    except StoreError as e:
        log.warning(f"Post {post_id} delete failed: {e}")
        return list(posts), POST_DELETE_FAILED
    return _without(posts, post_id), None
