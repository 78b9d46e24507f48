"""Create / edit orchestration for the post editor (application layer)."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Literal, Mapping, Optional

from infrastructure.repositories.supabase_table import StoreError
from use_cases.domain_models import Post
from use_cases.post_form import EDITOR_FIELDS, validate_post_form
from use_cases.post_lifecycle import (
    MissingAuthorError,
    PublicationState,
    SaveIntent,
    build_create_payload,
    build_update_payload,
    tags_to_text,
)
from use_cases.session_models import AuthSession

log = logging.getLogger(__name__)

SaveStatus = Literal["SAVED", "INVALID", "FAILED"]


@dataclass(frozen=True)
class SaveResult:
    """Result contract for one editor submission."""

    status: SaveStatus
    message: str = ""
    field_errors: Dict[str, str] = field(default_factory=dict)
    post: Optional[Post] = None

    @property
    def ok(self) -> bool:
        return self.status == "SAVED"


def form_values_from_post(post: Post) -> Dict[str, str]:
    """Editor values for an existing row; tags joined for editing."""
    return {
        "title": post.title,
        "slug": post.slug,
        "content": post.content,
        "excerpt": post.excerpt,
        "cover_image_url": post.cover_image_url,
        "tags": tags_to_text(post.tags),
        "meta_title": post.meta_title,
        "meta_description": post.meta_description,
    }


def blank_form_values() -> Dict[str, str]:
    return {name: "" for name in EDITOR_FIELDS}


def submit_post(
    values: Mapping[str, Any],
    intent: SaveIntent,
    *,
    repo: Any,
    session: Optional[AuthSession],
    existing: Optional[Post] = None,
    author_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SaveResult:
    """Validate and persist the editor values. Creation when ``existing`` is None."""
    form, errors = validate_post_form(values)
    if form is None:
        return SaveResult(status="INVALID", field_errors=errors)

    fields = form.to_fields()
    verb = "create" if existing is None else "update"
    try:
        if existing is None:
            payload = build_create_payload(
                fields,
                intent,
                author_id=session.user_id if session is not None else None,
                author_name=author_name,
                now=now,
            )
            saved = repo.insert_post(payload)
        else:
            current = PublicationState(existing.is_published, existing.published_at)
            payload = build_update_payload(fields, intent, current, now=now)
            saved = repo.update_post(existing.id, payload)
    except MissingAuthorError as e:
        log.warning(f"Post create refused: {e}")
        return SaveResult(status="FAILED", message=str(e))
    except StoreError as e:
        return SaveResult(status="FAILED", message=f"Failed to {verb} post: {e}")

    log.info(f"Post {saved.id} {verb}d with intent {intent.value} (published={saved.is_published})")
    return SaveResult(
        status="SAVED",
        message=f'Post "{saved.title}" has been {verb}d successfully!',
        post=saved,
    )
