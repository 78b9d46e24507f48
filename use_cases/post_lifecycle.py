"""
Publication lifecycle of a blog post.

A post is either a draft or published. Every save goes through the same
payload builders; only ``resolve_publication`` decides the
``(is_published, published_at)`` pair, so the two fields never disagree.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Blank values of these are left out of inserts so the table defaults apply.
OPTIONAL_POST_FIELDS = ("content", "excerpt", "cover_image_url", "meta_title", "meta_description")


class MissingAuthorError(Exception):
    pass


class SaveIntent(str, Enum):
    SAVE = "save"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"


@dataclass(frozen=True)
class PublicationState:
    is_published: bool = False
    published_at: Optional[str] = None


DRAFT = PublicationState()


def _now_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def resolve_publication(
    intent: SaveIntent,
    current: PublicationState = DRAFT,
    now: Optional[datetime] = None,
) -> PublicationState:
    """Compute the publication pair for a save with the given intent."""
    if intent == SaveIntent.PUBLISH:
        return PublicationState(is_published=True, published_at=_now_iso(now))
    if intent == SaveIntent.UNPUBLISH:
        return PublicationState(is_published=False, published_at=None)
    # SAVE keeps the state; a row stored without its stamp gets one.
    if current.is_published:
        return PublicationState(is_published=True, published_at=current.published_at or _now_iso(now))
    return DRAFT


def suggest_slug(title: str) -> str:
    slug = (title or "").lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug).strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


class SlugMode(str, Enum):
    UNTOUCHED = "untouched"
    AUTO = "auto"
    MANUAL = "manual"


@dataclass
class SlugLatch:
    """
    Tracks whether the slug still follows the title.

    UNTOUCHED -> AUTO on the first title change, anything -> MANUAL on a direct
    slug edit. MANUAL is terminal for the editing session.
    """

    slug: str = ""
    mode: SlugMode = SlugMode.UNTOUCHED

    @property
    def follows_title(self) -> bool:
        return self.mode != SlugMode.MANUAL

    def on_title_change(self, title: str) -> str:
        if self.follows_title:
            self.slug = suggest_slug(title)
            self.mode = SlugMode.AUTO
        return self.slug

    def on_slug_edit(self, slug: str) -> str:
        self.slug = slug
        self.mode = SlugMode.MANUAL
        return self.slug


def tags_to_text(tags: Optional[Iterable[str]]) -> str:
    if not tags:
        return ""
    return ", ".join(tags)


def text_to_tags(text: Optional[str]) -> List[str]:
    if not text or not text.strip():
        return []
    return [tag.strip() for tag in text.split(",") if tag.strip()]


@dataclass(frozen=True)
class PostFields:
    """Validated editor values, tags already split."""
    title: str
    slug: str
    content: str = ""
    excerpt: str = ""
    cover_image_url: str = ""
    tags: List[str] = field(default_factory=list)
    meta_title: str = ""
    meta_description: str = ""

    def as_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "content": self.content,
            "excerpt": self.excerpt,
            "cover_image_url": self.cover_image_url,
            "tags": list(self.tags),
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
        }


def build_create_payload(
    fields: PostFields,
    intent: SaveIntent,
    author_id: Optional[str],
    author_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    if not author_id:
        raise MissingAuthorError("Could not identify the author. Please try logging in again.")

    publication = resolve_publication(intent, DRAFT, now)
    payload = fields.as_payload()
    for key in OPTIONAL_POST_FIELDS:
        if not payload.get(key):
            del payload[key]

    payload.update(
        author_id=author_id,
        author_name=author_name,
        is_published=publication.is_published,
        published_at=publication.published_at,
        created_at=_now_iso(now),
    )
    return payload


def build_update_payload(
    fields: PostFields,
    intent: SaveIntent,
    current: PublicationState,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    publication = resolve_publication(intent, current, now)
    payload = fields.as_payload()
    payload.update(
        is_published=publication.is_published,
        published_at=publication.published_at,
    )
    return payload
