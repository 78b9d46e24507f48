from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

POST_LIST_COLUMNS = "id, created_at, title, is_published, published_at, slug"


@dataclass(frozen=True)
class Post:
    """DTO for a blog post row."""
    id: str
    title: str
    slug: str
    is_published: bool = False
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    content: str = ""
    excerpt: str = ""
    cover_image_url: str = ""
    tags: List[str] = field(default_factory=list)
    meta_title: str = ""
    meta_description: str = ""
    author_id: Optional[str] = None
    author_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Post":
        tags = row.get("tags")
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            slug=row.get("slug") or "",
            is_published=bool(row.get("is_published")),
            published_at=row.get("published_at"),
            created_at=row.get("created_at"),
            content=row.get("content") or "",
            excerpt=row.get("excerpt") or "",
            cover_image_url=row.get("cover_image_url") or "",
            tags=list(tags) if isinstance(tags, list) else [],
            meta_title=row.get("meta_title") or "",
            meta_description=row.get("meta_description") or "",
            author_id=row.get("author_id"),
            author_name=row.get("author_name"),
        )

    @property
    def status_label(self) -> str:
        return "Published" if self.is_published else "Draft"


@dataclass(frozen=True)
class Message:
    """DTO for an inbound contact submission."""
    id: int
    created_at: str
    name: str
    email: str
    message: str
    subject: Optional[str] = None
    read: bool = False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Message":
        return cls(
            id=row["id"],
            created_at=row.get("created_at") or "",
            name=row.get("name") or "",
            email=row.get("email") or "",
            message=row.get("message") or "",
            subject=row.get("subject") or None,
            read=bool(row.get("read")),
        )

    @property
    def subject_label(self) -> str:
        return self.subject or "(No Subject)"
