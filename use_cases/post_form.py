"""Editor form schema for posts."""

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from use_cases.post_lifecycle import SLUG_PATTERN, PostFields, text_to_tags

EDITOR_FIELDS = (
    "title",
    "slug",
    "content",
    "excerpt",
    "cover_image_url",
    "tags",
    "meta_title",
    "meta_description",
)

_URL_ADAPTER = TypeAdapter(AnyUrl)


class PostForm(BaseModel):
    """Values as typed in the editor. Tags are comma-separated text."""

    title: str = Field("", description="Post title")
    slug: str = Field("", description="URL slug")
    content: str = Field("", description="Markdown body")
    excerpt: str = Field("", description="Short summary for previews")
    cover_image_url: str = Field("", description="Cover image URL")
    tags: str = Field("", description="Comma-separated tags")
    meta_title: str = Field("", description="SEO title override")
    meta_description: str = Field("", description="SEO description override")

    @field_validator("*", mode="before")
    @classmethod
    def none_to_blank(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if len(v.strip()) < 3:
            raise ValueError("Title must be at least 3 characters long.")
        return v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Slug is required.")
        if not SLUG_PATTERN.match(v):
            raise ValueError("Slug must be URL-friendly (e.g., 'my-first-post').")
        return v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if v.strip() and len(v.strip()) < 10:
            raise ValueError("Content is too short.")
        return v

    @field_validator("cover_image_url")
    @classmethod
    def validate_cover_image_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            return v
        try:
            _URL_ADAPTER.validate_python(v)
        except ValidationError:
            raise ValueError("Please enter a valid URL.")
        return v

    def to_fields(self) -> PostFields:
        return PostFields(
            title=self.title.strip(),
            slug=self.slug,
            content=self.content,
            excerpt=self.excerpt,
            cover_image_url=self.cover_image_url,
            tags=text_to_tags(self.tags),
            meta_title=self.meta_title,
            meta_description=self.meta_description,
        )


def _strip_prefix(msg: str) -> str:
    # pydantic prefixes ValueError messages with "Value error, "
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg


def validate_post_form(values: Mapping[str, Any]) -> Tuple[Optional[PostForm], Dict[str, str]]:
    """Validate raw editor values. Returns the form or a field -> message map."""
    data = {name: values.get(name) for name in EDITOR_FIELDS}
    try:
        return PostForm(**data), {}
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            field_name = str(err["loc"][0]) if err.get("loc") else "__all__"
            errors.setdefault(field_name, _strip_prefix(err.get("msg", "Invalid value.")))
        return None, errors
