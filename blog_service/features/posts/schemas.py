"""Pydantic schemas for Posts API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_service.core.models import TAG_MAX_LENGTH, normalize_tags
from blog_service.features.categories.schemas import CategorySummary
from blog_service.features.users.schemas import UserSummary

MAX_TAGS_PER_POST = 20


def _validate_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned = normalize_tags(tags)
    if len(cleaned) > MAX_TAGS_PER_POST:
        raise ValueError(f"at most {MAX_TAGS_PER_POST} tags are allowed")
    too_long = [tag for tag in cleaned if len(tag) > TAG_MAX_LENGTH]
    if too_long:
        raise ValueError(f"tags must be at most {TAG_MAX_LENGTH} characters")
    return cleaned


class PostCreate(BaseModel):
    """Schema for creating a post.

    Example:
        ```json
        {
            "title": "Keyset pagination",
            "content": "Why OFFSET does not scale...",
            "category_id": "0194b2c5-7c1e-7a40-9a8e-2f1f3c6d9b10",
            "tags": ["databases", "api"]
        }
        ```
    """

    title: str = Field(..., min_length=1, max_length=200, description="Post title")
    content: str = Field(..., min_length=1, description="Post body")
    category_id: UUID = Field(..., description="Category the post is filed under")
    tags: list[str] = Field(default_factory=list, description="Tag names")

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, v: list[str]) -> list[str]:
        return _validate_tags(v) or []


class PostUpdate(BaseModel):
    """Schema for updating a post.

    All fields are optional for partial updates; ``tags`` replaces the
    whole tag set when given.
    """

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    category_id: UUID | None = None
    tags: list[str] | None = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return _validate_tags(v)


class PostResponse(BaseModel):
    """Schema for post responses in listings."""

    id: UUID
    title: str
    content: str
    tags: list[str]
    category_id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostDetailResponse(PostResponse):
    """Post with its category and owner."""

    category: CategorySummary
    owner: UserSummary


class PostFilterSpec(BaseModel):
    """Declarative post listing query.

    Values arrive as given by the client; ``compile_post_filter`` validates
    them and turns them into a predicate tree.

    Attributes:
        text_term: Case-insensitive substring matched against title or content.
        category_id: Only posts in this category.
        owner_id: Only posts owned by this user.
        mine_only: Only posts owned by the caller (overrides owner_id).
        tags: Only posts carrying at least one of these tags.
        sort_field: Primary sort field.
        sort_direction: ``asc`` or ``desc``.
    """

    text_term: str | None = None
    category_id: str | None = None
    owner_id: str | None = None
    mine_only: bool = False
    tags: list[str] = Field(default_factory=list)
    sort_field: str = "created_at"
    sort_direction: str = "desc"

    model_config = ConfigDict(frozen=True)
