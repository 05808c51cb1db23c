"""Post model and its tag rows."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_service.core.database import Base, UUIDTimestampedBase

if TYPE_CHECKING:
    from .category import Category
    from .user import User

TAG_MAX_LENGTH = 50


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Strip tags, drop empty ones and collapse duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


class PostTag(Base):
    """One tag attached to one post."""

    __tablename__ = "post_tags"

    post_id: Mapped[UUID] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True,
    )
    tag: Mapped[str] = mapped_column(String(TAG_MAX_LENGTH), primary_key=True, index=True)

    def __repr__(self) -> str:
        return f"<PostTag(post_id={self.post_id}, tag={self.tag!r})>"


class Post(UUIDTimestampedBase):
    """Blog post owned by a user and filed under a category.

    Listings are ordered by ``(created_at, id)``, ``(updated_at, id)`` or
    ``(title, id)``; each pair has a composite index.
    """

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    owner_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True,
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", lazy="raise")
    category: Mapped["Category"] = relationship("Category", lazy="raise")
    tag_links: Mapped[list[PostTag]] = relationship(
        PostTag,
        cascade="all, delete-orphan",
        order_by=PostTag.tag,
        lazy="selectin",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_posts_created_at_id", "created_at", "id"),
        Index("ix_posts_updated_at_id", "updated_at", "id"),
        Index("ix_posts_title_id", "title", "id"),
    )

    @property
    def tags(self) -> list[str]:
        """Tag names attached to this post."""
        return [link.tag for link in self.tag_links]

    @tags.setter
    def tags(self, values: Iterable[str]) -> None:
        wanted = normalize_tags(values)
        kept = [link for link in self.tag_links if link.tag in wanted]
        existing = {link.tag for link in kept}
        self.tag_links = kept + [PostTag(tag=tag) for tag in wanted if tag not in existing]

    def __repr__(self) -> str:
        """String representation of Post."""
        return f"<Post(id={self.id}, title={self.title!r}, owner_id={self.owner_id})>"
