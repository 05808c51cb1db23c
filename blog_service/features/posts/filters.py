"""Post listing filters.

Turns a ``PostFilterSpec`` plus the caller identity into a predicate tree
and a sort spec, and provides the compiler and cursor codec that bind
those trees to the ``Post`` model.

    spec = PostFilterSpec(text_term="foo", tags=["python"])
    predicate, sort = compile_post_filter(spec, user_id=None)
    # AND(OR(title ~ 'foo', content ~ 'foo'), tags has any ('python',))

Every value coming from the client is validated here, before any query
is issued.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import ColumnElement, select

from blog_service.core.database.predicates import (
    Predicate,
    SqlPredicateCompiler,
    all_of,
    any_of,
    eq,
    has_any,
    icontains,
)
from blog_service.core.exceptions import InvalidFilterException
from blog_service.core.models import Post, PostTag, normalize_tags
from blog_service.core.pagination import CursorCodec, SortDirection, SortSpec
from blog_service.features.posts.schemas import PostFilterSpec

# Sortable fields and the Python type of their values.
POST_SORT_FIELDS: dict[str, type] = {
    "created_at": datetime,
    "updated_at": datetime,
    "title": str,
}
SORT_DIRECTIONS = ("asc", "desc")


def _posts_with_any_tag(tags: Sequence[Any]) -> ColumnElement[bool]:
    return Post.id.in_(select(PostTag.post_id).where(PostTag.tag.in_(tags)))


POST_PREDICATE_COMPILER = SqlPredicateCompiler(
    columns={
        "id": Post.id,
        "title": Post.title,
        "content": Post.content,
        "owner_id": Post.owner_id,
        "category_id": Post.category_id,
        "created_at": Post.created_at,
        "updated_at": Post.updated_at,
    },
    memberships={"tags": _posts_with_any_tag},
)

POST_CURSOR_CODEC = CursorCodec(POST_SORT_FIELDS)


def _parse_uuid(field: str, raw: str) -> UUID:
    try:
        return UUID(raw.strip())
    except ValueError:
        raise InvalidFilterException(
            field=field,
            detail=f"{field} must be a valid UUID",
            value=raw,
        ) from None


def compile_sort(spec: PostFilterSpec) -> SortSpec:
    """Validate the requested ordering.

    Raises:
        InvalidFilterException: If the sort field or direction is unsupported.
    """
    if spec.sort_field not in POST_SORT_FIELDS:
        raise InvalidFilterException(
            field="sort_by",
            detail=f"sort_by must be one of: {', '.join(POST_SORT_FIELDS)}",
            value=spec.sort_field,
        )
    direction = spec.sort_direction.lower()
    if direction not in SORT_DIRECTIONS:
        raise InvalidFilterException(
            field="sort_order",
            detail="sort_order must be 'asc' or 'desc'",
            value=spec.sort_direction,
        )
    return SortSpec(field=spec.sort_field, direction=cast("SortDirection", direction))


def compile_post_filter(
    spec: PostFilterSpec,
    user_id: UUID | None,
) -> tuple[Predicate, SortSpec]:
    """Compile a post query into a predicate tree and sort spec.

    Args:
        spec: Requested filters and ordering.
        user_id: Verified caller id, None for anonymous callers.

    Returns:
        ``(predicate, sort)``. With no filters the predicate matches all posts.

    Raises:
        InvalidFilterException: On malformed ids, ``mine_only`` without a
            caller, or an unsupported ordering.
    """
    clauses: list[Predicate] = []

    term = (spec.text_term or "").strip()
    if term:
        clauses.append(any_of(icontains("title", term), icontains("content", term)))

    if spec.category_id is not None:
        clauses.append(eq("category_id", _parse_uuid("category_id", spec.category_id)))

    if spec.mine_only:
        if user_id is None:
            raise InvalidFilterException(
                field="mine_only",
                detail="mine_only requires an authenticated caller",
            )
        clauses.append(eq("owner_id", user_id))
    elif spec.owner_id is not None:
        clauses.append(eq("owner_id", _parse_uuid("owner_id", spec.owner_id)))

    tags = normalize_tags(spec.tags)
    if tags:
        clauses.append(has_any("tags", tags))

    return all_of(*clauses), compile_sort(spec)


__all__ = [
    "POST_CURSOR_CODEC",
    "POST_PREDICATE_COMPILER",
    "POST_SORT_FIELDS",
    "SORT_DIRECTIONS",
    "compile_post_filter",
    "compile_sort",
]
