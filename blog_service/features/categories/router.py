"""Categories API router."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_service.core.dependencies import get_db_session
from blog_service.features.categories.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from blog_service.features.categories.service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_service() -> CategoryService:
    """Get category service dependency."""
    return CategoryService()


@router.get("", response_model=list[CategoryResponse], summary="List categories")
async def list_categories(
    name: Annotated[
        str | None,
        Query(max_length=100, description="Case-insensitive substring of the name"),
    ] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
    session: AsyncSession = Depends(get_db_session),
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    """List categories, newest first."""
    categories = await service.list_categories(session, name=name, limit=limit, offset=offset)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    data: CategoryCreate,
    session: AsyncSession = Depends(get_db_session),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Create a category with a unique name."""
    category = await service.create_category(session, data)
    await session.commit()
    return CategoryResponse.model_validate(category)


@router.get("/{category_id}", response_model=CategoryResponse, summary="Get category by ID")
async def get_category(
    category_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Get a category."""
    return CategoryResponse.model_validate(await service.get_category(session, category_id))


@router.patch("/{category_id}", response_model=CategoryResponse, summary="Update category")
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    session: AsyncSession = Depends(get_db_session),
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Update a category."""
    category = await service.update_category(session, category_id, data)
    await session.commit()
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete category",
)
async def delete_category(
    category_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    service: CategoryService = Depends(get_category_service),
) -> Response:
    """Delete a category that has no posts."""
    await service.delete_category(session, category_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
