"""Pydantic schemas for Categories API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryBase(BaseModel):
    """Base schema for Category with common fields."""

    name: str = Field(..., min_length=1, max_length=100, description="Unique category name")
    description: str | None = Field(None, max_length=2000, description="Category description")

    model_config = ConfigDict(str_strip_whitespace=True)


class CategoryCreate(CategoryBase):
    """Schema for creating a category.

    Example:
        ```json
        {"name": "Technology", "description": "Posts about software"}
        ```
    """


class CategoryUpdate(BaseModel):
    """Schema for updating a category. All fields are optional."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class CategorySummary(BaseModel):
    """Category fields embedded in post details."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryResponse(CategoryBase):
    """Schema for category responses."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
