"""Database models package.

Import all models here so the declarative metadata knows every table.
"""

from __future__ import annotations

from .category import Category
from .post import TAG_MAX_LENGTH, Post, PostTag, normalize_tags
from .user import User

__all__ = ["TAG_MAX_LENGTH", "Category", "Post", "PostTag", "User", "normalize_tags"]
