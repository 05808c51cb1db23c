"""Core database package: declarative base, mixins and predicate trees.

Base Classes and Mixins:
    - Base: Declarative base with consistent constraint naming
    - UUIDv7PKMixin: Time-sortable UUID v7 primary key
    - TimestampMixin: created_at, updated_at tracking
    - UUIDTimestampedBase: UUID v7 PK + timestamps

Predicates:
    - Comparison / And / Or: explicit predicate tree nodes
    - all_of / any_of: structurally safe composition
    - SqlPredicateCompiler: predicate tree to SQLAlchemy expression
"""

from __future__ import annotations

from blog_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    TimestampMixin,
    UUIDTimestampedBase,
    UUIDv7PKMixin,
    generate_uuid7,
)
from blog_service.core.database.predicates import (
    MATCH_ALL,
    And,
    Comparison,
    Or,
    Predicate,
    SqlPredicateCompiler,
    all_of,
    any_of,
    eq,
    gt,
    has_any,
    icontains,
    lt,
)

__all__ = [
    "MATCH_ALL",
    "NAMING_CONVENTION",
    "And",
    "Base",
    "Comparison",
    "Or",
    "Predicate",
    "SqlPredicateCompiler",
    "TimestampMixin",
    "UUIDTimestampedBase",
    "UUIDv7PKMixin",
    "all_of",
    "any_of",
    "eq",
    "generate_uuid7",
    "gt",
    "has_any",
    "icontains",
    "lt",
]
