"""Predicate trees for composable query filters.

Filters are built as an explicit tree of nodes rather than flat key/value
maps:

- ``Comparison``: a leaf (``field op value``)
- ``And``: every child must hold (an empty ``And`` matches everything)
- ``Or``: at least one child must hold

Composition only ever nests, so two independent disjunctions joined with
``all_of`` stay two separate OR-groups under one AND:

    text = any_of(icontains("title", "foo"), icontains("content", "foo"))
    seek = any_of(lt("created_at", t), all_of(eq("created_at", t), lt("id", i)))
    all_of(text, seek)
    # AND(OR(title ~ 'foo', content ~ 'foo'), OR(created_at < t, AND(...)))

Trees are store-agnostic; ``SqlPredicateCompiler`` turns them into
SQLAlchemy expressions for a particular model.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from sqlalchemy import ColumnElement, and_, false, or_, true

Operator = Literal["eq", "lt", "gt", "icontains", "has_any"]

_OP_SYMBOLS = {"eq": "=", "lt": "<", "gt": ">", "icontains": "~", "has_any": "has any"}


@dataclass(frozen=True, slots=True)
class Comparison:
    """Leaf predicate comparing one field against a value."""

    field: str
    op: Operator
    value: Any

    def __str__(self) -> str:
        return f"{self.field} {_OP_SYMBOLS[self.op]} {self.value!r}"


@dataclass(frozen=True, slots=True)
class And:
    """Conjunction of child predicates."""

    children: tuple[Predicate, ...] = ()

    def __str__(self) -> str:
        if not self.children:
            return "TRUE"
        return f"AND({', '.join(str(c) for c in self.children)})"


@dataclass(frozen=True, slots=True)
class Or:
    """Disjunction of child predicates."""

    children: tuple[Predicate, ...]

    def __str__(self) -> str:
        return f"OR({', '.join(str(c) for c in self.children)})"


Predicate: TypeAlias = Comparison | And | Or

MATCH_ALL: Predicate = And()


def all_of(*predicates: Predicate) -> Predicate:
    """Combine predicates with AND.

    Nested ``And`` nodes are flattened into their parent; ``Or`` nodes are
    kept as single children, never merged with each other.
    """
    children: list[Predicate] = []
    for predicate in predicates:
        if isinstance(predicate, And):
            children.extend(predicate.children)
        else:
            children.append(predicate)
    if len(children) == 1:
        return children[0]
    return And(tuple(children))


def any_of(*predicates: Predicate) -> Predicate:
    """Combine predicates with OR.

    Nested ``Or`` nodes are flattened into their parent. Raises
    ``ValueError`` when called without predicates.
    """
    if not predicates:
        raise ValueError("any_of() requires at least one predicate")
    children: list[Predicate] = []
    for predicate in predicates:
        if isinstance(predicate, Or):
            children.extend(predicate.children)
        else:
            children.append(predicate)
    if len(children) == 1:
        return children[0]
    return Or(tuple(children))


def eq(field: str, value: Any) -> Comparison:
    """``field == value``."""
    return Comparison(field, "eq", value)


def lt(field: str, value: Any) -> Comparison:
    """``field < value``."""
    return Comparison(field, "lt", value)


def gt(field: str, value: Any) -> Comparison:
    """``field > value``."""
    return Comparison(field, "gt", value)


def icontains(field: str, term: str) -> Comparison:
    """Case-insensitive substring match."""
    return Comparison(field, "icontains", term)


def has_any(field: str, values: Sequence[Any]) -> Comparison:
    """Collection field shares at least one element with ``values``."""
    return Comparison(field, "has_any", tuple(values))


def _escape_like(term: str, escape: str = "\\") -> str:
    return (
        term.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


MembershipBuilder = Callable[[Sequence[Any]], ColumnElement[bool]]


class SqlPredicateCompiler:
    """Compile predicate trees into SQLAlchemy boolean expressions.

    Args:
        columns: Field name to column mapping for scalar comparisons.
        memberships: Field name to builder for ``has_any`` on collection
            fields (e.g. an ``EXISTS``/``IN`` subquery over a child table).

    Example:
        compiler = SqlPredicateCompiler(
            columns={"title": Post.title, "id": Post.id},
            memberships={"tags": lambda values: Post.id.in_(...)},
        )
        stmt = select(Post).where(compiler.compile(predicate))
    """

    def __init__(
        self,
        columns: Mapping[str, Any],
        memberships: Mapping[str, MembershipBuilder] | None = None,
    ) -> None:
        self.columns = dict(columns)
        self.memberships = dict(memberships or {})

    def compile(self, predicate: Predicate) -> ColumnElement[bool]:
        """Compile a predicate tree.

        Raises:
            ValueError: If the tree references an unknown field or operator.
        """
        match predicate:
            case And(children=()):
                return true()
            case And(children=children):
                return and_(*(self.compile(child) for child in children))
            case Or(children=children):
                return or_(*(self.compile(child) for child in children))
            case Comparison(field=field, op="has_any", value=values):
                if field not in self.memberships:
                    raise ValueError(f"No membership builder for field {field!r}")
                if not values:
                    return false()
                return self.memberships[field](values)
            case Comparison(field=field, op=op, value=value):
                column = self._column(field)
                if op == "eq":
                    return column == value
                if op == "lt":
                    return column < value
                if op == "gt":
                    return column > value
                if op == "icontains":
                    pattern = f"%{_escape_like(str(value))}%"
                    return column.ilike(pattern, escape="\\")
                raise ValueError(f"Unsupported operator {op!r}")
        raise ValueError(f"Not a predicate: {predicate!r}")

    def _column(self, field: str) -> Any:
        try:
            return self.columns[field]
        except KeyError:
            raise ValueError(f"Unknown predicate field {field!r}") from None


__all__ = [
    "MATCH_ALL",
    "And",
    "Comparison",
    "Operator",
    "Or",
    "Predicate",
    "SqlPredicateCompiler",
    "all_of",
    "any_of",
    "eq",
    "gt",
    "has_any",
    "icontains",
    "lt",
]
