"""Cursor encoding and decoding for keyset pagination.

A cursor is an opaque string carrying the sort key of the last row a
client has seen, so the next query can seek directly past it. The sort
key is the pair ``(primary value, id)``; the id breaks ties between rows
sharing the same primary value.

The cursor format is:
1. Compact JSON object ``{"f": field, "d": direction, "v": value, "id": id}``
2. URL-safe base64 without padding

Example payload:
    {"f":"created_at","d":"desc","v":"2025-01-15T10:30:00+00:00","id":"0194..."}

Cursors are stamped with the sort field and direction they were produced
for. A cursor replayed against a different ordering is rejected instead
of silently seeking to a meaningless position.
"""

from __future__ import annotations

import base64
import json
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from blog_service.core.exceptions import InvalidCursorException

SortDirection = Literal["asc", "desc"]

# Tokens longer than this are rejected before decoding. Large enough for a
# 200-character title at its widest JSON escaping (6 bytes per character).
MAX_CURSOR_LENGTH = 4096

_PAYLOAD_KEYS = frozenset({"f", "d", "v", "id"})
_URLSAFE_B64 = re.compile(r"^[A-Za-z0-9_-]+\Z")


class SortKey(BaseModel):
    """Position of a row in a ``(field, id)`` ordering.

    Attributes:
        field: Name of the primary sort field.
        direction: Sort direction the position belongs to.
        value: Primary sort value of the row.
        id: Unique id of the row (tie-breaker).
    """

    field: str = Field(description="Primary sort field")
    direction: SortDirection = Field(description="Sort direction")
    value: Any = Field(description="Primary sort value of the last row")
    id: UUID = Field(description="Id of the last row")

    model_config = ConfigDict(frozen=True)


def _parse_datetime(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueError("expected an ISO-8601 timestamp")
    value = datetime.fromisoformat(raw)
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value


def _parse_str(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError("expected a string")
    return raw


_VALUE_PARSERS: dict[type, Callable[[Any], Any]] = {
    datetime: _parse_datetime,
    str: _parse_str,
}


class CursorCodec:
    """Encode and decode pagination cursors.

    The codec knows the Python type of every sortable field so that
    decoded values come back with the same type they were encoded with.

    Usage:
        codec = CursorCodec({"created_at": datetime, "title": str})

        token = codec.encode(SortKey(
            field="created_at", direction="desc", value=row.created_at, id=row.id,
        ))
        key = codec.decode(token, field="created_at", direction="desc")
    """

    def __init__(self, field_types: Mapping[str, type]) -> None:
        unsupported = {t for t in field_types.values() if t not in _VALUE_PARSERS}
        if unsupported:
            raise ValueError(f"Unsupported cursor value types: {unsupported}")
        self.field_types = dict(field_types)

    @staticmethod
    def encode(key: SortKey) -> str:
        """Encode a sort key to an opaque string.

        Args:
            key: Position to encode.

        Returns:
            URL-safe base64 string without padding.
        """
        value = key.value.isoformat() if isinstance(key.value, datetime) else key.value
        payload = {"f": key.field, "d": key.direction, "v": value, "id": key.id.hex}
        raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        return base64.urlsafe_b64encode(raw.encode("utf-8")).rstrip(b"=").decode("ascii")

    def decode(self, cursor: str, *, field: str, direction: SortDirection) -> SortKey:
        """Decode a cursor produced for the given ordering.

        Args:
            cursor: Token previously returned as ``next_cursor``.
            field: Primary sort field of the current request.
            direction: Sort direction of the current request.

        Returns:
            The decoded sort key.

        Raises:
            InvalidCursorException: If the token is malformed, tampered with,
                or was produced for a different ordering.
        """
        payload = self._load(cursor)

        if payload["f"] != field or payload["d"] != direction:
            raise InvalidCursorException("cursor does not match the requested sort order")

        if field not in self.field_types:
            raise InvalidCursorException(f"field {field!r} is not sortable")
        parser = _VALUE_PARSERS[self.field_types[field]]

        raw_id = payload["id"]
        if not isinstance(raw_id, str):
            raise InvalidCursorException("id is not a valid UUID")
        try:
            row_id = UUID(raw_id)
        except ValueError:
            raise InvalidCursorException("id is not a valid UUID") from None

        try:
            value = parser(payload["v"])
        except ValueError as e:
            raise InvalidCursorException(f"invalid value for {field!r}: {e}") from None

        return SortKey(field=field, direction=direction, value=value, id=row_id)

    @staticmethod
    def _load(cursor: str) -> dict[str, Any]:
        if not cursor or len(cursor) > MAX_CURSOR_LENGTH:
            raise InvalidCursorException("cursor is empty or too long")
        if not _URLSAFE_B64.match(cursor):
            raise InvalidCursorException("cursor is not valid base64-encoded JSON")
        try:
            raw = base64.urlsafe_b64decode(cursor + "=" * (-len(cursor) % 4))
            payload = json.loads(raw.decode("utf-8"))
        except ValueError:
            raise InvalidCursorException("cursor is not valid base64-encoded JSON") from None

        if not isinstance(payload, dict) or set(payload) != _PAYLOAD_KEYS:
            raise InvalidCursorException("cursor payload has an unexpected shape")
        return payload


__all__ = ["MAX_CURSOR_LENGTH", "CursorCodec", "SortDirection", "SortKey"]
