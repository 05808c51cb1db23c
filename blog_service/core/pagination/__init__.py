"""Cursor-based (keyset) pagination.

- Stable: rows unchanged between requests are never skipped or repeated
- Performant: indexed seeks instead of OFFSET scans
- Stateless: the cursor carries everything needed to resume

Example:
    fetcher = PageFetcher(Post, compiler, CursorCodec({"created_at": datetime}))
    page = await fetcher.fetch(database, predicate, SortSpec(), cursor=cursor)
    return page

The cursor encodes the last row's sort key. Cursors are opaque base64
strings that clients pass back unchanged.
"""

from blog_service.core.pagination.cursor import (
    MAX_CURSOR_LENGTH,
    CursorCodec,
    SortDirection,
    SortKey,
)
from blog_service.core.pagination.fetcher import PageFetcher, SortSpec
from blog_service.core.pagination.schemas import CursorPage

__all__ = [
    "MAX_CURSOR_LENGTH",
    "CursorCodec",
    "CursorPage",
    "PageFetcher",
    "SortDirection",
    "SortKey",
    "SortSpec",
]
