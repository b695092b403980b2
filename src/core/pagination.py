"""Inline search pagination cursor (core domain).

solved.ac pages search results in batches of 100 while a Telegram inline
answer carries at most 50 results, so every upstream page is shown to the
client as two halves. Both coordinates are packed into the single integer
``offset`` string that Telegram round-trips for us:

    offset   ""/0/1   2        3        4        5
    cursor   (1, 1st) (1, 2nd) (2, 1st) (2, 2nd) (3, 1st) ...

The packed form is only ever produced or consumed at the boundary
(``decode_cursor`` / ``encode_cursor``); everything else works on ``Cursor``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional, Sequence

UPSTREAM_PAGE_SIZE = 100
INLINE_PAGE_SIZE = 50
MAX_OFFSET = 0xFFFFFFFF


class Half(enum.Enum):
    FIRST = 0
    SECOND = 1


@dataclass(frozen=True)
class Cursor:
    """A client-visible page: one half of one upstream page."""

    page: int = 1
    half: Half = Half.FIRST

    def following(self) -> "Cursor":
        """Return the cursor for the next client-visible page."""

        if self.half is Half.FIRST:
            return Cursor(self.page, Half.SECOND)
        return Cursor(self.page + 1, Half.FIRST)


START = Cursor(1, Half.FIRST)


@dataclass(frozen=True)
class PageSlice:
    """Visible results for one inline answer plus the continuation offset."""

    items: list[Any]
    next_offset: Optional[str]

    @property
    def has_more(self) -> bool:
        return self.next_offset is not None


def decode_cursor(offset: Optional[str]) -> Cursor:
    """Parse an inline query offset. Anything unparsable starts over."""

    # str.isdigit accepts non-ASCII digits, which int() would also take.
    if not offset or not offset.isascii() or not offset.isdigit():
        return START
    # Offsets are unsigned 32-bit on the wire; leading zeros are allowed.
    digits = offset.lstrip("0")
    if not digits or len(digits) > len(str(MAX_OFFSET)):
        return START
    n = int(digits)
    if n > MAX_OFFSET:
        return START
    half = Half.SECOND if (n + 1) % 2 == 1 else Half.FIRST
    return Cursor((n + 1) // 2, half)


def encode_cursor(cursor: Cursor) -> str:
    """Pack a cursor back into its wire integer."""

    return str(2 * cursor.page - 1 + cursor.half.value)


def slice_page(cursor: Cursor, records: Sequence[Any]) -> PageSlice:
    """Pick the visible half of an upstream page and decide on a next offset.

    A first half is considered continuable as soon as it is full, without
    looking at whether a second half exists. An upstream page of exactly 50
    records therefore yields one trailing empty page. Clients resume with
    offsets we already handed out, so this overshoot is kept as is.
    """

    if cursor.half is Half.FIRST:
        items = list(records[:INLINE_PAGE_SIZE])
        has_more = len(records) >= INLINE_PAGE_SIZE
    elif len(records) > INLINE_PAGE_SIZE:
        items = list(records[INLINE_PAGE_SIZE:UPSTREAM_PAGE_SIZE])
        has_more = len(records) >= UPSTREAM_PAGE_SIZE
    else:
        items = []
        has_more = False

    next_offset = encode_cursor(cursor.following()) if has_more else None
    return PageSlice(items=items, next_offset=next_offset)
