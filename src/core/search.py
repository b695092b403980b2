"""Inline problem search (core domain)."""

from __future__ import annotations

import logging
from typing import Optional

from core.pagination import PageSlice, decode_cursor, slice_page
from core.ports import LookupPort

LOGGER = logging.getLogger(__name__)


class InlineSearch:
    """Answers one inline query with one half of one upstream page."""

    def __init__(self, lookup: LookupPort) -> None:
        self._lookup = lookup

    async def answer(self, query: str, offset: Optional[str]) -> PageSlice:
        cursor = decode_cursor(offset)
        # One upstream fetch per answer; the second half is served by fetching
        # the same upstream page again on the follow-up request.
        records = await self._lookup.search_problems(query, cursor.page)
        result = slice_page(cursor, records)
        LOGGER.debug(
            "Inline search %r offset=%r -> page=%s half=%s items=%s next=%s",
            query,
            offset,
            cursor.page,
            cursor.half.name,
            len(result.items),
            result.next_offset,
        )
        return result
