from __future__ import annotations

import asyncio

from core.search import InlineSearch


class FakeLookup:
    def __init__(self, total: int) -> None:
        self.total = total
        self.pages: list[int] = []

    async def search_problems(self, query: str, page: int) -> list[dict]:
        self.pages.append(page)
        start = (page - 1) * 100
        stop = min(start + 100, self.total)
        return [{"problemId": i} for i in range(start + 1, stop + 1)]


def _collect(total: int) -> tuple[list[int], FakeLookup, int]:
    lookup = FakeLookup(total)
    search = InlineSearch(lookup)
    seen: list[int] = []
    offset = ""
    answers = 0
    while offset is not None:
        page = asyncio.run(search.answer("tree", offset))
        answers += 1
        assert len(page.items) <= 50
        seen.extend(item["problemId"] for item in page.items)
        offset = page.next_offset
    return seen, lookup, answers


def test_walks_every_result_exactly_once() -> None:
    seen, lookup, answers = _collect(230)
    assert seen == list(range(1, 231))
    assert lookup.pages == [1, 1, 2, 2, 3]
    assert answers == 5


def test_short_result_set_is_single_answer() -> None:
    seen, lookup, answers = _collect(30)
    assert seen == list(range(1, 31))
    assert answers == 1


def test_exactly_fifty_results_costs_one_empty_answer() -> None:
    seen, _, answers = _collect(50)
    assert seen == list(range(1, 51))
    assert answers == 2


def test_malformed_offset_restarts() -> None:
    lookup = FakeLookup(100)
    page = asyncio.run(InlineSearch(lookup).answer("tree", "garbage"))
    assert page.items[0] == {"problemId": 1}
    assert page.next_offset == "2"
