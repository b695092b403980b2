from __future__ import annotations

import asyncio
import http.client
import io
import json
import urllib.error
import urllib.parse
import urllib.request

import pytest

from adapters.solved_client import SolvedAcClient
from core.config import LookupConfig
from core.ports import LookupUnavailable


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


@pytest.fixture
def solved_api(monkeypatch):
    """Route urlopen to canned responses keyed by path."""

    state = {"routes": {}, "requests": []}

    def fake_urlopen(request, timeout=None):
        url = urllib.parse.urlsplit(request.full_url)
        state["requests"].append((url.path, urllib.parse.parse_qs(url.query), timeout))
        route = state["routes"][url.path]
        if isinstance(route, Exception):
            raise route
        status, body = route
        if status != 200:
            raise urllib.error.HTTPError(request.full_url, status, "error", {}, None)
        return FakeResponse(json.dumps(body).encode("utf-8"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return state


def _client() -> SolvedAcClient:
    return SolvedAcClient(LookupConfig(base_url="https://solved.test/api/v3", timeout_seconds=3))


def test_search_returns_items(solved_api) -> None:
    solved_api["routes"]["/api/v3/search/problem"] = (200, {"count": 2, "items": [{"problemId": 1}, {"problemId": 2}]})
    items = asyncio.run(_client().search_problems("dp & greedy", 3))
    assert items == [{"problemId": 1}, {"problemId": 2}]
    _, query, timeout = solved_api["requests"][0]
    assert query == {"query": ["dp & greedy"], "page": ["3"]}
    assert timeout == 3


def test_search_non_200_is_empty(solved_api) -> None:
    solved_api["routes"]["/api/v3/search/problem"] = (503, None)
    assert asyncio.run(_client().search_problems("dp", 1)) == []


def test_show_user(solved_api) -> None:
    solved_api["routes"]["/api/v3/user/show"] = (200, {"handle": "alice", "rating": 1500})
    assert asyncio.run(_client().show_user("alice")) == {"handle": "alice", "rating": 1500}


def test_show_user_not_found(solved_api) -> None:
    solved_api["routes"]["/api/v3/user/show"] = (404, None)
    assert asyncio.run(_client().show_user("ghost")) is None


def test_show_user_unavailable(solved_api) -> None:
    solved_api["routes"]["/api/v3/user/show"] = (500, None)
    with pytest.raises(LookupUnavailable):
        asyncio.run(_client().show_user("alice"))


def test_lookup_problems(solved_api) -> None:
    solved_api["routes"]["/api/v3/problem/lookup"] = (200, [{"problemId": 1000}])
    assert asyncio.run(_client().lookup_problems([1000, 99999])) == [{"problemId": 1000}]
    assert solved_api["requests"][0][1] == {"problemIds": ["1000,99999"]}


def test_lookup_problems_empty_ids_skips_request(solved_api) -> None:
    assert asyncio.run(_client().lookup_problems([])) == []
    assert solved_api["requests"] == []


def test_search_dropped_connection_is_empty(solved_api) -> None:
    solved_api["routes"]["/api/v3/search/problem"] = http.client.RemoteDisconnected("closed")
    assert asyncio.run(_client().search_problems("dp", 1)) == []


def test_show_user_dropped_connection_is_unavailable(solved_api) -> None:
    solved_api["routes"]["/api/v3/user/show"] = http.client.IncompleteRead(b"{")
    with pytest.raises(LookupUnavailable):
        asyncio.run(_client().show_user("alice"))


def test_lookup_problems_dropped_connection_is_empty(solved_api) -> None:
    solved_api["routes"]["/api/v3/problem/lookup"] = http.client.RemoteDisconnected("closed")
    assert asyncio.run(_client().lookup_problems([1000])) == []
