"""solved.ac API lookup adapter.

Implements the core LookupPort with unauthenticated GET requests against the
solved.ac v3 API. Search and bulk lookups degrade to an empty result when the
service misbehaves; user lookups distinguish "not found" (None) from
"unavailable" (LookupUnavailable).
"""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional, Sequence

from core.config import LookupConfig
from core.ports import LookupUnavailable

LOGGER = logging.getLogger(__name__)

# URLError and timeouts are OSErrors; a dropped connection while reading the
# response surfaces as http.client.HTTPException instead.
_TRANSPORT_ERRORS = (OSError, http.client.HTTPException, ValueError)


class SolvedAcClient:
    """LookupPort adapter backed by urllib."""

    def __init__(self, config: Optional[LookupConfig] = None) -> None:
        self._config = config or LookupConfig()

    def _url(self, endpoint: str, params: dict[str, Any]) -> str:
        return f"{self._config.base_url.rstrip('/')}{endpoint}?{urllib.parse.urlencode(params)}"

    def _get_json(self, endpoint: str, params: dict[str, Any]) -> Any:
        request = urllib.request.Request(self._url(endpoint, params), method="GET")
        request.add_header("Accept", "application/json")
        # Blocking call; the async methods below push it onto a worker thread.
        with urllib.request.urlopen(request, timeout=self._config.timeout_seconds) as response:
            return json.loads(response.read().decode("utf-8"))

    async def _fetch(self, endpoint: str, params: dict[str, Any]) -> Any:
        return await asyncio.to_thread(self._get_json, endpoint, params)

    async def search_problems(self, query: str, page: int) -> list[dict[str, Any]]:
        """Return one upstream page (up to 100 records) of problem search results."""

        try:
            payload = await self._fetch("/search/problem", {"query": query, "page": page})
        except _TRANSPORT_ERRORS as e:
            LOGGER.warning("Problem search for %r page %s failed: %s", query, page, e)
            return []
        items = payload.get("items") if isinstance(payload, dict) else None
        return [item for item in items or [] if isinstance(item, dict)]

    async def show_user(self, handle: str) -> Optional[dict[str, Any]]:
        """Return the user record for a handle, or None if it does not exist."""

        try:
            payload = await self._fetch("/user/show", {"handle": handle})
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return None
            raise LookupUnavailable(f"solved.ac error {e.code} for user {handle}") from e
        except _TRANSPORT_ERRORS as e:
            raise LookupUnavailable(f"solved.ac unreachable for user {handle}: {e}") from e
        if not isinstance(payload, dict):
            raise LookupUnavailable(f"unexpected user payload for {handle}")
        return payload

    async def lookup_problems(self, problem_ids: Sequence[int]) -> list[dict[str, Any]]:
        """Return the problem records for the given ids, skipping unknown ones."""

        if not problem_ids:
            return []
        ids = ",".join(str(problem_id) for problem_id in problem_ids)
        try:
            payload = await self._fetch("/problem/lookup", {"problemIds": ids})
        except _TRANSPORT_ERRORS as e:
            LOGGER.warning("Problem lookup for %s failed: %s", ids, e)
            return []
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]
