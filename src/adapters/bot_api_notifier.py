"""Telegram Bot API notification adapter.

Delivers rating changes over the plain Bot API so a one-shot poll run does not
need an MTProto session.
"""

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request

from adapters.formatting import format_rating_change
from core.models import RatingChange


class BotApiError(RuntimeError):
    """The Bot API rejected a request."""


class TelegramBotApiNotifier:
    """RatingNotifierPort adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, timeout_seconds: float = 10.0) -> None:
        self._bot_token = bot_token
        self._timeout_seconds = timeout_seconds

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def _post(self, payload: dict) -> None:
        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout_seconds):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise BotApiError(f"Bot API error {e.code}: {body}") from e

    async def send(self, change: RatingChange) -> None:
        """Send the formatted rating change to the subscriber chat."""

        payload = {
            "chat_id": change.subscriber_id,
            "text": format_rating_change(change),
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        await asyncio.to_thread(self._post, payload)
