from __future__ import annotations

import asyncio
import io
import json
import urllib.error
import urllib.request

import pytest

from adapters.bot_api_notifier import BotApiError, TelegramBotApiNotifier
from core.models import RatingChange


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def test_send_posts_html_message(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        return FakeResponse(b"{}")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    notifier = TelegramBotApiNotifier("123:abc")
    asyncio.run(notifier.send(RatingChange(77, "alice", 1500, 1600, {})))

    assert captured["url"] == "https://api.telegram.org/bot123:abc/sendMessage"
    assert captured["payload"]["chat_id"] == 77
    assert captured["payload"]["parse_mode"] == "HTML"
    assert "1600" in captured["payload"]["text"]


def test_send_raises_on_api_error(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise urllib.error.HTTPError(request.full_url, 403, "Forbidden", {}, io.BytesIO(b"blocked"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    with pytest.raises(BotApiError, match="403"):
        asyncio.run(TelegramBotApiNotifier("t").send(RatingChange(1, "a", 1, 2, {})))
