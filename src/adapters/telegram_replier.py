"""Telethon reply and notification adapter.

Implements the core ReplierPort and RatingNotifierPort on top of a connected
Telethon bot client.
"""

from __future__ import annotations

from typing import Any, Optional

from telethon import Button

from adapters.formatting import (
    format_problem_list,
    format_rating_change,
    format_subscribed,
    format_user_profile,
    profile_image_url,
    profile_links,
    str_or_na,
)
from core.models import RatingChange


class TelegramReplier:
    """Sends command replies and rating notifications through the bot client."""

    def __init__(self, client) -> None:
        self._client = client

    async def send_text(self, chat_id: int, text: str) -> None:
        await self._client.send_message(chat_id, text, parse_mode=None)

    async def send_problems(
        self,
        chat_id: int,
        problems: list[dict[str, Any]],
        reply_to: Optional[int] = None,
    ) -> None:
        await self._client.send_message(
            chat_id,
            format_problem_list(problems),
            parse_mode="html",
            link_preview=False,
            reply_to=reply_to,
        )

    async def send_user(self, chat_id: int, user: dict[str, Any]) -> None:
        handle = str_or_na(user, "handle")
        buttons = [[Button.url(label, url)] for label, url in profile_links(handle)]
        # Telegram fetches the image itself; nothing is downloaded here.
        await self._client.send_file(
            chat_id,
            profile_image_url(user),
            caption=format_user_profile(user),
            parse_mode="html",
            buttons=buttons,
        )

    async def send_subscribed(self, chat_id: int, handle: str) -> None:
        await self._client.send_message(chat_id, format_subscribed(handle), parse_mode="html")

    async def send(self, change: RatingChange) -> None:
        """RatingNotifierPort: deliver a rating change to the subscriber chat."""

        await self._client.send_message(
            change.subscriber_id,
            format_rating_change(change),
            parse_mode="html",
            link_preview=False,
        )
