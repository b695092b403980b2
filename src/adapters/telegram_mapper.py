"""Telegram-to-core mapping adapter.

This keeps Telethon-specific details out of the core dispatcher and search.
"""

from __future__ import annotations

from typing import Any, Optional

from telethon.tl.custom import Message

from adapters.formatting import format_search_result, int_or_na, problem_level_name, str_or_na
from core.models import IncomingCommand


async def build_command(message: Message) -> IncomingCommand:
    """Build a core IncomingCommand from a Telethon Message."""

    reply_to_text: Optional[str] = None
    if getattr(message, "is_reply", False):
        replied = await message.get_reply_message()
        if replied is not None:
            reply_to_text = replied.raw_text or None

    return IncomingCommand(
        chat_id=message.chat_id,
        message_id=message.id,
        text=message.raw_text or "",
        reply_to_text=reply_to_text,
    )


async def build_inline_results(builder, problems: list[dict[str, Any]]) -> list:
    """Turn problem records into inline article results."""

    results = []
    for problem in problems:
        results.append(
            await builder.article(
                title=str_or_na(problem, "titleKo"),
                description=problem_level_name(problem),
                text=format_search_result(problem),
                parse_mode="html",
                link_preview=True,
                id=f"SPTQ{int_or_na(problem, 'problemId')}",
            )
        )
    return results
