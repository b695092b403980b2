"""Telegram bot client factory for solvedbot."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from telethon import TelegramClient

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotCredentials:
    """Secrets read from the environment (.env is honoured)."""

    bot_token: str
    api_id: int = 0
    api_hash: str = ""
    session_name: str = "solvedbot"


def load_credentials(*, require_mtproto: bool = True) -> BotCredentials:
    """Read BOT_TOKEN, and API_ID/API_HASH when a Telethon session is needed.

    ``solvedbot poll`` only talks to the Bot API, so it can run on a host
    that holds nothing but the bot token.
    """

    load_dotenv()
    token = os.getenv("BOT_TOKEN")
    if not token:
        raise RuntimeError("Missing BOT_TOKEN in environment")
    if not require_mtproto:
        return BotCredentials(bot_token=token)

    api_id = os.getenv("API_ID", "")
    api_hash = os.getenv("API_HASH", "")
    if not api_id.isdigit() or not api_hash:
        raise RuntimeError("API_ID and API_HASH are required to run the bot")
    return BotCredentials(
        bot_token=token,
        api_id=int(api_id),
        api_hash=api_hash,
        session_name=os.getenv("SESSION_NAME", "solvedbot"),
    )


def build_client(credentials: BotCredentials) -> TelegramClient:
    """Create (but do not start) the Telethon client for the bot session."""

    LOGGER.info("Initializing Telegram client session %s", credentials.session_name)
    return TelegramClient(credentials.session_name, credentials.api_id, credentials.api_hash)
