"""Application entry point for the solvedbot Telegram bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.bot_api_notifier import TelegramBotApiNotifier
from adapters.solved_client import SolvedAcClient
from adapters.sqlite_subscriptions import SQLiteSubscriptionStore
from adapters.telegram_mapper import build_command, build_inline_results
from adapters.telegram_replier import TelegramReplier
from client import build_client, load_credentials
from core.commands import CommandDispatcher
from core.config import LookupConfig, PollConfig
from core.models import CycleReport
from core.ports import RatingNotifierPort
from core.rating_poll import RatingPoller
from core.search import InlineSearch
from logging_setup import configure_logging

NAME = "SOLVEDBOT"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    # Redaction reads secrets from the environment, so .env must be loaded first.
    load_dotenv()
    configure_logging(settings.LOGGING or {}, settings.PROJECT_ROOT)


def _build_store() -> SQLiteSubscriptionStore:
    store = SQLiteSubscriptionStore(settings.DB_PATH)
    store.init_db()
    return store


def _build_lookup() -> SolvedAcClient:
    return SolvedAcClient(
        LookupConfig(
            base_url=settings.LOOKUP_BASE_URL,
            timeout_seconds=settings.LOOKUP_TIMEOUT_SECONDS,
        )
    )


def _build_poller(
    store: SQLiteSubscriptionStore,
    lookup: SolvedAcClient,
    notifier: RatingNotifierPort,
) -> RatingPoller:
    return RatingPoller(
        store=store,
        lookup=lookup,
        notifier=notifier,
        config=PollConfig(max_concurrency=settings.POLL_MAX_CONCURRENCY),
    )


async def _poll_once(poller: RatingPoller) -> Optional[CycleReport]:
    """Scheduled trigger: run one cycle, never let it take the bot down."""

    try:
        return await poller.run_cycle()
    except Exception:
        logging.getLogger(__name__).exception("Rating poll cycle could not start")
        return None


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting solvedbot")

    store = _build_store()
    lookup = _build_lookup()

    credentials = load_credentials()
    client = build_client(credentials)
    client.start(bot_token=credentials.bot_token)

    replier = TelegramReplier(client)
    dispatcher = CommandDispatcher(store=store, lookup=lookup, replier=replier)
    search = InlineSearch(lookup)
    poller = _build_poller(store, lookup, replier)

    @client.on(events.InlineQuery)
    async def inline_handler(event) -> None:
        try:
            page = await search.answer(event.text, event.query.offset)
            results = await build_inline_results(event.builder, page.items)
            await event.answer(results, next_offset=page.next_offset)
        except Exception:
            logger.exception("Error while answering inline query")

    @client.on(events.NewMessage(incoming=True, pattern=r"^/"))
    async def command_handler(event) -> None:
        try:
            command = await build_command(event.message)
            await dispatcher.handle(command)
        except Exception:
            logger.exception("Error while processing command")

    scheduler: Optional[AsyncIOScheduler] = None
    if settings.POLL_INTERVAL_MINUTES > 0:
        scheduler = AsyncIOScheduler(event_loop=client.loop)
        scheduler.add_job(
            _poll_once,
            "interval",
            args=[poller],
            minutes=settings.POLL_INTERVAL_MINUTES,
            id="rating_poll",
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        logger.info("Rating poll scheduled every %s minutes", settings.POLL_INTERVAL_MINUTES)
    else:
        logger.info("In-process rating poll disabled; use `solvedbot poll` from cron")

    logger.info("Bot connected. Listening for updates...")
    try:
        client.run_until_disconnected()
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)


def _poll() -> int:
    _configure_logging()
    logger = logging.getLogger(__name__)

    store = _build_store()
    credentials = load_credentials(require_mtproto=False)
    notifier = TelegramBotApiNotifier(
        credentials.bot_token,
        timeout_seconds=settings.LOOKUP_TIMEOUT_SECONDS,
    )
    poller = _build_poller(store, _build_lookup(), notifier)

    report = asyncio.run(_poll_once(poller))
    if report is None:
        return 1
    for failure in report.failures:
        logger.error("Subscriber %s: %s", failure.subscriber_id, failure.error)
    return 0 if report.ok else 1


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="solvedbot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    subparsers.add_parser(
        "poll",
        help="Run one rating poll cycle and exit (for cron).",
    )

    args = parser.parse_args(argv)
    if args.command == "poll":
        sys.exit(_poll())
    _run()


if __name__ == "__main__":
    main()
