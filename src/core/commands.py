"""Chat command parsing and dispatch (core domain).

Commands are plain whitespace-separated tokens; replies are produced through
the ReplierPort so the dispatcher never touches Telegram types or markup.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from core.models import IncomingCommand
from core.ports import LookupPort, LookupUnavailable, ReplierPort, SubscriptionStorePort
from core.rating_poll import MalformedRecord, extract_rating

LOGGER = logging.getLogger(__name__)

# "1000번" style problem references in a replied-to message.
PROBLEM_REF_PATTERN = re.compile(r"(\d+)번")

USAGE_PROBLEM = "Usage: /problem <problem id 1> <problem id 2> <...>"
USAGE_USER = "Usage: /user <handle>"
USAGE_SUBSCRIBE = "Usage: /subscribe ratings <handle>"
USAGE_UNSUBSCRIBE = "Usage: /unsubscribe ratings"
PROBLEM_NOT_FOUND = "Problem not found."
USER_NOT_FOUND = "User not found."
UNSUBSCRIBED = "Rating notifications have been turned off."
LOOKUP_UNAVAILABLE = "solved.ac is not responding right now, please try again later."
RATING_UNREADABLE = "Could not read the current rating of that user, please try again later."


@dataclass(frozen=True)
class Command:
    """A command label and its arguments."""

    label: str
    args: List[str]


def parse_command(text: str) -> Command:
    """Split a message into a command label and arguments.

    A ``@botname`` suffix on the label (as sent in group chats) is dropped.
    """

    tokens = text.split()
    if not tokens:
        return Command(label="", args=[])
    label, _, _ = tokens[0].partition("@")
    return Command(label=label, args=tokens[1:])


def parse_problem_ids(args: List[str]) -> Optional[List[int]]:
    """Return the arguments as problem ids, or None if any is not a number."""

    ids: List[int] = []
    for arg in args:
        if not (arg.isascii() and arg.isdigit()):
            return None
        ids.append(int(arg))
    return ids


def extract_problem_refs(text: str) -> List[int]:
    """Return every ``<digits>번`` reference in order of appearance."""

    return [int(match) for match in PROBLEM_REF_PATTERN.findall(text)]


class CommandDispatcher:
    """Routes one chat command to lookups, the subscription store, and replies."""

    def __init__(
        self,
        store: SubscriptionStorePort,
        lookup: LookupPort,
        replier: ReplierPort,
    ) -> None:
        self._store = store
        self._lookup = lookup
        self._replier = replier

    async def handle(self, message: IncomingCommand) -> None:
        command = parse_command(message.text)
        handler = {
            "/problem": self._problem,
            "/user": self._user,
            "/get": self._get,
            "/subscribe": self._subscribe,
            "/unsubscribe": self._unsubscribe,
        }.get(command.label)
        if handler is None:
            return
        LOGGER.debug("Dispatching %s for chat %s", command.label, message.chat_id)
        await handler(message, command.args)

    async def _problem(self, message: IncomingCommand, args: List[str]) -> None:
        ids = parse_problem_ids(args)
        if not ids:
            await self._replier.send_text(message.chat_id, USAGE_PROBLEM)
            return
        problems = await self._lookup.lookup_problems(ids)
        if not problems:
            await self._replier.send_text(message.chat_id, PROBLEM_NOT_FOUND)
            return
        await self._replier.send_problems(message.chat_id, problems)

    async def _show_user(self, chat_id: int, handle: str) -> Optional[dict]:
        """Look up a user, replying on the caller's behalf when that fails."""

        try:
            user = await self._lookup.show_user(handle)
        except LookupUnavailable:
            LOGGER.warning("User lookup for %s failed", handle, exc_info=True)
            await self._replier.send_text(chat_id, LOOKUP_UNAVAILABLE)
            return None
        if user is None:
            await self._replier.send_text(chat_id, USER_NOT_FOUND)
        return user

    async def _user(self, message: IncomingCommand, args: List[str]) -> None:
        if not args:
            await self._replier.send_text(message.chat_id, USAGE_USER)
            return
        user = await self._show_user(message.chat_id, args[0])
        if user is None:
            return
        await self._replier.send_user(message.chat_id, user)

    async def _get(self, message: IncomingCommand, args: List[str]) -> None:
        if not message.reply_to_text:
            return
        ids = extract_problem_refs(message.reply_to_text)
        if not ids:
            return
        problems = await self._lookup.lookup_problems(ids)
        if not problems:
            return
        await self._replier.send_problems(message.chat_id, problems, reply_to=message.message_id)

    async def _subscribe(self, message: IncomingCommand, args: List[str]) -> None:
        if len(args) < 2 or args[0] != "ratings":
            await self._replier.send_text(message.chat_id, USAGE_SUBSCRIBE)
            return
        handle = args[1]
        user = await self._show_user(message.chat_id, handle)
        if user is None:
            return
        try:
            rating = extract_rating(user)
        except MalformedRecord:
            LOGGER.warning("User record for %s has no usable rating", handle, exc_info=True)
            await self._replier.send_text(message.chat_id, RATING_UNREADABLE)
            return
        self._store.set(message.chat_id, handle, rating)
        LOGGER.info("Chat %s subscribed to ratings of %s", message.chat_id, handle)
        await self._replier.send_subscribed(message.chat_id, handle)

    async def _unsubscribe(self, message: IncomingCommand, args: List[str]) -> None:
        if not args or args[0] != "ratings":
            await self._replier.send_text(message.chat_id, USAGE_UNSUBSCRIBE)
            return
        self._store.delete(message.chat_id)
        LOGGER.info("Chat %s unsubscribed from ratings", message.chat_id)
        await self._replier.send_text(message.chat_id, UNSUBSCRIBED)
