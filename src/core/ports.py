"""Ports (interfaces) used by the core.

Ports define the minimal contracts for storage, lookup, and delivery adapters
so that the core can be reused with different backends and tested with
in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional, Protocol, Sequence

from core.models import RatingChange, Subscription


class SubscriptionStorePort(Protocol):
    """Single-key operations over the rating subscription records."""

    def list_subscribers(self) -> Iterator[int]:
        ...

    def get(self, subscriber_id: int) -> Optional[Subscription]:
        ...

    def set(self, subscriber_id: int, target_handle: str, rating: int) -> None:
        ...

    def delete(self, subscriber_id: int) -> None:
        ...


class LookupPort(Protocol):
    """Read-only solved.ac lookups required by the core."""

    async def search_problems(self, query: str, page: int) -> list[dict[str, Any]]:
        ...

    async def show_user(self, handle: str) -> Optional[dict[str, Any]]:
        ...

    async def lookup_problems(self, problem_ids: Sequence[int]) -> list[dict[str, Any]]:
        ...


class RatingNotifierPort(Protocol):
    """Delivery of rating change notifications to a subscriber chat."""

    async def send(self, change: RatingChange) -> None:
        ...


class ReplierPort(Protocol):
    """Outbound replies produced by the command dispatcher."""

    async def send_text(self, chat_id: int, text: str) -> None:
        ...

    async def send_problems(
        self,
        chat_id: int,
        problems: list[dict[str, Any]],
        reply_to: Optional[int] = None,
    ) -> None:
        ...

    async def send_user(self, chat_id: int, user: dict[str, Any]) -> None:
        ...

    async def send_subscribed(self, chat_id: int, handle: str) -> None:
        ...


class LookupUnavailable(RuntimeError):
    """The lookup service answered with an error or could not be reached."""
