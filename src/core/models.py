"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types. Records coming back from the
lookup service stay plain dicts; only the fields the core reasons about are
lifted into dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class Subscription:
    """The single durable record kept per subscribed chat."""

    subscriber_id: int
    target_handle: str
    last_known_rating: int


@dataclass(frozen=True)
class RatingChange:
    """Notification event emitted when a tracked rating moves."""

    subscriber_id: int
    target_handle: str
    old_rating: int
    new_rating: int
    live_record: dict[str, Any]

    @property
    def delta(self) -> int:
        return self.new_rating - self.old_rating


@dataclass(frozen=True)
class PollFailure:
    """A per-subscriber error recorded during a poll cycle."""

    subscriber_id: int
    error: Exception


@dataclass
class CycleReport:
    """Outcome of one pass over every stored subscriber."""

    checked: int = 0
    changes: List[RatingChange] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failures: List[PollFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class IncomingCommand:
    """Minimal chat message context used by the command dispatcher."""

    chat_id: int
    message_id: int
    text: str
    reply_to_text: Optional[str] = None
