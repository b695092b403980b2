"""Rating change poll loop.

One cycle is a single pass over every stored subscriber:
1) Enumerate subscriber ids from the store
2) Re-read each record (skip if it vanished meanwhile)
3) Fetch the live rating (skip if the handle no longer resolves)
4) On change: notify first, then persist the new rating

The store write only happens after a delivered notification, so a failed
delivery is retried by the next cycle instead of being marked as sent. The
loop never reschedules itself; triggering is the caller's job.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from core.config import PollConfig
from core.models import CycleReport, PollFailure, RatingChange
from core.ports import LookupPort, RatingNotifierPort, SubscriptionStorePort

LOGGER = logging.getLogger(__name__)


class MalformedRecord(ValueError):
    """Raised when a live user record carries no usable rating."""


def extract_rating(record: dict[str, Any]) -> int:
    """Return the non-negative integer rating of a live user record."""

    rating = record.get("rating")
    # bool is an int subclass; a JSON true/false is not a rating.
    if isinstance(rating, bool) or not isinstance(rating, int) or rating < 0:
        raise MalformedRecord(f"record has no usable rating: {rating!r}")
    return rating


class RatingPoller:
    """Diff stored ratings against live ones and notify on change."""

    def __init__(
        self,
        store: SubscriptionStorePort,
        lookup: LookupPort,
        notifier: RatingNotifierPort,
        config: Optional[PollConfig] = None,
    ) -> None:
        self._store = store
        self._lookup = lookup
        self._notifier = notifier
        self._config = config or PollConfig()

    async def run_cycle(self) -> CycleReport:
        """Run exactly one pass over the current subscriber set."""

        report = CycleReport()
        subscriber_ids = list(self._store.list_subscribers())
        semaphore = asyncio.Semaphore(max(1, self._config.max_concurrency))

        async def _bounded(subscriber_id: int) -> None:
            async with semaphore:
                try:
                    await self._check(subscriber_id, report)
                except Exception as exc:
                    LOGGER.exception("Rating poll failed for subscriber %s", subscriber_id)
                    report.failures.append(PollFailure(subscriber_id, exc))

        await asyncio.gather(*(_bounded(subscriber_id) for subscriber_id in subscriber_ids))

        LOGGER.info(
            "Rating poll complete: checked=%s, changed=%s, skipped=%s, failed=%s",
            report.checked,
            len(report.changes),
            len(report.skipped),
            len(report.failures),
        )
        return report

    async def _check(self, subscriber_id: int, report: CycleReport) -> None:
        report.checked += 1

        # Unsubscribed between enumeration and now.
        subscription = self._store.get(subscriber_id)
        if subscription is None:
            report.skipped.append(subscriber_id)
            return

        live = await self._lookup.show_user(subscription.target_handle)
        if live is None:
            # Treated as transient; the subscription stays untouched.
            LOGGER.info(
                "Handle %s not found for subscriber %s, skipping",
                subscription.target_handle,
                subscriber_id,
            )
            report.skipped.append(subscriber_id)
            return

        new_rating = extract_rating(live)
        if new_rating == subscription.last_known_rating:
            return

        change = RatingChange(
            subscriber_id=subscriber_id,
            target_handle=subscription.target_handle,
            old_rating=subscription.last_known_rating,
            new_rating=new_rating,
            live_record=live,
        )
        await self._notifier.send(change)
        self._store.set(subscriber_id, subscription.target_handle, new_rating)
        report.changes.append(change)
        LOGGER.info(
            "Rating change delivered for %s (%s: %s -> %s)",
            subscriber_id,
            subscription.target_handle,
            change.old_rating,
            change.new_rating,
        )
