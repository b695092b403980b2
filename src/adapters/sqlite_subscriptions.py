"""SQLite subscription store adapter.

Implements the core SubscriptionStorePort on a single key-value table, keyed
by the subscriber id as text with a JSON value, so the records stay portable
to any other key-value medium.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Iterator, Optional

from core.models import Subscription


class SQLiteSubscriptionStore:
    """Thin SQLite wrapper that satisfies the SubscriptionStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the rating_alarms table if it does not exist."""

        with self._connect() as conn:
            # Fields:
            # - key: subscriber chat id as decimal text (PRIMARY KEY)
            # - value: JSON {"target": <handle>, "rating": <int>}
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS rating_alarms (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def list_subscribers(self) -> Iterator[int]:
        """Yield every subscriber id; keys that are not integers are skipped."""

        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM rating_alarms").fetchall()
        for row in rows:
            try:
                yield int(row["key"])
            except ValueError:
                continue

    def get(self, subscriber_id: int) -> Optional[Subscription]:
        """Return the subscription for a chat, or None if absent or unreadable."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM rating_alarms WHERE key = ?",
                (str(subscriber_id),),
            ).fetchone()
        if row is None:
            return None
        try:
            value = json.loads(row["value"])
            target = value["target"]
            rating = value["rating"]
        except (ValueError, TypeError, KeyError):
            return None
        if not isinstance(target, str) or isinstance(rating, bool) or not isinstance(rating, int):
            return None
        return Subscription(
            subscriber_id=subscriber_id,
            target_handle=target,
            last_known_rating=rating,
        )

    def set(self, subscriber_id: int, target_handle: str, rating: int) -> None:
        """Upsert the subscription for a chat, replacing any prior record."""

        value = json.dumps({"target": target_handle, "rating": rating})
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO rating_alarms (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (str(subscriber_id), value),
            )

    def delete(self, subscriber_id: int) -> None:
        """Remove the subscription for a chat; absent ids are fine."""

        with self._connect() as conn:
            conn.execute("DELETE FROM rating_alarms WHERE key = ?", (str(subscriber_id),))
