from __future__ import annotations

import sqlite3

import pytest

from adapters.sqlite_subscriptions import SQLiteSubscriptionStore
from core.models import Subscription


@pytest.fixture
def store(tmp_path) -> SQLiteSubscriptionStore:
    store = SQLiteSubscriptionStore(str(tmp_path / "subs.db"))
    store.init_db()
    return store


def test_set_then_get(store: SQLiteSubscriptionStore) -> None:
    store.set(42, "alice", 1500)
    assert store.get(42) == Subscription(42, "alice", 1500)


def test_set_replaces_prior_record(store: SQLiteSubscriptionStore) -> None:
    store.set(42, "alice", 1500)
    store.set(42, "bob", 900)
    assert store.get(42) == Subscription(42, "bob", 900)
    assert list(store.list_subscribers()) == [42]


def test_get_absent(store: SQLiteSubscriptionStore) -> None:
    assert store.get(7) is None


def test_delete_is_idempotent(store: SQLiteSubscriptionStore) -> None:
    store.delete(7)
    store.set(7, "alice", 1)
    store.delete(7)
    store.delete(7)
    assert store.get(7) is None


def test_list_subscribers_includes_negative_chat_ids(store: SQLiteSubscriptionStore) -> None:
    store.set(1, "a", 1)
    store.set(-1001234, "b", 2)
    assert sorted(store.list_subscribers()) == [-1001234, 1]


def test_list_subscribers_restarts_on_new_call(store: SQLiteSubscriptionStore) -> None:
    store.set(1, "a", 1)
    first = store.list_subscribers()
    assert list(first) == [1]
    assert list(first) == []
    assert list(store.list_subscribers()) == [1]


def test_foreign_keys_and_values_are_ignored(tmp_path) -> None:
    path = str(tmp_path / "subs.db")
    store = SQLiteSubscriptionStore(path)
    store.init_db()
    store.set(1, "alice", 1500)
    with sqlite3.connect(path) as conn:
        conn.execute("INSERT INTO rating_alarms (key, value) VALUES ('not-a-chat', '{}')")
        conn.execute("INSERT INTO rating_alarms (key, value) VALUES ('2', 'garbage')")
        conn.execute("""INSERT INTO rating_alarms (key, value) VALUES ('3', '{"target": "x"}')""")

    assert sorted(store.list_subscribers()) == [1, 2, 3]
    assert store.get(2) is None
    assert store.get(3) is None


def test_value_format_is_json(tmp_path) -> None:
    path = str(tmp_path / "subs.db")
    store = SQLiteSubscriptionStore(path)
    store.init_db()
    store.set(5, "alice", 1500)
    with sqlite3.connect(path) as conn:
        row = conn.execute("SELECT key, value FROM rating_alarms").fetchone()
    assert row == ("5", '{"target": "alice", "rating": 1500}')
