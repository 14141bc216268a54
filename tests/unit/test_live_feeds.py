"""
Live subscriptions and feeds.

Listeners get the current snapshot on subscribe and a fresh one after every
committed write to their collection, until the handle is closed.
"""

from __future__ import annotations

import threading

import pytest

from catalog_admin.adapters.live import SubscriptionHub
from catalog_admin.adapters.sqlite.document_store import SQLiteDocumentStore
from catalog_admin.adapters.sqlite.migrator import SQLiteMigrator
from catalog_admin.domain.entities import ListItem
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document
from catalog_admin.services.feeds import LiveFeed, product_feed, section_feed


@pytest.fixture
def store(tmp_path) -> SQLiteDocumentStore:
    db_path = str(tmp_path / "catalog.db")
    SQLiteMigrator(db_path).run_migrations()
    return SQLiteDocumentStore(db_path)


def product(name: str) -> dict:
    return {
        "name": name,
        "category": "LED BULBS",
        "brand": "ECOSHIFT",
        "website": "Ecoshift Corp",
        "created_at": SERVER_TIMESTAMP,
    }


# --- Hub ---


class TestSubscriptionHub:
    def test_initial_snapshot_then_updates(self) -> None:
        data: dict[str, list[Document]] = {"brands": []}
        hub = SubscriptionHub(lambda c, o, d: list(data[c]))
        seen: list[list[str]] = []

        handle = hub.subscribe("brands", lambda docs: seen.append([d.id for d in docs]), "created_at", True)
        data["brands"].append(Document(id="a"))
        hub.notify("brands")
        hub.notify("categories")

        assert seen == [[], ["a"]]
        handle.close()
        assert hub.active_count() == 0

    def test_close_is_idempotent_and_stops_delivery(self) -> None:
        hub = SubscriptionHub(lambda c, o, d: [])
        calls: list[int] = []
        handle = hub.subscribe("brands", lambda docs: calls.append(1), "created_at", True)

        handle.close()
        handle.close()
        hub.notify("brands")

        assert handle.closed
        assert calls == [1]

    def test_failing_initial_delivery_releases_handle(self) -> None:
        hub = SubscriptionHub(lambda c, o, d: [])

        def boom(docs: list[Document]) -> None:
            raise RuntimeError("view crashed")

        with pytest.raises(RuntimeError):
            hub.subscribe("brands", boom, "created_at", True)
        assert hub.active_count("brands") == 0

    def test_failing_listener_does_not_block_others(self) -> None:
        hub = SubscriptionHub(lambda c, o, d: [])
        state = {"armed": False}
        calls: list[int] = []

        def flaky(docs: list[Document]) -> None:
            if state["armed"]:
                raise RuntimeError("view crashed")

        hub.subscribe("brands", flaky, "created_at", True)
        hub.subscribe("brands", lambda docs: calls.append(1), "created_at", True)
        state["armed"] = True
        hub.notify("brands")

        assert calls == [1, 1]

    def test_context_manager_releases_on_error(self) -> None:
        hub = SubscriptionHub(lambda c, o, d: [])

        with pytest.raises(ValueError):
            with hub.subscribe("brands", lambda docs: None, "created_at", True):
                assert hub.active_count("brands") == 1
                raise ValueError("render failed")

        assert hub.active_count("brands") == 0

    def test_older_commit_never_overwrites_newer_snapshot(self) -> None:
        hub = SubscriptionHub(lambda c, o, d: [])
        seen: list[int] = []
        hub.subscribe("brands", lambda docs: seen.append(len(docs)), "created_at", True)
        first = hub.mark_commit()
        second = hub.mark_commit()

        hub._fetch = lambda c, o, d: [Document(id="a"), Document(id="b")]
        hub.notify("brands", second)
        hub._fetch = lambda c, o, d: [Document(id="a")]
        hub.notify("brands", first)

        assert seen == [0, 2]


# --- Feeds over the SQLite store ---


class TestLiveFeed:
    def test_feed_tracks_writes_newest_first(self, store: SQLiteDocumentStore) -> None:
        with product_feed(store) as feed:
            assert feed.items == []
            store.create("products", product("Old"))
            store.create("products", product("New"))

            assert [p.name for p in feed.items] == ["New", "Old"]
            assert all(p.id for p in feed.items)

        assert not feed.mounted

    def test_unmounted_feed_stops_updating(self, store: SQLiteDocumentStore) -> None:
        feed = product_feed(store).mount()
        store.create("products", product("Kept"))
        feed.unmount()
        store.create("products", product("Missed"))

        assert [p.name for p in feed.items] == ["Kept"]

    def test_feed_released_on_error(self, store: SQLiteDocumentStore) -> None:
        feed = section_feed(store)
        with pytest.raises(KeyError):
            with feed:
                assert feed.mounted
                raise KeyError("view error")

        assert not feed.mounted
        assert store._hub.active_count() == 0

    def test_mount_twice_keeps_one_subscription(self, store: SQLiteDocumentStore) -> None:
        feed = LiveFeed(store, "brands", ListItem, descending=False)
        feed.mount()
        feed.mount()

        assert store._hub.active_count("brands") == 1
        feed.unmount()

    def test_on_change_callback(self, store: SQLiteDocumentStore) -> None:
        received: list[list[str]] = []
        feed = LiveFeed(
            store,
            "brands",
            ListItem,
            descending=False,
            on_change=lambda items: received.append([i.name for i in items]),
        )

        with feed:
            store.create("brands", {"name": "Philips", "created_at": SERVER_TIMESTAMP})

        assert received == [[], ["Philips"]]


class SlowFirstFetchStore(SQLiteDocumentStore):
    """Holds the next listener fetch open until ``release`` is set."""

    def __init__(self, db_path: str) -> None:
        super().__init__(db_path)
        self.hold_next = False
        self.holding = threading.Event()
        self.release = threading.Event()

    def _fetch_for_hub(self, collection: str, order_by: str, descending: bool) -> list[Document]:
        docs = super()._fetch_for_hub(collection, order_by, descending)
        if self.hold_next:
            self.hold_next = False
            self.holding.set()
            self.release.wait(5)
        return docs


def test_slow_notify_does_not_leave_listener_stale(tmp_path) -> None:
    db_path = str(tmp_path / "catalog.db")
    SQLiteMigrator(db_path).run_migrations()
    store = SlowFirstFetchStore(db_path)
    seen: list[int] = []
    store.subscribe("products", lambda docs: seen.append(len(docs)))

    store.hold_next = True
    writer = threading.Thread(target=store.create, args=("products", product("First")))
    writer.start()
    assert store.holding.wait(5)

    store.create("products", product("Second"))
    store.release.set()
    writer.join(5)

    assert seen[-1] == 2
    assert seen == [0, 2]
