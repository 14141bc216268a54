"""In-process live query fan-out for stores without native listeners."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from types import TracebackType

from catalog_admin.ports.store import Document, Listener

logger = logging.getLogger(__name__)

Fetch = Callable[[str, str, bool], list[Document]]


class LiveSubscription:
    """Handle for one listener. Use as a context manager to release on every exit path."""

    def __init__(self, hub: SubscriptionHub, key: int) -> None:
        self._hub = hub
        self._key = key
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._hub._remove(self._key)

    def __enter__(self) -> LiveSubscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


@dataclass
class _Entry:
    collection: str
    listener: Listener
    order_by: str
    descending: bool
    delivered: int = -1
    lock: threading.RLock = field(default_factory=threading.RLock)


class SubscriptionHub:
    """
    Fans committed writes out to listeners.

    Each commit is stamped with a sequence number taken while the writer still
    holds its lock. A listener never receives a snapshot older than one it has
    already been given, so deliveries follow commit order even when the
    notifying threads race.
    """

    def __init__(self, fetch: Fetch) -> None:
        self._fetch = fetch
        self._entries: dict[int, _Entry] = {}
        self._next_key = 0
        self._seq = 0
        self._lock = threading.Lock()

    def mark_commit(self) -> int:
        """Stamp a commit. Call before releasing the writer's lock."""
        with self._lock:
            self._seq += 1
            return self._seq

    def subscribe(
        self, collection: str, listener: Listener, order_by: str, descending: bool
    ) -> LiveSubscription:
        with self._lock:
            key = self._next_key
            self._next_key += 1
            entry = _Entry(collection, listener, order_by, descending)
            self._entries[key] = entry
            seq = self._seq
        handle = LiveSubscription(self, key)
        try:
            self._deliver(entry, seq)
        except Exception:
            handle.close()
            raise
        return handle

    def active_count(self, collection: str | None = None) -> int:
        with self._lock:
            return sum(
                1 for e in self._entries.values() if collection is None or e.collection == collection
            )

    def notify(self, collection: str, seq: int | None = None) -> None:
        """Push a fresh snapshot to every listener of the collection."""
        if seq is None:
            seq = self.mark_commit()
        with self._lock:
            entries = [e for e in self._entries.values() if e.collection == collection]
        for entry in entries:
            try:
                self._deliver(entry, seq)
            except Exception:
                # A broken view must not fail the writer that triggered it.
                logger.exception("Live listener on '%s' failed", collection)

    def _deliver(self, entry: _Entry, seq: int) -> None:
        docs = self._fetch(entry.collection, entry.order_by, entry.descending)
        with entry.lock:
            if seq < entry.delivered:
                logger.debug("Dropped stale snapshot %d for '%s'", seq, entry.collection)
                return
            entry.delivered = seq
            entry.listener(docs)

    def _remove(self, key: int) -> None:
        with self._lock:
            self._entries.pop(key, None)
