from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


class _ServerTimestamp:
    """Placeholder replaced by the store with its own commit time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP: Any = _ServerTimestamp()


@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any] = field(default_factory=dict)
    # Opaque token that changes on every write; None when the store has none.
    version: str | None = None


Listener = Callable[[list[Document]], None]


class Subscription(Protocol):
    @property
    def closed(self) -> bool:
        ...

    def close(self) -> None:
        """Stop delivering snapshots. Safe to call more than once."""
        ...


class DocumentStorePort(Protocol):
    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        """
        Create a document and return its id.
        With an explicit doc_id, raises VersionConflict if it already exists.
        """
        ...

    def get(self, collection: str, doc_id: str) -> Document | None:
        ...

    def set(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        *,
        if_version: str | None = None,
    ) -> None:
        """
        Replace the whole document.
        With if_version, raises VersionConflict unless the stored version matches.
        """
        ...

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document. Raises StoreError if missing."""
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def array_union(self, collection: str, doc_id: str, field: str, values: list[Any]) -> None:
        """Atomically append values not already present in the array field."""
        ...

    def list(
        self, collection: str, *, order_by: str = "created_at", descending: bool = True
    ) -> list[Document]:
        ...

    def subscribe(
        self,
        collection: str,
        listener: Listener,
        *,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> Subscription:
        """Deliver the current ordered snapshot now and again after every commit."""
        ...
