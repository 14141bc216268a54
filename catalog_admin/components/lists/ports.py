"""Catalog lists component port definitions."""

from __future__ import annotations

from typing import Any, Protocol

from catalog_admin.ports.store import Document


class ListStorePort(Protocol):
    """Document store operations used by the lists component."""

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        ...

    def get(self, collection: str, doc_id: str) -> Document | None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def list(
        self, collection: str, *, order_by: str = "created_at", descending: bool = True
    ) -> list[Document]:
        ...
