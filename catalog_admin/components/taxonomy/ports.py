"""Taxonomy component port definitions - protocols for dependencies."""

from __future__ import annotations

from typing import Any, Protocol

from catalog_admin.ports.store import Document


class TaxonomyStorePort(Protocol):
    """The slice of the document store the taxonomy component uses."""

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
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
        ...

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def array_union(self, collection: str, doc_id: str, field: str, values: list[Any]) -> None:
        ...

    def list(
        self, collection: str, *, order_by: str = "created_at", descending: bool = True
    ) -> list[Document]:
        ...
