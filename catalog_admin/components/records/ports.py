"""Record builder port definitions - protocols for dependencies."""

from __future__ import annotations

from typing import Any, Protocol

from catalog_admin.ports.store import Document
from catalog_admin.services.uploads import PendingFile


class RecordStorePort(Protocol):
    """Document store operations used to write records."""

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        ...

    def get(self, collection: str, doc_id: str) -> Document | None:
        ...

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        ...

    def list(
        self, collection: str, *, order_by: str = "created_at", descending: bool = True
    ) -> list[Document]:
        ...


class UploaderPort(Protocol):
    """Resolves a pending local file to a durable public URL."""

    def upload(self, pending: PendingFile) -> str:
        """Raises UploadError."""
        ...
