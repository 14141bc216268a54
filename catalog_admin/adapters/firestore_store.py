"""
Google Cloud Firestore document store.

The document update_time (RFC 3339, nanosecond precision) is the version
token; conditional writes use it as a last_update_time precondition.
"""

from __future__ import annotations

import logging
from typing import Any

from google.api_core import exceptions as gexc
from google.api_core.datetime_helpers import DatetimeWithNanoseconds
from google.cloud import firestore

from catalog_admin.domain.errors import StoreError, VersionConflict
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document, Listener

logger = logging.getLogger(__name__)


def _to_firestore(value: Any) -> Any:
    if value is SERVER_TIMESTAMP:
        return firestore.SERVER_TIMESTAMP
    if isinstance(value, dict):
        return {k: _to_firestore(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_firestore(v) for v in value]
    return value


def _version_of(snapshot: Any) -> str | None:
    update_time = getattr(snapshot, "update_time", None)
    if update_time is None:
        return None
    if hasattr(update_time, "rfc3339"):
        return str(update_time.rfc3339())
    return str(update_time.isoformat())


def _to_document(snapshot: Any) -> Document:
    return Document(id=snapshot.id, data=snapshot.to_dict() or {}, version=_version_of(snapshot))


class FirestoreSubscription:
    def __init__(self, watch: Any) -> None:
        self._watch = watch
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._watch.unsubscribe()

    def __enter__(self) -> FirestoreSubscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FirestoreDocumentStore:
    def __init__(self, client: firestore.Client | None = None, project: str | None = None):
        self._client = client or firestore.Client(project=project)

    def _ref(self, collection: str, doc_id: str) -> Any:
        return self._client.collection(collection).document(doc_id)

    def _query(self, collection: str, order_by: str, descending: bool) -> Any:
        direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
        return self._client.collection(collection).order_by(order_by, direction=direction)

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        col = self._client.collection(collection)
        ref = col.document(doc_id) if doc_id else col.document()
        try:
            ref.create(_to_firestore(data))
        except gexc.AlreadyExists as e:
            raise VersionConflict(f"Document {collection}/{ref.id} already exists") from e
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"create on '{collection}' failed: {e}") from e
        return str(ref.id)

    def get(self, collection: str, doc_id: str) -> Document | None:
        try:
            snapshot = self._ref(collection, doc_id).get()
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"get on '{collection}' failed: {e}") from e
        if not snapshot.exists:
            return None
        return _to_document(snapshot)

    def set(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        *,
        if_version: str | None = None,
    ) -> None:
        ref = self._ref(collection, doc_id)
        try:
            if if_version is None:
                ref.set(_to_firestore(data))
                return
            option = self._client.write_option(
                last_update_time=DatetimeWithNanoseconds.from_rfc3339(if_version)
            )
            # update() with every field of the document replaces it under the precondition.
            ref.update(_to_firestore(data), option=option)
        except (gexc.FailedPrecondition, gexc.NotFound) as e:
            raise VersionConflict(
                f"Document {collection}/{doc_id} changed since version {if_version}"
            ) from e
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"set on '{collection}' failed: {e}") from e

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        try:
            self._ref(collection, doc_id).update(_to_firestore(fields))
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"update on '{collection}/{doc_id}' failed: {e}") from e

    def delete(self, collection: str, doc_id: str) -> None:
        try:
            self._ref(collection, doc_id).delete()
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"delete on '{collection}/{doc_id}' failed: {e}") from e

    def array_union(self, collection: str, doc_id: str, field: str, values: list[Any]) -> None:
        try:
            self._ref(collection, doc_id).update({field: firestore.ArrayUnion(values)})
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"array_union on '{collection}/{doc_id}' failed: {e}") from e

    def list(
        self, collection: str, *, order_by: str = "created_at", descending: bool = True
    ) -> list[Document]:
        try:
            return [_to_document(s) for s in self._query(collection, order_by, descending).stream()]
        except gexc.GoogleAPICallError as e:
            raise StoreError(f"list on '{collection}' failed: {e}") from e

    def subscribe(
        self,
        collection: str,
        listener: Listener,
        *,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> FirestoreSubscription:
        def _on_snapshot(snapshots: list[Any], changes: Any, read_time: Any) -> None:
            try:
                listener([_to_document(s) for s in snapshots])
            except Exception:
                # Runs on the watch thread; an exception here would kill the stream.
                logger.exception("Live listener on '%s' failed", collection)

        watch = self._query(collection, order_by, descending).on_snapshot(_on_snapshot)
        return FirestoreSubscription(watch)
