from __future__ import annotations

import json
import logging
import sqlite3
import threading
from typing import Any
from uuid import uuid4

from catalog_admin.adapters.clock import SystemClock
from catalog_admin.adapters.live import LiveSubscription, SubscriptionHub
from catalog_admin.domain.errors import StoreError, VersionConflict
from catalog_admin.ports.clock import ClockPort
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document, Listener

logger = logging.getLogger(__name__)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteDocumentStore:
    """
    Document store over a single SQLite table of JSON documents.

    Every write bumps an integer version per document and runs in an
    IMMEDIATE transaction, so read-check-write sequences hold across
    processes sharing the file. Live listeners of the written collection are
    notified after the commit.
    """

    def __init__(self, db_path: str, clock: ClockPort | None = None, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout
        self._clock = clock or SystemClock()
        self._write_lock = threading.Lock()
        self._hub = SubscriptionHub(self._fetch_for_hub)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = dict_factory
        return conn

    def _resolve(self, value: Any, now: str) -> Any:
        if value is SERVER_TIMESTAMP:
            return now
        if isinstance(value, dict):
            return {k: self._resolve(v, now) for k, v in value.items()}
        if isinstance(value, list):
            return [self._resolve(v, now) for v in value]
        return value

    def _row_to_doc(self, row: dict[str, Any]) -> Document:
        return Document(id=row["id"], data=json.loads(row["data_json"]), version=str(row["version"]))

    def _read(self, conn: sqlite3.Connection, collection: str, doc_id: str) -> dict[str, Any] | None:
        return conn.execute(
            "SELECT * FROM documents WHERE collection = ? AND id = ?", (collection, doc_id)
        ).fetchone()

    def _write(self, collection: str, op: str, fn) -> Any:  # type: ignore[no-untyped-def]
        """Run fn(conn, now) in one transaction, then notify listeners."""
        now = self._clock.now_utc().isoformat()
        with self._write_lock:
            conn = self._get_conn()
            try:
                conn.execute("BEGIN IMMEDIATE")
                result = fn(conn, now)
                conn.commit()
                seq = self._hub.mark_commit()
            except StoreError:
                conn.rollback()
                raise
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(f"{op} on '{collection}' failed: {e}") from e
            finally:
                conn.close()
        logger.debug("%s on %s committed", op, collection)
        self._hub.notify(collection, seq)
        return result

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str:
        new_id = doc_id or uuid4().hex

        def _create(conn: sqlite3.Connection, now: str) -> str:
            if self._read(conn, collection, new_id) is not None:
                raise VersionConflict(f"Document {collection}/{new_id} already exists")
            conn.execute(
                "INSERT INTO documents (collection, id, data_json, version) VALUES (?, ?, ?, 1)",
                (collection, new_id, json.dumps(self._resolve(data, now))),
            )
            return new_id

        return self._write(collection, "create", _create)  # type: ignore[no-any-return]

    def get(self, collection: str, doc_id: str) -> Document | None:
        conn = self._get_conn()
        try:
            row = self._read(conn, collection, doc_id)
        except sqlite3.Error as e:
            raise StoreError(f"get on '{collection}' failed: {e}") from e
        finally:
            conn.close()
        return self._row_to_doc(row) if row else None

    def set(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        *,
        if_version: str | None = None,
    ) -> None:
        def _set(conn: sqlite3.Connection, now: str) -> None:
            row = self._read(conn, collection, doc_id)
            payload = json.dumps(self._resolve(data, now))
            if if_version is not None and (row is None or str(row["version"]) != if_version):
                raise VersionConflict(
                    f"Document {collection}/{doc_id} changed since version {if_version}"
                )
            if row is None:
                conn.execute(
                    "INSERT INTO documents (collection, id, data_json, version) "
                    "VALUES (?, ?, ?, 1)",
                    (collection, doc_id, payload),
                )
            elif if_version is None:
                conn.execute(
                    "UPDATE documents SET data_json = ?, version = version + 1 "
                    "WHERE collection = ? AND id = ?",
                    (payload, collection, doc_id),
                )
            else:
                cursor = conn.execute(
                    "UPDATE documents SET data_json = ?, version = version + 1 "
                    "WHERE collection = ? AND id = ? AND version = ?",
                    (payload, collection, doc_id, int(if_version)),
                )
                if cursor.rowcount == 0:
                    raise VersionConflict(
                        f"Document {collection}/{doc_id} changed since version {if_version}"
                    )

        self._write(collection, "set", _set)

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        def _update(conn: sqlite3.Connection, now: str) -> None:
            row = self._read(conn, collection, doc_id)
            if row is None:
                raise StoreError(f"Document {collection}/{doc_id} not found")
            data = json.loads(row["data_json"])
            data.update(self._resolve(fields, now))
            conn.execute(
                "UPDATE documents SET data_json = ?, version = version + 1 "
                "WHERE collection = ? AND id = ?",
                (json.dumps(data), collection, doc_id),
            )

        self._write(collection, "update", _update)

    def delete(self, collection: str, doc_id: str) -> None:
        def _delete(conn: sqlite3.Connection, now: str) -> None:
            conn.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?", (collection, doc_id)
            )

        self._write(collection, "delete", _delete)

    def array_union(self, collection: str, doc_id: str, field: str, values: list[Any]) -> None:
        def _union(conn: sqlite3.Connection, now: str) -> None:
            row = self._read(conn, collection, doc_id)
            if row is None:
                raise StoreError(f"Document {collection}/{doc_id} not found")
            data = json.loads(row["data_json"])
            current = data.get(field) or []
            for value in self._resolve(values, now):
                if value not in current:
                    current.append(value)
            data[field] = current
            conn.execute(
                "UPDATE documents SET data_json = ?, version = version + 1 "
                "WHERE collection = ? AND id = ?",
                (json.dumps(data), collection, doc_id),
            )

        self._write(collection, "array_union", _union)

    def list(
        self, collection: str, *, order_by: str = "created_at", descending: bool = True
    ) -> list[Document]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM documents WHERE collection = ? ORDER BY seq ASC", (collection,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"list on '{collection}' failed: {e}") from e
        finally:
            conn.close()
        docs = [self._row_to_doc(r) for r in rows]
        present = [d for d in docs if d.data.get(order_by) is not None]
        missing = [d for d in docs if d.data.get(order_by) is None]
        present.sort(key=lambda d: str(d.data[order_by]), reverse=descending)
        return present + missing

    def subscribe(
        self,
        collection: str,
        listener: Listener,
        *,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> LiveSubscription:
        return self._hub.subscribe(collection, listener, order_by, descending)

    def _fetch_for_hub(self, collection: str, order_by: str, descending: bool) -> list[Document]:
        return self.list(collection, order_by=order_by, descending=descending)
