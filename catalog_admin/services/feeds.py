"""
Live feeds keep a view's list fresh while the view is mounted.

A feed owns exactly one store subscription between mount() and unmount().
Use it as a context manager so the subscription is released on every exit
path, including errors raised while the view is open.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from types import TracebackType
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from catalog_admin.domain.collections import (
    COLLECTION_CUSTOM_SECTIONS,
    COLLECTION_PRODUCTS,
    COLLECTION_PROJECTS,
)
from catalog_admin.domain.entities import CustomSection, ProductRecord, ProjectRecord
from catalog_admin.ports.store import Document, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class LiveFeed(Generic[T]):
    def __init__(
        self,
        store: Any,
        collection: str,
        model: type[T],
        *,
        order_by: str = "created_at",
        descending: bool = True,
        on_change: Callable[[list[T]], None] | None = None,
    ) -> None:
        self._store = store
        self.collection = collection
        self._model = model
        self._order_by = order_by
        self._descending = descending
        self._on_change = on_change
        self._subscription: Subscription | None = None
        self._items: list[T] = []
        self._lock = threading.Lock()

    @property
    def mounted(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    @property
    def items(self) -> list[T]:
        with self._lock:
            return list(self._items)

    def mount(self) -> LiveFeed[T]:
        if self.mounted:
            return self
        self._subscription = self._store.subscribe(
            self.collection,
            self._receive,
            order_by=self._order_by,
            descending=self._descending,
        )
        logger.debug("Feed on %s mounted", self.collection)
        return self

    def unmount(self) -> None:
        if self._subscription is None:
            return
        self._subscription.close()
        self._subscription = None
        logger.debug("Feed on %s unmounted", self.collection)

    def _receive(self, docs: list[Document]) -> None:
        parsed = [self._model.model_validate({**d.data, "id": d.id}) for d in docs]
        with self._lock:
            self._items = parsed
        if self._on_change is not None:
            self._on_change(list(parsed))

    def __enter__(self) -> LiveFeed[T]:
        return self.mount()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unmount()


def product_feed(store: Any, **kwargs: Any) -> LiveFeed[ProductRecord]:
    return LiveFeed(store, COLLECTION_PRODUCTS, ProductRecord, **kwargs)


def project_feed(store: Any, **kwargs: Any) -> LiveFeed[ProjectRecord]:
    return LiveFeed(store, COLLECTION_PROJECTS, ProjectRecord, **kwargs)


def section_feed(store: Any, **kwargs: Any) -> LiveFeed[CustomSection]:
    """Sections are listed oldest first, like the section manager."""
    kwargs.setdefault("descending", False)
    return LiveFeed(store, COLLECTION_CUSTOM_SECTIONS, CustomSection, **kwargs)
