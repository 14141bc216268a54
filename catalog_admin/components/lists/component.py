"""
Catalog lists component - quick-add categories, brands and websites.

Names are trimmed and stored as typed. Deleting an entry never touches
products that already copied its name.
"""

from __future__ import annotations

import logging

from catalog_admin.domain.collections import LIST_COLLECTIONS
from catalog_admin.domain.entities import ListItem
from catalog_admin.domain.errors import StoreError
from catalog_admin.domain.normalize import clean_label
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document

from .models import (
    AddListItemInput,
    DeleteListItemInput,
    ListItemOutput,
    ListItemsInput,
    ListItemsOutput,
    ValidationError,
)
from .ports import ListStorePort

logger = logging.getLogger(__name__)


def _check_collection(collection: str) -> list[ValidationError]:
    if collection in LIST_COLLECTIONS:
        return []
    return [
        ValidationError(
            field="collection",
            code="UNKNOWN_COLLECTION",
            message=f"Collection must be one of: {', '.join(LIST_COLLECTIONS)}",
        )
    ]


def _store_error(action: str, exc: StoreError) -> ValidationError:
    return ValidationError(
        field="_store", code="STORE_WRITE_FAILURE", message=f"Could not {action}: {exc}"
    )


def _to_item(doc: Document) -> ListItem:
    return ListItem.model_validate({**doc.data, "id": doc.id})


# --- Component Entry Points ---


def run_list(inp: ListItemsInput, *, store: ListStorePort) -> ListItemsOutput:
    """
    List entries of a collection, oldest first.

    Args:
        inp: Input naming the collection.
        store: Document store port.

    Returns:
        ListItemsOutput with the entries or errors.
    """
    errors = _check_collection(inp.collection)
    if errors:
        return ListItemsOutput(errors=errors, success=False)
    try:
        docs = store.list(inp.collection, descending=False)
    except StoreError as e:
        logger.exception("Listing %s failed", inp.collection)
        return ListItemsOutput(errors=[_store_error(f"list {inp.collection}", e)], success=False)
    return ListItemsOutput(items=[_to_item(d) for d in docs])


def run_add(inp: AddListItemInput, *, store: ListStorePort) -> ListItemOutput:
    """
    Add an entry. Blank names are rejected before any store call.

    Args:
        inp: Input with the collection and the raw name.
        store: Document store port.

    Returns:
        ListItemOutput with the created entry or errors.
    """
    errors = _check_collection(inp.collection)
    if errors:
        return ListItemOutput(errors=errors, success=False)

    name = clean_label(inp.raw_name)
    if not name:
        logger.warning("Ignoring empty entry for %s", inp.collection)
        return ListItemOutput(
            errors=[ValidationError(field="name", code="VALIDATION_EMPTY", message="Name is required")],
            success=False,
        )

    try:
        item_id = store.create(inp.collection, {"name": name, "created_at": SERVER_TIMESTAMP})
        doc = store.get(inp.collection, item_id)
    except StoreError as e:
        logger.exception("Adding %s to %s failed", name, inp.collection)
        return ListItemOutput(errors=[_store_error(f"add to {inp.collection}", e)], success=False)

    logger.info("Added %s to %s", name, inp.collection)
    item = _to_item(doc) if doc else ListItem(id=item_id, name=name)
    return ListItemOutput(item=item)


def run_delete(inp: DeleteListItemInput, *, store: ListStorePort) -> ListItemOutput:
    errors = _check_collection(inp.collection)
    if errors:
        return ListItemOutput(errors=errors, success=False)
    try:
        store.delete(inp.collection, inp.item_id)
    except StoreError as e:
        logger.exception("Deleting %s/%s failed", inp.collection, inp.item_id)
        return ListItemOutput(errors=[_store_error(f"delete from {inp.collection}", e)], success=False)
    logger.info("Deleted %s/%s", inp.collection, inp.item_id)
    return ListItemOutput()


def run(
    inp: ListItemsInput | AddListItemInput | DeleteListItemInput,
    *,
    store: ListStorePort,
) -> ListItemsOutput | ListItemOutput:
    """
    Main entry point for the lists component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ListItemsInput):
        return run_list(inp, store=store)
    elif isinstance(inp, AddListItemInput):
        return run_add(inp, store=store)
    elif isinstance(inp, DeleteListItemInput):
        return run_delete(inp, store=store)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
