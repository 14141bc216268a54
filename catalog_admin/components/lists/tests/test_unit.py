"""
Catalog lists component unit tests.
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from catalog_admin.components.lists import (
    AddListItemInput,
    DeleteListItemInput,
    ListItemsInput,
    run,
)
from catalog_admin.domain.errors import StoreError
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document


@pytest.fixture
def store() -> Mock:
    return Mock()


def test_add_trims_and_keeps_case(store: Mock) -> None:
    store.create.return_value = "abc"
    store.get.return_value = Document(
        id="abc", data={"name": "Ecoshift Corp", "created_at": "2025-01-01T00:00:00+00:00"}
    )

    out = run(AddListItemInput(collection="websites", raw_name="  Ecoshift Corp "), store=store)

    assert out.success
    assert out.item is not None
    assert out.item.id == "abc"
    assert out.item.name == "Ecoshift Corp"
    store.create.assert_called_once_with(
        "websites", {"name": "Ecoshift Corp", "created_at": SERVER_TIMESTAMP}
    )


def test_add_blank_is_rejected_without_store_call(store: Mock) -> None:
    out = run(AddListItemInput(collection="brands", raw_name="   "), store=store)

    assert not out.success
    assert out.errors[0].code == "VALIDATION_EMPTY"
    store.create.assert_not_called()


def test_unknown_collection(store: Mock) -> None:
    out = run(AddListItemInput(collection="products", raw_name="Lamp"), store=store)

    assert not out.success
    assert out.errors[0].code == "UNKNOWN_COLLECTION"
    store.create.assert_not_called()


def test_add_store_failure(store: Mock) -> None:
    store.create.side_effect = StoreError("permission denied")

    out = run(AddListItemInput(collection="categories", raw_name="Fans"), store=store)

    assert not out.success
    assert out.errors[0].code == "STORE_WRITE_FAILURE"


def test_list_oldest_first(store: Mock) -> None:
    store.list.return_value = [
        Document(id="1", data={"name": "A"}),
        Document(id="2", data={"name": "B"}),
    ]

    out = run(ListItemsInput(collection="categories"), store=store)

    assert out.success
    assert [i.name for i in out.items] == ["A", "B"]
    store.list.assert_called_once_with("categories", descending=False)


def test_delete(store: Mock) -> None:
    out = run(DeleteListItemInput(collection="brands", item_id="x1"), store=store)

    assert out.success
    store.delete.assert_called_once_with("brands", "x1")


def test_delete_failure(store: Mock) -> None:
    store.delete.side_effect = StoreError("offline")

    out = run(DeleteListItemInput(collection="brands", item_id="x1"), store=store)

    assert not out.success
    assert out.errors[0].code == "STORE_WRITE_FAILURE"
