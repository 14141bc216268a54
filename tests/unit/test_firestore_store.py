"""Firestore adapter against a mocked client; no network."""

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gexc
from google.cloud import firestore

from catalog_admin.adapters.firestore_store import FirestoreDocumentStore
from catalog_admin.domain.errors import StoreError, VersionConflict
from catalog_admin.ports.store import SERVER_TIMESTAMP

VERSION = "2025-01-01T10:00:00.123456Z"


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def ref(client):
    ref = MagicMock()
    ref.id = "ECOSHIFTCORP"
    client.collection.return_value.document.return_value = ref
    return ref


@pytest.fixture
def store(client):
    return FirestoreDocumentStore(client=client)


def snapshot(doc_id, data, exists=True):
    snap = MagicMock()
    snap.id = doc_id
    snap.exists = exists
    snap.to_dict.return_value = data
    snap.update_time.rfc3339.return_value = VERSION
    return snap


def test_create_with_explicit_id_conflict(store, ref):
    ref.create.side_effect = gexc.AlreadyExists("exists")

    with pytest.raises(VersionConflict):
        store.create("classifications", {"tenant": "ECOSHIFTCORP"}, doc_id="ECOSHIFTCORP")


def test_create_translates_server_timestamp(store, ref):
    store.create("brands", {"name": "Philips", "created_at": SERVER_TIMESTAMP})

    written = ref.create.call_args[0][0]
    assert written["created_at"] is firestore.SERVER_TIMESTAMP


def test_get_returns_version_token(store, ref):
    ref.get.return_value = snapshot("ECOSHIFTCORP", {"brands": ["ECOSHIFT"]})

    doc = store.get("classifications", "ECOSHIFTCORP")

    assert doc is not None
    assert doc.data == {"brands": ["ECOSHIFT"]}
    assert doc.version == VERSION


def test_get_missing(store, ref):
    ref.get.return_value = snapshot("X", None, exists=False)

    assert store.get("classifications", "X") is None


def test_conditional_set_uses_update_time_precondition(store, client, ref):
    store.set("classifications", "ECOSHIFTCORP", {"brands": []}, if_version=VERSION)

    precondition = client.write_option.call_args.kwargs["last_update_time"]
    assert precondition.rfc3339() == VERSION
    ref.update.assert_called_once_with({"brands": []}, option=client.write_option.return_value)
    ref.set.assert_not_called()


def test_conditional_set_conflict(store, ref):
    ref.update.side_effect = gexc.FailedPrecondition("stale")

    with pytest.raises(VersionConflict):
        store.set("classifications", "ECOSHIFTCORP", {"brands": []}, if_version=VERSION)


def test_plain_set_replaces(store, ref):
    store.set("classifications", "ECOSHIFTCORP", {"brands": ["A"]})

    ref.set.assert_called_once_with({"brands": ["A"]})


def test_api_errors_become_store_errors(store, ref):
    ref.delete.side_effect = gexc.ServiceUnavailable("down")

    with pytest.raises(StoreError):
        store.delete("products", "p1")


def test_array_union_is_server_side(store, ref):
    store.array_union("custom_sections", "s1", "items", [{"id": "i1", "name": "Red"}])

    payload = ref.update.call_args[0][0]
    assert isinstance(payload["items"], firestore.ArrayUnion)


def test_subscription_unsubscribes_once(store, client):
    watch = client.collection.return_value.order_by.return_value.on_snapshot.return_value
    received = []

    handle = store.subscribe("products", received.append)
    callback = client.collection.return_value.order_by.return_value.on_snapshot.call_args[0][0]
    callback([snapshot("p1", {"name": "Lamp"})], [], None)
    handle.close()
    handle.close()

    assert [d.id for d in received[0]] == ["p1"]
    assert handle.closed
    watch.unsubscribe.assert_called_once()
