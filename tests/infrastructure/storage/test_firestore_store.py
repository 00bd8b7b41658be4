"""Tests for the Firestore descriptor store against a mocked async client."""
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from faceapp.core.exceptions import StoreUnavailableError
from faceapp.infrastructure.storage.firestore import FirestoreDescriptorStore

CREATED = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return self._data


def make_client(snapshots=(), stream_error=None, add_error=None):
    async def stream():
        if stream_error is not None:
            raise stream_error
        for snapshot in snapshots:
            yield snapshot

    collection = MagicMock()
    collection.stream = MagicMock(side_effect=lambda: stream())
    collection.add = AsyncMock(
        side_effect=add_error,
        return_value=(CREATED, SimpleNamespace(id="new-doc"))
    )
    client = MagicMock()
    client.collection.return_value = collection
    return client, collection


async def test_fetch_all_maps_documents_to_records():
    client, _ = make_client([
        FakeSnapshot("a1", {"name": "Alice", "descriptor": [0.1, 0.2], "timestamp": CREATED}),
        FakeSnapshot("b2", {"name": "Bob", "descriptor": [0.3, 0.4], "timestamp": CREATED}),
    ])
    store = FirestoreDescriptorStore(client=client, collection_name="faces")

    records = await store.fetch_all()

    client.collection.assert_called_once_with("faces")
    assert [(r.record_id, r.name) for r in records] == [("a1", "Alice"), ("b2", "Bob")]
    assert np.allclose(records[1].descriptor, [0.3, 0.4])
    assert records[0].created_at == CREATED


async def test_fetch_all_skips_malformed_documents():
    client, _ = make_client([
        FakeSnapshot("ok", {"name": "Alice", "descriptor": [0.1], "timestamp": CREATED}),
        FakeSnapshot("no-name", {"descriptor": [0.1], "timestamp": CREATED}),
        FakeSnapshot("blank", {"name": "", "descriptor": [0.1], "timestamp": CREATED}),
        FakeSnapshot("bad-vector", {"name": "Eve", "descriptor": "nope", "timestamp": CREATED}),
        FakeSnapshot("empty", None),
    ])
    store = FirestoreDescriptorStore(client=client)

    records = await store.fetch_all()

    assert [r.record_id for r in records] == ["ok"]


async def test_fetch_all_wraps_client_errors():
    client, _ = make_client(stream_error=RuntimeError("403 Missing or insufficient permissions"))
    store = FirestoreDescriptorStore(client=client, collection_name="faces")

    with pytest.raises(StoreUnavailableError) as exc_info:
        await store.fetch_all()

    assert exc_info.value.details["collection"] == "faces"
    assert "permissions" in exc_info.value.details["error"]


async def test_append_writes_document_shape():
    client, collection = make_client()
    store = FirestoreDescriptorStore(client=client)

    record = await store.append("Alice", np.array([0.25, 0.5]), CREATED)

    collection.add.assert_awaited_once_with({
        "name": "Alice",
        "descriptor": [0.25, 0.5],
        "timestamp": CREATED,
    })
    assert record.record_id == "new-doc"
    assert record.name == "Alice"


async def test_append_wraps_client_errors():
    client, _ = make_client(add_error=ConnectionError("unreachable"))
    store = FirestoreDescriptorStore(client=client)

    with pytest.raises(StoreUnavailableError):
        await store.append("Alice", np.array([0.25, 0.5]), CREATED)


def test_client_initialization_errors_are_wrapped():
    client = MagicMock()
    client.collection.side_effect = ValueError("invalid collection path")

    with pytest.raises(StoreUnavailableError):
        FirestoreDescriptorStore(client=client)
