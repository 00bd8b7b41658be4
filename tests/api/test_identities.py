"""Tests for the identity API endpoints."""
import pytest
from fastapi.testclient import TestClient

from faceapp.core.config import settings
from faceapp.infrastructure.dependencies import get_identity_matcher
from faceapp.infrastructure.storage.memory import InMemoryDescriptorStore
from faceapp.main import app
from faceapp.services.identity_matcher import IdentityMatcher

API = settings.API_V1_STR


@pytest.fixture
def api_store():
    return InMemoryDescriptorStore()


@pytest.fixture
def client(api_store):
    matcher = IdentityMatcher(store=api_store, threshold=0.6, descriptor_length=4)
    app.dependency_overrides[get_identity_matcher] = lambda: matcher
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_enroll_then_match(client):
    enrolled = client.post(f"{API}/identities", json={"name": "Alice", "descriptor": [0.1, 0.2, 0.3, 0.4]})
    matched = client.post(f"{API}/identities/match", json={"descriptor": [0.1, 0.2, 0.3, 0.5]})

    assert enrolled.status_code == 201
    assert enrolled.json()["name"] == "Alice"
    assert enrolled.json()["record_id"]
    assert matched.status_code == 200
    body = matched.json()
    assert body["matched"] is True
    assert body["name"] == "Alice"
    assert body["distance"] == pytest.approx(0.1)


def test_match_without_candidates(client):
    response = client.post(f"{API}/identities/match", json={"descriptor": [0.0, 0.0, 0.0, 0.0]})

    assert response.status_code == 200
    assert response.json() == {"matched": False, "name": None, "distance": None}


def test_list_identities(client):
    client.post(f"{API}/identities", json={"name": "Bob", "descriptor": [1.0, 0.0, 0.0, 0.0]})

    response = client.get(f"{API}/identities")

    assert response.status_code == 200
    identities = response.json()["identities"]
    assert [i["name"] for i in identities] == ["Bob"]
    assert "descriptor" not in identities[0]


def test_wrong_descriptor_length_is_unprocessable(client):
    response = client.post(f"{API}/identities/match", json={"descriptor": [0.1, 0.2]})
    assert response.status_code == 422


def test_blank_name_is_unprocessable(client, api_store):
    response = client.post(f"{API}/identities", json={"name": "   ", "descriptor": [0.1, 0.2, 0.3, 0.4]})

    assert response.status_code == 422
    assert api_store.append_calls == 0


@pytest.mark.parametrize("method,path,payload", [
    ("get", "/identities", None),
    ("post", "/identities/match", {"descriptor": [0.1, 0.2, 0.3, 0.4]}),
    ("post", "/identities", {"name": "Alice", "descriptor": [0.1, 0.2, 0.3, 0.4]}),
])
def test_store_outage_is_service_unavailable(client, api_store, method, path, payload):
    api_store.fail_with = "firestore unreachable"

    response = client.request(method.upper(), f"{API}{path}", json=payload)

    assert response.status_code == 503
    assert response.json()["detail"] == "Descriptor store unavailable"
