"""Tests for the generic document routes."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from docvault.api.v1.routes_items import document_store
from docvault.core.exceptions import ConfigurationError, UpstreamError
from docvault.documents.memory import InMemoryDocumentStore
from docvault.main import app


@pytest.fixture
def documents():
    store = InMemoryDocumentStore()
    app.dependency_overrides[document_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def test_list_unknown_container_is_empty(client, documents):
    response = client.get("/api/items/Personas")

    assert response.status_code == 200
    assert response.json() == []


def test_upsert_then_get(client, documents):
    response = client.post("/api/items/Personas", json={"id": "hr", "name": "HR"})

    assert response.status_code == 200
    assert response.json()["id"] == "hr"
    assert response.json()["name"] == "HR"

    fetched = client.get("/api/items/Personas/hr")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "HR"
    assert len(client.get("/api/items/Personas").json()) == 1


def test_upsert_without_id_generates_one(client, documents):
    response = client.post("/api/items/Notes", json={"text": "hello"})

    assert response.status_code == 200
    new_id = response.json()["id"]
    assert new_id
    assert client.get(f"/api/items/Notes/{new_id}").json() == {"text": "hello", "id": new_id}


def test_registry_documents_are_normalized_to_camel_case(client, documents):
    body = {
        "id": "loan",
        "name": "Loan Agreement",
        "fields": [{"field_name": "Borrower", "prompt": "Who borrows?"}],
    }

    response = client.post("/api/items/Queries", json=body)

    assert response.status_code == 200
    assert response.json()["fields"] == [{"fieldName": "Borrower", "prompt": "Who borrows?"}]


def test_get_missing_document_is_404(client, documents):
    response = client.get("/api/items/Personas/nobody")

    assert response.status_code == 404
    assert response.json()["detail"] == "Not found"


def test_invalid_registry_document_is_422(client, documents):
    response = client.post("/api/items/Personas", json={"id": "p", "description": "no name"})

    assert response.status_code == 422
    assert "Invalid Personas document" in response.json()["detail"]


def test_non_object_body_is_422(client, documents):
    response = client.post("/api/items/Personas", json=["not", "an", "object"])

    assert response.status_code == 422


def test_upstream_failure_is_502(client):
    store = InMemoryDocumentStore()
    store.list_documents = AsyncMock(side_effect=UpstreamError("backend unavailable"))
    app.dependency_overrides[document_store] = lambda: store
    try:
        response = client.get("/api/items/Personas")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert response.json()["detail"] == "backend unavailable"


def test_misconfigured_store_is_500(client, monkeypatch):
    def broken():
        raise ConfigurationError("DOCUMENT_BUCKET_NAME not configured")

    monkeypatch.setattr("docvault.api.v1.routes_items.get_document_store", broken)

    response = client.get("/api/items/Personas")

    assert response.status_code == 500
    assert response.json()["detail"] == "Storage configuration error"


@pytest.mark.parametrize("container", ["%2E%2E", "%2E"])
def test_dot_container_is_rejected(client, documents, container):
    response = client.post(f"/api/items/{container}", json={"id": "escaped"})

    assert response.status_code == 422
    assert "Invalid container name" in response.json()["detail"]
    assert client.get(f"/api/items/{container}").status_code == 422
    assert client.get(f"/api/items/{container}/escaped").status_code == 422
