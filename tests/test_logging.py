"""Tests for structured logging and the error logging middleware."""

import json
import logging
import sys

import pytest
from fastapi.testclient import TestClient

from docvault.api.v1.routes_items import document_store
from docvault.core.logging import CloudLoggingFormatter, collection_context
from docvault.core.middleware import _scope_from_path
from docvault.documents.memory import InMemoryDocumentStore
from docvault.main import app


def make_record(msg="hello", level=logging.INFO, **extra):
    record = logging.LogRecord("docvault.test", level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCloudLoggingFormatter:
    """Tests for CloudLoggingFormatter."""

    def test_formats_single_line_json(self):
        entry = json.loads(CloudLoggingFormatter().format(make_record(batch_id="b-1")))

        assert entry["message"] == "hello"
        assert entry["severity"] == "INFO"
        assert entry["logger"] == "docvault.test"
        assert entry["batch_id"] == "b-1"
        assert entry["timestamp"].endswith("Z")
        assert "msg" not in entry

    def test_includes_collection_context(self):
        token = collection_context.set("reports")
        try:
            entry = json.loads(CloudLoggingFormatter().format(make_record()))
        finally:
            collection_context.reset(token)

        assert entry["collection"] == "reports"

    def test_omits_empty_collection_context(self):
        entry = json.loads(CloudLoggingFormatter().format(make_record()))

        assert "collection" not in entry

    def test_includes_exception_details(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        entry = json.loads(CloudLoggingFormatter().format(record))

        assert entry["severity"] == "ERROR"
        assert entry["exception_type"] == "ValueError"
        assert entry["exception_message"] == "bad value"
        assert "Traceback" in entry["exception"]


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/items/Personas/hr", "Personas"),
        ("/api/items/Results", "Results"),
        ("/api/v1/collections/reports/uploads", "reports"),
        ("/api/v1/quality/seed/r-1", None),
        ("/health", None),
    ],
)
def test_scope_from_path(path, expected):
    assert _scope_from_path(path) == expected


def test_middleware_logs_client_errors(caplog):
    app.dependency_overrides[document_store] = lambda: InMemoryDocumentStore()
    try:
        with caplog.at_level(logging.WARNING, logger="docvault.core.middleware"):
            response = TestClient(app).get("/api/items/Personas/missing")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 404
    record = next(r for r in caplog.records if r.message == "Client error response")
    assert record.levelno == logging.WARNING
    assert record.http_status == 404
    assert record.method == "GET"
    assert record.scope_name == "Personas"
