import asyncio
import json

import pytest
from appwrite.exception import AppwriteException
from appwrite.query import Query

from app.config.appwrite import AppwriteFactory
from app.config.settings import Settings
from app.models.base import without_system_fields
from app.services.appwrite_client import DocumentStore
from app.utils.exceptions import (
    Conflict,
    InvalidSession,
    NotFound,
    RateLimited,
    ServerMisconfigured,
    Unauthenticated,
    UpstreamFailure,
    ValidationError,
    error_for_status,
    wrap_unexpected,
)
from app.utils.json_fields import dump_json_field, parse_json_field


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, []),
        ("", []),
        ("not json", []),
        ('{"a": 1}', []),
        ('[{"url": "https://x"}]', [{"url": "https://x"}]),
        ([1, 2], [1, 2]),
    ],
)
def test_parse_json_field_list(raw, expected):
    assert parse_json_field(raw, list, "sources") == expected


def test_parse_json_field_dict():
    assert parse_json_field('{"theme": "dark"}', dict) == {"theme": "dark"}
    assert parse_json_field("[1]", dict) == {}


def test_dump_json_field_defaults_to_empty_list():
    assert dump_json_field(None) == "[]"
    assert json.loads(dump_json_field([{"title": "é"}])) == [{"title": "é"}]


@pytest.mark.parametrize(
    "status_code,error_cls",
    [
        (400, ValidationError),
        (401, Unauthenticated),
        (404, NotFound),
        (409, Conflict),
        (429, RateLimited),
        (500, UpstreamFailure),
        (502, UpstreamFailure),
    ],
)
def test_error_for_status(status_code, error_cls):
    error = error_for_status(status_code, "upstream said no", "some_type")

    assert type(error) is error_cls
    assert error.status_code in (status_code, 500)
    assert error.error_type == "some_type"


def test_details_only_rendered_for_server_errors():
    assert NotFound("gone", details="secret").to_body() == {"error": "gone"}
    assert UpstreamFailure("failed", details="trace").to_body() == {"error": "failed", "details": "trace"}


def test_invalid_session_is_unauthenticated():
    assert isinstance(InvalidSession(), Unauthenticated)
    assert InvalidSession().status_code == 401


def test_wrap_unexpected():
    misconfigured = ServerMisconfigured("Server mis-configuration: missing APPWRITE_API_KEY")
    assert wrap_unexpected("Failed", misconfigured) is misconfigured

    wrapped = wrap_unexpected("Failed to fetch chatbot", RuntimeError("boom"))
    assert wrapped.status_code == 500
    assert wrapped.to_body() == {"error": "Failed to fetch chatbot", "details": "boom"}


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("APPWRITE_ENDPOINT", " cloud.appwrite.io/v1/ ")
    monkeypatch.setenv("APPWRITE_PROJECT_ID", "proj")
    monkeypatch.setenv("APPWRITE_API_KEY", "   ")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test")
    monkeypatch.setenv("DISABLE_CHATBOT_CREATION", "TRUE")
    monkeypatch.setenv("APPWRITE_MESSAGES_COLLECTION_ID", "msgs")
    monkeypatch.setenv("APPWRITE_RESEARCH_COLLECTION_ID", "reports")

    settings = Settings.from_env()

    assert settings.appwrite_endpoint == "https://cloud.appwrite.io/v1"
    assert settings.appwrite_api_key is None
    assert settings.appwrite_configured
    assert settings.cors_allow_origins == ["https://a.test", "https://b.test"]
    assert settings.disable_chatbot_creation is True
    assert settings.collections.messages == "msgs"
    assert settings.collections.research_reports == "reports"


class RecordingDatabases:
    """Records the keyword arguments each SDK method receives."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def list_documents(self, **kwargs):
        self.calls.append(("list_documents", kwargs))
        if self.error:
            raise self.error
        return {"total": 0, "documents": []}

    def get_document(self, **kwargs):
        self.calls.append(("get_document", kwargs))
        if self.error:
            raise self.error
        return {"$id": kwargs["document_id"]}


def test_document_store_passes_queries_to_sdk():
    databases = RecordingDatabases()
    store = DocumentStore(databases, "main")

    documents = asyncio.run(
        store.list_documents("chatbots", filters=[Query.equal("userId", "u1")], ordering=[Query.order_asc("n")], limit=3)
    )

    assert documents == []
    [(name, kwargs)] = databases.calls
    assert name == "list_documents"
    assert kwargs["database_id"] == "main"
    assert kwargs["collection_id"] == "chatbots"
    assert [json.loads(q)["method"] for q in kwargs["queries"]] == ["equal", "orderAsc", "limit"]
    assert json.loads(kwargs["queries"][-1])["values"] == [3]


def test_appwrite_errors_map_to_error_kinds():
    databases = RecordingDatabases(AppwriteException("Document not found", 404, "document_not_found"))

    with pytest.raises(NotFound) as excinfo:
        asyncio.run(DocumentStore(databases, "main").get_document("chatbots", "x"))

    assert excinfo.value.error_type == "document_not_found"
    assert excinfo.value.message == "Document not found"


def test_transport_failure_without_code_is_upstream_failure():
    databases = RecordingDatabases(AppwriteException("Connection refused"))

    with pytest.raises(UpstreamFailure) as excinfo:
        asyncio.run(DocumentStore(databases, "main").list_documents("chatbots"))

    assert excinfo.value.status_code == 500
    assert error_for_status(None, "down").status_code == 500


def test_factory_requires_endpoint_and_project():
    factory = AppwriteFactory(Settings(appwrite_project_id="proj"))

    with pytest.raises(ServerMisconfigured):
        factory.documents(session="secret-1")


def test_factory_admin_requires_api_key():
    factory = AppwriteFactory(Settings(appwrite_endpoint="https://aw.test/v1", appwrite_project_id="proj"))

    factory.documents(session="secret-1")
    with pytest.raises(ServerMisconfigured) as excinfo:
        factory.documents(admin=True)

    assert excinfo.value.message == "Server mis-configuration: missing APPWRITE_API_KEY"


def test_without_system_fields_keeps_ids_and_timestamps():
    document = {
        "$id": "doc1",
        "$createdAt": "2026-01-01",
        "$updatedAt": "2026-01-02",
        "$permissions": ['read("user:u1")'],
        "$databaseId": "main",
        "$collectionId": "chatbots",
        "title": "Acme",
    }

    assert without_system_fields(document) == {
        "$id": "doc1",
        "$createdAt": "2026-01-01",
        "$updatedAt": "2026-01-02",
        "title": "Acme",
    }
