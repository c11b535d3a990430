"""
Pytest configuration and fixtures for Webflow CMS manager tests

Webflow is replaced by an in-memory fake served through httpx.MockTransport,
so the real WebflowClient code runs for every request without network access.
"""

import copy
import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from webflow_cms.dependencies import get_webflow_client
from webflow_cms.services.webflow_client import WebflowClient

TEST_TOKEN = "test-token"
SITE_ID = "site1"
COLLECTION_ID = "col1"


class FakeWebflow:
    """
    Minimal in-memory Webflow Data API.

    - ``fields``: collection id -> field list served by /collections/{id}/fields
    - ``embedded_fields``: fields returned inside GET /collections/{id}
    - ``legacy_fields``: fields served by the legacy v1 host
    - ``items``: collection id -> stored items
    - ``failures``: (method, path) -> HTTP status to return instead
    """

    def __init__(self):
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.fields: dict[str, list[dict[str, Any]]] = {}
        self.embedded_fields: dict[str, list[dict[str, Any]]] = {}
        self.legacy_fields: dict[str, list[dict[str, Any]]] = {}
        self.items: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[tuple[str, str], int] = {}
        self.requests: list[httpx.Request] = []
        self._next_id = 1

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def add_collection(
        self,
        collection_id: str,
        name: str,
        fields: list[dict[str, Any]] | None = None,
        items: list[dict[str, Any]] | None = None,
        site_id: str = SITE_ID,
    ) -> None:
        self.collections.setdefault(site_id, []).append(
            {"id": collection_id, "displayName": name, "singularName": name.rstrip("s"), "slug": name.lower()}
        )
        if fields is not None:
            self.fields[collection_id] = fields
        self.items[collection_id] = list(items or [])

    def fail(self, method: str, path: str, status_code: int = 500) -> None:
        self.failures[(method, path)] = status_code

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _known_collection(self, collection_id: str) -> bool:
        listed = any(c["id"] == collection_id for cs in self.collections.values() for c in cs)
        return listed or collection_id in self.items or collection_id in self.embedded_fields

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        status_code = self.failures.get((method, path))
        if status_code:
            return httpx.Response(status_code, json={"message": "upstream failure", "code": "fake_error"})

        parts = path.strip("/").split("/")
        if parts[0] != "v2":
            return self._legacy(parts)
        parts = parts[1:]

        if parts[0] == "sites":
            return self._sites(request, parts[1:])
        if parts[0] == "collections":
            return self._collections(request, parts[1:])
        return httpx.Response(404, json={"message": "Route not found"})

    def _legacy(self, parts: list[str]) -> httpx.Response:
        if len(parts) == 3 and parts[0] == "collections" and parts[2] == "fields":
            if parts[1] in self.legacy_fields:
                return httpx.Response(200, json=self.legacy_fields[parts[1]])
        return httpx.Response(404, json={"msg": "Not found"})

    def _sites(self, request: httpx.Request, parts: list[str]) -> httpx.Response:
        site_id = parts[0]
        if len(parts) == 1:
            return httpx.Response(200, json={"id": site_id, "displayName": "Test Site", "shortName": "test-site"})
        if parts[1] == "collections":
            if site_id not in self.collections:
                return httpx.Response(404, json={"message": "Site not found"})
            return httpx.Response(200, json={"collections": self.collections[site_id]})
        if parts[1] == "publish" and request.method == "POST":
            return httpx.Response(202, json=json.loads(request.content))
        return httpx.Response(404, json={"message": "Route not found"})

    def _collections(self, request: httpx.Request, parts: list[str]) -> httpx.Response:
        collection_id = parts[0]
        if not self._known_collection(collection_id) and collection_id not in self.fields:
            return httpx.Response(404, json={"message": "Collection not found"})

        if len(parts) == 1:
            collection = {"id": collection_id, "displayName": collection_id}
            if collection_id in self.embedded_fields:
                collection["fields"] = self.embedded_fields[collection_id]
            return httpx.Response(200, json=collection)

        if parts[1] == "fields":
            if collection_id not in self.fields:
                return httpx.Response(404, json={"message": "Route not found"})
            return httpx.Response(200, json={"fields": self.fields[collection_id]})

        if parts[1] == "items":
            item_parts = [p for p in parts[2:] if p != "live"]
            if not item_parts:
                return self._item_list(request, collection_id)
            return self._item(request, collection_id, item_parts[0])

        return httpx.Response(404, json={"message": "Route not found"})

    def _item_list(self, request: httpx.Request, collection_id: str) -> httpx.Response:
        items = self.items.setdefault(collection_id, [])
        if request.method == "POST":
            body = json.loads(request.content)
            item = {"id": f"item{self._next_id}", **body}
            self._next_id += 1
            items.append(item)
            return httpx.Response(202, json=item)

        offset = int(request.url.params.get("offset", 0))
        limit = int(request.url.params.get("limit", 100))
        page = items[offset : offset + limit]
        return httpx.Response(
            200,
            json={"items": page, "pagination": {"offset": offset, "limit": limit, "total": len(items)}},
        )

    def _item(self, request: httpx.Request, collection_id: str, item_id: str) -> httpx.Response:
        items = self.items.get(collection_id, [])
        item = next((i for i in items if i["id"] == item_id), None)
        if item is None:
            return httpx.Response(404, json={"message": "Item not found"})

        if request.method == "GET":
            return httpx.Response(200, json=item)
        if request.method == "PATCH":
            body = json.loads(request.content)
            item.update({k: v for k, v in body.items() if k != "fieldData"})
            item.setdefault("fieldData", {}).update(body.get("fieldData", {}))
            return httpx.Response(200, json=item)
        if request.method == "DELETE":
            items.remove(item)
            return httpx.Response(204)
        return httpx.Response(405, json={"message": "Method not allowed"})


BLOG_FIELDS = [
    {"id": "f1", "slug": "name", "displayName": "Name", "type": "PlainText", "isRequired": True},
    {"id": "f2", "slug": "slug", "displayName": "Slug", "type": "PlainText", "isRequired": True},
    {"id": "f3", "slug": "views", "displayName": "Views", "type": "Number", "isRequired": False},
    {"id": "f4", "slug": "published-on", "displayName": "Published On", "type": "DateTime", "isRequired": False},
    {"id": "f5", "slug": "featured", "displayName": "Featured", "type": "Switch", "isRequired": False},
    {"id": "f6", "slug": "gallery", "displayName": "Gallery", "type": "MultiImage", "isRequired": False},
]

BLOG_ITEMS = [
    {
        "id": "post1",
        "isDraft": False,
        "isArchived": False,
        "fieldData": {
            "name": "Hello World",
            "slug": "hello-world",
            "views": 1234,
            "published-on": "2024-01-15T10:30:00.000Z",
            "featured": True,
            "gallery": [{"fileId": "a", "url": "https://cdn.example.com/a.png", "alt": "A"}],
            "legacy-note": "kept",
        },
    },
    {
        "id": "post2",
        "isDraft": True,
        "isArchived": False,
        "fieldData": {"name": "", "title": "Second", "slug": "second"},
    },
]


@pytest.fixture
def fake_webflow():
    """Fake Webflow API with one blog collection."""
    fake = FakeWebflow()
    fake.add_collection(COLLECTION_ID, "Posts", fields=BLOG_FIELDS, items=copy.deepcopy(BLOG_ITEMS))
    return fake


@pytest.fixture
def webflow_client(fake_webflow):
    """WebflowClient wired to the fake API."""
    return WebflowClient(access_token=TEST_TOKEN, transport=httpx.MockTransport(fake_webflow.handler))


@pytest.fixture
def unconfigured_client(fake_webflow):
    """WebflowClient without an access token."""
    return WebflowClient(access_token=None, transport=httpx.MockTransport(fake_webflow.handler))


@pytest.fixture
def client(fake_webflow):
    """Test client for the FastAPI app backed by the fake Webflow API."""

    async def override_get_webflow_client():
        transport = httpx.MockTransport(fake_webflow.handler)
        async with WebflowClient(access_token=TEST_TOKEN, transport=transport) as webflow:
            yield webflow

    app.dependency_overrides[get_webflow_client] = override_get_webflow_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_app_client(fake_webflow):
    """Test client whose Webflow client has no access token."""

    async def override_get_webflow_client():
        transport = httpx.MockTransport(fake_webflow.handler)
        async with WebflowClient(access_token=None, transport=transport) as webflow:
            yield webflow

    app.dependency_overrides[get_webflow_client] = override_get_webflow_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
