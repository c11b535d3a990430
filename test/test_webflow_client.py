"""
Tests for the Webflow API client

Runs the real client against the in-memory fake API through
httpx.MockTransport.
"""

import httpx
import pytest

from webflow_cms.exceptions import (
    ProviderNotConfiguredError,
    ResourceNotFoundError,
    WebflowAPIError,
    WebflowTimeoutError,
)
from webflow_cms.fields.schema import SchemaLoadStatus
from webflow_cms.services.webflow_client import PAGE_SIZE, WebflowClient


class TestRequests:
    """Test request construction and error translation"""

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, webflow_client, fake_webflow):
        await webflow_client.list_collections("site1")
        request = fake_webflow.requests_to("GET", "/v2/sites/site1/collections")[0]
        assert request.headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_missing_token_raises_before_any_request(self, unconfigured_client, fake_webflow):
        with pytest.raises(ProviderNotConfiguredError):
            await unconfigured_client.list_collections("site1")
        assert fake_webflow.requests == []

    @pytest.mark.asyncio
    async def test_not_found(self, webflow_client):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await webflow_client.get_item("col1", "missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.details["resource_type"] == "Item"

    @pytest.mark.asyncio
    async def test_upstream_error_keeps_status_and_body(self, webflow_client, fake_webflow):
        fake_webflow.fail("GET", "/v2/sites/site1/collections", 401)
        with pytest.raises(WebflowAPIError) as exc_info:
            await webflow_client.list_collections("site1")
        error = exc_info.value
        assert error.status_code == 502
        assert error.message == "Failed to fetch collections"
        assert error.details["upstream_status"] == 401
        assert error.details["upstream_body"]["code"] == "fake_error"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = WebflowClient(access_token="t", transport=httpx.MockTransport(handler))
        with pytest.raises(WebflowTimeoutError) as exc_info:
            await client.get_site("site1")
        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = WebflowClient(access_token="t", transport=httpx.MockTransport(handler))
        with pytest.raises(WebflowAPIError) as exc_info:
            await client.get_site("site1")
        assert exc_info.value.details["operation"] == "get_site"


class TestFieldSchemaFallback:
    """Test the three-tier field schema load"""

    @pytest.mark.asyncio
    async def test_fields_endpoint_first(self, webflow_client, fake_webflow):
        result = await webflow_client.list_collection_fields("col1")
        assert result.status is SchemaLoadStatus.LOADED
        assert result.source == "fields_endpoint"
        assert [f.slug for f in result.fields][:2] == ["name", "slug"]
        assert fake_webflow.requests_to("GET", "/v2/collections/col1") == []

    @pytest.mark.asyncio
    async def test_falls_back_to_collection_object(self, webflow_client, fake_webflow):
        fake_webflow.items["col2"] = []
        fake_webflow.embedded_fields["col2"] = [{"slug": "title", "displayName": "Title", "type": "PlainText"}]
        result = await webflow_client.list_collection_fields("col2")
        assert result.source == "collection_get"
        assert [f.slug for f in result.fields] == ["title"]

    @pytest.mark.asyncio
    async def test_falls_back_to_legacy_api(self, webflow_client, fake_webflow):
        fake_webflow.legacy_fields["col3"] = [{"slug": "headline", "name": "Headline", "type": "Text"}]
        result = await webflow_client.list_collection_fields("col3")
        assert result.source == "legacy_http"
        assert result.fields[0].label == "Headline"
        legacy_request = fake_webflow.requests_to("GET", "/collections/col3/fields")[0]
        assert legacy_request.headers["Accept-Version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_empty_collection_is_empty_not_failed(self, webflow_client, fake_webflow):
        fake_webflow.items["col4"] = []
        fake_webflow.embedded_fields["col4"] = []
        result = await webflow_client.list_collection_fields("col4")
        assert result.status is SchemaLoadStatus.EMPTY
        assert result.ok

    @pytest.mark.asyncio
    async def test_all_tiers_failing_is_failed(self, webflow_client):
        result = await webflow_client.list_collection_fields("nowhere")
        assert result.status is SchemaLoadStatus.FAILED
        assert not result.ok
        assert result.error

    @pytest.mark.asyncio
    async def test_missing_token_raises(self, unconfigured_client):
        with pytest.raises(ProviderNotConfiguredError):
            await unconfigured_client.list_collection_fields("col1")


class TestItems:
    """Test item endpoints"""

    @pytest.mark.asyncio
    async def test_list_items_follows_pagination(self, webflow_client, fake_webflow):
        fake_webflow.items["big"] = [{"id": f"i{n}", "fieldData": {"name": str(n)}} for n in range(PAGE_SIZE + 5)]
        items = await webflow_client.list_items("big")
        assert len(items) == PAGE_SIZE + 5
        assert items[-1]["id"] == f"i{PAGE_SIZE + 4}"
        assert len(fake_webflow.requests_to("GET", "/v2/collections/big/items")) == 2

    @pytest.mark.asyncio
    async def test_count_items_uses_pagination_total(self, webflow_client):
        assert await webflow_client.count_items("col1") == 2

    @pytest.mark.asyncio
    async def test_create_item_publishes_live(self, webflow_client, fake_webflow):
        created = await webflow_client.create_item("col1", {"fieldData": {"name": "New"}})
        assert created["fieldData"]["name"] == "New"
        assert len(fake_webflow.requests_to("POST", "/v2/collections/col1/items/live")) == 1

    @pytest.mark.asyncio
    async def test_create_item_staged(self, fake_webflow):
        client = WebflowClient(
            access_token="t", publish_live=False, transport=httpx.MockTransport(fake_webflow.handler)
        )
        await client.create_item("col1", {"fieldData": {"name": "Staged"}})
        assert len(fake_webflow.requests_to("POST", "/v2/collections/col1/items")) == 1

    @pytest.mark.asyncio
    async def test_update_item_patches(self, webflow_client, fake_webflow):
        updated = await webflow_client.update_item("col1", "post1", {"fieldData": {"name": "Renamed"}})
        assert updated["fieldData"]["name"] == "Renamed"
        assert updated["fieldData"]["slug"] == "hello-world"
        assert len(fake_webflow.requests_to("PATCH", "/v2/collections/col1/items/post1/live")) == 1

    @pytest.mark.asyncio
    async def test_delete_item_returns_none(self, webflow_client, fake_webflow):
        assert await webflow_client.delete_item("col1", "post1") is None
        assert [i["id"] for i in fake_webflow.items["col1"]] == ["post2"]


class TestSites:
    """Test site endpoints"""

    @pytest.mark.asyncio
    async def test_publish_body(self, webflow_client):
        data = await webflow_client.publish_site("site1", ["example.com"])
        assert data == {"customDomains": ["example.com"], "publishToWebflowSubdomain": True}

    @pytest.mark.asyncio
    async def test_publish_without_domains(self, webflow_client):
        data = await webflow_client.publish_site("site1")
        assert data["customDomains"] == []
