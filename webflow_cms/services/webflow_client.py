"""
Webflow Data API client.

Thin async wrapper over httpx. Every call is made exactly once; failures
are translated into CMSError subclasses and surfaced to the caller.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from webflow_cms.config import Settings, settings
from webflow_cms.exceptions import (
    CMSError,
    ProviderNotConfiguredError,
    ResourceNotFoundError,
    WebflowAPIError,
    WebflowTimeoutError,
)
from webflow_cms.fields.schema import FieldDescriptor, SchemaLoadResult, parse_schema
from webflow_cms.utils.metrics import record_schema_source, track_webflow_call

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:1000] or None


def _unwrap(data: Any, key: str) -> list:
    """Webflow wraps lists in an envelope, e.g. {"items": [...]}; older responses do not."""
    if isinstance(data, dict):
        data = data.get(key)
    return data if isinstance(data, list) else []


class WebflowClient:
    """Client for the collection, item and site endpoints of the Webflow API."""

    def __init__(
        self,
        access_token: str | None,
        base_url: str = "https://api.webflow.com/v2",
        legacy_base_url: str = "https://api.webflow.com",
        accept_version: str = "1.0.0",
        timeout: float = 10.0,
        publish_live: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token
        self.legacy_base_url = legacy_base_url.rstrip("/")
        self.accept_version = accept_version
        self.publish_live = publish_live
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {access_token or ''}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, config: Settings = settings, **kwargs) -> "WebflowClient":
        return cls(
            access_token=config.webflow_access_token,
            base_url=config.webflow_api_base_url,
            legacy_base_url=config.webflow_legacy_api_base_url,
            accept_version=config.webflow_accept_version,
            timeout=config.request_timeout_seconds,
            publish_live=config.publish_items_live,
            **kwargs,
        )

    async def __aenter__(self) -> "WebflowClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _ensure_configured(self) -> None:
        if not self.access_token:
            raise ProviderNotConfiguredError()

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        failure_message: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
        **kwargs,
    ) -> Any:
        """Send one request and decode the JSON body, raising on any failure."""
        self._ensure_configured()
        logger.debug("Webflow %s %s", method, url, extra={"operation": operation})

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise WebflowTimeoutError(operation=operation) from exc
        except httpx.RequestError as exc:
            raise WebflowAPIError(f"{failure_message}: {exc}", operation=operation) from exc

        if response.status_code == 404 and resource_type:
            raise ResourceNotFoundError(resource_type, resource_id)

        if response.is_error:
            body = _response_body(response)
            logger.warning(
                "Webflow %s failed with HTTP %s",
                operation,
                response.status_code,
                extra={"operation": operation, "status_code": response.status_code},
            )
            raise WebflowAPIError(
                failure_message,
                operation=operation,
                upstream_status=response.status_code,
                upstream_body=body,
            )

        if response.status_code == 204 or not response.content:
            return None
        return _response_body(response)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @track_webflow_call("list_collections")
    async def list_collections(self, site_id: str) -> list[dict[str, Any]]:
        data = await self._request(
            "list_collections",
            "GET",
            f"/sites/{site_id}/collections",
            "Failed to fetch collections",
            resource_type="Site",
            resource_id=site_id,
        )
        return _unwrap(data, "collections")

    @track_webflow_call("get_collection")
    async def get_collection(self, collection_id: str) -> dict[str, Any]:
        data = await self._request(
            "get_collection",
            "GET",
            f"/collections/{collection_id}",
            "Failed to fetch collection",
            resource_type="Collection",
            resource_id=collection_id,
        )
        return data if isinstance(data, dict) else {}

    async def _fields_from_fields_endpoint(self, collection_id: str) -> list | None:
        data = await self._request(
            "list_collection_fields", "GET", f"/collections/{collection_id}/fields", "Failed to fetch fields"
        )
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("fields"), list):
            return data["fields"]
        return None

    async def _fields_from_collection(self, collection_id: str) -> list | None:
        collection = await self.get_collection(collection_id)
        for key in ("fields", "collectionFields"):
            if isinstance(collection.get(key), list):
                return collection[key]
        return None

    async def _fields_from_legacy_api(self, collection_id: str) -> list | None:
        data = await self._request(
            "legacy_collection_fields",
            "GET",
            f"{self.legacy_base_url}/collections/{collection_id}/fields",
            "Webflow API error fetching fields",
            headers={"Accept-Version": self.accept_version},
        )
        return _unwrap(data, "fields") if not isinstance(data, list) else data

    @track_webflow_call("load_collection_fields")
    async def list_collection_fields(self, collection_id: str) -> SchemaLoadResult:
        """
        Load a collection's field schema.

        Tries, in order, the fields endpoint, the fields embedded in the
        collection object, and the legacy v1 HTTP API. The first tier that
        returns a field list wins. If every tier fails the result is FAILED
        with the last error, which is distinct from a collection that simply
        has no fields.
        """
        self._ensure_configured()

        tiers = (
            ("fields_endpoint", self._fields_from_fields_endpoint),
            ("collection_get", self._fields_from_collection),
            ("legacy_http", self._fields_from_legacy_api),
        )
        last_error = "No field list in any Webflow response"

        for tier, fetch in tiers:
            try:
                raw_fields = await fetch(collection_id)
                if raw_fields is None:
                    logger.debug("Tier %s returned no field list for %s", tier, collection_id)
                    continue
                fields: list[FieldDescriptor] = parse_schema(raw_fields)
            except (CMSError, PydanticValidationError) as exc:
                last_error = getattr(exc, "message", None) or str(exc)
                logger.info(
                    "Field schema tier %s failed for collection %s: %s",
                    tier,
                    collection_id,
                    last_error,
                    extra={"collection_id": collection_id},
                )
                continue

            record_schema_source(tier)
            return SchemaLoadResult.from_fields(fields, source=tier)

        record_schema_source("failed")
        logger.error(
            "Could not load field schema for collection %s",
            collection_id,
            extra={"collection_id": collection_id},
        )
        return SchemaLoadResult.failed(last_error)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    @track_webflow_call("list_items")
    async def list_items(self, collection_id: str) -> list[dict[str, Any]]:
        """Fetch every item of a collection, following offset pagination."""
        items: list[dict[str, Any]] = []
        offset = 0
        while True:
            data = await self._request(
                "list_items",
                "GET",
                f"/collections/{collection_id}/items",
                "Failed to fetch collection items",
                resource_type="Collection",
                resource_id=collection_id,
                params={"offset": offset, "limit": PAGE_SIZE},
            )
            page = _unwrap(data, "items")
            items.extend(page)

            pagination = data.get("pagination") if isinstance(data, dict) else None
            total = pagination.get("total") if isinstance(pagination, dict) else None
            offset += len(page)
            if len(page) < PAGE_SIZE or (isinstance(total, int) and offset >= total):
                return items

    @track_webflow_call("get_item")
    async def get_item(self, collection_id: str, item_id: str) -> dict[str, Any]:
        data = await self._request(
            "get_item",
            "GET",
            f"/collections/{collection_id}/items/{item_id}",
            "Failed to fetch collection item",
            resource_type="Item",
            resource_id=item_id,
        )
        return data if isinstance(data, dict) else {}

    @track_webflow_call("count_items")
    async def count_items(self, collection_id: str) -> int:
        data = await self._request(
            "count_items",
            "GET",
            f"/collections/{collection_id}/items",
            "Failed to count collection items",
            resource_type="Collection",
            resource_id=collection_id,
            params={"offset": 0, "limit": 1},
        )
        pagination = data.get("pagination") if isinstance(data, dict) else None
        if isinstance(pagination, dict) and isinstance(pagination.get("total"), int):
            return pagination["total"]
        return len(_unwrap(data, "items"))

    @track_webflow_call("create_item")
    async def create_item(
        self, collection_id: str, payload: dict[str, Any], live: bool | None = None
    ) -> dict[str, Any]:
        """Create an item; `live` defaults to the client's publish_live setting."""
        publish = self.publish_live if live is None else live
        url = f"/collections/{collection_id}/items"
        if publish:
            url += "/live"
        return await self._request(
            "create_item",
            "POST",
            url,
            "Failed to create collection item",
            resource_type="Collection",
            resource_id=collection_id,
            json=payload,
        )

    @track_webflow_call("update_item")
    async def update_item(
        self, collection_id: str, item_id: str, payload: dict[str, Any], live: bool | None = None
    ) -> dict[str, Any]:
        publish = self.publish_live if live is None else live
        url = f"/collections/{collection_id}/items/{item_id}"
        if publish:
            url += "/live"
        return await self._request(
            "update_item",
            "PATCH",
            url,
            "Failed to update collection item",
            resource_type="Item",
            resource_id=item_id,
            json=payload,
        )

    @track_webflow_call("delete_item")
    async def delete_item(self, collection_id: str, item_id: str) -> None:
        await self._request(
            "delete_item",
            "DELETE",
            f"/collections/{collection_id}/items/{item_id}",
            "Failed to delete item",
            resource_type="Item",
            resource_id=item_id,
        )

    # ------------------------------------------------------------------
    # Sites
    # ------------------------------------------------------------------

    @track_webflow_call("get_site")
    async def get_site(self, site_id: str) -> dict[str, Any]:
        return await self._request(
            "get_site",
            "GET",
            f"/sites/{site_id}",
            "Failed to fetch site info",
            resource_type="Site",
            resource_id=site_id,
        )

    @track_webflow_call("publish_site")
    async def publish_site(self, site_id: str, domains: list[str] | None = None) -> Any:
        """Publish a site; always includes the webflow.io subdomain."""
        return await self._request(
            "publish_site",
            "POST",
            f"/sites/{site_id}/publish",
            "Failed to publish site",
            resource_type="Site",
            resource_id=site_id,
            json={"customDomains": domains or [], "publishToWebflowSubdomain": True},
        )
