"""Collection service: collections, field schemas and dashboard summaries."""

import asyncio
import logging

from webflow_cms.exceptions import CMSError, SchemaLoadError
from webflow_cms.fields.schema import FieldDescriptor, SchemaLoadResult, SchemaLoadStatus, validate_schema
from webflow_cms.schemas.webflow import Collection, CollectionSummary
from webflow_cms.services.webflow_client import WebflowClient

logger = logging.getLogger(__name__)


async def list_collections(client: WebflowClient, site_id: str) -> list[Collection]:
    """List the CMS collections of a site."""
    raw_collections = await client.list_collections(site_id)
    return [Collection.model_validate(raw) for raw in raw_collections]


async def get_collection(client: WebflowClient, collection_id: str) -> dict:
    """Get collection details as returned by Webflow."""
    return await client.get_collection(collection_id)


async def load_schema(client: WebflowClient, collection_id: str) -> SchemaLoadResult:
    """
    Load and validate a collection's field schema.

    Raises DuplicateSlugError if the schema defines a slug more than once.
    """
    result = await client.list_collection_fields(collection_id)
    if result.status is SchemaLoadStatus.LOADED:
        validate_schema(result.fields, collection_id=collection_id)
    return result


async def require_schema(client: WebflowClient, collection_id: str) -> list[FieldDescriptor]:
    """Field schema for form and listing work; raises SchemaLoadError when it cannot be loaded."""
    result = await load_schema(client, collection_id)
    if not result.ok:
        raise SchemaLoadError(collection_id, reason=result.error)
    return result.fields


async def _summarize(client: WebflowClient, collection: Collection) -> CollectionSummary:
    schema, item_count = await asyncio.gather(
        load_schema(client, collection.id),
        client.count_items(collection.id),
        return_exceptions=True,
    )
    for outcome in (schema, item_count):
        if isinstance(outcome, CMSError):
            logger.warning(
                "Could not summarize collection %s: %s",
                collection.id,
                outcome.message,
                extra={"collection_id": collection.id},
            )
            return CollectionSummary(id=collection.id, display_name=collection.display_name, error=outcome.message)
        if isinstance(outcome, BaseException):
            raise outcome

    if not schema.ok:
        return CollectionSummary(
            id=collection.id,
            display_name=collection.display_name,
            item_count=item_count,
            error=schema.error,
        )

    return CollectionSummary(
        id=collection.id,
        display_name=collection.display_name,
        field_count=len(schema.fields),
        item_count=item_count,
    )


async def get_collection_summaries(client: WebflowClient, site_id: str) -> list[CollectionSummary]:
    """
    Field and item counts for every collection of a site.

    Collections are summarized concurrently. A collection that fails gets an
    error marker in its summary; the others are unaffected.
    """
    collections = await list_collections(client, site_id)
    return list(await asyncio.gather(*(_summarize(client, collection) for collection in collections)))
