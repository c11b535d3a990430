"""Collection routes: list collections, collection details and field schemas."""

from fastapi import APIRouter, Depends

from webflow_cms.dependencies import get_webflow_client
from webflow_cms.exceptions import SchemaLoadError
from webflow_cms.fields.schema import FieldDescriptor
from webflow_cms.schemas.webflow import Collection, CollectionSummary
from webflow_cms.services import collection_service
from webflow_cms.services.webflow_client import WebflowClient

router = APIRouter(prefix="/collections", tags=["Collections"])


@router.get("/site/{site_id}", response_model=list[Collection])
async def list_collections(site_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """List all collections for a site."""
    return await collection_service.list_collections(client, site_id)


@router.get("/site/{site_id}/summary", response_model=list[CollectionSummary])
async def get_collection_summaries(site_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """Field and item counts per collection. Failing collections carry an error."""
    return await collection_service.get_collection_summaries(client, site_id)


@router.get("/{collection_id}")
async def get_collection(collection_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """Get collection details."""
    return await collection_service.get_collection(client, collection_id)


@router.get("/{collection_id}/fields", response_model=list[FieldDescriptor])
async def get_collection_fields(collection_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """
    Get collection fields.

    Returns an empty list only when the collection really has no fields;
    a schema that could not be fetched is a 502.
    """
    result = await collection_service.load_schema(client, collection_id)
    if not result.ok:
        raise SchemaLoadError(collection_id, reason=result.error)
    return result.fields
