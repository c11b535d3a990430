"""Item routes: CRUD pass-through, edit forms and rendered listings."""

from fastapi import APIRouter, Depends

from webflow_cms.dependencies import get_webflow_client
from webflow_cms.schemas.webflow import (
    DeleteResponse,
    FormResponse,
    FormSubmitRequest,
    Item,
    ItemPayload,
    RenderedItem,
)
from webflow_cms.services import item_service
from webflow_cms.services.webflow_client import WebflowClient

router = APIRouter(prefix="/collections", tags=["Items"])


@router.get("/{collection_id}/items", response_model=list[Item])
async def list_items(collection_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """List all items for a collection."""
    return await item_service.list_items(client, collection_id)


@router.get("/{collection_id}/items/rendered", response_model=list[RenderedItem])
async def list_rendered_items(collection_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """List items with every field rendered for display."""
    return await item_service.render_items(client, collection_id)


@router.post("/{collection_id}/items")
async def create_item(
    collection_id: str,
    payload: ItemPayload,
    client: WebflowClient = Depends(get_webflow_client),
):
    """Create an item from a raw Webflow payload."""
    return await item_service.create_item(client, collection_id, payload.model_dump(by_alias=True))


@router.put("/{collection_id}/items/{item_id}")
async def update_item(
    collection_id: str,
    item_id: str,
    payload: ItemPayload,
    client: WebflowClient = Depends(get_webflow_client),
):
    """Update an item from a raw Webflow payload."""
    return await item_service.update_item(client, collection_id, item_id, payload.model_dump(by_alias=True))


@router.delete("/{collection_id}/items/{item_id}", response_model=DeleteResponse)
async def delete_item(collection_id: str, item_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """Delete an item."""
    await item_service.delete_item(client, collection_id, item_id)
    return DeleteResponse(message="Item deleted successfully")


# Form routes
@router.get("/{collection_id}/form", response_model=FormResponse)
async def get_create_form(collection_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """Schema and default values for a new item."""
    return await item_service.build_create_form(client, collection_id)


@router.post("/{collection_id}/form")
async def submit_create_form(
    collection_id: str,
    request: FormSubmitRequest,
    client: WebflowClient = Depends(get_webflow_client),
):
    """Create an item from form edit state."""
    return await item_service.submit_create_form(client, collection_id, request.state)


@router.get("/{collection_id}/items/{item_id}/form", response_model=FormResponse)
async def get_edit_form(collection_id: str, item_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """Schema and current values of an existing item."""
    return await item_service.build_edit_form(client, collection_id, item_id)


@router.put("/{collection_id}/items/{item_id}/form")
async def submit_edit_form(
    collection_id: str,
    item_id: str,
    request: FormSubmitRequest,
    client: WebflowClient = Depends(get_webflow_client),
):
    """Update an item from form edit state."""
    return await item_service.submit_update_form(client, collection_id, item_id, request.state)
