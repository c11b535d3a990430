"""Item service: CRUD pass-through plus form and listing preparation."""

import logging
from typing import Any

from webflow_cms.fields import codec
from webflow_cms.fields.codec import EditState
from webflow_cms.fields.registry import render_for_display
from webflow_cms.fields.schema import FieldDescriptor
from webflow_cms.schemas.webflow import FormResponse, Item, RenderedField, RenderedItem
from webflow_cms.services.collection_service import require_schema
from webflow_cms.services.webflow_client import WebflowClient

logger = logging.getLogger(__name__)

TITLE_SLUGS = ("name", "title")
UNTITLED = "Untitled"


async def list_items(client: WebflowClient, collection_id: str) -> list[Item]:
    """List every item in a collection."""
    logger.info("Fetching items for collection %s", collection_id, extra={"collection_id": collection_id})
    raw_items = await client.list_items(collection_id)
    return [Item.model_validate(raw) for raw in raw_items]


async def create_item(client: WebflowClient, collection_id: str, payload: dict[str, Any]) -> Any:
    """Create an item from a provider-shaped payload."""
    logger.info("Creating item in collection %s", collection_id, extra={"collection_id": collection_id})
    return await client.create_item(collection_id, payload)


async def update_item(client: WebflowClient, collection_id: str, item_id: str, payload: dict[str, Any]) -> Any:
    """Update an item from a provider-shaped payload."""
    logger.info(
        "Updating item %s in collection %s", item_id, collection_id, extra={"collection_id": collection_id}
    )
    return await client.update_item(collection_id, item_id, payload)


async def delete_item(client: WebflowClient, collection_id: str, item_id: str) -> None:
    logger.info(
        "Deleting item %s from collection %s", item_id, collection_id, extra={"collection_id": collection_id}
    )
    await client.delete_item(collection_id, item_id)


# ============================================================================
# Forms
# ============================================================================


async def build_create_form(client: WebflowClient, collection_id: str) -> FormResponse:
    """Schema and blank edit state for the create form."""
    schema = await require_schema(client, collection_id)
    return FormResponse(collection_id=collection_id, fields=schema, state=codec.build_defaults(schema))


async def build_edit_form(client: WebflowClient, collection_id: str, item_id: str) -> FormResponse:
    """Schema and edit state hydrated from a stored item."""
    schema = await require_schema(client, collection_id)
    item = Item.model_validate(await client.get_item(collection_id, item_id))
    return FormResponse(
        collection_id=collection_id,
        item_id=item_id,
        fields=schema,
        state=codec.hydrate(schema, item),
    )


async def submit_create_form(client: WebflowClient, collection_id: str, state: EditState) -> Any:
    """
    Serialize edit state and create the item.

    Raises RequiredFieldsMissingError before calling Webflow if a required
    field is empty.
    """
    schema = await require_schema(client, collection_id)
    return await create_item(client, collection_id, codec.to_payload(schema, state))


async def submit_update_form(client: WebflowClient, collection_id: str, item_id: str, state: EditState) -> Any:
    """Serialize edit state and update the item."""
    schema = await require_schema(client, collection_id)
    return await update_item(client, collection_id, item_id, codec.to_payload(schema, state))


# ============================================================================
# Listing
# ============================================================================


def item_title(item: Item) -> str:
    for slug in TITLE_SLUGS:
        value = item.field_data.get(slug)
        if isinstance(value, str) and value.strip():
            return value
    return UNTITLED


def render_item(schema: list[FieldDescriptor], item: Item) -> RenderedItem:
    """Render every schema field of an item for display, in schema order."""
    return RenderedItem(
        id=item.id,
        title=item_title(item),
        status="Draft" if item.is_draft else "Published",
        is_draft=item.is_draft,
        is_archived=item.is_archived,
        fields=[
            RenderedField(
                slug=field.slug,
                label=field.label,
                type=field.type,
                display=render_for_display(field.type, item.field_data.get(field.slug)),
            )
            for field in schema
        ],
    )


async def render_items(client: WebflowClient, collection_id: str) -> list[RenderedItem]:
    """Items of a collection rendered for the listing view."""
    schema = await require_schema(client, collection_id)
    items = await list_items(client, collection_id)
    return [render_item(schema, item) for item in items]
