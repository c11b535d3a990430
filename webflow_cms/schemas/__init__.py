from .webflow import (
    Collection,
    CollectionSummary,
    DeleteResponse,
    FormResponse,
    FormSubmitRequest,
    Item,
    ItemPayload,
    PublishRequest,
    PublishResponse,
    RenderedField,
    RenderedItem,
    VideoClassifyRequest,
)

# Define the public API of this module
__all__ = [
    "Collection",
    "CollectionSummary",
    "DeleteResponse",
    "FormResponse",
    "FormSubmitRequest",
    "Item",
    "ItemPayload",
    "PublishRequest",
    "PublishResponse",
    "RenderedField",
    "RenderedItem",
    "VideoClassifyRequest",
]
