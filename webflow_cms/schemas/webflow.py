from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from webflow_cms.fields.codec import EditState
from webflow_cms.fields.registry import DisplayValue
from webflow_cms.fields.schema import FieldDescriptor


class Collection(BaseModel):
    """A Webflow CMS collection as listed for a site."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    display_name: str = Field(
        default="",
        validation_alias=AliasChoices("displayName", "display_name", "name"),
        serialization_alias="displayName",
    )
    singular_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("singularName", "singular_name"),
        serialization_alias="singularName",
    )
    slug: Optional[str] = None


class Item(BaseModel):
    """A stored collection item. Field data is kept exactly as Webflow returned it."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    field_data: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("fieldData", "field_data"),
        serialization_alias="fieldData",
    )
    is_draft: bool = Field(
        default=False,
        validation_alias=AliasChoices("isDraft", "is_draft", "_draft"),
        serialization_alias="isDraft",
    )
    is_archived: bool = Field(
        default=False,
        validation_alias=AliasChoices("isArchived", "is_archived", "_archived"),
        serialization_alias="isArchived",
    )


class ItemPayload(BaseModel):
    """Raw create/update body forwarded to Webflow unchanged."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    is_archived: bool = Field(default=False, alias="isArchived")
    is_draft: bool = Field(default=False, alias="isDraft")
    field_data: dict[str, Any] = Field(default_factory=dict, alias="fieldData")


class PublishRequest(BaseModel):
    domains: list[str] = Field(default_factory=list)


class PublishResponse(BaseModel):
    success: bool
    message: str
    data: Any = None


class DeleteResponse(BaseModel):
    message: str


class CollectionSummary(BaseModel):
    """Field and item counts for one collection on the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(alias="displayName")
    field_count: Optional[int] = Field(default=None, alias="fieldCount")
    item_count: Optional[int] = Field(default=None, alias="itemCount")
    error: Optional[str] = None


class FormResponse(BaseModel):
    """Schema plus edit state for rendering a create or edit form."""

    model_config = ConfigDict(populate_by_name=True)

    collection_id: str = Field(alias="collectionId")
    item_id: Optional[str] = Field(default=None, alias="itemId")
    fields: list[FieldDescriptor]
    state: EditState


class FormSubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    state: EditState


class RenderedField(BaseModel):
    slug: str
    label: str
    type: str
    display: DisplayValue


class RenderedItem(BaseModel):
    """An item prepared for the listing view."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    status: str
    is_draft: bool = Field(alias="isDraft")
    is_archived: bool = Field(alias="isArchived")
    fields: list[RenderedField]


class VideoClassifyRequest(BaseModel):
    url: str
