"""
Item field codec.

Applies the field type registry to a whole item: blank form state for the
create flow, edit state hydrated from a stored item for the edit flow, and
the submission payload for both. Every function takes state by value and
returns new state; nothing here performs I/O.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from webflow_cms.exceptions import RequiredFieldsMissingError
from webflow_cms.fields.registry import UNSET, get_behavior
from webflow_cms.fields.schema import FieldDescriptor


class EditState(BaseModel):
    """In-progress values of one item being created or edited."""

    model_config = ConfigDict(populate_by_name=True)

    is_archived: bool = Field(default=False, alias="isArchived")
    is_draft: bool = Field(default=False, alias="isDraft")
    field_data: dict[str, Any] = Field(default_factory=dict, alias="fieldData")

    def with_value(self, slug: str, value: Any) -> EditState:
        """Return a copy with one field changed."""
        return self.model_copy(update={"field_data": {**self.field_data, slug: value}})


class FieldError(BaseModel):
    slug: str
    field: str
    message: str


def _field_data_of(item: Any) -> Mapping[str, Any]:
    if item is None:
        return {}
    if isinstance(item, Mapping):
        data = item.get("fieldData")
    else:
        data = getattr(item, "field_data", None)
    return data if isinstance(data, Mapping) else {}


def _flag(item: Any, key: str, attr: str) -> bool:
    if isinstance(item, Mapping):
        return bool(item.get(key) or False)
    return bool(getattr(item, attr, False) or False)


def build_defaults(schema: Iterable[FieldDescriptor]) -> EditState:
    """Blank edit state with one defaulted entry per schema slug."""
    return EditState(
        is_archived=False,
        is_draft=False,
        field_data={field.slug: get_behavior(field.type).default_value() for field in schema},
    )


def hydrate(schema: Iterable[FieldDescriptor], item: Any) -> EditState:
    """
    Edit state for an existing item.

    Schema slugs are parsed into edit form, defaulting when the item has no
    value. Stored values for slugs outside the schema are kept as-is so that
    they survive a later :func:`serialize`.
    """
    stored = _field_data_of(item)
    schema = list(schema)
    schema_slugs = {field.slug for field in schema}

    field_data = {key: value for key, value in stored.items() if key not in schema_slugs}
    for field in schema:
        behavior = get_behavior(field.type)
        if field.slug in stored:
            field_data[field.slug] = behavior.parse_for_edit(stored[field.slug])
        else:
            field_data[field.slug] = behavior.default_value()

    return EditState(
        is_archived=_flag(item, "isArchived", "is_archived"),
        is_draft=_flag(item, "isDraft", "is_draft"),
        field_data=field_data,
    )


def serialize(schema: Iterable[FieldDescriptor], state: EditState) -> dict[str, Any]:
    """
    Field data ready for a create or update call.

    Values a field type leaves unset (an empty Number, for instance) are
    omitted. Slugs the schema does not know are passed through unchanged.
    """
    by_slug = {field.slug: field for field in schema}
    payload: dict[str, Any] = {}

    for slug, value in state.field_data.items():
        field = by_slug.get(slug)
        if field is None:
            payload[slug] = value
            continue
        serialized = get_behavior(field.type).serialize_for_submit(value)
        if serialized is not UNSET:
            payload[slug] = serialized

    return payload


def _is_empty(value: Any) -> bool:
    if value is UNSET or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def validate_required(schema: Iterable[FieldDescriptor], state: EditState) -> list[FieldError]:
    """Required fields whose submitted value would be empty."""
    errors = []
    for field in schema:
        if not field.required:
            continue
        value = get_behavior(field.type).serialize_for_submit(state.field_data.get(field.slug))
        if _is_empty(value):
            errors.append(FieldError(slug=field.slug, field=field.label, message=f"{field.label} is required"))
    return errors


def to_payload(schema: Iterable[FieldDescriptor], state: EditState) -> dict[str, Any]:
    """
    Full create/update request body for the Webflow API.

    Raises RequiredFieldsMissingError listing every empty required field.
    """
    schema = list(schema)
    errors = validate_required(schema, state)
    if errors:
        raise RequiredFieldsMissingError([error.model_dump() for error in errors])

    return {
        "isArchived": state.is_archived,
        "isDraft": state.is_draft,
        "fieldData": serialize(schema, state),
    }
