"""Collection field schemas as returned by Webflow."""

from __future__ import annotations

import enum
from collections import Counter
from typing import Any, Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from webflow_cms.exceptions import DuplicateSlugError
from webflow_cms.fields.types import FieldType, resolve_field_type


class FieldDescriptor(BaseModel):
    """
    One field of a collection schema.

    Accepts both the v2 (``displayName``, ``isRequired``) and the legacy v1
    (``name``, ``required``) key spellings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    slug: str
    display_name: str = Field(
        default="",
        validation_alias=AliasChoices("displayName", "display_name", "name"),
        serialization_alias="displayName",
    )
    type: str = FieldType.PLAIN_TEXT.value
    required: bool = Field(
        default=False,
        validation_alias=AliasChoices("isRequired", "required"),
    )
    help_text: str | None = Field(
        default=None,
        validation_alias=AliasChoices("helpText", "help_text"),
        serialization_alias="helpText",
    )

    @property
    def field_type(self) -> FieldType:
        return resolve_field_type(self.type)

    @property
    def label(self) -> str:
        return self.display_name or self.slug


def parse_schema(raw_fields: Iterable[dict[str, Any] | FieldDescriptor]) -> list[FieldDescriptor]:
    """Build descriptors from raw provider field objects, preserving order."""
    return [
        field if isinstance(field, FieldDescriptor) else FieldDescriptor.model_validate(field) for field in raw_fields
    ]


def validate_schema(
    fields: Iterable[FieldDescriptor], collection_id: str | None = None
) -> list[FieldDescriptor]:
    """Reject schemas that define the same slug twice."""
    fields = list(fields)
    counts = Counter(field.slug for field in fields)
    duplicates = [slug for slug, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateSlugError(duplicates, collection_id=collection_id)
    return fields


class SchemaLoadStatus(str, enum.Enum):
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"


class SchemaLoadResult(BaseModel):
    """
    Outcome of loading a collection schema.

    ``EMPTY`` means the collection really defines no fields; ``FAILED``
    means no fallback could fetch the schema at all.
    """

    status: SchemaLoadStatus
    fields: list[FieldDescriptor] = Field(default_factory=list)
    source: str | None = None
    error: str | None = None

    @classmethod
    def from_fields(cls, fields: list[FieldDescriptor], source: str) -> SchemaLoadResult:
        status = SchemaLoadStatus.LOADED if fields else SchemaLoadStatus.EMPTY
        return cls(status=status, fields=fields, source=source)

    @classmethod
    def failed(cls, error: str) -> SchemaLoadResult:
        return cls(status=SchemaLoadStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status is not SchemaLoadStatus.FAILED
