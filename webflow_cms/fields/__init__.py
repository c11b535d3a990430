"""
Field type handling for Webflow CMS items.

- ``types``: field type tags, aliases and raw value shapes
- ``registry``: per-type default / edit / submit / display behavior
- ``codec``: whole-item edit state and submission payloads
- ``schema``: collection field descriptors and schema load results
- ``video``: video URL classification for previews
"""

from webflow_cms.fields.codec import EditState, FieldError, build_defaults, hydrate, serialize, to_payload
from webflow_cms.fields.registry import (
    UNSET,
    DisplayValue,
    default_value,
    get_behavior,
    parse_for_edit,
    render_for_display,
    serialize_for_submit,
)
from webflow_cms.fields.schema import FieldDescriptor, SchemaLoadResult, SchemaLoadStatus, validate_schema
from webflow_cms.fields.types import FieldType, resolve_field_type

__all__ = [
    "UNSET",
    "DisplayValue",
    "EditState",
    "FieldDescriptor",
    "FieldError",
    "FieldType",
    "SchemaLoadResult",
    "SchemaLoadStatus",
    "build_defaults",
    "default_value",
    "get_behavior",
    "hydrate",
    "parse_for_edit",
    "render_for_display",
    "resolve_field_type",
    "serialize",
    "serialize_for_submit",
    "to_payload",
    "validate_schema",
]
