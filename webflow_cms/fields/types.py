"""
Webflow field type tags and raw provider value shapes.

Webflow has renamed several field types over API revisions (``Bool`` vs
``Switch``, ``ImageRef`` vs ``Image`` ...). Every alias resolves to one
canonical :class:`FieldType`; tags nobody recognizes resolve to
``FieldType.UNKNOWN`` which behaves like plain text.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)


class FieldType(str, enum.Enum):
    """Canonical Webflow field types."""

    PLAIN_TEXT = "PlainText"
    RICH_TEXT = "RichText"
    NUMBER = "Number"
    EMAIL = "Email"
    PHONE = "Phone"
    LINK = "Link"
    VIDEO_LINK = "VideoLink"
    DATE_TIME = "DateTime"
    BOOL = "Bool"
    COLOR = "Color"
    IMAGE_REF = "ImageRef"
    IMAGE_REF_SET = "ImageRefSet"
    ITEM_REF = "ItemRef"
    ITEM_REF_SET = "ItemRefSet"
    OPTION = "Option"
    FILE = "File"
    UNKNOWN = "Unknown"


FIELD_TYPE_ALIASES: dict[str, FieldType] = {
    "Text": FieldType.PLAIN_TEXT,
    "Switch": FieldType.BOOL,
    "Image": FieldType.IMAGE_REF,
    "MultiImage": FieldType.IMAGE_REF_SET,
    "Reference": FieldType.ITEM_REF,
    "MultiReference": FieldType.ITEM_REF_SET,
}

SET_TYPES = frozenset({FieldType.IMAGE_REF_SET, FieldType.ITEM_REF_SET})

_warned_tags: set[str] = set()


def resolve_field_type(tag: str | FieldType | None) -> FieldType:
    """
    Map a provider type tag (canonical name or alias) to a FieldType.

    Unrecognized tags resolve to ``FieldType.UNKNOWN``. Each distinct
    unrecognized tag is logged once per process.
    """
    if isinstance(tag, FieldType):
        return tag
    if not tag:
        return FieldType.UNKNOWN

    try:
        return FieldType(tag)
    except ValueError:
        pass

    alias = FIELD_TYPE_ALIASES.get(tag)
    if alias is not None:
        return alias

    if tag not in _warned_tags:
        _warned_tags.add(tag)
        logger.warning("Unknown Webflow field type %r, treating as PlainText", tag)
    return FieldType.UNKNOWN


def aliases_for(field_type: FieldType) -> list[str]:
    """Return every tag that resolves to ``field_type``, canonical name first."""
    tags = [field_type.value]
    tags.extend(alias for alias, target in FIELD_TYPE_ALIASES.items() if target is field_type)
    return tags


# ============================================================================
# Raw provider values
# ============================================================================
#
# Webflow returns the same logical value in different shapes depending on
# field type and API revision: an image may be a bare URL or
# {"fileId", "url", "alt"}, a reference a bare id or {"id"}, a color a hex
# string or {"hex"}. classify_raw() inspects the shape once so the field
# behaviors only branch on these variants.


@dataclass(frozen=True)
class Missing:
    """No value stored (null, absent, or an empty object)."""


@dataclass(frozen=True)
class Scalar:
    value: str | int | float | bool


@dataclass(frozen=True)
class ImageLike:
    """Any object carrying a URL: images, files and links."""

    url: str
    alt: str | None = None


@dataclass(frozen=True)
class RefLike:
    id: str


@dataclass(frozen=True)
class Wrapped:
    """A single value wrapped under a well-known key, e.g. ``{"hex": "#fff"}``."""

    key: str
    value: Any


@dataclass(frozen=True)
class Listing:
    entries: tuple[RawFieldValue, ...]


@dataclass(frozen=True)
class Opaque:
    """An object whose shape is not recognized."""

    data: dict[str, Any]


RawFieldValue = Union[Missing, Scalar, ImageLike, RefLike, Wrapped, Listing, Opaque]

WRAPPER_KEYS = ("hex", "date", "value", "email", "phone", "label", "text", "name", "title")


def classify_raw(value: Any) -> RawFieldValue:
    """Classify a raw provider value into one of the RawFieldValue variants."""
    if value is None:
        return Missing()

    if isinstance(value, (str, bool, int, float)):
        return Scalar(value)

    if isinstance(value, (list, tuple)):
        return Listing(tuple(classify_raw(entry) for entry in value))

    if isinstance(value, dict):
        if not value:
            return Missing()

        url = value.get("url") or value.get("src")
        if isinstance(url, str) and url:
            alt = value.get("alt")
            return ImageLike(url=url, alt=alt if isinstance(alt, str) and alt else None)

        ref_id = value.get("id") or value.get("_id")
        if isinstance(ref_id, str) and ref_id:
            return RefLike(id=ref_id)

        for key in WRAPPER_KEYS:
            if key in value and value[key] not in (None, ""):
                return Wrapped(key=key, value=value[key])

        return Opaque(dict(value))

    return Scalar(str(value))


def scalar_text(raw: RawFieldValue, *keys: str) -> str:
    """
    Extract a flat string from a raw value.

    Accepts bare scalars, URL objects, reference objects, and values wrapped
    under any of ``keys``. Anything else yields an empty string.
    """
    if isinstance(raw, Scalar):
        if isinstance(raw.value, str):
            return raw.value
        return str(raw.value)
    if isinstance(raw, ImageLike):
        return raw.url
    if isinstance(raw, RefLike):
        return raw.id
    if isinstance(raw, Wrapped) and (not keys or raw.key in keys):
        return str(raw.value)
    return ""
