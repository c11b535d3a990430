"""
Field type registry.

Maps every :class:`FieldType` to a :class:`FieldBehavior` that knows how to
default, edit, submit and display values of that type:

    default_value()              value for a blank form
    parse_for_edit(raw)          stored provider value -> flat edit value
    serialize_for_submit(value)  edit value -> value the Webflow API accepts
    render_for_display(raw)      stored provider value -> DisplayValue

None of these raise on missing or malformed input. Malformed stored values
degrade to the type default when editing and to a visible sentinel when
displaying.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from webflow_cms.exceptions import MalformedValueError
from webflow_cms.fields import video
from webflow_cms.fields.types import (
    FieldType,
    ImageLike,
    Listing,
    Missing,
    Opaque,
    RawFieldValue,
    RefLike,
    Scalar,
    Wrapped,
    aliases_for,
    classify_raw,
    resolve_field_type,
    scalar_text,
)
from webflow_cms.utils.sanitize import sanitize_rich_content, strip_markup, truncate

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for a value that must be left out of a submission payload."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

NOT_AVAILABLE = "N/A"
INVALID_DATE = "Invalid Date"
DEFAULT_COLOR = "#000000"

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_THOUSANDS_GROUPED = re.compile(r"^-?\d{1,3}(,\d{3})+(\.\d+)?$")


class DisplayValue(BaseModel):
    """Read-only rendering of a stored field value for item listings."""

    kind: str
    text: str
    css_class: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


def not_available() -> DisplayValue:
    return DisplayValue(kind="empty", text=NOT_AVAILABLE, css_class="text-muted")


def is_blank(raw: RawFieldValue) -> bool:
    """True for values listings show as N/A regardless of field type."""
    if isinstance(raw, Missing):
        return True
    return isinstance(raw, Scalar) and raw.value == ""


# ============================================================================
# Value helpers
# ============================================================================


def parse_number(value: Any) -> int | float | None:
    """
    Parse a number from an edit or stored value.

    Integral strings become ``int``; other numeric strings ``float``.
    Empty, non-numeric and non-finite values return None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None

    text = str(value).strip()
    if not text:
        return None
    if "," in text:
        # only thousands grouping; "1,5" is ambiguous and rejected
        if not _THOUSANDS_GROUPED.match(text):
            return None
        text = text.replace(",", "")
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def format_number(number: int | float) -> str:
    """Format a number with thousands separators and at most 3 decimals."""
    if isinstance(number, int) or float(number).is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def parse_datetime(value: Any) -> datetime:
    """
    Parse an ISO-8601 date or timestamp.

    Naive values are taken as UTC. Raises MalformedValueError for anything
    that is not a parseable date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise MalformedValueError(FieldType.DATE_TIME.value, value) from exc
    else:
        raise MalformedValueError(FieldType.DATE_TIME.value, value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError) as exc:
        # the offset pushes the instant outside years 1..9999
        raise MalformedValueError(FieldType.DATE_TIME.value, value) from exc


def format_instant(moment: datetime) -> str:
    """Format as a UTC instant with millisecond precision, e.g. 2024-01-15T10:30:00.000Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _url_and_alt(raw: RawFieldValue) -> tuple[str, str | None]:
    if isinstance(raw, ImageLike):
        return raw.url, raw.alt
    if isinstance(raw, Scalar) and isinstance(raw.value, str):
        return raw.value, None
    return "", None


def _entries(raw: RawFieldValue) -> tuple[RawFieldValue, ...]:
    """Entries of a multi-value field; a lone value counts as one entry."""
    if isinstance(raw, Listing):
        return raw.entries
    if is_blank(raw):
        return ()
    return (raw,)


def _clean_entries(value: Any) -> list[str]:
    """Trim set entries and drop blanks, keeping order."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple)):
        value = [value]

    cleaned = []
    for entry in value:
        text = scalar_text(classify_raw(entry)).strip()
        if text:
            cleaned.append(text)
    return cleaned


# ============================================================================
# Behaviors
# ============================================================================


class FieldBehavior:
    """
    Plain-text behavior, also used for unrecognized field types.

    Parsing and serializing are the identity (null becomes ''), and
    display shows the raw string, cut at 60 characters.
    """

    input_type = "text"
    display_limit = 60

    def default_value(self) -> Any:
        return ""

    def parse_for_edit(self, raw_value: Any) -> Any:
        if raw_value is None:
            return self.default_value()
        return raw_value

    def serialize_for_submit(self, edit_value: Any) -> Any:
        return edit_value

    def render_for_display(self, raw_value: Any) -> DisplayValue:
        raw = classify_raw(raw_value)
        if is_blank(raw):
            return not_available()
        return self.render(raw)

    def render(self, raw: RawFieldValue) -> DisplayValue:
        if isinstance(raw, Scalar):
            text = raw.value if isinstance(raw.value, str) else str(raw.value)
        elif isinstance(raw, Wrapped):
            text = str(raw.value)
        elif isinstance(raw, ImageLike):
            text = raw.url
        elif isinstance(raw, RefLike):
            text = raw.id
        elif isinstance(raw, Listing):
            text = ", ".join(scalar_text(entry) for entry in raw.entries)
        else:
            text = json.dumps(raw.data, default=str)
        extra = {"full_text": text} if len(text) > self.display_limit else {}
        return DisplayValue(kind="text", text=truncate(text, self.display_limit), extra=extra)


class TextBehavior(FieldBehavior):
    """String fields that may arrive wrapped, e.g. ``{"email": ...}``."""

    wrapper_keys: tuple[str, ...] = ()
    kind = "text"
    href_prefix: str | None = None

    def parse_for_edit(self, raw_value: Any) -> str:
        return scalar_text(classify_raw(raw_value), *self.wrapper_keys)

    def render(self, raw: RawFieldValue) -> DisplayValue:
        text = scalar_text(raw, *self.wrapper_keys)
        if not text:
            return not_available()
        extra = {"href": f"{self.href_prefix}{text}"} if self.href_prefix else {}
        return DisplayValue(kind=self.kind, text=text, extra=extra)


class EmailBehavior(TextBehavior):
    input_type = "email"
    wrapper_keys = ("email",)
    kind = "email"
    href_prefix = "mailto:"


class PhoneBehavior(TextBehavior):
    input_type = "tel"
    wrapper_keys = ("phone",)
    kind = "phone"
    href_prefix = "tel:"


class OptionBehavior(TextBehavior):
    input_type = "select"
    wrapper_keys = ("label", "value", "name")
    kind = "option"

    def render(self, raw: RawFieldValue) -> DisplayValue:
        text = scalar_text(raw, *self.wrapper_keys)
        if not text and isinstance(raw, Opaque):
            text = json.dumps(raw.data, default=str)
        return DisplayValue(kind=self.kind, text=text, css_class="badge")


class RichTextBehavior(TextBehavior):
    input_type = "textarea"
    preview_limit = 150

    def render(self, raw: RawFieldValue) -> DisplayValue:
        html = scalar_text(raw)
        length = len(strip_markup(html))
        return DisplayValue(
            kind="richtext",
            text=f"{length} characters",
            extra={"html": sanitize_rich_content(truncate(html, self.preview_limit)), "length": length},
        )


class LinkBehavior(TextBehavior):
    input_type = "url"
    wrapper_keys = ("url",)
    kind = "link"
    display_limit = 35

    def render(self, raw: RawFieldValue) -> DisplayValue:
        url, _ = _url_and_alt(raw)
        if not url:
            return not_available()
        return DisplayValue(kind=self.kind, text=truncate(url, self.display_limit), extra={"href": url})


class FileBehavior(LinkBehavior):
    kind = "file"

    def render(self, raw: RawFieldValue) -> DisplayValue:
        url, _ = _url_and_alt(raw)
        if not url:
            return not_available()
        name = url.rstrip("/").rsplit("/", 1)[-1] or "File"
        return DisplayValue(kind=self.kind, text=name, extra={"href": url})


class VideoLinkBehavior(LinkBehavior):
    def render(self, raw: RawFieldValue) -> DisplayValue:
        url, _ = _url_and_alt(raw)
        if not url.strip():
            return not_available()
        classification = video.classify(url)
        return DisplayValue(
            kind="video",
            text=classification.label,
            extra=classification.model_dump(mode="json"),
        )


class NumberBehavior(FieldBehavior):
    """Numbers are edited as strings; an empty edit value is left unset on submit."""

    input_type = "number"

    def parse_for_edit(self, raw_value: Any) -> str:
        raw = classify_raw(raw_value)
        if isinstance(raw, Wrapped) and raw.key == "value":
            raw = Scalar(raw.value) if not isinstance(raw.value, (dict, list)) else Missing()
        if not isinstance(raw, Scalar):
            return ""
        number = parse_number(raw.value)
        return "" if number is None else str(number)

    def serialize_for_submit(self, edit_value: Any) -> Any:
        number = parse_number(edit_value)
        return UNSET if number is None else number

    def render(self, raw: RawFieldValue) -> DisplayValue:
        value = raw.value if isinstance(raw, (Scalar, Wrapped)) else None
        number = parse_number(value)
        if number is None:
            return not_available()
        return DisplayValue(kind="number", text=format_number(number), extra={"value": number})


class DateTimeBehavior(FieldBehavior):
    """Dates are edited and submitted as full UTC instants."""

    input_type = "datetime-local"

    @staticmethod
    def _stored_text(raw: RawFieldValue) -> Any:
        if isinstance(raw, Wrapped) and raw.key == "date":
            return raw.value
        if isinstance(raw, Scalar):
            return raw.value
        return None

    def parse_for_edit(self, raw_value: Any) -> str:
        stored = self._stored_text(classify_raw(raw_value))
        if stored is None or stored == "":
            return ""
        try:
            return format_instant(parse_datetime(stored))
        except MalformedValueError:
            logger.debug("Discarding malformed DateTime value %r", stored)
            return ""

    def serialize_for_submit(self, edit_value: Any) -> Any:
        if edit_value is None or edit_value == "":
            return UNSET
        try:
            return format_instant(parse_datetime(edit_value))
        except MalformedValueError:
            logger.debug("Dropping malformed DateTime edit value %r", edit_value)
            return UNSET

    def render(self, raw: RawFieldValue) -> DisplayValue:
        try:
            moment = parse_datetime(self._stored_text(raw))
        except MalformedValueError:
            return DisplayValue(kind="invalid_date", text=INVALID_DATE, css_class="text-muted")
        date_text = moment.strftime("%Y-%m-%d")
        time_text = moment.strftime("%H:%M:%S")
        return DisplayValue(
            kind="datetime",
            text=f"{date_text} {time_text}",
            extra={"date": date_text, "time": time_text, "iso": format_instant(moment)},
        )


class BoolBehavior(FieldBehavior):
    input_type = "checkbox"

    def default_value(self) -> bool:
        return False

    def parse_for_edit(self, raw_value: Any) -> bool:
        raw = classify_raw(raw_value)
        if isinstance(raw, (Scalar, Wrapped)):
            return coerce_bool(raw.value)
        return False

    def serialize_for_submit(self, edit_value: Any) -> bool:
        return coerce_bool(edit_value)

    def render_for_display(self, raw_value: Any) -> DisplayValue:
        raw = classify_raw(raw_value)
        if is_blank(raw):
            return not_available()
        value = self.parse_for_edit(raw_value)
        return DisplayValue(
            kind="boolean",
            text="Yes" if value else "No",
            css_class="text-success" if value else "text-danger",
            extra={"value": value},
        )


class ColorBehavior(FieldBehavior):
    input_type = "color"

    def default_value(self) -> str:
        return DEFAULT_COLOR

    def parse_for_edit(self, raw_value: Any) -> str:
        return scalar_text(classify_raw(raw_value), "hex") or DEFAULT_COLOR

    def render(self, raw: RawFieldValue) -> DisplayValue:
        color = scalar_text(raw, "hex") or DEFAULT_COLOR
        return DisplayValue(kind="color", text=color, extra={"hex": color})


class ImageRefBehavior(FieldBehavior):
    input_type = "url"

    def parse_for_edit(self, raw_value: Any) -> str:
        url, _ = _url_and_alt(classify_raw(raw_value))
        return url

    def render(self, raw: RawFieldValue) -> DisplayValue:
        url, alt = _url_and_alt(raw)
        if not url:
            return not_available()
        return DisplayValue(kind="image", text=alt or "Image", extra={"url": url, "alt": alt})


class ItemRefBehavior(FieldBehavior):
    input_type = "reference"
    display_limit = 20

    def parse_for_edit(self, raw_value: Any) -> str:
        raw = classify_raw(raw_value)
        if isinstance(raw, (Scalar, RefLike)):
            return scalar_text(raw)
        return ""

    def render(self, raw: RawFieldValue) -> DisplayValue:
        ref_id = scalar_text(raw) if isinstance(raw, (Scalar, RefLike)) else ""
        if not ref_id:
            return not_available()
        return DisplayValue(kind="reference", text=truncate(ref_id, self.display_limit), extra={"id": ref_id})


class SetBehavior(FieldBehavior):
    """Multi-value fields edited as an ordered list of strings."""

    def default_value(self) -> list:
        return []

    def entry_text(self, entry: RawFieldValue) -> str:
        return scalar_text(entry)

    def parse_for_edit(self, raw_value: Any) -> list[str]:
        texts = (self.entry_text(entry) for entry in _entries(classify_raw(raw_value)))
        return [text for text in texts if text]

    def serialize_for_submit(self, edit_value: Any) -> list[str]:
        return _clean_entries(edit_value)

    def render_for_display(self, raw_value: Any) -> DisplayValue:
        entries = _entries(classify_raw(raw_value))
        if not entries:
            return not_available()
        return self.render_entries(entries)

    def render_entries(self, entries: tuple[RawFieldValue, ...]) -> DisplayValue:
        raise NotImplementedError


class ImageRefSetBehavior(SetBehavior):
    input_type = "url-list"
    preview_count = 4

    def entry_text(self, entry: RawFieldValue) -> str:
        url, _ = _url_and_alt(entry)
        return url

    def render_entries(self, entries: tuple[RawFieldValue, ...]) -> DisplayValue:
        count = len(entries)
        images = []
        for index, entry in enumerate(entries[: self.preview_count]):
            url, alt = _url_and_alt(entry)
            if url:
                images.append({"url": url, "alt": alt or f"Image {index + 1}"})
        text = f"{count} image{'s' if count > 1 else ''}"
        if count > self.preview_count:
            text += f" (showing first {self.preview_count})"
        return DisplayValue(kind="image_set", text=text, extra={"images": images, "count": count})


class ItemRefSetBehavior(SetBehavior):
    input_type = "reference-list"
    preview_count = 2
    id_limit = 15

    def entry_text(self, entry: RawFieldValue) -> str:
        if isinstance(entry, (Scalar, RefLike)):
            return scalar_text(entry)
        return ""

    def render_entries(self, entries: tuple[RawFieldValue, ...]) -> DisplayValue:
        count = len(entries)
        ids = []
        for entry in entries[: self.preview_count]:
            text = scalar_text(entry)
            if text:
                ids.append(truncate(text, self.id_limit))
        extra: dict[str, Any] = {"ids": ids, "count": count}
        if count > self.preview_count:
            extra["more"] = count - self.preview_count
        return DisplayValue(kind="reference_set", text=f"{count} reference{'s' if count > 1 else ''}", extra=extra)


# ============================================================================
# Registry
# ============================================================================

FIELD_BEHAVIORS: dict[FieldType, FieldBehavior] = {
    FieldType.PLAIN_TEXT: FieldBehavior(),
    FieldType.RICH_TEXT: RichTextBehavior(),
    FieldType.NUMBER: NumberBehavior(),
    FieldType.EMAIL: EmailBehavior(),
    FieldType.PHONE: PhoneBehavior(),
    FieldType.LINK: LinkBehavior(),
    FieldType.VIDEO_LINK: VideoLinkBehavior(),
    FieldType.DATE_TIME: DateTimeBehavior(),
    FieldType.BOOL: BoolBehavior(),
    FieldType.COLOR: ColorBehavior(),
    FieldType.IMAGE_REF: ImageRefBehavior(),
    FieldType.IMAGE_REF_SET: ImageRefSetBehavior(),
    FieldType.ITEM_REF: ItemRefBehavior(),
    FieldType.ITEM_REF_SET: ItemRefSetBehavior(),
    FieldType.OPTION: OptionBehavior(),
    FieldType.FILE: FileBehavior(),
    FieldType.UNKNOWN: FieldBehavior(),
}

_missing = set(FieldType) - set(FIELD_BEHAVIORS)
if _missing:
    raise RuntimeError(f"No field behavior registered for: {sorted(t.value for t in _missing)}")


def get_behavior(field_type: str | FieldType | None) -> FieldBehavior:
    """Look up the behavior for a type tag or alias."""
    return FIELD_BEHAVIORS[resolve_field_type(field_type)]


def default_value(field_type: str | FieldType | None) -> Any:
    return get_behavior(field_type).default_value()


def parse_for_edit(field_type: str | FieldType | None, raw_value: Any) -> Any:
    return get_behavior(field_type).parse_for_edit(raw_value)


def serialize_for_submit(field_type: str | FieldType | None, edit_value: Any) -> Any:
    return get_behavior(field_type).serialize_for_submit(edit_value)


def render_for_display(field_type: str | FieldType | None, raw_value: Any) -> DisplayValue:
    return get_behavior(field_type).render_for_display(raw_value)


def describe_field_types() -> list[dict[str, Any]]:
    """Summarize the registry for the admin UI: tags, aliases, input types, defaults."""
    return [
        {
            "type": field_type.value,
            "aliases": aliases_for(field_type)[1:],
            "input_type": behavior.input_type,
            "default_value": behavior.default_value(),
        }
        for field_type, behavior in FIELD_BEHAVIORS.items()
    ]
