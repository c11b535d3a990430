"""
Input Sanitization Utilities

HTML sanitization for rich-text previews and markup stripping for
plain-text summaries of Webflow RichText fields.
"""

import html
import re
from typing import Optional

import bleach

# Allowed tags for rich-text previews in item listings
RICH_CONTENT_TAGS = [
    'p', 'br', 'strong', 'em', 'u', 'b', 'i', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'blockquote', 'code', 'pre', 'hr', 'ul', 'ol', 'li', 'a', 'img',
    'figure', 'figcaption', 'div', 'span'
]

RICH_CONTENT_ATTRS = {
    'a': ['href', 'title', 'target', 'rel'],
    'img': ['src', 'alt', 'title', 'width', 'height'],
    'code': ['class'],
    'pre': ['class'],
    'div': ['class'],
    'span': ['class'],
}

ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

_TAG_PATTERN = re.compile(r"<[^>]*>")


def sanitize_rich_content(text: Optional[str]) -> str:
    """
    Sanitize rich HTML content for display.

    Tags outside the allow-list are escaped, and unclosed tags (for
    example after truncation) are closed.
    """
    if text is None:
        return ""

    return bleach.clean(
        text,
        tags=RICH_CONTENT_TAGS,
        attributes=RICH_CONTENT_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=False,
    )


def strip_markup(text: Optional[str]) -> str:
    """
    Remove all HTML tags and return the text content.

    Whitespace is preserved so character counts match what the editor
    shows. Entities are decoded back to characters.
    """
    if text is None:
        return ""

    cleaned = bleach.clean(text, tags=[], strip=True)
    # bleach leaves stray tag fragments it cannot parse
    cleaned = _TAG_PATTERN.sub("", cleaned)
    return html.unescape(cleaned)


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut text to ``limit`` characters, appending ``suffix`` when cut."""
    if len(text) > limit:
        return text[:limit] + suffix
    return text
