"""
Text normalization shared by every extraction stage.
"""
import re
from typing import Any

# Zero-width, bidi and soft-hyphen marks found in product copy
INVISIBLE_CHARS = re.compile("[\u200e\u200f\u200b\u00ad\u200c\u200d]")

HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&nbsp;", " "),
    ("&#39;", "'"),
    ("&quot;", '"'),
)

WHITESPACE = re.compile(r"\s+")

ELLIPSIS = "..."


def normalize(text: Any) -> str:
    """
    Canonicalize raw text.

    Removes invisible/bidi marks, decodes a fixed set of HTML entities,
    collapses whitespace runs (newlines and tabs included) and trims.
    Non-string input yields an empty string.
    """
    if not isinstance(text, str):
        return ""
    try:
        cleaned = INVISIBLE_CHARS.sub("", text)
        for entity, char in HTML_ENTITIES:
            cleaned = cleaned.replace(entity, char)
        return WHITESPACE.sub(" ", cleaned).strip()
    except Exception:
        return ""


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters, ellipsis included."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(ELLIPSIS)] + ELLIPSIS
