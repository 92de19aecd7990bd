"""Content values handed to the sanitizers.

A value is either plain data (``str``, ``int``, ``float``, ``bool`` or
``None``) or a :class:`SanitizedContent` wrapper asserting that its string is
already safe for one output context. Nothing else is accepted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+).

    We support Python 3.10+, so we use this small mixin instead.
    """


class ContentKind(_StrEnum):
    HTML = "html"
    JS = "js"
    # Characters that can sit between the quotes of a JS string literal.
    JS_STR_CHARS = "js_str_chars"
    CSS = "css"
    URI = "uri"
    # One or more complete attribute name/value pairs.
    ATTRIBUTES = "attributes"
    # Produced without any escaping. Never trusted, not even by
    # filter_no_autoescape().
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class SanitizedContent:
    """A string known to be safe for the context named by `kind`."""

    content: str
    kind: ContentKind

    def __post_init__(self) -> None:
        if not isinstance(self.content, str):
            raise TypeError(f"Sanitized content must be a str, got {type(self.content).__name__}")
        if not isinstance(self.kind, ContentKind):
            raise TypeError(f"Unsupported content kind: {self.kind!r}")

    def __str__(self) -> str:
        return self.content


PlainValue = Union[str, int, float, bool, None]
ContentValue = Union[PlainValue, SanitizedContent]


def ordain_as_safe(content: str, kind: ContentKind) -> SanitizedContent:
    """Mark `content` as safe for `kind` without checking it.

    Only use this for strings produced by trusted code; the sanitizers pass
    matching content through untouched.
    """

    return SanitizedContent(content, kind)


def trusted_content(value: ContentValue, kind: ContentKind | None) -> str | None:
    """Return the payload of `value` if it is sanitized content of `kind`."""

    if kind is not None and isinstance(value, SanitizedContent) and value.kind is kind:
        return value.content
    return None


def format_number(value: float) -> str:
    """Render a float the way JavaScript spells it."""

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def coerce_to_string(value: ContentValue) -> str:
    """Render any content value as the string a template would print.

    Sanitized content of any kind yields its payload; callers decide whether
    that payload is trusted.
    """

    if isinstance(value, SanitizedContent):
        return value.content
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_number(value)
    raise TypeError(f"Unsupported content value: {type(value).__name__}")
