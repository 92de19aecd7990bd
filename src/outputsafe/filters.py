"""Allow-list filters for values that cannot be escaped.

CSS property values, attribute names and element names have no quoting
mechanism, so instead of escaping them we accept only a narrow grammar.
The predicates here only decide; the caller substitutes the sentinel.
"""

from __future__ import annotations

import re

from .constants import UNSAFE_ATTRIBUTE_PREFIXES, UNSAFE_ELEMENT_PREFIXES

_CSS_NUMBER = r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[a-z]{1,4}|%)?"
_CSS_HEX_COLOR = r"#(?:[0-9a-f]{8}|[0-9a-f]{6}|[0-9a-f]{3})"
_CSS_IDENT = r"[.#]?-?[_a-z][_a-z0-9-]*"
_CSS_TOKEN = re.compile(rf"{_CSS_NUMBER}|{_CSS_HEX_COLOR}|{_CSS_IDENT}|!important", re.IGNORECASE)
# Tokens are separated by whitespace or by one comma.
_CSS_SEPARATOR = re.compile(r"\s*,\s*|\s+")

# Property values that run script in some user agent.
_CSS_DENIED = re.compile(r"expression|binding|behavior", re.IGNORECASE)

_ATTRIBUTE_NAME = re.compile(r"(?:[a-z_$:][a-z0-9_$:-]*|dir=(?:ltr|rtl))", re.IGNORECASE)
_ELEMENT_NAME = re.compile(r"[a-z][a-z0-9_$:-]*", re.IGNORECASE)


def is_safe_css_value(value: str) -> bool:
    """'33px', '#aabbcc', '.class', 'inherit' pass; 'expression(...)' does not.

    Backslashes, quotes, parentheses and angle brackets never match, so CSS
    escapes and embedding hazards are rejected by the grammar alone.
    """
    stripped = value.strip()
    if stripped:
        for token in _CSS_SEPARATOR.split(stripped):
            if _CSS_TOKEN.fullmatch(token) is None:
                return False
    return _CSS_DENIED.search(value) is None


def is_safe_attribute_name(value: str) -> bool:
    if _ATTRIBUTE_NAME.fullmatch(value) is None:
        return False
    return not value.lower().startswith(UNSAFE_ATTRIBUTE_PREFIXES)


def is_safe_element_name(value: str) -> bool:
    if _ELEMENT_NAME.fullmatch(value) is None:
        return False
    return not value.lower().startswith(UNSAFE_ELEMENT_PREFIXES)


def pad_attributes(value: str) -> str:
    """Make sure trusted attributes end in whitespace.

    '<div {$attrs}checked>' must not glue the last attribute to the next
    token. A closing quote already ends the attribute, and already padded
    input is returned unchanged.
    """
    if not value or value[-1] in "\"'" or value[-1].isspace():
        return value
    return value + " "
