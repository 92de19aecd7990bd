"""URI escaping, normalization and scheme vetting.

Scheme checks run on a canonical copy of the value that undoes every trick a
user agent would undo before resolving it: embedded whitespace and control
characters, HTML character references and percent-encoding. The copy is only
used for the decision; the value handed back is the normalized original.
"""

from __future__ import annotations

import re
import string
import unicodedata
from urllib.parse import unquote

from .constants import SAFE_URI_SCHEMES
from .entities import decode_character_references
from .escaping import EscapeTable

_COMPONENT_SAFE = frozenset(string.ascii_letters + string.digits + "-._*")

# Characters that are not allowed anywhere in a URI or that delimit the
# HTML, CSS and JS constructs URIs get embedded in. Parentheses and quotes
# only appear in RFC 3986's obsolete mark production, so encoding them does
# not change meaning.
_NORMALIZE_UNSAFE = "".join(chr(code) for code in range(0x21)) + "\"'()<>\\{}\x7f"

_SCHEME = re.compile(r"([a-z][a-z0-9+.\-]*):")
_BEFORE_PATH = re.compile(r"[^/?#]*")
_REPLACEMENT_CHARACTER = "\N{REPLACEMENT CHARACTER}".encode("utf-8")


def percent_encode(char: str) -> str:
    """U+00E9 -> '%C3%A9'. Lone surrogates encode as U+FFFD, '%EF%BF%BD'."""
    try:
        data = char.encode("utf-8")
    except UnicodeEncodeError:
        data = _REPLACEMENT_CHARACTER
    return "".join(f"%{byte:02X}" for byte in data)


URI_COMPONENT = EscapeTable(
    "uri_component",
    {chr(code): percent_encode(chr(code)) for code in range(0x80) if chr(code) not in _COMPONENT_SAFE},
    other=percent_encode,
)

URI_NORMALIZE = EscapeTable(
    "uri_normalize",
    {char: percent_encode(char) for char in _NORMALIZE_UNSAFE},
    other=percent_encode,
)


def _is_ignorable(char):
    # User agents skip these while reading a scheme: "jav\tascript:".
    return char.isspace() or unicodedata.category(char) in ("Cc", "Cf")


def _strip_ignorable(text):
    return "".join(char for char in text if not _is_ignorable(char))


def canonicalize(value: str) -> str:
    """Return the lower-cased form of `value` used for scheme checks."""

    text = _strip_ignorable(value)
    text = _strip_ignorable(decode_character_references(text))
    text = _strip_ignorable(unquote(text, errors="replace"))
    return text.lower()


def uri_scheme(value: str) -> str | None:
    """Return the lower-cased scheme of `value` after canonicalization."""

    match = _SCHEME.match(canonicalize(value))
    if match is None:
        return None
    return match.group(1)


def is_safe_uri(value: str) -> bool:
    """Whether `value` may be used as a link or resource URI.

    Accepts http, https and mailto URIs and every URI without a scheme
    (relative paths, queries, fragments, protocol-relative URIs). A colon or
    ampersand before the first path, query or fragment delimiter of a
    scheme-less URI is treated as a disguised scheme.
    """

    canonical = canonicalize(value)
    match = _SCHEME.match(canonical)
    if match is not None:
        scheme = match.group(1)
        return scheme in SAFE_URI_SCHEMES
    head = _BEFORE_PATH.match(canonical).group(0)
    return ":" not in head and "&" not in head
