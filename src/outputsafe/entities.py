"""HTML5 character reference decoding.

Decodes references the way a user agent does before it ever looks at an
attribute value, so URI scheme checks see what the browser will see.
Supports named references (&amp;, &colon;) and numeric references in
decimal or hex (&#106;, &#x6A;) with any zero padding and an optional
trailing semicolon.
"""

from __future__ import annotations

import html.entities
import re

# Python's complete HTML5 entity list. Keys ending in ";" need the
# semicolon; keys without one are the legacy references that also work
# without it.
_HTML5_ENTITIES = html.entities.html5
LEGACY_ENTITIES = frozenset(name for name in _HTML5_ENTITIES if not name.endswith(";"))

_REFERENCE = re.compile(r"&(?:#[xX]([0-9A-Fa-f]+)|#([0-9]+)|([A-Za-z][A-Za-z0-9]*))(;?)")


def _windows_1252(code):
    # HTML5 maps C1 references through windows-1252; its five holes map to
    # themselves.
    try:
        return bytes([code]).decode("cp1252")
    except UnicodeDecodeError:
        return chr(code)


def decode_numeric_reference(digits: str, *, is_hex: bool = False) -> str:
    """Decode the digits of &#...; or &#x...; to a character.

    NUL, surrogates and out of range code points become U+FFFD.
    """

    digits = digits.lstrip("0") or "0"
    if len(digits) > 8:
        return "\ufffd"
    code = int(digits, 16 if is_hex else 10)
    if code == 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return "\ufffd"
    if 0x80 <= code <= 0x9F:
        return _windows_1252(code)
    return chr(code)


def _decode_named(text, start, name, semicolon, in_attribute):
    """Return (decoded, end) for a named reference at `start`, or (None, start)."""

    if semicolon and name + ";" in _HTML5_ENTITIES:
        return _HTML5_ENTITIES[name + ";"], start + len(name) + 2

    # Longest legacy prefix: "&notit;" decodes "&not" and leaves "it;".
    for length in range(len(name), 0, -1):
        prefix = name[:length]
        if prefix not in LEGACY_ENTITIES:
            continue
        end = start + 1 + length
        following = text[end] if end < len(text) else ""
        # Inside attribute values a legacy reference followed by an
        # alphanumeric or "=" is left alone (&copy=1 in query strings).
        if in_attribute and (following.isalnum() or following == "="):
            return None, start
        return _HTML5_ENTITIES[prefix], end
    return None, start


def decode_character_references(text: str, *, in_attribute: bool = True) -> str:
    """Decode every character reference in `text`.

    Unknown references are kept verbatim.
    """

    if "&" not in text:
        return text

    parts = []
    pos = 0
    for match in _REFERENCE.finditer(text):
        start = match.start()
        hex_digits, decimal_digits, name, semicolon = match.groups()
        if name is None:
            if hex_digits is not None:
                decoded = decode_numeric_reference(hex_digits, is_hex=True)
            else:
                decoded = decode_numeric_reference(decimal_digits)
            end = match.end()
        else:
            decoded, end = _decode_named(text, start, name, semicolon, in_attribute)
            if decoded is None:
                continue
        parts.append(text[pos:start])
        parts.append(decoded)
        pos = end
    parts.append(text[pos:])
    return "".join(parts)
