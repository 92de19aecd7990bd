"""Per-context escape tables.

Each output context has one :class:`EscapeTable` mapping code points to
their replacement. Escaping looks at one code point at a time and never at
its neighbours, so a value escaped in pieces is identical to the value
escaped whole.

A character is in a table when passing it through could end or alter the
surrounding literal, when it can be half of an embedding hazard such as
``</script`` or ``-->``, or when different decoders disagree about it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

OtherEscaper = Callable[[str], str]


class _CodePointMap(dict):
    """Lookup table for str.translate().

    Code points above ASCII that have no explicit entry are handed to
    `other`, when set. A KeyError leaves the character unchanged.
    """

    __slots__ = ("_other",)

    def __init__(self, codes, other):
        super().__init__(codes)
        self._other = other

    def __missing__(self, code):
        if self._other is not None and code >= 0x80:
            return self._other(chr(code))
        raise KeyError(code)


class EscapeTable:
    """Immutable code point to replacement mapping for one context."""

    __slots__ = ("_codes", "_other", "_replacements", "name")

    def __init__(self, name: str, replacements: Mapping[str, str], other: OtherEscaper | None = None) -> None:
        for char in replacements:
            if len(char) != 1:
                raise ValueError(f"Escape table keys must be single characters, got {char!r}")
        self.name = name
        self._replacements = dict(replacements)
        self._other = other
        self._codes = _CodePointMap({ord(char): value for char, value in replacements.items()}, other)

    def __repr__(self) -> str:
        return f"EscapeTable({self.name!r}, {len(self._replacements)} entries)"

    def __contains__(self, char: str) -> bool:
        return self.get(char) is not None

    def get(self, char: str) -> str | None:
        """Return the replacement for `char`, or None if it passes through."""

        try:
            return self._codes[ord(char)]
        except KeyError:
            return None

    def escape(self, value: str) -> str:
        return value.translate(self._codes)

    def extended(self, name: str, replacements: Mapping[str, str]) -> EscapeTable:
        merged = dict(self._replacements)
        merged.update(replacements)
        return EscapeTable(name, merged, self._other)

    def without(self, name: str, *chars: str) -> EscapeTable:
        remaining = {char: value for char, value in self._replacements.items() if char not in chars}
        return EscapeTable(name, remaining, self._other)


def escape(value: str, table: EscapeTable) -> str:
    """Apply `table` to `value` one code point at a time."""

    if table is None:
        raise TypeError("An escape table is required")
    return table.escape(value)


def _numbered(chars: str, template: str) -> dict[str, str]:
    return {char: template % ord(char) for char in chars}


# JavaScript string literals. "\v" stays hex: old IE reads it as "v".
# "\b" stays hex too, since it means word-break inside a RegExp.
JS_STRING = EscapeTable(
    "js_string",
    {
        "\x00": r"\x00",
        "\x08": r"\x08",
        "\t": r"\t",
        "\n": r"\n",
        "\x0b": r"\x0b",
        "\x0c": r"\f",
        "\r": r"\r",
        '"': r"\x22",
        "&": r"\x26",
        "'": r"\x27",
        "/": r"\/",
        "<": r"\x3c",
        "=": r"\x3d",
        ">": r"\x3e",
        "\\": "\\\\",
        "\x85": r"\x85",
        "\u2028": r"\u2028",
        "\u2029": r"\u2029",
    },
)

# JavaScript regular expression literals: the string escapes plus every
# RegExp operator.
JS_REGEX = JS_STRING.extended("js_regex", _numbered("$()*+,-.:?[]^{|}", r"\x%02x"))

# Quoted CSS strings. The trailing space ends the hex escape, so a following
# hex digit or space is never absorbed into it.
CSS_STRING = EscapeTable(
    "css_string",
    _numbered("\x00\x08\t\n\x0b\x0c\r\"&'()*/:;<=>@\\{}\x85\xa0\u2028\u2029", "\\%x "),
)

# HTML text and quoted attribute values.
HTML = EscapeTable(
    "html",
    {
        "\x00": "&#0;",
        '"': "&quot;",
        "&": "&amp;",
        "'": "&#39;",
        "<": "&lt;",
        ">": "&gt;",
    },
)

# Unquoted attribute values: also every character that can end the value or
# start a new attribute.
HTML_NOSPACE = HTML.extended("html_nospace", _numbered("\t\n\x0b\x0c\r -/=`", "&#%d;"))

# Normalization leaves "&" alone so existing entities in known-safe markup
# are kept rather than doubled.
NORMALIZE_HTML = HTML.without("normalize_html", "&")
NORMALIZE_HTML_NOSPACE = HTML_NOSPACE.without("normalize_html_nospace", "&")
