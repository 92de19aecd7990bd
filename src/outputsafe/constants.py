"""Sanitizer Constants

Fixed data shared by the escapers, filters and the tag stripper. Everything
here is built once at import time and never mutated.

Usage:
    from outputsafe.constants import SENTINEL, VOID_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/parsing.html#parsing-html-fragments
"""

# Returned in place of a rejected value. Contains nothing any escaper emits,
# so a rejection is always visible in rendered output.
SENTINEL = "zSoyz"

# Returned by filter_normalize_uri on rejection: a fragment that goes nowhere.
URI_SENTINEL = "#" + SENTINEL

# Substrings that can change the parsing mode of the container a value is
# embedded in.
EMBEDDING_HAZARDS = (
    "</script",
    "</style",
    "<!--",
    "-->",
    "<![CDATA[",
    "]]>",
)

# HTML5 void elements (no closing tag)
VOID_ELEMENTS = frozenset({
    "area",
    "base",
    "basefont",
    "bgsound",
    "br",
    "col",
    "command",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
})

# Elements whose content is not parsed as markup. Emitting one of these
# start tags would turn escaped text into script, style or raw text, so a
# whitelist may never contain them.
RAWTEXT_ELEMENTS = frozenset({
    "iframe",
    "noembed",
    "noframes",
    "noscript",
    "plaintext",
    "script",
    "style",
    "textarea",
    "title",
    "xmp",
})

# Inline formatting tags used by clean_html() when no whitelist is given.
FORMATTING_ELEMENTS = (
    "b",
    "br",
    "em",
    "i",
    "s",
    "sub",
    "sup",
    "u",
)

# URI schemes that are passed through by filter_normalize_uri.
SAFE_URI_SCHEMES = frozenset({"http", "https", "mailto"})

# Schemes that run code or read local resources. Only SAFE_URI_SCHEMES decides
# what passes; this list picks the rejection code for the known offenders.
UNSAFE_URI_SCHEMES = frozenset({
    "data",
    "file",
    "javascript",
    "livescript",
    "mocha",
    "vbscript",
})

# Attribute name prefixes that carry script, style or resource-loading
# semantics. Matched case-insensitively against the start of the name, so
# "on" covers every event handler.
UNSAFE_ATTRIBUTE_PREFIXES = (
    "action",
    "archive",
    "background",
    "cite",
    "classid",
    "codebase",
    "data",
    "dsync",
    "formaction",
    "href",
    "longdesc",
    "on",
    "src",
    "style",
    "usemap",
    "xlink",
)

# Element name prefixes that may never be produced from an untrusted name:
# raw text containers and the no* family (noscript, noembed, noframes).
UNSAFE_ELEMENT_PREFIXES = (
    "no",
    "script",
    "style",
    "textarea",
    "title",
    "xmp",
)
