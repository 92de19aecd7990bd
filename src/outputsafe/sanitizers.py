"""Public sanitization functions.

Every function takes one content value: plain data (``str``, ``int``,
``float``, ``bool`` or ``None``) or :class:`~outputsafe.content.SanitizedContent`.
Content already sanitized for the function's own context is trusted and
passed through (sometimes normalized); content of any other kind is
handled exactly like the plain string it wraps.

Values that fail an allow-list are replaced by the sentinel ``zSoyz``
rather than raising, and the rejection is reported through
:mod:`outputsafe.report`.
"""

from __future__ import annotations

from collections.abc import Iterable

from . import escaping
from .constants import SENTINEL, UNSAFE_URI_SCHEMES, URI_SENTINEL
from .content import ContentKind, ContentValue, SanitizedContent, coerce_to_string, format_number, trusted_content
from .filters import is_safe_attribute_name, is_safe_css_value, is_safe_element_name, pad_attributes
from .report import emit_rejection
from .stripper import strip_tags
from .uri import URI_COMPONENT, URI_NORMALIZE, is_safe_uri, uri_scheme
from .whitelist import TagWhitelist

# -----------------
# HTML
# -----------------


def escape_html(value: ContentValue) -> str:
    """Escape a value for HTML text or a quoted attribute value.

    Trusted HTML is emitted as-is.
    """
    trusted = trusted_content(value, ContentKind.HTML)
    if trusted is not None:
        return trusted
    return escaping.HTML.escape(coerce_to_string(value))


def escape_html_rcdata(value: ContentValue) -> str:
    """Escape a value for the body of <textarea> or <title>.

    RCDATA cannot hold tags, so trusted HTML is normalized instead of being
    emitted raw: its entities survive but "</textarea>" does not.
    """
    trusted = trusted_content(value, ContentKind.HTML)
    if trusted is not None:
        return escaping.NORMALIZE_HTML.escape(trusted)
    return escaping.HTML.escape(coerce_to_string(value))


def escape_html_attribute(value: ContentValue) -> str:
    """Escape a value for a quoted attribute value; trusted HTML loses its tags."""
    trusted = trusted_content(value, ContentKind.HTML)
    if trusted is not None:
        return strip_tags(trusted)
    return escaping.HTML.escape(coerce_to_string(value))


def escape_html_attribute_nospace(value: ContentValue) -> str:
    """Escape a value for an unquoted attribute value."""
    trusted = trusted_content(value, ContentKind.HTML)
    if trusted is not None:
        return strip_tags(trusted, raw_spaces_ok=False)
    return escaping.HTML_NOSPACE.escape(coerce_to_string(value))


def normalize_html(value: ContentValue) -> str:
    """Like escape_html() but keeps "&" so existing entities are not doubled."""
    return escaping.NORMALIZE_HTML.escape(coerce_to_string(value))


def normalize_html_nospace(value: ContentValue) -> str:
    return escaping.NORMALIZE_HTML_NOSPACE.escape(coerce_to_string(value))


def strip_html_tags(value: ContentValue, tag_whitelist: TagWhitelist | None = None, raw_spaces_ok: bool = True) -> str:
    """Reduce markup to the tags in `tag_whitelist`, without attributes.

    With no whitelist every tag is removed. Text is escaped for HTML, or for
    an unquoted attribute value when `raw_spaces_ok` is False.
    """
    return strip_tags(coerce_to_string(value), tag_whitelist, raw_spaces_ok=raw_spaces_ok)


def clean_html(value: ContentValue, extra_safe_tags: Iterable[str] = ()) -> str:
    """Keep simple formatting tags (b, i, em, br, ...) and escape the rest.

    Trusted HTML is emitted as-is.
    """
    trusted = trusted_content(value, ContentKind.HTML)
    if trusted is not None:
        return trusted
    whitelist = TagWhitelist.FORMATTING
    extra_safe_tags = tuple(extra_safe_tags)
    if extra_safe_tags:
        whitelist = whitelist.with_tags(extra_safe_tags)
    return strip_tags(coerce_to_string(value), whitelist)


def filter_html_element_name(value: ContentValue) -> str:
    """Allow only an element name that cannot start script or raw text."""
    name = coerce_to_string(value)
    if is_safe_element_name(name):
        return name
    emit_rejection("invalid-element-name", name)
    return SENTINEL


def filter_html_attributes(value: ContentValue) -> str:
    """Allow only an attribute name without script, style or URL semantics.

    Trusted attributes pass, padded with a trailing space so they never run
    into the following attribute.
    """
    trusted = trusted_content(value, ContentKind.ATTRIBUTES)
    if trusted is not None:
        return pad_attributes(trusted)
    name = coerce_to_string(value)
    if is_safe_attribute_name(name):
        return name
    emit_rejection("invalid-attribute-name", name)
    return SENTINEL


# -----------------
# JavaScript
# -----------------


def escape_js_string(value: ContentValue) -> str:
    """Escape a value for the inside of a quoted JS string literal."""
    trusted = trusted_content(value, ContentKind.JS_STR_CHARS)
    if trusted is not None:
        return trusted
    return escaping.JS_STRING.escape(coerce_to_string(value))


def escape_js_regex(value: ContentValue) -> str:
    """Escape a value for the inside of a JS regular expression literal."""
    return escaping.JS_REGEX.escape(coerce_to_string(value))


def escape_js_value(value: ContentValue) -> str:
    """Render a value as a complete JS expression.

    Numbers, booleans and null are padded with spaces so they cannot merge
    with neighbouring tokens; numbers always carry a fractional part.
    Strings become single-quoted string literals. Trusted JS is emitted
    as-is.
    """
    if isinstance(value, SanitizedContent):
        if value.kind is ContentKind.JS:
            return value.content
        return f"'{escaping.JS_STRING.escape(value.content)}'"
    if value is None:
        return " null "
    if isinstance(value, bool):
        return " true " if value else " false "
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # JS reads an integer literal this large as +/-Infinity too.
            number = float("inf") if value > 0 else float("-inf")
        return f" {format_number(number)} "
    return f"'{escaping.JS_STRING.escape(coerce_to_string(value))}'"


# -----------------
# CSS
# -----------------


def escape_css_string(value: ContentValue) -> str:
    """Escape a value for the inside of a quoted CSS string."""
    return escaping.CSS_STRING.escape(coerce_to_string(value))


def filter_css_value(value: ContentValue) -> str:
    """Allow only simple CSS quantities, identifiers, colors and selectors.

    Trusted CSS is emitted as-is.
    """
    trusted = trusted_content(value, ContentKind.CSS)
    if trusted is not None:
        return trusted
    css = coerce_to_string(value)
    if is_safe_css_value(css):
        return css
    emit_rejection("invalid-css-value", css)
    return SENTINEL


# -----------------
# URIs
# -----------------


def escape_uri(value: ContentValue) -> str:
    """Percent-encode a value for use as a URI component.

    Trusted URIs are only normalized, so their delimiters keep their meaning.
    """
    trusted = trusted_content(value, ContentKind.URI)
    if trusted is not None:
        return URI_NORMALIZE.escape(trusted)
    return URI_COMPONENT.escape(coerce_to_string(value))


def normalize_uri(value: ContentValue) -> str:
    """Encode only the characters no URI may contain raw."""
    return URI_NORMALIZE.escape(coerce_to_string(value))


def filter_normalize_uri(value: ContentValue) -> str:
    """Normalize a URI and reject schemes such as javascript: and data:.

    Rejected URIs become "#zSoyz". Trusted URIs skip the scheme check.
    """
    trusted = trusted_content(value, ContentKind.URI)
    if trusted is not None:
        return URI_NORMALIZE.escape(trusted)
    uri = coerce_to_string(value)
    if is_safe_uri(uri):
        return URI_NORMALIZE.escape(uri)
    scheme = uri_scheme(uri)
    if scheme is None or scheme in UNSAFE_URI_SCHEMES:
        emit_rejection("unsafe-uri-scheme", uri)
    else:
        emit_rejection("unsupported-uri-scheme", uri)
    return URI_SENTINEL


# -----------------
# Raw output
# -----------------


def filter_no_autoescape(value: ContentValue) -> str:
    """Emit a value without escaping, unless it was produced without escaping.

    Content of kind TEXT explicitly says it was never escaped, so it is
    replaced by the sentinel instead of being forwarded.
    """
    if isinstance(value, SanitizedContent) and value.kind is ContentKind.TEXT:
        emit_rejection("text-content-blocked", value.content)
        return SENTINEL
    return coerce_to_string(value)
