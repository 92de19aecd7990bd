from .constants import EMBEDDING_HAZARDS, SENTINEL
from .content import ContentKind, SanitizedContent, ordain_as_safe
from .escaping import EscapeTable, escape
from .report import Rejection, collect_rejections
from .sanitizers import (
    clean_html,
    escape_css_string,
    escape_html,
    escape_html_attribute,
    escape_html_attribute_nospace,
    escape_html_rcdata,
    escape_js_regex,
    escape_js_string,
    escape_js_value,
    escape_uri,
    filter_css_value,
    filter_html_attributes,
    filter_html_element_name,
    filter_no_autoescape,
    filter_normalize_uri,
    normalize_html,
    normalize_html_nospace,
    normalize_uri,
    strip_html_tags,
)
from .stripper import HtmlTagStripper
from .whitelist import TagWhitelist

__all__ = [
    "EMBEDDING_HAZARDS",
    "SENTINEL",
    "ContentKind",
    "EscapeTable",
    "HtmlTagStripper",
    "Rejection",
    "SanitizedContent",
    "TagWhitelist",
    "clean_html",
    "collect_rejections",
    "escape",
    "escape_css_string",
    "escape_html",
    "escape_html_attribute",
    "escape_html_attribute_nospace",
    "escape_html_rcdata",
    "escape_js_regex",
    "escape_js_string",
    "escape_js_value",
    "escape_uri",
    "filter_css_value",
    "filter_html_attributes",
    "filter_html_element_name",
    "filter_no_autoescape",
    "filter_normalize_uri",
    "normalize_html",
    "normalize_html_nospace",
    "normalize_uri",
    "ordain_as_safe",
    "strip_html_tags",
]
