"""Tag whitelists for the HTML tag stripper."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from .constants import FORMATTING_ELEMENTS, RAWTEXT_ELEMENTS, VOID_ELEMENTS

_TAG_NAME = re.compile(r"[a-z][a-z0-9]*")


class TagWhitelist:
    """An immutable set of tag names that survive stripping.

    Names are lower-case ASCII. Void elements in the set are remembered so
    the stripper never waits for, or emits, their end tag. Raw text elements
    such as ``script`` can never be whitelisted: their content is not parsed
    as markup, so escaped text inside them would stop being inert.
    """

    __slots__ = ("_tags", "_void_tags")

    FORMATTING: TagWhitelist

    def __init__(self, *tag_names: str) -> None:
        for name in tag_names:
            if not isinstance(name, str) or _TAG_NAME.fullmatch(name) is None:
                raise ValueError(f"Invalid tag name: {name!r}")
            if name in RAWTEXT_ELEMENTS:
                raise ValueError(f"Tag cannot be whitelisted: {name!r}")
        self._tags = frozenset(tag_names)
        self._void_tags = self._tags & VOID_ELEMENTS

    def __repr__(self) -> str:
        return f"TagWhitelist({', '.join(repr(name) for name in sorted(self._tags))})"

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagWhitelist):
            return NotImplemented
        return self._tags == other._tags

    def __hash__(self) -> int:
        return hash(self._tags)

    def is_safe_tag(self, name: str) -> bool:
        """`name` must already be lower-cased."""
        return name in self._tags

    def is_void(self, name: str) -> bool:
        return name in self._void_tags

    def with_tags(self, tag_names: Iterable[str]) -> TagWhitelist:
        """Return a new whitelist with `tag_names` added."""
        return TagWhitelist(*self._tags, *tag_names)


TagWhitelist.FORMATTING = TagWhitelist(*FORMATTING_ELEMENTS)

EMPTY_WHITELIST = TagWhitelist()
