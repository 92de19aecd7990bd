"""Whitelist-driven HTML tag stripper.

A single left-to-right pass over untrusted markup with two states. Tags whose
names are not whitelisted are dropped, whitelisted tags lose every attribute,
and the output is rebalanced so that every emitted start tag is closed:

- a close tag for an element that is open closes everything opened after it
  first, innermost first;
- a close tag for an element that is not open is dropped;
- whatever is still open at the end of input is closed, innermost first.

Text between tags is normalized run by run: existing character references are
kept, everything else that is special in HTML is escaped. A run is never
merged with the run on the other side of a removed tag, and an "&" that
starts an unfinished reference at the end of a run is escaped, so
"&<hr>amp;" cannot turn into an entity and "<<b>script>" cannot turn into a
tag.
"""

from __future__ import annotations

import re

from .escaping import NORMALIZE_HTML, NORMALIZE_HTML_NOSPACE, EscapeTable
from .whitelist import EMPTY_WHITELIST, TagWhitelist

_TAG_NAME = re.compile(r"[A-Za-z0-9]*")
# An "&" with nothing but reference characters after it, up to the end of a run.
_OPEN_REFERENCE = re.compile(r"&([#0-9A-Za-z]*)\Z")
_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})


def _opens_tag(char):
    # "<" followed by a letter, "/" or "!" starts a tag candidate.
    return char == "/" or char == "!" or ("a" <= char <= "z") or ("A" <= char <= "Z")


class HtmlTagStripper:
    TEXT = 0
    IN_TAG = 1

    __slots__ = (
        "buffer",
        "length",
        "open_tags",
        "out",
        "pos",
        "state",
        "text_table",
        "whitelist",
    )

    def __init__(self, whitelist: TagWhitelist | None = None, *, raw_spaces_ok: bool = True) -> None:
        if whitelist is None:
            whitelist = EMPTY_WHITELIST
        elif not isinstance(whitelist, TagWhitelist):
            raise TypeError(f"Expected a TagWhitelist, got {type(whitelist).__name__}")
        self.whitelist = whitelist
        self.text_table: EscapeTable = NORMALIZE_HTML if raw_spaces_ok else NORMALIZE_HTML_NOSPACE

        self.state = self.TEXT
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.open_tags: list[str] = []
        self.out: list[str] = []

    def run(self, html: str) -> str:
        self.buffer = html
        self.length = len(html)
        self.pos = 0
        self.state = self.TEXT
        self.open_tags.clear()
        self.out.clear()

        while True:
            state = self.state
            if state == self.TEXT:
                if self._state_text():
                    break
            elif state == self.IN_TAG:
                if self._state_in_tag():
                    break

        self._close_open_tags(0)
        result = "".join(self.out)
        self.out.clear()
        return result

    # ---------------------
    # Helper methods
    # ---------------------

    def _emit_text(self, text):
        if text:
            text = self.text_table.escape(text)
            # The next run may complete the reference: "&am" + "p;".
            self.out.append(_OPEN_REFERENCE.sub(r"&amp;\1", text))

    def _find_tag_end(self, start):
        """Index of the ">" ending the candidate at `start`, or -1.

        The candidate fails if input ends, or another tag opens, first.
        """
        buffer = self.buffer
        pos = start + 1
        while True:
            gt = buffer.find(">", pos)
            lt = buffer.find("<", pos, gt if gt != -1 else self.length)
            if lt == -1:
                return gt
            if lt + 1 < self.length and _opens_tag(buffer[lt + 1]):
                return -1
            pos = lt + 1

    def _close_open_tags(self, index):
        open_tags = self.open_tags
        while len(open_tags) > index:
            self.out.append(f"</{open_tags.pop()}>")

    # ---------------------
    # State handlers
    # ---------------------

    def _state_text(self):
        buffer = self.buffer
        length = self.length
        pos = self.pos
        while True:
            lt = buffer.find("<", pos)
            if lt == -1:
                self._emit_text(buffer[self.pos :])
                self.pos = length
                return True
            if lt + 1 < length and _opens_tag(buffer[lt + 1]):
                self._emit_text(buffer[self.pos : lt])
                self.pos = lt
                self.state = self.IN_TAG
                return False
            # A lone "<" is text.
            pos = lt + 1

    def _state_in_tag(self):
        buffer = self.buffer
        start = self.pos
        end = self._find_tag_end(start)
        if end == -1:
            # Not a tag after all: emit it as text up to the next "<".
            next_lt = buffer.find("<", start + 1)
            stop = self.length if next_lt == -1 else next_lt
            self._emit_text(buffer[start:stop])
            self.pos = stop
            self.state = self.TEXT
            return stop >= self.length

        self._handle_tag(start, end)
        self.pos = end + 1
        self.state = self.TEXT
        return self.pos >= self.length

    def _handle_tag(self, start, end):
        is_end_tag = self.buffer[start + 1] == "/"
        name_start = start + 2 if is_end_tag else start + 1
        # Attributes, a trailing "/" and anything glued onto the name after a
        # non-alphanumeric character are discarded.
        name = _TAG_NAME.match(self.buffer, name_start, end).group(0).translate(_ASCII_LOWER_TABLE)
        if not name or not self.whitelist.is_safe_tag(name):
            return

        if is_end_tag:
            open_tags = self.open_tags
            for index in range(len(open_tags) - 1, -1, -1):
                if open_tags[index] == name:
                    self._close_open_tags(index)
                    break
            return

        self.out.append(f"<{name}>")
        if not self.whitelist.is_void(name):
            self.open_tags.append(name)


def strip_tags(html: str, whitelist: TagWhitelist | None = None, *, raw_spaces_ok: bool = True) -> str:
    """Strip every tag not in `whitelist` and escape the remaining text.

    With `raw_spaces_ok` False, the text is escaped for an unquoted
    attribute value.
    """
    return HtmlTagStripper(whitelist, raw_spaces_ok=raw_spaces_ok).run(html)
