"""Selector language for locating subtrees of a Content tree.

Grammar::

    path    := ["."] segment ("." segment)*
    segment := identifier | quoted-string | integer | "*" | "**"

``*`` matches every child at one depth, ``**`` matches the current node
and every descendant. Quoted segments (single or double quotes, with
backslash escapes) may contain dots and other separators. Parsing is
pure; compiled selectors are cached by their source text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from snapcheck.errors import SelectorParseError

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*")
_QUOTES = ("'", '"')


@dataclass(frozen=True)
class Key:
    """Exact map key or struct field name."""

    name: str

    def __str__(self) -> str:
        if _IDENT_RE.fullmatch(self.name):
            return self.name
        escaped = self.name.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'


@dataclass(frozen=True)
class Index:
    """Exact sequence position (or integer map key)."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class Wildcard:
    """Any single child at this depth."""

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class RecursiveWildcard:
    """This node and every descendant, at any depth."""

    def __str__(self) -> str:
        return "**"


Segment = Union[Key, Index, Wildcard, RecursiveWildcard]


@dataclass(frozen=True)
class Selector:
    """A parsed path expression: an ordered tuple of segments."""

    segments: tuple[Segment, ...]

    def __str__(self) -> str:
        return "." + ".".join(str(s) for s in self.segments)

    @classmethod
    def parse(cls, text: str) -> Selector:
        """Parse selector text. See :func:`parse_selector`."""
        return parse_selector(text)


@lru_cache(maxsize=512)
def parse_selector(text: str) -> Selector:
    """Compile a textual path expression into a Selector.

    Args:
        text: Selector source, e.g. ``.user.id``, ``*.id``, ``**.password``
            or ``."key.with.dots".0``.

    Returns:
        The compiled Selector.

    Raises:
        SelectorParseError: On an empty selector or segment, an
            unterminated quote, an invalid integer, or a trailing
            separator.
    """
    return _Parser(text).parse()


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, reason: str, position: int | None = None) -> SelectorParseError:
        return SelectorParseError(
            self.pos if position is None else position, reason, self.text
        )

    def parse(self) -> Selector:
        if not self.text:
            raise self.error("empty selector")
        if self.text.startswith("."):
            self.pos = 1
            if self.pos == len(self.text):
                raise self.error("expected a segment after '.'")

        segments: list[Segment] = [self.segment()]
        while self.pos < len(self.text):
            if self.text[self.pos] != ".":
                raise self.error(f"expected '.', found {self.text[self.pos]!r}")
            self.pos += 1
            if self.pos == len(self.text):
                raise self.error("trailing separator", self.pos - 1)
            segments.append(self.segment())
        return Selector(tuple(segments))

    def segment(self) -> Segment:
        start = self.pos
        char = self.text[start]
        if char == ".":
            raise self.error("empty segment")
        if char in _QUOTES:
            return Key(self.quoted(char))
        end = self.text.find(".", start)
        if end == -1:
            end = len(self.text)
        raw = self.text[start:end]
        self.pos = end
        if raw == "*":
            return Wildcard()
        if raw == "**":
            return RecursiveWildcard()
        if raw[0].isdigit() or raw[0] in "+-":
            if not raw.isdigit() or not raw.isascii():
                raise self.error(f"invalid integer {raw!r}", start)
            return Index(int(raw))
        if not _IDENT_RE.fullmatch(raw):
            raise self.error(
                f"invalid segment {raw!r}; quote keys containing special characters",
                start,
            )
        return Key(raw)

    def quoted(self, quote: str) -> str:
        start = self.pos
        self.pos += 1
        chars: list[str] = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "\\":
                if self.pos + 1 >= len(self.text):
                    break
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            if char == quote:
                self.pos += 1
                return "".join(chars)
            chars.append(char)
            self.pos += 1
        raise self.error("unterminated quote", start)
