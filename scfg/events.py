"""
Streaming (event based) reader for scfg documents.

The scanner turns lines of text into a flat, lazy sequence of START and END
events. Every START is matched by exactly one END; blockless directives are
closed right away, block directives are closed by the END emitted for the
line holding their '}'.
"""

import io
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator

from .const import MAX_DEPTH
from .errors import ParseError
from .lexer import LineLexer


class EventKind(Enum):
    """Event kinds of the streaming API."""

    START = auto()   # directive begins
    END = auto()     # directive (or its block) ends


@dataclass
class Event:
    """
    A single event from the scanner.

    Examples:
        listen 80     -> Event(START, "listen", ["80"]), Event(END)
        server {      -> Event(START, "server", [], has_block=True)
        }             -> Event(END, has_block=True)
    """

    kind: EventKind
    name: str = ""
    params: list[str] = field(default_factory=list)
    has_block: bool = False
    line: int = 0

    def __repr__(self) -> str:
        if self.kind is EventKind.END:
            return f"Event(END, has_block={self.has_block})"
        return (
            f"Event(START, {self.name!r}, {self.params!r}, "
            f"has_block={self.has_block}, line={self.line})"
        )

    @classmethod
    def start(
        cls, name: str, params: list[str] | None = None, has_block: bool = False, line: int = 0
    ) -> "Event":
        return cls(EventKind.START, name, list(params or []), has_block, line)

    @classmethod
    def end(cls, has_block: bool = False) -> "Event":
        return cls(EventKind.END, has_block=has_block)

    @property
    def is_start(self) -> bool:
        return self.kind is EventKind.START

    @property
    def is_end(self) -> bool:
        return self.kind is EventKind.END


def _lines(source: str | Iterable[str]) -> Iterable[str]:
    if isinstance(source, str):
        return io.StringIO(source)
    return source


class EventScanner:
    """
    Pull-driven scanner producing events from lines of text.

    Accepts a string or any iterable of lines (an open text file,
    ``io.StringIO``, a list of strings). The scanner is single-pass: once
    iterated it cannot be restarted.

    Usage:
        for event in EventScanner(open("app.conf")):
            ...
    """

    def __init__(self, source: str | Iterable[str], max_depth: int = MAX_DEPTH):
        self.source = _lines(source)
        self.max_depth = max_depth
        self.line_no = 0
        self.open_blocks = 0
        self._consumed = False

    def __iter__(self) -> Iterator[Event]:
        if self._consumed:
            raise RuntimeError("EventScanner cannot be restarted")
        self._consumed = True
        return self._scan()

    def _scan(self) -> Iterator[Event]:
        for raw in self.source:
            self.line_no += 1
            lexer = LineLexer(raw.rstrip("\r\n"), self.line_no)
            lexer.skip_whitespace()
            if lexer.at_end or lexer.at_comment:
                continue

            words = lexer.split_words()

            if lexer.at_close_brace:
                if self.open_blocks == 0:
                    raise ParseError(
                        "Unexpected block closing '}' without opening '{'", self.line_no
                    )
                self.open_blocks -= 1
                yield Event.end(has_block=True)
                continue

            if not words:
                continue

            has_block = lexer.at_open_brace
            if has_block:
                self.open_blocks += 1
                if self.open_blocks >= self.max_depth:
                    raise ParseError("Block nesting depth exceeded", self.line_no)

            yield Event.start(words[0], words[1:], has_block, self.line_no)

            if not has_block:
                yield Event.end(has_block=False)

        if self.open_blocks:
            raise ParseError("Unclosed block: expected '}'", self.line_no)


def parse_scfg(source: str | Iterable[str], max_depth: int = MAX_DEPTH) -> Iterator[Event]:
    """
    Convenience function to stream events from a string or lines.

    Args:
        source: Document text or an iterable of lines
        max_depth: Maximum block nesting depth

    Returns:
        Lazy iterator over the document's events
    """
    return iter(EventScanner(source, max_depth))
