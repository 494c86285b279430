"""
Canonical serialization of scfg documents.

The canonical form is what golden tests compare against and what the
command line driver prints:

- every name and param double-quoted, with '"' and '\\' escaped
- comments and blank lines dropped
- one indent (four spaces by default) per nesting level
- empty blocks written as plain directives

Writing is event based, so a tree and a stream produce identical text.
"""

from typing import IO, Iterable, Iterator

from .const import DEFAULT_INDENT
from .events import Event
from .parser import Block


SPECIAL_CHARS = " \t\"'\\{}"


def quote(word: str, always: bool = True) -> str:
    """
    Quote a name or param for output.

    Args:
        word: The raw word
        always: Quote even words that would read back unchanged

    Returns:
        The word as it should appear in scfg source
    """
    if not always and word and not word.startswith("#"):
        if not any(char in SPECIAL_CHARS for char in word):
            return word
    escaped = word.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def iter_events(block: Block) -> Iterator[Event]:
    """Walk a tree and yield the equivalent event stream."""
    stack = [iter(block)]

    while stack:
        directive = next(stack[-1], None)
        if directive is None:
            stack.pop()
            if stack:
                yield Event.end(has_block=True)
            continue

        yield Event.start(directive.name, directive.params, directive.has_block, directive.line)
        if directive.has_block:
            stack.append(iter(directive.children))
        else:
            yield Event.end(has_block=False)


def dump_events(
    events: Iterable[Event],
    indent: str = DEFAULT_INDENT,
    quote_all: bool = True,
) -> Iterator[str]:
    """
    Render an event stream as lines of text (without newlines).

    A block header is held back until its first child arrives so that
    an empty block can be written without braces.
    """
    level = 0
    pending: str | None = None

    for event in events:
        if event.is_start:
            if pending is not None:
                yield f"{pending} {{"
                pending = None

            words = [quote(event.name, quote_all)]
            words.extend(quote(param, quote_all) for param in event.params)
            line = indent * level + " ".join(words)

            if event.has_block:
                pending = line
                level += 1
            else:
                yield line
        elif event.has_block:
            level -= 1
            if pending is not None:
                yield pending
                pending = None
            else:
                yield indent * level + "}"


def dumps(block: Block, indent: str = DEFAULT_INDENT, quote_all: bool = True) -> str:
    """Serialize a tree to canonical text."""
    return "".join(f"{line}\n" for line in dump_events(iter_events(block), indent, quote_all))


def dump(block: Block, fp: IO[str], indent: str = DEFAULT_INDENT, quote_all: bool = True) -> None:
    """Serialize a tree to an open text file."""
    for line in dump_events(iter_events(block), indent, quote_all):
        fp.write(f"{line}\n")
