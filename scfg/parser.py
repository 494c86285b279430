"""
Tree builder for scfg documents.

Consumes the event stream and assembles an ordered tree of directives.
Also provides the typed scalar accessors and name-based lookup helpers
that application code uses to read values out of the tree.
"""

from dataclasses import dataclass, field
from typing import Iterable, Union

from .errors import ConversionError
from .events import Event


class Block(list):
    """
    An ordered list of directives: a document or the body of a '{ }' block.

    Lookups only search the immediate members, never nested blocks.
    """

    def get(self, name: str) -> "Directive | None":
        """Get first directive with given name."""
        for directive in self:
            if directive.name == name:
                return directive
        return None

    def get_all(self, name: str) -> list["Directive"]:
        """Get all directives with given name."""
        return [d for d in self if d.name == name]


@dataclass
class Directive:
    """
    A directive with a name, params, and an optional block of children.

    Examples:
        listen 80               -> Directive(name="listen", params=["80"])
        location / { ... }      -> Directive(name="location", params=["/"],
                                             has_block=True, children=[...])

    ``has_block`` records whether the source line opened a block. An empty
    block (``name {`` followed by ``}``) has ``has_block=True`` and no
    children.
    """

    name: str
    params: list[str] = field(default_factory=list)
    has_block: bool = False
    line: int = 0
    children: Block = field(default_factory=Block)

    def __repr__(self) -> str:
        return f"Directive({self.name}, {self.params}, children={len(self.children)})"

    def get(self, name: str) -> "Directive | None":
        """Get first child directive with given name."""
        return self.children.get(name)

    def get_all(self, name: str) -> list["Directive"]:
        """Get all child directives with given name."""
        return self.children.get_all(name)

    def to_str(self) -> str:
        return to_str(self)

    def to_int(self) -> int:
        return to_int(self)

    def to_uint(self) -> int:
        return to_uint(self)

    def to_float(self) -> float:
        return to_float(self)


BlockOrDirective = Union[Block, Directive, list]


class TreeBuilder:
    """
    Builds a Block from an event stream.

    An explicit stack of open parents replaces recursion, so the depth of
    the tree is not bounded by the interpreter's call stack.
    """

    def __init__(self):
        self.root = Block()
        self._stack: list[Directive] = []

    def feed(self, event: Event) -> None:
        """Apply one event to the tree under construction."""
        if event.is_start:
            directive = Directive(
                name=event.name,
                params=list(event.params),
                has_block=event.has_block,
                line=event.line,
            )
            if self._stack:
                self._stack[-1].children.append(directive)
            else:
                self.root.append(directive)
            if event.has_block:
                self._stack.append(directive)
        elif event.has_block:
            self._stack.pop()

    def build(self, events: Iterable[Event]) -> Block:
        """Consume all events and return the root block."""
        for event in events:
            self.feed(event)
        return self.root


def build_tree(events: Iterable[Event]) -> Block:
    """Convenience function to build a tree from events."""
    return TreeBuilder().build(events)


def _children(node: BlockOrDirective) -> list:
    if isinstance(node, Directive):
        return node.children
    return node


def get(node: BlockOrDirective, name: str) -> Directive | None:
    """
    Get the first immediate child (or root-level directive) named ``name``.

    Returns None if there is no such directive.
    """
    for directive in _children(node):
        if directive.name == name:
            return directive
    return None


def get_all(node: BlockOrDirective, name: str) -> list[Directive]:
    """Get all immediate children (or root-level directives) named ``name``."""
    return [d for d in _children(node) if d.name == name]


def to_str(directive: Directive) -> str:
    """
    Return the single param of a directive.

    Raises:
        ConversionError: If the directive has fewer or more than one param
    """
    if len(directive.params) != 1:
        raise ConversionError(
            f"Expected exactly one value for {directive.name}, got {len(directive.params)}",
            directive.line,
        )
    return directive.params[0]


def _number_text(directive: Directive, kind: str) -> str:
    text = to_str(directive)
    if not text or text != text.strip():
        raise ConversionError(
            f"Expected {kind} for {directive.name} got: {text!r}", directive.line
        )
    return text


def to_int(directive: Directive) -> int:
    """
    Return the single param of a directive as an integer.

    Accepts a leading sign and digit group underscores (``10_000``).
    """
    text = _number_text(directive, "an integer")
    try:
        return int(text)
    except ValueError:
        raise ConversionError(
            f"Expected an integer for {directive.name} got: {text!r}", directive.line
        ) from None


def to_uint(directive: Directive) -> int:
    """Return the single param of a directive as a non-negative integer."""
    text = _number_text(directive, "an unsigned integer")
    try:
        value = int(text)
    except ValueError:
        value = -1
    if value < 0 or text.startswith("-"):
        raise ConversionError(
            f"Expected an unsigned integer for {directive.name} got: {text!r}",
            directive.line,
        )
    return value


def to_float(directive: Directive) -> float:
    """Return the single param of a directive as a float."""
    text = _number_text(directive, "a decimal floating point")
    try:
        return float(text)
    except ValueError:
        raise ConversionError(
            f"Expected a decimal floating point for {directive.name} got: {text!r}",
            directive.line,
        ) from None
