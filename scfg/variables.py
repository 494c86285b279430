"""
Variable substitution layer for scfg event streams.

Sits between the scanner and any consumer. Declarations are removed from
the stream and remembered; later directives referencing them get the
stored values spliced in. Consumers only ever see a variable-free stream.

Two kinds of variables are supported:

    $hosts = alpha.example.com beta.example.com     (simple)

    $defaults = {                                    (block)
        timeout 30
        retries 3
    }

    upstream $hosts          -> upstream alpha.example.com beta.example.com
    service api $defaults    -> service api { timeout 30; retries 3 }

A parameter is a reference only if it exactly matches a declared name.
Anything else, including undeclared names, is passed through literally.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator

from .const import DECLARATION_OPERATOR, MAX_DEPTH
from .errors import VariableError
from .events import Event
from .logging import get_logger


logger = get_logger("variables")


class VariableKind(Enum):
    """Kinds of variable definitions."""
    SIMPLE = "simple"    # list of params
    BLOCK = "block"      # captured block body


@dataclass
class VariableDefinition:
    """A declared variable and the line it was declared on."""
    kind: VariableKind
    params: list[str] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    line: int = 0


DeclarationPredicate = Callable[[Event], bool]


def is_declaration(event: Event) -> bool:
    """Default predicate: ``name = ...``."""
    return bool(event.params) and event.params[0] == DECLARATION_OPERATOR


def is_dollar_declaration(event: Event) -> bool:
    """Stricter predicate: ``$name = ...``."""
    return event.name.startswith("$") and is_declaration(event)


class VariableResolver:
    """
    Stream filter that resolves variable declarations and references.

    Usage:
        events = VariableResolver(parse_scfg(source))
        block = build_tree(events)

    Like the scanner it wraps, the resolver is lazy and single-pass.
    """

    def __init__(
        self,
        events: Iterable[Event],
        declaration: DeclarationPredicate = is_declaration,
        max_depth: int = MAX_DEPTH,
    ):
        self.events = events
        self.declaration = declaration
        self.max_depth = max_depth
        self.variables: dict[str, VariableDefinition] = {}

        # Block declaration capture state
        self._capturing: str | None = None
        self._captured: list[Event] = []
        self._capture_depth = 0
        self._capture_line = 0

        # Block variables currently being expanded
        self._expansion_stack: set[str] = set()

    def __iter__(self) -> Iterator[Event]:
        return self._expand(self._strip_declarations())

    def _strip_declarations(self) -> Iterator[Event]:
        """Remove declarations from the source stream, recording them."""
        skip_end = False

        for event in self.events:
            if self._capturing is not None:
                self._capture(event)
                continue

            if skip_end:
                skip_end = False
                if event.is_end and not event.has_block:
                    continue

            if event.is_start and self.declaration(event):
                if event.has_block:
                    self._begin_capture(event)
                else:
                    self._declare_simple(event)
                    skip_end = True
                continue

            yield event

    def _declare_simple(self, event: Event) -> None:
        values = event.params[1:]
        if not values:
            raise VariableError(
                f"Variable {event.name} has no value after '{DECLARATION_OPERATOR}'", event.line
            )
        if event.name in values:
            raise VariableError(
                f"Circular reference detected: {event.name} references itself", event.line
            )

        self.variables[event.name] = VariableDefinition(
            kind=VariableKind.SIMPLE, params=list(values), line=event.line
        )
        logger.debug(f"Declared variable {event.name} = {values} (line {event.line})")

    def _begin_capture(self, event: Event) -> None:
        if len(event.params) > 1:
            raise VariableError("Block variables must not have params", event.line)

        self._capturing = event.name
        self._captured = []
        self._capture_depth = 1
        self._capture_line = event.line

    def _capture(self, event: Event) -> None:
        if event.has_block:
            self._capture_depth += 1 if event.is_start else -1

        if self._capture_depth > 0:
            self._captured.append(event)
            return

        name = self._capturing
        self.variables[name] = VariableDefinition(
            kind=VariableKind.BLOCK, events=self._captured, line=self._capture_line
        )
        logger.debug(
            f"Declared block variable {name} with {len(self._captured)} events "
            f"(line {self._capture_line})"
        )
        self._capturing = None
        self._captured = []

    def _block_reference(self, event: Event, refs: list[str]) -> str | None:
        """
        Validate the references of a directive.

        Returns:
            The name of the block variable referenced by the last param,
            or None if the directive only references simple variables.
        """
        for name in refs:
            if name in self._expansion_stack:
                raise VariableError(
                    f"Circular reference detected: {name} references itself", event.line
                )

        blocks = [
            i for i, param in enumerate(event.params)
            if param in self.variables and self.variables[param].kind is VariableKind.BLOCK
        ]
        if not blocks:
            return None
        if len(blocks) > 1:
            raise VariableError("Only one block variable is allowed per directive", event.line)
        if blocks[0] != len(event.params) - 1:
            raise VariableError("Block variable must be the last parameter", event.line)
        return event.params[-1]

    def _splice(self, params: list[str]) -> list[str]:
        result: list[str] = []
        for param in params:
            if param in self.variables:
                result.extend(self.variables[param].params)
            else:
                result.append(param)
        return result

    def _expand(self, events: Iterable[Event]) -> Iterator[Event]:
        """
        Resolve references in a stream of non-declaration events.

        Block variable bodies are walked with an explicit stack of frames,
        so expansion depth is bounded by ``max_depth`` only.
        """
        frames = [_Frame(None, iter(events))]

        try:
            while frames:
                frame = frames[-1]
                event = next(frame.events, None)

                if event is None:
                    frames.pop()
                    if frame.name is None:
                        continue
                    self._expansion_stack.discard(frame.name)
                    # A directive with its own block keeps its children and
                    # its own closing event; otherwise close here and drop
                    # the blockless END that follows in the parent.
                    if frame.closes_block:
                        frames[-1].skip_end = True
                        yield Event.end(has_block=True)
                    continue

                if frame.skip_end:
                    frame.skip_end = False
                    if event.is_end and not event.has_block:
                        continue

                if event.is_end:
                    yield event
                    continue

                refs = [param for param in event.params if param in self.variables]
                if not refs:
                    yield event
                    continue

                block_var = self._block_reference(event, refs)

                if block_var is None:
                    yield Event.start(
                        event.name, self._splice(event.params), event.has_block, event.line
                    )
                    continue

                yield Event.start(event.name, self._splice(event.params[:-1]), True, event.line)
                frames.append(self._enter_block(block_var, event))
        finally:
            for frame in frames:
                if frame.name is not None:
                    self._expansion_stack.discard(frame.name)

    def _enter_block(self, name: str, event: Event) -> "_Frame":
        if len(self._expansion_stack) >= self.max_depth:
            raise VariableError("Variable expansion depth exceeded", event.line)

        logger.debug(f"Expanding block variable {name} (line {event.line})")
        self._expansion_stack.add(name)
        return _Frame(name, iter(self.variables[name].events), closes_block=not event.has_block)


@dataclass
class _Frame:
    """One level of block variable expansion (name is None for the source)."""
    name: str | None
    events: Iterator[Event]
    closes_block: bool = False
    skip_end: bool = False


def resolve_variables(
    events: Iterable[Event],
    declaration: DeclarationPredicate = is_declaration,
    max_depth: int = MAX_DEPTH,
) -> Iterator[Event]:
    """Convenience function to filter an event stream through a resolver."""
    return iter(VariableResolver(events, declaration, max_depth))
