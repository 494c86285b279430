"""
Loading scfg documents from strings and files.

Wires the scanner, the optional variable layer and the tree builder
together and makes sure files are closed on every exit path.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .const import MAX_DEPTH
from .errors import ScfgError
from .events import Event, parse_scfg
from .logging import get_logger
from .parser import Block, build_tree
from .variables import DeclarationPredicate, is_declaration, resolve_variables


logger = get_logger("loader")


def _pipeline(
    source: str | Iterable[str],
    variables: bool,
    declaration: DeclarationPredicate,
    max_depth: int,
) -> Iterator[Event]:
    events = parse_scfg(source, max_depth)
    if variables:
        events = resolve_variables(events, declaration, max_depth)
    return events


def read_scfg(
    source: str | Iterable[str],
    *,
    variables: bool = False,
    declaration: DeclarationPredicate = is_declaration,
    max_depth: int = MAX_DEPTH,
) -> Block:
    """
    Parse a document from a string or an iterable of lines.

    Args:
        source: Document text, an open text file, or a list of lines
        variables: Resolve variable declarations and references
        declaration: Predicate recognizing variable declarations
        max_depth: Maximum block nesting depth

    Returns:
        The (maybe empty) root block
    """
    return build_tree(_pipeline(source, variables, declaration, max_depth))


def load_scfg(
    path: str | Path,
    *,
    variables: bool = False,
    declaration: DeclarationPredicate = is_declaration,
    max_depth: int = MAX_DEPTH,
    encoding: str = "utf-8",
) -> Block:
    """
    Parse a document from a file.

    Raises:
        OSError: If the file cannot be opened
        ScfgError: If the document is invalid
    """
    with Path(path).open(encoding=encoding) as fp:
        return read_scfg(fp, variables=variables, declaration=declaration, max_depth=max_depth)


def scan_file(
    path: str | Path,
    *,
    variables: bool = False,
    declaration: DeclarationPredicate = is_declaration,
    max_depth: int = MAX_DEPTH,
    encoding: str = "utf-8",
) -> Iterator[Event]:
    """
    Stream events from a file.

    The file is opened on first use and closed once the iterator is
    exhausted, fails, or is closed by the caller.
    """
    with Path(path).open(encoding=encoding) as fp:
        yield from _pipeline(fp, variables, declaration, max_depth)


@dataclass
class LoaderConfig:
    """Options shared by all loads of a ScfgLoader."""
    variables: bool = False
    declaration: DeclarationPredicate = is_declaration
    max_depth: int = MAX_DEPTH
    encoding: str = "utf-8"


class ScfgLoader:
    """
    Loads documents from files or strings with a fixed set of options.

    Usage:
        loader = ScfgLoader(LoaderConfig(variables=True))
        block = loader.load_file("/etc/app/app.conf")
        # or
        block = loader.load_string(config_text)
    """

    def __init__(self, config: LoaderConfig | None = None):
        self.config = config or LoaderConfig()
        self.last_document: Block | None = None

    def _options(self) -> dict:
        return {
            "variables": self.config.variables,
            "declaration": self.config.declaration,
            "max_depth": self.config.max_depth,
        }

    def _check_path(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        if not path.is_file():
            raise IsADirectoryError(f"Not a file: {path}")

    def load_file(self, path: str | Path) -> Block:
        """
        Load a document from a file.

        Args:
            path: Path to the document

        Returns:
            The root block

        Raises:
            OSError: If the file cannot be read
            ScfgError: If the document is invalid
        """
        path = Path(path)
        self._check_path(path)
        logger.info(f"Loading {path}")

        try:
            document = load_scfg(path, encoding=self.config.encoding, **self._options())
        except ScfgError as e:
            logger.debug(f"Failed to parse {path}: {e}")
            raise

        logger.debug(f"Loaded {len(document)} top-level directives from {path}")
        self.last_document = document
        return document

    # Shorter alias for load_file
    def load(self, path: str | Path) -> Block:
        """Alias for load_file."""
        return self.load_file(path)

    def load_string(self, source: str, filename: str = "<string>") -> Block:
        """
        Load a document from a string.

        Args:
            source: Document text
            filename: Name used in log messages

        Returns:
            The root block
        """
        try:
            document = read_scfg(source, **self._options())
        except ScfgError as e:
            logger.debug(f"Failed to parse {filename}: {e}")
            raise

        logger.debug(f"Loaded {len(document)} top-level directives from {filename}")
        self.last_document = document
        return document

    def events_from_file(self, path: str | Path) -> Iterator[Event]:
        """Stream events from a file using this loader's options."""
        path = Path(path)
        self._check_path(path)
        logger.info(f"Streaming {path}")
        return scan_file(path, encoding=self.config.encoding, **self._options())

    def events_from_string(self, source: str | Iterable[str]) -> Iterator[Event]:
        """Stream events from a string or lines using this loader's options."""
        return _pipeline(source, **self._options())
