"""
scfg: reader for the simple configuration file format.

Documents are nginx-style lines of ``name param... [{``, nested blocks
closed by ``}`` on a line of its own, and ``#`` comments:

    server {
        listen 80
        location / {
            root /var/www/html
        }
    }

Two APIs are offered: a lazy event stream (:func:`parse_scfg`) and a tree
of directives (:func:`read_scfg`, :func:`load_scfg`). An optional layer
resolves ``name = value`` variable declarations.
"""

from .const import APP_VERSION
from .errors import ConversionError, LexerError, ParseError, ScfgError, VariableError
from .events import Event, EventKind, EventScanner, parse_scfg
from .lexer import LineLexer, tokenize_line
from .loader import LoaderConfig, ScfgLoader, load_scfg, read_scfg, scan_file
from .parser import (
    Block,
    Directive,
    TreeBuilder,
    build_tree,
    get,
    get_all,
    to_float,
    to_int,
    to_str,
    to_uint,
)
from .variables import (
    VariableDefinition,
    VariableKind,
    VariableResolver,
    is_declaration,
    is_dollar_declaration,
    resolve_variables,
)
from .writer import dump, dump_events, dumps, iter_events, quote

__version__ = APP_VERSION

__all__ = [
    "__version__",
    "ScfgError",
    "LexerError",
    "ParseError",
    "ConversionError",
    "VariableError",
    "LineLexer",
    "tokenize_line",
    "Event",
    "EventKind",
    "EventScanner",
    "parse_scfg",
    "Block",
    "Directive",
    "TreeBuilder",
    "build_tree",
    "get",
    "get_all",
    "to_str",
    "to_int",
    "to_uint",
    "to_float",
    "VariableDefinition",
    "VariableKind",
    "VariableResolver",
    "is_declaration",
    "is_dollar_declaration",
    "resolve_variables",
    "LoaderConfig",
    "ScfgLoader",
    "read_scfg",
    "load_scfg",
    "scan_file",
    "quote",
    "iter_events",
    "dump_events",
    "dumps",
    "dump",
]
