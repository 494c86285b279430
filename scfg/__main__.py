"""
Command line driver for scfg.

Reads a document and writes its canonical form to standard output.

Usage:
    python -m scfg /path/to/app.conf
    python -m scfg --variables < app.conf
    python -m scfg --help
"""

import argparse
import sys
from typing import Iterable

from . import __version__
from .errors import ScfgError
from .events import Event
from .loader import LoaderConfig, ScfgLoader
from .logging import get_logger, setup_logging_from_args
from .variables import is_declaration, is_dollar_declaration
from .writer import dump_events


logger = get_logger("cli")


def validate_events(events: Iterable[Event]) -> int:
    """Consume a stream and print a short summary of the document."""
    total = 0
    top_level = 0
    depth = 0
    max_depth = 0

    for event in events:
        if event.is_start:
            total += 1
            if depth == 0:
                top_level += 1
            if event.has_block:
                depth += 1
                max_depth = max(max_depth, depth)
        elif event.has_block:
            depth -= 1

    print("Document summary:")
    print(f"  Directives: {total}")
    print(f"  Top-level directives: {top_level}")
    print(f"  Maximum nesting depth: {max_depth}")
    print("\nDocument is valid!")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scfg",
        description="Read an scfg document and write it in canonical form",
    )

    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="Path to the document, '-' for standard input (default: -)",
    )

    parser.add_argument(
        "--variables",
        action="store_true",
        help="Resolve 'name = value' variable declarations",
    )

    parser.add_argument(
        "--dollar",
        action="store_true",
        help="Only treat '$name = value' as declarations (implies --variables)",
    )

    parser.add_argument(
        "--events",
        action="store_true",
        help="Print the event stream instead of the document",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=4,
        metavar="N",
        help="Spaces per nesting level (default: 4)",
    )

    parser.add_argument(
        "--bare",
        action="store_true",
        help="Only quote words that need quoting",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check the document, print a summary and exit",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)",
    )

    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only errors)",
    )

    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to file",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging_from_args(
        verbose=args.verbose,
        debug=args.debug,
        quiet=args.quiet,
        colors=not args.no_color,
        log_file=args.log_file,
    )

    config = LoaderConfig(
        variables=args.variables or args.dollar,
        declaration=is_dollar_declaration if args.dollar else is_declaration,
    )
    loader = ScfgLoader(config)

    try:
        if args.path == "-":
            events = loader.events_from_string(sys.stdin)
        else:
            events = loader.events_from_file(args.path)

        if args.validate:
            return validate_events(events)

        if args.events:
            for event in events:
                print(repr(event))
        else:
            for line in dump_events(events, indent=" " * args.indent, quote_all=not args.bare):
                print(line)
        return 0

    except ScfgError as e:
        logger.error(f"Parse error: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot read {args.path}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
