"""
Exception hierarchy for scfg parsing.

Every error carries the offending line number; tokenizer errors also carry
the column where the problem was detected.
"""


class ScfgError(ValueError):
    """Base exception for all scfg parse and conversion errors."""

    def __init__(self, message: str, line: int, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        if column is not None:
            super().__init__(f"Line {line}, column {column}: {message}")
        else:
            super().__init__(f"Line {line}: {message}")


class LexerError(ScfgError):
    """Malformed line: quoting, escapes, or misplaced braces."""


class ParseError(ScfgError):
    """Unbalanced or too deeply nested blocks."""


class ConversionError(ScfgError):
    """A directive's params cannot be read as the requested scalar."""


class VariableError(ScfgError):
    """Invalid variable declaration or reference."""
