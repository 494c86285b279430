"""
Line tokenizer for the scfg configuration syntax.

Supports:
- Words separated by spaces and tabs
- Double-quoted strings with backslash escapes
- Single-quoted strings (backslash is literal)
- Backslash escapes in unquoted words
- Block markers '{' and '}' at the end of a line
"""

from .errors import LexerError


NO_QUOTE = ""
QUOTES = "\"'"
WHITESPACE = " \t"
OPEN_BRACE = "{"
CLOSE_BRACE = "}"
COMMENT = "#"


class LineLexer:
    """
    Tokenizer for a single line of scfg source.

    The lexer works on one physical line without its trailing newline.
    ``pos`` is the cursor: after :meth:`split_words` returns it points at the
    block marker that ended the line (if any) or at the end of the line.

    Example:
        lexer = LineLexer('server "example.com" {', line_no=1)
        lexer.skip_whitespace()
        lexer.split_words()   # ['server', 'example.com']
        lexer.at_open_brace   # True
    """

    def __init__(self, line: str, line_no: int = 0, pos: int = 0):
        self.line = line
        self.line_no = line_no
        self.pos = pos

    def _current(self) -> str:
        """Get current character or empty string if at end."""
        if self.pos >= len(self.line):
            return ""
        return self.line[self.pos]

    def _advance(self) -> str:
        """Advance position and return the character that was current."""
        char = self._current()
        if char:
            self.pos += 1
        return char

    def _error(self, message: str, pos: int | None = None) -> LexerError:
        column = (self.pos if pos is None else pos) + 1
        return LexerError(message, self.line_no, column)

    def skip_whitespace(self) -> None:
        """Skip spaces and tabs at the cursor."""
        while self._current() and self._current() in WHITESPACE:
            self._advance()

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.line)

    @property
    def at_comment(self) -> bool:
        return self._current() == COMMENT

    @property
    def at_open_brace(self) -> bool:
        return self._current() == OPEN_BRACE

    @property
    def at_close_brace(self) -> bool:
        return self._current() == CLOSE_BRACE

    def _check_brace(self, brace: str, words: list[str]) -> None:
        """Validate that a block marker is the last thing on the line."""
        rest = self.pos + 1
        while rest < len(self.line) and self.line[rest] in WHITESPACE:
            rest += 1
        if rest < len(self.line):
            raise self._error(f"Expected newline after '{brace}'", rest)
        if brace == CLOSE_BRACE and words:
            raise self._error("The end of a block marker '}' must be alone on a line")

    def split_words(self) -> list[str]:
        """
        Collect words from the cursor up to a block marker or end of line.

        Returns:
            The words in source order. Quoted segments become words even
            when empty.

        Raises:
            LexerError: On unterminated quotes, a trailing backslash, or a
                misplaced block marker.
        """
        words: list[str] = []
        word: list[str] = []
        quote = NO_QUOTE
        quote_start = 0

        while not self.at_end:
            char = self._current()

            if char == "\\" and quote != "'":
                self._advance()
                if self.at_end:
                    raise self._error("Unfinished escape sequence", self.pos - 1)
                word.append(self._current())
            elif quote == NO_QUOTE:
                if char in (OPEN_BRACE, CLOSE_BRACE):
                    if word:
                        words.append("".join(word))
                    self._check_brace(char, words)
                    return words
                if char in WHITESPACE:
                    if word:
                        words.append("".join(word))
                        word = []
                elif char in QUOTES:
                    if word:
                        words.append("".join(word))
                        word = []
                    quote = char
                    quote_start = self.pos
                else:
                    word.append(char)
            elif char == quote:
                words.append("".join(word))
                word = []
                quote = NO_QUOTE
            else:
                word.append(char)

            self._advance()

        if quote != NO_QUOTE:
            raise self._error("Unclosed string literal", quote_start)

        if word:
            words.append("".join(word))

        return words


def tokenize_line(line: str, line_no: int = 0) -> tuple[list[str], str | None]:
    """
    Convenience function to tokenize one line.

    Returns:
        The words of the line and the block marker that ended it
        ('{', '}' or None). Blank and comment-only lines yield ``([], None)``.
    """
    lexer = LineLexer(line, line_no)
    lexer.skip_whitespace()
    if lexer.at_end or lexer.at_comment:
        return [], None

    words = lexer.split_words()
    if lexer.at_open_brace:
        return words, OPEN_BRACE
    if lexer.at_close_brace:
        return words, CLOSE_BRACE
    return words, None
