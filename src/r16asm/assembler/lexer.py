"""
R16 Assembly Language Lexer
===========================

This module splits R16 assembly source into a stream of words. Unlike a
classic lexer it does not classify what it produces: deciding whether a
word is a mnemonic, register, number, label or directive is left to the
assembler driver, which knows the context.

Words
-----
A word is a maximal run of word characters:

    . : + - A-Z 0-9

Everything else (spaces, tabs, commas, carriage returns, ...) separates
words. A newline is a word of its own so that line boundaries are visible
to the caller, which uses them to end an instruction's operand list.

The ASCII letters of the source are upper-cased before lexing, which
makes the whole language case-insensitive. Other characters are left
alone, so offsets and columns match the original text.

Comments
--------
A semicolon starts a comment that runs to the end of the line. No words
are produced from a comment, but the newline that ends it still is.

Example
-------
>>> from r16asm.assembler.lexer import Lexer
>>> lexer = Lexer("loop: add r1, r2, r3 ; sum\\n", "example.asm")
>>> [t.text for t in lexer.tokenize()]
['LOOP:', 'ADD', 'R1', 'R2', 'R3', '\\n']
"""

from dataclasses import dataclass
from typing import Iterator, Optional
import string

from r16asm.errors import SourceLocation


NEWLINE = "\n"
COMMENT_CHAR = ";"

# Characters that make up a word; anything else separates words
WORD_CHARS = frozenset(".:+-" + string.ascii_uppercase + string.digits)

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single word from the source code.

    Tokens are views of the upper-cased source: `offset` indexes the
    first character and `text` holds the word itself.

    Attributes:
        text: The upper-cased word ("\\n" for a newline token)
        offset: Index of the first character in the source
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    text: str
    offset: int
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.is_newline:
            return f"Token(NEWLINE, {self.line}:{self.column})"
        return f"Token({self.text!r}, {self.line}:{self.column})"

    def __len__(self) -> int:
        return len(self.text)

    @property
    def is_newline(self) -> bool:
        """True for the one-character newline token."""
        return self.text == NEWLINE

    @property
    def is_label_definition(self) -> bool:
        """True for 'NAME:' style label definitions."""
        return self.text.endswith(":")

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Splits R16 assembly source into word tokens.

    The lexer keeps an explicit cursor (`position`) and line counter over
    an immutable, upper-cased copy of the source. The original text is kept
    as well so error messages can quote lines the way the user wrote them.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    or, one token at a time:
        while (token := lexer.next_token()) is not None:
            ...
    """

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
            line_number: Starting line number (default 1)
        """
        self.original = source
        self.source = source.translate(_ASCII_UPPER)
        self.filename = filename

        self._pos = 0
        self._line = line_number
        self._line_start_pos = 0

        # Original source split into lines, built on first use
        self._lines: Optional[list[str]] = None

    @property
    def position(self) -> int:
        """Offset of the next character to be examined."""
        return self._pos

    @property
    def line(self) -> int:
        """Current line number (1-indexed)."""
        return self._line

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until the end of the source.

        Yields:
            Token objects, newline tokens included
        """
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def next_token(self) -> Optional[Token]:
        """
        Produce the next token.

        Returns:
            The next Token, or None once the source is exhausted
        """
        self._skip_blank()
        if self._at_end():
            return None

        start = self._pos
        column = start - self._line_start_pos + 1
        line = self._line

        if self.source[start] == NEWLINE:
            self._pos += 1
            self._line += 1
            self._line_start_pos = self._pos
            return Token(NEWLINE, start, line, column, self.filename)

        while not self._at_end() and self.source[self._pos] in WORD_CHARS:
            self._pos += 1

        return Token(self.source[start:self._pos], start, line, column, self.filename)

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _skip_blank(self) -> None:
        """Advance to the start of the next word, stepping over comments."""
        while not self._at_end():
            char = self.source[self._pos]
            if char == NEWLINE or char in WORD_CHARS:
                return
            if char == COMMENT_CHAR:
                end = self.source.find(NEWLINE, self._pos)
                self._pos = len(self.source) if end == -1 else end
                continue
            self._pos += 1

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def get_line(self, line_number: int) -> Optional[str]:
        """
        Get a line of the original (not upper-cased) source text.

        Args:
            line_number: 1-indexed line number

        Returns:
            The line without its terminator, or None if out of range
        """
        if self._lines is None:
            self._lines = self.original.split(NEWLINE)
        if 1 <= line_number <= len(self._lines):
            return self._lines[line_number - 1].rstrip("\r")
        return None


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Convenience function to tokenize a whole source string.

    Args:
        source: Assembly source code
        filename: Name used in token locations

    Returns:
        List of tokens, newline tokens included
    """
    return list(Lexer(source, filename).tokenize())
