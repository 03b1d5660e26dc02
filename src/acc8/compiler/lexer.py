"""
acc8 Lexer (Tokenizer)
======================

This module converts source text into a stream of tokens for the parser.

Token Categories
----------------
- Keywords: VAR, IF, ELSE (case-sensitive)
- Identifiers: a letter followed by letters and digits
- Integer literals: non-negative decimal numbers
- Operators: +  -  =  ==  >  <
- Punctuation: ;  {  }  (  )

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */

Whitespace and comments never produce tokens. The stream always ends
with exactly one EOF token.

Example Usage
-------------
>>> from acc8.compiler.lexer import Lexer
>>> for token in Lexer("VAR a = 5;").tokenize():
...     print(token)
Token(KEYWORD, 'VAR', 1:1)
Token(IDENTIFIER, 'a', 1:5)
Token(OPERATOR, '=', 1:7)
Token(INTEGER_LITERAL, '5', 1:9)
Token(PUNCTUATION, ';', 1:10)
Token(EOF, '', 1:11)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import copy
import string

from acc8.errors import SourceLocation
from acc8.compiler.errors import LexError


# =============================================================================
# Token Kinds
# =============================================================================

class TokenKind(Enum):
    """Lexical class of a token."""
    KEYWORD = auto()
    IDENTIFIER = auto()
    INTEGER_LITERAL = auto()
    OPERATOR = auto()
    PUNCTUATION = auto()
    EOF = auto()


KEYWORDS = frozenset({"VAR", "IF", "ELSE"})

# Two-character operators are listed first so '==' wins over '='
OPERATORS = ("==", "+", "-", "=", ">", "<")

PUNCTUATION = frozenset(";{}()")


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source text.

    Attributes:
        kind: The lexical class
        lexeme: The exact source text of the token ("" for EOF)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    kind: TokenKind
    lexeme: str
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"

    @property
    def position(self) -> tuple[int, int]:
        """The (line, column) pair of the first character."""
        return (self.line, self.column)

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def value(self) -> int:
        """Numeric value of an integer literal."""
        return int(self.lexeme)

    def is_keyword(self, word: str) -> bool:
        return self.kind == TokenKind.KEYWORD and self.lexeme == word

    def is_operator(self, *symbols: str) -> bool:
        return self.kind == TokenKind.OPERATOR and self.lexeme in symbols

    def is_punctuation(self, symbol: str) -> bool:
        return self.kind == TokenKind.PUNCTUATION and self.lexeme == symbol


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes acc8 source code.

    Each call to tokenize() scans with its own cursor, starting from the
    beginning of the source, so streams from the same lexer never affect
    each other and always yield the same token sequence.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        self._rewind()

    def _rewind(self) -> None:
        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Returns:
            Lazy iterator of Token objects, ending with a single EOF token

        Raises:
            LexError: If a character matches no token class (raised when
                the stream reaches it)
        """
        scanner = copy.copy(self)
        scanner._rewind()
        return scanner._scan_tokens()

    def _scan_tokens(self) -> Iterator[Token]:
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break
            yield self._scan_token()

        yield self._make_token(TokenKind.EOF, "", self._line, self._column)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at the character at current position + offset ('' past end)."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume the current character, tracking line and column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _make_token(self, kind: TokenKind, lexeme: str, line: int, column: int) -> Token:
        return Token(kind, lexeme, line, column, self.filename)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in " \t\r\n":
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_block_comment()
                continue

            break

    def _skip_block_comment(self) -> None:
        """
        Skip a /* ... */ comment.

        Raises:
            LexError: If the comment is not terminated
        """
        location = SourceLocation(self.filename, self._line, self._column)
        self._advance()
        self._advance()

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise LexError("/", location, message="unterminated comment")

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        line = self._line
        column = self._column
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_word(line, column)

        if char in string.digits:
            return self._scan_integer(line, column)

        for symbol in OPERATORS:
            if self.source.startswith(symbol, self._pos):
                for _ in symbol:
                    self._advance()
                return self._make_token(TokenKind.OPERATOR, symbol, line, column)

        if char in PUNCTUATION:
            self._advance()
            return self._make_token(TokenKind.PUNCTUATION, char, line, column)

        raise LexError(char, SourceLocation(self.filename, line, column))

    def _scan_word(self, line: int, column: int) -> Token:
        """Scan an identifier or keyword."""
        start = self._pos
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()

        word = self.source[start:self._pos]
        kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
        return self._make_token(kind, word, line, column)

    def _scan_integer(self, line: int, column: int) -> Token:
        start = self._pos
        while self._peek() and self._peek() in string.digits:
            self._advance()
        return self._make_token(
            TokenKind.INTEGER_LITERAL, self.source[start:self._pos], line, column
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> Iterator[Token]:
    """Lazily tokenize source text."""
    return Lexer(source, filename).tokenize()
