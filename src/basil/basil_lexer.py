"""
Lexical analyzer for the BASIL scripting language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Supports longest-match recognition of operators
    - Recognizes:
        * Keywords (case-insensitive) and identifiers
        * Numbers (integer and decimal)
        * Strings (double-quoted, contents taken verbatim)
        * Operators and the `;` terminator

Raises:
    LexError: On unterminated strings or characters outside the language.

Example:
    >>> lexer = Lexer(CharacterStream("print 42;"))
    >>> lexer.next_token()
    Token(PRINT, print)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

from collections.abc import Iterator
from typing import Any

from basil.basil_constants import (
    DIGITS,
    MAX_OPERATOR_LEN,
    keyword_tokens,
    operator_tokens,
)
from basil.basil_errors import ErrorKind, LexError


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the BASIL language.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'EOF').
        value (str): The source text of the token; for strings, the text between the quotes.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def describe(self) -> str:
        """Short form used in parser error messages."""
        if self.type == "EOF":
            return "end of input"
        if self.type == "STRING":
            return f'STRING "{self.value}"'
        return f"{self.type} '{self.value}'"


class Lexer:
    """Lexical analyzer for the BASIL language.

    The Lexer pulls characters from a CharacterStream and produces Token objects
    on demand, either one at a time through `next_token()` or lazily through
    `tokens()`. Lexing stops at the first error.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek().isspace():
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Advances through the stream until the end of a comment line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LEN):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in operator_tokens:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(operator_tokens[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token, or an EOF token once the source is exhausted.

        Raises:
            LexError: If a malformed token is encountered.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOF", "EOF", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            keyword = keyword_tokens.get(ident.lower())
            if keyword:
                return Token(keyword, ident, line, col)
            return Token("IDENT", ident, line, col)

        # 2. Number or decimal
        if ch in DIGITS:
            num = ""
            while self.peek() in DIGITS:
                num += self.advance()
            if self.peek() != ".":
                return Token("NUMBER", num, line, col)
            if self.peek(1) not in DIGITS:
                raise LexError(
                    ErrorKind.UNEXPECTED_CHARACTER,
                    "Expected digits after decimal point",
                    self.stream.line,
                    self.stream.column,
                )
            num += self.advance()
            while self.peek() in DIGITS:
                num += self.advance()
            return Token("FLOAT", num, line, col)

        # 3. String
        if ch == '"':
            self.advance()
            val = ""
            while not self.stream.end_of_file() and self.peek() != '"':
                val += self.advance()
            if self.stream.end_of_file():
                raise LexError(
                    ErrorKind.UNTERMINATED_STRING, "Unterminated string", line, col
                )
            self.advance()
            return Token("STRING", val, line, col)

        # 4. Compound or symbolic operator
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        raise LexError(
            ErrorKind.UNEXPECTED_CHARACTER, f"Unexpected character {ch!r}", line, col
        )

    def tokens(self) -> Iterator[Token]:
        """Lazily yields tokens up to and including the EOF token."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == "EOF":
                return


def tokenize(source: str) -> Iterator[Token]:
    """Returns a fresh lazy token stream over `source`."""
    return Lexer(CharacterStream(source)).tokens()


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
