"""
Error families raised by the BASIL pipeline.

Each stage fails fast on its first problem and raises one of:

    LexError:          UnterminatedString, UnexpectedCharacter
    ParseError:        UnexpectedToken, ExpectedButFound, UnterminatedBlock
    BasilRuntimeError: UnboundIdentifier, TypeMismatch, DivisionByZero,
                       NumericOverflow, ExecutionAborted

All of them derive from `BasilError`, which carries the error `kind` and the
source position (`line`, `col`) where it was detected. The CLI and REPL are
the only places that catch them.

Example:
    raise LexError(ErrorKind.UNTERMINATED_STRING, "Unterminated string", 3, 9)
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from basil.basil_lexer import Token


class ErrorKind(str, Enum):
    """Classifies a `BasilError` within its family."""

    # Lexing
    UNTERMINATED_STRING = "UnterminatedString"
    UNEXPECTED_CHARACTER = "UnexpectedCharacter"

    # Parsing
    UNEXPECTED_TOKEN = "UnexpectedToken"
    EXPECTED_BUT_FOUND = "ExpectedButFound"
    UNTERMINATED_BLOCK = "UnterminatedBlock"

    # Evaluation
    UNBOUND_IDENTIFIER = "UnboundIdentifier"
    TYPE_MISMATCH = "TypeMismatch"
    DIVISION_BY_ZERO = "DivisionByZero"
    NUMERIC_OVERFLOW = "NumericOverflow"
    EXECUTION_ABORTED = "ExecutionAborted"


class BasilError(Exception):
    """Base class for every error the BASIL pipeline raises.

    Attributes:
        kind (ErrorKind): What went wrong.
        message (str): Human-readable description without position.
        line (int): 1-based source line, 0 when unknown.
        col (int): 1-based source column, 0 when unknown.
    """

    family = "error"

    def __init__(self, kind: ErrorKind, message: str, line: int = 0, col: int = 0):
        self.kind = kind
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.line:
            return f"{self.message} (line {self.line}, col {self.col})"
        return self.message

    def describe(self) -> str:
        """Returns the tagged one-line form used by the CLI and REPL."""
        return f"[{self.family}:{self.kind.value}] >>> {self}"


class LexError(BasilError):
    """Raised by the lexer on the first malformed character sequence."""

    family = "lex"


class ParseError(BasilError):
    """Raised by the parser on the first grammar violation.

    Attributes:
        token (Token | None): The token the parser was looking at.
    """

    family = "parse"

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        token: Token | None = None,
        line: int | None = None,
        col: int | None = None,
    ):
        self.token = token
        if line is None:
            line = token.line if token is not None else 0
        if col is None:
            col = token.col if token is not None else 0
        super().__init__(kind, message, line, col)


class BasilRuntimeError(BasilError):
    """Raised while evaluating a program."""

    family = "runtime"


__all__ = ["BasilError", "BasilRuntimeError", "ErrorKind", "LexError", "ParseError"]
