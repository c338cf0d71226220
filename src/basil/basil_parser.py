"""
BASIL Language Parser

Parses BASIL source tokens into abstract syntax trees (ASTs).

This module transforms the lexer's `Token` stream into a list of top-level
`ASTNode` statements. It is a recursive-descent parser with one method per
grammar rule; operator precedence is encoded in the call structure:

    program    := statement* EOF
    statement  := print | let | assignment | if | while
    block      := statement*   (stops at `end`, `elseif`, `else`)
    condition  := expression (cmp expression)+
    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ["+" | "-"] primary
    primary    := NUMBER | FLOAT | STRING | IDENT

Entry Points
------------
- `parse()`: Parse a full program into a list of top-level AST nodes.
- `parse_statement()`: Parse a single statement.
- `parse_condition()`: Parse a comparison chain.
- `parse_expr_entrypoint()`: Parse one bare expression spanning the whole input (REPL mode).

Raises
------
ParseError
    On the first grammar violation. There is no recovery: the whole parse fails.
"""

from __future__ import annotations

from collections.abc import Iterable

from basil.basil_ast import ASTNode
from basil.basil_constants import (
    ADDITIVE_OPS,
    BLOCK_TERMINATORS,
    COMPARISON_OPS,
    LITERAL_TOKENS,
    MULTIPLICATIVE_OPS,
    TOKEN_SPELLING,
    UNARY_OPS,
)
from basil.basil_errors import ErrorKind, ParseError
from basil.basil_lexer import Token


def _expected_name(token_type: str) -> str:
    if token_type == "IDENT":
        return "identifier"
    if token_type == "EOF":
        return "end of input"
    return f"'{TOKEN_SPELLING.get(token_type, token_type)}'"


class Parser:
    """
    BASIL Parser Class

    Consumes a token sequence and produces the program's syntax tree.

    Attributes
    ----------
    tokens : list[Token]
        The token stream, always terminated by an EOF token.
    position : int
        Current index into the token stream.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type != "EOF":
            last = self.tokens[-1] if self.tokens else None
            line = last.line if last else 1
            col = last.col + len(last.value) if last else 1
            self.tokens.append(Token("EOF", "EOF", line, col))
        self.position: int = 0

    def current(self) -> Token:
        return self.tokens[min(self.position, len(self.tokens) - 1)]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        """Consumes the current token and returns it. EOF is never consumed past."""
        tok = self.current()
        if self.position < len(self.tokens) - 1:
            self.position += 1
        return tok

    def match(self, *types: str) -> Token:
        """Consumes the current token if its type is one of `types`."""
        tok = self.current()
        if tok.type in types:
            return self.advance()
        expected = " or ".join(_expected_name(t) for t in types)
        raise ParseError(
            ErrorKind.EXPECTED_BUT_FOUND,
            f"Expected {expected}, found {tok.describe()}",
            tok,
        )

    def parse(self) -> list[ASTNode]:
        """Parse a full BASIL program and return its top-level statements."""
        program: list[ASTNode] = []
        while self.current().type != "EOF":
            program.append(self.parse_statement())
        return program

    def parse_statement(self) -> ASTNode:
        """Dispatch on the leading token of a statement."""
        tok = self.current()
        if tok.type == "PRINT":
            return self.parse_print()
        if tok.type == "LET":
            return self.parse_let()
        if tok.type == "IDENT":
            return self.parse_assignment()
        if tok.type == "IF":
            return self.parse_if()
        if tok.type == "WHILE":
            return self.parse_while()
        raise ParseError(
            ErrorKind.UNEXPECTED_TOKEN,
            f"Unexpected {tok.describe()} at start of statement",
            tok,
        )

    def parse_print(self) -> ASTNode:
        print_tok = self.match("PRINT")
        expr = self.parse_expression()
        self.match("SEMI")
        return ASTNode("print", None, [expr], line=print_tok.line, col=print_tok.col)

    def parse_let(self) -> ASTNode:
        let_tok = self.match("LET")
        name_tok = self.match("IDENT")
        self.match("ASSIGN")
        expr = self.parse_expression()
        self.match("SEMI")
        return ASTNode(
            "let", name_tok.value, [expr], line=let_tok.line, col=let_tok.col
        )

    def parse_assignment(self) -> ASTNode:
        """Parse `ident = expr ;`, the `let`-less rebinding form."""
        name_tok = self.match("IDENT")
        self.match("ASSIGN")
        expr = self.parse_expression()
        self.match("SEMI")
        return ASTNode(
            "assign", name_tok.value, [expr], line=name_tok.line, col=name_tok.col
        )

    def parse_block(self, opener: Token) -> list[ASTNode]:
        """Parse statements until `end`, `elseif` or `else`.

        `opener` is the `if`/`while` token the block belongs to; it is named
        in the error when the input ends before the block is closed.
        """
        stmts: list[ASTNode] = []
        while self.current().type not in BLOCK_TERMINATORS:
            if self.current().type == "EOF":
                raise ParseError(
                    ErrorKind.UNTERMINATED_BLOCK,
                    f"Missing 'end' for '{opener.value}' opened at line {opener.line}, col {opener.col}",
                    self.current(),
                )
            stmts.append(self.parse_statement())
        return stmts

    def parse_if(self) -> ASTNode:
        """Parse an if-chain with any number of `elseif` clauses and an optional `else`."""
        if_tok = self.match("IF")
        cond = self.parse_condition()
        self.match("THEN")
        body = self.parse_block(if_tok)
        node = ASTNode(
            "if",
            cond,
            body,
            line=if_tok.line,
            col=if_tok.col,
            else_children=self.parse_else_branch(if_tok),
        )
        self.match("END")
        return node

    def parse_else_branch(self, opener: Token) -> list[ASTNode]:
        """Parse what follows an if/elseif body: an `elseif`, an `else`, or nothing."""
        tok = self.current()
        if tok.type == "ELSEIF":
            self.advance()
            cond = self.parse_condition()
            self.match("THEN")
            body = self.parse_block(opener)
            return [
                ASTNode(
                    "elseif",
                    cond,
                    body,
                    line=tok.line,
                    col=tok.col,
                    else_children=self.parse_else_branch(opener),
                )
            ]
        if tok.type == "ELSE":
            self.advance()
            body = self.parse_block(opener)
            if self.current().type != "END":
                raise ParseError(
                    ErrorKind.UNEXPECTED_TOKEN,
                    f"Unexpected {self.current().describe()} after 'else' block",
                    self.current(),
                )
            return [ASTNode("else", None, body, line=tok.line, col=tok.col)]
        return []

    def parse_while(self) -> ASTNode:
        while_tok = self.match("WHILE")
        cond = self.parse_condition()
        self.match("THEN")
        body = self.parse_block(while_tok)
        if self.current().type != "END":
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN,
                f"Unexpected {self.current().describe()} inside 'while' block",
                self.current(),
            )
        self.match("END")
        return ASTNode("while", cond, body, line=while_tok.line, col=while_tok.col)

    def parse_condition(self) -> ASTNode:
        """Parse `expression (cmp expression)+`, consuming comparisons greedily."""
        first = self.parse_expression()
        children = [first]
        while self.current().type in COMPARISON_OPS:
            op_tok = self.advance()
            right = self.parse_expression()
            children.append(
                ASTNode("compare", op_tok.type, [right], line=op_tok.line, col=op_tok.col)
            )
        if len(children) == 1:
            tok = self.current()
            raise ParseError(
                ErrorKind.EXPECTED_BUT_FOUND,
                f"Expected comparison operator, found {tok.describe()}",
                tok,
            )
        return ASTNode("condition", None, children, line=first.line, col=first.col)

    def parse_expression(self) -> ASTNode:
        left = self.parse_term()
        while self.current().type in ADDITIVE_OPS:
            op_tok = self.advance()
            right = self.parse_term()
            left = ASTNode(
                "arith", op_tok.type, [left, right], line=op_tok.line, col=op_tok.col
            )
        return left

    def parse_term(self) -> ASTNode:
        left = self.parse_unary()
        while self.current().type in MULTIPLICATIVE_OPS:
            op_tok = self.advance()
            right = self.parse_unary()
            left = ASTNode(
                "arith", op_tok.type, [left, right], line=op_tok.line, col=op_tok.col
            )
        return left

    def parse_unary(self) -> ASTNode:
        if self.current().type in UNARY_OPS:
            op_tok = self.advance()
            operand = self.parse_primary()
            return ASTNode(
                "unary", op_tok.type, [operand], line=op_tok.line, col=op_tok.col
            )
        return self.parse_primary()

    def parse_primary(self) -> ASTNode:
        tok = self.current()
        kind = LITERAL_TOKENS.get(tok.type)
        if kind is None:
            raise ParseError(
                ErrorKind.EXPECTED_BUT_FOUND,
                f"Expected number, string or identifier, found {tok.describe()}",
                tok,
            )
        self.advance()
        return ASTNode(kind, tok.value, line=tok.line, col=tok.col)

    def parse_expr_entrypoint(self) -> ASTNode:
        """Parse a single bare expression that must span the whole input."""
        expr = self.parse_expression()
        self.match("EOF")
        return expr


__all__ = ["Parser"]
