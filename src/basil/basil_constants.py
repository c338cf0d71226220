"""
Token tables for the BASIL language.

The lexer resolves keywords and operators through `token_hashmap`, and the
parser groups operator token types with the sets defined below.

Exports:
    - keyword_tokens: lower-case keyword spelling → canonical token type
    - operator_tokens: operator/punctuation spelling → canonical token type
    - token_hashmap: union of both tables
    - ADDITIVE_OPS, MULTIPLICATIVE_OPS, UNARY_OPS, COMPARISON_OPS
    - BLOCK_TERMINATORS, LITERAL_TOKENS
"""

keyword_tokens: dict[str, str] = {
    "print": "PRINT",
    "let": "LET",
    "if": "IF",
    "then": "THEN",
    "elseif": "ELSEIF",
    "else": "ELSE",
    "end": "END",
    "while": "WHILE",
}

operator_tokens: dict[str, str] = {
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    "=": "ASSIGN",
    "==": "EQ",
    "!=": "NE",
    ">": "GT",
    ">=": "GE",
    "<": "LT",
    "<=": "LE",
    ";": "SEMI",
}

token_hashmap: dict[str, str] = {**keyword_tokens, **operator_tokens}

# ASCII decimal digits only
DIGITS: frozenset[str] = frozenset("0123456789")

# Longest operator spelling, bounds the lexer's longest-match scan
MAX_OPERATOR_LEN = max(len(op) for op in operator_tokens)

ADDITIVE_OPS: set[str] = {"PLUS", "SUB"}
MULTIPLICATIVE_OPS: set[str] = {"MULT", "DIV"}
UNARY_OPS: set[str] = {"PLUS", "SUB"}
COMPARISON_OPS: set[str] = {"EQ", "NE", "GT", "GE", "LT", "LE"}

# Tokens that close a statement list inside an if/while body
BLOCK_TERMINATORS: set[str] = {"END", "ELSEIF", "ELSE"}

# Token type → AST node kind for literal operands
LITERAL_TOKENS: dict[str, str] = {
    "NUMBER": "number",
    "FLOAT": "float",
    "STRING": "string",
    "IDENT": "identifier",
}

# Canonical token type → source spelling, used in error messages
TOKEN_SPELLING: dict[str, str] = {v: k for k, v in token_hashmap.items()}
