"""
Tree-walking evaluator for BASIL programs.

The `Interpreter` executes a parsed program statement by statement against an
explicit `Environment`. Each AST node kind is handled by a method named after
it (`exec_<kind>` for statements, `eval_<kind>` for expressions), looked up at
dispatch time.

Semantics:
    - Integer literals evaluate to `int`, decimal literals to `float`.
    - `+ - *` follow Python arithmetic; `/` is true division that stays an
      `int` when both operands are ints and the division is exact.
    - Strings may be bound, printed and compared with `==` / `!=`. Any other
      use of a string with an operator is a TypeMismatch.
    - Results too large for a float, and ints too long to print, raise
      NumericOverflow.
    - A condition chain `a < b < c` is the short-circuit conjunction
      `(a < b) and (b < c)`; every operand is evaluated at most once.
    - While loops have no intrinsic bound. `max_steps` and `time_limit` are
      optional external limits that abort with ExecutionAborted.

Example:
    >>> interp = run_source("let x = 2 + 3 * 4; print x;")
    14
    >>> interp.lines
    ['14']
"""

import operator
import sys
import time
from collections.abc import Callable
from typing import Any, TextIO

from basil.basil_ast import ASTNode
from basil.basil_env import Environment, Value
from basil.basil_errors import BasilRuntimeError, ErrorKind
from basil.basil_lexer import tokenize
from basil.basil_parser import Parser

ARITH_SYMBOLS: dict[str, str] = {"PLUS": "+", "SUB": "-", "MULT": "*", "DIV": "/"}

COMPARISONS: dict[str, tuple[str, Callable[[Any, Any], bool]]] = {
    "EQ": ("==", operator.eq),
    "NE": ("!=", operator.ne),
    "GT": (">", operator.gt),
    "GE": (">=", operator.ge),
    "LT": ("<", operator.lt),
    "LE": ("<=", operator.le),
}


def format_value(value: Value, line: int = 0, col: int = 0) -> str:
    """Returns the printed form of a value.

    Integral floats drop their fractional part, so `4 / 2.0` prints `2`.

    Raises:
        BasilRuntimeError: NumericOverflow if an int has more digits than
            Python will convert to a string.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return repr(value)
    except ValueError as e:
        raise BasilRuntimeError(
            ErrorKind.NUMERIC_OVERFLOW, "Integer too large to print", line, col
        ) from e


def _type_name(value: Value) -> str:
    return "string" if isinstance(value, str) else "number"


class Interpreter:
    """Executes BASIL programs.

    Attributes:
        stdout (TextIO | None): Stream printed lines are written to; None means `sys.stdout`.
        max_steps (int | None): Abort after this many steps (statements and loop checks).
        time_limit (float | None): Abort after this many seconds of wall-clock time.
        lines (list[str]): Every line printed so far, in order.
        steps (int): Steps taken by the current run.
        env (Environment | None): Environment of the most recent run.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        max_steps: int | None = None,
        time_limit: float | None = None,
    ) -> None:
        self.stdout = stdout
        self.max_steps = max_steps
        self.time_limit = time_limit
        self.lines: list[str] = []
        self.steps = 0
        self.env: Environment | None = None
        self._started = 0.0

    def run(self, program: list[ASTNode], env: Environment | None = None) -> Environment:
        """Execute `program` and return the environment it leaves behind.

        A fresh environment is created unless one is supplied.
        """
        self.env = env if env is not None else Environment()
        self.steps = 0
        self._started = time.monotonic()
        self.exec_block(program, self.env)
        return self.env

    def exec_block(self, statements: list[ASTNode], env: Environment) -> None:
        for stmt in statements:
            self.execute(stmt, env)

    def execute(self, node: ASTNode, env: Environment) -> None:
        self._tick(node)
        method = getattr(self, f"exec_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No executor for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        method(node, env)

    def evaluate(self, node: ASTNode, env: Environment) -> Value:
        method = getattr(self, f"eval_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No evaluator for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        result: Value = method(node, env)
        return result

    def _tick(self, node: ASTNode) -> None:
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            raise BasilRuntimeError(
                ErrorKind.EXECUTION_ABORTED,
                f"Step limit of {self.max_steps} exceeded",
                node.line,
                node.col,
            )
        if (
            self.time_limit is not None
            and time.monotonic() - self._started > self.time_limit
        ):
            raise BasilRuntimeError(
                ErrorKind.EXECUTION_ABORTED,
                f"Time limit of {self.time_limit}s exceeded",
                node.line,
                node.col,
            )

    # Statements

    def exec_print(self, node: ASTNode, env: Environment) -> None:
        text = format_value(self.evaluate(node.children[0], env), node.line, node.col)
        self.lines.append(text)
        print(text, file=self.stdout if self.stdout is not None else sys.stdout)

    def exec_let(self, node: ASTNode, env: Environment) -> None:
        env.define(str(node.value), self.evaluate(node.children[0], env))

    def exec_assign(self, node: ASTNode, env: Environment) -> None:
        value = self.evaluate(node.children[0], env)
        env.assign(str(node.value), value, node.line, node.col)

    def exec_if(self, node: ASTNode, env: Environment) -> None:
        cond = node.value
        assert isinstance(cond, ASTNode)  # for mypy
        if self.eval_condition(cond, env):
            self.exec_block(node.children, env)
            return
        if not node.else_children:
            return
        branch = node.else_children[0]
        if branch.kind == "else":
            self.exec_block(branch.children, env)
        else:
            self.exec_if(branch, env)

    exec_elseif = exec_if

    def exec_while(self, node: ASTNode, env: Environment) -> None:
        cond = node.value
        assert isinstance(cond, ASTNode)  # for mypy
        while self.eval_condition(cond, env):
            self.exec_block(node.children, env)
            self._tick(node)

    # Expressions

    def eval_number(self, node: ASTNode, env: Environment) -> Value:
        try:
            return int(str(node.value))
        except ValueError as e:
            raise BasilRuntimeError(
                ErrorKind.NUMERIC_OVERFLOW,
                "Integer literal has too many digits",
                node.line,
                node.col,
            ) from e

    def eval_float(self, node: ASTNode, env: Environment) -> Value:
        return float(str(node.value))

    def eval_string(self, node: ASTNode, env: Environment) -> Value:
        return str(node.value)

    def eval_identifier(self, node: ASTNode, env: Environment) -> Value:
        return env.lookup(str(node.value), node.line, node.col)

    def eval_unary(self, node: ASTNode, env: Environment) -> Value:
        operand = self.evaluate(node.children[0], env)
        if isinstance(operand, str):
            raise BasilRuntimeError(
                ErrorKind.TYPE_MISMATCH,
                f"Cannot apply unary '{ARITH_SYMBOLS[str(node.value)]}' to a string",
                node.line,
                node.col,
            )
        return -operand if node.value == "SUB" else operand

    def eval_arith(self, node: ASTNode, env: Environment) -> Value:
        left = self.evaluate(node.children[0], env)
        right = self.evaluate(node.children[1], env)
        op = str(node.value)
        if isinstance(left, str) or isinstance(right, str):
            raise BasilRuntimeError(
                ErrorKind.TYPE_MISMATCH,
                f"Cannot apply '{ARITH_SYMBOLS[op]}' to "
                f"{_type_name(left)} and {_type_name(right)}",
                node.line,
                node.col,
            )
        if op == "DIV" and right == 0:
            raise BasilRuntimeError(
                ErrorKind.DIVISION_BY_ZERO, "Division by zero", node.line, node.col
            )
        try:
            return self._arith(op, left, right)
        except OverflowError as e:
            raise BasilRuntimeError(
                ErrorKind.NUMERIC_OVERFLOW,
                f"Result of '{ARITH_SYMBOLS[op]}' is too large for a float",
                node.line,
                node.col,
            ) from e

    @staticmethod
    def _arith(op: str, left: int | float, right: int | float) -> Value:
        if op == "PLUS":
            return left + right
        if op == "SUB":
            return left - right
        if op == "MULT":
            return left * right
        if isinstance(left, int) and isinstance(right, int) and left % right == 0:
            return left // right
        return left / right

    # Conditions

    def eval_condition(self, node: ASTNode, env: Environment) -> bool:
        """Evaluate a comparison chain left to right, stopping at the first false link."""
        left = self.evaluate(node.children[0], env)
        for link in node.children[1:]:
            right = self.evaluate(link.children[0], env)
            if not self.compare(link, left, right):
                return False
            left = right
        return True

    def compare(self, node: ASTNode, left: Value, right: Value) -> bool:
        symbol, func = COMPARISONS[str(node.value)]
        if isinstance(left, str) != isinstance(right, str):
            raise BasilRuntimeError(
                ErrorKind.TYPE_MISMATCH,
                f"Cannot compare {_type_name(left)} with {_type_name(right)} using '{symbol}'",
                node.line,
                node.col,
            )
        if isinstance(left, str) and node.value not in ("EQ", "NE"):
            raise BasilRuntimeError(
                ErrorKind.TYPE_MISMATCH,
                f"Strings only support '==' and '!=', not '{symbol}'",
                node.line,
                node.col,
            )
        return bool(func(left, right))


def run_source(
    source: str,
    stdout: TextIO | None = None,
    max_steps: int | None = None,
    time_limit: float | None = None,
    env: Environment | None = None,
) -> Interpreter:
    """Lex, parse and execute `source`, returning the interpreter that ran it.

    Raises:
        LexError, ParseError, BasilRuntimeError: On the first failure of any stage.
    """
    program = Parser(tokenize(source)).parse()
    interpreter = Interpreter(stdout=stdout, max_steps=max_steps, time_limit=time_limit)
    interpreter.run(program, env)
    return interpreter


__all__ = ["Interpreter", "format_value", "run_source"]
