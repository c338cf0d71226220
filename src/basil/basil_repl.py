"""
Interactive read-eval-print loop for BASIL.

Variables persist across inputs for the whole session. Input continues on a
`... ` prompt while an `if` or `while` block is still open. A bare expression
such as `x * 2` is evaluated and its value printed.

Session commands:
    exit, quit      leave the REPL
    vars            list current variable bindings
    reset           forget all variables
    verbose-mode    toggle tracing of tokens and AST
"""

import io
import traceback

from basil.basil_env import Environment
from basil.basil_errors import BasilError, LexError
from basil.basil_eval import Interpreter, format_value
from basil.basil_lexer import Token, tokenize
from basil.basil_parser import Parser

BLOCK_OPENERS = {"IF", "WHILE"}
EXPRESSION_STARTS = {"NUMBER", "FLOAT", "STRING", "IDENT", "PLUS", "SUB"}


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def block_depth(src: str) -> int:
    """Number of `if`/`while` blocks opened in `src` and not yet closed by `end`.

    Malformed input counts as closed so the error surfaces on evaluation.
    """
    depth = 0
    try:
        for tok in tokenize(src):
            if tok.type in BLOCK_OPENERS:
                depth += 1
            elif tok.type == "END":
                depth -= 1
    except LexError:
        return 0
    return depth


def is_bare_expression(tokens: list[Token]) -> bool:
    """True for input like `x + 1`: an expression with no statement syntax around it."""
    if not tokens or tokens[0].type not in EXPRESSION_STARTS:
        return False
    if len(tokens) > 1 and tokens[0].type == "IDENT" and tokens[1].type == "ASSIGN":
        return False
    return all(tok.type != "SEMI" for tok in tokens)


def show_vars(env: Environment) -> None:
    if not env.bindings:
        print("[vars] >>> No variables defined.")
        return
    for name, value in env.bindings.items():
        try:
            shown = f'"{value}"' if isinstance(value, str) else format_value(value)
        except BasilError as e:
            shown = f"<{e.message}>"
        print(f"{name:>12} = {shown}")


def eval_input(src: str, env: Environment, verbose: bool = False) -> None:
    """Lex, parse and run one REPL input against the session environment."""
    tokens = list(tokenize(src))
    if verbose:
        print(f"[tokens] >>> {tokens}")
    interpreter = Interpreter()
    if is_bare_expression(tokens[:-1]):
        expr = Parser(tokens).parse_expr_entrypoint()
        if verbose:
            print(f"[ast] >>> {expr!r}")
        print(format_value(interpreter.evaluate(expr, env), expr.line, expr.col))
        return
    program = Parser(tokens).parse()
    if verbose:
        for node in program:
            print(f"[ast] >>> {node!r}")
    interpreter.run(program, env)


def start_repl(verbose: bool = False) -> None:
    print("Basil REPL. Type 'exit' or 'quit' to leave.")
    env = Environment()

    while True:
        try:
            src_lines: list[str] = []
            while True:
                prompt = ">>> " if not src_lines else "... "
                line = input(prompt)
                if line.strip() in ("exit", "quit") and not src_lines:
                    print("Exiting Basil REPL.")
                    return
                src_lines.append(line)
                if block_depth("\n".join(src_lines)) <= 0:
                    break
            src = "\n".join(src_lines).strip()
            if not src or src.startswith("#"):
                continue
            if src == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if src == "vars":
                show_vars(env)
                continue
            if src == "reset":
                env.clear()
                print("[ok] >>> Environment cleared.")
                continue

            try:
                eval_input(src, env, verbose)
            except BasilError as e:
                print("[error] >>>")
                print(e.describe())
            except Exception:
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Basil REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
