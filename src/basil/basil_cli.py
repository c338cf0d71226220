"""
BASIL CLI Entrypoint.

This module provides the command-line interface for running BASIL programs.
It supports execution, inspection of the intermediate stages, and an interactive REPL.

Features:
    - Read source from `.basil` files or inline strings.
    - Lex, parse and evaluate, printing program output to stdout.
    - Dump the token stream, the AST as JSON, or an indented AST tree instead of running.
    - Bound execution with a step limit or a wall-clock timeout.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    basil hello.basil
    basil -s "print 123;"
    basil countdown.basil --max-steps 10000 --env
    basil hello.basil --ast
    basil --repl --verbose

Functions:
    run_basil(...) -> Environment | None:
        Executes the full BASIL pipeline (lex → parse → evaluate) or one of the dump modes.

    main() -> None:
        Parses CLI arguments, dispatches, and maps BASIL errors to exit status 1.
"""

import argparse
import json
import sys

from basil.basil_ast import format_program
from basil.basil_env import Environment
from basil.basil_errors import BasilError
from basil.basil_eval import Interpreter, format_value
from basil.basil_lexer import Token, tokenize
from basil.basil_parser import Parser


class SourceFileError(ValueError):
    """Raised when a source path is not a `.basil` file."""


def run_basil(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    ast: bool = False,
    tree: bool = False,
    show_env: bool = False,
    max_steps: int | None = None,
    timeout: float | None = None,
    verbose: bool = False,
) -> Environment | None:
    """
    Run the BASIL toolchain on a file or a source string.

    Args:
        source (str): The BASIL source code or path to a `.basil` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): Print the token stream and stop.
        ast (bool): Print the AST as JSON and stop.
        tree (bool): Print the AST as an indented tree and stop.
        show_env (bool): After running, print the final variable bindings.
        max_steps (int | None): Abort the run after this many steps.
        timeout (float | None): Abort the run after this many seconds.
        verbose (bool): Trace each stage to stderr.

    Returns:
        Environment | None: The final environment, or None in a dump mode.

    Raises:
        SourceFileError: If `is_string` is False and the source does not end with '.basil'.
        BasilError: On the first lexing, parsing or runtime error.
    """
    if not is_string and not source.endswith(".basil"):
        raise SourceFileError("Only .basil files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    token_list: list[Token] = list(tokenize(source))
    if verbose:
        print(f"[lex] >>> {len(token_list)} tokens", file=sys.stderr)
    if tokens:
        for tok in token_list:
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value}")
        return None

    # 3. Parsing
    program = Parser(token_list).parse()
    if verbose:
        print(f"[parse] >>> {len(program)} top-level statements", file=sys.stderr)
    if ast:
        print(json.dumps([node.to_dict() for node in program], indent=2))
        return None
    if tree:
        print(format_program(program))
        return None

    # 4. Evaluation
    interpreter = Interpreter(max_steps=max_steps, time_limit=timeout)
    try:
        env = interpreter.run(program)
    finally:
        if verbose:
            print(f"[eval] >>> {interpreter.steps} steps", file=sys.stderr)

    # 5. Optional environment dump
    if show_env:
        for name, value in env.bindings.items():
            print(f"{name} = {format_value(value)}")
    return env


def main() -> None:
    """
    Entry point for the BASIL CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, runs the BASIL toolchain on the given file or string.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`, `--ast`, `--tree`: Dump an intermediate stage instead of running.
        - `--env`: Print final variable bindings after the run.
        - `--max-steps`, `--timeout`: Abort long-running programs.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Trace pipeline stages to stderr.

    Exits with status 1 when the program fails to lex, parse or run, and with
    status 2 when the source file is missing or is not a `.basil` file.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from basil.basil_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="basil")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    dump = parser.add_mutually_exclusive_group()
    dump.add_argument("--tokens", action="store_true", help="Print the token stream")
    dump.add_argument("--ast", action="store_true", help="Print the AST as JSON")
    dump.add_argument("--tree", action="store_true", help="Print the AST as a tree")
    parser.add_argument(
        "--env", dest="show_env", action="store_true", help="Print final variables"
    )
    parser.add_argument(
        "--max-steps", type=int, metavar="N", help="Abort after N execution steps"
    )
    parser.add_argument(
        "--timeout", type=float, metavar="SECONDS", help="Abort after SECONDS"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL instead of running"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Trace pipeline stages to stderr"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from basil.basil_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    try:
        run_basil(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            ast=args.ast,
            tree=args.tree,
            show_env=args.show_env,
            max_steps=args.max_steps,
            timeout=args.timeout,
            verbose=args.verbose,
        )
    except BasilError as e:
        sys.stdout.flush()
        print(e.describe(), file=sys.stderr)
        sys.exit(1)
    except (OSError, SourceFileError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
