"""
Variable environment for one BASIL evaluation run.

`let` defines (or redefines) a name, plain assignment may only rebind a name
that already exists, and reads of unknown names fail. The environment is
passed explicitly to the evaluator so separate runs never share state unless
the caller hands the same instance over (as the REPL does).
"""

from collections.abc import Iterator

from basil.basil_errors import BasilRuntimeError, ErrorKind

Value = int | float | str


class Environment:
    """Mapping from identifier to its current value.

    Attributes:
        bindings (dict[str, Value]): The live name → value table.
    """

    def __init__(self, bindings: dict[str, Value] | None = None) -> None:
        self.bindings: dict[str, Value] = dict(bindings or {})

    def define(self, name: str, value: Value) -> None:
        self.bindings[name] = value

    def assign(self, name: str, value: Value, line: int = 0, col: int = 0) -> None:
        if name not in self.bindings:
            raise BasilRuntimeError(
                ErrorKind.UNBOUND_IDENTIFIER,
                f"Cannot assign to '{name}' before it is declared with 'let'",
                line,
                col,
            )
        self.bindings[name] = value

    def lookup(self, name: str, line: int = 0, col: int = 0) -> Value:
        try:
            return self.bindings[name]
        except KeyError:
            raise BasilRuntimeError(
                ErrorKind.UNBOUND_IDENTIFIER,
                f"Variable '{name}' used before it is declared",
                line,
                col,
            ) from None

    def clear(self) -> None:
        self.bindings.clear()

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def __repr__(self) -> str:
        return f"Environment({self.bindings!r})"


__all__ = ["Environment", "Value"]
