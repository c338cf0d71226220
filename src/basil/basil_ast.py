"""
Defines the abstract syntax tree (AST) node structure for the BASIL scripting language.

Classes:
    ASTNode:
        Represents a node in the syntax tree, produced by the parser and walked by the evaluator.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python dictionaries,
        suitable for JSON output or debugging.

Node kinds:
    Expressions:
        number, float, string, identifier   value is the literal text or name
        arith                               value is PLUS/SUB/MULT/DIV, children [left, right]
        unary                               value is PLUS/SUB, children [operand]
    Conditions:
        condition                           children [first, compare, compare, ...]
        compare                             value is EQ/NE/GT/GE/LT/LE, children [right operand]
    Statements:
        print                               children [expr]
        let, assign                         value is the name, children [expr]
        if, elseif                          value is the condition, children the body,
                                            else_children [] or [elseif] or [else]
        else                                children the body
        while                               value is the condition, children the body

Each ASTNode tracks:
    kind (str): The syntactic construct type.
    value (Union[str, ASTNode], optional): A raw string or another ASTNode.
    children (list[ASTNode]): Primary child nodes.
    else_children (list[ASTNode]): The optional else-branch of an if/elseif.
    line (int): Source line number for error messages.
    col (int): Source column number for error messages.
"""

from typing import Any, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "print", "arith", "if").
        value (Any): The node's value, which may be a string or nested ASTDict.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        children (List[ASTDict]): Primary child nodes in the AST hierarchy.
        else_children (List[ASTDict]): The else-branch of an if/elseif node.
    """

    kind: str
    value: Any
    line: int
    col: int
    children: list["ASTDict"]
    else_children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the BASIL language.

    Nodes own their children exclusively; the tree is built once by the parser
    and only read afterwards.

    Args:
        kind (str): The type of node (e.g., "print", "let", "arith", "if").
        value (Union[str, ASTNode], optional): A literal value or another AST node (e.g. a condition).
        children (list[ASTNode], optional): Primary child nodes in the syntax tree.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        else_children (list[ASTNode], optional): Else-branch for if/elseif nodes.

    Methods:
        __repr__(): Returns a structured string representation for debugging.
        __eq__(other): Checks structural equality with another ASTNode.
        to_dict(): Converts the node (and all descendants) into a nested dictionary format.
        format_tree(): Renders the node as an indented multi-line tree.
    """

    def __init__(
        self,
        kind: str,
        value: Union[str, "ASTNode"] | None = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        else_children: list["ASTNode"] | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.else_children: list["ASTNode"] = else_children or []

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.else_children:
            preview = ", ".join(repr(c) for c in self.else_children)
            parts.append(f"else_children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.children == other.children
            and self.else_children == other.else_children
        )

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "children": [c.to_dict() for c in self.children],
            "else_children": [c.to_dict() for c in self.else_children],
        }

    def format_tree(self, level: int = 0) -> str:
        """Renders this node and its descendants, two spaces per nesting level.

        Example:
            >>> print(ASTNode("print", children=[ASTNode("number", "1")]).format_tree())
            print
              number 1
        """
        pad = "  " * level
        label = self.kind
        if isinstance(self.value, str):
            label = f"{label} {self.value}"
        lines = [pad + label]
        if isinstance(self.value, ASTNode):
            lines.append(self.value.format_tree(level + 1))
        lines.extend(c.format_tree(level + 1) for c in self.children)
        lines.extend(c.format_tree(level) for c in self.else_children)
        return "\n".join(lines)


def format_program(program: list[ASTNode]) -> str:
    """Renders a whole program as an indented tree under a `program` root."""
    return "\n".join(["program"] + [node.format_tree(1) for node in program])


__all__ = ["ASTDict", "ASTNode", "format_program"]
