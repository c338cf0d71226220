from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.strategies import composite

from basil.basil_ast import ASTNode
from basil.basil_errors import ErrorKind, ParseError
from basil.basil_lexer import Token, tokenize
from basil.basil_parser import Parser


def parse(source: str) -> list[ASTNode]:
    return Parser(tokenize(source)).parse()


def prune(node: Any) -> Any:
    """Remove line/col and empty lists so trees compare by shape only."""
    if isinstance(node, list):
        return [prune(n) for n in node]
    if isinstance(node, dict):
        return {
            k: prune(v)
            for k, v in node.items()
            if k not in ("line", "col") and v != []
        }
    return node


def shape(source: str) -> Any:
    return prune([n.to_dict() for n in parse(source)])


def num(value: str) -> dict[str, Any]:
    return {"kind": "number", "value": value}


def ident(name: str) -> dict[str, Any]:
    return {"kind": "identifier", "value": name}


def test_print_statement() -> None:
    result = parse("print 42;")
    assert result == [
        ASTNode("print", None, [ASTNode("number", "42", line=1, col=7)], line=1, col=1)
    ]


def test_let_and_assignment() -> None:
    assert shape('let x = "hi"; x = y;') == [
        {"kind": "let", "value": "x", "children": [{"kind": "string", "value": "hi"}]},
        {"kind": "assign", "value": "x", "children": [ident("y")]},
    ]


def test_precedence_mult_before_add() -> None:
    assert shape("print 2 + 3 * 4;") == [
        {
            "kind": "print",
            "value": None,
            "children": [
                {
                    "kind": "arith",
                    "value": "PLUS",
                    "children": [
                        num("2"),
                        {"kind": "arith", "value": "MULT", "children": [num("3"), num("4")]},
                    ],
                }
            ],
        }
    ]


def test_left_associativity() -> None:
    expr = parse("print 10 - 4 - 3;")[0].children[0]
    assert expr.value == "SUB"
    assert expr.children[0].kind == "arith"
    assert expr.children[0].children[0].value == "10"
    assert expr.children[1].value == "3"

    expr = parse("print 8 / 4 * 2;")[0].children[0]
    assert expr.value == "MULT"
    assert expr.children[0].value == "DIV"


def test_unary_sign_binds_to_primary() -> None:
    expr = parse("print -x * +2;")[0].children[0]
    assert prune(expr.to_dict()) == {
        "kind": "arith",
        "value": "MULT",
        "children": [
            {"kind": "unary", "value": "SUB", "children": [ident("x")]},
            {"kind": "unary", "value": "PLUS", "children": [num("2")]},
        ],
    }


def test_float_literal_node() -> None:
    expr = parse("print 1.25;")[0].children[0]
    assert (expr.kind, expr.value) == ("float", "1.25")


def test_single_condition() -> None:
    cond = Parser(tokenize("x >= 1 + 1")).parse_condition()
    assert prune(cond.to_dict()) == {
        "kind": "condition",
        "value": None,
        "children": [
            ident("x"),
            {
                "kind": "compare",
                "value": "GE",
                "children": [
                    {"kind": "arith", "value": "PLUS", "children": [num("1"), num("1")]}
                ],
            },
        ],
    }


def test_chained_condition_owns_each_operand_once() -> None:
    cond = Parser(tokenize("1 < 2 < 3")).parse_condition()
    assert [c.kind for c in cond.children] == ["number", "compare", "compare"]
    assert [c.value for c in cond.children[1:]] == ["LT", "LT"]
    assert [c.children[0].value for c in cond.children[1:]] == ["2", "3"]


def test_condition_requires_comparison() -> None:
    with pytest.raises(ParseError) as e:
        parse("if x then print x; end")
    assert e.value.kind is ErrorKind.EXPECTED_BUT_FOUND
    assert e.value.token is not None and e.value.token.type == "THEN"


def test_if_without_else() -> None:
    node = parse("if x > 1 then print x; end")[0]
    assert node.kind == "if"
    assert isinstance(node.value, ASTNode) and node.value.kind == "condition"
    assert [c.kind for c in node.children] == ["print"]
    assert node.else_children == []


def test_if_elseif_else_chain_nests() -> None:
    src = """
    if a == 1 then print 1;
    elseif a == 2 then print 2;
    elseif a == 3 then print 3;
    else print 4; print 5;
    end
    """
    node = parse(src)[0]
    first = node.else_children[0]
    assert first.kind == "elseif"
    second = first.else_children[0]
    assert second.kind == "elseif"
    final = second.else_children[0]
    assert final.kind == "else"
    assert len(final.children) == 2
    assert final.else_children == []


def test_empty_bodies_are_allowed() -> None:
    node = parse("if 1 < 2 then else end")[0]
    assert node.children == []
    assert node.else_children[0].kind == "else"
    assert parse("while 1 > 2 then end")[0].children == []


def test_nested_blocks() -> None:
    src = "while i < 3 then if i == 1 then print i; end i = i + 1; end"
    loop = parse(src)[0]
    assert loop.kind == "while"
    assert [c.kind for c in loop.children] == ["if", "assign"]


def test_unterminated_if() -> None:
    with pytest.raises(ParseError) as e:
        parse("if 1 > 0 then print 1;")
    assert e.value.kind is ErrorKind.UNTERMINATED_BLOCK
    assert "'if' opened at line 1, col 1" in e.value.message


def test_unterminated_else_and_while() -> None:
    with pytest.raises(ParseError) as e:
        parse("if 1 > 0 then print 1; else print 2;")
    assert e.value.kind is ErrorKind.UNTERMINATED_BLOCK

    with pytest.raises(ParseError) as e:
        parse("let x = 1;\nwhile x > 0 then\n x = x - 1;")
    assert e.value.kind is ErrorKind.UNTERMINATED_BLOCK
    assert "'while' opened at line 2" in e.value.message


def test_elseif_after_else_is_rejected() -> None:
    with pytest.raises(ParseError) as e:
        parse("if 1 > 0 then else elseif 2 > 1 then end")
    assert e.value.kind is ErrorKind.UNEXPECTED_TOKEN


def test_else_inside_while_is_rejected() -> None:
    with pytest.raises(ParseError) as e:
        parse("while 1 > 0 then print 1; else print 2; end")
    assert e.value.kind is ErrorKind.UNEXPECTED_TOKEN


@pytest.mark.parametrize("source", ["end", "else print 1;", "elseif", "; print 1;", "42;"])
def test_unexpected_statement_start(source: str) -> None:
    with pytest.raises(ParseError) as e:
        parse(source)
    assert e.value.kind is ErrorKind.UNEXPECTED_TOKEN


@pytest.mark.parametrize(
    "source,message",
    [
        ("print 1", "Expected ';', found end of input"),
        ("let = 3;", "Expected identifier, found ASSIGN '='"),
        ("let x 3;", "Expected '=', found NUMBER '3'"),
        ("x + 1;", "Expected '=', found PLUS '+'"),
        ("print ;", "Expected number, string or identifier, found SEMI ';'"),
        ("if 1 < 2 print 1; end", "Expected 'then', found PRINT 'print'"),
        ("print --1;", "Expected number, string or identifier, found SUB '-'"),
    ],
)
def test_expected_but_found(source: str, message: str) -> None:
    with pytest.raises(ParseError) as e:
        parse(source)
    assert e.value.kind is ErrorKind.EXPECTED_BUT_FOUND
    assert e.value.message == message


def test_error_carries_position() -> None:
    with pytest.raises(ParseError) as e:
        parse("let x = 1;\nprint x")
    assert (e.value.line, e.value.col) == (2, 8)
    assert str(e.value).endswith("(line 2, col 8)")


def test_parser_appends_missing_eof() -> None:
    parser = Parser([Token("PRINT", "print", 1, 1), Token("NUMBER", "1", 1, 7)])
    with pytest.raises(ParseError) as e:
        parser.parse()
    assert e.value.token is not None and e.value.token.type == "EOF"


def test_empty_program() -> None:
    assert parse("") == []
    assert parse("# only a comment") == []


def test_expr_entrypoint() -> None:
    expr = Parser(tokenize("x * 2")).parse_expr_entrypoint()
    assert expr.kind == "arith"
    with pytest.raises(ParseError):
        Parser(tokenize("x * 2 3")).parse_expr_entrypoint()


@composite  # type: ignore[misc]
def programs(draw: Any) -> str:
    names = draw(st.lists(st.sampled_from(["a", "b", "c"]), min_size=1, max_size=4))
    stmts = []
    for name in names:
        n = draw(st.integers(min_value=0, max_value=99))
        op = draw(st.sampled_from(["+", "-", "*", "/"]))
        cmp = draw(st.sampled_from(["==", "!=", "<", "<=", ">", ">="]))
        stmts.append(f"let {name} = {n} {op} {name};")
        stmts.append(f"if {name} {cmp} {n} then print {name}; else {name} = -{n}; end")
        stmts.append(f"while {name} {cmp} {n} < {n} then print {name}; end")
    return "\n".join(stmts)


@given(src=programs())  # type: ignore[misc]
def test_parsing_is_deterministic(src: str) -> None:
    first = parse(src)
    second = parse(src)
    assert first == second
    assert [n.to_dict() for n in first] == [n.to_dict() for n in second]
