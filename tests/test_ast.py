from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import dump, parse_pipeline
from ergolas.tree import Node, NodeKind, contains_kind, dump_ast, format_float

DUMP_CASES = [
    pytest.param(
        "f x + f y",
        "expression",
        """\
        - FunctionCall
          - Identifier { Value: "f" }
          - Binary
            - Identifier { Value: "x" }
            - Operator { Value: "+" }
            - Identifier { Value: "f" }
          - Identifier { Value: "y" }
        """,
        id="call-absorbs-one-operand",
    ),
    pytest.param(
        ":(1 + 2 + $(2 * 2))",
        "expression",
        """\
        - Quoted
          - Parenthesis
            - Binary
              - Binary
                - Integer { Value: "1" }
                - Operator { Value: "+" }
                - Integer { Value: "2" }
              - Operator { Value: "+" }
              - Unquote
                - Parenthesis
                  - Binary
                    - Integer { Value: "2" }
                    - Operator { Value: "*" }
                    - Integer { Value: "2" }
        """,
        id="quasiquote",
    ),
    pytest.param(
        'foo (bar 1 2 3 "hi") (baz (3 * 4.0 + (2 ^ 3)) :symbol)',
        "program",
        """\
        - Program
          - FunctionCall
            - Identifier { Value: "foo" }
            - Parenthesis
              - FunctionCall
                - Identifier { Value: "bar" }
                - Integer { Value: "1" }
                - Integer { Value: "2" }
                - Integer { Value: "3" }
                - String { Value: "hi" }
            - Parenthesis
              - FunctionCall
                - Identifier { Value: "baz" }
                - Parenthesis
                  - Binary
                    - Binary
                      - Integer { Value: "3" }
                      - Operator { Value: "*" }
                      - Float { Value: "4" }
                    - Operator { Value: "+" }
                    - Parenthesis
                      - Binary
                        - Integer { Value: "2" }
                        - Operator { Value: "^" }
                        - Integer { Value: "3" }
                - Quoted
                  - Identifier { Value: "symbol" }
        """,
        id="nested-calls",
    ),
    pytest.param(
        'if { ans == 42 } { println "Yep" } { println "Nope" }',
        "program",
        """\
        - Program
          - FunctionCall
            - Identifier { Value: "if" }
            - Block
              - Binary
                - Identifier { Value: "ans" }
                - Operator { Value: "==" }
                - Integer { Value: "42" }
            - Block
              - FunctionCall
                - Identifier { Value: "println" }
                - String { Value: "Yep" }
            - Block
              - FunctionCall
                - Identifier { Value: "println" }
                - String { Value: "Nope" }
        """,
        id="inline-blocks",
    ),
    pytest.param(
        "1 + 2 * 3",
        "expression",
        """\
        - Binary
          - Binary
            - Integer { Value: "1" }
            - Operator { Value: "+" }
            - Integer { Value: "2" }
          - Operator { Value: "*" }
          - Integer { Value: "3" }
        """,
        id="left-chain-no-precedence",
    ),
]


@pytest.mark.parametrize("source, mode, expected", DUMP_CASES)
def test_ast_dump(source: str, mode: str, expected: str) -> None:
    assert dump(source, mode) == dedent(expected)


def test_multiline_blocks_match_inline_form() -> None:
    multiline = """
        if { ans == 42 } {
            println "Yep"
        } {
            println "Nope"
        }
    """
    inline = 'if { ans == 42 } { println "Yep" } { println "Nope" }'
    assert dump(multiline, "program") == dump(inline, "program")


def test_dump_is_deterministic() -> None:
    source = 'a := 1; println (a + 2) "x" :(a.b $(c))'
    first = dump(source, "program")
    assert all(dump(source, "program") == first for _ in range(5))


def test_compact_form_of_quoted_node() -> None:
    node = parse_pipeline(":example")
    assert str(node) == "{Quoted [{Identifier example}]}"


def test_leaf_cannot_have_children() -> None:
    child = Node.leaf(NodeKind.INTEGER, 1)
    with pytest.raises(ValueError):
        Node(NodeKind.INTEGER, [child], payload=2)


def test_node_equality_includes_payload() -> None:
    assert Node.leaf(NodeKind.INTEGER, 1) == Node.leaf(NodeKind.INTEGER, 1)
    assert Node.leaf(NodeKind.INTEGER, 1) != Node.leaf(NodeKind.INTEGER, 2)
    assert parse_pipeline("f x") == parse_pipeline("f   x")


def test_contains_kind_walks_subtrees() -> None:
    node = parse_pipeline(":(1 + $(x))")
    assert contains_kind(node, NodeKind.UNQUOTE)
    assert not contains_kind(node, NodeKind.BLOCK)


def test_lark_tree_helpers_work_on_nodes() -> None:
    node = parse_pipeline("f (a + b) (c - d)")
    assert len(list(node.find_data(NodeKind.BINARY))) == 2


def test_dump_of_single_leaf() -> None:
    assert dump_ast(Node.leaf(NodeKind.STRING, "hi")) == '- String { Value: "hi" }\n'


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(4.0, "4", id="integral"),
        pytest.param(2.5, "2.5", id="fraction"),
        pytest.param(0.1, "0.1", id="shortest-repr"),
        pytest.param(1e20, "100000000000000000000", id="large-fixed"),
        pytest.param(1e21, "1e+21", id="large-exponent"),
        pytest.param(0.0001, "0.0001", id="small-fixed"),
        pytest.param(0.00001, "1e-05", id="small-exponent"),
        pytest.param(-1.5, "-1.5", id="negative"),
        pytest.param(float("inf"), "+Inf", id="inf"),
        pytest.param(float("nan"), "NaN", id="nan"),
    ],
)
def test_format_float(value: float, expected: str) -> None:
    assert format_float(value) == expected
