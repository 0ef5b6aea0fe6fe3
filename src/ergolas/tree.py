"""AST node type shared by the parser and the evaluator.

Nodes reuse Lark's ``Tree`` so the usual Lark tooling (``iter_subtrees``,
``find_data``, ``Meta``) works on them. A list node carries ordered
children; a leaf node carries a scalar payload and no children.
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Union

from lark import Tree
from lark.tree import Meta
from typing_extensions import TypeAlias

Payload: TypeAlias = Union[int, float, str]


class NodeKind:
    """Kind tags, spelled the way the AST dump prints them."""

    PROGRAM = "Program"
    EXPRESSIONS = "Expressions"
    FUNCTION_CALL = "FunctionCall"
    BINARY = "Binary"
    QUOTED = "Quoted"
    UNQUOTE = "Unquote"
    PROPERTY_ACCESS = "PropertyAccess"
    PARENTHESIS = "Parenthesis"
    IDENTIFIER = "Identifier"
    BLOCK = "Block"
    INTEGER = "Integer"
    FLOAT = "Float"
    STRING = "String"
    OPERATOR = "Operator"


LEAF_KINDS = frozenset({
    NodeKind.IDENTIFIER,
    NodeKind.INTEGER,
    NodeKind.FLOAT,
    NodeKind.STRING,
    NodeKind.OPERATOR,
})


class Node(Tree):
    """Kind tag + ordered children, or kind tag + leaf payload."""

    def __init__(self, kind: str, children: Optional[Sequence[Node]] = None,
                 payload: Optional[Payload] = None, meta: Optional[Meta] = None):
        kids = list(children or [])
        if kids and payload is not None:
            raise ValueError(f"{kind} node cannot have both children and a payload")

        super().__init__(kind, kids, meta)
        self.payload = payload

    @classmethod
    def leaf(cls, kind: str, payload: Payload, start_pos: Optional[int] = None) -> Node:
        return cls(kind, payload=payload, meta=make_meta(start_pos))

    @property
    def kind(self) -> str:
        return self.data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return False
        return (self.data == other.data and self.payload == other.payload
                and self.children == other.children)

    def __hash__(self) -> int:
        return hash((self.data, self.payload, tuple(self.children)))

    def __repr__(self) -> str:
        if self.payload is not None:
            return f"Node({self.data!r}, payload={self.payload!r})"
        return f"Node({self.data!r}, {self.children!r})"

    def __str__(self) -> str:
        """Compact single-line form, e.g. ``{Quoted [{Identifier example}]}``."""
        if is_leaf(self):
            return f"{{{self.data} {format_scalar(self.payload)}}}"
        inner = " ".join(str(ch) for ch in self.children)
        return f"{{{self.data} [{inner}]}}"


def make_meta(start_pos: Optional[int]) -> Optional[Meta]:
    if start_pos is None:
        return None

    meta = Meta()
    meta.start_pos = start_pos
    meta.empty = False
    return meta


def format_float(value: float) -> str:
    """Shortest round-trip form, no trailing ``.0``; exponent outside [1e-4, 1e21)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    dec = Decimal(repr(value)).normalize()
    sign, digits, exponent = dec.as_tuple()
    sci_exp = len(digits) - 1 + exponent

    if -4 <= sci_exp < 21:
        return format(dec, "f")

    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    exp_sign = "-" if sci_exp < 0 else "+"
    return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(sci_exp):02d}"


def format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def dump_ast(node: Node, depth: int = 0) -> str:
    """Render the tree one node per line, children two spaces deeper."""
    lines: List[str] = []

    def _dump(n: Node, level: int) -> None:
        line = f"{'  ' * level}- {n.data}"
        if n.payload is not None:
            line += f' {{ Value: "{format_scalar(n.payload)}" }}'
        lines.append(line)

        for child in n.children:
            _dump(child, level + 1)

    _dump(node, depth)
    return "\n".join(lines) + "\n"


def is_leaf(node: Node) -> bool:
    return node.data in LEAF_KINDS

def node_kind(node: Node) -> str:
    return node.data

def leaf_value(node: Node, kind: str) -> Payload:
    if node.data != kind or node.payload is None:
        raise ValueError(f"expected {kind} leaf, got {node.data}")
    return node.payload

def node_start(node: Node) -> Optional[int]:
    meta = getattr(node, "_meta", None)
    if meta is None:
        return None
    return getattr(meta, "start_pos", None)

def contains_kind(node: Node, kind: str) -> bool:
    return any(sub.data == kind for sub in node.iter_subtrees_topdown())
