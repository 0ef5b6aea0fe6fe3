from __future__ import annotations

from typing import Callable, Dict, Optional

from .lexer import line_column
from .runtime import (
    ErgFloat,
    ErgInt,
    ErgQuoted,
    ErgString,
    ErgValue,
    ErgolasNotImplemented,
    ErgolasRuntimeError,
    Frame,
    root_frame,
)
from .tree import Node, NodeKind, leaf_value, node_kind, node_start

from .eval.blocks import eval_program, eval_expressions
from .eval.chains import eval_call
from .eval.expr import eval_binary

EvalFunc = Callable[[Node, Frame], ErgValue]


def _maybe_attach_location(exc: ErgolasRuntimeError, node: Node, frame: Frame) -> None:
    if exc.line is not None:
        return

    start = node_start(node)
    if start is None or frame.source is None:
        return

    try:
        exc.line, exc.column = line_column(frame.source, start)
    except ValueError:
        return

# ---------------- Public API ----------------

def evaluate(node: Node, source: Optional[str]=None) -> ErgValue:
    """Evaluate against a fresh root environment."""
    return evaluate_with(node, root_frame(source=source))

def evaluate_with(node: Node, frame: Frame, source: Optional[str]=None) -> ErgValue:
    """Evaluate against a caller-owned environment (persistent session state)."""
    if source is not None:
        frame.source = source

    return eval_node(node, frame)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> ErgValue:
    try:
        return _eval_node_inner(n, frame)
    except ErgolasRuntimeError as e:
        _maybe_attach_location(e, n, frame)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> ErgValue:
    handler = _NODE_DISPATCH.get(node_kind(n))
    if handler is None:
        raise ErgolasRuntimeError(f"unexpected node {node_kind(n)}")

    return handler(n, frame)


def _not_implemented(n: Node, _frame: Frame) -> ErgValue:
    raise ErgolasNotImplemented(n.data)


_NODE_DISPATCH: Dict[str, EvalFunc] = {
    NodeKind.PROGRAM: lambda n, frame: eval_program(n.children, frame, eval_node),
    NodeKind.EXPRESSIONS: lambda n, frame: eval_expressions(n.children, frame, eval_node),
    NodeKind.FUNCTION_CALL: lambda n, frame: eval_call(n.children, frame, eval_node),
    NodeKind.BINARY: lambda n, frame: eval_binary(n, frame, eval_node),
    NodeKind.QUOTED: lambda n, _frame: ErgQuoted(n),
    NodeKind.PARENTHESIS: lambda n, frame: eval_node(n.children[0], frame),
    NodeKind.IDENTIFIER: lambda n, frame: frame.get(leaf_value(n, NodeKind.IDENTIFIER)),
    NodeKind.INTEGER: lambda n, _frame: ErgInt(leaf_value(n, NodeKind.INTEGER)),
    NodeKind.FLOAT: lambda n, _frame: ErgFloat(leaf_value(n, NodeKind.FLOAT)),
    NodeKind.STRING: lambda n, _frame: ErgString(leaf_value(n, NodeKind.STRING)),
    NodeKind.BLOCK: _not_implemented,
    NodeKind.PROPERTY_ACCESS: _not_implemented,
    NodeKind.UNQUOTE: _not_implemented,
}
