from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

from ..runtime import (
    ErgFloat,
    ErgInt,
    ErgNil,
    ErgString,
    ErgValue,
    ErgolasExpectedIdentifier,
    ErgolasUnsupportedOperator,
    ErgolasZeroDivision,
    Frame,
    type_name,
    wrap_int64,
)
from ..tree import Node, NodeKind, leaf_value
from .helpers import is_truthy

EvalFunc = Callable[[Node, Frame], ErgValue]
BinaryImpl = Callable[[ErgValue, ErgValue], ErgValue]

# ---------------- Numeric kernels ----------------

def _int_div(a: int, b: int) -> int:
    if b == 0:
        raise ErgolasZeroDivision("integer division by zero")
    q = abs(a) // abs(b)
    return wrap_int64(q if (a < 0) == (b < 0) else -q)

def _int_mod(a: int, b: int) -> int:
    if b == 0:
        raise ErgolasZeroDivision("integer division by zero")
    # Truncated remainder: the result takes the sign of the dividend.
    r = abs(a) % abs(b)
    return r if a >= 0 else -r

def _float_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b

def _float_mod(a: float, b: float) -> float:
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(a, b)

# ---------------- Dispatch table ----------------

_BINARY_OPS: Dict[Tuple[str, type, type], BinaryImpl] = {
    ('+', ErgInt, ErgInt): lambda l, r: ErgInt(wrap_int64(l.value + r.value)),
    ('+', ErgFloat, ErgFloat): lambda l, r: ErgFloat(l.value + r.value),
    ('+', ErgString, ErgString): lambda l, r: ErgString(l.value + r.value),

    ('-', ErgInt, ErgInt): lambda l, r: ErgInt(wrap_int64(l.value - r.value)),
    ('-', ErgFloat, ErgFloat): lambda l, r: ErgFloat(l.value - r.value),

    ('*', ErgInt, ErgInt): lambda l, r: ErgInt(wrap_int64(l.value * r.value)),
    ('*', ErgFloat, ErgFloat): lambda l, r: ErgFloat(l.value * r.value),

    ('/', ErgInt, ErgInt): lambda l, r: ErgInt(_int_div(l.value, r.value)),
    ('/', ErgFloat, ErgFloat): lambda l, r: ErgFloat(_float_div(l.value, r.value)),

    ('%', ErgInt, ErgInt): lambda l, r: ErgInt(_int_mod(l.value, r.value)),
    ('%', ErgFloat, ErgFloat): lambda l, r: ErgFloat(_float_mod(l.value, r.value)),
}

def apply_binary_operator(op: str, lhs: ErgValue, rhs: ErgValue) -> ErgValue:
    impl = _BINARY_OPS.get((op, type(lhs), type(rhs)))
    if impl is None:
        raise ErgolasUnsupportedOperator(op, type_name(lhs), type_name(rhs))
    return impl(lhs, rhs)

def supported_operators() -> frozenset[str]:
    return frozenset(op for op, _, _ in _BINARY_OPS)

# ---------------- Binary node ----------------

def eval_binary(n: Node, frame: Frame, eval_func: EvalFunc) -> ErgValue:
    lhs_node, op_node, rhs_node = n.children
    op = leaf_value(op_node, NodeKind.OPERATOR)

    match op:
        case ':=':
            return eval_assign(lhs_node, rhs_node, frame, eval_func)
        case '&&':
            lhs = eval_func(lhs_node, frame)
            if not is_truthy(lhs):
                return lhs
            return eval_func(rhs_node, frame)
        case '||':
            lhs = eval_func(lhs_node, frame)
            if is_truthy(lhs):
                return lhs
            return eval_func(rhs_node, frame)

    lhs = eval_func(lhs_node, frame)
    rhs = eval_func(rhs_node, frame)

    return apply_binary_operator(op, lhs, rhs)

def eval_assign(target: Node, rhs_node: Node, frame: Frame, eval_func: EvalFunc) -> ErgValue:
    """name := value binds in the active frame and yields nil."""
    if target.data != NodeKind.IDENTIFIER:
        raise ErgolasExpectedIdentifier()

    name = leaf_value(target, NodeKind.IDENTIFIER)
    value = eval_func(rhs_node, frame)
    frame.define(name, value)

    return ErgNil()
