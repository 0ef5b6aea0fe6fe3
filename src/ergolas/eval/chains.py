from __future__ import annotations

from typing import Callable, List

from ..runtime import (
    ErgValue,
    ErgolasNotCallable,
    Frame,
    StdlibFunction,
    call_native,
)
from ..tree import Node

EvalFunc = Callable[[Node, Frame], ErgValue]

def eval_call(children: List[Node], frame: Frame, eval_func: EvalFunc) -> ErgValue:
    """Juxtaposition call: callee first, then arguments left to right."""
    callee_node, *arg_nodes = children

    callee = eval_func(callee_node, frame)
    if not isinstance(callee, StdlibFunction):
        raise ErgolasNotCallable(callee)

    args = [eval_func(arg, frame) for arg in arg_nodes]

    return call_native(callee, args, frame)
