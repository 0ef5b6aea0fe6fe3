from __future__ import annotations

from typing import Callable, List

from ..runtime import ErgNil, ErgValue, Frame
from ..tree import Node

EvalFunc = Callable[[Node, Frame], ErgValue]

def eval_program(children: List[Node], frame: Frame, eval_func: EvalFunc) -> ErgValue:
    """Run statements for their effects; the program itself yields nil."""
    for child in children:
        eval_func(child, frame)

    return ErgNil()

def eval_expressions(children: List[Node], frame: Frame, eval_func: EvalFunc) -> ErgValue:
    """Run statements in order and yield the last value (nil when empty)."""
    result: ErgValue = ErgNil()

    for child in children:
        result = eval_func(child, frame)

    return result
