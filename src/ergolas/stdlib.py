"""Built-in functions and constants of the root environment."""

from __future__ import annotations

from typing import List

from .runtime import (
    register_constant,
    register_stdlib,
    ErgBool,
    ErgInt,
    ErgNil,
    ErgValue,
    ErgolasArityError,
    ErgolasTypeError,
    type_name,
)
from .utils import stringify

register_constant("true", ErgBool(True))
register_constant("false", ErgBool(False))

@register_stdlib("println")
def std_println(_frame, args: List[ErgValue]) -> ErgNil:
    print("".join(stringify(arg) for arg in args))
    return ErgNil()

@register_stdlib("exit")
def std_exit(_frame, args: List[ErgValue]) -> ErgNil:
    if len(args) != 1:
        raise ErgolasArityError(f"exit expects 1 argument; got {len(args)}")

    code = args[0]
    if not isinstance(code, ErgInt):
        raise ErgolasTypeError(f"exit expects an Int exit code; got {type_name(code)}")

    raise SystemExit(code.value)
