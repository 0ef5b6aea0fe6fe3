from __future__ import annotations

import importlib
from typing import Optional

from .types import (
    ErgNil, ErgInt, ErgFloat, ErgString, ErgBool, ErgQuoted,
    StdlibFunction, StdlibFn, ErgValue, Frame, Builtins,
    ErgolasRuntimeError, ErgolasUnboundVariable, ErgolasNotCallable,
    ErgolasExpectedIdentifier, ErgolasUnsupportedOperator, ErgolasTypeError,
    ErgolasArityError, ErgolasZeroDivision, ErgolasNotImplemented,
    is_erg_value, type_name, wrap_int64,
)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("ergolas.stdlib")
    _STDLIB_INITIALIZED = True

def register_stdlib(name: str, *, arity: Optional[int] = None):
    def dec(fn: StdlibFn):
        Builtins.stdlib_functions[name] = StdlibFunction(name=name, fn=fn, arity=arity)
        return fn

    return dec

def register_constant(name: str, value: ErgValue) -> None:
    Builtins.constants[name] = value

def root_frame(source: Optional[str] = None) -> Frame:
    return Frame.root(source=source)

def call_native(fn: StdlibFunction, args: list[ErgValue], frame: Frame) -> ErgValue:
    if fn.arity is not None and len(args) != fn.arity:
        raise ErgolasArityError(f"{fn.name} expects {fn.arity} argument(s); got {len(args)}")

    result = fn.fn(frame, args)
    if result is None:
        return ErgNil()
    if not is_erg_value(result):
        raise ErgolasTypeError(f"{fn.name} returned a non-Ergolas value: {result!r}")
    return result
