from __future__ import annotations

import os

from .tree import format_float
from .types import (
    ErgValue,
    ErgNil,
    ErgInt,
    ErgFloat,
    ErgString,
    ErgBool,
    ErgQuoted,
    StdlibFunction,
)


def stringify(value: ErgValue) -> str:
    """Default text form, as println writes it."""
    match value:
        case ErgString(value=s):
            return s
        case ErgInt(value=n):
            return str(n)
        case ErgFloat(value=f):
            return format_float(f)
        case ErgBool(value=b):
            return "true" if b else "false"
        case ErgNil():
            return "nil"
        case ErgQuoted(node=node):
            return str(node)
        case StdlibFunction():
            return repr(value)
        case _:
            return str(value)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def debug_py_trace_enabled() -> bool:
    """ERGOLAS_DEBUG_PY_TRACE=1 prints Python tracebacks alongside errors."""
    return _env_flag("ERGOLAS_DEBUG_PY_TRACE")


def debug_parse_enabled() -> bool:
    """ERGOLAS_DEBUG_PARSE=1 turns on the parser rule trace."""
    return _env_flag("ERGOLAS_DEBUG_PARSE")
