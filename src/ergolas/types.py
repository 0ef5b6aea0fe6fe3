from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from .tree import Node, format_float

# ---------- Value Model ----------

INT64_MAX = (1 << 63) - 1

def wrap_int64(value: int) -> int:
    """Two's-complement wrap into the signed 64-bit range."""
    value &= (1 << 64) - 1
    return value - (1 << 64) if value > INT64_MAX else value

@dataclass(frozen=True)
class ErgNil:
    type_name: ClassVar[str] = "Nil"
    def __repr__(self) -> str:
        return "nil"

@dataclass(frozen=True)
class ErgInt:
    value: int
    type_name: ClassVar[str] = "Int"
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class ErgFloat:
    value: float
    type_name: ClassVar[str] = "Float"
    def __repr__(self) -> str:
        return format_float(self.value)

@dataclass(frozen=True)
class ErgString:
    value: str
    type_name: ClassVar[str] = "Str"
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class ErgBool:
    value: bool
    type_name: ClassVar[str] = "Bool"
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class ErgQuoted:
    """A quoted expression: the ``Quoted`` node itself, never evaluated."""
    node: Node
    type_name: ClassVar[str] = "Quoted"
    def __repr__(self) -> str:
        return str(self.node)

StdlibFn = Callable[['Frame', List['ErgValue']], 'ErgValue']

@dataclass(frozen=True)
class StdlibFunction:
    name: str
    fn: StdlibFn
    arity: Optional[int] = None
    type_name: ClassVar[str] = "Native"

    def __repr__(self) -> str:
        return f"<native {self.name}>"

ErgValue: TypeAlias = (
    ErgNil
    | ErgInt
    | ErgFloat
    | ErgString
    | ErgBool
    | ErgQuoted
    | StdlibFunction
)

_ERG_VALUE_TYPES: Tuple[type, ...] = (
    ErgNil,
    ErgInt,
    ErgFloat,
    ErgString,
    ErgBool,
    ErgQuoted,
    StdlibFunction,
)

def is_erg_value(value: object) -> TypeGuard[ErgValue]:
    return isinstance(value, _ERG_VALUE_TYPES)

def type_name(value: ErgValue) -> str:
    return value.type_name

# ---------- Environment ----------

class Frame:
    """One binding table plus a link to the enclosing frame.

    Lookups walk outward and the first match wins. Bindings only ever land
    in the frame they are defined on.
    """

    def __init__(self, parent: Optional['Frame']=None, source: Optional[str]=None):
        self.parent = parent
        self.vars: Dict[str, ErgValue] = {}
        self.source: Optional[str]

        if source is not None:
            self.source = source
        elif parent is not None:
            self.source = parent.source
        else:
            self.source = None

    @classmethod
    def root(cls, source: Optional[str]=None) -> 'Frame':
        """Fresh root frame seeded with the registered builtins."""
        # Deferred: runtime imports this module.
        from .runtime import init_stdlib

        init_stdlib()
        frame = cls(source=source)

        for name, value in Builtins.constants.items():
            frame.vars[name] = value

        for name, std in Builtins.stdlib_functions.items():
            frame.vars[name] = std

        return frame

    def define(self, name: str, val: ErgValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> ErgValue:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.parent

        raise ErgolasUnboundVariable(name)

    def has(self, name: str) -> bool:
        try:
            self.get(name)
        except ErgolasUnboundVariable:
            return False
        return True

# ---------- Exceptions ----------

class ErgolasRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.line = None
        self.column = None

    def __str__(self) -> str:
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class ErgolasUnboundVariable(ErgolasRuntimeError):
    def __init__(self, name: str):
        super().__init__(f'unbound variable "{name}"')
        self.name = name

class ErgolasNotCallable(ErgolasRuntimeError):
    def __init__(self, value: ErgValue):
        super().__init__(f"not a function: {value!r}")
        self.value = value

class ErgolasExpectedIdentifier(ErgolasRuntimeError):
    def __init__(self, message: str = "expected identifier on left side of assignment"):
        super().__init__(message)

class ErgolasUnsupportedOperator(ErgolasRuntimeError):
    def __init__(self, op: str, left: str, right: str):
        super().__init__(f'cannot apply operator "{op}" to types {left} and {right}')
        self.op = op
        self.left = left
        self.right = right

class ErgolasTypeError(ErgolasRuntimeError):
    pass

class ErgolasArityError(ErgolasRuntimeError):
    pass

class ErgolasZeroDivision(ErgolasRuntimeError):
    pass

class ErgolasNotImplemented(ErgolasRuntimeError):
    def __init__(self, kind: str):
        super().__init__(f"evaluation of {kind} is not implemented")
        self.kind = kind

class Builtins:
    stdlib_functions: Dict[str, StdlibFunction] = {}
    constants: Dict[str, ErgValue] = {}
