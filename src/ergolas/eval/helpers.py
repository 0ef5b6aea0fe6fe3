from __future__ import annotations

from ..runtime import ErgBool, ErgNil, ErgValue

def is_truthy(val: ErgValue) -> bool:
    """Only false and nil are falsy; zero, "" and quoted values are truthy."""
    match val:
        case ErgBool(value=b):
            return b
        case ErgNil():
            return False
        case _:
            return True
