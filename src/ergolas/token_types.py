"""
Token Types for the Ergolas tokenizer

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token classes, one per tokenizer rule"""

    # Literals
    FLOAT = auto()
    INTEGER = auto()
    STRING = auto()

    # Operators
    ROPERATOR = auto()  # := ::
    QUOTE = auto()  # :
    UNQUOTE = auto()  # $ (only before "(")
    LOPERATOR = auto()  # any run of +-*/%=<>!&|^

    # Punctuation: . , ; ( ) [ ] { }
    PUNCTUATION = auto()

    IDENT = auto()

    # Layout
    NEWLINE = auto()
    COMMENT = auto()
    WHITESPACE = auto()


@dataclass(frozen=True)
class Tok:
    """Token with its source offset"""

    type: TT
    value: str
    pos: int = 0

    @property
    def end(self) -> int:
        return self.pos + len(self.value)

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, @{self.pos})"
