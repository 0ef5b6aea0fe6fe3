"""
Lexer for Ergolas

Tokenizes source code into a flat list of classified tokens.

Features:
- Fixed-priority rule table (first matching rule wins, not longest match)
- Whitespace and comments dropped, newline runs collapsed
- Offset tracking with lazy (line, column) resolution for errors
"""

import re
from typing import List, Optional, Pattern, Tuple

from .token_types import TT, Tok


def line_column(source: str, offset: int) -> Tuple[int, int]:
    """Resolve a source offset into a 1-based (line, column) pair."""
    consumed = 0

    for lineno, line in enumerate(source.split("\n"), start=1):
        width = len(line) + 1  # the newline belongs to its line
        if offset < consumed + width:
            return lineno, offset - consumed + 1
        consumed += width

    raise ValueError(f"offset {offset} is out of range")


class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, source: str, offset: int, message: str = "unexpected character"):
        self.source = source
        self.offset = offset
        self.message = message
        super().__init__(message)

    @property
    def line(self) -> int:
        return line_column(self.source, self.offset)[0]

    @property
    def column(self) -> int:
        return line_column(self.source, self.offset)[1]

    def __str__(self) -> str:
        return f"[{self.line}:{self.column}] {self.message}"


# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Ergolas lexer.

    Rules are tried in table order at every cursor position and the first
    match wins. Float must stay ahead of integer, and ":=" / "::" ahead of
    the bare quote marker.
    """

    # (token type, pattern, dropped from output)
    RULES: List[Tuple[TT, Pattern[str], bool]] = [
        (TT.FLOAT, re.compile(r"[0-9]+\.[0-9]+"), False),
        (TT.INTEGER, re.compile(r"[0-9]+"), False),
        (TT.STRING, re.compile(r'"(?:\\.|[^"])*"'), False),
        (TT.ROPERATOR, re.compile(r":=|::"), False),
        (TT.QUOTE, re.compile(r":"), False),
        (TT.UNQUOTE, re.compile(r"\$(?=\()"), False),
        (TT.LOPERATOR, re.compile(r"[+\-*/%=<>!&|^]+"), False),
        (TT.PUNCTUATION, re.compile(r"[.,;()\[\]{}]"), False),
        (TT.IDENT, re.compile(r"[a-zA-Z\-_$][a-zA-Z0-9\-_$]*"), False),
        (TT.NEWLINE, re.compile(r"\n[\t\n\f\r ]*"), False),
        (TT.COMMENT, re.compile(r"#[^\n]*"), True),
        (TT.WHITESPACE, re.compile(r"[ \t]+"), True),
    ]

    def __init__(self, source: str, emit_comments: bool = False):
        self.source = source
        self.emit_comments = emit_comments
        self.pos = 0
        self.tokens: List[Tok] = []

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        return self.tokens

    def scan_token(self):
        """Scan the token at the cursor using the first matching rule"""
        matched = self.match_rule()
        if matched is None:
            raise LexError(self.source, self.pos)

        token_type, text, ignore = matched
        if not ignore or (token_type == TT.COMMENT and self.emit_comments):
            self.tokens.append(Tok(token_type, text, self.pos))
        self.pos += len(text)

    def match_rule(self) -> Optional[Tuple[TT, str, bool]]:
        for token_type, pattern, ignore in self.RULES:
            m = pattern.match(self.source, self.pos)
            # Every rule consumes at least one character, an empty match means no match.
            if m is not None and m.end() > self.pos:
                return token_type, m.group(0), ignore

        return None


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
