"""prompt_toolkit lexer for live Ergolas syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import Lexer as ErgLexer, LexError
from .token_types import TT, Tok

# highlight group -> prompt_toolkit style
GROUP_STYLE = {
    "constant": "ansicyan",
    "builtin": "bold ansiyellow",
    "number": "ansimagenta",
    "string": "ansigreen",
    "quote": "bold ansiblue",
    "identifier": "",
    "operator": "",
    "assign": "bold",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.FLOAT: "number",
    TT.INTEGER: "number",
    TT.STRING: "string",
    TT.ROPERATOR: "assign",
    TT.QUOTE: "quote",
    TT.UNQUOTE: "quote",
    TT.LOPERATOR: "operator",
    TT.PUNCTUATION: "punctuation",
    TT.IDENT: "identifier",
    TT.COMMENT: "comment",
}

_CONSTANTS = {"true", "false"}
_BUILTINS = {"println", "exit"}


def _token_group(tok: Tok) -> str:
    if tok.type == TT.IDENT:
        if tok.value in _CONSTANTS:
            return "constant"
        if tok.value in _BUILTINS:
            return "builtin"
    return _TT_GROUP.get(tok.type, "")


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = ErgLexer(text, emit_comments=True).tokenize()
    except LexError as exc:
        # Style everything up to the bad character, flag the rest.
        good = highlight_line(text[:exc.offset]) if exc.offset else []
        return good + [(GROUP_STYLE["error"], text[exc.offset:])]

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.NEWLINE:
            continue

        # Unstyled gap (whitespace) before token.
        if tok.pos > pos:
            result.append(("", text[pos:tok.pos]))

        result.append((GROUP_STYLE.get(_token_group(tok), ""), tok.value))
        pos = tok.end

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class ErgolasLexer(Lexer):
    """prompt_toolkit Lexer that highlights Ergolas source using the tokenizer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Lines are highlighted on demand and memoized per document.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
