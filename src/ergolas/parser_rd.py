"""
Recursive Descent Parser for Ergolas

Structure:
- Lexer: Token stream from source (lexer.py)
- Parser: recursive descent; operator associativity comes from the token
  class (LOPERATOR chains left, ROPERATOR nests right), there is no
  precedence table
- AST: ``Node`` trees (tree.py) shared with the evaluator
"""

import functools
import logging
from typing import Callable, List, Optional

from .lexer import tokenize
from .token_types import TT, Tok
from .tree import Node, NodeKind, make_meta, node_start
from .types import INT64_MAX

logger = logging.getLogger("ergolas.parser")
logger.addHandler(logging.NullHandler())

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error: what was expected, what was found and where"""

    def __init__(self, expected: str, found: str, position: Optional[int] = None):
        self.expected = expected
        self.found = found
        self.position = position
        self.line: Optional[int] = None
        self.column: Optional[int] = None
        super().__init__(f"expected {expected} but got {found}")

    def locate(self, source: str) -> 'ParseError':
        """Attach line/column information from the parsed source."""
        from .lexer import line_column

        if self.position is not None and self.line is None:
            try:
                self.line, self.column = line_column(source, self.position)
            except ValueError:
                pass
        return self

    def __str__(self) -> str:
        msg = super().__str__()
        if self.line is None:
            return msg
        return f"[{self.line}:{self.column}] {msg}"


# Values that end a juxtaposition call
CALL_TERMINATORS = frozenset({";", ")", "]", "}", ":=", "::", "<-", "->", "|>"})


def rule(fn: Callable) -> Callable:
    """Log enter/exit of a grammar rule, indented by nesting depth."""
    name = fn.__name__

    @functools.wraps(fn)
    def traced(self: 'Parser', *args, **kwargs):
        if not logger.isEnabledFor(logging.DEBUG):
            return fn(self, *args, **kwargs)

        logger.debug("%senter %s() at %s", "  " * self.depth, name, self.describe(self.current))
        self.depth += 1
        try:
            return fn(self, *args, **kwargs)
        finally:
            self.depth -= 1
            logger.debug("%sexit %s()", "  " * self.depth, name)

    return traced


class Parser:
    """
    Recursive descent parser for Ergolas.

    Grammar:
        Program        ::= Statements
        Statements     ::= ( Expression ";"? )*
        Expression     ::= Intermediate ( ROperator Expression )?
        Intermediate   ::= PropertyOrValue ( LOperator LeftBinary )?
                         | PropertyOrValue ( PropertyOrValue LeftBinary ","? )+
        LeftBinary     ::= ( LOperator PropertyOrValue )*
        PropertyOrValue::= Value ( "." Identifier )*
        Value          ::= "(" Expression ")" | "{" Statements "}"
                         | Identifier | Integer | Float | String
                         | ":" PropertyOrValue | "$" "(" Expression ")"
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def done(self) -> bool:
        return self.pos >= len(self.tokens)

    @property
    def current(self) -> Optional[Tok]:
        return None if self.done() else self.tokens[self.pos]

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def check(self, token_type: TT) -> bool:
        return not self.done() and self.tokens[self.pos].type == token_type

    def check_value(self, value: str) -> bool:
        return not self.done() and self.tokens[self.pos].value == value

    def expect_value(self, value: str) -> Tok:
        if not self.check_value(value):
            raise self.error(f'"{value}"')
        return self.advance()

    def expect_type(self, token_type: TT) -> Tok:
        if not self.check(token_type):
            raise self.error(token_type.name)
        return self.advance()

    def skip_newlines(self) -> None:
        while self.check(TT.NEWLINE):
            self.advance()

    def describe(self, tok: Optional[Tok]) -> str:
        if tok is None:
            return "end of input"
        if tok.type == TT.NEWLINE:
            return "newline"
        return f'"{tok.value}"'

    def error(self, expected: str) -> ParseError:
        tok = self.current
        if tok is None:
            position = self.tokens[-1].end if self.tokens else 0
        else:
            position = tok.pos
        return ParseError(expected, self.describe(tok), position)

    def is_call_terminator(self, tok: Tok) -> bool:
        return tok.type == TT.NEWLINE or tok.value in CALL_TERMINATORS

    # ========================================================================
    # Entry Points
    # ========================================================================

    @rule
    def parse_program(self) -> Node:
        """Parse a whole program; every token must be consumed."""
        statements = self.parse_statements()

        if not self.done():
            raise self.error("end of input")

        return Node(NodeKind.PROGRAM, statements)

    @rule
    def parse_expressions(self) -> Node:
        return Node(NodeKind.EXPRESSIONS, self.parse_statements())

    # ========================================================================
    # Statements and Expressions
    # ========================================================================

    def parse_statements(self) -> List[Node]:
        statements: List[Node] = []

        self.skip_newlines()

        while not self.done() and not self.check_value("}"):
            statements.append(self.parse_expression())

            if self.check_value(";"):
                self.advance()

            self.skip_newlines()

        return statements

    @rule
    def parse_expression(self) -> Node:
        """Right-associative layer: a := b := c is a := (b := c)."""
        lhs = self.parse_intermediate()

        if self.check(TT.ROPERATOR):
            op = self.advance()
            rhs = self.parse_expression()
            return self.binary(lhs, op, rhs)

        return lhs

    @rule
    def parse_intermediate(self) -> Node:
        """A left-binary chain, a juxtaposition call, or a bare value."""
        node = self.parse_property_or_value()

        if self.check(TT.LOPERATOR):
            return self.parse_left_binary(node)

        nodes = [node]

        while not self.done() and not self.is_call_terminator(self.current):
            arg = self.parse_left_binary(self.parse_property_or_value())

            if self.check_value(","):
                self.advance()

            nodes.append(arg)

        if len(nodes) > 1:
            return Node(NodeKind.FUNCTION_CALL, nodes, meta=make_meta(node_start(node)))

        return node

    @rule
    def parse_left_binary(self, lhs: Node) -> Node:
        """Fold LOPERATOR chains strictly left to right."""
        while self.check(TT.LOPERATOR):
            op = self.advance()
            rhs = self.parse_property_or_value()
            lhs = self.binary(lhs, op, rhs)

        return lhs

    @rule
    def parse_property_or_value(self) -> Node:
        node = self.parse_value()

        while self.check_value("."):
            self.advance()
            name = self.expect_type(TT.IDENT)
            prop = Node.leaf(NodeKind.IDENTIFIER, name.value, name.pos)
            node = Node(NodeKind.PROPERTY_ACCESS, [node, prop], meta=make_meta(node_start(node)))

        return node

    def binary(self, lhs: Node, op: Tok, rhs: Node) -> Node:
        operator = Node.leaf(NodeKind.OPERATOR, op.value, op.pos)
        return Node(NodeKind.BINARY, [lhs, operator, rhs], meta=make_meta(node_start(lhs)))

    # ========================================================================
    # Values
    # ========================================================================

    VALUE_ALTERNATIVES = (
        "parse_parens",
        "parse_block",
        "parse_identifier",
        "parse_integer",
        "parse_float",
        "parse_string",
        "parse_quoted",
        "parse_unquote",
    )

    @rule
    def parse_value(self) -> Node:
        """
        First alternative that recognises the cursor wins. Each alternative
        returns None without consuming when its leading token is absent;
        once it has consumed its leading token its errors propagate.
        """
        node = self.first_of(self.VALUE_ALTERNATIVES)
        if node is None:
            raise self.error("value")
        return node

    def first_of(self, alternatives) -> Optional[Node]:
        # No two alternatives share a leading token, so once one has consumed
        # its token no later one could match; its error is reported as is
        # instead of backtracking to the last alternative tried.
        start = self.pos

        for name in alternatives:
            node = getattr(self, name)()
            if node is not None:
                return node
            self.pos = start

        return None

    def parse_parens(self) -> Optional[Node]:
        if not self.check_value("("):
            return None

        start = self.advance()
        inner = self.parse_expression()
        self.expect_value(")")

        return Node(NodeKind.PARENTHESIS, [inner], meta=make_meta(start.pos))

    def parse_block(self) -> Optional[Node]:
        if not self.check_value("{"):
            return None

        start = self.advance()
        self.skip_newlines()
        statements = self.parse_statements()
        self.skip_newlines()
        self.expect_value("}")

        return Node(NodeKind.BLOCK, statements, meta=make_meta(start.pos))

    def parse_identifier(self) -> Optional[Node]:
        if not self.check(TT.IDENT):
            return None

        tok = self.advance()
        return Node.leaf(NodeKind.IDENTIFIER, tok.value, tok.pos)

    def parse_integer(self) -> Optional[Node]:
        if not self.check(TT.INTEGER):
            return None

        tok = self.current
        value = int(tok.value)
        if value > INT64_MAX:
            raise ParseError("64-bit integer", f'"{tok.value}"', tok.pos)

        self.advance()
        return Node.leaf(NodeKind.INTEGER, value, tok.pos)

    def parse_float(self) -> Optional[Node]:
        if not self.check(TT.FLOAT):
            return None

        tok = self.advance()
        return Node.leaf(NodeKind.FLOAT, float(tok.value), tok.pos)

    def parse_string(self) -> Optional[Node]:
        if not self.check(TT.STRING):
            return None

        tok = self.advance()
        # Raw text between the quotes; escapes are kept undecoded.
        return Node.leaf(NodeKind.STRING, tok.value[1:-1], tok.pos)

    def parse_quoted(self) -> Optional[Node]:
        if not self.check(TT.QUOTE):
            return None

        start = self.advance()
        inner = self.parse_property_or_value()

        return Node(NodeKind.QUOTED, [inner], meta=make_meta(start.pos))

    def parse_unquote(self) -> Optional[Node]:
        if not self.check(TT.UNQUOTE):
            return None

        start = self.advance()
        inner = self.parse_parens()
        if inner is None:
            raise self.error('"("')

        return Node(NodeKind.UNQUOTE, [inner], meta=make_meta(start.pos))


# ============================================================================
# Convenience API
# ============================================================================

def parse_program(tokens: List[Tok]) -> Node:
    """Program node; the whole token stream must be consumed."""
    return Parser(tokens).parse_program()

def parse_expression(tokens: List[Tok]) -> Node:
    """A single expression; trailing tokens are ignored."""
    return Parser(tokens).parse_expression()

def parse_expressions(tokens: List[Tok]) -> Node:
    """Expressions node; stops at the first unmatched "}" and ignores the rest."""
    return Parser(tokens).parse_expressions()

_MODES = {
    "program": parse_program,
    "expression": parse_expression,
    "expressions": parse_expressions,
}

def parse_source(source: str, mode: str = "program") -> Node:
    """Tokenize and parse source text, locating parse errors in it."""
    try:
        entry = _MODES[mode]
    except KeyError:
        raise ValueError(f"unknown parse mode {mode!r}") from None

    tokens = tokenize(source)
    try:
        return entry(tokens)
    except ParseError as exc:
        raise exc.locate(source)
