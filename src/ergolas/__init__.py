"""Ergolas: tokenizer, parser and tree-walking evaluator."""

from .evaluator import evaluate, evaluate_with
from .lexer import LexError, line_column, tokenize
from .parser_rd import ParseError, parse_expression, parse_expressions, parse_program, parse_source
from .runner import repl_eval, run
from .runtime import Frame, root_frame
from .tree import Node, NodeKind, dump_ast

__all__ = [
    "Frame",
    "LexError",
    "Node",
    "NodeKind",
    "ParseError",
    "dump_ast",
    "evaluate",
    "evaluate_with",
    "line_column",
    "parse_expression",
    "parse_expressions",
    "parse_program",
    "parse_source",
    "repl_eval",
    "root_frame",
    "run",
    "tokenize",
]
