from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

from .evaluator import evaluate_with
from .lexer import LexError
from .parser_rd import ParseError, parse_source
from .runtime import ErgValue, Frame, ErgolasRuntimeError, root_frame
from .tree import dump_ast
from .utils import debug_parse_enabled, debug_py_trace_enabled

def run(src: str, frame: Optional[Frame]=None, show_ast: bool=False) -> ErgValue:
    """Tokenize, parse as a program and evaluate; the program yields nil."""
    ast = parse_source(src, mode="program")

    if show_ast:
        print(dump_ast(ast), end="")

    if frame is None:
        frame = root_frame(source=src)

    return evaluate_with(ast, frame, source=src)

def repl_eval(src: str, frame: Frame, show_ast: bool=False) -> ErgValue:
    """Evaluate one interactive chunk against the session frame.

    Bindings made before a failing sub-expression stay in the frame.
    """
    ast = parse_source(src, mode="expressions")

    if show_ast:
        print(dump_ast(ast), end="")

    return evaluate_with(ast, frame, source=src)

def configure_logging(trace_parse: bool) -> None:
    if trace_parse or debug_parse_enabled():
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(name)s: %(message)s",
        )

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def main(argv: Optional[list[str]]=None) -> int:
    show_ast = False
    trace_parse = False
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--ast":
            show_ast = True
            continue

        if token == "--trace-parse":
            trace_parse = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    configure_logging(trace_parse)
    source = _load_source(arg or "-")

    try:
        run(source, show_ast=show_ast)
    except (LexError, ParseError, ErgolasRuntimeError) as exc:
        report_error(exc)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
