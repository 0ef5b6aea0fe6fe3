"""Interactive REPL for Ergolas, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .lexer import LexError
from .parser_rd import ParseError
from .repl_highlight import ErgolasLexer
from .runner import report_error, repl_eval
from .runtime import ErgNil, ErgolasRuntimeError, Frame, root_frame
from .utils import debug_py_trace_enabled

# Invisible characters pasted from rich text; the tokenizer rejects them.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# name -> (description, argument hint)
_SLASH_CMDS = {
    "/ast": ("Toggle printing the AST of each input", "[on|off]"),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class ReplState:
    """Session state owned by the loop: the environment and display toggles."""

    def __init__(self) -> None:
        self.frame: Frame = root_frame(source="")
        self.show_ast = False

    def reset(self) -> None:
        self.frame = root_frame(source="")


class _SlashCompleter(Completer):
    """Complete slash command names typed at the start of the line."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, _hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _toggle(arg: str, current: bool) -> bool | None:
    """Resolve an [on|off] argument; empty toggles, anything else is None."""
    arg = arg.lower()
    if arg in _ON:
        return True
    if arg in _OFF:
        return False
    if arg == "":
        return not current
    return None


def handle_slash(line: str, state: ReplState) -> bool:
    """Run a slash command; False means the line is source to evaluate."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/ast":
        value = _toggle(arg, state.show_ast)
        if value is None:
            print("Usage: /ast [on|off]", file=sys.stderr)
            return True

        state.show_ast = value
        print(f"AST dump: {'on' if value else 'off'}")
        return True

    if cmd == "/py-traceback":
        value = _toggle(arg, debug_py_trace_enabled())
        if value is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        if value:
            os.environ["ERGOLAS_DEBUG_PY_TRACE"] = "1"
        else:
            os.environ.pop("ERGOLAS_DEBUG_PY_TRACE", None)

        print(f"Python traceback: {'on' if value else 'off'}")
        return True

    if cmd == "/reset":
        state.reset()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    return _INVISIBLE_RE.sub("", text)


def process_input(text: str, state: ReplState) -> None:
    """Evaluate one line; errors are reported and the session carries on."""
    try:
        result = repl_eval(text, state.frame, show_ast=state.show_ast)
    except (ParseError, LexError, ErgolasRuntimeError) as exc:
        report_error(exc)
        return

    if not isinstance(result, ErgNil):
        print_formatted_text(FormattedText([("ansigreen", repr(result))]))


def repl() -> None:
    """Read lines until EOF, evaluating each against one session frame."""
    state = ReplState()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=ErgolasLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print_formatted_text(FormattedText([
        ("italic", "ergolas repl: type 'exit <number>' or press Ctrl-D to quit, / for commands"),
    ]))

    while True:
        try:
            text = session.prompt(FormattedText([("ansiyellow", "> ")]))
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        process_input(text, state)


if __name__ == "__main__":
    repl()
