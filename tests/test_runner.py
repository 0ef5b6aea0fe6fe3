from __future__ import annotations

import io
import logging

import pytest

from tests.support.harness import ErgNil, LexError, ParseError, run_program
from ergolas.runner import _load_source, configure_logging, main


def test_run_program_yields_nil(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_program("x := 2\nprintln (x * 21)") == ErgNil()
    assert capsys.readouterr().out == "42\n"


def test_run_program_rejects_trailing_brace() -> None:
    with pytest.raises(ParseError) as exc_info:
        run_program("println 1 }")
    assert (exc_info.value.line, exc_info.value.column) == (1, 11)


def test_run_program_propagates_lex_errors() -> None:
    with pytest.raises(LexError):
        run_program("println @")


def test_run_program_prints_ast(capsys: pytest.CaptureFixture[str]) -> None:
    run_program("x := 1", show_ast=True)
    assert capsys.readouterr().out == (
        "- Program\n"
        "  - Binary\n"
        '    - Identifier { Value: "x" }\n'
        '    - Operator { Value: ":=" }\n'
        '    - Integer { Value: "1" }\n'
    )


def test_main_runs_literal_source(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(['println "hi"']) == 0
    assert capsys.readouterr().out == "hi\n"


def test_main_runs_file(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    script = tmp_path / "hello.erg"
    script.write_text('greeting := "hello"\nprintln greeting ", world"\n', encoding="utf-8")

    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "hello, world\n"


def test_main_ast_flag(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--ast", "println 1"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("- Program\n  - FunctionCall\n")
    assert out.endswith("1\n")


@pytest.mark.parametrize(
    "source, message",
    [
        pytest.param("1 +", "Error: [1:4] expected value but got end of input", id="parse"),
        pytest.param("1 @ 2", "Error: [1:3] unexpected character", id="lex"),
        pytest.param("nope", 'Error: unbound variable "nope" (line 1, col 1)', id="runtime"),
    ],
)
def test_main_reports_errors(source: str, message: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([source]) == 1
    assert capsys.readouterr().err.splitlines()[0] == message


def test_main_prints_python_traceback_when_enabled(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("ERGOLAS_DEBUG_PY_TRACE", "1")
    assert main(["1 / 0"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: integer division by zero")
    assert "Python traceback:" in err


def test_main_exit_builtin_propagates() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["exit 7"])
    assert exc_info.value.code == 7


def test_main_rejects_extra_arguments() -> None:
    with pytest.raises(SystemExit):
        main(["a", "b"])


def test_load_source_reads_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("println 1\n"))
    assert _load_source("-") == "println 1\n"


def test_load_source_empty_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    with pytest.raises(SystemExit):
        _load_source(None)


def test_load_source_literal_fallback(tmp_path) -> None:
    assert _load_source(str(tmp_path / "missing.erg")) == str(tmp_path / "missing.erg")


def test_configure_logging_leaves_parser_quiet_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ERGOLAS_DEBUG_PARSE", raising=False)
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

    configure_logging(False)
    assert calls == []

    configure_logging(True)
    assert calls and calls[0]["level"] == logging.DEBUG


def test_configure_logging_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERGOLAS_DEBUG_PARSE", "1")
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

    configure_logging(False)
    assert len(calls) == 1
