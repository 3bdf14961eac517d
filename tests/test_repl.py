import builtins
from collections.abc import Iterator

import pytest

from ember.ember_repl import start_repl


def feed(monkeypatch: pytest.MonkeyPatch, *lines: str) -> None:
    it: Iterator[str] = iter(lines)

    def fake_input(_: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)


def test_repl_quit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "quit")
    start_repl()
    assert "Exiting Ember REPL." in capsys.readouterr().out


def test_repl_exit_on_eof(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch)
    start_repl()
    assert capsys.readouterr().out.endswith("\nExiting Ember REPL.\n")


def test_repl_exit_on_keyboard_interrupt(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def interrupt(_: str) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", interrupt)
    start_repl()
    assert "Exiting Ember REPL." in capsys.readouterr().out


def test_repl_prints_ast(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "", "1 + 2", "exit")
    start_repl()
    out = capsys.readouterr().out
    assert (
        "Binary(operator='+', left=Number(value=1), right=Number(value=2))" in out
    )


def test_repl_reports_errors_and_continues(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "f(1", "x", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[error] >>> Token ')' expected, got end of input" in out
    assert "Identifier(name='x')" in out


def test_repl_reports_lex_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "'a", "quit")
    start_repl()
    assert "[error] >>> Unterminated character literal" in capsys.readouterr().out


def test_repl_toggles_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ":json", "true", ":json", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[ok] >>> JSON output on" in out
    assert '"kind": "boolean"' in out
    assert "[ok] >>> JSON output off" in out


def test_repl_toggles_tokens(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ":tokens", "a", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[ok] >>> Token output on" in out
    assert "[Token(IDENT, a)]" in out


def test_repl_max_depth(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "((1))", "quit")
    start_repl(max_depth=1)
    assert "[error] >>> Expression nested deeper than 1 levels" in capsys.readouterr().out


def test_repl_unexpected_exception_prints_traceback(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    class Broken:
        def __init__(self, *args: object, **kwargs: object) -> None:
            raise RuntimeError("kaput")

    monkeypatch.setattr("ember.ember_repl.Parser", Broken)
    feed(monkeypatch, "1", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[error] >>>" in out
    assert "RuntimeError: kaput" in out
