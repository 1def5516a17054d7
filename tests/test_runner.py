from __future__ import annotations

import io
import logging
import sys

import pytest

from tests.support.harness import (
    KstNull,
    KstNumber,
    ParseError,
    Session,
    UndeclaredVariableError,
    run_program,
)
from kustom.runner import _load_source, main
from kustom.utils import (
    DEBUG_PY_TRACE_ENV,
    LOG_LEVEL_ENV,
    configured_log_level,
    debug_py_trace_enabled,
    recursion_headroom,
    set_debug_py_trace,
)


@pytest.fixture(autouse=True)
def _restore_kustom_logger():
    logger = logging.getLogger("kustom")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


def test_run_returns_last_statement_value() -> None:
    assert run_program("1; 2; 3") == KstNumber(3)


def test_empty_program_is_null() -> None:
    assert isinstance(run_program(""), KstNull)


def test_each_run_gets_fresh_globals() -> None:
    run_program("tetapkan x: 1;")

    with pytest.raises(UndeclaredVariableError):
        run_program("x")


def test_session_keeps_bindings_between_runs() -> None:
    session = Session()
    session.run("tetapkan x: 1;")
    session.run("fungsi naik() { x += 1 }")
    session.run("naik()")

    assert session.run("x") == KstNumber(2)
    assert session.runs == 4


def test_session_reset_drops_bindings() -> None:
    session = Session()
    session.run("tetapkan x: 1;")
    old_env = session.env

    session.reset()

    assert session.env is not old_env
    assert session.runs == 0
    with pytest.raises(UndeclaredVariableError):
        session.run("x")


def test_parse_error_does_not_count_as_run(session: Session) -> None:
    with pytest.raises(ParseError):
        session.run("tetapkan ;")

    assert session.runs == 0
    assert session.run("tetapkan a: 2; a") == KstNumber(2)


def test_load_source_reads_existing_file(tmp_path) -> None:
    script = tmp_path / "skrip.kst"
    script.write_text("tetapkan a: 2;", encoding="utf-8")

    assert _load_source(str(script)) == "tetapkan a: 2;"


def test_load_source_falls_back_to_literal() -> None:
    assert _load_source("1 + 1") == "1 + 1"


def test_load_source_reads_stdin(monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("print(1)"))

    assert _load_source("-") == "print(1)"


def test_main_runs_literal_source(capsys) -> None:
    assert main(['print("halo", 1 + 2)']) == 0

    captured = capsys.readouterr()
    assert captured.out == "halo 3\n"
    assert captured.err == ""


def test_main_runs_file(tmp_path, capsys) -> None:
    script = tmp_path / "skrip.kst"
    script.write_text(
        "tetapkan total: 0;\n"
        "untuk (tetapkan i: 0; i < 3; i += 1) { total += i; }\n"
        "print(total)\n",
        encoding="utf-8",
    )

    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "3\n"


@pytest.mark.parametrize(
    "source, fragment",
    [
        pytest.param('"tanpa akhir', "Unterminated string", id="lex"),
        pytest.param("tetapkan ;", "Expected identifier", id="parse"),
        pytest.param("hilang", "Cannot resolve 'hilang'", id="runtime"),
    ],
)
def test_main_reports_errors(source: str, fragment: str, capsys) -> None:
    assert main([source]) == 1

    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert fragment in err


def test_main_rejects_extra_arguments(capsys) -> None:
    assert main(["1", "2"]) == 2
    assert "Unexpected argument" in capsys.readouterr().err


def test_main_verbose_enables_debug_logging() -> None:
    assert main(["--verbose", "1"]) == 0
    assert logging.getLogger("kustom").level == logging.DEBUG


def test_log_level_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "info")
    assert configured_log_level() == logging.INFO

    monkeypatch.setenv(LOG_LEVEL_ENV, "bukan-level")
    assert configured_log_level() == logging.WARNING


def test_py_trace_flag_round_trip(monkeypatch) -> None:
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)
    assert not debug_py_trace_enabled()

    set_debug_py_trace(True)
    assert debug_py_trace_enabled()

    set_debug_py_trace(False)
    assert not debug_py_trace_enabled()


def test_recursion_headroom_raises_then_restores() -> None:
    before = sys.getrecursionlimit()

    with recursion_headroom(before + 500):
        assert sys.getrecursionlimit() == before + 500
        with recursion_headroom(10):
            assert sys.getrecursionlimit() == before + 500

    assert sys.getrecursionlimit() == before
