from __future__ import annotations

import sys
from textwrap import dedent

import pytest
from lark import Token, Tree

from tests.support.harness import (
    ConstAssignmentError,
    EvaluationDepthError,
    InvalidAssignmentTargetError,
    KustomRuntimeError,
    LexError,
    NotCallableError,
    ParseError,
    RedeclarationError,
    Session,
    UndeclaredVariableError,
    UnsupportedNodeError,
    run_program,
    run_runtime_case,
)
from kustom.evaluator import eval_expr
from kustom.runtime import Environment, make_global_env
from kustom.tree import make_meta

SCENARIOS = [
    pytest.param('tetapkan s: "tanpa akhir;', None, LexError, id="lex-unterminated-string"),
    pytest.param("tetapkan x: 1 @ 2;", None, LexError, id="lex-bad-character"),
    pytest.param("tetapkan x: ;", None, ParseError, id="parse-missing-init"),
    pytest.param("jika (true) { 1 ", None, ParseError, id="parse-unterminated-block"),
    pytest.param("tetapkan a: 1; tetapkan a: 2;", None, RedeclarationError, id="redeclare"),
    pytest.param("konstan a: 1; a = 2", None, ConstAssignmentError, id="const-assign"),
    pytest.param("tidak_ada", None, UndeclaredVariableError, id="undeclared"),
    pytest.param("{ a: 1 } = 2", None, InvalidAssignmentTargetError, id="object-target"),
    pytest.param(
        "tetapkan o: { a: 1 }; o.a = 2",
        None,
        InvalidAssignmentTargetError,
        id="member-target-not-assignable",
    ),
    pytest.param("f(1) = 2", None, InvalidAssignmentTargetError, id="call-target"),
    pytest.param("1()", None, NotCallableError, id="not-callable"),
    pytest.param(
        dedent(
            """\
            fungsi tanpa_akhir(n) { tanpa_akhir(n + 1) }
            tanpa_akhir(0)
        """
        ),
        None,
        EvaluationDepthError,
        id="runaway-recursion",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_error_handling(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_runtime_errors_share_base_class() -> None:
    for exc_type in (
        ConstAssignmentError,
        EvaluationDepthError,
        InvalidAssignmentTargetError,
        NotCallableError,
        RedeclarationError,
        UndeclaredVariableError,
        UnsupportedNodeError,
    ):
        assert issubclass(exc_type, KustomRuntimeError)


def test_error_message_names_variable() -> None:
    with pytest.raises(UndeclaredVariableError) as exc_info:
        run_program("tetapkan a: 1;\nb")

    err = exc_info.value
    assert err.name == "b"
    assert "'b'" in str(err)


def test_runtime_error_reports_location() -> None:
    with pytest.raises(UndeclaredVariableError) as exc_info:
        run_program("tetapkan a: 1;\n  a + b")

    assert exc_info.value.kst_meta == (2, 7)
    assert str(exc_info.value).endswith("(line 2, col 7)")


def test_location_is_innermost_node() -> None:
    with pytest.raises(ConstAssignmentError) as exc_info:
        run_program(
            dedent(
                """\
                konstan k: 1;
                fungsi f() {
                    k = 2
                }
                f()
            """
            )
        )

    line, _col = exc_info.value.kst_meta
    assert line == 3


def test_unknown_tree_label_is_unsupported() -> None:
    bogus = Tree("bogus", [], make_meta(1, 1))

    with pytest.raises(UnsupportedNodeError) as exc_info:
        eval_expr(bogus, make_global_env())

    assert exc_info.value.label == "bogus"
    assert exc_info.value.kst_meta == (1, 1)


def test_unknown_token_kind_is_unsupported() -> None:
    with pytest.raises(UnsupportedNodeError):
        eval_expr(Token("WEIRD", "?"), Environment())


def test_non_node_value_is_unsupported() -> None:
    with pytest.raises(UnsupportedNodeError):
        eval_expr(Tree("program", [42]))


def test_recursion_limit_restored_after_runaway_recursion() -> None:
    before = sys.getrecursionlimit()

    with pytest.raises(EvaluationDepthError):
        run_program("fungsi f(n) { f(n + 1) } f(0)")

    assert sys.getrecursionlimit() == before


def test_failed_statement_keeps_earlier_effects() -> None:
    session = Session()
    with pytest.raises(UndeclaredVariableError):
        session.run("tetapkan a: 1; hilang; tetapkan b: 2;")

    assert session.env.lookup_var("a").value == 1
    assert not session.env.has_local("b")
