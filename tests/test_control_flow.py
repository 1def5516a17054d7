from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (true) { r = 1; }
            r
        """
        ),
        ("number", 1),
        None,
        id="if-true",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (false) { r = 1; }
            r
        """
        ),
        ("number", 0),
        None,
        id="if-false-no-else",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (1 > 2) { r = 1; } lainnya { r = 2; }
            r
        """
        ),
        ("number", 2),
        None,
        id="if-else",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (false) { r = 1; }
            lainnyajika (true) { r = 2; }
            lainnya { r = 3; }
            r
        """
        ),
        ("number", 2),
        None,
        id="elif-taken-skips-else",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (false) { r = 1; }
            lainnyajika (false) { r = 2; }
            lainnyajika (false) { r = 3; }
            lainnya { r = 4; }
            r
        """
        ),
        ("number", 4),
        None,
        id="else-after-elifs",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (false) { r = 1; }
            lainnyajika (true) { r = r + 10; }
            lainnyajika (true) { r = r + 100; }
            r
        """
        ),
        ("number", 10),
        None,
        id="first-matching-elif-only",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (false) { r = 1; }
            lainnyajika (false) { r = 2; }
            r
        """
        ),
        ("number", 0),
        None,
        id="no-branch-taken",
    ),
    pytest.param("jika (true) { 5 }", ("null", None), None, id="if-yields-null"),
    pytest.param(
        dedent(
            """\
            jika (true) { tetapkan bocor: 7; }
            bocor
        """
        ),
        ("number", 7),
        None,
        id="branch-declaration-visible-after",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: "";
            jika (0) { r = "nol"; } lainnya { r = "salah"; }
            r
        """
        ),
        ("string", "salah"),
        None,
        id="zero-is-falsy",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: "";
            jika ("") { r = "isi"; } lainnya { r = "kosong"; }
            r
        """
        ),
        ("string", "kosong"),
        None,
        id="empty-string-is-falsy",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: "";
            jika ("a") { r = "isi"; } lainnya { r = "kosong"; }
            r
        """
        ),
        ("string", "isi"),
        None,
        id="non-empty-string-is-truthy",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 1;
            jika (null) { r = 2; }
            r
        """
        ),
        ("number", 1),
        None,
        id="null-is-falsy",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 1;
            jika ({}) { r = 2; }
            r
        """
        ),
        ("number", 2),
        None,
        id="object-is-truthy",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 1;
            jika (0 / 0) { r = 2; }
            r
        """
        ),
        ("number", 1),
        None,
        id="nan-is-falsy",
    ),
    pytest.param(
        dedent(
            """\
            tetapkan r: 0;
            jika (true) {
                jika (false) { r = 1; } lainnya { r = 2; }
            }
            r
        """
        ),
        ("number", 2),
        None,
        id="nested-if",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_conditions_stop_at_first_taken_branch(recorder) -> None:
    session, seen = recorder
    session.run(
        dedent(
            """\
            jika (catat(false)) { }
            lainnyajika (catat(true)) { }
            lainnyajika (catat(true)) { }
        """
        )
    )

    assert [repr(v) for v in seen] == ["false", "true"]
