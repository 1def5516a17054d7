from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from .evaluator import eval_expr
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, Parser, parse_tokens
from .runtime import Environment, KstValue, KustomRuntimeError, make_global_env
from .utils import setup_logging

log = logging.getLogger(__name__)


class Session:
    """
    One interpreter session: a single global environment and a single parser
    that persist across `run` calls (the REPL feeds it one entry at a time).
    """

    def __init__(self) -> None:
        self._env = make_global_env()
        self._parser = Parser()
        self.runs = 0

    @property
    def env(self) -> Environment:
        return self._env

    def parse(self, src: str):
        return parse_tokens(tokenize(src), self._parser)

    def run(self, src: str) -> KstValue:
        ast = self.parse(src)
        self.runs += 1
        log.debug("session run #%d: %d top-level statement(s)", self.runs, len(ast.children))

        return eval_expr(ast, self._env)

    def reset(self) -> None:
        self._env = make_global_env()
        self.runs = 0


def run(src: str) -> KstValue:
    """Run source in a fresh session and return the last statement's value."""
    return Session().run(src)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing file => read its contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:  # too long to be a path
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[list[str]] = None) -> int:
    arg = None
    verbose = False

    for token in (sys.argv[1:] if argv is None else argv):
        if token in ("-v", "--verbose"):
            verbose = True
            continue

        if arg is None:
            arg = token
        else:
            print(f"Unexpected argument: {token}", file=sys.stderr)
            return 2

    setup_logging(logging.DEBUG if verbose else None)

    if arg is None:
        from .repl import repl  # prompt_toolkit is only needed interactively
        repl()
        return 0

    source = _load_source(arg)

    try:
        run(source)
    except (LexError, ParseError, KustomRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
