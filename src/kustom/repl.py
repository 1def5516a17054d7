"""Interactive REPL for Kustom, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
import traceback
from typing import Callable, Dict, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError, Lexer
from .parser_rd import ParseError
from .repl_highlight import KustomLexer
from .runner import Session
from .runtime import make_global_env
from .token_types import TT
from .types import KstNull, KustomRuntimeError
from .utils import debug_py_trace_enabled, set_debug_py_trace

BANNER = "Bahasa Kustom v0.1.0 (Ctrl-D atau 'exit' untuk keluar, / untuk perintah)"

# Pasted text often carries these; none of them is valid Kustom source.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

_OPENERS = frozenset({TT.LPAR, TT.LBRACE, TT.LSQB})
_CLOSERS = frozenset({TT.RPAR, TT.RBRACE, TT.RSQB})

_ON_WORDS = ("on", "1", "true", "yes")
_OFF_WORDS = ("off", "0", "false", "no")


class ExitRepl(Exception):
    """Raised by `/exit` and `exit` to leave the loop."""


def open_depth(text: str) -> int:
    """Bracket depth left open at the end of *text* (0 when balanced)."""
    lexer = Lexer(text)
    try:
        tokens = lexer.tokenize()
    except LexError:
        tokens = lexer.tokens

    depth = 0
    for tok in tokens:
        if tok.type in _OPENERS:
            depth += 1
        elif tok.type in _CLOSERS and depth:
            depth -= 1

    return depth

# ---------------- Commands ----------------

def _cmd_exit(_arg: str, _session: Session) -> None:
    raise ExitRepl()

def _cmd_clear(_arg: str, _session: Session) -> None:
    clear()

def _cmd_reset(_arg: str, session: Session) -> None:
    session.reset()
    print("Environment reset.")

def _cmd_vars(arg: str, session: Session) -> None:
    env = session.env

    if arg:
        if not env.has_local(arg):
            print(f"{arg} is not defined", file=sys.stderr)
            return
        names = [arg]
    else:
        builtin = set(make_global_env().names())
        names = sorted(name for name in env.names() if name not in builtin)

    for name in names:
        print(f"{name} = {env.lookup_var(name)!r}")

def _cmd_py_traceback(arg: str, _session: Session) -> None:
    word = arg.lower()

    if word in _ON_WORDS:
        set_debug_py_trace(True)
    elif word in _OFF_WORDS:
        set_debug_py_trace(False)
    elif not word:
        set_debug_py_trace(not debug_py_trace_enabled())
    else:
        print("Usage: /py-traceback [on|off]", file=sys.stderr)
        return

    print(f"Python traceback: {'on' if debug_py_trace_enabled() else 'off'}")

# name => (handler, description)
_COMMANDS: Dict[str, Tuple[Callable[[str, Session], None], str]] = {
    "/clear": (_cmd_clear, "Clear the terminal screen"),
    "/exit": (_cmd_exit, "Leave the REPL"),
    "/py-traceback": (_cmd_py_traceback, "Toggle Python traceback on errors [on|off]"),
    "/reset": (_cmd_reset, "Forget every binding made in this session"),
    "/vars": (_cmd_vars, "List the bindings made in this session [name]"),
}

# Bare words accepted without the slash.
_BARE_WORDS = {"exit": "/exit", "clear": "/clear"}


class _CommandCompleter(Completer):
    """Offer slash commands while the buffer is a lone `/word`."""

    def get_completions(self, document, complete_event):
        typed = document.text_before_cursor
        if not typed.startswith("/") or " " in typed:
            return

        for name, (_handler, desc) in _COMMANDS.items():
            if name.startswith(typed):
                yield Completion(name, start_position=-len(typed), display_meta=desc)


def handle_command(line: str, session: Session) -> bool:
    """Run a REPL command if *line* is one. Returns True if handled."""
    stripped = line.strip()
    name, _, arg = stripped.partition(" ")
    name = _BARE_WORDS.get(stripped, name)

    if not name.startswith("/"):
        return False

    entry = _COMMANDS.get(name)
    if entry is None:
        print(f"Unknown command: {name}", file=sys.stderr)
        return True

    handler, _desc = entry
    handler(arg.strip(), session)
    return True

# ---------------- Evaluation ----------------

def _normalize(text: str) -> str:
    return _INVISIBLE_RE.sub("", text)


def eval_entry(text: str, session: Session) -> None:
    """Evaluate one REPL entry, printing its value or the error."""
    try:
        result = session.run(text)
    except (LexError, ParseError, KustomRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            traceback.print_tb(exc.__traceback__, file=sys.stderr)
        return

    if not isinstance(result, KstNull):
        print(repr(result))


def _key_bindings() -> KeyBindings:
    bindings = KeyBindings()

    @bindings.add("enter")
    def _submit_or_continue(event):
        buf = event.app.current_buffer
        depth = open_depth(buf.text)

        # an open block or object literal keeps the entry going
        if depth > 0:
            buf.insert_text("\n" + "    " * depth)
        else:
            buf.validate_and_handle()

    return bindings


def repl() -> None:
    """Read-eval-print loop over a single persistent Session."""
    session = Session()
    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=KustomLexer(),
        completer=_CommandCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation="... ",
    )

    print(BANNER)

    while True:
        try:
            text = _normalize(prompt.prompt("$ "))
        except EOFError:
            print()
            return
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        if not text.strip():
            continue

        try:
            if handle_command(text, session):
                continue
        except ExitRepl:
            return

        eval_entry(text, session)
