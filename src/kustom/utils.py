"""Environment-driven settings, logging setup and recursion headroom shared by the runner and REPL."""
from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

DEBUG_PY_TRACE_ENV = "KUSTOM_DEBUG_PY_TRACE"
LOG_LEVEL_ENV = "KUSTOM_LOG_LEVEL"

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}

def debug_py_trace_enabled() -> bool:
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in _TRUTHY_FLAGS

def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_ENV, None)

def configured_log_level(default: str = "WARNING") -> int:
    name = os.environ.get(LOG_LEVEL_ENV, default).strip().upper()
    level = logging.getLevelName(name)

    return level if isinstance(level, int) else logging.WARNING

def setup_logging(level: Optional[int] = None) -> None:
    """
    Configure the `kustom` logger once. Records go to stderr so they never mix
    with program output on stdout.
    """
    logger = logging.getLogger("kustom")
    logger.setLevel(configured_log_level() if level is None else level)

    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)

# Python frames allowed while parsing or evaluating. One level of Kustom nesting
# costs roughly a dozen frames, so this admits programs about a thousand deep.
RECURSION_LIMIT = 20_000

@contextmanager
def recursion_headroom(limit: int = RECURSION_LIMIT) -> Iterator[None]:
    """Raise the interpreter recursion limit for the duration of the block."""
    previous = sys.getrecursionlimit()
    if previous >= limit:
        yield
        return

    sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
