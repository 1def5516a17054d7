from __future__ import annotations

import importlib
import logging
from typing import Callable, List

from .types import (
    KstNull, KstNumber, KstString, KstBool, KstObject, KstFn, NativeFunction,
    KstValue, Environment, Binding, Builtins, NativeFn,
    KustomRuntimeError, RedeclarationError, UndeclaredVariableError, ConstAssignmentError,
    InvalidAssignmentTargetError, NotCallableError, UnsupportedNodeError, EvaluationDepthError,
    is_kst_value, ensure_kst_value,
)

log = logging.getLogger(__name__)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("kustom.stdlib")
    _STDLIB_INITIALIZED = True

def register_native(name: str) -> Callable[[NativeFn], NativeFn]:
    def dec(fn: NativeFn) -> NativeFn:
        Builtins.native_functions[name] = NativeFunction(name=name, fn=fn)
        log.debug("registered native function %s", name)
        return fn

    return dec

def make_global_env() -> Environment:
    """Root frame of a session: language constants plus every registered native."""
    init_stdlib()
    env = Environment()

    env.declare_var("true", KstBool(True), constant=True)
    env.declare_var("false", KstBool(False), constant=True)
    env.declare_var("null", KstNull(), constant=True)

    for name, native in Builtins.native_functions.items():
        env.declare_var(name, native, constant=True)

    return env

def call_native(fn: NativeFunction, args: List[KstValue], env: Environment) -> KstValue:
    return ensure_kst_value(fn.fn(args, env))

def call_kstfn(fn: KstFn, args: List[KstValue]) -> KstValue:
    """
    Invoke a user function:
    - the call frame is a child of the *declaring* environment, not the caller's
    - parameters bind positionally as mutable; missing ones bind null, extras are dropped
    - the value of the last body statement is the result
    """
    from .evaluator import eval_node  # local import to avoid cycle

    scope = Environment(parent=fn.env)

    for i, name in enumerate(fn.params):
        scope.declare_var(name, args[i] if i < len(args) else KstNull(), constant=False)

    if len(args) > len(fn.params):
        log.debug("%s: dropping %d extra argument(s)", fn.name, len(args) - len(fn.params))

    result: KstValue = KstNull()

    for stmt in fn.body.children:
        result = eval_node(stmt, scope)

    return result
