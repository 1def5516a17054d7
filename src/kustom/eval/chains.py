from __future__ import annotations

import logging
from typing import Any, List

from lark import Tree

from ..runtime import (
    Environment,
    KstFn,
    KstValue,
    NativeFunction,
    NotCallableError,
    call_kstfn,
    call_native,
)
from ..tree import tree_children
from .common import EvalFunc

log = logging.getLogger(__name__)

def eval_args_node(args_node: Any, env: Environment, eval_func: EvalFunc) -> List[KstValue]:
    return [eval_func(arg, env) for arg in tree_children(args_node)]

def call_value(cal: KstValue, args: List[KstValue], env: Environment) -> KstValue:
    match cal:
        case NativeFunction():
            return call_native(cal, args, env)
        case KstFn():
            log.debug("call %s with %d argument(s)", cal.name, len(args))
            return call_kstfn(cal, args)
        case _:
            raise NotCallableError(cal)

def eval_call(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    """Arguments are evaluated left to right before the callee expression."""
    callee_node, args_node = n.children
    args = eval_args_node(args_node, env, eval_func)
    cal = eval_func(callee_node, env)

    return call_value(cal, args, env)
