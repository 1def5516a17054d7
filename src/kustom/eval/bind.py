from __future__ import annotations

from typing import Any

from lark import Tree

from ..runtime import Environment, InvalidAssignmentTargetError, KstNull, KstValue
from ..tree import ident_name, tree_label
from .common import EvalFunc
from .expr import apply_arith

_COMPOUND_OPS = {
    'plusassign': '+',
    'minusassign': '-',
}

def _target_name(target: Any, op: str) -> str:
    name = ident_name(target)
    if name is None:
        shape = tree_label(target) or type(target).__name__
        raise InvalidAssignmentTargetError(f"Invalid left-hand side in '{op}' assignment: {shape}")

    return name

def eval_assign(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    target, value_node = n.children
    name = _target_name(target, '=')

    return env.assign_var(name, eval_func(value_node, env))

def eval_compound_assign(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    """
    `x += e` / `x -= e`. Both sides are evaluated as numbers and the result is
    stored back into `x`. A non-number operand yields null and stores nothing.
    """
    target, value_node = n.children
    op = _COMPOUND_OPS[n.data]
    name = _target_name(target, op + '=')

    current = eval_func(target, env)
    delta = eval_func(value_node, env)
    result = apply_arith(op, current, delta)

    if isinstance(result, KstNull):
        return result

    return env.assign_var(name, result)
