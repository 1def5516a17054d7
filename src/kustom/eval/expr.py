from __future__ import annotations

import math
import operator
from typing import Callable, Container, Dict, List

from lark import Tree

from ..runtime import Environment, KstBool, KstNull, KstNumber, KstValue, KustomRuntimeError
from ..tree import Node
from .common import EvalFunc

# Type mismatches degrade to null instead of raising; callers see KstNull.

def _ieee_div(lhs: float, rhs: float) -> float:
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs

def _ieee_mod(lhs: float, rhs: float) -> float:
    if rhs == 0 or math.isinf(lhs):
        return math.nan
    return math.fmod(lhs, rhs)

_ARITH_OPS: Dict[str, Callable[[float, float], float]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': _ieee_div,
    '%': _ieee_mod,
}

_COMPARE_OPS: Dict[str, Callable[[float, float], bool]] = {
    'gt': operator.gt,
    'gte': operator.ge,
    'lt': operator.lt,
    'lte': operator.le,
    'eq': operator.eq,
    'neq': operator.ne,
}

_LOGICAL_OPS: Dict[str, Callable[[bool, bool], bool]] = {
    'and': lambda a, b: a and b,
    'or': lambda a, b: a or b,
}

def apply_arith(op: str, lhs: KstValue, rhs: KstValue) -> KstValue:
    fn = _ARITH_OPS.get(op)
    if fn is None:
        raise KustomRuntimeError(f"Unknown arithmetic operator {op!r}")

    match lhs, rhs:
        case KstNumber(value=a), KstNumber(value=b):
            return KstNumber(fn(a, b))
        case _:
            return KstNull()

def _compare(label: str, lhs: KstValue, rhs: KstValue) -> KstValue:
    match lhs, rhs:
        case KstNumber(value=a), KstNumber(value=b):
            return KstBool(_COMPARE_OPS[label](a, b))
        case _:
            return KstNull()

def _logical(label: str, lhs: KstValue, rhs: KstValue) -> KstValue:
    match lhs, rhs:
        case KstBool(value=a), KstBool(value=b):
            return KstBool(_LOGICAL_OPS[label](a, b))
        case _:
            return KstNull()

def _fold_left_chain(
    n: Tree,
    env: Environment,
    eval_func: EvalFunc,
    labels: Container[str],
    step: Callable[[Tree, KstValue, KstValue], KstValue],
) -> KstValue:
    """
    Walk a left-deep chain like `1 + 2 + ... + k` with a loop. Only the
    leftmost operand and each right operand go through `eval_func`, so a long
    flat chain costs no extra stack. Operands still run left to right.
    """
    spine: List[Tree] = []
    cur: Node = n

    while isinstance(cur, Tree) and cur.data in labels:
        spine.append(cur)
        cur = cur.children[0]

    acc = eval_func(cur, env)

    for node in reversed(spine):
        acc = step(node, acc, eval_func(node.children[-1], env))

    return acc

def eval_binop(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    return _fold_left_chain(
        n, env, eval_func, ('binop',),
        lambda node, lhs, rhs: apply_arith(str(node.children[1].value), lhs, rhs),
    )

def eval_compare(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    return _fold_left_chain(
        n, env, eval_func, _COMPARE_OPS,
        lambda node, lhs, rhs: _compare(node.data, lhs, rhs),
    )

def eval_logical(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    """`&&` / `||`: both operands are always evaluated, there is no short-circuit."""
    return _fold_left_chain(
        n, env, eval_func, _LOGICAL_OPS,
        lambda node, lhs, rhs: _logical(node.data, lhs, rhs),
    )
