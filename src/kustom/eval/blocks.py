from __future__ import annotations

from typing import Any

from lark import Tree

from ..runtime import Environment, KstNull, KstValue
from .common import EvalFunc

def eval_program(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    """Run a stmt list in `env`, returning the last value."""
    result: KstValue = KstNull()

    for child in n.children:
        result = eval_func(child, env)

    return result

def eval_body(body: Any, env: Environment, eval_func: EvalFunc) -> None:
    """Branch and loop bodies run in the enclosing frame; no new scope is opened."""
    if body is None:
        return

    for stmt in body.children:
        eval_func(stmt, env)
