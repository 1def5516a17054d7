from __future__ import annotations

from lark import Tree

from ..runtime import Environment, KstNull, KstValue, KustomRuntimeError
from ..tree import tree_children, tree_label
from .blocks import eval_body
from .common import EvalFunc
from .helpers import is_truthy as _is_truthy

def _else_body(else_node: Tree | None) -> Tree | None:
    if else_node is None:
        return None

    if tree_label(else_node) != 'elsestmt':
        raise KustomRuntimeError("Malformed else branch")

    return else_node.children[0]

def eval_elif_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> bool:
    """Run one elif; returns True once it (or its own else) has taken a branch."""
    cond_node, body_node, else_node = n.children

    if _is_truthy(eval_func(cond_node, env)):
        eval_body(body_node, env, eval_func)
        return True

    if else_node is not None:
        eval_body(_else_body(else_node), env, eval_func)
        return True

    return False

def eval_if_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    cond_node, body_node, elifs_node, else_node = n.children

    if _is_truthy(eval_func(cond_node, env)):
        eval_body(body_node, env, eval_func)
        return KstNull()

    if elifs_node is not None:
        for clause in tree_children(elifs_node):
            if eval_elif_stmt(clause, env, eval_func):
                break
        return KstNull()

    if else_node is not None:
        eval_body(_else_body(else_node), env, eval_func)

    return KstNull()

def eval_for_stmt(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    """
    C-style loop. The initializer runs in the current frame, so the loop
    variable outlives the loop; body and increment share that frame too.
    """
    init_node, cond_node, incr_node, body_node = n.children

    eval_func(init_node, env)

    while _is_truthy(eval_func(cond_node, env)):
        eval_body(body_node, env, eval_func)
        eval_func(incr_node, env)

    return KstNull()
