from __future__ import annotations

from typing import Callable, Optional

from lark import Token, Tree

from .runtime import (
    Environment,
    EvaluationDepthError,
    KstValue,
    KustomRuntimeError,
    UnsupportedNodeError,
    make_global_env,
)
from .tree import Node, is_token, node_position
from .utils import recursion_headroom

from .eval.bind import eval_assign, eval_compound_assign
from .eval.blocks import eval_program
from .eval.chains import eval_call
from .eval.common import EvalFunc, token_number, token_string
from .eval.expr import eval_binop, eval_compare, eval_logical
from .eval.fn import eval_fn_decl
from .eval.let import eval_var_decl
from .eval.loops import eval_for_stmt, eval_if_stmt
from .eval.objects import eval_index, eval_member, eval_object


def _maybe_attach_location(exc: KustomRuntimeError, node: Node) -> None:
    if exc.kst_meta is not None:
        return

    line, column = node_position(node)
    if line is None:
        return

    exc.kst_meta = (line, column)

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment]=None) -> KstValue:
    """Evaluate a tree, creating a fresh global environment when none is given."""
    if env is None:
        env = make_global_env()

    with recursion_headroom():
        try:
            return eval_node(ast, env)
        except RecursionError:
            raise EvaluationDepthError("Maximum evaluation depth exceeded") from None

def evaluate(node: Node, env: Environment) -> KstValue:
    return eval_expr(node, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> KstValue:
    """Dispatch one node. Handlers receive `eval_node` back to recurse into children."""
    try:
        if is_token(n):
            return _eval_token(n, env)

        if not isinstance(n, Tree):
            raise UnsupportedNodeError(type(n).__name__)

        handler = _NODE_DISPATCH.get(n.data)
        if handler is None:
            raise UnsupportedNodeError(str(n.data))

        return handler(n, env, eval_node)
    except KustomRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

# ---------------- Tokens ----------------

def _eval_token(t: Token, env: Environment) -> KstValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler is None:
        raise UnsupportedNodeError(f"token {t.type}")

    return handler(t, env)

def _lookup_ident(t: Token, env: Environment) -> KstValue:
    return env.lookup_var(str(t.value))

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[str, Callable[[Tree, Environment, EvalFunc], KstValue]] = {
    'program': eval_program,
    'vardecl': eval_var_decl,
    'fndecl': eval_fn_decl,
    'ifstmt': eval_if_stmt,
    'forstmt': eval_for_stmt,
    'assign': eval_assign,
    'plusassign': eval_compound_assign,
    'minusassign': eval_compound_assign,
    'binop': eval_binop,
    'gt': eval_compare,
    'gte': eval_compare,
    'lt': eval_compare,
    'lte': eval_compare,
    'eq': eval_compare,
    'neq': eval_compare,
    'and': eval_logical,
    'or': eval_logical,
    'call': eval_call,
    'object': eval_object,
    'member': eval_member,
    'index': eval_index,
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Environment], KstValue]] = {
    'NUMBER': token_number,
    'STRING': token_string,
    'IDENT': _lookup_ident,
}
