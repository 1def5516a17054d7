from __future__ import annotations

from lark import Tree

from ..runtime import Environment, KstNull, KstValue
from ..tree import token_kind
from .common import EvalFunc, expect_ident_token as _expect_ident_token

def eval_var_decl(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    """`tetapkan x: e;` / `konstan x: e;`. An absent initializer declares null."""
    name_node, keyword, value_node = n.children
    name = _expect_ident_token(name_node, "Declared name")
    value = eval_func(value_node, env) if value_node is not None else KstNull()

    return env.declare_var(name, value, constant=token_kind(keyword) == 'CONST')
