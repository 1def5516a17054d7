from __future__ import annotations

from typing import Any, List

from lark import Tree

from ..runtime import Environment, KstFn, KstValue, KustomRuntimeError
from ..tree import ident_name, tree_children, tree_label
from .common import EvalFunc, expect_ident_token as _expect_ident_token

def extract_param_names(params_node: Any) -> List[str]:
    if params_node is None:
        return []

    names: List[str] = []

    for p in tree_children(params_node):
        name = ident_name(p)

        if name is None:
            raise KustomRuntimeError(f"Unsupported parameter node in function declaration: {p!r}")
        names.append(name)

    return names

def eval_fn_decl(n: Tree, env: Environment, _eval_func: EvalFunc) -> KstValue:
    """Declarations only capture `env`; the body runs when the function is called."""
    children = n.children

    if len(children) != 3 or tree_label(children[2]) != 'body':
        raise KustomRuntimeError("Malformed function declaration")

    name_node, params_node, body_node = children
    name = _expect_ident_token(name_node, "Function name")
    fn_value = KstFn(name=name, params=extract_param_names(params_node), body=body_node, env=env)

    return env.declare_var(name, fn_value, constant=True)
