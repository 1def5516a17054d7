from __future__ import annotations

from lark import Tree

from ..runtime import Environment, KstNull, KstObject, KstString, KstValue, KustomRuntimeError
from ..tree import tree_children, tree_label
from .common import EvalFunc, expect_ident_token as _expect_ident_token

def eval_object(n: Tree, env: Environment, eval_func: EvalFunc) -> KstObject:
    """Build an object literal; `{ a }` is shorthand for `{ a: a }`."""
    slots: dict[str, KstValue] = {}

    for prop in tree_children(n):
        if tree_label(prop) != 'property':
            raise KustomRuntimeError(f"Malformed object literal entry: {prop!r}")

        key_node, value_node = prop.children
        key = _expect_ident_token(key_node, "Object key")

        if value_node is None:
            slots[key] = env.lookup_var(key)
        else:
            slots[key] = eval_func(value_node, env)

    return KstObject(slots)

def get_slot(recv: KstValue, key: KstValue) -> KstValue:
    match recv, key:
        case KstObject(slots=slots), KstString(value=name):
            return slots.get(name, KstNull())
        case _:
            return KstNull()

def eval_member(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    obj_node, prop_tok = n.children
    recv = eval_func(obj_node, env)

    return get_slot(recv, KstString(_expect_ident_token(prop_tok, "Property name")))

def eval_index(n: Tree, env: Environment, eval_func: EvalFunc) -> KstValue:
    obj_node, key_node = n.children
    recv = eval_func(obj_node, env)
    key = eval_func(key_node, env)

    return get_slot(recv, key)
