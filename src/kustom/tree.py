"""Shared helpers for working with the Lark Tree/Token nodes that make up the AST."""
from __future__ import annotations

from typing import Any, List, Optional

from lark import Token, Tree
from lark.tree import Meta
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Tree | Token


def make_meta(line: int, column: int) -> Meta:
    meta = Meta()
    meta.line = line
    meta.column = column
    meta.empty = False
    return meta

def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Any]:
    if not is_tree(node):
        return []

    return list(node.children)

def node_position(node: Any) -> tuple[Optional[int], Optional[int]]:
    """Line/column of a node, if the parser recorded one."""
    if is_token(node):
        return getattr(node, "line", None), getattr(node, "column", None)

    if is_tree(node):
        meta = node.meta
        if not getattr(meta, "empty", True):
            return getattr(meta, "line", None), getattr(meta, "column", None)

    return None, None

def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None
    return str(node.type)

def ident_name(node: Any) -> Optional[str]:
    if token_kind(node) == 'IDENT':
        return str(node.value)

    return None
