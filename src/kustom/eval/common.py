from __future__ import annotations

from typing import Any, Callable

from lark import Token

from ..runtime import Environment, KstNumber, KstString, KstValue, KustomRuntimeError
from ..tree import Node, ident_name

EvalFunc = Callable[[Node, Environment], KstValue]

def expect_ident_token(node: Any, context: str) -> str:
    name = ident_name(node)
    if name is not None:
        return name

    raise KustomRuntimeError(f"{context} must be an identifier")

def token_number(token: Token, _: Any) -> KstNumber:
    return KstNumber(float(token.value))

def token_string(token: Token, _: Any) -> KstString:
    return KstString(str(token.value))

def stringify(value: Any) -> str:
    match value:
        case KstString(value=s):
            return s
        case None:
            return "null"
        case _:
            return repr(value)
