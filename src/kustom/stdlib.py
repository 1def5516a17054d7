from __future__ import annotations

import time
from typing import List

from .eval.common import stringify
from .runtime import register_native
from .types import Environment, KstNull, KstNumber, KstObject, KstString, KstValue

@register_native("print")
def std_print(args: List[KstValue], _env: Environment) -> KstValue:
    print(" ".join(stringify(arg) for arg in args))
    return KstNull()

@register_native("time")
def std_time(_args: List[KstValue], _env: Environment) -> KstValue:
    return KstNumber(float(time.time_ns() // 1_000_000))

@register_native("len")
def std_len(args: List[KstValue], _env: Environment) -> KstValue:
    match args:
        case [KstString(value=s), *_]:
            return KstNumber(float(len(s)))
        case [KstObject(slots=slots), *_]:
            return KstNumber(float(len(slots)))
        case _:
            return KstNull()

@register_native("str")
def std_str(args: List[KstValue], _env: Environment) -> KstValue:
    if not args:
        return KstString("")

    return KstString(stringify(args[0]))
