from __future__ import annotations

import math

from ..runtime import KstBool, KstNull, KstNumber, KstString, KstValue

def is_truthy(val: KstValue) -> bool:
    match val:
        case KstBool(value=b):
            return b
        case KstNull():
            return False
        case KstNumber(value=num):
            return num != 0 and not math.isnan(num)
        case KstString(value=s):
            return bool(s)
        case _:
            # objects, user functions and natives
            return True
