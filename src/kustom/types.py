from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from lark import Tree
from typing_extensions import TypeAlias, TypeGuard

# ---------- Value Model ----------

@dataclass
class KstNull:
    def __repr__(self) -> str:
        return "null"

@dataclass
class KstNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        if math.isnan(v) or math.isinf(v):
            return str(v)
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class KstString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class KstBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class KstObject:
    """Shared by reference: aliases observe each other's mutations."""
    slots: Dict[str, 'KstValue'] = field(default_factory=dict)
    def __repr__(self) -> str:
        if not self.slots:
            return "{}"
        body = ", ".join(f"{k}: {v!r}" for k, v in self.slots.items())
        return "{ " + body + " }"

@dataclass(eq=False)
class KstFn:
    name: str
    params: List[str]
    body: Tree                    # `body` node of the declaration
    env: 'Environment'            # closure: the declaring environment
    def __repr__(self) -> str:
        return f"<fungsi {self.name}({', '.join(self.params)})>"

NativeFn = Callable[[List['KstValue'], 'Environment'], 'KstValue']

@dataclass(frozen=True, eq=False)
class NativeFunction:
    name: str
    fn: NativeFn
    def __repr__(self) -> str:
        return f"<native {self.name}>"

KstValue: TypeAlias = (
    KstNull
    | KstNumber
    | KstString
    | KstBool
    | KstObject
    | KstFn
    | NativeFunction
)

_KST_VALUE_TYPES: Tuple[type, ...] = (
    KstNull,
    KstNumber,
    KstString,
    KstBool,
    KstObject,
    KstFn,
    NativeFunction,
)

def is_kst_value(value: object) -> TypeGuard[KstValue]:
    return isinstance(value, _KST_VALUE_TYPES)

def ensure_kst_value(value: object) -> KstValue:
    if value is None:
        return KstNull()
    if is_kst_value(value):
        return value
    raise KustomRuntimeError(f"Unexpected value type {type(value).__name__}")

# ---------- Environment ----------

@dataclass
class Binding:
    value: KstValue
    constant: bool = False

class Environment:
    """
    One lexical scope frame. A child never owns its parent: closures keep
    their declaring frame alive simply by referencing it.
    """

    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.vars: Dict[str, Binding] = {}

    def declare_var(self, name: str, value: KstValue, constant: bool=False) -> KstValue:
        if name in self.vars:
            raise RedeclarationError(name)

        self.vars[name] = Binding(value, constant)
        return value

    def assign_var(self, name: str, value: KstValue) -> KstValue:
        binding = self.resolve(name).vars[name]

        if binding.constant:
            raise ConstAssignmentError(name)

        binding.value = value
        return value

    def lookup_var(self, name: str) -> KstValue:
        return self.resolve(name).vars[name].value

    def resolve(self, name: str) -> 'Environment':
        """Nearest frame (this one first) that declares `name`."""
        cur: Optional[Environment] = self

        while cur is not None:
            if name in cur.vars:
                return cur

            cur = cur.parent

        raise UndeclaredVariableError(name)

    def has_local(self, name: str) -> bool:
        return name in self.vars

    def names(self) -> List[str]:
        return list(self.vars)

# ---------- Exceptions ----------

class KustomRuntimeError(Exception):
    kst_meta: Optional[Tuple[Optional[int], Optional[int]]]

    def __init__(self, message: str):
        super().__init__(message)
        self.kst_meta = None

    def __str__(self) -> str:
        msg = super().__str__()
        line, col = self.kst_meta or (None, None)

        if line is None:
            return msg
        if col is None:
            return f"{msg} (line {line})"
        return f"{msg} (line {line}, col {col})"

class RedeclarationError(KustomRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Cannot declare variable '{name}': it is already defined in this scope")
        self.name = name

class UndeclaredVariableError(KustomRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Cannot resolve '{name}': it does not exist")
        self.name = name

class ConstAssignmentError(KustomRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Cannot reassign to variable '{name}': it was declared constant")
        self.name = name

class InvalidAssignmentTargetError(KustomRuntimeError):
    pass

class NotCallableError(KustomRuntimeError):
    def __init__(self, value: KstValue):
        super().__init__(f"Cannot call value that is not a function: {value!r}")
        self.value = value

class UnsupportedNodeError(KustomRuntimeError):
    def __init__(self, label: str):
        super().__init__(f"This AST node has no evaluation rule: {label}")
        self.label = label

class EvaluationDepthError(KustomRuntimeError):
    pass

# ---------- Native registry ----------

class Builtins:
    native_functions: Dict[str, NativeFunction] = {}
