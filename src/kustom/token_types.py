"""
Token Types for Kustom

Shared between lexer, parser and the REPL highlighter to avoid circular
dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    LET = auto()      # tetapkan
    CONST = auto()    # konstan
    FN = auto()       # fungsi
    IF = auto()       # jika
    ELIF = auto()     # lainnyajika
    ELSE = auto()     # lainnya
    FOR = auto()      # untuk

    # Arithmetic (+ - * / %)
    BINOP = auto()

    # Comparison
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()

    # Logical
    AND = auto()
    OR = auto()

    # Assignment
    ASSIGN = auto()   # =
    PLUSEQ = auto()
    MINUSEQ = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    LSQB = auto()
    RSQB = auto()
    COMMA = auto()
    DOT = auto()
    COLON = auto()
    SEMI = auto()

    # Special
    EOF = auto()


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
