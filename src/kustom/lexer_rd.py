"""
Lexer for Kustom

Turns source text into a flat list of `Tok`s:
- whitespace and newlines separate tokens and are otherwise dropped
- `#` starts a comment that runs to the end of the line
- keywords are the Indonesian words listed in `KEYWORDS`
- every stream ends with exactly one EOF token
"""

import string
from typing import Dict, List, Optional, Tuple

from .token_types import TT, Tok

EOF_VALUE = "EndOfFile"

_DIGITS = frozenset(string.digits)
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = _IDENT_START | _DIGITS

# Two-character operators are tried before their one-character prefixes.
_DOUBLE_OPS: Dict[str, TT] = {
    '==': TT.EQ,
    '!=': TT.NEQ,
    '<=': TT.LTE,
    '>=': TT.GTE,
    '&&': TT.AND,
    '||': TT.OR,
    '+=': TT.PLUSEQ,
    '-=': TT.MINUSEQ,
}

_SINGLE_OPS: Dict[str, TT] = {
    '+': TT.BINOP,
    '-': TT.BINOP,
    '*': TT.BINOP,
    '/': TT.BINOP,
    '%': TT.BINOP,
    '<': TT.LT,
    '>': TT.GT,
    '=': TT.ASSIGN,
    '(': TT.LPAR,
    ')': TT.RPAR,
    '{': TT.LBRACE,
    '}': TT.RBRACE,
    '[': TT.LSQB,
    ']': TT.RSQB,
    ',': TT.COMMA,
    '.': TT.DOT,
    ':': TT.COLON,
    ';': TT.SEMI,
}


class Lexer:
    """Single-pass scanner. `tokens` holds what was produced so far, even after a LexError."""

    KEYWORDS = {
        'tetapkan': TT.LET,
        'konstan': TT.CONST,
        'fungsi': TT.FN,
        'jika': TT.IF,
        'lainnyajika': TT.ELIF,
        'lainnya': TT.ELSE,
        'untuk': TT.FOR,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    def tokenize(self) -> List[Tok]:
        while not self.at_end():
            self.scan_token()

        self.emit(TT.EOF, EOF_VALUE, (self.line, self.column))
        return self.tokens

    def scan_token(self):
        ch = self.peek()

        if ch in ' \t\r\n':
            self.advance()
        elif ch == '#':
            self.skip_comment()
        elif ch == '"':
            self.scan_string()
        elif ch in _DIGITS:
            self.scan_number()
        elif ch in _IDENT_START:
            self.scan_identifier()
        else:
            self.scan_operator()

    # ---------------- Scanners ----------------

    def scan_string(self):
        """Double-quoted literal without escape sequences; the value excludes the quotes."""
        start = self.position()
        self.advance()

        chars = []
        while not self.at_end() and self.peek() != '"':
            chars.append(self.advance())

        if self.at_end():
            raise LexError("Unterminated string literal", *start)

        self.advance()
        self.emit(TT.STRING, ''.join(chars), start)

    def scan_number(self):
        start = self.position()
        text = self.take_while(_DIGITS.__contains__)

        # `1.5` is a fraction, `1.x` is a member access on 1
        if self.peek() == '.' and self.peek(1) in _DIGITS:
            text += self.advance() + self.take_while(_DIGITS.__contains__)

        self.emit(TT.NUMBER, text, start)

    def scan_identifier(self):
        start = self.position()
        word = self.take_while(_IDENT_CHARS.__contains__)
        self.emit(self.KEYWORDS.get(word, TT.IDENT), word, start)

    def scan_operator(self):
        start = self.position()
        pair = self.source[self.pos:self.pos + 2]

        if pair in _DOUBLE_OPS:
            self.advance(2)
            self.emit(_DOUBLE_OPS[pair], pair, start)
            return

        ch = self.peek()
        if ch in _SINGLE_OPS:
            self.advance()
            self.emit(_SINGLE_OPS[ch], ch, start)
            return

        raise LexError(f"Unrecognized character {ch!r} (code {ord(ch)})", *start)

    def skip_comment(self):
        self.take_while(lambda c: c != '\n')

    # ---------------- Cursor ----------------

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.source[idx] if idx < len(self.source) else '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters, keeping line/column in step."""
        chunk = self.source[self.pos:self.pos + n]
        self.pos += len(chunk)

        for ch in chunk:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        return chunk

    def take_while(self, pred) -> str:
        begin = self.pos
        while not self.at_end() and pred(self.peek()):
            self.advance()
        return self.source[begin:self.pos]

    def position(self) -> Tuple[int, int]:
        return self.line, self.column

    def emit(self, token_type: TT, value: str, at: Tuple[int, int]):
        line, column = at
        self.tokens.append(Tok(type=token_type, value=value, line=line, column=column))


class LexError(Exception):
    """Unterminated literal or a character no token starts with."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} at line {line}, col {column}"
        super().__init__(message)


def tokenize(source: str) -> List[Tok]:
    return Lexer(source).tokenize()
