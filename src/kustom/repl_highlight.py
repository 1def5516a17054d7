"""Live syntax colouring for the REPL prompt, driven by the Kustom lexer."""

from __future__ import annotations

from typing import Callable, Iterator, List, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as KstLexer, LexError
from .token_types import TT, Tok

GROUP_STYLE = {
    "declare": "bold ansiblue",
    "control": "bold ansicyan",
    "constant": "ansicyan",
    "native": "ansiyellow",
    "number": "ansimagenta",
    "string": "ansigreen",
    "comment": "italic ansibrightblack",
    "identifier": "",
    "operator": "",
    "error": "bold ansired",
}

_KEYWORD_GROUP = {
    TT.LET: "declare",
    TT.CONST: "declare",
    TT.FN: "declare",
    TT.IF: "control",
    TT.ELIF: "control",
    TT.ELSE: "control",
    TT.FOR: "control",
}

_CONSTANT_NAMES = frozenset({"true", "false", "null"})
_NATIVE_NAMES = frozenset({"print", "time", "len", "str"})


def _group_for(tok: Tok) -> str:
    if tok.type in _KEYWORD_GROUP:
        return _KEYWORD_GROUP[tok.type]

    match tok.type:
        case TT.NUMBER:
            return "number"
        case TT.STRING:
            return "string"
        case TT.IDENT if tok.value in _CONSTANT_NAMES:
            return "constant"
        case TT.IDENT if tok.value in _NATIVE_NAMES:
            return "native"
        case TT.IDENT:
            return "identifier"
        case _:
            return "operator"


def _spans(text: str) -> Iterator[Tuple[int, int, str]]:
    """(start, end, group) for each token of a single line, in order."""
    lexer = KstLexer(text)
    try:
        tokens: List[Tok] = lexer.tokenize()
    except LexError:
        tokens = lexer.tokens

    for tok in tokens:
        if tok.type == TT.EOF:
            return

        start = tok.column - 1
        # string values are stored without their quotes
        width = len(tok.value) + 2 if tok.type == TT.STRING else len(tok.value)
        yield start, start + width, _group_for(tok)


def _highlight_line(text: str) -> StyleAndTextTuples:
    fragments: StyleAndTextTuples = []
    cursor = 0

    for start, end, group in _spans(text):
        if start > cursor:
            fragments.append(("", text[cursor:start]))
        fragments.append((GROUP_STYLE[group], text[start:end]))
        cursor = end

    rest = text[cursor:]
    if rest:
        body = rest.lstrip()
        if not body:
            fragments.append(("", rest))
        elif body.startswith("#"):
            lead = len(rest) - len(body)
            if lead:
                fragments.append(("", rest[:lead]))
            fragments.append((GROUP_STYLE["comment"], body))
        else:
            fragments.append((GROUP_STYLE["error"], rest))

    return fragments or [("", text)]


class KustomLexer(Lexer):
    """Colours each prompt line independently; results are memoised per document."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        rendered: dict[int, StyleAndTextTuples] = {}

        def line_at(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(document.lines):
                return [("", "")]
            if lineno not in rendered:
                rendered[lineno] = _highlight_line(document.lines[lineno])
            return rendered[lineno]

        return line_at
