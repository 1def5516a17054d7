"""
Recursive Descent Parser for Kustom

Structure:
- Lexer: Token stream from source
- Parser: Recursive descent, one method per precedence level
- AST: Lark Tree/Token nodes, one tree label per construct

Statements:
    tetapkan x: 1;                     vardecl
    konstan y: 2;                      vardecl (constant)
    fungsi f(a, b) { ... }             fndecl
    jika (c) { } lainnyajika (c) { } lainnya { }
    untuk (tetapkan i: 0; i < 3; i += 1) { }
"""

from typing import List, Optional

from lark import Token, Tree

from .lexer_rd import tokenize
from .token_types import TT, Tok
from .tree import make_meta
from .utils import recursion_headroom

class ParseError(Exception):
    """Syntax error, positioned at the offending token when there is one."""

    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line, self.column = (token.line, token.column) if token else (None, None)
        where = f" at line {self.line}, col {self.column}" if token else ""
        super().__init__(message + where)

# Comparison operators each get their own node label.
_EQUALITY_LABELS = {TT.EQ: 'eq', TT.NEQ: 'neq'}
_RELATIONAL_LABELS = {TT.LT: 'lt', TT.LTE: 'lte', TT.GT: 'gt', TT.GTE: 'gte'}
_ASSIGN_LABELS = {TT.ASSIGN: 'assign', TT.PLUSEQ: 'plusassign', TT.MINUSEQ: 'minusassign'}


class Parser:
    """
    Recursive descent parser for Kustom.

    Expression precedence (lowest to highest):
    1. assignment (=, +=, -=), right associative
    2. object literal
    3. or (||)
    4. and (&&)
    5. equality (==, !=)
    6. relational (<, <=, >, >=)
    7. additive (+, -)
    8. multiplicative (*, /, %)
    9. call
    10. member (.key, [expr])
    11. primary (literals, identifiers, parens)
    """

    def __init__(self, tokens: Optional[List[Tok]] = None):
        self.tokens: List[Tok] = []
        self.pos = 0
        if tokens is not None:
            self.load(tokens)

    def load(self, tokens: List[Tok]) -> None:
        """Point the parser at a new token stream; one instance can parse many."""
        if not tokens or tokens[-1].type != TT.EOF:
            raise ParseError("Token stream must end with EOF")
        self.tokens = tokens
        self.pos = 0

    # ---------------- Cursor ----------------

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def advance(self) -> Tok:
        """Return the current token and step past it; the cursor never leaves EOF."""
        tok = self.current
        self.pos = min(self.pos + 1, len(self.tokens) - 1)
        return tok

    def check(self, *types: TT) -> bool:
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        if self.check(token_type):
            return self.advance()

        raise ParseError(message or f"Expected {token_type.name}, got {self.current.type.name}", self.current)

    # ---------------- Nodes ----------------

    def node(self, label: str, children: list, at: Tok) -> Tree:
        return Tree(label, children, make_meta(at.line, at.column))

    def leaf(self, kind: str, tok: Tok) -> Token:
        return Token(kind, tok.value, line=tok.line, column=tok.column)

    # ---------------- Program ----------------

    def parse(self) -> Tree:
        """Parse entire program"""
        start = self.current
        stmts = []

        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())

        return self.node('program', stmts, start)

    # ---------------- Statements ----------------

    def parse_statement(self) -> Tree | Token:
        if self.check(TT.LET, TT.CONST):
            return self.parse_var_declaration()
        if self.check(TT.FN):
            return self.parse_fn_declaration()
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.FOR):
            return self.parse_for_stmt()

        expr = self.parse_expr()
        self.match(TT.SEMI)
        return expr

    def parse_var_declaration(self) -> Tree:
        """('tetapkan' | 'konstan') IDENT (':' expr)? ';'"""
        keyword = self.advance()
        name = self.expect(TT.IDENT, "Expected identifier name after declaration keyword")
        kind = 'CONST' if keyword.type == TT.CONST else 'LET'

        value = None
        if self.match(TT.COLON):
            value = self.parse_expr()
        elif kind == 'CONST':
            raise ParseError(f"Constant '{name.value}' must be given a value", self.current)

        self.expect(TT.SEMI, "Variable declaration must end with ';'")
        return self.node('vardecl', [self.leaf('IDENT', name), self.leaf(kind, keyword), value], keyword)

    def parse_fn_declaration(self) -> Tree:
        """'fungsi' IDENT '(' params ')' block"""
        keyword = self.advance()
        name = self.expect(TT.IDENT, "Expected function name after 'fungsi'")
        params_at = self.expect(TT.LPAR, "Expected '(' after function name")

        params = []
        if not self.check(TT.RPAR):
            while True:
                param = self.expect(TT.IDENT, "Function parameters must be identifiers")
                params.append(self.leaf('IDENT', param))
                if not self.match(TT.COMMA):
                    break
        self.expect(TT.RPAR, "Expected ')' after parameter list")

        body = self.parse_block("function body")
        return self.node('fndecl', [self.leaf('IDENT', name), self.node('params', params, params_at), body], keyword)

    def parse_block(self, context: str) -> Tree:
        """'{' stmt* '}'"""
        open_brace = self.expect(TT.LBRACE, f"Expected '{{' to open {context}")
        stmts = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError(f"Unterminated {context}, expected '}}'", self.current)
            stmts.append(self.parse_statement())

        self.expect(TT.RBRACE)
        return self.node('body', stmts, open_brace)

    def parse_condition(self, keyword: str) -> Tree | Token:
        self.expect(TT.LPAR, f"Expected '(' after '{keyword}'")
        cond = self.parse_expr()
        self.expect(TT.RPAR, f"Expected ')' after '{keyword}' condition")
        return cond

    def parse_if_stmt(self) -> Tree:
        """
        jika (c) {..} [lainnyajika (c) {..}]* [lainnya {..}]

        A trailing else belongs to the last elif when there is one, otherwise
        to the if itself.
        """
        keyword = self.advance()
        cond = self.parse_condition('jika')
        then_body = self.parse_block("'jika' body")

        elifs = []
        first_elif: Optional[Tok] = None
        while self.check(TT.ELIF):
            elif_kw = self.advance()
            first_elif = first_elif or elif_kw
            elif_cond = self.parse_condition('lainnyajika')
            elif_body = self.parse_block("'lainnyajika' body")
            elifs.append(self.node('elifstmt', [elif_cond, elif_body, None], elif_kw))

        else_node = None
        if self.check(TT.ELSE):
            else_kw = self.advance()
            else_node = self.node('elsestmt', [self.parse_block("'lainnya' body")], else_kw)

        if elifs and else_node is not None:
            elifs[-1].children[2] = else_node
            else_node = None

        elif_chain = self.node('elifs', elifs, first_elif) if first_elif else None
        return self.node('ifstmt', [cond, then_body, elif_chain, else_node], keyword)

    def parse_for_stmt(self) -> Tree:
        """'untuk' '(' init-stmt cond ';' incr ')' block"""
        keyword = self.advance()
        self.expect(TT.LPAR, "Expected '(' after 'untuk'")

        if self.check(TT.LET, TT.CONST):
            init = self.parse_var_declaration()
        else:
            init = self.parse_expr()
            self.match(TT.SEMI)

        cond = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after loop condition")
        incr = self.parse_expr()
        self.expect(TT.RPAR, "Expected ')' after loop increment")

        body = self.parse_block("'untuk' body")
        return self.node('forstmt', [init, cond, incr, body], keyword)

    # ---------------- Expressions ----------------

    def parse_expr(self) -> Tree | Token:
        return self.parse_assignment()

    def parse_assignment(self) -> Tree | Token:
        left = self.parse_object()

        if self.check(TT.ASSIGN, TT.PLUSEQ, TT.MINUSEQ):
            op = self.advance()
            value = self.parse_assignment()
            return self.node(_ASSIGN_LABELS[op.type], [left, value], op)

        return left

    def parse_object(self) -> Tree | Token:
        """'{' (IDENT (':' expr)? ','?)* '}'"""
        if not self.check(TT.LBRACE):
            return self.parse_or()

        open_brace = self.advance()
        props = []

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("Unterminated object literal, expected '}'", self.current)

            key = self.expect(TT.IDENT, "Object literal key expected")
            value = None
            if self.match(TT.COLON):
                value = self.parse_expr()

            props.append(self.node('property', [self.leaf('IDENT', key), value], key))

            self.match(TT.COMMA)

        self.expect(TT.RBRACE)
        return self.node('object', props, open_brace)

    def parse_or(self) -> Tree | Token:
        left = self.parse_and()

        while self.check(TT.OR):
            op = self.advance()
            left = self.node('or', [left, self.parse_and()], op)

        return left

    def parse_and(self) -> Tree | Token:
        left = self.parse_equality()

        while self.check(TT.AND):
            op = self.advance()
            left = self.node('and', [left, self.parse_equality()], op)

        return left

    def parse_equality(self) -> Tree | Token:
        left = self.parse_relational()

        while self.check(*_EQUALITY_LABELS):
            op = self.advance()
            left = self.node(_EQUALITY_LABELS[op.type], [left, self.parse_relational()], op)

        return left

    def parse_relational(self) -> Tree | Token:
        left = self.parse_additive()

        while self.check(*_RELATIONAL_LABELS):
            op = self.advance()
            left = self.node(_RELATIONAL_LABELS[op.type], [left, self.parse_additive()], op)

        return left

    def parse_additive(self) -> Tree | Token:
        left = self.parse_multiplicative()

        while self.check(TT.BINOP) and self.current.value in ('+', '-'):
            op = self.advance()
            left = self.node('binop', [left, self.leaf('OP', op), self.parse_multiplicative()], op)

        return left

    def parse_multiplicative(self) -> Tree | Token:
        left = self.parse_call()

        while self.check(TT.BINOP) and self.current.value in ('*', '/', '%'):
            op = self.advance()
            left = self.node('binop', [left, self.leaf('OP', op), self.parse_call()], op)

        return left

    def parse_call(self) -> Tree | Token:
        callee = self.parse_member()

        while self.check(TT.LPAR):
            open_paren = self.advance()
            args = []

            if not self.check(TT.RPAR):
                while True:
                    args.append(self.parse_expr())
                    if not self.match(TT.COMMA):
                        break
            self.expect(TT.RPAR, "Expected ')' after call arguments")

            callee = self.node('call', [callee, self.node('args', args, open_paren)], open_paren)

        return callee

    def parse_member(self) -> Tree | Token:
        obj = self.parse_primary()

        while self.check(TT.DOT, TT.LSQB):
            op = self.advance()

            if op.type == TT.DOT:
                prop = self.expect(TT.IDENT, "Expected property name after '.'")
                obj = self.node('member', [obj, self.leaf('IDENT', prop)], op)
            else:
                key = self.parse_expr()
                self.expect(TT.RSQB, "Expected ']' after computed member key")
                obj = self.node('index', [obj, key], op)

        return obj

    def parse_primary(self) -> Tree | Token:
        tok = self.current

        match tok.type:
            case TT.IDENT:
                self.advance()
                return self.leaf('IDENT', tok)
            case TT.NUMBER:
                self.advance()
                return self.leaf('NUMBER', tok)
            case TT.STRING:
                self.advance()
                return self.leaf('STRING', tok)
            case TT.LPAR:
                self.advance()
                expr = self.parse_expr()
                self.expect(TT.RPAR, "Expected ')' to close grouped expression")
                return expr
            case TT.EOF:
                raise ParseError("Unexpected end of input", tok)
            case _:
                raise ParseError(f"Unexpected token {tok.value!r} ({tok.type.name})", tok)


def parse_tokens(tokens: List[Tok], parser: Optional[Parser] = None) -> Tree:
    parser = parser or Parser()
    parser.load(tokens)
    with recursion_headroom():
        try:
            return parser.parse()
        except RecursionError:
            raise ParseError("Expression nesting too deep", parser.current) from None


def parse_source(source: str) -> Tree:
    """Lex and parse source text into a `program` tree"""
    return parse_tokens(tokenize(source))
