# r_parser.py
"""Recursive-descent (Pratt) parser for R.

Builds two views of the same source at once:

- a typed IR tree (ir.Program), and
- a flat parse-data table shaped like R's getParseData(): one row per
  terminal token and one "expr" row per IR node, linked through `parent`.

Every IR node carries the id of its "expr" row (`node_id`).
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from frontend.lexer import Token, lex, RAW_OPEN_RE
from ir.ir import (
    Program, Expr, Var, Num, Str, Bool, Null, NA,
    UnaryOp, BinOp, Arg, Call, Index, Member, Namespace,
    Assign, Param, Function, Block, Paren,
    If, For, While, Repeat, Break, Next,
)


class ParseError(Exception):
    """Syntax error with a 1-based source position (0 when unknown)."""

    def __init__(self, message: str, line: int = 0, col: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.col = col


@dataclass
class ParseRow:
    """One row of the parse-data table."""
    id: int
    parent: int # 0 for top-level rows
    token: str # "expr" for non-terminals, token kind otherwise
    terminal: bool
    text: str # verbatim token text, "" for expr rows
    line1: int
    col1: int
    line2: int
    col2: int


# Infix operators: token kind -> (left binding power, right associative)
INFIX_BP: Dict[str, Tuple[int, bool]] = {
    "'?'": (1, False),
    "EQ_ASSIGN": (2, True),
    "LEFT_ASSIGN": (3, True),
    "RIGHT_ASSIGN": (4, False),
    "'~'": (5, False),
    "OR": (6, False), "OR2": (6, False),
    "AND": (7, False), "AND2": (7, False),
    "EQ": (9, False), "NE": (9, False),
    "LT": (9, False), "GT": (9, False),
    "LE": (9, False), "GE": (9, False),
    "'+'": (10, False), "'-'": (10, False),
    "'*'": (11, False), "'/'": (11, False),
    "SPECIAL": (12, False), "PIPE": (12, False),
    "':'": (13, False),
    "'^'": (15, True),
}

# Prefix operators: token kind -> binding power of the operand
PREFIX_BP: Dict[str, int] = {
    "'?'": 1,
    "'~'": 5,
    "'!'": 8,
    "'+'": 14,
    "'-'": 14,
}

POSTFIX_BP = 16
POSTFIX_KINDS = {"'('", "'['", "LBB", "'$'", "'@'"}

_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "0": "\0", "a": "\a", "b": "\b",
    "f": "\f", "v": "\v", "\\": "\\", '"': '"', "'": "'", "`": "`",
}


def symbol_name(text: str) -> str:
    """Name of a SYMBOL token (backquotes removed)."""
    if len(text) >= 2 and text[0] == "`" and text[-1] == "`":
        return text[1:-1]
    return text


def string_value(text: str) -> str:
    """Content of a STR_CONST token: quotes removed, escapes resolved."""
    raw = RAW_OPEN_RE.match(text)
    if raw:
        return text[raw.end():len(text) - len(raw.group(2)) - 2]
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)),
                  text[1:-1], flags=re.S)


def _describe(tok: Token) -> str:
    if tok.kind == "EOF":
        return "end of input"
    if tok.kind == "NEWLINE":
        return "end of line"
    if tok.kind == "SYMBOL":
        return f"symbol {tok.value!r}"
    if tok.kind == "NUM_CONST":
        return f"numeric constant {tok.value!r}"
    if tok.kind == "STR_CONST":
        return f"string constant {tok.value!r}"
    return f"{tok.value!r}"


Part = Union[Token, Expr]


class RParser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.i = 0
        self.rows: Dict[int, ParseRow] = {}
        self.nodes: Dict[int, Expr] = {}
        self._next_id = 1
        self._token_rows: Dict[int, int] = {} # id(token) -> row id
        self._leaf_rows: Dict[int, int] = {} # node id -> row id of its name token
        self._delims: List[str] = [] # open "(", "[" and "{" from outermost to innermost

    # token helpers

    def _newlines_ignored(self) -> bool:
        return bool(self._delims) and self._delims[-1] in ("(", "[")

    def current(self) -> Token:
        """Current token; newlines are skipped inside () and []."""
        if self._newlines_ignored():
            self.skip_newlines()
        return self.tokens[self.i]

    def peek_kind(self, offset: int = 1) -> str:
        """Kind of the token `offset` non-newline tokens ahead of current."""
        j = self.i
        seen = 0
        while j < len(self.tokens) - 1:
            j += 1
            if self.tokens[j].kind == "NEWLINE" and self._newlines_ignored():
                continue
            seen += 1
            if seen == offset:
                return self.tokens[j].kind
        return "EOF"

    def skip_newlines(self) -> None:
        while self.tokens[self.i].kind == "NEWLINE":
            self.i += 1

    def eat(self, kind: str) -> Token:
        """Consume a token of the given kind or value"""
        tok = self.current()
        if tok.kind != kind and tok.value != kind:
            raise ParseError(
                f"Expected {kind!r} at line {tok.line}, column {tok.col}, found {_describe(tok)}",
                tok.line, tok.col,
            )
        self.i += 1
        self._token_row(tok)
        return tok

    def unexpected(self, tok: Token) -> ParseError:
        return ParseError(
            f"unexpected {_describe(tok)} at line {tok.line}, column {tok.col}",
            tok.line, tok.col,
        )

    # parse-data helpers

    def _new_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def _token_row(self, tok: Token) -> ParseRow:
        rid = self._token_rows.get(id(tok))
        if rid is None:
            rid = self._new_id()
            self._token_rows[id(tok)] = rid
            self.rows[rid] = ParseRow(
                rid, 0, tok.kind, True, tok.value,
                tok.line, tok.col, tok.end_line, tok.end_col,
            )
        return self.rows[rid]

    def _row_of(self, part: Part) -> ParseRow:
        if isinstance(part, Token):
            return self._token_row(part)
        return self.rows[part.node_id]

    def _node(self, cls, parts: List[Part], **fields) -> Expr:
        """Create an IR node and its "expr" row adopting `parts` as children."""
        nid = self._new_id()
        children = [self._row_of(p) for p in parts]
        for row in children:
            row.parent = nid
        first, last = children[0], children[-1]
        self.rows[nid] = ParseRow(
            nid, 0, "expr", False, "",
            first.line1, first.col1, last.line2, last.col2,
        )
        node = cls(line=first.line1, col=first.col1, node_id=nid, **fields)
        self.nodes[nid] = node
        return node

    def _retag(self, node: Expr, kind: str) -> None:
        """Change the token kind of the name token behind a Var/Namespace node."""
        rid = self._leaf_rows.get(node.node_id)
        if rid is not None:
            self.rows[rid].token = kind

    def sorted_rows(self) -> List[ParseRow]:
        """Rows in source order, each container before its contents."""
        return sorted(
            self.rows.values(),
            key=lambda r: (r.line1, r.col1, -r.line2, -r.col2, r.terminal, -r.id),
        )

    # top-level program

    def parse_program(self) -> Program:
        """Parse top-level program and return IR Program directly."""
        items: List[Expr] = []
        while True:
            while self.tokens[self.i].kind in ("NEWLINE", "';'"):
                self.i += 1
            if self.current().kind == "EOF":
                break
            items.append(self.parse_expr())
            tok = self.current()
            if tok.kind not in ("NEWLINE", "';'", "EOF"):
                raise self.unexpected(tok)
        return Program(body=items)

    # expressions

    def parse_expr(self, rbp: int = 0) -> Expr:
        left = self.parse_prefix()
        while True:
            tok = self.current()
            if tok.kind in POSTFIX_KINDS:
                if POSTFIX_BP <= rbp:
                    break
                left = self.parse_postfix(left)
                continue
            bp = INFIX_BP.get(tok.kind)
            if bp is None or bp[0] <= rbp:
                break
            lbp, right_assoc = bp
            op = self.eat(tok.kind)
            self.skip_newlines()
            right = self.parse_expr(lbp - 1 if right_assoc else lbp)
            left = self._binary(left, op, right)
        return left

    def _binary(self, left: Expr, op: Token, right: Expr) -> Expr:
        parts = [left, op, right]
        if op.kind in ("LEFT_ASSIGN", "EQ_ASSIGN"):
            return self._node(Assign, parts, op=op.value, target=left, value=right)
        if op.kind == "RIGHT_ASSIGN":
            return self._node(Assign, parts, op=op.value, target=right, value=left)
        return self._node(BinOp, parts, op="^" if op.value == "**" else op.value,
                          left=left, right=right)

    def parse_prefix(self) -> Expr:
        tok = self.current()
        kind = tok.kind

        if kind == "NUM_CONST":
            self.eat(kind)
            if tok.value in ("TRUE", "FALSE"):
                return self._node(Bool, [tok], value=tok.value == "TRUE")
            if tok.value.startswith("NA"):
                return self._node(NA, [tok], text=tok.value)
            return self._node(Num, [tok], text=tok.value)

        if kind == "STR_CONST":
            self.eat(kind)
            return self._node(Str, [tok], value=string_value(tok.value))

        if kind == "NULL_CONST":
            self.eat(kind)
            return self._node(Null, [tok])

        if kind == "SYMBOL":
            if self.peek_kind() in ("NS_GET", "NS_GET_INT"):
                return self.parse_namespace()
            self.eat(kind)
            node = self._node(Var, [tok], name=symbol_name(tok.value))
            self._leaf_rows[node.node_id] = self._token_row(tok).id
            return node

        if kind == "'('":
            open_tok = self.eat(kind)
            self._delims.append("(")
            try:
                inner = self.parse_expr()
                close_tok = self.eat("')'")
            finally:
                self._delims.pop()
            return self._node(Paren, [open_tok, inner, close_tok], expr=inner)

        if kind == "'{'":
            return self.parse_block()

        if kind in PREFIX_BP:
            op = self.eat(kind)
            self.skip_newlines()
            operand = self.parse_expr(PREFIX_BP[kind])
            return self._node(UnaryOp, [op, operand], op=op.value, operand=operand)

        if kind in ("FUNCTION", "'\\'"):
            return self.parse_function()
        if kind == "IF":
            return self.parse_if()
        if kind == "FOR":
            return self.parse_for()
        if kind == "WHILE":
            return self.parse_while()
        if kind == "REPEAT":
            kw = self.eat(kind)
            self.skip_newlines()
            body = self.parse_expr()
            return self._node(Repeat, [kw, body], body=body)
        if kind == "BREAK":
            return self._node(Break, [self.eat(kind)])
        if kind == "NEXT":
            return self._node(Next, [self.eat(kind)])

        raise self.unexpected(tok)

    def parse_namespace(self) -> Expr:
        pkg = self.eat("SYMBOL")
        op = self.current()
        self.eat(op.kind)
        name = self.current()
        if name.kind not in ("SYMBOL", "STR_CONST"):
            raise self.unexpected(name)
        self.eat(name.kind)
        self._token_row(pkg).token = "SYMBOL_PACKAGE"
        text = string_value(name.value) if name.kind == "STR_CONST" else symbol_name(name.value)
        node = self._node(Namespace, [pkg, op, name], package=symbol_name(pkg.value),
                          name=text, op=op.value)
        self._leaf_rows[node.node_id] = self._token_row(name).id
        return node

    def parse_postfix(self, base: Expr) -> Expr:
        tok = self.current()

        if tok.kind in ("'$'", "'@'"):
            op = self.eat(tok.kind)
            name = self.current()
            if name.kind not in ("SYMBOL", "STR_CONST"):
                raise self.unexpected(name)
            self.eat(name.kind)
            if op.kind == "'@'":
                self._token_row(name).token = "SLOT"
            text = string_value(name.value) if name.kind == "STR_CONST" else symbol_name(name.value)
            return self._node(Member, [base, op, name], base=base, op=op.value, name=text)

        if tok.kind == "'('":
            open_tok = self.eat("'('")
            args, parts = self.parse_args("(", ("')'",))
            parts = [base, open_tok] + parts
            if isinstance(base, (Var, Namespace)):
                self._retag(base, "SYMBOL_FUNCTION_CALL")
            return self._node(Call, parts, func=base, args=args)

        if tok.kind == "'['":
            open_tok = self.eat("'['")
            args, parts = self.parse_args("[", ("']'",))
            return self._node(Index, [base, open_tok] + parts, base=base, args=args)

        # LBB: x[[i]] closes with two ']' tokens
        open_tok = self.eat("LBB")
        args, parts = self.parse_args("[", ("']'", "']'"))
        return self._node(Index, [base, open_tok] + parts, base=base, args=args, double=True)

    def parse_args(self, delim: str, closers: Tuple[str, ...]) -> Tuple[List[Arg], List[Part]]:
        """Parse a call/index argument list up to and including its closers.

        Returns the arguments and all consumed parts (argument expressions and
        punctuation) in source order, for parse-data parenting.
        """
        args: List[Arg] = []
        parts: List[Part] = []
        self._delims.append(delim)
        try:
            if self.current().kind != closers[0]:
                while True:
                    name = None
                    value = None
                    tok = self.current()
                    if tok.kind in ("SYMBOL", "STR_CONST", "NULL_CONST") and self.peek_kind() == "EQ_ASSIGN":
                        self.eat(tok.kind)
                        eq = self.eat("EQ_ASSIGN")
                        self._token_row(tok).token = "SYMBOL_SUB" if tok.kind == "SYMBOL" else tok.kind
                        self._token_row(eq).token = "EQ_SUB"
                        parts.extend([tok, eq])
                        name = string_value(tok.value) if tok.kind == "STR_CONST" else symbol_name(tok.value)
                    if self.current().kind not in ("','", closers[0]):
                        value = self.parse_expr()
                        parts.append(value)
                    args.append(Arg(name=name, value=value))
                    if self.current().kind == "','":
                        parts.append(self.eat("','"))
                        continue
                    break
            for closer in closers:
                parts.append(self.eat(closer))
        finally:
            self._delims.pop()
        return args, parts

    def parse_block(self) -> Expr:
        open_tok = self.eat("'{'")
        parts: List[Part] = [open_tok]
        body: List[Expr] = []
        self._delims.append("{")
        try:
            while True:
                while self.tokens[self.i].kind in ("NEWLINE", "';'"):
                    if self.tokens[self.i].kind == "';'":
                        parts.append(self.eat("';'"))
                    else:
                        self.i += 1
                if self.current().kind == "'}'":
                    break
                expr = self.parse_expr()
                body.append(expr)
                parts.append(expr)
                if self.current().kind not in ("NEWLINE", "';'", "'}'"):
                    raise self.unexpected(self.current())
            parts.append(self.eat("'}'"))
        finally:
            self._delims.pop()
        return self._node(Block, parts, body=body)

    def parse_function(self) -> Expr:
        kw = self.current()
        self.eat(kw.kind)
        parts: List[Part] = [kw, self.eat("'('")]
        params: List[Param] = []
        self._delims.append("(")
        try:
            while self.current().kind != "')'":
                name_tok = self.eat("SYMBOL")
                self._token_row(name_tok).token = "SYMBOL_FORMALS"
                parts.append(name_tok)
                default = None
                if self.current().kind == "EQ_ASSIGN":
                    eq = self.eat("EQ_ASSIGN")
                    self._token_row(eq).token = "EQ_FORMALS"
                    default = self.parse_expr()
                    parts.extend([eq, default])
                params.append(Param(name=symbol_name(name_tok.value), default=default))
                if self.current().kind == "','":
                    parts.append(self.eat("','"))
                    continue
                if self.current().kind != "')'":
                    raise self.unexpected(self.current())
            parts.append(self.eat("')'"))
        finally:
            self._delims.pop()
        self.skip_newlines()
        body = self.parse_expr()
        parts.append(body)
        return self._node(Function, parts, params=params, body=body)

    def _paren_header(self, parts: List[Part]) -> None:
        parts.append(self.eat("'('"))
        self._delims.append("(")

    def parse_if(self) -> Expr:
        parts: List[Part] = [self.eat("IF")]
        self._paren_header(parts)
        try:
            cond = self.parse_expr()
            parts.extend([cond, self.eat("')'")])
        finally:
            self._delims.pop()
        self.skip_newlines()
        then_body = self.parse_expr()
        parts.append(then_body)

        else_body: Optional[Expr] = None
        saved = self.i
        # `else` may follow a line break only inside braces or parentheses
        if self._delims:
            self.skip_newlines()
        if self.tokens[self.i].kind == "ELSE":
            parts.append(self.eat("ELSE"))
            self.skip_newlines()
            else_body = self.parse_expr()
            parts.append(else_body)
        else:
            self.i = saved
        return self._node(If, parts, cond=cond, then_body=then_body, else_body=else_body)

    def parse_for(self) -> Expr:
        parts: List[Part] = [self.eat("FOR")]
        self._paren_header(parts)
        try:
            var_tok = self.eat("SYMBOL")
            in_tok = self.eat("IN")
            seq = self.parse_expr()
            parts.extend([var_tok, in_tok, seq, self.eat("')'")])
        finally:
            self._delims.pop()
        self.skip_newlines()
        body = self.parse_expr()
        parts.append(body)
        return self._node(For, parts, var=symbol_name(var_tok.value), seq=seq, body=body)

    def parse_while(self) -> Expr:
        parts: List[Part] = [self.eat("WHILE")]
        self._paren_header(parts)
        try:
            cond = self.parse_expr()
            parts.extend([cond, self.eat("')'")])
        finally:
            self._delims.pop()
        self.skip_newlines()
        body = self.parse_expr()
        parts.append(body)
        return self._node(While, parts, cond=cond, body=body)


def parse_r(src: str) -> Program:
    """Parse R source to an IR Program.

    Raises:
        SyntaxError: from the lexer (unterminated string, stray character)
        ParseError: from the parser
    """
    return RParser(lex(src)).parse_program()
