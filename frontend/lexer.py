# lexer.py
"""R lexer.

Tokenizes R source code into a list of Token objects. Token kinds follow
the names R's own parser reports in getParseData() (SYMBOL, NUM_CONST,
LEFT_ASSIGN, ...), so the token table built from them reads the same way.
"""

import re
from dataclasses import dataclass
from typing import List

TokenKind = str

@dataclass
class Token:
    kind: TokenKind # "SYMBOL", "NUM_CONST", "LEFT_ASSIGN", "'+'"
    value: str # original text, quotes included for strings
    line: int # 1-based start line
    col: int # 1-based start column
    end_line: int = 0
    end_col: int = 0 # inclusive, like getParseData col2

# Reserved words and the token kind R reports for each
KEYWORDS = {
    "function": "FUNCTION",
    "if": "IF",
    "else": "ELSE",
    "for": "FOR",
    "in": "IN",
    "while": "WHILE",
    "repeat": "REPEAT",
    "break": "BREAK",
    "next": "NEXT",
    "TRUE": "NUM_CONST",
    "FALSE": "NUM_CONST",
    "NA": "NUM_CONST",
    "NA_integer_": "NUM_CONST",
    "NA_real_": "NUM_CONST",
    "NA_character_": "NUM_CONST",
    "NA_complex_": "NUM_CONST",
    "Inf": "NUM_CONST",
    "NaN": "NUM_CONST",
    "NULL": "NULL_CONST",
}

# Multi-character operators (and a few single ones) with named kinds.
# Everything else is reported as the quoted character, e.g. "'+'".
OPERATOR_KINDS = {
    "<-": "LEFT_ASSIGN",
    "<<-": "LEFT_ASSIGN",
    ":=": "LEFT_ASSIGN",
    "->": "RIGHT_ASSIGN",
    "->>": "RIGHT_ASSIGN",
    "=": "EQ_ASSIGN",
    "==": "EQ",
    "!=": "NE",
    "<": "LT",
    ">": "GT",
    "<=": "LE",
    ">=": "GE",
    "&": "AND",
    "&&": "AND2",
    "|": "OR",
    "||": "OR2",
    "|>": "PIPE",
    "::": "NS_GET",
    ":::": "NS_GET_INT",
    "[[": "LBB",
    "**": "'^'",
}

ASSIGN_KINDS = {"LEFT_ASSIGN", "EQ_ASSIGN", "RIGHT_ASSIGN"}

TOKEN_SPEC = [
    ("NUMBER",   r"0[xX][0-9a-fA-F]+[Li]?|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?[Li]?"),
    ("ID",       r"(?:[^\W\d_]|\.(?!\d))[\w.]*"), # letters, or a dot not followed by a digit
    ("BACKTICK", r"`(?:[^`\\]|\\.)+`"), # `non-syntactic name`
    ("STRING",   r'"(?:[^"\\]|\\(?s:.))*"' + r"|'(?:[^'\\]|\\(?s:.))*'"),
    ("QUOTE",    r"[\"'`]"), # quote that did not close: unterminated string
    ("SPECIAL",  r"%[^%\n]*%"), # %in%, %>%, %%, ...
    ("OP",       r"<<-|->>|:::|\|>|::|<-|->|<=|>=|==|!=|&&|\|\||:=|\[\[|\*\*"
                 r"|[-+*/^<>!&|~?:=$@(){}\[\],;\\]"),
    ("NEWLINE",  r"\n"),
    ("SKIP",     r"[ \t\r\f]+"),
    ("COMMENT",  r"#[^\n]*"),
    ("MISMATCH", r"."), # anything else is an error
]

MASTER_RE = re.compile("|".join(
    f"(?P<{name}>{pat})" for name, pat in TOKEN_SPEC
))

# r"(...)", R"[...]", r'---{...}---'
RAW_OPEN_RE = re.compile(r"""[rR](["'])(-*)([(\[{])""")
RAW_CLOSE = {"(": ")", "[": "]", "{": "}"}


def _syntax_error(msg: str, line: int, col: int) -> SyntaxError:
    return SyntaxError(f"{msg} at line {line}, column {col}", ("<text>", line, col, None))


def lex(src: str) -> List[Token]:
    """Turn an R source string into a list of Tokens.

    Comments and horizontal whitespace are dropped. Newlines are kept as
    NEWLINE tokens because they terminate expressions in R. The list
    always ends with an EOF token.
    """
    tokens: List[Token] = []
    line = 1
    line_start = 0 # offset of the first character of the current line
    pos = 0

    def emit(kind: str, value: str, start: int) -> None:
        nonlocal line, line_start
        start_line, start_col = line, start - line_start + 1
        newlines = value.count("\n")
        if newlines:
            line += newlines
            line_start = start + value.rfind("\n") + 1
        end_col = start + len(value) - line_start
        tokens.append(Token(kind, value, start_line, start_col, line, end_col))

    while pos < len(src):
        raw = RAW_OPEN_RE.match(src, pos)
        if raw:
            quote, dashes, opener = raw.groups()
            closer = RAW_CLOSE[opener] + dashes + quote
            end = src.find(closer, raw.end())
            if end < 0:
                raise _syntax_error("Unterminated raw string", line, pos - line_start + 1)
            emit("STR_CONST", src[pos:end + len(closer)], pos)
            pos = end + len(closer)
            continue

        m = MASTER_RE.match(src, pos)
        kind = m.lastgroup
        value = m.group()

        if kind == "NUMBER":
            emit("NUM_CONST", value, pos)
        elif kind == "ID":
            emit(KEYWORDS.get(value, "SYMBOL"), value, pos)
        elif kind == "BACKTICK":
            emit("SYMBOL", value, pos)
        elif kind == "STRING":
            emit("STR_CONST", value, pos)
        elif kind == "SPECIAL":
            emit("SPECIAL", value, pos)
        elif kind == "OP":
            emit(OPERATOR_KINDS.get(value, f"'{value}'"), value, pos)
        elif kind == "NEWLINE":
            emit("NEWLINE", value, pos)
        elif kind == "QUOTE":
            raise _syntax_error("Unterminated string", line, pos - line_start + 1)
        elif kind == "MISMATCH":
            raise _syntax_error(f"Unexpected character {value!r}", line, pos - line_start + 1)
        # SKIP / COMMENT: nothing to emit
        pos = m.end()

    tokens.append(Token("EOF", "", line, pos - line_start + 1, line, pos - line_start + 1))
    return tokens
