# ir.py
"""Intermediate Representation (IR) for R.

This module defines a typed, dataclass-based AST for R programs. Every
node records the id of the parse-data row it was built from, so analysis
results can be tied back to the token table.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

# ----- Expressions -----

@dataclass(frozen=True)
class Expr:
    """Base class for all expressions.

    R has no statement/expression split: assignments, loops and
    conditionals are all expressions.
    """
    line: int
    col: int
    node_id: int = field(compare=False)

@dataclass(frozen=True)
class Var(Expr):
    """Symbol reference (x, .hidden, `odd name`)."""
    name: str

@dataclass(frozen=True)
class Num(Expr):
    """Numeric constant, kept as written (5, 5L, 3.14, 1e3, 0xFF, 2i, Inf)."""
    text: str

@dataclass(frozen=True)
class Str(Expr):
    """String constant. `value` is the unquoted content."""
    value: str

@dataclass(frozen=True)
class Bool(Expr):
    """TRUE or FALSE."""
    value: bool

@dataclass(frozen=True)
class Null(Expr):
    """NULL."""
    pass

@dataclass(frozen=True)
class NA(Expr):
    """Missing value constant (NA, NA_integer_, NA_real_, ...)."""
    text: str

@dataclass(frozen=True)
class UnaryOp(Expr):
    """Prefix operator (-x, +x, !x, ~x, ?x)."""
    op: str
    operand: Expr

@dataclass(frozen=True)
class BinOp(Expr):
    """Binary operator (+, ==, &&, %in%, |>, :, ~, ...)."""
    op: str
    left: Expr
    right: Expr

@dataclass(frozen=True)
class Arg:
    """Call or index argument. `value` is None for an empty argument (x[, 1])."""
    name: Optional[str]
    value: Optional[Expr]

@dataclass(frozen=True)
class Call(Expr):
    """Function call f(a, b = 1)."""
    func: Expr
    args: List[Arg]

@dataclass(frozen=True)
class Index(Expr):
    """Subsetting x[i, j] or x[[i]]."""
    base: Expr
    args: List[Arg]
    double: bool = False

@dataclass(frozen=True)
class Member(Expr):
    """Component access x$name or slot access x@name."""
    base: Expr
    op: str
    name: str

@dataclass(frozen=True)
class Namespace(Expr):
    """Namespace-qualified name pkg::name or pkg:::name."""
    package: str
    name: str
    op: str = "::"

@dataclass(frozen=True)
class Assign(Expr):
    """Assignment. For right arrows the parser already swapped roles,
    so `target` is always the assigned place and `value` the source."""
    op: str
    target: Expr
    value: Expr

@dataclass(frozen=True)
class Param:
    """Function formal argument."""
    name: str
    default: Optional[Expr] = None

@dataclass(frozen=True)
class Function(Expr):
    """Function definition: function(x, y = 1) body, or \\(x) body."""
    params: List[Param]
    body: Expr

@dataclass(frozen=True)
class Block(Expr):
    """Braced expression list { a; b }."""
    body: List[Expr]

@dataclass(frozen=True)
class Paren(Expr):
    """Parenthesized expression (x)."""
    expr: Expr

@dataclass(frozen=True)
class If(Expr):
    """if (cond) then_body else else_body."""
    cond: Expr
    then_body: Expr
    else_body: Optional[Expr] = None

@dataclass(frozen=True)
class For(Expr):
    """for (var in seq) body."""
    var: str
    seq: Expr
    body: Expr

@dataclass(frozen=True)
class While(Expr):
    """while (cond) body."""
    cond: Expr
    body: Expr

@dataclass(frozen=True)
class Repeat(Expr):
    """repeat body."""
    body: Expr

@dataclass(frozen=True)
class Break(Expr):
    """break."""
    pass

@dataclass(frozen=True)
class Next(Expr):
    """next."""
    pass

# ---- Program ----

@dataclass(frozen=True)
class Program:
    """Top-level program: the expressions of a source file, in order."""
    body: List[Expr]
