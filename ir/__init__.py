from ir.ir import (
    Expr, Var, Num, Str, Bool, Null, NA,
    UnaryOp, BinOp, Arg, Call, Index, Member, Namespace,
    Assign, Param, Function, Block, Paren,
    If, For, While, Repeat, Break, Next,
    Program,
)

__all__ = [
    "Expr", "Var", "Num", "Str", "Bool", "Null", "NA",
    "UnaryOp", "BinOp", "Arg", "Call", "Index", "Member", "Namespace",
    "Assign", "Param", "Function", "Block", "Paren",
    "If", "For", "While", "Repeat", "Break", "Next",
    "Program",
]
