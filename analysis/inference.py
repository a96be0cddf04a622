# inference.py
"""Expression type inference and type-context building.

Inference is best-effort and total: every input, including text that does
not parse, yields a TypeDescriptor. Unrecognized shapes give `unknown`.
"""

from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional, Union

from analysis.builtins import (
    VECTOR_CONSTRUCTORS, CONSTRUCTOR_RULES, TABULAR_CONSTRUCTORS, CONVERSION_RULES,
    ARITHMETIC_OPERATORS, COMPARISON_OPERATORS, STRING_FUNCTIONS,
    PREDICATE_FUNCTIONS, COUNT_FUNCTIONS,
)
from frontend.extract import AssignmentRecord, extract_assignments
from frontend.pipeline import ParsedCode
from frontend.r_parser import ParseError, parse_r
from ir import (
    Expr, Var, Num, Str, Bool, Null, NA, UnaryOp, BinOp, Arg, Call,
    Member, Namespace, Assign, Function, Block, Paren,
)
from runtime.env import TypeContext
from runtime.types import BaseType, TypeDescriptor, TYPES, create_type, lookup_type
from runtime.values import infer_value_type

logger = logging.getLogger(__name__)

Context = Optional[Mapping[str, TypeDescriptor]]

UNKNOWN = TYPES[BaseType.UNKNOWN]

NA_TYPES = {
    "NA": BaseType.LOGICAL,
    "NA_integer_": BaseType.INTEGER,
    "NA_real_": BaseType.NUMERIC,
    "NA_character_": BaseType.CHARACTER,
    "NA_complex_": BaseType.COMPLEX,
}

# Named arguments of tabular constructors that are options, not columns
TABULAR_OPTIONS = frozenset({
    "stringsAsFactors", "check.names", "check.rows", "row.names",
    "keep.rownames", "key", "fix.empty.names",
})


def literal_number_type(text: str) -> BaseType:
    """Base type of a numeric literal as written.

    Numerals without a fractional part or exponent are integer, as are
    hex literals; an i suffix is complex. An L suffix gives integer only
    when the value is whole (1e3L), so 1.5L and 1e-3L stay numeric.
    """
    if text in ("Inf", "NaN"):
        return BaseType.NUMERIC
    if text.endswith("i"):
        return BaseType.COMPLEX
    if text[:2].lower() == "0x":
        return BaseType.INTEGER
    if text.endswith("L"):
        try:
            whole = float(text[:-1]).is_integer()
        except ValueError:
            whole = False
        return BaseType.INTEGER if whole else BaseType.NUMERIC
    if "." in text or "e" in text.lower():
        return BaseType.NUMERIC
    return BaseType.INTEGER


def infer_type(x: Union[Expr, str, Any], context: Context = None) -> TypeDescriptor:
    """Infer the type of an IR node, a piece of R source text, or a value.

    Args:
        x: IR expression node, R source text, or any realized value
        context: Known variable types (for identifiers in code)

    Returns:
        Inferred TypeDescriptor

    Strings are always read as R code. To type a Python string value
    itself, call runtime.values.infer_value_type().
    """
    if isinstance(x, Expr):
        return infer_type_from_expr(x, context)
    if isinstance(x, str):
        return infer_type_from_text(x, context)
    return infer_value_type(x)


def infer_type_from_text(text: str, context: Context = None) -> TypeDescriptor:
    """Parse `text` and infer the type of its first expression.

    Text that fails to parse, or holds no expression, is unknown.
    """
    try:
        program = parse_r(text)
        if not program.body:
            return UNKNOWN
        return infer_type_from_expr(program.body[0], context)
    except (ParseError, SyntaxError, RecursionError):
        return UNKNOWN


def infer_type_from_expr(expr: Optional[Expr], context: Context = None) -> TypeDescriptor:
    """Infer the type of an IR expression against known variable types.

    Args:
        expr: Expression node (None is treated as NULL)
        context: Known variable types

    Returns:
        Inferred TypeDescriptor
    """
    if context is None:
        context = {}

    if expr is None:
        return TYPES[BaseType.NULL]

    # Literals
    if isinstance(expr, Num):
        return TYPES[literal_number_type(expr.text)]
    if isinstance(expr, Str):
        return TYPES[BaseType.CHARACTER]
    if isinstance(expr, Bool):
        return TYPES[BaseType.LOGICAL]
    if isinstance(expr, Null):
        return TYPES[BaseType.NULL]
    if isinstance(expr, NA):
        return TYPES[NA_TYPES.get(expr.text, BaseType.LOGICAL)]

    # Symbols: look up in context
    if isinstance(expr, Var):
        return context.get(expr.name) or UNKNOWN

    # Wrappers that take the type of what they hold
    if isinstance(expr, Paren):
        return infer_type_from_expr(expr.expr, context)
    if isinstance(expr, Block):
        if not expr.body:
            return TYPES[BaseType.NULL]
        return infer_type_from_expr(expr.body[-1], context)
    if isinstance(expr, Assign):
        return infer_type_from_expr(expr.value, context)

    if isinstance(expr, Function):
        return create_type(BaseType.FUNCTION, args=tuple(p.name for p in expr.params))

    if isinstance(expr, UnaryOp):
        if expr.op in ("-", "+") and isinstance(expr.operand, Num):
            return TYPES[literal_number_type(expr.operand.text)]
        if expr.op == "~":
            return TYPES[BaseType.FORMULA]
        return infer_type_from_call(expr.op, [Arg(None, expr.operand)], context)

    if isinstance(expr, BinOp):
        return _infer_binop(expr, context)

    if isinstance(expr, Call):
        return infer_type_from_call(callee_name(expr.func), expr.args, context)

    if isinstance(expr, Member) and expr.op == "$":
        base = infer_type_from_expr(expr.base, context)
        columns = base.attributes.get("columns") or {}
        if expr.name in columns:
            return lookup_type(columns[expr.name]) or UNKNOWN
        return UNKNOWN

    return UNKNOWN


def callee_name(func: Expr) -> Optional[str]:
    """Function name of a call target; namespace prefixes are dropped."""
    if isinstance(func, Var):
        return func.name
    if isinstance(func, Namespace):
        return func.name
    if isinstance(func, Str):
        return func.value
    return None


def _infer_binop(expr: BinOp, context: Context) -> TypeDescriptor:
    if expr.op == "~":
        return TYPES[BaseType.FORMULA]
    if expr.op == ":":
        start = infer_type_from_expr(expr.left, context)
        if start.base_type is BaseType.INTEGER:
            return TYPES[BaseType.INTEGER]
        return TYPES[BaseType.NUMERIC]
    if expr.op in ("|>", "%>%") and isinstance(expr.right, Call):
        # x |> f(y) is f(x, y)
        return infer_type_from_call(
            callee_name(expr.right.func), [Arg(None, expr.left)] + list(expr.right.args), context
        )
    return infer_type_from_call(expr.op, [Arg(None, expr.left), Arg(None, expr.right)], context)


def infer_type_from_call(func_name: Optional[str], args: List[Arg], context: Context) -> TypeDescriptor:
    """Infer the result type of calling `func_name` through the rule tables.

    Args:
        func_name: Callee name (operators use their symbol), or None
        args: Call arguments
        context: Known variable types

    Returns:
        Inferred TypeDescriptor; unknown for unrecognized callees
    """
    if func_name is None:
        return UNKNOWN

    # Vector construction: infer from the first element only
    if func_name in VECTOR_CONSTRUCTORS:
        if args and args[0].value is not None:
            return infer_type_from_expr(args[0].value, context)
        return TYPES[BaseType.VECTOR]

    if func_name in CONSTRUCTOR_RULES:
        tag = CONSTRUCTOR_RULES[func_name]
        if func_name in TABULAR_CONSTRUCTORS:
            columns = {
                a.name: infer_type_from_expr(a.value, context).name
                for a in args
                if a.name and a.value is not None and a.name not in TABULAR_OPTIONS
            }
            if columns:
                return create_type(tag, columns=columns)
        return TYPES[tag]

    if func_name in CONVERSION_RULES:
        return TYPES[CONVERSION_RULES[func_name]]

    if func_name in ARITHMETIC_OPERATORS:
        return TYPES[BaseType.NUMERIC]
    if func_name in COMPARISON_OPERATORS or func_name in PREDICATE_FUNCTIONS:
        return TYPES[BaseType.LOGICAL]
    if func_name in STRING_FUNCTIONS:
        return TYPES[BaseType.CHARACTER]
    if func_name in COUNT_FUNCTIONS:
        return TYPES[BaseType.INTEGER]

    return UNKNOWN


def infer_assignment_type(record: AssignmentRecord, context: Context) -> TypeDescriptor:
    """Infer the type of an assignment's right-hand side; never raises.

    Uses the structured value when the record carries one, otherwise
    re-parses `value_text`.
    """
    try:
        if record.value is not None:
            return infer_type_from_expr(record.value, context)
        if record.value_text:
            return infer_type_from_text(record.value_text, context)
    except (RecursionError, ValueError, KeyError, TypeError) as e:
        logger.debug("Inference failed for %s at line %d: %s", record.variable, record.line, e)
    return UNKNOWN


def build_type_context(parsed: ParsedCode) -> TypeContext:
    """Build the variable -> type context from a document's assignments.

    Assignments are folded in source order. Each right-hand side is
    inferred against the context accumulated so far, and later
    assignments overwrite earlier ones.

    Args:
        parsed: Output from parse_code()

    Returns:
        TypeContext (empty when there are no assignments)
    """
    context = TypeContext()
    for record in extract_assignments(parsed):
        context.set(record.variable, infer_assignment_type(record, context))
    return context
