# reveal.py
"""Interactive helpers: print inferred types and assert on runtime values."""

from __future__ import annotations
import sys
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, TextIO, Union

from analysis.inference import build_type_context, infer_assignment_type, infer_type, infer_type_from_expr
from frontend.extract import extract_assignments
from frontend.pipeline import parse_code
from frontend.r_parser import ParseError, parse_r
from runtime.env import TypeContext
from runtime.types import BaseType, TYPES, TypeDescriptor, lookup_type
from runtime.values import infer_value_type, type_matches


class TypeCheckError(Exception):
    """A runtime type assertion failed."""
    pass


@dataclass(frozen=True)
class InferredBinding:
    """Type of one assignment as seen at that point in the document."""
    variable: str
    type: TypeDescriptor
    line: int


@dataclass(frozen=True)
class ExprCheck:
    has_error: bool
    message: Optional[str] = None


def _write_descriptor(out: TextIO, label: str, descriptor: TypeDescriptor,
                      show_details: bool = True) -> None:
    out.write(f"Type of '{label}':\n")
    out.write(f"  Base type: {descriptor.name}\n")
    if descriptor.nullable:
        out.write("  Nullable: TRUE\n")
    if show_details and descriptor.attributes:
        out.write("  Attributes:\n")
        for attr_name, attr_val in descriptor.attributes.items():
            if attr_name == "columns" and isinstance(attr_val, Mapping):
                out.write("    Columns:\n")
                for col_name, col_type in attr_val.items():
                    out.write(f"      {col_name}: {col_type}\n")
            elif isinstance(attr_val, (list, tuple)):
                out.write(f"    {attr_name}: {', '.join(str(v) for v in attr_val)}\n")
            else:
                out.write(f"    {attr_name}: {attr_val}\n")


def reveal_type(x: Any, context: Optional[Mapping[str, TypeDescriptor]] = None,
                show_details: bool = True, label: Optional[str] = None,
                stream: Optional[TextIO] = None) -> TypeDescriptor:
    """Print and return the inferred type of `x`.

    Strings are read as R code (see infer_type). `label` names the value in
    the output; it defaults to the code itself, or the value's repr.
    """
    out = stream or sys.stdout
    inferred = infer_type(x, context)
    if label is None:
        label = x if isinstance(x, str) else repr(x)
    _write_descriptor(out, label, inferred, show_details)
    return inferred


def reveal_type_from_code(code: str, variable: str, from_file: bool = False,
                          stream: Optional[TextIO] = None) -> Optional[TypeDescriptor]:
    """Print and return the final type of `variable` in `code`.

    Returns None (after saying so) when the code never assigns it.
    """
    out = stream or sys.stdout
    context = build_type_context(parse_code(code, from_file=from_file))
    if variable not in context:
        out.write(f"Variable '{variable}' not found in code\n")
        return None
    inferred = context[variable]
    _write_descriptor(out, variable, inferred)
    return inferred


def infer_types_from_code(code: str, from_file: bool = False) -> List[InferredBinding]:
    """Type of every assignment in order, each against the context before it."""
    parsed = parse_code(code, from_file=from_file)
    context = TypeContext()
    bindings: List[InferredBinding] = []
    for record in extract_assignments(parsed):
        inferred = infer_assignment_type(record, context)
        bindings.append(InferredBinding(record.variable, inferred, record.line))
        context.set(record.variable, inferred)
    return bindings


def reveal_all_types(code: str, from_file: bool = False,
                     stream: Optional[TextIO] = None) -> List[InferredBinding]:
    out = stream or sys.stdout
    bindings = infer_types_from_code(code, from_file=from_file)
    if not bindings:
        out.write("No variables found in code\n")
        return bindings
    out.write("Types found in code:\n")
    out.write("===================\n\n")
    for b in bindings:
        out.write(f"Line {b.line}: {b.variable} :: {b.type.name}\n")
    return bindings


def check_expr_type(expr: str, context: Optional[Mapping[str, TypeDescriptor]] = None) -> ExprCheck:
    """Statically check that an expression's type can be inferred.

    Returns:
        ExprCheck; has_error is set when the type is unknown ("Could not
        infer type") or the text does not parse ("Error: ...")
    """
    try:
        program = parse_r(expr)
    except ParseError as e:
        return ExprCheck(True, f"Error: {e.message}")
    except SyntaxError as e:
        return ExprCheck(True, f"Error: {e.msg}")
    except RecursionError:
        return ExprCheck(True, "Error: expression nested too deeply")
    if not program.body:
        return ExprCheck(True, "Error: no expression to check")

    try:
        inferred = infer_type_from_expr(program.body[0], context)
    except RecursionError:
        inferred = TYPES[BaseType.UNKNOWN]
    if inferred.is_unknown():
        return ExprCheck(True, "Could not infer type")
    return ExprCheck(False)


def assert_type(x: Any, expected: Union[str, TypeDescriptor], var_name: Optional[str] = None) -> bool:
    """Check a runtime value against an expected type.

    Raises:
        ValueError: `expected` names no known type
        TypeCheckError: the value does not match
    """
    if isinstance(expected, str):
        descriptor = lookup_type(expected)
        if descriptor is None:
            raise ValueError(f"Unknown type: {expected}")
        expected = descriptor

    if not type_matches(x, expected):
        actual = infer_value_type(x)
        var_str = f"'{var_name}'" if var_name is not None else "value"
        raise TypeCheckError(
            f"Type assertion failed for {var_str}: expected {expected.name}, got {actual.name}"
        )
    return True
