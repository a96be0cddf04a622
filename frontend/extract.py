# extract.py
"""Queries over the parse-data table: assignments, call sites, functions.

All extractors are total: an empty or assignment-free table gives an empty
list, never an error.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from frontend.lexer import ASSIGN_KINDS
from frontend.pipeline import ParsedCode
from frontend.r_parser import ParseRow, symbol_name, string_value
from ir import Expr, Assign, Function, Var


@dataclass(frozen=True)
class AssignmentRecord:
    """One detected assignment.

    Fields:
        variable: Assigned name
        line: Line of the assignment operator
        col: Column of the assignment operator
        value_text: Right-hand side tokens joined with single spaces. This
            is lossy and may not reproduce the source exactly.
        value: Right-hand side IR node (None only for hand-built records);
            not part of equality
    """
    variable: str
    line: int
    col: int
    value_text: str
    value: Optional[Expr] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class CallSite:
    """A call to a named function."""
    function_name: str
    line: int
    col: int


@dataclass(frozen=True)
class FunctionRecord:
    """A function definition. `name` is None for anonymous functions."""
    name: Optional[str]
    params: List[str]
    line: int
    col: int
    text: str


def children_by_parent(rows: List[ParseRow]) -> Dict[int, List[ParseRow]]:
    """Group rows under their parent id, keeping source order."""
    children: Dict[int, List[ParseRow]] = {}
    for row in rows:
        children.setdefault(row.parent, []).append(row)
    return children


def terminal_rows(row: ParseRow, children: Dict[int, List[ParseRow]]) -> List[ParseRow]:
    """All terminal rows under `row`, in source order."""
    out: List[ParseRow] = []
    stack = [row]
    while stack:
        current = stack.pop()
        if current.terminal:
            out.append(current)
        else:
            stack.extend(reversed(children.get(current.id, [])))
    return out


def _target_name(target: ParseRow, children: Dict[int, List[ParseRow]]) -> Optional[str]:
    """Name assigned by a target sub-expression, or None if it is not a plain name."""
    if target.terminal:
        return None
    inner = children.get(target.id, [])
    if len(inner) != 1 or not inner[0].terminal:
        return None
    if inner[0].token == "SYMBOL":
        return symbol_name(inner[0].text)
    if inner[0].token == "STR_CONST":
        return string_value(inner[0].text)
    return None


def extract_assignments(parsed: ParsedCode) -> List[AssignmentRecord]:
    """Extract simple variable assignments in order of appearance.

    `<-`, `=` and `->` (with their `<<-`, `:=`, `->>` variants) are all
    treated the same way. For left-pointing operators the target is the
    sibling expression just before the operator, on the same line; for
    right-pointing operators the target follows the operator and the
    value precedes it. Non-name targets (x[1] <- ..., names(x) <- ...,
    x$a <- ...) produce no record.

    Args:
        parsed: Output from parse_code()

    Returns:
        List of AssignmentRecord
    """
    rows = parsed.parse_data
    if not rows:
        return []

    children = children_by_parent(rows)
    records: List[AssignmentRecord] = []

    for row in rows:
        if row.token not in ASSIGN_KINDS:
            continue

        siblings = children.get(row.parent, [])
        pos = next(i for i, s in enumerate(siblings) if s.id == row.id)
        before, after = siblings[:pos], siblings[pos + 1:]

        if row.token == "RIGHT_ASSIGN":
            if not after:
                continue
            target, value_rows = after[0], before
        else:
            if not before or before[-1].line2 != row.line1:
                continue
            target, value_rows = before[-1], after

        var_name = _target_name(target, children)
        if var_name is None:
            continue

        value_text = " ".join(
            t.text for v in value_rows for t in terminal_rows(v, children)
        )
        value = None
        if len(value_rows) == 1 and not value_rows[0].terminal:
            value = parsed.nodes.get(value_rows[0].id)

        records.append(AssignmentRecord(
            variable=var_name,
            line=row.line1,
            col=row.col1,
            value_text=value_text,
            value=value,
        ))

    return records


def extract_function_calls(parsed: ParsedCode) -> List[CallSite]:
    """Extract calls to named functions (SYMBOL_FUNCTION_CALL rows)."""
    return [
        CallSite(function_name=symbol_name(row.text), line=row.line1, col=row.col1)
        for row in parsed.parse_data
        if row.token == "SYMBOL_FUNCTION_CALL"
    ]


def extract_functions(parsed: ParsedCode) -> List[FunctionRecord]:
    """Extract function definitions with their formals.

    A definition is named when it is the direct value of an assignment to
    a plain name (f <- function(x) ...).
    """
    rows = parsed.parse_data
    if not rows:
        return []

    children = children_by_parent(rows)
    by_id = {row.id: row for row in rows}
    functions: List[FunctionRecord] = []

    for row in rows:
        if row.token not in ("FUNCTION", "'\\'"):
            continue
        func_row = by_id.get(row.parent)
        if func_row is None:
            continue
        func_node = parsed.nodes.get(func_row.id)

        name = None
        owner = parsed.nodes.get(func_row.parent)
        if isinstance(owner, Assign) and owner.value is func_node and isinstance(owner.target, Var):
            name = owner.target.name

        params = [
            symbol_name(c.text) for c in children.get(func_row.id, [])
            if c.token == "SYMBOL_FORMALS"
        ]
        functions.append(FunctionRecord(
            name=name, params=params, line=row.line1, col=row.col1, text=row.text,
        ))

    return functions


def get_token_at_location(parsed: ParsedCode, line: int, col: int) -> Optional[ParseRow]:
    """Most specific parse-data row whose span contains (line, col).

    Args:
        parsed: Output from parse_code()
        line: 1-based line
        col: 1-based column

    Returns:
        The row with the smallest span, terminals preferred on ties, or None
    """
    hits = [
        row for row in parsed.parse_data
        if (row.line1, row.col1) <= (line, col) <= (row.line2, row.col2)
    ]
    if not hits:
        return None
    return min(
        hits,
        key=lambda r: ((r.line2 - r.line1) * 1000 + (r.col2 - r.col1), not r.terminal),
    )
