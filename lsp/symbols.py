"""Document symbol provider for outline view."""
from __future__ import annotations
from lsprotocol import types
from frontend.pipeline import ParsedCode
from ir.ir import Assign, Function, Var


def _line_end(source_lines: list[str], line: int) -> int:
    return len(source_lines[line]) if 0 <= line < len(source_lines) else 0


def get_document_symbols(parsed: ParsedCode, source_lines: list[str]) -> list[types.DocumentSymbol]:
    """Extract document symbols from a parsed document.

    Args:
        parsed: Output from parse_code()
        source_lines: Source code lines (for computing ranges)

    Returns:
        List of DocumentSymbol entries, one per top-level `name <- function(...)`
    """
    rows = {row.id: row for row in parsed.parse_data}
    symbols: list[types.DocumentSymbol] = []

    for stmt in parsed.program.body:
        if not (isinstance(stmt, Assign) and isinstance(stmt.target, Var)
                and isinstance(stmt.value, Function)):
            continue

        detail = "(" + ", ".join(p.name for p in stmt.value.params) + ")"

        # 1-based parse rows -> 0-based LSP lines
        start_line = stmt.line - 1
        end_line = rows[stmt.node_id].line2 - 1

        full_range = types.Range(
            start=types.Position(line=start_line, character=0),
            end=types.Position(line=end_line, character=_line_end(source_lines, end_line)),
        )
        selection_range = types.Range(
            start=types.Position(line=start_line, character=0),
            end=types.Position(line=start_line, character=_line_end(source_lines, start_line)),
        )

        symbols.append(types.DocumentSymbol(
            name=stmt.target.name,
            kind=types.SymbolKind.Function,
            range=full_range,
            selection_range=selection_range,
            detail=detail,
        ))

    return symbols
