"""Convert typethis Diagnostic objects to LSP Diagnostic objects."""
from __future__ import annotations

from lsprotocol import types
from analysis.diagnostics import Diagnostic as TypethisDiagnostic, Kind

SEVERITIES = {
    Kind.ERROR: types.DiagnosticSeverity.Error,
    Kind.WARNING: types.DiagnosticSeverity.Warning,
    Kind.INFO: types.DiagnosticSeverity.Information,
}


def to_lsp_diagnostic(d: TypethisDiagnostic, source_lines: list[str]) -> types.Diagnostic:
    """Convert a typethis Diagnostic to an LSP Diagnostic.

    Args:
        d: Diagnostic with 1-based line and column (0 when unknown)
        source_lines: Source code split into lines (for range calculation)

    Returns:
        LSP Diagnostic with 0-based positions, spanning to the end of the line
    """
    line_num = d.line - 1 if d.line > 0 else 0

    if 0 <= line_num < len(source_lines):
        end_char = len(source_lines[line_num])
    else:
        end_char = 0

    start_char = d.col - 1 if d.col > 0 else 0
    range_ = types.Range(
        start=types.Position(line=line_num, character=start_char),
        end=types.Position(line=line_num, character=max(end_char, start_char)),
    )

    return types.Diagnostic(
        range=range_,
        severity=SEVERITIES[d.kind],
        code=d.code or None,
        source="typethis",
        message=d.message,
    )
