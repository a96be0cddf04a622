# report.py
"""Plain-text rendering of check results."""

from __future__ import annotations
import sys
from typing import Iterable, List, Optional, TextIO

from analysis.checker import CheckResult
from analysis.context import DEFAULT_INFO_LIMIT
from analysis.diagnostics import Diagnostic

HEADER = "Type Check Results"


def _section(title: str, diags: Iterable[Diagnostic]) -> List[str]:
    lines = [f"{title}:"]
    lines.extend(f"  Line {d.line}:{d.col} - {d.message}" for d in diags)
    lines.append("")
    return lines


def format_result(result: CheckResult, info_limit: int = DEFAULT_INFO_LIMIT) -> str:
    """Render a check result as the plain-text report.

    The Info section is printed only when there are between 1 and
    `info_limit` entries; longer lists are left out entirely.
    """
    lines = [HEADER, "=" * len(HEADER), ""]

    if result.errors:
        lines.extend(_section("Errors", result.errors))
    else:
        lines.extend(["No errors found.", ""])

    if result.warnings:
        lines.extend(_section("Warnings", result.warnings))

    if 0 < len(result.info) <= info_limit:
        lines.extend(_section("Info", result.info))

    return "\n".join(lines)


def print_result(result: CheckResult, stream: Optional[TextIO] = None,
                 info_limit: int = DEFAULT_INFO_LIMIT) -> CheckResult:
    """Write the report to `stream` (stdout by default) and return `result`."""
    stream = stream or sys.stdout
    stream.write(format_result(result, info_limit=info_limit) + "\n")
    return result


def format_context(result: CheckResult) -> str:
    """Final variable types, one "name: type" per line."""
    if not result.final_context:
        return "(no variables)"
    return "\n".join(f"{name}: {desc}" for name, desc in result.final_context.items())
