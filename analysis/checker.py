# checker.py
"""Type consistency checking for R source.

The checker is a single left-to-right pass over the document's assignments.
Each right-hand side is inferred against the types seen so far and compared
with the variable's previous type before the context entry is overwritten.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from analysis.context import CheckOptions
from analysis.diagnostics import Diagnostic, error_parse, info_numeric_args, warn_type_drift
from analysis.inference import infer_assignment_type
from frontend.extract import extract_assignments, extract_function_calls
from frontend.pipeline import ParsedCode, parse_code
from frontend.r_parser import ParseError
from runtime.env import TypeContext
from runtime.types import TypeDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one type check. Immutable once returned."""
    errors: Tuple[Diagnostic, ...] = ()
    warnings: Tuple[Diagnostic, ...] = ()
    info: Tuple[Diagnostic, ...] = ()
    final_context: Mapping[str, TypeDescriptor] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def ok(self) -> bool:
        return not self.errors

    def all_diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self.errors + self.warnings + self.info


def types_drifted(previous: Optional[TypeDescriptor], current: TypeDescriptor) -> bool:
    """True when a rebinding changes a known base type to another known one."""
    if previous is None:
        return False
    if previous.is_unknown() or current.is_unknown():
        return False
    return not previous.same_base_type(current)


def check_types(code: str, from_file: bool = False, strict: bool = False,
                options: Optional[CheckOptions] = None) -> CheckResult:
    """Type check R code for reassignments that change a variable's type.

    Args:
        code: R source code, or a file path when from_file is True
        from_file: Treat `code` as a path to read
        strict: Reserved; has no effect
        options: Check options (defaults to CheckOptions(strict=strict))

    Returns:
        CheckResult. Parse failures, including an unreadable file, give a
        result with a single error and nothing else.
    """
    if options is None:
        options = CheckOptions(strict=strict)

    try:
        parsed = parse_code(code, from_file=from_file)
    except ParseError as e:
        return CheckResult(errors=(error_parse(e.message),))
    except OSError as e:
        return CheckResult(errors=(error_parse(str(e)),))

    return check_parsed(parsed, options)


def check_parsed(parsed: ParsedCode, options: Optional[CheckOptions] = None) -> CheckResult:
    """Run the consistency pass over an already parsed document.

    Args:
        parsed: Output from parse_code()
        options: Check options (defaults to CheckOptions())

    Returns:
        CheckResult with no errors
    """
    if options is None:
        options = CheckOptions()

    warnings = []
    info = []
    context = TypeContext()

    for record in extract_assignments(parsed):
        current = infer_assignment_type(record, context)
        previous = context.get(record.variable)
        if types_drifted(previous, current):
            warnings.append(warn_type_drift(record.line, record.col, record.variable, previous, current))
        context.set(record.variable, current)

    for call in extract_function_calls(parsed):
        if call.function_name in options.info_functions:
            info.append(info_numeric_args(call.line, call.col, call.function_name))

    logger.debug("Checked %d bindings: %d warnings, %d info", len(context), len(warnings), len(info))

    return CheckResult(
        errors=(),
        warnings=tuple(warnings),
        info=tuple(info),
        final_context=context.freeze(),
    )


def check_file(path: str, strict: bool = False,
               options: Optional[CheckOptions] = None) -> CheckResult:
    """Type check an R file.

    Raises:
        FileNotFoundError: if `path` does not exist
    """
    if not Path(path).is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return check_types(path, from_file=True, strict=strict, options=options)
