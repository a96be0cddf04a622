# analysis/__init__.py
"""Analysis package: static type inference and consistency checking for R."""

from analysis.checker import CheckResult, check_file, check_parsed, check_types
from analysis.context import CheckOptions
from analysis.diagnostics import Diagnostic, Kind
from analysis.inference import build_type_context, infer_type, infer_type_from_expr
from analysis.report import format_result, print_result
from analysis.reveal import (
    ExprCheck, InferredBinding, TypeCheckError,
    assert_type, check_expr_type, infer_types_from_code,
    reveal_all_types, reveal_type, reveal_type_from_code,
)
from analysis.workspace import check_package

__all__ = [
    "CheckOptions", "CheckResult", "Diagnostic", "Kind",
    "check_types", "check_parsed", "check_file", "check_package",
    "infer_type", "infer_type_from_expr", "build_type_context",
    "format_result", "print_result",
    "reveal_type", "reveal_type_from_code", "reveal_all_types",
    "infer_types_from_code", "check_expr_type", "assert_type",
    "ExprCheck", "InferredBinding", "TypeCheckError",
]
