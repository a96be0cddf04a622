# context.py
"""Check options threaded through a single type-check run."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Tuple

from analysis.builtins import NUMERIC_ARGUMENT_FUNCTIONS

# Reports list info notes only up to this many entries
DEFAULT_INFO_LIMIT = 5


@dataclass(frozen=True)
class CheckOptions:
    """Configuration for check_types() and the report.

    Fields:
        strict: Accepted for API compatibility; currently has no effect
        info_functions: Callees that get an "expects numeric arguments" note
        info_limit: Largest info list the report still prints
    """
    strict: bool = False
    info_functions: Tuple[str, ...] = field(default=NUMERIC_ARGUMENT_FUNCTIONS)
    info_limit: int = DEFAULT_INFO_LIMIT

    def with_strict(self, strict: bool) -> CheckOptions:
        return replace(self, strict=strict)
