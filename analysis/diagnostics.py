# diagnostics.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from runtime.types import TypeDescriptor

# ---------------
# Diagnostic dataclass
# ---------------

class Kind(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """Structured error/warning/info diagnostic.

    Fields:
        kind: error, warning or info
        code: Stable code (e.g. "W_TYPE_DRIFT")
        message: Human-readable message (no position prefix)
        line: Source line number (0 when there is no position)
        col: Source column number (0 when there is no position)
        variable: Variable the diagnostic is about, if any
    """
    kind: Kind
    code: str
    message: str
    line: int = 0
    col: int = 0
    variable: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.code} line {self.line}:{self.col}: {self.message}"

# ------------------------
# Message builders
# ------------------------

def error_parse(message: str, line: int = 0, col: int = 0) -> Diagnostic:
    """Fatal parse failure. `message` already starts with "Parse error:"."""
    if not message.startswith("Parse error"):
        message = f"Parse error: {message}"
    return Diagnostic(kind=Kind.ERROR, code="E_PARSE", message=message, line=line, col=col)

def warn_type_drift(line: int, col: int, name: str,
                    previous: TypeDescriptor, current: TypeDescriptor) -> Diagnostic:
    return Diagnostic(
        kind=Kind.WARNING,
        code="W_TYPE_DRIFT",
        message=(
            f"Variable '{name}' reassigned with different type: "
            f"was {previous.name}, now {current.name}"
        ),
        line=line,
        col=col,
        variable=name,
    )

def info_numeric_args(line: int, col: int, func_name: str) -> Diagnostic:
    return Diagnostic(
        kind=Kind.INFO,
        code="I_NUMERIC_ARGS",
        message=f"Function '{func_name}' expects numeric arguments",
        line=line,
        col=col,
    )
