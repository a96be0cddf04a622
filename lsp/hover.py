"""Hover provider for showing inferred types."""
from __future__ import annotations

import re
from typing import Mapping, Optional, Set
from lsprotocol import types
from frontend.extract import FunctionRecord
from runtime.types import TypeDescriptor

# R names: letters or a dot, then word characters and dots
IDENTIFIER_RE = re.compile(r"(?:[A-Za-z]|\.(?!\d))[\w.]*")


def _hover(text: str, hover_range: types.Range) -> types.Hover:
    return types.Hover(
        contents=types.MarkupContent(kind=types.MarkupKind.Markdown, value=text),
        range=hover_range,
    )


def get_hover(
    context: Mapping[str, TypeDescriptor],
    source: str,
    line: int,
    character: int,
    functions: Optional[Mapping[str, FunctionRecord]] = None,
    builtins_set: Optional[Set[str]] = None,
) -> Optional[types.Hover]:
    """Get hover information for the identifier at the given position.

    Args:
        context: Final type context of the document
        source: Full source code text
        line: Zero-indexed line number
        character: Zero-indexed character position in line
        functions: Named function definitions in the document
        builtins_set: Set of known builtin function names

    Returns:
        Hover object with type information, or None if nothing is known
    """
    lines = source.split("\n")
    if not (0 <= line < len(lines)):
        return None

    line_text = lines[line]
    if not (0 <= character <= len(line_text)):
        return None

    for match in IDENTIFIER_RE.finditer(line_text):
        start, end = match.span()
        if start <= character < end:
            word = match.group(0)
            break
    else:
        return None

    hover_range = types.Range(
        start=types.Position(line=line, character=start),
        end=types.Position(line=line, character=end),
    )

    # Functions first: their context entry is just "function"
    if functions and word in functions:
        params_str = ", ".join(functions[word].params)
        return _hover(f"(function) `{word}({params_str})`", hover_range)

    descriptor = context.get(word)
    if descriptor is not None:
        return _hover(f"(typethis) `{word}`: `{descriptor}`", hover_range)

    if builtins_set and word in builtins_set:
        return _hover(f"(builtin) `{word}`", hover_range)

    return None
