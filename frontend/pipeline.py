# frontend/pipeline.py
"""Convenience functions for the R analysis pipeline."""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from frontend.lexer import lex
from frontend.r_parser import RParser, ParseRow, ParseError
from ir import Expr, Program


@dataclass(frozen=True)
class ParsedCode:
    """Result of parsing one source document.

    Fields:
        program: Typed IR of the document
        parse_data: Token table rows in source order
        code: The source text that was parsed
        nodes: Parse-data row id -> IR node, for every "expr" row
    """
    program: Program
    parse_data: List[ParseRow]
    code: str
    nodes: Dict[int, Expr]


def read_source(path: str) -> str:
    """Read an R source file.

    Raises:
        FileNotFoundError: if the path does not exist
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return file_path.read_text(errors="replace")


def parse_code(code: str, from_file: bool = False) -> ParsedCode:
    """Parse R code to IR plus its parse-data table.

    Args:
        code: Source code string, or a file path when from_file is True
        from_file: Treat `code` as a path to read

    Returns:
        ParsedCode bundle

    Raises:
        FileNotFoundError: from_file is set and the file does not exist
        ParseError: the source is not valid R; message starts with "Parse error:"
    """
    if from_file:
        code = read_source(code)

    parser = None
    try:
        parser = RParser(lex(code))
        program = parser.parse_program()
    except ParseError as e:
        raise ParseError(f"Parse error: {e.message}", e.line, e.col) from e
    except SyntaxError as e:
        raise ParseError(f"Parse error: {e.msg}", e.lineno or 0, e.offset or 0) from e
    except RecursionError as e:
        line = col = 0
        if parser is not None and parser.tokens:
            tok = parser.tokens[min(parser.i, len(parser.tokens) - 1)]
            line, col = tok.line, tok.col
        raise ParseError("Parse error: expression nested too deeply", line, col) from e

    return ParsedCode(
        program=program,
        parse_data=parser.sorted_rows(),
        code=code,
        nodes=dict(parser.nodes),
    )
