# typethis.py
"""Command-line interface for typethis, a static type checker for R."""

import argparse
import logging
import sys
from pathlib import Path

from analysis.checker import check_file
from analysis.context import CheckOptions
from analysis.report import format_context, format_result
from analysis.reveal import reveal_all_types, reveal_type_from_code
from analysis.workspace import check_package
from frontend.r_parser import ParseError


def run_file(file_path: str, strict: bool = False) -> int:
    """Type check a single R file and print the report.

    Args:
        file_path: Path to .R file
        strict: Reserved; accepted and passed through

    Returns:
        Exit code (0 for success, 1 for errors or a missing file)
    """
    options = CheckOptions(strict=strict)
    try:
        result = check_file(file_path, options=options)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"=== Type check for {file_path} ===")
    print(format_result(result, info_limit=options.info_limit))
    print("Final types:")
    print(format_context(result))

    return 1 if result.errors else 0


def run_package(package_path: str, strict: bool = False) -> int:
    """Check every R/*.R file of a package.

    Returns:
        Exit code (0 when no file has errors)
    """
    options = CheckOptions(strict=strict)
    try:
        results = check_package(package_path, options=options)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    if not results:
        print("No R files found in package")
        return 0

    for name, result in results.items():
        print(f"=== {name} ===")
        print(format_result(result, info_limit=options.info_limit))

    total_errors = sum(len(r.errors) for r in results.values())
    total_warnings = sum(len(r.warnings) for r in results.values())
    print(f"Summary: {total_errors} errors, {total_warnings} warnings")
    return 1 if total_errors else 0


def run_reveal(file_path: str, variable: str = None) -> int:
    """Print the type of one variable, or of every assignment."""
    if not Path(file_path).is_file():
        print(f"ERROR: file not found: {file_path}")
        return 1
    try:
        if variable is None:
            reveal_all_types(file_path, from_file=True)
            return 0
        found = reveal_type_from_code(file_path, variable, from_file=True)
    except ParseError as e:
        print(e.message)
        return 1
    return 0 if found is not None else 1


def run_tests() -> int:
    """Run the fixture test suite.

    Returns:
        Exit code (0 for all tests passed, 1 otherwise)
    """
    import run_all_tests

    return run_all_tests.main(return_code=True)


def main() -> int:
    """Main entry point for the typethis CLI tool.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = argparse.ArgumentParser(
        prog="typethis",
        description="typethis: static type inference and consistency checking for R"
    )
    parser.add_argument("file", nargs="?", help="R file to check")
    parser.add_argument(
        "--package",
        metavar="DIR",
        help="Check every R/*.R file of the package in DIR"
    )
    parser.add_argument(
        "--reveal",
        metavar="NAME",
        help="Print the inferred type of variable NAME in FILE"
    )
    parser.add_argument(
        "--types",
        action="store_true",
        help="Print the inferred type of every assignment in FILE"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Strict mode (reserved; currently no effect)"
    )
    parser.add_argument(
        "--tests",
        action="store_true",
        help="Run test suite"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable progress logging on stderr"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.tests:
        return run_tests()

    if args.package:
        return run_package(args.package, strict=args.strict)

    if not args.file:
        parser.print_help()
        return 1

    if args.reveal or args.types:
        return run_reveal(args.file, args.reveal)

    return run_file(args.file, strict=args.strict)


if __name__ == "__main__":
    raise SystemExit(main())
