# workspace.py
"""Checking every R file of a package directory."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, List, Optional

from analysis.checker import CheckResult, check_file
from analysis.context import CheckOptions

logger = logging.getLogger(__name__)


def package_sources(package_path: Path) -> List[Path]:
    """The package's R/*.R files, sorted by name.

    Raises:
        FileNotFoundError: the package has no R/ directory
    """
    r_dir = Path(package_path) / "R"
    if not r_dir.is_dir():
        raise FileNotFoundError(f"R directory not found in package: {package_path}")
    return sorted(p for p in r_dir.glob("*.R") if p.is_file())


def check_package(package_path: str, strict: bool = False,
                  options: Optional[CheckOptions] = None) -> Dict[str, CheckResult]:
    """Type check all R files in a package.

    Args:
        package_path: Package root (the directory holding R/)
        strict: Reserved; has no effect
        options: Check options shared by every file

    Returns:
        Dict mapping file names to CheckResult, in file-name order.
        Empty when R/ holds no .R files.
    """
    files = package_sources(Path(package_path))
    if not files:
        logger.info("No R files found in package")
        return {}

    logger.info("Checking %d R files...", len(files))
    results: Dict[str, CheckResult] = {}
    for file_path in files:
        logger.info("  Checking %s...", file_path.name)
        results[file_path.name] = check_file(str(file_path), strict=strict, options=options)

    total_errors = sum(len(r.errors) for r in results.values())
    total_warnings = sum(len(r.warnings) for r in results.values())
    logger.info("Summary: %d errors, %d warnings", total_errors, total_warnings)
    return results
