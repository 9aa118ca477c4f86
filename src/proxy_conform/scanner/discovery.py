"""Recursive discovery of media files by extension."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lower-case extensions and strip leading dots ("MXF", ".mxf" -> "mxf")."""
    return frozenset(ext.strip().lstrip(".").lower() for ext in extensions if ext)


def display_name(path: Path) -> str:
    """File name without its final extension."""
    return path.stem


def discover_files(
    root: Path,
    extensions: Iterable[str],
    exclude: Iterable[Path] = (),
) -> list[Path]:
    """Find files under root whose extension matches, recursively.

    Hidden files and directories (leading ".") are skipped, which also
    keeps staged temporary outputs out of the results. Directories listed
    in ``exclude`` are not descended into.

    Args:
        root: Directory to scan.
        extensions: Extensions to match, case-insensitive.
        exclude: Directories to skip entirely.

    Returns:
        Matching paths, sorted, so callers see a stable order.
    """
    wanted = normalize_extensions(extensions)
    excluded = {p.resolve() for p in exclude}
    found: list[Path] = []

    def _on_error(error: OSError) -> None:
        logger.warning("Cannot read directory %s: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not d.startswith(".") and (current / d).resolve() not in excluded
        )
        for name in filenames:
            if name.startswith("."):
                continue
            suffix = Path(name).suffix.lstrip(".").lower()
            if suffix and suffix in wanted:
                found.append(current / name)

    found.sort()
    logger.debug("Discovered %d file(s) under %s", len(found), root)
    return found
