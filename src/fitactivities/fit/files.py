"""
Resolve an import path to an ordered list of .fit files.

The path may be:
  1. a glob pattern     e.g. "rides/2025-11*.fit"
  2. a directory        every .fit file directly inside it (not recursive)
  3. a single .fit file
"""
import glob
import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

_GLOB_CHARS = "*?["


class DiscoveryError(Exception):
    """Raised when an import path is invalid or matches no FIT files."""


def _is_fit_file(path: Path) -> bool:
    return path.is_file() and path.suffix == ".fit"


def _has_glob_chars(path: str) -> bool:
    return any(c in path for c in _GLOB_CHARS)


def get_fit_file_paths(path: str) -> List[str]:
    """
    Find the FIT files an import path refers to.

    Args:
        path: glob pattern, directory or file path

    Returns:
        Sorted list of .fit file paths.

    Raises:
        DiscoveryError: if nothing matches. A malformed pattern such as an
            unclosed "[" simply matches nothing.
    """
    if _has_glob_chars(path):
        fit_files = sorted(p for p in glob.glob(path) if _is_fit_file(Path(p)))
    elif Path(path).is_dir():
        fit_files = sorted(
            str(entry) for entry in Path(path).iterdir() if _is_fit_file(entry)
        )
    elif _is_fit_file(Path(path)):
        fit_files = [path]
    else:
        fit_files = []

    logger.debug("Import path %s matched %d FIT files", path, len(fit_files))

    if not fit_files:
        raise DiscoveryError(f"No FIT files found at {path}")
    return fit_files
