"""
Input file collection. Fonts often arrive without extensions or under
numeric names, so by default every regular file is a candidate.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Set

from FontOrganizerCore.core_logging_config import LOG_FILE_PREFIX


def _is_candidate(path: Path, allowed_extensions: Optional[Set[str]]) -> bool:
    if path.name.startswith("."):
        return False
    # Skip log files written by earlier runs into the same tree
    if path.name.startswith(LOG_FILE_PREFIX) and path.suffix == ".txt":
        return False
    if allowed_extensions is not None:
        return path.suffix.lower() in allowed_extensions
    return True


def collect_font_files(
    paths: Iterable[str],
    recursive: bool = False,
    allowed_extensions: Optional[Set[str]] = None,
    exclude_dir: Optional[Path] = None,
) -> List[str]:
    """
    Collect candidate font files from files and directories.

    Args:
        paths: Files or directories to scan
        recursive: Descend into subdirectories
        allowed_extensions: Lowercase extensions to accept, None for any
        exclude_dir: Directory whose contents are never collected (the
            output tree when it lives inside the input tree)

    Returns:
        Sorted list of file paths as strings

    Raises:
        OSError: a directory cannot be listed
    """
    excluded = exclude_dir.resolve() if exclude_dir is not None else None
    found: Set[str] = set()

    for path_str in paths:
        path = Path(path_str)
        if path.is_file():
            if _is_candidate(path, allowed_extensions):
                found.add(str(path))
            continue
        if not path.is_dir():
            raise FileNotFoundError(f"No such file or directory: {path}")

        entries = path.rglob("*") if recursive else path.iterdir()
        for entry in entries:
            if not entry.is_file() or not _is_candidate(entry, allowed_extensions):
                continue
            if excluded is not None and excluded in entry.resolve().parents:
                continue
            found.add(str(entry))

    return sorted(found)
