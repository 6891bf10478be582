"""
Byte-for-byte font copy that never overwrites an existing file.
"""

import shutil
from pathlib import Path

from FontOrganizerCore.core_errors import IOFailure


def copy_font_file(source: Path, target: Path) -> None:
    """
    Copy `source` to `target` and carry over its permission bits.

    The target is opened with exclusive create, so a file that appeared
    after duplicate resolution raises FileExistsError instead of being
    overwritten; the caller resolves a new name and retries.

    Raises:
        FileExistsError: target exists
        IOFailure: any other read, write or permission error
    """
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(source, "rb") as src, open(target, "xb") as dst:
            shutil.copyfileobj(src, dst)
    except FileExistsError:
        raise
    except OSError as e:
        raise IOFailure(f"cannot copy {source.name} to {target}: {e}") from e

    try:
        shutil.copymode(source, target)
    except OSError as e:
        raise IOFailure(f"cannot copy permissions to {target}: {e}") from e
