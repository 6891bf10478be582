"""
Output path construction: name sanitizing, family folder choice and
duplicate resolution.

The filesystem is the only registry of used names: every candidate is
re-checked on disk, so files written earlier in the run push later
duplicates to the next free suffix.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from FontOrganizerCore.core_errors import TooManyDuplicates
from FontOrganizerCore.core_font_metadata import FontMetadata

INVALID_FILENAME_CHARS = frozenset('/\\:*?<>|"')
UNNAMED = "Unnamed"
UNKNOWN_STYLE = "Unknown"
DUPLICATE_LIMIT = 1000
DUPLICATE_SEPARATOR = "_"

# Subfamilies that stay in the base family folder
FAMILY_FOLDER_STYLES = ("regular", "italic", "bold")


class DuplicatePolicy(Enum):
    """What to do when the destination file already exists"""

    RENAME = "rename"  # append _1, _2, ...
    SKIP = "skip"  # leave the existing file, do not copy


def _clean(name: Optional[str], strict: bool) -> str:
    substitute = "_" if strict else " "
    chars = []
    for ch in name or "":
        if ch in INVALID_FILENAME_CHARS or ord(ch) < 32 or ord(ch) == 127:
            chars.append(substitute)
        elif strict and ch.isspace():
            chars.append("_")
        else:
            chars.append(ch)
    text = "".join(chars)

    if strict:
        text = re.sub(r"_+", "_", text).strip("_")
    else:
        text = " ".join(text.split())

    # "." and ".." would point outside the family folder
    if text.strip(".") == "":
        return ""
    return text


def sanitize_name(name: Optional[str], strict: bool = False) -> str:
    """
    Make a name safe as a file or folder name.

    Reserved characters become spaces (underscores in strict mode, where
    spaces are replaced as well), runs collapse and the ends are trimmed.
    Idempotent: sanitize_name(sanitize_name(s)) == sanitize_name(s).
    """
    return _clean(name, strict) or UNNAMED


def family_folder_name(
    family: Optional[str], subfamily: Optional[str], strict: bool = False
) -> str:
    """
    Folder for a font: the family alone for Regular/Italic/Bold variants,
    "Family_Style" for distinctive styles such as Condensed or Light.
    """
    folder = sanitize_name(family, strict)
    style = (subfamily or "").strip()
    lowered = style.lower()
    if not style or any(term in lowered for term in FAMILY_FOLDER_STYLES):
        return folder

    style = _clean(style, strict).replace(" ", "_") or UNKNOWN_STYLE
    return f"{folder}_{style}"


def _path_exists(path: Path) -> bool:
    return path.exists()


def resolve_duplicate(
    path: Path,
    policy: DuplicatePolicy = DuplicatePolicy.RENAME,
    exists: Optional[Callable[[Path], bool]] = None,
    limit: int = DUPLICATE_LIMIT,
) -> Optional[Path]:
    """
    Return a destination that does not exist yet.

    Returns `path` when it is free. Otherwise, with the RENAME policy,
    returns the first free "stem_N.ext" for N = 1..limit; with the SKIP
    policy returns None.

    Raises:
        TooManyDuplicates: every suffix up to `limit` is taken
    """
    exists = exists or _path_exists
    if not exists(path):
        return path
    if policy is DuplicatePolicy.SKIP:
        return None

    for counter in range(1, limit + 1):
        candidate = path.with_name(
            f"{path.stem}{DUPLICATE_SEPARATOR}{counter}{path.suffix}"
        )
        if not exists(candidate):
            return candidate

    raise TooManyDuplicates(f"more than {limit} duplicates of {path.name}")


def build_output_path(
    output_dir: Path,
    metadata: FontMetadata,
    extension: str,
    policy: DuplicatePolicy = DuplicatePolicy.RENAME,
    strict: bool = False,
    relative_dir: Optional[Path] = None,
    exists: Optional[Callable[[Path], bool]] = None,
) -> Optional[Path]:
    """
    Compute output_dir/[relative_dir/]<Family>[_<Style>]/<FullName><ext>.

    Returns None when the SKIP policy finds the destination taken.
    """
    folder = family_folder_name(metadata.family_name, metadata.subfamily_name, strict)
    target_dir = Path(output_dir)
    if relative_dir is not None and str(relative_dir) not in ("", "."):
        target_dir = target_dir / relative_dir
    target_dir = target_dir / folder

    file_name = f"{sanitize_name(metadata.full_name, strict)}{extension}"
    return resolve_duplicate(target_dir / file_name, policy, exists)
