"""
Data model shared by every stage of the metadata pipeline.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class FontType(Enum):
    """Font container kind, decided once per file from its byte signature"""

    TRUETYPE = "truetype"
    OPENTYPE = "opentype"
    TYPE1 = "type1"
    UNKNOWN = "unknown"

    @property
    def is_sfnt(self) -> bool:
        return self in (FontType.TRUETYPE, FontType.OPENTYPE)


@dataclass(frozen=True)
class FontSignature:
    """Detected font type and the extension used for the output file"""

    font_type: FontType
    extension: str


@dataclass(frozen=True)
class FontMetadata:
    """Naming metadata for a single font file"""

    family_name: Optional[str] = None
    subfamily_name: Optional[str] = None
    full_name: Optional[str] = None
    postscript_name: Optional[str] = None
    source: Optional[str] = None  # resolution stage that produced the names

    def has_names(self) -> bool:
        return bool(self.family_name or self.subfamily_name or self.full_name)

    def with_source(self, source: str) -> "FontMetadata":
        return replace(self, source=source)


@dataclass(frozen=True)
class NameRecord:
    """One raw record of an sfnt name table"""

    platform_id: int
    encoding_id: int
    language_id: int
    name_id: int
    length: int
    offset: int  # string start, relative to the name table
