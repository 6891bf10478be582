"""
Type 1 (PostScript) font name extraction from the cleartext header.
"""

from FontOrganizerCore.core_errors import NoFontName
from FontOrganizerCore.core_font_metadata import FontMetadata

HEADER_SCAN_LINES = 50
PFB_SEGMENT_MARKER = b"\x80\x01"
PFB_SEGMENT_HEADER_SIZE = 6


def _cleartext_header(data: bytes) -> str:
    # PFB wraps the ASCII header in a segment: 0x80 0x01 + uint32 length
    if data[:2] == PFB_SEGMENT_MARKER:
        data = data[PFB_SEGMENT_HEADER_SIZE:]
    return data.decode("latin-1")


def classify_type1_style(font_name: str) -> str:
    lowered = font_name.lower()
    if "italic" in lowered:
        return "Italic"
    if "bold" in lowered:
        return "Bold"
    return "Regular"


def decode_type1(data: bytes) -> FontMetadata:
    """
    Read /FontName from the first lines of a PFA or PFB font.

    Raises:
        NoFontName: no /FontName declaration within the scanned lines
    """
    lines = _cleartext_header(bytes(data)).splitlines()[:HEADER_SCAN_LINES]
    for line in lines:
        line = line.strip()
        if not line.startswith("/FontName"):
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        name = parts[1].lstrip("/")
        if not name:
            continue
        return FontMetadata(
            family_name=name,
            subfamily_name=classify_type1_style(name),
            full_name=name,
            postscript_name=name,
        )

    raise NoFontName(f"no /FontName within the first {HEADER_SCAN_LINES} lines")
