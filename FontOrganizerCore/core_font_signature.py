"""
Font signature sniffing.

Classifies a font blob as TrueType, OpenType or Type 1 from its first bytes
and picks the extension used for the organized copy.
"""

from FontOrganizerCore.core_errors import ShortData, UnknownSignature
from FontOrganizerCore.core_font_metadata import FontSignature, FontType

SIGNATURE_LENGTH = 4

# Used by callers when the signature is unknown
DEFAULT_SIGNATURE = FontSignature(FontType.UNKNOWN, ".ttf")

_SFNT_SIGNATURES = {
    b"OTTO": FontSignature(FontType.OPENTYPE, ".otf"),
    b"\x00\x01\x00\x00": FontSignature(FontType.TRUETYPE, ".ttf"),
    b"true": FontSignature(FontType.TRUETYPE, ".ttf"),
}


def sniff_signature(data: bytes) -> FontSignature:
    """
    Detect the font type from the leading bytes of a font file.

    Raises:
        ShortData: fewer than 4 bytes are available
        UnknownSignature: the bytes match no supported format
    """
    if len(data) < SIGNATURE_LENGTH:
        raise ShortData(f"need {SIGNATURE_LENGTH} bytes, got {len(data)}")

    header = bytes(data[:SIGNATURE_LENGTH])
    signature = _SFNT_SIGNATURES.get(header)
    if signature is not None:
        return signature

    if header.startswith(b"%!"):
        return FontSignature(FontType.TYPE1, ".pfa")
    if header.startswith(b"\x80\x01"):
        return FontSignature(FontType.TYPE1, ".pfb")

    raise UnknownSignature(f"unknown font signature: {header.hex()}")
