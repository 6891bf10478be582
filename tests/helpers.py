import struct
from io import BytesIO

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

TRUETYPE_VERSION = b"\x00\x01\x00\x00"

PLATFORM_ENCODINGS = {0: 3, 1: 0, 2: 1, 3: 1}


def name_record(name_id: int, value, platform_id: int = 3) -> tuple:
    """(platformID, encodingID, languageID, nameID, value) for build_name_table."""
    language_id = 0 if platform_id in (0, 1) else 0x409
    return (platform_id, PLATFORM_ENCODINGS[platform_id], language_id, name_id, value)


def encode_name(platform_id: int, text: str) -> bytes:
    if platform_id == 1:
        return text.encode("latin-1")
    return text.encode("utf-16-be")


def build_name_table(records, string_offset: int | None = None) -> bytes:
    """Build a format 0 name table; bytes values are stored untouched."""
    strings = b""
    entries = []
    for platform_id, encoding_id, language_id, name_id, value in records:
        raw = value if isinstance(value, bytes) else encode_name(platform_id, value)
        entries.append(
            struct.pack(
                ">6H",
                platform_id,
                encoding_id,
                language_id,
                name_id,
                len(raw),
                len(strings),
            )
        )
        strings += raw
    if string_offset is None:
        string_offset = 6 + 12 * len(records)
    header = struct.pack(">HHH", 0, len(records), string_offset)
    return header + b"".join(entries) + strings


def build_sfnt(
    table: bytes,
    tag: bytes = b"name",
    sfnt_version: bytes = TRUETYPE_VERSION,
    declared_length: int | None = None,
) -> bytes:
    """Wrap a single table in an sfnt table directory."""
    offset = 12 + 16
    length = len(table) if declared_length is None else declared_length
    header = sfnt_version + struct.pack(">HHHH", 1, 16, 0, 0)
    record = struct.pack(">4sIII", tag, 0, offset, length)
    return header + record + table


def build_sfnt_tables(tables, sfnt_version: bytes = TRUETYPE_VERSION) -> bytes:
    """Wrap several (tag, data) tables in one table directory; tags may repeat."""
    header = sfnt_version + struct.pack(">HHHH", len(tables), 16, 0, 0)
    data_start = 12 + 16 * len(tables)
    records = b""
    body = b""
    for tag, table in tables:
        records += struct.pack(">4sIII", tag, 0, data_start + len(body), len(table))
        body += table
    return header + records + body


def set_record_offset(table: bytes, index: int, offset: int) -> bytes:
    """Point the string of name record `index` at `offset`."""
    patched = bytearray(table)
    struct.pack_into(">H", patched, 6 + 12 * index + 10, offset)
    return bytes(patched)


def build_ttf(family_name: str, style_name: str = "Regular", full_name: str | None = None) -> bytes:
    """Build a small but complete TrueType font with fontTools."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A"])
    fb.setupCharacterMap({0x41: "A"})

    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, 500))
    pen.lineTo((500, 500))
    pen.lineTo((500, 0))
    pen.closePath()
    fb.setupGlyf({".notdef": pen.glyph(), "A": pen.glyph()})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "A": (500, 0)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)

    ps_name = f"{family_name}-{style_name}".replace(" ", "")
    fb.setupNameTable(
        {
            "familyName": family_name,
            "styleName": style_name,
            "uniqueFontIdentifier": f"FontBuilder:{ps_name}",
            "fullName": full_name or f"{family_name} {style_name}",
            "psName": ps_name,
        }
    )
    fb.setupOS2()
    fb.setupPost()

    buffer = BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


def build_pfa(font_name: str | None, padding_lines: int = 3) -> bytes:
    lines = ["%!PS-AdobeFont-1.0: Test 001.000"]
    lines.extend(f"% comment {i}" for i in range(padding_lines))
    lines.append("12 dict begin")
    if font_name is not None:
        lines.append(f"/FontName /{font_name} def")
    lines.append("/PaintType 0 def")
    return ("\n".join(lines) + "\n").encode("latin-1")


def build_pfb(font_name: str) -> bytes:
    ascii_part = build_pfa(font_name)
    return b"\x80\x01" + struct.pack("<I", len(ascii_part)) + ascii_part
