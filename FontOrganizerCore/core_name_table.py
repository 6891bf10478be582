"""
Bounds-checked reader for the sfnt "name" table.

Used when fontTools cannot open a font (corrupted directory, damaged tables,
bogus checksums). Everything here is a pure function over an immutable bytes
buffer: no logging, no shared state. Every offset is validated before it is
read and any out-of-range access raises MalformedTable.

Table directory layout:
    0   uint32  sfntVersion
    4   uint16  numTables
    6   uint16  searchRange, entrySelector, rangeShift
    12  numTables x 16-byte records (tag, checkSum, offset, length)

Name table layout:
    0   uint16  format
    2   uint16  count
    4   uint16  stringOffset
    6   count x 12-byte records (platformID, encodingID, languageID,
        nameID, length, offset)
"""

import struct
from typing import Dict, Iterator, Optional, Tuple

from FontOrganizerCore.core_errors import MalformedTable, NoMetadata
from FontOrganizerCore.core_font_metadata import FontMetadata, NameRecord

SFNT_HEADER_SIZE = 12
TABLE_RECORD_SIZE = 16
NAME_HEADER_SIZE = 6
NAME_RECORD_SIZE = 12

PLATFORM_UNICODE = 0
PLATFORM_MACINTOSH = 1
PLATFORM_WINDOWS = 3
SUPPORTED_PLATFORMS = frozenset(
    [PLATFORM_UNICODE, PLATFORM_MACINTOSH, PLATFORM_WINDOWS]
)

NAME_ID_FAMILY = 1
NAME_ID_SUBFAMILY = 2
NAME_ID_FULL = 4
NAME_ID_POSTSCRIPT = 6
NAME_ID_TYPOGRAPHIC_FAMILY = 16
NAME_ID_TYPOGRAPHIC_SUBFAMILY = 17

# nameID -> FontMetadata field
CANONICAL_FIELDS = {
    NAME_ID_FAMILY: "family_name",
    NAME_ID_SUBFAMILY: "subfamily_name",
    NAME_ID_FULL: "full_name",
    NAME_ID_POSTSCRIPT: "postscript_name",
}
PREFERRED_FIELDS = {
    NAME_ID_TYPOGRAPHIC_FAMILY: "family_name",
    NAME_ID_TYPOGRAPHIC_SUBFAMILY: "subfamily_name",
}


def _read(fmt: str, data: bytes, offset: int, what: str) -> tuple:
    size = struct.calcsize(fmt)
    if offset < 0 or offset + size > len(data):
        raise MalformedTable(
            f"{what} at offset {offset} needs {size} bytes, buffer has {len(data)}"
        )
    return struct.unpack_from(fmt, data, offset)


def _slice(data: bytes, start: int, length: int, what: str) -> bytes:
    end = start + length
    if start < 0 or end > len(data):
        raise MalformedTable(
            f"{what} spans {start}..{end}, buffer has {len(data)} bytes"
        )
    return data[start:end]


def find_table(data: bytes, tag: bytes) -> Optional[bytes]:
    """Return the raw bytes of the table tagged `tag`, or None if absent."""
    if len(data) < SFNT_HEADER_SIZE:
        raise MalformedTable("data too short for table directory")

    (num_tables,) = _read(">H", data, 4, "numTables")
    directory_end = SFNT_HEADER_SIZE + num_tables * TABLE_RECORD_SIZE
    if directory_end > len(data):
        raise MalformedTable(
            f"table directory declares {num_tables} tables, buffer too short"
        )

    for index in range(num_tables):
        record_offset = SFNT_HEADER_SIZE + index * TABLE_RECORD_SIZE
        table_tag, _checksum, offset, length = _read(
            ">4sIII", data, record_offset, "table record"
        )
        if table_tag == tag:
            return _slice(data, offset, length, f"'{tag.decode('latin-1')}' table")

    return None


def _load_name_table(data: bytes) -> Tuple[bytes, int, int]:
    table = find_table(data, b"name")
    if table is None:
        raise NoMetadata("no 'name' table in table directory")

    _format, count, string_offset = _read(">HHH", table, 0, "name table header")
    records_end = NAME_HEADER_SIZE + count * NAME_RECORD_SIZE
    if records_end > len(table):
        raise MalformedTable(
            f"name table declares {count} records, table holds {len(table)} bytes"
        )
    return table, count, string_offset


def _iter_records(table: bytes, count: int, string_offset: int) -> Iterator[NameRecord]:
    for index in range(count):
        record_offset = NAME_HEADER_SIZE + index * NAME_RECORD_SIZE
        platform_id, encoding_id, language_id, name_id, length, offset = _read(
            ">6H", table, record_offset, "name record"
        )
        yield NameRecord(
            platform_id, encoding_id, language_id, name_id, length, string_offset + offset
        )


def iter_name_records(data: bytes) -> Iterator[NameRecord]:
    """
    Yield every record of the name table found in raw sfnt bytes.

    String ranges are not checked here; use read_name_string for the bytes.
    """
    table, count, string_offset = _load_name_table(data)
    yield from _iter_records(table, count, string_offset)


def read_name_string(data: bytes, record: NameRecord) -> bytes:
    """Return the raw string bytes of a record from iter_name_records."""
    table, _count, _string_offset = _load_name_table(data)
    return _slice(
        table, record.offset, record.length, f"string for nameID {record.name_id}"
    )


def decode_name_string(platform_id: int, raw: bytes) -> str:
    """
    Decode a name record string. Returns "" for unsupported platforms and
    undecodable data.
    """
    if platform_id not in SUPPORTED_PLATFORMS or not raw:
        return ""

    if platform_id == PLATFORM_MACINTOSH:
        text = raw.decode("latin-1")
        return "".join(ch for ch in text if ord(ch) >= 32 and not 127 <= ord(ch) < 160)

    # Unicode and Windows platforms are UTF-16BE
    if len(raw) % 2 != 0:
        return ""
    text = raw.decode("utf-16-be", errors="replace")
    return text.replace("\x00", "")


def decode_name_table(data: bytes) -> FontMetadata:
    """
    Resolve family, subfamily, full and PostScript names from raw sfnt bytes.

    Canonical records (IDs 1, 2, 4, 6) win over typographic ones (16, 17);
    a later canonical record overwrites an earlier one, a typographic record
    only fills a field nothing else filled. Records on other platforms or
    with other nameIDs are never read, so their offsets may be garbage.

    Raises:
        MalformedTable: a used offset points outside the buffer
        NoMetadata: no name table, or no usable string in it
    """
    canonical: Dict[str, str] = {}
    preferred: Dict[str, str] = {}

    table, count, string_offset = _load_name_table(bytes(data))
    for record in _iter_records(table, count, string_offset):
        if record.platform_id not in SUPPORTED_PLATFORMS:
            continue
        if record.name_id in CANONICAL_FIELDS:
            target, field_name = canonical, CANONICAL_FIELDS[record.name_id]
        elif record.name_id in PREFERRED_FIELDS:
            target, field_name = preferred, PREFERRED_FIELDS[record.name_id]
        else:
            continue

        raw = _slice(
            table, record.offset, record.length, f"string for nameID {record.name_id}"
        )
        name = decode_name_string(record.platform_id, raw)
        if not name:
            continue

        if target is canonical:
            canonical[field_name] = name
        else:
            preferred.setdefault(field_name, name)

    merged = dict(preferred)
    merged.update(canonical)

    metadata = FontMetadata(
        family_name=merged.get("family_name"),
        subfamily_name=merged.get("subfamily_name"),
        full_name=merged.get("full_name"),
        postscript_name=merged.get("postscript_name"),
    )
    if not metadata.has_names() and not metadata.postscript_name:
        raise NoMetadata("name table holds no usable family, style or full name")
    return metadata
