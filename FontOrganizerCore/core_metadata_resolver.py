"""
Metadata resolution chain.

Runs an ordered list of stages and keeps the first that yields names:

    1. fontTools name table     (TrueType / OpenType)
    2. raw name table decoder   (TrueType / OpenType)
    3. Type 1 /FontName header  (Type 1)
    4. filename inference       (always succeeds)

Every failed or skipped stage is logged with its reason, so the log shows
why a name was inferred instead of extracted. The returned metadata always
has non-empty family, subfamily and full names.
"""

import io
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional

from fontTools.ttLib import TTFont

from FontOrganizerCore.core_errors import NoMetadata
from FontOrganizerCore.core_filename_inference import DEFAULT_SUBFAMILY, infer_metadata
from FontOrganizerCore.core_font_metadata import FontMetadata, FontSignature, FontType
from FontOrganizerCore.core_logging_config import get_logger
from FontOrganizerCore.core_name_table import (
    CANONICAL_FIELDS,
    PREFERRED_FIELDS,
    decode_name_table,
)
from FontOrganizerCore.core_type1 import decode_type1

UNNAMED = "Unnamed"

SFNT_TYPES = frozenset([FontType.TRUETYPE, FontType.OPENTYPE])
TYPE1_TYPES = frozenset([FontType.TYPE1])
ALL_TYPES = frozenset(FontType)

StageDecoder = Callable[[bytes, str, FontType], FontMetadata]


# ============================================================================
# Stages
# ============================================================================


def read_name_table_with_fonttools(data: bytes) -> FontMetadata:
    """Read names through fontTools; same precedence as the raw decoder."""
    font = TTFont(io.BytesIO(data))
    try:
        name_table = font["name"]
        values = {}
        for name_id, field_name in CANONICAL_FIELDS.items():
            name = name_table.getDebugName(name_id)
            if name and name.strip():
                values[field_name] = name
        for name_id, field_name in PREFERRED_FIELDS.items():
            name = name_table.getDebugName(name_id)
            if name and name.strip() and field_name not in values:
                values[field_name] = name
    finally:
        font.close()

    metadata = FontMetadata(**values)
    if not metadata.has_names():
        raise NoMetadata("name table holds no family, style or full name")
    return metadata


@dataclass(frozen=True)
class ResolutionStage:
    """One step of the fallback chain"""

    name: str
    decoder: StageDecoder
    font_types: FrozenSet[FontType] = ALL_TYPES

    def applies_to(self, font_type: FontType) -> bool:
        return font_type in self.font_types


def default_stages() -> List[ResolutionStage]:
    return [
        ResolutionStage(
            "fonttools",
            lambda data, stem, font_type: read_name_table_with_fonttools(data),
            SFNT_TYPES,
        ),
        ResolutionStage(
            "name-table",
            lambda data, stem, font_type: decode_name_table(data),
            SFNT_TYPES,
        ),
        ResolutionStage(
            "type1",
            lambda data, stem, font_type: decode_type1(data),
            TYPE1_TYPES,
        ),
        ResolutionStage(
            "filename",
            lambda data, stem, font_type: infer_metadata(stem, font_type),
        ),
    ]


# ============================================================================
# Resolver
# ============================================================================


class MetadataResolver:
    """Turns font bytes into one authoritative FontMetadata per file"""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        stages: Optional[List[ResolutionStage]] = None,
    ):
        self.logger = logger or get_logger(__name__)
        self.stages = stages if stages is not None else default_stages()

    def resolve(
        self, data: bytes, filename: str, signature: FontSignature
    ) -> FontMetadata:
        stem = Path(filename).stem
        font_type = signature.font_type
        metadata = FontMetadata()

        for stage in self.stages:
            if not stage.applies_to(font_type):
                self.logger.debug(
                    f"{filename}: stage '{stage.name}' skipped for {font_type.value} font"
                )
                continue
            try:
                candidate = stage.decoder(data, stem, font_type)
            except Exception as e:
                self.logger.warning(
                    f"{filename}: stage '{stage.name}' failed: {type(e).__name__}: {e}"
                )
                continue
            if not candidate.has_names():
                self.logger.warning(
                    f"{filename}: stage '{stage.name}' returned no names"
                )
                continue
            metadata = candidate.with_source(stage.name)
            break
        else:
            self.logger.warning(f"{filename}: every resolution stage failed")

        metadata = self._backfill(metadata, stem)
        self.logger.info(
            f"File: {filename}, FamilyName: {metadata.family_name}, "
            f"SubfamilyName: {metadata.subfamily_name}, "
            f"FullName: {metadata.full_name} (source: {metadata.source})"
        )
        return metadata

    def _backfill(self, metadata: FontMetadata, stem: str) -> FontMetadata:
        stem = stem.strip()
        family = (metadata.family_name or "").strip() or stem or UNNAMED
        full = (metadata.full_name or "").strip() or stem or UNNAMED
        subfamily = (metadata.subfamily_name or "").strip() or DEFAULT_SUBFAMILY
        return replace(
            metadata,
            family_name=family,
            subfamily_name=subfamily,
            full_name=full,
            source=metadata.source or "defaults",
        )
