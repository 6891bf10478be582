"""
Error kinds raised by the font organizer pipeline.

Resolution errors (signature and metadata) are always caught by the
MetadataResolver and turned into a fallback step. Only TooManyDuplicates and
IOFailure abort the processing of a single file.
"""


class FontOrganizerError(Exception):
    """Base class for all organizer errors."""

    pass


# ============================================================================
# Signature Errors
# ============================================================================


class SignatureError(FontOrganizerError):
    """The font type could not be determined from the leading bytes."""

    pass


class ShortData(SignatureError):
    """Raised when a buffer is too short to hold a font signature."""

    pass


class UnknownSignature(SignatureError):
    """Raised when the leading bytes match no known font format."""

    pass


# ============================================================================
# Metadata Errors
# ============================================================================


class MetadataError(FontOrganizerError):
    """A resolution stage could not produce metadata."""

    pass


class MalformedTable(MetadataError):
    """Raised on truncated or out-of-bounds offsets inside a table."""

    pass


class NoMetadata(MetadataError):
    """Raised when no usable name record was decoded."""

    pass


class NoFontName(MetadataError):
    """Raised when a Type 1 header carries no /FontName declaration."""

    pass


# ============================================================================
# Output Errors
# ============================================================================


class TooManyDuplicates(FontOrganizerError):
    """Raised when every duplicate suffix up to the bound is taken."""

    pass


class IOFailure(FontOrganizerError):
    """Raised when reading, writing or copying a font file fails."""

    pass
