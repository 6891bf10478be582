#!/usr/bin/env python3
"""
Font Files Family Organizer - Sort fonts into family folders by their names

Copies fonts (TrueType, OpenType, Type 1, with or without extensions) into a
family-keyed directory tree, renaming each file to its full name:

    output_fonts/<FamilyName>[_<Style>]/<FullName>.<ttf|otf|pfa|pfb>

Names come from the font's name table (fontTools first, then a raw binary
reader for damaged files), the Type 1 /FontName header, or - when nothing
structured is readable - the filename itself. Regular, Italic and Bold stay in
the family folder; other styles (Condensed, Light, ...) get their own
Family_Style folder. Existing destinations get _1, _2, ... suffixes.

Usage:
    python FontFiles_FamilyOrganizer.py
    python FontFiles_FamilyOrganizer.py /path/to/fonts/ -o /path/to/output/
    python FontFiles_FamilyOrganizer.py /path/to/fonts/ -r -n
    python FontFiles_FamilyOrganizer.py /path/to/fonts/ --on-existing skip

Options:
    -o, --output-dir     Output directory (default: output_fonts)
    -r, --recursive      Process subdirectories
    -n, --dry-run        Preview placements without copying
    -v, --verbose        Show every fallback step on the console
    --on-existing        rename (default) or skip when the destination exists
    --strict-names       Use underscores instead of spaces in file names
    --keep-structure     Mirror input subfolders inside the output directory
"""

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Tuple

import FontOrganizerCore.core_console_styles as cs
from FontOrganizerCore.core_errors import (
    IOFailure,
    SignatureError,
    TooManyDuplicates,
)
from FontOrganizerCore.core_file_collector import collect_font_files
from FontOrganizerCore.core_file_transfer import copy_font_file
from FontOrganizerCore.core_font_metadata import FontMetadata
from FontOrganizerCore.core_font_signature import DEFAULT_SIGNATURE, sniff_signature
from FontOrganizerCore.core_logging_config import (
    close_run_logging,
    get_logger,
    setup_run_logging,
)
from FontOrganizerCore.core_metadata_resolver import MetadataResolver
from FontOrganizerCore.core_path_resolver import DuplicatePolicy, build_output_path

console = cs.get_console()

# ============================================================================
# Constants
# ============================================================================

DEFAULT_INPUT_DIR = "input_fonts"
DEFAULT_OUTPUT_DIR = "output_fonts"

# Retries when a destination appears between resolution and copy
MAX_COPY_ATTEMPTS = 5

STATUS_COPIED = "copied"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"

# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class OrganizerConfig:
    """Options for one organizer run"""

    source_dir: Path
    output_dir: Path
    recursive: bool = False
    dry_run: bool = False
    verbose: bool = False
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.RENAME
    strict_names: bool = False
    keep_structure: bool = False


@dataclass
class OrganizeResult:
    """Outcome for a single font file"""

    source_path: Path
    status: str
    target_path: Optional[Path] = None
    metadata: Optional[FontMetadata] = None
    reason: str = ""


@dataclass
class OrganizationStats:
    """Statistics for organization operations"""

    total_files: int = 0
    organized: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)

    def add_error(self, filename: str, reason: str):
        self.errors.append((filename, reason))
        self.failed += 1

    def add_result(self, result: OrganizeResult):
        self.total_files += 1
        if result.status == STATUS_COPIED:
            self.organized += 1
        elif result.status == STATUS_SKIPPED:
            self.skipped += 1
        else:
            self.add_error(result.source_path.name, result.reason)


# ============================================================================
# Per-file Processing
# ============================================================================


def _relative_source_dir(source_path: Path, config: OrganizerConfig) -> Optional[Path]:
    if not config.keep_structure:
        return None
    try:
        return source_path.parent.resolve().relative_to(config.source_dir.resolve())
    except ValueError:
        return None


def process_font_file(
    source_path: Path,
    config: OrganizerConfig,
    resolver: MetadataResolver,
    logger: logging.Logger,
    planned: Optional[Set[Path]] = None,
) -> OrganizeResult:
    """
    Resolve metadata and destination for one font and copy it there.

    Metadata resolution never fails; only duplicate exhaustion and I/O
    errors mark the file as failed.

    Args:
        source_path: Font file to organize
        config: Run options
        resolver: Metadata resolution chain
        logger: Sink for the per-file audit trail
        planned: Destinations claimed earlier in a dry run

    Returns:
        OrganizeResult describing what happened
    """
    name = source_path.name
    planned = planned if planned is not None else set()

    try:
        data = source_path.read_bytes()
    except OSError as e:
        error = IOFailure(f"cannot read {name}: {e}")
        logger.error(f"Failed to process file {name}: {error}")
        return OrganizeResult(source_path, STATUS_FAILED, reason=str(error))

    try:
        signature = sniff_signature(data)
    except SignatureError as e:
        logger.warning(
            f"Invalid font signature for {name}: {type(e).__name__}: {e}; "
            f"using {DEFAULT_SIGNATURE.extension}"
        )
        signature = DEFAULT_SIGNATURE

    metadata = resolver.resolve(data, name, signature)
    relative_dir = _relative_source_dir(source_path, config)

    def exists(path: Path) -> bool:
        return path in planned or path.exists()

    for _ in range(MAX_COPY_ATTEMPTS):
        try:
            target = build_output_path(
                config.output_dir,
                metadata,
                signature.extension,
                policy=config.duplicate_policy,
                strict=config.strict_names,
                relative_dir=relative_dir,
                exists=exists,
            )
        except TooManyDuplicates as e:
            logger.error(f"Failed to resolve output path for {name}: {e}")
            return OrganizeResult(source_path, STATUS_FAILED, metadata=metadata, reason=str(e))

        if target is None:
            logger.info(f"Font for {name} already exists in output, skipped")
            return OrganizeResult(
                source_path, STATUS_SKIPPED, metadata=metadata, reason="already exists"
            )

        if config.dry_run:
            planned.add(target)
            logger.info(f"Would copy {name} to {target}")
            return OrganizeResult(source_path, STATUS_COPIED, target, metadata)

        try:
            copy_font_file(source_path, target)
        except FileExistsError:
            logger.warning(f"{target} appeared during copy of {name}, resolving again")
            continue
        except IOFailure as e:
            logger.error(f"Failed to copy {name}: {e}")
            return OrganizeResult(source_path, STATUS_FAILED, target, metadata, str(e))

        logger.info(f"Copied {name} to {target}")
        return OrganizeResult(source_path, STATUS_COPIED, target, metadata)

    reason = f"destination kept changing after {MAX_COPY_ATTEMPTS} attempts"
    logger.error(f"Failed to copy {name}: {reason}")
    return OrganizeResult(source_path, STATUS_FAILED, metadata=metadata, reason=reason)


def _emit_result(result: OrganizeResult, config: OrganizerConfig) -> None:
    name = result.source_path.name
    if result.status == STATUS_COPIED and result.target_path is not None:
        try:
            shown = str(result.target_path.relative_to(config.output_dir))
        except ValueError:
            shown = str(result.target_path)
        cs.StatusIndicator("updated", dry_run=config.dry_run).add_file(
            name
        ).add_message(f"→ {cs.fmt_file(shown)}").emit()
    elif result.status == STATUS_SKIPPED:
        if config.verbose:
            cs.StatusIndicator("skipped").add_file(name).with_explanation(
                result.reason
            ).emit()
    else:
        cs.StatusIndicator("error").add_file(name).with_explanation(
            result.reason
        ).emit()


# ============================================================================
# Main Orchestration
# ============================================================================


def organize_fonts(config: OrganizerConfig) -> OrganizationStats:
    """
    Organize every font below config.source_dir, one file at a time.

    Raises:
        OSError: the output directory or log file cannot be created, or the
            input directory cannot be listed
    """
    stats = OrganizationStats()

    if not config.dry_run:
        config.output_dir.mkdir(parents=True, exist_ok=True)

    log_path = setup_run_logging(
        None if config.dry_run else config.output_dir,
        verbose=config.verbose,
    )
    logger = get_logger("organizer")
    try:
        if log_path is not None:
            logger.debug(f"Logging to {log_path}")

        font_paths = collect_font_files(
            [str(config.source_dir)],
            recursive=config.recursive,
            exclude_dir=config.output_dir,
        )
        if not font_paths:
            cs.StatusIndicator("warning").with_explanation("No files found").emit()
            return stats

        cs.StatusIndicator("info").add_message(
            f"Found {cs.fmt_count(len(font_paths))} files"
        ).emit()

        resolver = MetadataResolver(logger)
        planned: Set[Path] = set()
        for path_str in font_paths:
            result = process_font_file(Path(path_str), config, resolver, logger, planned)
            stats.add_result(result)
            _emit_result(result, config)
    finally:
        close_run_logging()

    return stats


# ============================================================================
# Main Entry Point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Copy fonts into family folders named after their metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
QUICK START:
  %(prog)s                                  # input_fonts/ -> output_fonts/
  %(prog)s /path/to/fonts/ -o /sorted/      # Choose input and output
  %(prog)s /path/to/fonts/ -n               # Preview placements first
  %(prog)s /path/to/fonts/ --on-existing skip

TIPS:
  • A Log_<timestamp>.txt file in the output folder explains every name
  • Files without readable metadata are named from their filename
        """,
    )

    parser.add_argument(
        "source_dir",
        metavar="FOLDER",
        nargs="?",
        default=DEFAULT_INPUT_DIR,
        help=f"Folder containing fonts to organize (default: {DEFAULT_INPUT_DIR})",
    )

    basic_group = parser.add_argument_group("Basic Options")
    basic_group.add_argument(
        "-o",
        "--output-dir",
        metavar="FOLDER",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Where to copy organized fonts (default: {DEFAULT_OUTPUT_DIR})",
    )
    basic_group.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Look inside subfolders for fonts",
    )
    basic_group.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Preview placements without copying any files",
    )
    basic_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every resolution step on the console",
    )

    naming_group = parser.add_argument_group("Naming Options")
    naming_group.add_argument(
        "--on-existing",
        choices=[policy.value for policy in DuplicatePolicy],
        default=DuplicatePolicy.RENAME.value,
        help="rename: add _1, _2, ... suffixes; skip: keep the existing file",
    )
    naming_group.add_argument(
        "--strict-names",
        action="store_true",
        help="Replace spaces with underscores in folder and file names",
    )
    naming_group.add_argument(
        "--keep-structure",
        action="store_true",
        help="Mirror input subfolders inside the output folder",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> OrganizerConfig:
    return OrganizerConfig(
        source_dir=Path(args.source_dir).expanduser().resolve(),
        output_dir=Path(args.output_dir).expanduser().resolve(),
        recursive=args.recursive,
        dry_run=args.dry_run,
        verbose=args.verbose,
        duplicate_policy=DuplicatePolicy(args.on_existing),
        strict_names=args.strict_names,
        keep_structure=args.keep_structure,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    if not config.source_dir.is_dir():
        cs.StatusIndicator("error").with_explanation(
            f"Source directory does not exist: {config.source_dir}"
        ).emit()
        return 1

    cs.print_panel(
        f"Mode: {'DRY RUN' if config.dry_run else 'ORGANIZE'}\n"
        f"Input Directory: {cs.fmt_file(str(config.source_dir))}\n"
        f"Output Directory: {cs.fmt_file(str(config.output_dir))}\n"
        f"Existing files: {config.duplicate_policy.value}",
        title="Font Files Family Organizer",
        border_style="blue",
    )

    try:
        stats = organize_fonts(config)
    except OSError as e:
        cs.StatusIndicator("error").with_explanation(f"Setup failed: {e}").emit()
        return 1

    summary_lines = [
        f"Total files: {cs.fmt_count(stats.total_files)}",
        f"Organized: {cs.fmt_count(stats.organized)}",
    ]
    if stats.skipped > 0:
        summary_lines.append(f"Skipped: {cs.fmt_count(stats.skipped)}")
    if stats.failed > 0:
        summary_lines.append(f"Failed: {cs.fmt_count(stats.failed)}")
    cs.print_panel("\n".join(summary_lines), title="Summary", border_style="green")

    if stats.errors:
        cs.emit("")
        cs.StatusIndicator("warning").add_message("Errors occurred:").emit()
        for filename, reason in stats.errors[:10]:
            cs.emit(f"{cs.indent(1)}• {cs.fmt_file(filename)}: {cs.fmt_value(reason)}")
        if len(stats.errors) > 10:
            cs.emit(
                f"{cs.indent(1)}... and {cs.fmt_count(len(stats.errors) - 10)} more errors"
            )

    return 1 if stats.total_files and stats.failed == stats.total_files else 0


if __name__ == "__main__":
    exit(main())
