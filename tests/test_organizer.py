import logging
from pathlib import Path

import pytest

from helpers import build_name_table, build_pfa, build_sfnt, build_ttf, name_record

from FontFiles_FamilyOrganizer import (
    STATUS_COPIED,
    STATUS_FAILED,
    OrganizerConfig,
    main,
    organize_fonts,
    process_font_file,
)
from FontOrganizerCore.core_metadata_resolver import MetadataResolver
from FontOrganizerCore.core_path_resolver import DuplicatePolicy


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / "input"
    source.mkdir()
    return source


def _config(tmp_path: Path, source_dir: Path, **kwargs) -> OrganizerConfig:
    return OrganizerConfig(source_dir=source_dir, output_dir=tmp_path / "output", **kwargs)


def _helvetica_pair(source_dir: Path):
    first = build_ttf("Helvetica", "Regular", "Helvetica")
    second = build_sfnt(
        build_name_table(
            [name_record(1, "Helvetica"), name_record(2, "Regular"), name_record(4, "Helvetica")]
        )
    )
    (source_dir / "a_font").write_bytes(first)
    (source_dir / "b_font.bin").write_bytes(second)
    return first, second


def test_same_names_never_collide(tmp_path, source_dir):
    first, second = _helvetica_pair(source_dir)
    config = _config(tmp_path, source_dir)

    stats = organize_fonts(config)

    family_dir = config.output_dir / "Helvetica"
    assert stats.organized == 2
    assert (family_dir / "Helvetica.ttf").read_bytes() == first
    assert (family_dir / "Helvetica_1.ttf").read_bytes() == second


def test_run_writes_timestamped_log(tmp_path, source_dir):
    _helvetica_pair(source_dir)
    config = _config(tmp_path, source_dir)

    organize_fonts(config)

    log_files = list(config.output_dir.glob("Log_*.txt"))
    assert len(log_files) == 1
    raw = log_files[0].read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    text = raw.decode("utf-8-sig")
    assert "FamilyName: Helvetica" in text
    assert "Copied a_font to" in text


def test_unreadable_metadata_is_still_placed(tmp_path, source_dir):
    (source_dir / "60981").write_bytes(b"garbage font data")
    (source_dir / "tiny").write_bytes(b"ab")
    (source_dir / "Brevia-CondensedLight.otf").write_bytes(b"OTTO" + b"\x00" * 8)
    (source_dir / "garamond.pfa").write_bytes(build_pfa("Garamond-Bold"))
    config = _config(tmp_path, source_dir)

    stats = organize_fonts(config)

    output = config.output_dir
    assert stats.organized == 4
    assert (output / "Unknown VF" / "Unknown VF Regular.ttf").exists()
    assert (output / "tiny" / "tiny Regular.ttf").exists()
    assert (output / "Brevia_Condensed_Light" / "Brevia Condensed Light.otf").exists()
    assert (output / "Garamond-Bold" / "Garamond-Bold.pfa").exists()


def test_skip_policy_keeps_existing_files(tmp_path, source_dir):
    _helvetica_pair(source_dir)
    (source_dir / "b_font.bin").unlink()
    config = _config(tmp_path, source_dir, duplicate_policy=DuplicatePolicy.SKIP)

    assert organize_fonts(config).organized == 1
    stats = organize_fonts(config)

    assert stats.organized == 0
    assert stats.skipped == 1
    assert not (config.output_dir / "Helvetica" / "Helvetica_1.ttf").exists()


def test_dry_run_leaves_output_untouched(tmp_path, source_dir):
    _helvetica_pair(source_dir)
    config = _config(tmp_path, source_dir, dry_run=True)

    stats = organize_fonts(config)

    assert stats.organized == 2
    assert not config.output_dir.exists()


def test_dry_run_plans_duplicate_suffixes(tmp_path, source_dir):
    _helvetica_pair(source_dir)
    config = _config(tmp_path, source_dir, dry_run=True)
    logger = logging.getLogger("tests.organizer")
    resolver = MetadataResolver(logger)
    planned = set()

    first = process_font_file(source_dir / "a_font", config, resolver, logger, planned)
    second = process_font_file(source_dir / "b_font.bin", config, resolver, logger, planned)

    assert first.target_path.name == "Helvetica.ttf"
    assert second.target_path.name == "Helvetica_1.ttf"
    assert second.status == STATUS_COPIED


def test_missing_source_fails_only_that_file(tmp_path, source_dir):
    config = _config(tmp_path, source_dir)
    logger = logging.getLogger("tests.organizer")

    result = process_font_file(source_dir / "missing.ttf", config, MetadataResolver(logger), logger)

    assert result.status == STATUS_FAILED
    assert "cannot read" in result.reason


def test_keep_structure_mirrors_input_folders(tmp_path, source_dir):
    nested = source_dir / "vendor" / "set"
    nested.mkdir(parents=True)
    (nested / "font").write_bytes(build_ttf("Brevia", "Black"))
    config = _config(tmp_path, source_dir, recursive=True, keep_structure=True)

    organize_fonts(config)

    assert (config.output_dir / "vendor" / "set" / "Brevia_Black" / "Brevia Black.ttf").exists()


def test_strict_names_use_underscores(tmp_path, source_dir):
    (source_dir / "font").write_bytes(build_ttf("Helvetica Neue", "Bold"))
    config = _config(tmp_path, source_dir, strict_names=True)

    organize_fonts(config)

    assert (config.output_dir / "Helvetica_Neue" / "Helvetica_Neue_Bold.ttf").exists()


def test_main_runs_end_to_end(tmp_path, source_dir):
    _helvetica_pair(source_dir)
    output = tmp_path / "sorted"

    assert main([str(source_dir), "-o", str(output)]) == 0
    assert (output / "Helvetica" / "Helvetica_1.ttf").exists()


def test_main_rejects_missing_source(tmp_path):
    assert main([str(tmp_path / "nope"), "-o", str(tmp_path / "out")]) == 1
