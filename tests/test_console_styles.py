import pytest
from rich.console import Console

import FontOrganizerCore.core_console_styles as cs


@pytest.mark.parametrize("status", sorted(cs.STATUS_LABELS))
def test_every_status_label_has_a_theme_style(status):
    assert status in cs.THEME.styles


def test_skipped_line_renders_with_its_style():
    console = Console(theme=cs.THEME, record=True, width=200)
    line = cs.StatusIndicator("skipped").add_file("a.ttf").with_explanation("already exists")

    console.print(line.render())

    assert console.get_style("skipped") == cs.THEME.styles["skipped"]
    assert "SKIPPED a.ttf already exists" in console.export_text()


def test_dry_run_prefix():
    console = Console(theme=cs.THEME, record=True, width=200)

    console.print(cs.StatusIndicator("updated", dry_run=True).add_message("→ Family/").render())

    assert console.export_text().startswith("DRY UPDATED → Family/")
