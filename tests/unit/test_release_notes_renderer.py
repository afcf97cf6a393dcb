"""Unit tests for rendering classified changes into buckets."""

import pytest

from changeset_release.release_notes.models import ClassifiedChange
from changeset_release.release_notes.renderer import render_bucket, render_bug_fixes, render_features, strip_section_marker
from changeset_release.utils.constants import MAJOR_CHANGES_MARKER, PATCH_CHANGES_MARKER


@pytest.mark.parametrize(
    "section,marker,expected",
    [
        ("Major Changes\n\n- a\n", MAJOR_CHANGES_MARKER, "- a"),
        ("Patch Changes\n\n- b\n- c\n\n", PATCH_CHANGES_MARKER, "- b\n- c"),
        ("Major Changes\n\n- a\n\n### ", MAJOR_CHANGES_MARKER, "- a"),
        ("  Patch Changes  ", PATCH_CHANGES_MARKER, ""),
        ("Minor stuff without marker", MAJOR_CHANGES_MARKER, None),
        ("Patch Changes\n\n- wrong bucket", MAJOR_CHANGES_MARKER, None),
    ],
)
def test_strip_section_marker(section: str, marker: str, expected: str | None) -> None:
    """Test marker stripping, including malformed sections."""
    assert strip_section_marker(section, marker) == expected


def test_render_features_and_bug_fixes() -> None:
    """Major sections render as features and patch sections as bug fixes."""
    changes = [
        ClassifiedChange("Catalog", major_section="Major Changes\n\n- new api\n\n### ", patch_section="Patch Changes\n\n- small fix\n"),
        ClassifiedChange("Search", patch_section="Patch Changes\n\n- search fix\n"),
    ]

    assert render_features(changes) == ["### Catalog\n\n- new api\n"]
    assert render_bug_fixes(changes) == ["### Catalog\n\n- small fix\n", "### Search\n\n- search fix\n"]


def test_malformed_section_is_skipped_without_raising() -> None:
    """A section that lacks its marker contributes nothing to the bucket."""
    changes = [
        ClassifiedChange("Broken", major_section="no marker here"),
        ClassifiedChange("Fine", major_section="Major Changes\n\n- ok"),
    ]

    assert render_features(changes) == ["### Fine\n\n- ok\n"]


def test_empty_sections_are_skipped() -> None:
    """Packages with empty sections, or sections without notes, are not rendered."""
    changes = [
        ClassifiedChange("Nothing"),
        ClassifiedChange("Heading only", patch_section="Patch Changes\n\n"),
    ]

    assert render_bug_fixes(changes) == []
    assert render_features(changes) == []


def test_render_bucket_rejects_unknown_marker() -> None:
    """Only the major and patch markers select a bucket."""
    with pytest.raises(ValueError, match="Unknown changelog section marker"):
        render_bucket([], "Minor Changes")
