"""Assembles the aggregated release changelog document."""

from pathlib import Path
from typing import Iterable, Mapping

import structlog

from changeset_release.release_notes.classifier import classify_entries
from changeset_release.release_notes.formatter import format_markdown
from changeset_release.release_notes.models import AggregatedDocument, ChangelogEntry, ClassifiedChange
from changeset_release.release_notes.renderer import render_bug_fixes, render_features
from changeset_release.utils.constants import BUG_FIXES_HEADING, FEATURES_HEADING

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def assemble_document(classified: Mapping[str, ClassifiedChange], release_version: str) -> AggregatedDocument:
    """Render both buckets for a set of classified changes."""
    changes = list(classified.values())
    features = render_features(changes)
    bug_fixes = render_bug_fixes(changes)
    logger.info(
        "Assembled release changelog",
        release_version=release_version,
        feature_count=len(features),
        bug_fix_count=len(bug_fixes),
    )
    return AggregatedDocument(
        release_version=release_version,
        features_markdown=FEATURES_HEADING + "\n" + "\n".join(features),
        bugfixes_markdown=BUG_FIXES_HEADING + "\n" + "\n".join(bug_fixes),
    )


def render_document(document: AggregatedDocument) -> str:
    """Render the document as markdown with every line left-trimmed."""
    markdown = document.features_markdown + "\n\n" + document.bugfixes_markdown
    aligned = "\n".join(line.lstrip() for line in markdown.split("\n"))
    return f"# Release v{document.release_version}\n\n{aligned}\n"


def build_release_changelog(entries: Iterable[ChangelogEntry], release_version: str) -> str:
    """Classify, render and assemble entries into an unformatted document."""
    return render_document(assemble_document(classify_entries(entries), release_version))


def write_release_changelog(
    entries: Iterable[ChangelogEntry],
    release_version: str,
    changelog_directory: Path,
    cwd: Path,
    use_formatter: bool = True,
) -> Path:
    """Build, format and write the aggregated changelog for a release.

    Args:
        entries: One entry per changed package.
        release_version: Version of the whole release, without a leading 'v'.
        changelog_directory: Directory to write into, relative to `cwd` unless absolute.
        cwd: Repository root, used to locate the formatter and its configuration.
        use_formatter: Pass the document through prettier when it is installed.

    Returns:
        Path of the written document.
    """
    document = assemble_document(classify_entries(entries), release_version)
    body = render_document(document)

    directory = changelog_directory if changelog_directory.is_absolute() else cwd / changelog_directory
    path = directory / document.file_name
    if use_formatter:
        body = format_markdown(body, cwd, path)

    directory.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    logger.info("Wrote release changelog", path=str(path))
    return path
