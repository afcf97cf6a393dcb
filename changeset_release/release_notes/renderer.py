"""Renders classified changes into the Features and Bug fixes buckets."""

import re
from typing import Iterable

import structlog

from changeset_release.release_notes.models import ClassifiedChange
from changeset_release.utils.constants import MAJOR_CHANGES_MARKER, PATCH_CHANGES_MARKER

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

# A major section ends where the "Patch Changes" marker begins, which leaves
# the heading markup of that marker dangling at the end of the section.
_TRAILING_HEADING_MARKUP = re.compile(r"\n#{1,6}[ \t]*$")


def strip_section_marker(section: str, marker: str) -> str | None:
    """Return the body of a section that starts with `marker`.

    Returns None when the section is malformed, i.e. it does not start with
    the expected marker.
    """
    stripped = section.lstrip()
    if not stripped.startswith(marker):
        return None
    body = stripped[len(marker) :].strip()
    return _TRAILING_HEADING_MARKUP.sub("", body).strip()


def render_subsection(package_title: str, body: str) -> str:
    """Render one package's subsection within a bucket."""
    return f"### {package_title}\n\n{body}\n"


def render_bucket(changes: Iterable[ClassifiedChange], marker: str) -> list[str]:
    """Render the subsections of one bucket.

    Args:
        changes: Classified changes, in the order they should appear.
        marker: MAJOR_CHANGES_MARKER for the features bucket or
            PATCH_CHANGES_MARKER for the bug fixes bucket.

    Returns:
        One rendered subsection per package with a non-empty, well-formed section.
    """
    if marker not in (MAJOR_CHANGES_MARKER, PATCH_CHANGES_MARKER):
        raise ValueError(f"Unknown changelog section marker: {marker}")

    subsections: list[str] = []
    for change in changes:
        section = change.major_section if marker == MAJOR_CHANGES_MARKER else change.patch_section
        if not section:
            continue
        body = strip_section_marker(section, marker)
        if body is None:
            logger.warning("Skipping malformed changelog section", package_title=change.package_title, marker=marker)
            continue
        if not body:
            logger.debug("Changelog section has no notes", package_title=change.package_title, marker=marker)
            continue
        subsections.append(render_subsection(change.package_title, body))
    return subsections


def render_features(changes: Iterable[ClassifiedChange]) -> list[str]:
    """Render the Features bucket from major sections."""
    return render_bucket(changes, MAJOR_CHANGES_MARKER)


def render_bug_fixes(changes: Iterable[ClassifiedChange]) -> list[str]:
    """Render the Bug fixes bucket from patch sections."""
    return render_bucket(changes, PATCH_CHANGES_MARKER)
