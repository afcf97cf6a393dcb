"""Classifies changelog entries into major (feature) and patch (bug fix) sections."""

from typing import Iterable

import structlog

from changeset_release.release_notes.models import ChangelogEntry, ClassifiedChange
from changeset_release.utils.constants import MAJOR_CHANGES_MARKER, PATCH_CHANGES_MARKER

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

NOT_FOUND = -1


def extract_package_title(entry_text: str) -> str:
    """Return the first line of an entry with its leading heading markup removed."""
    first_line = entry_text.lstrip("\n").split("\n", 1)[0]
    return first_line.lstrip("#").strip()


def classify_entry(entry_text: str) -> ClassifiedChange:
    """Split a rendered changelog entry into its major and patch sections.

    The major section runs from the "Major Changes" marker up to the
    "Patch Changes" marker when that follows it, otherwise to the end of the
    text. The patch section runs from the "Patch Changes" marker to the end
    of the text. Absent markers leave the matching section empty.
    """
    package_title = extract_package_title(entry_text)
    major_index = entry_text.find(MAJOR_CHANGES_MARKER)
    patch_index = entry_text.find(PATCH_CHANGES_MARKER)

    major_section = ""
    if major_index != NOT_FOUND:
        if patch_index != NOT_FOUND and patch_index > major_index:
            major_section = entry_text[major_index:patch_index]
        else:
            major_section = entry_text[major_index:]

    patch_section = ""
    if patch_index != NOT_FOUND:
        patch_section = entry_text[patch_index:]

    if not major_section and not patch_section:
        logger.debug("Changelog entry has no major or patch changes", package_title=package_title)

    return ClassifiedChange(package_title=package_title, major_section=major_section, patch_section=patch_section)


def classify_entries(entries: Iterable[ChangelogEntry | str]) -> dict[str, ClassifiedChange]:
    """Classify entries into a mapping keyed by package title.

    A later entry with the same title replaces an earlier one.
    """
    classified: dict[str, ClassifiedChange] = {}
    for entry in entries:
        entry_text = entry.rendered if isinstance(entry, ChangelogEntry) else entry
        change = classify_entry(entry_text)
        if change.package_title in classified:
            logger.warning("Duplicate package title in changelog entries, keeping the last one", package_title=change.package_title)
        classified[change.package_title] = change
    return classified
