"""Extracts version entries from per-package CHANGELOG.md files."""

import re

import structlog

from changeset_release.changesets.models import BumpLevel, PackageChangelogEntry, VersionEntry
from changeset_release.utils.constants import MAJOR_CHANGES_MARKER, MINOR_CHANGES_MARKER, PATCH_CHANGES_MARKER

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
FENCE_PATTERN = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})", re.MULTILINE)

BUMP_LEVEL_HEADINGS = {
    MAJOR_CHANGES_MARKER.lower(): BumpLevel.MAJOR,
    MINOR_CHANGES_MARKER.lower(): BumpLevel.MINOR,
    PATCH_CHANGES_MARKER.lower(): BumpLevel.PATCH,
}


def _normalize_version(text: str) -> str:
    text = text.strip()
    return text[1:] if text.lower().startswith("v") else text


def _fenced_spans(changelog: str) -> list[tuple[int, int]]:
    """Return the (start, end) offsets of fenced code blocks. An unclosed fence runs to the end."""
    spans: list[tuple[int, int]] = []
    opening: re.Match[str] | None = None
    for fence in FENCE_PATTERN.finditer(changelog):
        if opening is None:
            opening = fence
        elif fence.group(1)[0] == opening.group(1)[0] and len(fence.group(1)) >= len(opening.group(1)):
            spans.append((opening.start(), fence.end()))
            opening = None
    if opening is not None:
        spans.append((opening.start(), len(changelog)))
    return spans


def _headings(changelog: str) -> list[re.Match[str]]:
    """Return the markdown headings of `changelog`, ignoring lines inside fenced code blocks."""
    spans = _fenced_spans(changelog)
    return [heading for heading in HEADING_PATTERN.finditer(changelog) if not any(start <= heading.start() < end for start, end in spans)]


def get_changelog_entry(changelog: str, version: str) -> VersionEntry | None:
    """Return the section of `changelog` for `version`, or None if it has none.

    The section starts after the heading whose text is the version and ends
    at the next heading of the same or a higher level.
    """
    wanted = _normalize_version(version)
    headings = _headings(changelog)

    for index, heading in enumerate(headings):
        if _normalize_version(heading.group(2)) != wanted:
            continue
        depth = len(heading.group(1))
        end = len(changelog)
        highest_level: BumpLevel | None = None
        for following in headings[index + 1 :]:
            if len(following.group(1)) <= depth:
                end = following.start()
                break
            level = BUMP_LEVEL_HEADINGS.get(following.group(2).strip().lower())
            if level is not None and (highest_level is None or level.rank > highest_level.rank):
                highest_level = level
        content = changelog[heading.end() : end].strip()
        return VersionEntry(content=content, highest_level=highest_level)

    logger.debug("Version not found in changelog", version=version)
    return None


def sort_changelog_entries(entries: list[PackageChangelogEntry]) -> list[PackageChangelogEntry]:
    """Order entries public before private, then by highest bump level, biggest first."""

    def sort_key(entry: PackageChangelogEntry) -> tuple[int, int]:
        rank = entry.highest_level.rank if entry.highest_level is not None else 0
        return (1 if entry.private else 0, -rank)

    return sorted(entries, key=sort_key)
