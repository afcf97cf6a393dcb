"""Changesets workspace, state and changelog handling."""

from .changelog import get_changelog_entry, sort_changelog_entries
from .models import BumpLevel, Changeset, ChangesetState, Package, PackageChangelogEntry, Packages, PreState, VersionEntry
from .packages import get_changed_packages, get_packages, get_versions_by_directory
from .state import read_changeset_state

__all__ = [
    "BumpLevel",
    "Changeset",
    "ChangesetState",
    "Package",
    "PackageChangelogEntry",
    "Packages",
    "PreState",
    "VersionEntry",
    "get_changed_packages",
    "get_changelog_entry",
    "get_packages",
    "get_versions_by_directory",
    "read_changeset_state",
    "sort_changelog_entries",
]
