"""Data models for changesets, workspace packages and changelog entries."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from changeset_release.utils.constants import CHANGELOG_FILE_NAME


class BumpLevel(str, Enum):
    """Semantic version bump levels used by changesets."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        """Numeric rank for ordering, higher is a bigger bump."""
        return {BumpLevel.PATCH: 1, BumpLevel.MINOR: 2, BumpLevel.MAJOR: 3}[self]


@dataclass
class VersionEntry:
    """The section of a CHANGELOG.md for a single version."""

    content: str
    highest_level: BumpLevel | None


@dataclass
class Package:
    """A package in the workspace and its parsed package.json."""

    directory: Path
    package_json: dict[str, Any]

    @property
    def name(self) -> str:
        """The package name, falling back to the directory name."""
        return str(self.package_json.get("name", self.directory.name))

    @property
    def version(self) -> str:
        """The package version, empty when package.json has none."""
        return str(self.package_json.get("version", ""))

    @property
    def private(self) -> bool:
        """Whether the package is marked private."""
        return bool(self.package_json.get("private", False))

    @property
    def changelog_path(self) -> Path:
        """Path of the package CHANGELOG.md."""
        return self.directory / CHANGELOG_FILE_NAME


@dataclass
class Packages:
    """All packages of a repository and the tool that manages the workspace."""

    tool: str
    root: Package
    packages: list[Package]


@dataclass
class PreState:
    """Pre-release mode state stored in .changeset/pre.json."""

    mode: str
    tag: str
    initial_versions: dict[str, str] = field(default_factory=dict)
    changesets: list[str] = field(default_factory=list)


@dataclass
class ChangesetRelease:
    """A single package bump declared in a changeset."""

    name: str
    type: BumpLevel


@dataclass
class Changeset:
    """A pending changeset file."""

    id: str
    summary: str
    releases: list[ChangesetRelease]


@dataclass
class ChangesetState:
    """Pending changesets and the pre-release state of a repository."""

    pre_state: PreState | None
    changesets: list[Changeset]


@dataclass
class PackageChangelogEntry:
    """A changed package's release notes for the pull request body."""

    package: Package
    title: str
    content: str
    highest_level: BumpLevel | None

    @property
    def private(self) -> bool:
        return self.package.private
