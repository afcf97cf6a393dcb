"""Data models for aggregated release changelogs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChangelogEntry:
    """One package's changelog body for one version, with its display title."""

    package_title: str
    raw_content: str

    @property
    def rendered(self) -> str:
        """The entry as classified: a level-2 title heading followed by the body."""
        return f"## {self.package_title}\n\n{self.raw_content}"


@dataclass(frozen=True)
class ClassifiedChange:
    """The major and patch sections found in a package's changelog entry.

    Either section may be empty. A non-empty section starts with its marker
    ("Major Changes" or "Patch Changes").
    """

    package_title: str
    major_section: str = ""
    patch_section: str = ""


@dataclass(frozen=True)
class AggregatedDocument:
    """The aggregated release changelog for a whole release."""

    release_version: str
    features_markdown: str
    bugfixes_markdown: str

    @property
    def file_name(self) -> str:
        """File name the document is written under."""
        return f"v{self.release_version}-changelog.md"
