"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from changeset_release.utils.constants import DEFAULT_CHANGELOG_DIRECTORY, DEFAULT_COMMIT_MESSAGE, DEFAULT_GITHUB_SERVER_URL, DEFAULT_PR_TITLE


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass(frozen=True)
class GitHubCredentials:
    """Credentials used to build an authenticated GitHub client."""

    auth_type: GitHubAuthenticationType
    api_url: str
    pat_token: str | None = None
    app_id: int | None = None
    app_private_key_path: Path | None = None
    app_installation_id: int | None = None


@dataclass(frozen=True)
class GitHubContext:
    """The repository, ref and commit that triggered the run.

    Passed explicitly into each workflow in place of process-wide state.
    """

    repo: str
    ref: str
    sha: str
    server_url: str = DEFAULT_GITHUB_SERVER_URL


@dataclass
class VersionConfig:
    """Configuration for the version workflow."""

    cwd: Path
    script: str | None = None
    pr_title: str = DEFAULT_PR_TITLE
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    changelog_path: Path = Path(DEFAULT_CHANGELOG_DIRECTORY)
    release_version: str | None = None
    format_changelog: bool = True


@dataclass
class PublishConfig:
    """Configuration for the publish workflow."""

    cwd: Path
    script: str
    create_github_releases: bool = True
