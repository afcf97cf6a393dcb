"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import sys
from pathlib import Path
from typing import NoReturn

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from changeset_release.changesets.exceptions import (
    ChangelogEntryNotFoundError,
    ChangesetsCliNotFoundError,
    PackageNotFoundError,
    WorkspaceConfigurationError,
)
from changeset_release.changesets.models import Package
from changeset_release.changesets.packages import read_package_json
from changeset_release.configuration.env import get_settings
from changeset_release.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from changeset_release.configuration.models import GitHubContext, GitHubCredentials, PublishConfig, VersionConfig
from changeset_release.configuration.reconcile import reconcile_github_context, reconcile_github_credentials
from changeset_release.github.adapter import GitHubKitAdapter
from changeset_release.release_notes.assembler import write_release_changelog
from changeset_release.release_notes.models import ChangelogEntry
from changeset_release.utils.constants import (
    DEFAULT_CHANGELOG_DIRECTORY,
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_GITHUB_SERVER_URL,
    DEFAULT_PR_TITLE,
)
from changeset_release.utils.log_config import configure_logging
from changeset_release.utils.outputs import set_output
from changeset_release.utils.process import CommandFailedError
from changeset_release.vcs.git import GitRepository
from changeset_release.workflows.driver import run_release_workflow
from changeset_release.workflows.publish import run_publish
from changeset_release.workflows.version import read_package_changelog_entry, run_version

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Version and publish changeset-managed monorepos.")

EXPECTED_ERRORS = (
    ChangelogEntryNotFoundError,
    ChangesetsCliNotFoundError,
    CommandFailedError,
    FileNotFoundError,
    GitHubAuthenticationConfigurationUndefinedError,
    PackageNotFoundError,
    RequiredConfigurationElementError,
    WorkspaceConfigurationError,
)


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    cwd: Annotated[Path, Option(envvar="INPUT_CWD", help="Root of the repository checkout.")] = Path("."),
    repo: Annotated[str | None, Option(envvar="GITHUB_REPOSITORY", help="Repository name (owner/repo).")] = None,
    ref: Annotated[str | None, Option(envvar="GITHUB_REF", help="Git ref that triggered the run, e.g. refs/heads/main.")] = None,
    sha: Annotated[str | None, Option(envvar="GITHUB_SHA", help="Commit sha that triggered the run.")] = None,
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = DEFAULT_GITHUB_API_URL,
    github_server_url: Annotated[str, Option(envvar="GITHUB_SERVER_URL", help="GitHub server URL used for links.")] = DEFAULT_GITHUB_SERVER_URL,
    github_token: Annotated[str | None, Option(envvar="GITHUB_TOKEN", help="GitHub token (PAT or workflow token).")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Store shared options for the current context."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj.update(
        cwd=cwd.resolve(),
        repo=repo,
        ref=ref,
        sha=sha,
        github_api_url=github_api_url,
        github_server_url=github_server_url,
        github_token=github_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    sys.exit(1)


async def _reconcile(obj: dict) -> tuple[GitHubCredentials, GitHubContext]:
    credentials = await reconcile_github_credentials(
        github_api_url=obj["github_api_url"],
        github_pat_token=obj["github_token"],
        github_app_id=obj["github_app_id"],
        github_app_private_key_path=obj["github_app_private_key_path"],
        github_app_installation_id=obj["github_app_installation_id"],
    )
    context = await reconcile_github_context(obj["repo"], obj["ref"], obj["sha"], obj["github_server_url"])
    return credentials, context


def _version_config(
    cwd: Path,
    script: str | None,
    pr_title: str,
    commit_message: str,
    changelog_path: Path,
    release_version: str | None,
    no_format: bool,
) -> VersionConfig:
    return VersionConfig(
        cwd=cwd,
        script=script or None,
        pr_title=pr_title,
        commit_message=commit_message,
        changelog_path=changelog_path,
        release_version=release_version or None,
        format_changelog=not no_format,
    )


@typer_app.command(name="run")
def run_cli(
    ctx: typer.Context,
    publish: Annotated[str | None, Option(envvar="INPUT_PUBLISH", help="Script to publish packages, e.g. 'yarn release'.")] = None,
    version: Annotated[str | None, Option(envvar="INPUT_VERSION", help="Script to version packages instead of 'changeset version'.")] = None,
    title: Annotated[str, Option(envvar="INPUT_TITLE", help="Title of the version pull request.")] = DEFAULT_PR_TITLE,
    commit: Annotated[str, Option(envvar="INPUT_COMMIT", help="Commit message for the version bump.")] = DEFAULT_COMMIT_MESSAGE,
    changelog_path: Annotated[Path, Option(envvar="INPUT_CHANGELOG_PATH", help="Directory for aggregated release changelogs.")] = Path(
        DEFAULT_CHANGELOG_DIRECTORY
    ),
    release_version: Annotated[str | None, Option(envvar="INPUT_RELEASE_VERSION", help="Version of the whole release.")] = None,
    create_github_releases: Annotated[bool, Option(envvar="INPUT_CREATE_GITHUB_RELEASES", help="Create GitHub releases after publishing.")] = True,
    no_format: Annotated[bool, Option("--no-format", help="Do not format the aggregated changelog with prettier.")] = False,
) -> None:
    """Version packages when changesets are pending, otherwise publish them."""
    obj = ctx.obj
    settings = get_settings()

    async def run() -> None:
        credentials, context = await _reconcile(obj)
        adapter = await GitHubKitAdapter.create(repo=context.repo, credentials=credentials)
        await run_release_workflow(
            context=context,
            github_adapter=adapter,
            version_config=_version_config(obj["cwd"], version, title, commit, changelog_path, release_version, no_format),
            publish_script=publish or None,
            create_github_releases=create_github_releases,
            output_file=settings.GITHUB_OUTPUT,
        )

    try:
        asyncio.run(run())
    except EXPECTED_ERRORS as exc:
        _fail(exc)


@typer_app.command(name="version")
def version_cli(
    ctx: typer.Context,
    script: Annotated[str | None, Option("--script", envvar="INPUT_VERSION", help="Script to version packages instead of 'changeset version'.")] = None,
    title: Annotated[str, Option(envvar="INPUT_TITLE", help="Title of the version pull request.")] = DEFAULT_PR_TITLE,
    commit: Annotated[str, Option(envvar="INPUT_COMMIT", help="Commit message for the version bump.")] = DEFAULT_COMMIT_MESSAGE,
    changelog_path: Annotated[Path, Option(envvar="INPUT_CHANGELOG_PATH", help="Directory for aggregated release changelogs.")] = Path(
        DEFAULT_CHANGELOG_DIRECTORY
    ),
    release_version: Annotated[str | None, Option(envvar="INPUT_RELEASE_VERSION", help="Version of the whole release.")] = None,
    has_publish_script: Annotated[bool, Option(help="Mention automatic publishing in the pull request body.")] = False,
    no_format: Annotated[bool, Option("--no-format", help="Do not format the aggregated changelog with prettier.")] = False,
) -> None:
    """Apply pending changesets and open or update the version pull request."""
    obj = ctx.obj
    settings = get_settings()

    async def run() -> None:
        credentials, context = await _reconcile(obj)
        adapter = await GitHubKitAdapter.create(repo=context.repo, credentials=credentials)
        result = await run_version(
            _version_config(obj["cwd"], script, title, commit, changelog_path, release_version, no_format),
            context,
            adapter,
            GitRepository(obj["cwd"]),
            has_publish_script=has_publish_script,
        )
        set_output("pullRequestNumber", str(result.pull_request_number), settings.GITHUB_OUTPUT)
        action = "Created" if result.created else "Updated"
        typer.echo(f"{action} pull request #{result.pull_request_number} with release notes at {result.changelog_path}")

    try:
        asyncio.run(run())
    except EXPECTED_ERRORS as exc:
        _fail(exc)


@typer_app.command(name="publish")
def publish_cli(
    ctx: typer.Context,
    script: Annotated[str, Argument(envvar="INPUT_PUBLISH", help="Script to publish packages, e.g. 'yarn release'.")],
    create_github_releases: Annotated[bool, Option(envvar="INPUT_CREATE_GITHUB_RELEASES", help="Create GitHub releases after publishing.")] = True,
) -> None:
    """Publish packages, push tags and create GitHub releases."""
    obj = ctx.obj
    settings = get_settings()

    async def run() -> None:
        credentials, context = await _reconcile(obj)
        adapter = await GitHubKitAdapter.create(repo=context.repo, credentials=credentials)
        result = await run_publish(
            PublishConfig(cwd=obj["cwd"], script=script, create_github_releases=create_github_releases),
            adapter,
            GitRepository(obj["cwd"]),
        )
        set_output("published", str(result.published).lower(), settings.GITHUB_OUTPUT)
        set_output("publishedPackages", [package.model_dump() for package in result.published_packages], settings.GITHUB_OUTPUT)
        if not result.published:
            typer.echo("No packages were published.")
            return
        typer.echo(f"Published {len(result.published_packages)} package(s):")
        for package in result.published_packages:
            typer.echo(f"  - {package.name}@{package.version}")

    try:
        asyncio.run(run())
    except EXPECTED_ERRORS as exc:
        _fail(exc)


@typer_app.command(name="aggregate-changelog")
def aggregate_changelog_cli(
    ctx: typer.Context,
    release_version: Annotated[str, Argument(help="Version of the whole release, e.g. 1.4.0.")],
    package_dirs: Annotated[list[Path], Argument(help="Directories of the packages included in the release, relative to --cwd.")],
    changelog_path: Annotated[Path, Option(envvar="INPUT_CHANGELOG_PATH", help="Directory for aggregated release changelogs.")] = Path(
        DEFAULT_CHANGELOG_DIRECTORY
    ),
    no_format: Annotated[bool, Option("--no-format", help="Do not format the aggregated changelog with prettier.")] = False,
) -> None:
    """Write the aggregated release changelog for packages that were already versioned."""
    cwd: Path = ctx.obj["cwd"]

    async def run() -> Path:
        directories = [(directory if directory.is_absolute() else cwd / directory).resolve() for directory in package_dirs]
        packages = [Package(directory=directory, package_json=read_package_json(directory)) for directory in directories]
        entries = await asyncio.gather(*(read_package_changelog_entry(package) for package in packages))
        return write_release_changelog(
            [ChangelogEntry(package_title=entry.title, raw_content=entry.content) for entry in entries],
            release_version=release_version.lstrip("v"),
            changelog_directory=changelog_path,
            cwd=cwd,
            use_formatter=not no_format,
        )

    try:
        path = asyncio.run(run())
    except EXPECTED_ERRORS as exc:
        _fail(exc)
    typer.echo(f"Wrote release changelog to {path}")


if __name__ == "__main__":
    typer_app()
