"""Version workflow: apply pending changesets and propose them in a pull request."""

import asyncio
from pathlib import Path

import structlog
from packaging import version

from changeset_release.changesets.changelog import get_changelog_entry, sort_changelog_entries
from changeset_release.changesets.exceptions import (
    ChangelogEntryNotFoundError,
    ChangesetsCliNotFoundError,
    WorkspaceConfigurationError,
)
from changeset_release.changesets.models import Package, PackageChangelogEntry
from changeset_release.changesets.packages import get_changed_packages, get_versions_by_directory, read_package_json
from changeset_release.changesets.state import read_changeset_state
from changeset_release.configuration.models import GitHubContext, VersionConfig
from changeset_release.github.abc import GitHubClientBase
from changeset_release.release_notes.assembler import write_release_changelog
from changeset_release.release_notes.models import ChangelogEntry
from changeset_release.release_notes.titles import format_package_title
from changeset_release.utils.constants import CHANGESETS_CLI_MIN_VERSION_COMMAND
from changeset_release.utils.github import branch_from_ref, build_blob_url, version_branch_for
from changeset_release.utils.process import run_command, split_script
from changeset_release.utils.templates import render_packaged_template
from changeset_release.utils.truncation import truncate_string_at_end
from changeset_release.vcs.git import GitRepository
from changeset_release.workflows.results import RunVersionResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def run_changesets_version_command(cwd: Path) -> None:
    """Run the repository's own changesets CLI to apply pending changesets."""
    cli_directory = cwd / "node_modules" / "@changesets" / "cli"
    try:
        cli_package_json = read_package_json(cli_directory)
    except WorkspaceConfigurationError as exc:
        raise ChangesetsCliNotFoundError(f'Have you forgotten to install `@changesets/cli` in "{cwd}"?') from exc

    cli_version = str(cli_package_json.get("version", "0.0.0"))
    command = "bump" if version.parse(cli_version) < version.parse(CHANGESETS_CLI_MIN_VERSION_COMMAND) else "version"
    logger.info("Running changesets CLI", cli_version=cli_version, command=command)
    run_command(["node", str(cli_directory / "bin.js"), command], cwd=cwd)


async def read_package_changelog_entry(package: Package) -> PackageChangelogEntry:
    """Read a changed package's CHANGELOG.md and extract the entry for its new version.

    Raises:
        FileNotFoundError: If the package has no CHANGELOG.md.
        ChangelogEntryNotFoundError: If the changelog has no entry for the package version.
    """
    contents = await asyncio.to_thread(package.changelog_path.read_text, encoding="utf-8")
    entry = get_changelog_entry(contents, package.version)
    if entry is None:
        raise ChangelogEntryNotFoundError(package.name, package.version)
    return PackageChangelogEntry(
        package=package,
        title=format_package_title(package.name),
        content=entry.content,
        highest_level=entry.highest_level,
    )


def resolve_release_version(cwd: Path, release_version: str | None) -> str:
    """Use the requested release version, else the root package.json version."""
    if release_version:
        return release_version.lstrip("v")
    root_version = read_package_json(cwd).get("version")
    if not root_version:
        raise WorkspaceConfigurationError("No release version given and the root package.json has no version")
    return str(root_version)


def render_pull_request_body(
    branch: str,
    entries: list[PackageChangelogEntry],
    changelog_path: str,
    changelog_url: str,
    pre_state_tag: str | None,
    has_publish_script: bool,
) -> str:
    """Render the version pull request body, truncated to fit GitHub's limit."""
    body = render_packaged_template(
        "version_pr_body.j2",
        branch=branch,
        entries=sort_changelog_entries(entries),
        changelog_path=changelog_path,
        changelog_url=changelog_url,
        pre_state_tag=pre_state_tag,
        has_publish_script=has_publish_script,
    )
    body, was_truncated = truncate_string_at_end(body)
    if was_truncated:
        logger.warning("Pull request body was truncated to fit GitHub's limit")
    return body


async def run_version(
    config: VersionConfig,
    context: GitHubContext,
    github_adapter: GitHubClientBase,
    git: GitRepository,
    has_publish_script: bool = False,
) -> RunVersionResult:
    """Apply pending changesets on the release branch and open or update its pull request.

    Args:
        config: Version workflow configuration.
        context: Repository, ref and commit that triggered the run.
        github_adapter: Adapter for the repository's GitHub REST API.
        git: The local checkout at `config.cwd`.
        has_publish_script: Whether merging the pull request publishes automatically.

    Returns:
        The pull request number and the path of the aggregated release changelog.
    """
    cwd = config.cwd
    branch = branch_from_ref(context.ref)
    version_branch = version_branch_for(branch)
    pre_state = read_changeset_state(cwd).pre_state
    pre_state_suffix = f" ({pre_state.tag})" if pre_state is not None else ""

    git.switch_to_maybe_existing_branch(version_branch)
    git.reset(context.sha)

    versions_by_directory = get_versions_by_directory(cwd)
    if config.script:
        run_command(split_script(config.script), cwd=cwd)
    else:
        run_changesets_version_command(cwd)

    search_query = f"repo:{context.repo} state:open head:{version_branch} base:{branch}"
    search_task = asyncio.create_task(github_adapter.search_pull_requests(search_query))
    try:
        changed_packages = get_changed_packages(cwd, versions_by_directory)
        release_version = resolve_release_version(cwd, config.release_version)

        package_entries = list(await asyncio.gather(*(read_package_changelog_entry(package) for package in changed_packages)))
        changelog_file = write_release_changelog(
            [ChangelogEntry(package_title=entry.title, raw_content=entry.content) for entry in package_entries],
            release_version=release_version,
            changelog_directory=config.changelog_path,
            cwd=cwd,
            use_formatter=config.format_changelog,
        )
        changelog_path = changelog_file.relative_to(cwd).as_posix() if changelog_file.is_relative_to(cwd) else changelog_file.as_posix()

        pr_body = render_pull_request_body(
            branch=branch,
            entries=package_entries,
            changelog_path=changelog_path,
            changelog_url=build_blob_url(context.server_url, context.repo, branch, changelog_path),
            pre_state_tag=pre_state.tag if pre_state is not None else None,
            has_publish_script=has_publish_script,
        )
        pr_title = f"{config.pr_title}{pre_state_suffix}"

        # The version script may already have committed its changes.
        if not git.check_if_clean():
            git.commit_all(f"{config.commit_message}{pre_state_suffix}")
        git.push(version_branch, force=True)

        existing_pull_requests = await search_task
    finally:
        if not search_task.done():
            search_task.cancel()

    if not existing_pull_requests:
        logger.info("Creating pull request", head=version_branch, base=branch)
        pull_request = await github_adapter.create_pull_request(title=pr_title, head=version_branch, base=branch, body=pr_body)
        return RunVersionResult(pull_request_number=pull_request.number, changelog_path=changelog_path, created=True)

    pull_request_number = existing_pull_requests[0].number
    logger.info("Updating existing pull request", number=pull_request_number)
    await github_adapter.update_pull_request(pull_request_number, title=pr_title, body=pr_body)
    return RunVersionResult(pull_request_number=pull_request_number, changelog_path=changelog_path, created=False)
