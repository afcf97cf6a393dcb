"""Publish workflow: publish packages, push tags and create GitHub releases."""

import asyncio

import structlog

from changeset_release.changesets.changelog import get_changelog_entry
from changeset_release.changesets.exceptions import ChangelogEntryNotFoundError, PackageNotFoundError
from changeset_release.changesets.models import Package
from changeset_release.changesets.packages import get_packages
from changeset_release.configuration.models import PublishConfig
from changeset_release.github.abc import GitHubClientBase
from changeset_release.utils.constants import NEW_TAG_PATTERN, ROOT_NEW_TAG_PATTERN
from changeset_release.utils.process import run_command, split_script
from changeset_release.vcs.git import GitRepository
from changeset_release.workflows.results import PublishedPackage, PublishResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def create_release(github_adapter: GitHubClientBase, package: Package, tag_name: str) -> None:
    """Create a GitHub release for a published package from its changelog entry.

    Packages without a CHANGELOG.md are skipped, since changelogs may be disabled.

    Raises:
        ChangelogEntryNotFoundError: If the changelog exists but has no entry for the package version.
    """
    try:
        changelog = await asyncio.to_thread(package.changelog_path.read_text, encoding="utf-8")
    except FileNotFoundError:
        logger.info("No changelog found, skipping GitHub release", package=package.name, tag_name=tag_name)
        return

    entry = get_changelog_entry(changelog, package.version)
    if entry is None:
        raise ChangelogEntryNotFoundError(package.name, package.version)

    await github_adapter.create_release(
        tag_name=tag_name,
        name=tag_name,
        body=entry.content,
        prerelease="-" in package.version,
    )


def find_released_packages(publish_output: str, packages: list[Package]) -> list[Package]:
    """Return the workspace packages announced as new tags in the publish output.

    Raises:
        PackageNotFoundError: If the output names a package that is not in the workspace.
    """
    packages_by_name = {package.name: package for package in packages}
    released: list[Package] = []
    for line in publish_output.split("\n"):
        match = NEW_TAG_PATTERN.search(line)
        if match is None:
            continue
        package_name = match.group(1)
        package = packages_by_name.get(package_name)
        if package is None:
            raise PackageNotFoundError(f'Package "{package_name}" not found. This is probably a bug in the release tooling, please open an issue')
        released.append(package)
    return released


async def run_publish(config: PublishConfig, github_adapter: GitHubClientBase, git: GitRepository) -> PublishResult:
    """Run the publish script, push the created tags and create GitHub releases.

    Args:
        config: Publish workflow configuration.
        github_adapter: Adapter for the repository's GitHub REST API.
        git: The local checkout at `config.cwd`.

    Returns:
        Which packages, if any, were published.
    """
    publish_output = run_command(split_script(config.script), cwd=config.cwd).stdout
    git.push_tags()

    workspace = get_packages(config.cwd)
    released: list[Package] = []

    if workspace.tool != "root":
        released = find_released_packages(publish_output, workspace.packages)
        if config.create_github_releases:
            await asyncio.gather(*(create_release(github_adapter, package, f"{package.name}@{package.version}") for package in released))
    else:
        if not workspace.packages:
            raise PackageNotFoundError("No package found. This is probably a bug in the release tooling, please open an issue")
        package = workspace.packages[0]
        if any(ROOT_NEW_TAG_PATTERN.search(line) for line in publish_output.split("\n")):
            released.append(package)
            if config.create_github_releases:
                await create_release(github_adapter, package, f"v{package.version}")

    if not released:
        logger.info("No packages were published")
        return PublishResult(published=False)

    logger.info("Published packages", packages=[f"{package.name}@{package.version}" for package in released])
    return PublishResult(
        published=True,
        published_packages=[PublishedPackage(name=package.name, version=package.version) for package in released],
    )
