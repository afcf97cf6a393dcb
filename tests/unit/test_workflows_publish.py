"""Unit tests for the publish workflow."""

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from changeset_release.changesets.exceptions import ChangelogEntryNotFoundError, PackageNotFoundError
from changeset_release.changesets.models import Package
from changeset_release.configuration.models import PublishConfig
from changeset_release.vcs.git import GitRepository
from changeset_release.workflows.publish import create_release, find_released_packages, run_publish


def _publish_output(stdout: str) -> MagicMock:
    return MagicMock(stdout=stdout, stderr="", returncode=0)


@pytest.fixture
def monorepo(tmp_path: Path, write_package: Callable[..., Path]) -> Path:
    """A yarn workspace with one stable and one prerelease package."""
    write_package(tmp_path, {"name": "root", "version": "1.0.0", "private": True, "workspaces": ["packages/*"]})
    (tmp_path / "yarn.lock").write_text("")
    write_package(
        tmp_path / "packages" / "core",
        {"name": "@acme/core", "version": "1.1.0"},
        changelog="# @acme/core\n\n## 1.1.0\n\n### Minor Changes\n\n- Added caching.\n\n## 1.0.0\n\n- Initial.\n",
    )
    write_package(
        tmp_path / "packages" / "cli",
        {"name": "acme-cli", "version": "2.0.0-next.1"},
        changelog="# acme-cli\n\n## 2.0.0-next.1\n\n### Major Changes\n\n- New command layout.\n",
    )
    return tmp_path


@pytest.mark.asyncio
async def test_run_publish_monorepo_creates_releases(monorepo: Path) -> None:
    """Every package announced as a new tag gets a GitHub release."""
    adapter = AsyncMock()
    git = MagicMock(spec=GitRepository)
    output = "info Publishing...\n🦋  New tag:  @acme/core@1.1.0\n🦋  New tag:  acme-cli@2.0.0-next.1\n"

    with patch("changeset_release.workflows.publish.run_command", return_value=_publish_output(output)) as mock_run:
        result = await run_publish(PublishConfig(cwd=monorepo, script="yarn release"), adapter, git)

    mock_run.assert_called_once_with(["yarn", "release"], cwd=monorepo)
    git.push_tags.assert_called_once_with()
    assert result.published is True
    assert [(package.name, package.version) for package in result.published_packages] == [
        ("@acme/core", "1.1.0"),
        ("acme-cli", "2.0.0-next.1"),
    ]
    releases = {call.kwargs["tag_name"]: call.kwargs for call in adapter.create_release.await_args_list}
    assert set(releases) == {"@acme/core@1.1.0", "acme-cli@2.0.0-next.1"}
    assert releases["@acme/core@1.1.0"]["body"] == "### Minor Changes\n\n- Added caching."
    assert releases["@acme/core@1.1.0"]["prerelease"] is False
    assert releases["acme-cli@2.0.0-next.1"]["prerelease"] is True


@pytest.mark.asyncio
async def test_run_publish_without_github_releases(monorepo: Path) -> None:
    """Releases are not created when disabled, but packages still count as published."""
    adapter = AsyncMock()
    output = "🦋  New tag:  @acme/core@1.1.0\n"

    with patch("changeset_release.workflows.publish.run_command", return_value=_publish_output(output)):
        result = await run_publish(
            PublishConfig(cwd=monorepo, script="yarn release", create_github_releases=False),
            adapter,
            MagicMock(spec=GitRepository),
        )

    assert result.published is True
    adapter.create_release.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_publish_nothing_published(monorepo: Path) -> None:
    """Output without new tags means nothing was published."""
    adapter = AsyncMock()

    with patch("changeset_release.workflows.publish.run_command", return_value=_publish_output("warn No unpublished packages\n")):
        result = await run_publish(PublishConfig(cwd=monorepo, script="yarn release"), adapter, MagicMock(spec=GitRepository))

    assert result.published is False
    assert result.published_packages == []
    adapter.create_release.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_publish_single_package_uses_version_tag(tmp_path: Path, write_package: Callable[..., Path]) -> None:
    """A repository without workspaces is released under a v-prefixed tag."""
    write_package(tmp_path, {"name": "solo", "version": "0.3.0"}, changelog="# solo\n\n## 0.3.0\n\n### Patch Changes\n\n- Fix.\n")
    adapter = AsyncMock()

    with patch("changeset_release.workflows.publish.run_command", return_value=_publish_output("New tag: v0.3.0\n")):
        result = await run_publish(PublishConfig(cwd=tmp_path, script="npm run release"), adapter, MagicMock(spec=GitRepository))

    assert [(package.name, package.version) for package in result.published_packages] == [("solo", "0.3.0")]
    adapter.create_release.assert_awaited_once_with(
        tag_name="v0.3.0",
        name="v0.3.0",
        body="### Patch Changes\n\n- Fix.",
        prerelease=False,
    )


def test_find_released_packages_unknown_package() -> None:
    """A tag for a package outside the workspace is reported as a bug."""
    packages = [Package(directory=Path("core"), package_json={"name": "@acme/core", "version": "1.0.0"})]

    with pytest.raises(PackageNotFoundError, match="@acme/ghost"):
        find_released_packages("New tag: @acme/ghost@1.0.0", packages)


@pytest.mark.asyncio
async def test_create_release_skips_package_without_changelog(tmp_path: Path) -> None:
    """Packages with changelogs disabled are published without a GitHub release."""
    adapter = AsyncMock()
    package = Package(directory=tmp_path, package_json={"name": "pkg", "version": "1.0.0"})

    await create_release(adapter, package, "pkg@1.0.0")

    adapter.create_release.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_release_missing_entry(tmp_path: Path, write_package: Callable[..., Path]) -> None:
    """A changelog without an entry for the published version is an error."""
    write_package(tmp_path, {"name": "pkg", "version": "1.1.0"}, changelog="# pkg\n\n## 1.0.0\n\n- Initial.\n")
    package = Package(directory=tmp_path, package_json={"name": "pkg", "version": "1.1.0"})

    with pytest.raises(ChangelogEntryNotFoundError):
        await create_release(AsyncMock(), package, "pkg@1.1.0")
