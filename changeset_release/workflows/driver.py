"""Orchestrates a release run: decides between the version and publish workflows."""

from pathlib import Path

import structlog

from changeset_release.changesets.state import read_changeset_state
from changeset_release.configuration.models import GitHubContext, PublishConfig, VersionConfig
from changeset_release.github.abc import GitHubClientBase
from changeset_release.utils.outputs import set_output
from changeset_release.vcs.git import GitRepository
from changeset_release.workflows.publish import run_publish
from changeset_release.workflows.results import PublishResult, RunVersionResult
from changeset_release.workflows.version import run_version

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_release_workflow(
    context: GitHubContext,
    github_adapter: GitHubClientBase,
    version_config: VersionConfig,
    publish_script: str | None = None,
    create_github_releases: bool = True,
    output_file: Path | None = None,
    setup_git_user: bool = True,
) -> RunVersionResult | PublishResult | None:
    """Run the version workflow when changesets are pending, else publish if a script is configured.

    Step outputs are written to `output_file` (the GITHUB_OUTPUT file) when given.
    """
    cwd = version_config.cwd
    git = GitRepository(cwd)
    if setup_git_user:
        git.setup_user()

    state = read_changeset_state(cwd)
    has_changesets = bool(state.changesets)
    set_output("published", "false", output_file)
    set_output("publishedPackages", [], output_file)
    set_output("hasChangesets", str(has_changesets).lower(), output_file)

    if not has_changesets and not publish_script:
        logger.info("No changesets found and no publish script configured, nothing to do")
        return None

    if not has_changesets and publish_script:
        logger.info("No changesets found, attempting to publish any unpublished packages")
        result = await run_publish(
            PublishConfig(cwd=cwd, script=publish_script, create_github_releases=create_github_releases),
            github_adapter,
            git,
        )
        if result.published:
            set_output("published", "true", output_file)
            set_output("publishedPackages", [package.model_dump() for package in result.published_packages], output_file)
        return result

    logger.info("Changesets found, creating or updating the version pull request", pending_changesets=len(state.changesets))
    version_result = await run_version(version_config, context, github_adapter, git, has_publish_script=bool(publish_script))
    set_output("pullRequestNumber", str(version_result.pull_request_number), output_file)
    return version_result
