"""Reconcile GitHub authentication and run context configuration."""

from pathlib import Path

from changeset_release.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from changeset_release.configuration.models import GitHubAuthenticationType, GitHubContext, GitHubCredentials


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If neither or both of a token and a GitHub App
            configuration are defined, or the GitHub App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings = {
        "GitHub App ID": (github_app_id, "--github-app-id", "GITHUB_APP_ID"),
        "GitHub App private key path": (github_app_private_key_path, "--github-app-private-key-path", "GITHUB_APP_PRIVATE_KEY_PATH"),
        "GitHub App installation ID": (github_app_installation_id, "--github-app-installation-id", "GITHUB_APP_INSTALLATION_ID"),
    }
    any_app_setting = any(value for value, _, _ in app_settings.values())

    if github_pat_token and any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both a token and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if not any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a token or a GitHub App configuration."
        )

    missing = [(name, cli_name, env_name) for name, (value, cli_name, env_name) in app_settings.items() if not value]
    if missing:
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{name} (command line option {cli_name}, environment variable {env_name})" for name, cli_name, env_name in missing
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    return GitHubAuthenticationType.APP


async def reconcile_github_credentials(
    github_api_url: str,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubCredentials:
    """Validate authentication settings and bundle them into credentials."""
    auth_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )
    return GitHubCredentials(
        auth_type=auth_type,
        api_url=github_api_url,
        pat_token=github_pat_token,
        app_id=github_app_id,
        app_private_key_path=github_app_private_key_path,
        app_installation_id=github_app_installation_id,
    )


async def reconcile_github_context(
    repo: str | None,
    ref: str | None,
    sha: str | None,
    server_url: str,
) -> GitHubContext:
    """Build the run context, failing on the first missing required element.

    Raises:
        RequiredConfigurationElementError: If the repository, ref or sha is missing.
    """
    if not repo:
        raise RequiredConfigurationElementError("repository", "--repo", "GITHUB_REPOSITORY")
    if not ref:
        raise RequiredConfigurationElementError("git ref", "--ref", "GITHUB_REF")
    if not sha:
        raise RequiredConfigurationElementError("commit sha", "--sha", "GITHUB_SHA")
    return GitHubContext(repo=repo, ref=ref, sha=sha, server_url=server_url)
