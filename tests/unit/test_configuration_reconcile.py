"""Unit tests for reconciling GitHub authentication and run context."""

from pathlib import Path

import pytest

from changeset_release.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from changeset_release.configuration.models import GitHubAuthenticationType
from changeset_release.configuration.reconcile import (
    reconcile_github_context,
    reconcile_github_credentials,
    validate_github_authentication_configuration,
)


@pytest.mark.asyncio
async def test_valid_pat_authentication() -> None:
    """Test that token authentication is validated correctly."""
    # When
    auth_type = await validate_github_authentication_configuration(
        github_pat_token="test-token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
    )

    # Then
    assert auth_type == GitHubAuthenticationType.PAT


@pytest.mark.asyncio
async def test_valid_app_authentication() -> None:
    """Test that GitHub App authentication is validated correctly."""
    # When
    auth_type = await validate_github_authentication_configuration(
        github_pat_token=None,
        github_app_id=123,
        github_app_private_key_path=Path("/path/to/key.pem"),
        github_app_installation_id=456,
    )

    # Then
    assert auth_type == GitHubAuthenticationType.APP


@pytest.mark.asyncio
async def test_both_auth_methods_error() -> None:
    """Test that an error is raised when both a token and App authentication are provided."""
    # When/Then
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_github_authentication_configuration(
            github_pat_token="test-token",
            github_app_id=123,
            github_app_private_key_path=None,
            github_app_installation_id=None,
        )
    assert "Both a token and GitHub App configurations are defined" in str(exc_info.value)


@pytest.mark.asyncio
async def test_no_auth_method_error() -> None:
    """Test that an error is raised when no authentication is provided."""
    # When/Then
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_github_authentication_configuration(
            github_pat_token=None,
            github_app_id=None,
            github_app_private_key_path=None,
            github_app_installation_id=None,
        )
    assert "No GitHub authentication configuration provided" in str(exc_info.value)


@pytest.mark.asyncio
async def test_incomplete_app_configuration_lists_missing_settings() -> None:
    """Test that every missing GitHub App setting is named in the error."""
    # When/Then
    with pytest.raises(GitHubAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_github_authentication_configuration(
            github_pat_token=None,
            github_app_id=123,
            github_app_private_key_path=None,
            github_app_installation_id=None,
        )
    message = str(exc_info.value)
    assert "Incomplete GitHub App configuration" in message
    assert "GITHUB_APP_PRIVATE_KEY_PATH" in message
    assert "GITHUB_APP_INSTALLATION_ID" in message
    assert "GITHUB_APP_ID" not in message


@pytest.mark.asyncio
async def test_reconcile_github_credentials() -> None:
    """Test that credentials carry the API URL and the detected authentication type."""
    credentials = await reconcile_github_credentials(
        github_api_url="https://ghes.example.com/api/v3",
        github_pat_token="test-token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
    )

    assert credentials.auth_type == GitHubAuthenticationType.PAT
    assert credentials.api_url == "https://ghes.example.com/api/v3"
    assert credentials.pat_token == "test-token"


@pytest.mark.asyncio
async def test_reconcile_github_context() -> None:
    """Test that a complete run context is built."""
    context = await reconcile_github_context("acme/portal", "refs/heads/main", "abc123", "https://github.com")

    assert context.repo == "acme/portal"
    assert context.ref == "refs/heads/main"
    assert context.sha == "abc123"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "repo, ref, sha, missing_env",
    [
        (None, "refs/heads/main", "abc123", "GITHUB_REPOSITORY"),
        ("acme/portal", None, "abc123", "GITHUB_REF"),
        ("acme/portal", "refs/heads/main", "", "GITHUB_SHA"),
    ],
)
async def test_reconcile_github_context_missing_element(repo: str | None, ref: str | None, sha: str | None, missing_env: str) -> None:
    """Test that the first missing context element is reported."""
    with pytest.raises(RequiredConfigurationElementError) as exc_info:
        await reconcile_github_context(repo, ref, sha, "https://github.com")
    assert exc_info.value.env_name == missing_env
