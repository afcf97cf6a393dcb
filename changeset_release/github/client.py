"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import (
    AppAuthStrategy,
    AppInstallationAuthStrategy,
    TokenAuthStrategy,
)

from changeset_release.configuration.models import GitHubAuthenticationType, GitHubCredentials
from changeset_release.utils.github import split_repository_in_configuration

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


async def get_github_app_client(repo: str, credentials: GitHubCredentials) -> GitHub[AppInstallationAuthStrategy]:
    """Returns a client authenticated as the GitHub App installation on `repo`."""
    if not (credentials.app_id and credentials.app_private_key_path and credentials.app_installation_id):
        raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id.")
    try:
        with open(credentials.app_private_key_path) as f:
            private_key = f.read()
        app_client = GitHub(
            auth=AppAuthStrategy(app_id=credentials.app_id, private_key=private_key),
            base_url=credentials.api_url,
            http_cache=False,
        )
        owner, repository = await split_repository_in_configuration(repo=repo)
        resp = await app_client.rest.apps.async_get_repo_installation(owner=owner, repo=repository)
        return app_client.with_auth(app_client.auth.as_installation(resp.parsed_data.id))
    except Exception as e:
        raise ValueError(f"Failed to get GitHub App installation: {e}") from e


async def get_github_token_client(credentials: GitHubCredentials) -> GitHub[TokenAuthStrategy]:
    """Returns a client authenticated with a token (a PAT or the workflow's GITHUB_TOKEN)."""
    if not credentials.pat_token:
        raise RuntimeError("Token authentication requires a GitHub token.")
    return GitHub(auth=TokenAuthStrategy(credentials.pat_token), base_url=credentials.api_url, http_cache=False)


async def get_github_client(repo: str, credentials: GitHubCredentials) -> GitHubClient:
    """Returns an authenticated GitHub client for the configured authentication type.

    Supports custom base URLs for GitHub Enterprise Server (GHES).
    """
    if credentials.auth_type == GitHubAuthenticationType.APP:
        return await get_github_app_client(repo, credentials)
    return await get_github_token_client(credentials)
