"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import (
    IssueSearchResultItem,
    PullRequest,
    Release,
)

from changeset_release.configuration.models import GitHubCredentials
from changeset_release.utils.github import split_repository_in_configuration
from changeset_release.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            try:
                error_data = exc.response.json()
            except Exception:
                error_data = {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            logger.error(
                "GitHub 422 Unprocessable Entity",
                function=func.__name__,
                message=message,
                errors=errors,
                status_code=422,
            )
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(cls, repo: str, credentials: GitHubCredentials) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            credentials: Reconciled GitHub credentials

        Returns:
            Configured GitHubKitAdapter instance
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=credentials.api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(repo, credentials)
        return cls(client, owner, repo_name)

    # Pull Requests
    @retry_on_rate_limit()
    async def search_pull_requests(self, query: str) -> list[IssueSearchResultItem]:
        """Search issues and pull requests with a GitHub search query."""
        response = await self.client.rest.search.async_issues_and_pull_requests(q=query)
        items: list[IssueSearchResultItem] = response.parsed_data.items
        logger.debug("Searched pull requests", query=query, total_count=len(items))
        return items

    @handle_github_422
    @retry_on_rate_limit()
    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, **kwargs: Any) -> PullRequest:
        """Create a pull request for the repository."""
        params = self._omit_null_parameters(title=title, head=head, base=base, body=body, **kwargs)
        response: Response[PullRequest] = await self.client.rest.pulls.async_create(
            owner=self.owner,
            repo=self.repo_name,
            **params,
        )
        return response.parsed_data

    @handle_github_422
    @retry_on_rate_limit()
    async def update_pull_request(self, pull_number: int, title: str | None = None, body: str | None = None, **kwargs: Any) -> PullRequest:
        """Update a pull request for the repository."""
        params = self._omit_null_parameters(title=title, body=body, **kwargs)
        response: Response[PullRequest] = await self.client.rest.pulls.async_update(
            owner=self.owner,
            repo=self.repo_name,
            pull_number=pull_number,
            **params,
        )
        return response.parsed_data

    # Releases
    @handle_github_422
    @retry_on_rate_limit()
    async def create_release(self, tag_name: str, name: str | None = None, body: str | None = None, prerelease: bool = False, **kwargs: Any) -> Release:
        """Create a release for an existing tag."""
        params = self._omit_null_parameters(tag_name=tag_name, name=name, body=body, prerelease=prerelease, **kwargs)
        response: Response[Release] = await self.client.rest.repos.async_create_release(
            owner=self.owner,
            repo=self.repo_name,
            **params,
        )
        logger.info("Created GitHub release", tag_name=tag_name, prerelease=prerelease)
        return response.parsed_data
