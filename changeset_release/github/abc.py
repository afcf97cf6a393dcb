"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Pull Requests
    @abstractmethod
    async def search_pull_requests(self, query: str) -> list[Any]:
        """Search issues and pull requests with a GitHub search query."""
        pass

    @abstractmethod
    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, **kwargs: Any) -> Any:
        """Create a pull request for the repository."""
        pass

    @abstractmethod
    async def update_pull_request(self, pull_number: int, title: str | None = None, body: str | None = None, **kwargs: Any) -> Any:
        """Update a pull request for the repository."""
        pass

    # Releases
    @abstractmethod
    async def create_release(self, tag_name: str, name: str | None = None, body: str | None = None, prerelease: bool = False, **kwargs: Any) -> Any:
        """Create a release for an existing tag."""
        pass
