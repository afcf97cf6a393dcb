"""Contains utility functions for GitHub interactions."""

from changeset_release.utils.constants import VERSION_BRANCH_PREFIX


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A repository in the format 'owner/repo' is required.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def branch_from_ref(ref: str) -> str:
    """Return the branch name for a git ref such as 'refs/heads/main'."""
    return ref.replace("refs/heads/", "", 1) if ref.startswith("refs/heads/") else ref


def version_branch_for(branch: str) -> str:
    """Return the release branch that holds pending version bumps for a base branch."""
    return f"{VERSION_BRANCH_PREFIX}{branch}"


def build_blob_url(server_url: str, repo: str, branch: str, path: str) -> str:
    """Build a browser URL for a file on a branch of a repository."""
    return f"{server_url.rstrip('/')}/{repo}/blob/{branch}/{path.lstrip('/')}"
