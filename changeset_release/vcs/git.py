"""Git operations used by the version and publish workflows."""

from pathlib import Path

import structlog

from changeset_release.utils.process import CommandFailedError, run_command

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

BOT_USER_NAME = "github-actions[bot]"
BOT_USER_EMAIL = "github-actions[bot]@users.noreply.github.com"


class GitRepository:
    """A local git checkout operated on through the git command line."""

    def __init__(self, path: Path) -> None:
        """Initialize with the root of the checkout."""
        self.path = path

    def _git(self, *args: str, check: bool = True) -> str:
        return run_command(["git", *args], cwd=self.path, check=check).stdout

    def setup_user(self, name: str = BOT_USER_NAME, email: str = BOT_USER_EMAIL) -> None:
        """Configure the commit author for this checkout."""
        self._git("config", "user.name", name)
        self._git("config", "user.email", email)

    def switch_to_maybe_existing_branch(self, branch: str) -> None:
        """Check out `branch`, creating it locally when it does not exist yet."""
        result = run_command(["git", "checkout", branch], cwd=self.path, check=False)
        if result.returncode == 0:
            return
        if "did not match any file(s) known to git" not in result.stderr and "invalid reference" not in result.stderr:
            raise CommandFailedError(["git", "checkout", branch], result.returncode, result.stdout, result.stderr)
        logger.info("Branch does not exist yet, creating it", branch=branch)
        self._git("checkout", "-b", branch)

    def reset(self, sha: str, mode: str = "hard") -> None:
        """Reset the current branch to `sha`."""
        self._git("reset", f"--{mode}", sha)

    def check_if_clean(self) -> bool:
        """Return True when the working tree has no uncommitted changes."""
        return not self._git("status", "--porcelain").strip()

    def commit_all(self, message: str) -> None:
        """Stage every change and commit it."""
        self._git("add", ".")
        self._git("commit", "-m", message)

    def push(self, branch: str, force: bool = False) -> None:
        """Push the current HEAD to `branch` on origin."""
        args = ["push", "origin", f"HEAD:{branch}"]
        if force:
            args.append("--force")
        self._git(*args)

    def push_tags(self) -> None:
        """Push all tags to origin."""
        self._git("push", "origin", "--tags")
