"""Runs external commands (git, node, package manager scripts) as subprocesses."""

import re
import subprocess
from pathlib import Path

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class CommandFailedError(Exception):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stdout: str, stderr: str) -> None:
        """Initializes the exception with the failed command and its output."""
        super().__init__(f"Command '{' '.join(args)}' failed with exit code {returncode}: {stderr.strip()}")
        self.command = args
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def split_script(script: str) -> list[str]:
    """Split a script such as 'yarn release --tag next' into command arguments."""
    return [part for part in re.split(r"\s+", script.strip()) if part]


def run_command(args: list[str], cwd: Path, check: bool = True) -> subprocess.CompletedProcess[str]:
    """Run a command in `cwd`, capturing and logging its output.

    Args:
        args: Command and its arguments.
        cwd: Working directory for the command.
        check: Raise CommandFailedError when the command exits non-zero.

    Returns:
        The completed process with text stdout and stderr.
    """
    logger.info("Running command", command=" ".join(args), cwd=str(cwd))
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError:
        logger.error("Command not found", command=args[0])
        raise
    if result.stdout:
        logger.debug("Command stdout", command=args[0], stdout=result.stdout)
    if result.stderr:
        logger.debug("Command stderr", command=args[0], stderr=result.stderr)
    if check and result.returncode != 0:
        raise CommandFailedError(args, result.returncode, result.stdout, result.stderr)
    return result
