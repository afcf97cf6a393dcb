"""Pretty-prints markdown with the repository's own prettier installation."""

import subprocess
from pathlib import Path

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def resolve_prettier(cwd: Path) -> Path | None:
    """Return the prettier executable installed in the repository, if any."""
    candidate = cwd / "node_modules" / ".bin" / "prettier"
    return candidate if candidate.exists() else None


def format_markdown(markdown: str, cwd: Path, file_path: Path | None = None) -> str:
    """Format markdown with prettier, returning it unchanged if formatting fails.

    `file_path` lets prettier resolve the repository's configuration as it
    would for a file at that location.
    """
    prettier = resolve_prettier(cwd)
    if prettier is None:
        logger.debug("prettier is not installed, skipping markdown formatting", cwd=str(cwd))
        return markdown

    args = [str(prettier), "--parser", "markdown"]
    if file_path is not None:
        args.extend(["--stdin-filepath", str(file_path)])
    try:
        result = subprocess.run(args, cwd=cwd, input=markdown, capture_output=True, text=True, check=True)
    except Exception as exc:
        logger.debug("Failed to format markdown, using unformatted text", error=str(exc))
        return markdown
    return result.stdout
