"""Writes GitHub Actions step outputs."""

import json
from pathlib import Path
from typing import Any

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def set_output(name: str, value: Any, output_file: Path | None) -> None:
    """Append a step output to the GITHUB_OUTPUT file.

    Non-string values are JSON encoded. When no output file is configured the
    output is only logged.
    """
    rendered = value if isinstance(value, str) else json.dumps(value)
    logger.info("Setting step output", name=name, value=rendered)
    if output_file is None:
        return
    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"{name}={rendered}\n")
