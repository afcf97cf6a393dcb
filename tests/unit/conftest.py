"""Fixtures for unit tests."""

import json
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
import structlog


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def write_package() -> Callable[..., Path]:
    """Return a helper that writes a package.json (and optionally a CHANGELOG.md) into a directory."""

    def _write_package(directory: Path, package_json: dict[str, Any], changelog: str | None = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "package.json").write_text(json.dumps(package_json), encoding="utf-8")
        if changelog is not None:
            (directory / "CHANGELOG.md").write_text(changelog, encoding="utf-8")
        return directory

    return _write_package
