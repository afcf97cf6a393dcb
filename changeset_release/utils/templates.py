"""Contains utilities for rendering Jinja2 templates."""

from pathlib import Path
from typing import Any

import jinja2
import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TEMPLATES_DIRECTORY = Path(__file__).parent.parent / "templates"


def construct_jinja2_environment() -> jinja2.Environment:
    """Construct a Jinja2 environment."""
    return jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)


def construct_jinja2_template_from_file(template_path: Path | str, environment: jinja2.Environment | None = None) -> jinja2.Template:
    """Construct a Jinja2 template from a file."""
    if environment is None:
        environment = construct_jinja2_environment()
    try:
        with open(template_path, encoding="utf-8") as f:
            template_content = f.read()
    except FileNotFoundError:
        logger.error("Jinja2 template not found", template_path=str(template_path))
        raise
    return environment.from_string(template_content)


def render_packaged_template(template_name: str, **context: Any) -> str:
    """Render one of the templates shipped with the package."""
    template = construct_jinja2_template_from_file(TEMPLATES_DIRECTORY / template_name)
    try:
        return template.render(**context)
    except jinja2.UndefinedError as exc:
        logger.error("Failed to render template", template_name=template_name, error=str(exc))
        raise
