"""Configures structlog for command line runs."""

import logging

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog to render to the console at INFO, or DEBUG when requested."""
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
