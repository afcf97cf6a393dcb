"""Retry decorator for GitHub REST calls that hit rate limits.

Only rate limiting is retried. Every other failure propagates to the caller
unchanged, so a release run still aborts on the first real error.
"""

import asyncio
import functools
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _wait_time_from_headers(exc: RequestFailed, fallback: float) -> float:
    """Derive how long to wait from the retry-after or x-ratelimit-reset headers."""
    headers = exc.response.headers
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after)
            return fallback

    rate_limit_reset = headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            reset_timestamp = int(rate_limit_reset)
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset)
            return fallback
        now = int(time.time())
        if reset_timestamp > now:
            return float(reset_timestamp - now + 1)
    return fallback


def _is_rate_limited(exc: RequestFailed) -> bool:
    return exc.response.status_code in (403, 429)


def retry_on_rate_limit(
    max_retries: int = 10,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Retry an async GitHub call while GitHub reports that we are rate limited.

    Args:
        max_retries: Maximum number of retry attempts.
        initial_delay: Delay in seconds before the first retry when GitHub gives no hint.
        max_delay: Upper bound in seconds for any single wait.
        exponential_base: Growth factor of the fallback delay between attempts.

    Example:
        @retry_on_rate_limit()
        async def create_release(...):
            ...
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as exc:
                    if attempt == max_retries:
                        logger.error("Max retries reached for GitHub rate limit", function=func.__name__, attempt=attempt + 1)
                        raise
                    retry_after = getattr(exc, "retry_after", None)
                    wait_time = min(retry_after.total_seconds() if retry_after else delay, max_delay)
                except RequestFailed as exc:
                    if not _is_rate_limited(exc):
                        raise
                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=exc.response.status_code,
                        )
                        raise
                    wait_time = min(_wait_time_from_headers(exc, delay), max_delay)

                logger.warning(
                    "GitHub rate limit hit, retrying",
                    function=func.__name__,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    wait_time=wait_time,
                )
                await asyncio.sleep(wait_time)
                delay = min(delay * exponential_base, max_delay)
            raise RuntimeError(f"Retry loop for {func.__name__} exited without a result")

        return wrapper  # type: ignore

    return decorator
