"""Unit tests for the rate limit retry decorator."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from githubkit.exception import RequestFailed

from changeset_release.utils.retry import retry_on_rate_limit


def _request_failed(status_code: int, headers: dict[str, str] | None = None) -> RequestFailed:
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    return RequestFailed(response)


@pytest.mark.asyncio
async def test_retries_until_success_using_retry_after() -> None:
    """A rate limited call is retried after the delay GitHub asks for."""
    call = AsyncMock(side_effect=[_request_failed(429, {"retry-after": "3"}), "ok"])

    @retry_on_rate_limit(max_retries=2)
    async def fetch() -> Any:
        return await call()

    with patch("changeset_release.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        assert await fetch() == "ok"

    mock_sleep.assert_awaited_once_with(3.0)
    assert call.await_count == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_retries() -> None:
    """The last rate limit error is raised once retries are exhausted."""
    call = AsyncMock(side_effect=_request_failed(403))

    @retry_on_rate_limit(max_retries=2, initial_delay=1, max_delay=5)
    async def fetch() -> Any:
        return await call()

    with patch("changeset_release.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        with pytest.raises(RequestFailed):
            await fetch()

    assert call.await_count == 3
    assert [awaited.args[0] for awaited in mock_sleep.await_args_list] == [1, 2]


@pytest.mark.asyncio
async def test_other_errors_are_not_retried() -> None:
    """Errors that are not rate limits propagate immediately."""
    call = AsyncMock(side_effect=_request_failed(500))

    @retry_on_rate_limit()
    async def fetch() -> Any:
        return await call()

    with patch("changeset_release.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        with pytest.raises(RequestFailed):
            await fetch()

    assert call.await_count == 1
    mock_sleep.assert_not_awaited()


def test_sync_function_is_rejected() -> None:
    """Only coroutine functions can be decorated."""
    with pytest.raises(TypeError, match="must be async"):

        @retry_on_rate_limit()
        def fetch() -> None:
            return None
