"""Tests for the GitHub HTTP transport."""

from collections.abc import Iterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, call, patch

import httpx
import pytest
import respx

from pr_filter.github.auth import GitHubAuth
from pr_filter.github.http import GitHubClient, GitHubHTTPError, RateLimitDelay, RateLimitExceeded

PULLS_PATH = "/repos/octo-org/widgets/pulls"
PULLS_URL = f"https://api.github.com{PULLS_PATH}"
FAKE_TOKEN = "ghp_" + "b" * 36


@pytest.fixture
def sleep() -> Iterator[AsyncMock]:
    with patch("pr_filter.github.http.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


def _client(max_retries: int = 2) -> GitHubClient:
    return GitHubClient(auth=GitHubAuth(token=FAKE_TOKEN), max_retries=max_retries)


class TestRateLimitDelay:
    """Tests for RateLimitDelay.from_response()."""

    def test_retry_after(self) -> None:
        response = httpx.Response(429, headers={"retry-after": "7"})

        delay = RateLimitDelay.from_response(response)

        assert delay is not None
        assert delay.seconds == 7

    def test_exhausted_primary_limit(self) -> None:
        response = httpx.Response(
            403, headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"}
        )

        delay = RateLimitDelay.from_response(response)

        assert delay is not None
        assert delay.reset_at == datetime.fromtimestamp(1700000000, tz=UTC)
        assert delay.seconds == 1  # reset is in the past

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(403),
            httpx.Response(403, headers={"x-ratelimit-remaining": "12"}),
            httpx.Response(200, headers={"retry-after": "7"}),
        ],
    )
    def test_not_rate_limited(self, response: httpx.Response) -> None:
        assert RateLimitDelay.from_response(response) is None


class TestGitHubClient:
    """Tests for GitHubClient against mocked endpoints."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_sends_api_headers(self, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL).mock(return_value=httpx.Response(200, json=[]))

        async with _client() as client:
            await client.get(PULLS_PATH)

        sent = route.calls[0].request.headers
        assert sent["Authorization"] == f"token {FAKE_TOKEN}"
        assert sent["X-GitHub-Api-Version"] == "2022-11-28"
        assert sent["Accept"] == "application/vnd.github+json"

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_error_then_success(self, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL)
        route.side_effect = [httpx.Response(502), httpx.Response(200, json=[{"number": 1}])]

        async with _client() as client:
            response = await client.get(PULLS_PATH)

        assert response.status_code == 200
        assert response.data == [{"number": 1}]
        assert route.call_count == 2
        sleep.assert_awaited_once_with(1.0)

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_errors_exhaust_retries(self, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL).mock(return_value=httpx.Response(503))

        async with _client(max_retries=2) as client:
            with pytest.raises(GitHubHTTPError, match="Server error 503"):
                await client.get(PULLS_PATH)

        assert route.call_count == 3
        assert sleep.await_args_list == [call(1.0), call(2.0)]

    @respx.mock
    @pytest.mark.asyncio
    async def test_retry_after_is_honoured(self, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL)
        route.side_effect = [
            httpx.Response(429, headers={"retry-after": "7"}),
            httpx.Response(200, json=[]),
        ]

        async with _client() as client:
            response = await client.get(PULLS_PATH)

        assert response.is_success
        assert route.call_count == 2
        sleep.assert_awaited_once_with(7)

    @respx.mock
    @pytest.mark.asyncio
    async def test_exhausted_rate_limit_raises(self, sleep: AsyncMock) -> None:
        respx.get(PULLS_URL).mock(
            return_value=httpx.Response(
                403,
                headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"},
            )
        )

        async with _client(max_retries=0) as client:
            with pytest.raises(RateLimitExceeded) as exc_info:
                await client.get(PULLS_PATH)

        assert exc_info.value.reset_at == datetime.fromtimestamp(1700000000, tz=UTC)
        sleep.assert_not_awaited()

    @respx.mock
    @pytest.mark.asyncio
    async def test_rate_limit_waits_then_succeeds(self, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL)
        route.side_effect = [
            httpx.Response(403, headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "0"}),
            httpx.Response(200, json=[]),
        ]

        async with _client(max_retries=1) as client:
            response = await client.get(PULLS_PATH)

        assert response.is_success
        sleep.assert_awaited_once_with(1)

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_then_success(self, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL)
        route.side_effect = [httpx.ConnectTimeout("timed out"), httpx.Response(200, json=[])]

        async with _client() as client:
            response = await client.get(PULLS_PATH)

        assert response.is_success
        assert route.call_count == 2
        sleep.assert_awaited_once_with(1.0)

    @respx.mock
    @pytest.mark.asyncio
    async def test_network_errors_exhaust_retries(self, sleep: AsyncMock) -> None:
        respx.get(PULLS_URL).mock(side_effect=httpx.ConnectError("refused"))

        async with _client(max_retries=1) as client:
            with pytest.raises(GitHubHTTPError, match="Network error"):
                await client.get(PULLS_PATH)

        assert sleep.await_count == 1

    @pytest.mark.parametrize("status", [403, 404, 422])
    @respx.mock
    @pytest.mark.asyncio
    async def test_client_errors_are_returned(self, status: int, sleep: AsyncMock) -> None:
        route = respx.get(PULLS_URL).mock(
            return_value=httpx.Response(status, json={"message": "nope"})
        )

        async with _client() as client:
            response = await client.get(PULLS_PATH)

        assert response.status_code == status
        assert response.is_success is False
        assert response.data == {"message": "nope"}
        assert route.call_count == 1
        sleep.assert_not_awaited()

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_json_body_is_kept_as_text(self, sleep: AsyncMock) -> None:
        respx.get(PULLS_URL).mock(return_value=httpx.Response(200, text="<html>"))

        async with _client() as client:
            response = await client.get(PULLS_PATH)

        assert response.data == "<html>"

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        client = _client()
        async with client:
            pass

        await client.close()
