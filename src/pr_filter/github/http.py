"""Async HTTP transport for the GitHub REST API.

Every request runs through one attempt loop. Timeouts, network errors and
5xx responses are retried after an exponential backoff. Rate limited
responses (403/429 carrying ``retry-after`` or ``x-ratelimit-remaining: 0``)
are retried after the delay GitHub asks for. Any other response, including
4xx, is handed back to the caller to interpret.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from pr_filter import __version__
from pr_filter.github.auth import GitHubAuth

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


@dataclass
class GitHubResponse:
    """Decoded response from the GitHub API."""

    status_code: int
    data: Any
    headers: httpx.Headers
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "GitHubResponse":
        data: Any = None
        if response.content:
            try:
                data = response.json()
            except ValueError:
                logger.warning("Non-JSON body from %s", response.url)
                data = response.text
        return cls(response.status_code, data, response.headers, str(response.url))


class GitHubHTTPError(Exception):
    """Base exception for GitHub HTTP errors."""


class RateLimitExceeded(GitHubHTTPError):
    """Raised when GitHub keeps rate limiting after all retries are spent."""

    def __init__(self, reset_at: datetime) -> None:
        self.reset_at = reset_at
        super().__init__(f"Rate limit exceeded. Resets at {reset_at.isoformat()}")


@dataclass(frozen=True)
class RateLimitDelay:
    """How long GitHub asked us to back off, and until when."""

    seconds: float
    reset_at: datetime

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RateLimitDelay | None":
        """Read the delay from a 403/429 response.

        Returns:
            The delay, or None if the response is a plain 403/429.
        """
        if response.status_code not in (403, 429):
            return None

        now = datetime.now(UTC)
        retry_after = response.headers.get("retry-after")
        if retry_after and retry_after.isdigit():
            seconds = int(retry_after)
            return cls(seconds, now + timedelta(seconds=seconds))

        if response.headers.get("x-ratelimit-remaining") == "0":
            reset_at = datetime.fromtimestamp(
                int(response.headers.get("x-ratelimit-reset", "0")), tz=UTC
            )
            return cls(max((reset_at - now).total_seconds() + 1, 1), reset_at)

        return None


class GitHubClient:
    """Async HTTP client for the GitHub API.

    Use as an async context manager, or call close() when done.
    """

    BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_RETRIES = 3
    INITIAL_BACKOFF = 1.0
    BACKOFF_MULTIPLIER = 2.0

    def __init__(
        self,
        auth: GitHubAuth | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_url: str = BASE_URL,
    ) -> None:
        """Initialize the client.

        Args:
            auth: Resolved credentials. If None, resolved from the environment.
            timeout: Request timeout in seconds.
            max_retries: Retries after the first attempt; 0 disables retrying.
            base_url: Base URL for the GitHub API.
        """
        self._auth = auth or GitHubAuth()
        self._timeout = timeout
        self._max_retries = max_retries
        self._base_url = base_url.rstrip("/")
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": f"pr-head-filter/{__version__}",
            **self._auth.get_authorization_header(),
        }

    def _session(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self.headers,
                follow_redirects=True,
            )
        return self._client

    def backoff(self, attempt: int) -> float:
        """Delay before retry number ``attempt + 1``."""
        return self.INITIAL_BACKOFF * self.BACKOFF_MULTIPLIER**attempt

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying transient failures.

        Args:
            method: HTTP method.
            path: API path or absolute URL.
            **kwargs: Passed to httpx (params, json, ...).

        Returns:
            The first response that is neither a 5xx nor rate limited.

        Raises:
            RateLimitExceeded: If the last attempt was rate limited.
            GitHubHTTPError: If the last attempt timed out, failed on the
                network or got a 5xx.
        """
        session = self._session()
        attempts = self._max_retries + 1

        for attempt in range(attempts):
            logger.debug("%s %s (attempt %d/%d)", method, path, attempt + 1, attempts)
            try:
                response = await session.request(method, path, **kwargs)
            except httpx.TimeoutException as e:
                logger.warning("Timeout for %s %s", method, path)
                error: GitHubHTTPError = GitHubHTTPError(f"Request timeout: {e}")
                delay = self.backoff(attempt)
            except httpx.NetworkError as e:
                logger.warning("Network error for %s %s: %s", method, path, e)
                error = GitHubHTTPError(f"Network error: {e}")
                delay = self.backoff(attempt)
            else:
                rate_limit = RateLimitDelay.from_response(response)
                if rate_limit is not None:
                    logger.warning(
                        "Rate limited on %s %s, resets at %s",
                        method,
                        path,
                        rate_limit.reset_at.isoformat(),
                    )
                    error = RateLimitExceeded(rate_limit.reset_at)
                    delay = rate_limit.seconds
                elif response.status_code >= 500:
                    logger.warning("Server error %d for %s %s", response.status_code, method, path)
                    error = GitHubHTTPError(
                        f"Server error {response.status_code} for {method} {path} "
                        f"after {attempt + 1} attempt(s)"
                    )
                    delay = self.backoff(attempt)
                else:
                    return response

            if attempt + 1 < attempts:
                logger.debug("Retrying %s %s in %.1fs", method, path, delay)
                await asyncio.sleep(delay)

        raise error

    async def get(self, path: str, **kwargs: Any) -> GitHubResponse:
        """GET a path and decode the JSON body."""
        return GitHubResponse.from_httpx(await self.request("GET", path, **kwargs))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        self._session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
