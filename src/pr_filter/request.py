"""Discovery request contract consumed by head filters.

A SourceRequest is the host pipeline's view of one discovery pass: it can
list pull requests, fetch a full record by number and write listener lines.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from pr_filter.github.pulls import PullRequestClient
from pr_filter.models import PullRequest, PullRequestSummary

LISTENER_LOGGER = "pr_filter.listener"


@runtime_checkable
class SourceRequest(Protocol):
    """Host collaborator queried once per candidate head."""

    async def get_pull_requests(self) -> Sequence[PullRequestSummary]:
        """Return the lightweight pull request listing for this request."""
        ...

    async def get_pull_request(self, number: int) -> PullRequest:
        """Fetch the full record for a pull request number.

        Raises on I/O failure; cancellation propagates as asyncio.CancelledError.
        """
        ...

    def log(self, line: str) -> None:
        """Write one line to the request listener. Must not raise."""
        ...


class GitHubSourceRequest:
    """SourceRequest backed by the GitHub REST API.

    The listing is fetched once and reused for the lifetime of the request.
    Full records are fetched fresh on every call.
    """

    def __init__(
        self,
        client: PullRequestClient,
        state: str = "open",
        listener: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._state = state
        self._listener = listener or logging.getLogger(LISTENER_LOGGER)
        self._pull_requests: list[PullRequestSummary] | None = None
        self._listing_lock = asyncio.Lock()

    async def get_pull_requests(self) -> list[PullRequestSummary]:
        # Heads are evaluated concurrently; only the first caller fetches.
        async with self._listing_lock:
            if self._pull_requests is None:
                pull_requests: list[PullRequestSummary] = []
                async for page in self._client.list_pulls(state=self._state):
                    pull_requests.extend(PullRequestSummary.from_api(item) for item in page)
                self._pull_requests = pull_requests
        return self._pull_requests

    async def get_pull_request(self, number: int) -> PullRequest:
        return PullRequest.from_api(await self._client.get_pull(number))

    def log(self, line: str) -> None:
        self._listener.info(line)
