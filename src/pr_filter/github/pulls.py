"""GitHub pull request endpoints.

Provides a paginated listing and a single-record fetch over GitHubClient.
"""

import logging
import re
from collections.abc import AsyncIterator
from typing import Any

from pr_filter.github.http import GitHubClient, GitHubHTTPError

logger = logging.getLogger(__name__)

LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


class PullRequestNotFoundError(GitHubHTTPError):
    """Raised when a pull request number does not resolve to a record."""


def parse_link_header(link_header: str | None) -> dict[str, str]:
    """Parse a Link header into a mapping of rel to URL.

    Args:
        link_header: Raw header value, e.g. '<url>; rel="next", <url>; rel="last"'.

    Returns:
        Dict such as {"next": "https://...", "last": "https://..."}.
    """
    if not link_header:
        return {}

    links = {}
    for part in link_header.split(","):
        match = LINK_PATTERN.match(part.strip())
        if match:
            url, rel = match.groups()
            links[rel] = url
    return links


class PullRequestClient:
    """Pull request endpoints for a single repository."""

    def __init__(self, http_client: GitHubClient, owner: str, repo: str) -> None:
        self._http = http_client
        self.owner = owner
        self.repo = repo

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    async def list_pulls(self, state: str = "open") -> AsyncIterator[list[dict[str, Any]]]:
        """Yield pages of pull requests following Link headers.

        Args:
            state: PR state: "open", "closed" or "all".

        Yields:
            List of raw pull request dicts per page.

        Raises:
            GitHubHTTPError: If a page cannot be fetched.
        """
        path = f"/repos/{self.owner}/{self.repo}/pulls"
        params: dict[str, Any] | None = {
            "state": state,
            "per_page": 100,
            "sort": "created",
            "direction": "asc",
        }
        page_num = 1

        logger.info("Fetching pull requests for %s (state=%s)", self.full_name, state)

        while True:
            response = await self._http.get(path, params=params)
            if not response.is_success:
                raise GitHubHTTPError(
                    f"Listing pull requests for {self.full_name} failed "
                    f"with status {response.status_code}"
                )

            yield response.data if isinstance(response.data, list) else []

            links = parse_link_header(response.headers.get("link"))
            if "next" not in links:
                break

            # The next URL already carries the query string.
            path = links["next"]
            params = None
            page_num += 1
            logger.debug("Following pagination to page %d", page_num)

    async def get_pull(self, number: int) -> dict[str, Any]:
        """Fetch one pull request by number.

        Raises:
            PullRequestNotFoundError: On 404.
            GitHubHTTPError: On any other unsuccessful response.
        """
        response = await self._http.get(f"/repos/{self.owner}/{self.repo}/pulls/{number}")

        if response.status_code == 404:
            raise PullRequestNotFoundError(f"Pull request {self.full_name}#{number} not found")

        if not response.is_success or not isinstance(response.data, dict):
            raise GitHubHTTPError(
                f"Fetching pull request {self.full_name}#{number} failed "
                f"with status {response.status_code}"
            )

        return response.data
