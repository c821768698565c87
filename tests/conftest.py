"""Shared fixtures for pr-filter tests.

Provides:
- A pull request record and matching head
- A SourceRequest double built from AsyncMock
"""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from pr_filter.filters.head import PullRequestHead
from pr_filter.models import PullRequest, PullRequestSummary


@pytest.fixture
def pull_request() -> PullRequest:
    """Full pull request record for branch test-branch."""
    return PullRequest(
        number=1,
        title="Test title",
        source_branch="test-branch",
        target_branch="main",
    )


@pytest.fixture
def head() -> PullRequestHead:
    """Head for the test-branch pull request."""
    return PullRequestHead(name="PR-1", branch_name="test-branch", number=1)


@pytest.fixture
def make_request() -> Callable[..., MagicMock]:
    """Factory for SourceRequest doubles.

    The listing contains one summary per given record and get_pull_request
    returns the record with the requested number.
    """

    def _make(*pull_requests: PullRequest) -> MagicMock:
        by_number = {pr.number: pr for pr in pull_requests}
        request = MagicMock()
        request.get_pull_requests = AsyncMock(
            return_value=[
                PullRequestSummary(number=pr.number, source_branch=pr.source_branch)
                for pr in pull_requests
            ]
        )
        request.get_pull_request = AsyncMock(side_effect=lambda number: by_number[number])
        request.log = MagicMock()
        return request

    return _make
