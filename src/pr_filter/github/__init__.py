"""GitHub API access used by the reference source request."""

from pr_filter.github.auth import AuthenticationError, GitHubAuth
from pr_filter.github.http import (
    GitHubClient,
    GitHubHTTPError,
    GitHubResponse,
    RateLimitExceeded,
)
from pr_filter.github.pulls import PullRequestClient, PullRequestNotFoundError

__all__ = [
    "AuthenticationError",
    "GitHubAuth",
    "GitHubClient",
    "GitHubHTTPError",
    "GitHubResponse",
    "PullRequestClient",
    "PullRequestNotFoundError",
    "RateLimitExceeded",
]
