"""Head filter evaluation.

A HeadFilter is a bundle of a field extractor, an exclusion message and a
FilterCapability. Every filter is evaluated by the same function,
evaluate_head(), which resolves the head to a pull request, extracts the
field and turns a rejection into an exclusion.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from pr_filter.filters.base import FilterCapability, FilterResult
from pr_filter.models import PullRequest
from pr_filter.request import SourceRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Head:
    """A branch candidate produced by discovery."""

    name: str


@dataclass(frozen=True)
class PullRequestHead(Head):
    """Head backed by a pull request.

    Attributes:
        branch_name: Source branch of the pull request.
        number: Pull request number, if the host knows it.
    """

    branch_name: str
    number: int | None = None


@dataclass(frozen=True)
class HeadFilter:
    """One installed pull request filter.

    Attributes:
        name: Identifier used in results and statistics.
        extract_field: Pulls the value to test out of a full pull request.
        exclusion_message: Builds the listener line for an excluded pull request.
        capability: Matcher for the extracted value. None accepts everything.
        invert: Accept when the capability rejects. Only applies while the
            capability can filter; an inert capability always accepts.
    """

    name: str
    extract_field: Callable[[PullRequest], str | None]
    exclusion_message: Callable[[PullRequest], str | None]
    capability: FilterCapability | None = None
    invert: bool = False

    def accepts(self, pull_request: PullRequest) -> bool:
        if self.capability is None:
            return True

        if self.invert:
            if not self.capability.can_filter():
                return True
            return not self.capability.accepted(self.extract_field(pull_request))

        return self.capability.accepted(self.extract_field(pull_request))

    async def evaluate(self, request: SourceRequest, head: Head) -> FilterResult:
        return await evaluate_head(self, request, head)

    async def is_excluded(self, request: SourceRequest, head: Head) -> bool:
        return (await evaluate_head(self, request, head)).excluded


async def evaluate_head(
    head_filter: HeadFilter,
    request: SourceRequest,
    head: Head,
) -> FilterResult:
    """Decide whether a head is excluded by a filter.

    Only the first listed pull request whose source branch equals the head's
    branch is considered. Fetch errors and cancellation propagate.

    Args:
        head_filter: Filter to apply.
        request: Discovery request providing the listing, fetch and listener.
        head: Candidate head.

    Returns:
        FilterResult; excluded results carry the logged message as reason.
    """
    if not isinstance(head, PullRequestHead):
        return FilterResult(excluded=False, filter_name=head_filter.name)

    summary = next(
        (pr for pr in await request.get_pull_requests() if pr.source_branch == head.branch_name),
        None,
    )
    if summary is None:
        logger.debug("No pull request found for head %s", head.name)
        return FilterResult(excluded=False, filter_name=head_filter.name)

    pull_request = await request.get_pull_request(summary.number)

    if head_filter.accepts(pull_request):
        return FilterResult(excluded=False, filter_name=head_filter.name)

    message = head_filter.exclusion_message(pull_request)
    if message and message.strip():
        request.log(f"  {message}")
    else:
        message = None

    return FilterResult(excluded=True, reason=message, filter_name=head_filter.name)
