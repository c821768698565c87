"""Filters on the pull request title."""

from pr_filter.filters.base import FilterCapability
from pr_filter.filters.head import HeadFilter
from pr_filter.models import PullRequest


def _title(pull_request: PullRequest) -> str | None:
    return pull_request.title


def title_phrase_exists_filter(capability: FilterCapability | None) -> HeadFilter:
    """Exclude pull requests whose title does not contain the phrase."""
    return HeadFilter(
        name="title_phrase_exists",
        extract_field=_title,
        exclusion_message=lambda pr: (
            f"The pull request title does not contain the required phrase: '{pr.title}'. Skipped."
        ),
        capability=capability,
    )


def title_phrase_not_exists_filter(capability: FilterCapability | None) -> HeadFilter:
    """Exclude pull requests whose title contains the phrase."""
    return HeadFilter(
        name="title_phrase_not_exists",
        extract_field=_title,
        exclusion_message=lambda pr: (
            f"The pull request title contains a disallowed phrase: '{pr.title}'. Skipped."
        ),
        capability=capability,
        invert=True,
    )
