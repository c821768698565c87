"""Filters on the pull request source and target branch names."""

from pr_filter.filters.base import FilterCapability
from pr_filter.filters.head import HeadFilter
from pr_filter.models import PullRequest


def _source_branch(pull_request: PullRequest) -> str | None:
    return pull_request.source_branch


def _target_branch(pull_request: PullRequest) -> str | None:
    return pull_request.target_branch


def source_branch_matches_filter(capability: FilterCapability | None) -> HeadFilter:
    """Exclude pull requests that do not originate from an allowlisted branch."""
    return HeadFilter(
        name="source_branch_matches",
        extract_field=_source_branch,
        exclusion_message=lambda pr: (
            "The pull request does not originate from an allowlisted branch, "
            f"instead: '{pr.source_branch}'. Skipped."
        ),
        capability=capability,
    )


def source_branch_not_matches_filter(capability: FilterCapability | None) -> HeadFilter:
    """Exclude pull requests that originate from an ignorelisted branch."""
    return HeadFilter(
        name="source_branch_not_matches",
        extract_field=_source_branch,
        exclusion_message=lambda pr: (
            f"The pull request originates from the ignorelisted branch: '{pr.source_branch}'. "
            "Skipped."
        ),
        capability=capability,
        invert=True,
    )


def target_branch_matches_filter(capability: FilterCapability | None) -> HeadFilter:
    """Exclude pull requests that do not target an allowlisted branch."""
    return HeadFilter(
        name="target_branch_matches",
        extract_field=_target_branch,
        exclusion_message=lambda pr: (
            "The pull request does not target an allowlisted branch, "
            f"instead: '{pr.target_branch}'. Skipped."
        ),
        capability=capability,
    )


def target_branch_not_matches_filter(capability: FilterCapability | None) -> HeadFilter:
    """Exclude pull requests that target an ignorelisted branch."""
    return HeadFilter(
        name="target_branch_not_matches",
        extract_field=_target_branch,
        exclusion_message=lambda pr: (
            f"The pull request targets the ignorelisted branch: '{pr.target_branch}'. Skipped."
        ),
        capability=capability,
        invert=True,
    )
