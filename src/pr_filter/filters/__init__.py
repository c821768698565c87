"""Pull request head filters.

Phrase matching, the generic head evaluation, concrete title and branch
filters and the strategy layer that installs them.
"""

from pr_filter.filters.base import FilterCapability, FilterResult
from pr_filter.filters.branch import (
    source_branch_matches_filter,
    source_branch_not_matches_filter,
    target_branch_matches_filter,
    target_branch_not_matches_filter,
)
from pr_filter.filters.chain import FilterChain
from pr_filter.filters.head import Head, HeadFilter, PullRequestHead, evaluate_head
from pr_filter.filters.phrase import PhraseMatcher
from pr_filter.filters.strategy import (
    FilterField,
    FilterStrategy,
    PhraseValidation,
    build_matcher,
    install,
    select_filter,
    validate_phrase,
)
from pr_filter.filters.title import title_phrase_exists_filter, title_phrase_not_exists_filter

__all__ = [
    "FilterCapability",
    "FilterChain",
    "FilterField",
    "FilterResult",
    "FilterStrategy",
    "Head",
    "HeadFilter",
    "PhraseMatcher",
    "PhraseValidation",
    "PullRequestHead",
    "build_matcher",
    "evaluate_head",
    "install",
    "select_filter",
    "source_branch_matches_filter",
    "source_branch_not_matches_filter",
    "target_branch_matches_filter",
    "target_branch_not_matches_filter",
    "title_phrase_exists_filter",
    "title_phrase_not_exists_filter",
    "validate_phrase",
]
