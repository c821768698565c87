"""Configuration-time selection of pull request filters.

Turns raw user input (phrase, case sensitivity, regex flag, strategy) into a
matcher and picks the concrete HeadFilter to install. The choice is made once;
evaluation never re-checks the strategy.
"""

import logging
import re
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Literal, Protocol

from pr_filter.filters.branch import (
    source_branch_matches_filter,
    source_branch_not_matches_filter,
    target_branch_matches_filter,
    target_branch_not_matches_filter,
)
from pr_filter.filters.head import HeadFilter
from pr_filter.filters.phrase import PhraseMatcher
from pr_filter.filters.title import title_phrase_exists_filter, title_phrase_not_exists_filter

logger = logging.getLogger(__name__)

# re.compile raises OverflowError for huge repeat counts and RecursionError
# for deeply nested groups, besides re.error.
PATTERN_ERRORS = (re.error, OverflowError, RecursionError)


class FilterStrategy(IntEnum):
    """What to do with pull requests whose field matches the phrase."""

    DISABLED = 0
    EXCLUDE_ON_MATCH = 1
    REQUIRE_MATCH = 2


class FilterField(StrEnum):
    """Pull request field a rule applies to."""

    TITLE = "title"
    SOURCE_BRANCH = "source_branch"
    TARGET_BRANCH = "target_branch"


# (require-match factory, exclude-on-match factory) per field
_FACTORIES = {
    FilterField.TITLE: (title_phrase_exists_filter, title_phrase_not_exists_filter),
    FilterField.SOURCE_BRANCH: (source_branch_matches_filter, source_branch_not_matches_filter),
    FilterField.TARGET_BRANCH: (target_branch_matches_filter, target_branch_not_matches_filter),
}

STRATEGY_LABELS = {
    FilterStrategy.DISABLED: "Accept all pull requests",
    FilterStrategy.EXCLUDE_ON_MATCH: "Ignore pull request when the phrase is found",
    FilterStrategy.REQUIRE_MATCH: "Only when the pull request contains the phrase",
}


class FilterContext(Protocol):
    """Anything filters can be registered into."""

    def add(self, head_filter: HeadFilter) -> None: ...


@dataclass(frozen=True)
class PhraseValidation:
    """Outcome of checking a phrase against a sample value."""

    kind: Literal["ok", "warning", "error"]
    message: str

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


def compile_matcher(phrase: str | None, case_sensitive: bool, regex: bool) -> PhraseMatcher:
    """Build a matcher, letting pattern errors propagate.

    Raises:
        re.error, OverflowError, RecursionError: If regex mode is on and the
            phrase does not compile.
    """
    if regex:
        return PhraseMatcher.from_pattern(phrase, case_sensitive=case_sensitive)
    return PhraseMatcher.from_phrases(phrase, case_sensitive=case_sensitive)


def build_matcher(
    phrase: str | None,
    case_sensitive: bool = False,
    regex: bool = False,
) -> PhraseMatcher | None:
    """Build a matcher from raw rule input.

    In regex mode the phrase is compiled as one pattern with no splitting,
    escaping or boundary wrapping. Otherwise it is treated as a phrase list.

    Returns:
        The matcher, or None if the phrase is not a valid pattern. Filters
        holding None accept every pull request.
    """
    try:
        return compile_matcher(phrase, case_sensitive, regex)
    except PATTERN_ERRORS as e:
        logger.warning("Invalid pattern %r, filter disabled: %s", phrase, e)
        return None


def select_filter(
    field: FilterField,
    strategy: FilterStrategy,
    matcher: PhraseMatcher | None,
) -> HeadFilter | None:
    """Pick the concrete filter for a field and strategy.

    Returns:
        HeadFilter to install, or None when the strategy is DISABLED.
    """
    strategy = FilterStrategy(strategy)
    if strategy is FilterStrategy.DISABLED:
        return None

    require_match, exclude_on_match = _FACTORIES[FilterField(field)]
    if strategy is FilterStrategy.EXCLUDE_ON_MATCH:
        return exclude_on_match(matcher)
    return require_match(matcher)


def install(
    context: FilterContext,
    field: FilterField,
    strategy: FilterStrategy,
    phrase: str | None,
    case_sensitive: bool = False,
    regex: bool = False,
) -> HeadFilter | None:
    """Build and register the filter for one rule.

    A rule with an invalid pattern is still installed and accepts everything.

    Returns:
        The installed filter, or None if nothing was installed.
    """
    strategy = FilterStrategy(strategy)
    if strategy is FilterStrategy.DISABLED:
        return None

    head_filter = select_filter(field, strategy, build_matcher(phrase, case_sensitive, regex))
    if head_filter is not None:
        logger.debug("Installing %s filter for phrase %r", head_filter.name, phrase)
        context.add(head_filter)
    return head_filter


def validate_phrase(
    phrase: str | None,
    case_sensitive: bool = False,
    regex: bool = False,
    sample: str | None = None,
) -> PhraseValidation:
    """Check a phrase and report whether it matches a sample value.

    This is where invalid patterns are reported to the user. During branch
    evaluation they silently disable the filter instead.
    """
    try:
        matcher = compile_matcher(phrase, case_sensitive, regex)
    except PATTERN_ERRORS as e:
        return PhraseValidation("error", f"Invalid phrase: {e}")

    if not matcher.can_filter():
        return PhraseValidation(
            "warning", "The phrase is empty, every pull request will be accepted."
        )

    if matcher.accepted(sample):
        return PhraseValidation("ok", "The phrase is valid and matches!")
    return PhraseValidation("warning", "The phrase is valid but does not match!")
