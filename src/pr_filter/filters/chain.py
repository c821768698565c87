"""Filter chain applied to every discovered head.

Collects installed filters, short-circuits on the first exclusion and keeps
per-filter rejection statistics.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

from pr_filter.filters.base import FilterResult
from pr_filter.filters.head import Head, HeadFilter
from pr_filter.filters.strategy import install
from pr_filter.request import SourceRequest

if TYPE_CHECKING:
    from pr_filter.config import FilterRuleConfig

logger = logging.getLogger(__name__)


class FilterChain:
    """Ordered set of head filters.

    Installed filters are immutable, so one chain may evaluate many heads
    concurrently. Only the statistics counters are mutated.
    """

    def __init__(self, filters: Iterable[HeadFilter] = ()) -> None:
        self.filters: list[HeadFilter] = list(filters)
        self.stats: dict[str, int] = defaultdict(int)

    @classmethod
    def from_config(cls, rules: Iterable["FilterRuleConfig"]) -> "FilterChain":
        """Install one filter per enabled rule.

        Args:
            rules: Filter rules from the configuration file.

        Returns:
            FilterChain with the rules' filters in declaration order.
        """
        chain = cls()
        for rule in rules:
            install(
                chain,
                field=rule.field,
                strategy=rule.strategy,
                phrase=rule.phrase,
                case_sensitive=rule.case_sensitive,
                regex=rule.regex,
            )
        logger.info("Installed %d pull request filter(s)", len(chain.filters))
        return chain

    def add(self, head_filter: HeadFilter) -> None:
        self.filters.append(head_filter)

    async def evaluate(self, request: SourceRequest, head: Head) -> FilterResult:
        """Evaluate filters in order until one excludes the head.

        Args:
            request: Discovery request for this pass.
            head: Candidate head.

        Returns:
            The first excluding FilterResult, or a passing result.
        """
        for head_filter in self.filters:
            result = await head_filter.evaluate(request, head)
            if result.excluded:
                self.record_rejection(result.filter_name)
                return result

        return FilterResult(excluded=False, filter_name="none")

    async def is_excluded(self, request: SourceRequest, head: Head) -> bool:
        return (await self.evaluate(request, head)).excluded

    def record_rejection(self, filter_name: str) -> None:
        self.stats[filter_name] += 1

    def get_stats(self) -> dict[str, int]:
        """Return rejection counts keyed by filter name."""
        return dict(self.stats)

    def __len__(self) -> int:
        return len(self.filters)
