"""Tests for the filter chain."""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from pr_filter.config import FilterRuleConfig
from pr_filter.filters.chain import FilterChain
from pr_filter.filters.head import PullRequestHead
from pr_filter.filters.phrase import PhraseMatcher
from pr_filter.filters.strategy import FilterField, FilterStrategy
from pr_filter.filters.title import title_phrase_exists_filter, title_phrase_not_exists_filter
from pr_filter.models import PullRequest


@pytest.fixture
def wip_pull_request() -> PullRequest:
    return PullRequest(
        number=7,
        title="WIP: rework parser",
        source_branch="feature/parser",
        target_branch="main",
    )


@pytest.fixture
def wip_head() -> PullRequestHead:
    return PullRequestHead(name="PR-7", branch_name="feature/parser", number=7)


class TestFilterChain:
    """Tests for FilterChain evaluation and statistics."""

    @pytest.mark.asyncio
    async def test_empty_chain_includes_everything(
        self,
        wip_pull_request: PullRequest,
        wip_head: PullRequestHead,
        make_request: Callable[..., MagicMock],
    ) -> None:
        chain = FilterChain()
        request = make_request(wip_pull_request)

        result = await chain.evaluate(request, wip_head)

        assert result.excluded is False
        assert result.filter_name == "none"
        request.get_pull_requests.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_short_circuits_on_first_exclusion(
        self,
        wip_pull_request: PullRequest,
        wip_head: PullRequestHead,
        make_request: Callable[..., MagicMock],
    ) -> None:
        chain = FilterChain(
            [
                title_phrase_not_exists_filter(PhraseMatcher.from_phrases("WIP")),
                title_phrase_exists_filter(PhraseMatcher.from_phrases("release")),
            ]
        )
        request = make_request(wip_pull_request)

        result = await chain.evaluate(request, wip_head)

        assert result.excluded is True
        assert result.filter_name == "title_phrase_not_exists"
        assert request.log.call_count == 1
        assert chain.get_stats() == {"title_phrase_not_exists": 1}

    @pytest.mark.asyncio
    async def test_stats_accumulate(
        self,
        wip_pull_request: PullRequest,
        wip_head: PullRequestHead,
        make_request: Callable[..., MagicMock],
    ) -> None:
        chain = FilterChain([title_phrase_not_exists_filter(PhraseMatcher.from_phrases("WIP"))])
        request = make_request(wip_pull_request)

        for _ in range(3):
            assert await chain.is_excluded(request, wip_head) is True

        assert chain.get_stats() == {"title_phrase_not_exists": 3}

    @pytest.mark.asyncio
    async def test_from_config(
        self,
        wip_pull_request: PullRequest,
        wip_head: PullRequestHead,
        make_request: Callable[..., MagicMock],
    ) -> None:
        rules = [
            FilterRuleConfig(field=FilterField.TITLE, strategy=FilterStrategy.DISABLED, phrase="x"),
            FilterRuleConfig(
                field=FilterField.TARGET_BRANCH,
                strategy=FilterStrategy.REQUIRE_MATCH,
                phrase="main, develop",
            ),
            FilterRuleConfig(
                field=FilterField.SOURCE_BRANCH,
                strategy=FilterStrategy.EXCLUDE_ON_MATCH,
                phrase="^feature/",
                regex=True,
            ),
        ]

        chain = FilterChain.from_config(rules)

        assert [f.name for f in chain.filters] == [
            "target_branch_matches",
            "source_branch_not_matches",
        ]
        # "^feature/" is a full match pattern, so "feature/parser" is not denied.
        assert await chain.is_excluded(make_request(wip_pull_request), wip_head) is False
