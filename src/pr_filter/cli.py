"""CLI entry point for pr-filter.

Commands:
- check: Evaluate a repository's pull requests against the configured filters
- test-phrase: Check a phrase against a sample title or branch name
- strategies: List the available filter strategies
"""

import asyncio
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pr_filter import __version__
from pr_filter.config import Config, load_config
from pr_filter.filters import FilterChain, FilterResult, FilterStrategy, PullRequestHead
from pr_filter.filters.strategy import STRATEGY_LABELS, validate_phrase
from pr_filter.github import GitHubAuth, GitHubClient, PullRequestClient
from pr_filter.logging import setup_logging
from pr_filter.models import PullRequestSummary
from pr_filter.request import GitHubSourceRequest

console = Console()

VALIDATION_STYLES = {"ok": "green", "warning": "yellow", "error": "bold red"}


@click.group()
@click.version_option(version=__version__, prog_name="pr-filter")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option("--json-logs", is_flag=True, default=False, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx: click.Context, verbose: bool, json_logs: bool) -> None:
    """Filter pull request branches by title and branch name phrases.

    \b
    Quick Start:
        1. Try a phrase:  pr-filter test-phrase "WIP: new parser" --phrase "WIP;Draft"
        2. Check a repo:  pr-filter check --config config.yaml
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose, json_format=json_logs)


async def evaluate_repository(
    cfg: Config,
    chain: FilterChain,
    client: GitHubClient,
) -> list[tuple[PullRequestSummary, FilterResult]]:
    """Run every listed pull request head through the chain.

    Args:
        cfg: Loaded configuration.
        chain: Installed filters.
        client: Open GitHub HTTP client.

    Returns:
        (pull request, result) pairs in listing order.
    """
    pulls = PullRequestClient(client, cfg.repository.owner, cfg.repository.name)
    request = GitHubSourceRequest(pulls, state=cfg.repository.state)

    summaries = await request.get_pull_requests()
    heads = [
        PullRequestHead(name=f"PR-{pr.number}", branch_name=pr.source_branch, number=pr.number)
        for pr in summaries
    ]
    results = await asyncio.gather(*(chain.evaluate(request, head) for head in heads))
    return list(zip(summaries, results, strict=True))


async def _check(cfg: Config, chain: FilterChain) -> list[tuple[PullRequestSummary, FilterResult]]:
    auth = GitHubAuth(token_env=cfg.auth.token_env)
    async with GitHubClient(auth=auth) as client:
        return await evaluate_repository(cfg, chain, client)


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to config.yaml file",
)
@click.pass_context
def check(ctx: click.Context, config: Path) -> None:
    """Show which pull request heads the configured filters exclude."""
    try:
        cfg = load_config(config)
    except (ValidationError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error:[/bold red] Invalid config {escape(str(config))}")
        console.print(escape(str(e)))
        raise click.Abort() from e

    for index, rule, validation in cfg.invalid_rules():
        console.print(
            f"[yellow]Warning:[/yellow] filter #{index + 1} ({rule.field}) "
            f"is disabled. {escape(validation.message)}"
        )

    chain = FilterChain.from_config(cfg.filters)
    console.print(
        f"[bold]Checking pull requests for {cfg.repository.full_name} "
        f"({len(chain)} filter(s))[/bold]"
    )

    try:
        results = asyncio.run(_check(cfg, chain))
    except KeyboardInterrupt:
        console.print("\n[yellow]Check interrupted by user[/yellow]")
        raise click.Abort() from None
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if ctx.obj.get("verbose"):
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            console.print(traceback.format_exc())
        raise click.Abort() from e

    table = Table(title="Pull request heads")
    table.add_column("PR", justify="right")
    table.add_column("Source branch")
    table.add_column("Decision")
    table.add_column("Filter")

    for summary, result in results:
        decision = "[red]excluded[/red]" if result.excluded else "[green]included[/green]"
        table.add_row(
            f"#{summary.number}",
            escape(summary.source_branch),
            decision,
            result.filter_name if result.excluded else "",
        )

    console.print(table)

    excluded = sum(1 for _, result in results if result.excluded)
    console.print(f"  Included: {len(results) - excluded}")
    console.print(f"  Excluded: {excluded}")
    for filter_name, count in sorted(chain.get_stats().items()):
        console.print(f"    {filter_name}: {count}")


@main.command("test-phrase")
@click.argument("sample")
@click.option("--phrase", "-p", required=True, help="Phrase list or regex to test")
@click.option("--case-sensitive", is_flag=True, default=False, help="Match case exactly")
@click.option("--regex", is_flag=True, default=False, help="Treat the phrase as a regex")
@click.pass_context
def test_phrase(
    ctx: click.Context,
    sample: str,
    phrase: str,
    case_sensitive: bool,
    regex: bool,
) -> None:
    """Check PHRASE against a SAMPLE title or branch name."""
    validation = validate_phrase(phrase, case_sensitive=case_sensitive, regex=regex, sample=sample)
    style = VALIDATION_STYLES[validation.kind]
    console.print(f"[{style}]{escape(validation.message)}[/{style}]")
    if validation.is_error:
        ctx.exit(1)


@main.command()
def strategies() -> None:
    """List filter strategy codes."""
    for strategy in FilterStrategy:
        console.print(f"  {strategy.value}  {strategy.name.lower():<18} {STRATEGY_LABELS[strategy]}")


if __name__ == "__main__":
    main()
