"""Terminal reporters: a Rich table and the classic one-line-per-commit listing."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from diffblame.config.schema import OutputConfig
from diffblame.git.models import Commit
from diffblame.results.models import BlameResult


def _cut(s: str, length: int) -> str:
    return s if len(s) <= length else s[:length]


def format_line(commit: Commit, cfg: Optional[OutputConfig] = None) -> str:
    """Format one commit as ``<sha> > <committer> <date> <summary>``."""
    cfg = cfg or OutputConfig()
    name = _cut(commit.committer, cfg.name_width)
    return (
        f"{_cut(commit.sha, cfg.sha_length)} > {name:<{cfg.name_width}} "
        f"{commit.committed_at.strftime(cfg.date_format)} "
        f"{_cut(commit.summary, cfg.message_width)}"
    )


def render_plain(result: BlameResult, cfg: Optional[OutputConfig] = None) -> str:
    """Return the commit list as plain text, one commit per line."""
    lines: List[str] = [format_line(c, cfg) for c in result.commits]
    return "\n".join(lines)


def render(
    result: BlameResult,
    cfg: Optional[OutputConfig] = None,
    *,
    console: Optional[Console] = None,
) -> None:
    """Print the commit list to the terminal using Rich."""
    cfg = cfg or OutputConfig()
    console = console or Console()

    if not result.commits:
        console.print()
        console.print("[bold green]No commits to report for this range.[/bold green]")
        if cfg.show_summary:
            _print_summary(console, result)
        return

    console.print()
    table = Table(
        title=f"Diff-blame {result.begin.short_sha}..{result.end.short_sha}",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Committer", style="cyan", max_width=cfg.name_width)
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Summary", max_width=cfg.message_width)

    for commit in result.commits:
        table.add_row(
            _cut(commit.sha, cfg.sha_length),
            escape(commit.committer),
            commit.committed_at.strftime(cfg.date_format),
            escape(_cut(commit.summary, cfg.message_width)),
        )

    console.print(table)

    if cfg.show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: BlameResult) -> None:
    changes = result.changes
    console.print()
    console.print(
        f"[dim]Files:[/dim]         {changes.total} "
        f"({len(changes.added)} added, {len(changes.removed)} removed, "
        f"{len(changes.changed)} changed)"
    )
    console.print(f"[dim]Commits:[/dim]       {result.total_commits}")
    for name, count in result.class_counts.items():
        console.print(f"[dim]  via {name}:[/dim]  {count}")
    console.print(f"[dim]Duration:[/dim]      {result.duration_ms:.0f}ms")
