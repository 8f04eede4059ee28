"""diffblame CLI: Typer application with blame and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from diffblame import __version__

app = typer.Typer(
    name="diffblame",
    help="List the commits behind the differences between two revisions.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from diffblame.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── blame ─────────────────────────────────────────────────────────────────────


@app.command()
def blame(
    begin: str = typer.Option(..., "--begin", "-b", help="Revision from which to start the diff-blame"),
    end: str = typer.Option(..., "--end", "-e", help="Revision at which to end the diff-blame"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffblame.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | plain | json | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Path prefix to leave out (repeatable)"),
    rename_score: Optional[int] = typer.Option(None, "--rename-score", help="Rename similarity threshold (0-100)"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote tried for names that are not local refs"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Print debug output"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only list the changed files"),
) -> None:
    """Find the commits that produced the diff between BEGIN and END."""
    from diffblame.config.loader import ConfigError, load_config
    from diffblame.config.schema import OUTPUT_FORMATS
    from diffblame.git.adapter import GitError
    from diffblame.git.changes import format_change_list
    from diffblame.git.models import ChangeList
    from diffblame.log import configure_logging
    from diffblame.output import json_report, terminal, yaml_report
    from diffblame.walker.engine import diff_blame

    configure_logging(verbose=verbose, debug=debug)
    repo_root = _resolve_repo_root()

    # --- Load config ---
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if rename_score is not None:
        if not 0 <= rename_score <= 100:
            console.print(f"[bold red]Invalid rename score:[/bold red] {rename_score}")
            raise typer.Exit(code=2)
        cfg.diff.rename_score = rename_score
    if exclude:
        cfg.diff.exclude = list(exclude)
    if remote:
        cfg.refs.remote = remote

    logger.info("Repo root: %s", repo_root)

    # --- Resolve, diff, walk ---
    def _report_changes(changes: ChangeList) -> bool:
        if not dry_run:
            return True
        console.print(f"[bold]Dry run: {changes.total} files changed:[/bold]")
        for line in format_change_list(changes):
            print(line)
        return False

    try:
        result = diff_blame(repo_root, begin, end, cfg, on_changes=_report_changes)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if result is None:
        raise typer.Exit(code=0)

    # --- Output ---
    report_text: Optional[str] = None

    if cfg.output.format == "terminal":
        terminal.render(result, cfg.output)
    elif cfg.output.format == "plain":
        report_text = terminal.render_plain(result, cfg.output)
    elif cfg.output.format == "json":
        report_text = json_report.render(result)
    elif cfg.output.format == "yaml":
        report_text = yaml_report.render(result)

    if report_text:
        print(report_text)

    # --- Write to file ---
    if output:
        if report_text is None:
            # terminal format still writes a machine-readable file
            report_text = json_report.render(result)
        Path(output).write_text(report_text + "\n", encoding="utf-8")
        logger.info("Report written to %s", output)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .diffblame.toml in the repo root."""
    from diffblame.config.defaults import DEFAULT_TOML
    from diffblame.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"diffblame {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """diffblame: the commits behind a diff, across merges and renames."""
