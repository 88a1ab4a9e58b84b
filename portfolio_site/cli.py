"""
Command-line interface for the portfolio site builder.

Uses Typer to expose the build and feed export. Loads a ``.env`` file so
the content source can be set through ``PORTFOLIO_SOURCE``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
import yaml

from .config import AppConfig, load_config
from .errors import FetchError
from .feed import FEED_MEDIA_TYPE
from .logging_utils import setup_logging
from .runner import export_feed, run_build

app = typer.Typer(add_completion=False)
console = Console()


@app.callback()
def main():
    """Render the portfolio site from its JSON manifests and Markdown posts."""
    # Runs before subcommand options are parsed, so PORTFOLIO_SOURCE may come from .env.
    load_dotenv()


def _load(config: Path | None, source: str | None, log_level: str | None) -> AppConfig:
    try:
        cfg = load_config(str(config) if config else None)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    if source:
        cfg.site.source = source
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def build(
    source: str | None = typer.Option(
        None,
        "--source",
        "-s",
        envvar="PORTFOLIO_SOURCE",
        help="Base URL or local directory holding data/ and the post Markdown files.",
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Render listings, article pages and the RSS feed into the output directory.

    Args:
        source: Content source (overrides site.source)
        output: Output directory (overrides output.directory)
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable the JSONL build log
    """
    cfg = _load(config, source, log_level)
    if output is not None:
        cfg.output.directory = str(output)
    if log_file is not None:
        cfg.logging.file = log_file

    stats = run_build(cfg, Path(cfg.output.directory))
    console.print(
        f"Built {stats.pages} listing pages and {stats.posts} posts "
        f"({stats.fallbacks} from metadata only) into {cfg.output.directory}"
    )
    if stats.failed:
        console.print(f"[yellow]Collections that failed to load:[/yellow] {', '.join(stats.failed)}")
    if stats.skipped:
        console.print(f"[yellow]Entries without a page (name taken by a listing):[/yellow] {', '.join(stats.skipped)}")


@app.command()
def rss(
    source: str | None = typer.Option(None, "--source", "-s", envvar="PORTFOLIO_SOURCE"),
    output: Path = typer.Option(Path("rss.xml"), "--output", "-o", help="Feed file to write."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Export the blog collection as an RSS document."""
    cfg = _load(config, source, log_level)
    setup_logging(cfg.logging, None)

    try:
        path = asyncio.run(export_feed(cfg, output))
    except FetchError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    console.print(f"Feed written ({FEED_MEDIA_TYPE}): {path}")


if __name__ == "__main__":
    app()
