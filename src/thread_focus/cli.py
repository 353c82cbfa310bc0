"""CLI interface for thread-focus"""

import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from slack_sdk.web.async_client import AsyncWebClient

from .config import ThreadFocusConfig, configure_logging, load_config
from .models import Direction, RelationSnapshot
from .pagination import PaginationError
from .relation_loader import load_relations
from .slack_reply_fetcher import SlackReplyFetcher
from .thread_session import ThreadViewSession
from .thread_view_formatter import ThreadViewFormatter

console = Console()


def _load_settings(config_path: Optional[str]) -> ThreadFocusConfig:
    config = load_config(Path(config_path) if config_path else None)
    configure_logging(config.log_level)
    return config


def _open_session(source: str, focus: str, config: ThreadFocusConfig) -> ThreadViewSession:
    """Load relations and focus a session, exiting on errors"""
    try:
        snapshot = load_relations(source)
    except (OSError, ValueError) as e:
        console.print(f"[red]✗ Could not load relations from {source}: {e}[/red]")
        sys.exit(1)

    session = ThreadViewSession(snapshot, config=config)
    session.focus(focus)
    if session.is_missing:
        console.print(f"[yellow]⚠ Message {focus} not found in {source}[/yellow]")
        sys.exit(1)
    return session


@click.group()
def cli():
    """thread-focus - Linear, navigable views of reply threads"""
    pass


@cli.command()
@click.option('--source', '-s', required=True, help='Relation source (.parquet, directory, .yaml, .json)')
@click.option('--focus', '-f', required=True, help='Message ID to focus')
@click.option('--output', '-o', help='Output file (default: print to console)')
@click.option('--config', 'config_path', help='Config file (default: .thread-focus.yaml)')
def view(source, focus, output, config_path):
    """Show the thread around a focused message

    Examples:
        \b
        # View a thread from a YAML relation file
        thread-focus view --source thread.yaml --focus 1697654400.123457

        \b
        # View from a Parquet export and save to file
        thread-focus view -s cache/raw/messages -f 1697654321.123456 -o thread.txt
    """
    config = _load_settings(config_path)
    session = _open_session(source, focus, config)

    formatter = ThreadViewFormatter(placeholder_limit=config.placeholder_limit)
    view_output = formatter.format(session.context, session.snapshot)

    if output:
        Path(output).write_text(view_output, encoding="utf-8")
        console.print(f"[green]✓ View saved to {output}[/green]")
    else:
        console.print(view_output, markup=False, highlight=False)


@cli.command()
@click.option('--source', '-s', required=True, help='Relation source (.parquet, directory, .yaml, .json)')
@click.option('--focus', '-f', required=True, help='Message ID to focus')
@click.option('--direction', '-d', type=click.Choice(['up', 'down']), required=True, help='Direction to move')
@click.option('--anchor', '-a', help='Message ID to move from (default: the focused message)')
@click.option('--config', 'config_path', help='Config file (default: .thread-focus.yaml)')
def navigate(source, focus, direction, anchor, config_path):
    """Show where focus lands when moving up or down

    Examples:
        \b
        # Move up from the focused message
        thread-focus navigate -s thread.yaml -f focus -d up

        \b
        # Move down from a reply
        thread-focus navigate -s thread.yaml -f focus -d down -a D
    """
    config = _load_settings(config_path)
    session = _open_session(source, focus, config)
    context = session.context

    if Direction(direction) is Direction.UP:
        index = session.move_up(anchor)
    else:
        index = session.move_down(anchor)

    if index is None:
        console.print(f"[dim]No move: {anchor or focus} is at the edge of the thread or not part of it[/dim]")
        return

    table = Table(title="Navigation", show_header=True, header_style="bold cyan")
    table.add_column("Anchor", style="cyan")
    table.add_column("Direction")
    table.add_column("Index", justify="right")
    table.add_column("Target", overflow="fold")
    table.add_row(anchor or focus, direction, str(index), context.sequence[index])
    console.print(table)


@cli.command(name="slack-thread")
@click.option('--channel', '-c', required=True, help='Channel ID containing the thread')
@click.option('--thread', '-t', 'thread_ts', required=True, help='Thread parent ts')
@click.option('--max-pages', default=10, help='Maximum reply pages to load (default: 10)')
@click.option('--config', 'config_path', help='Config file (default: .thread-focus.yaml)')
def slack_thread(channel, thread_ts, max_pages, config_path):
    """Fetch a Slack thread page by page and show it

    Requires SLACK_API_TOKEN in the environment or a .env file.

    Examples:
        \b
        thread-focus slack-thread --channel C0123456789 --thread 1697654321.123456
    """
    load_dotenv()
    config = _load_settings(config_path)

    if "SLACK_API_TOKEN" not in os.environ:
        console.print("[red]✗ SLACK_API_TOKEN not found in environment variables[/red]")
        sys.exit(1)

    asyncio.run(_slack_thread_async(channel, thread_ts, max_pages, config))


async def _slack_thread_async(channel_id, thread_ts, max_pages, config):
    """Async implementation of slack-thread command"""
    client = AsyncWebClient(token=os.environ["SLACK_API_TOKEN"])
    fetcher = SlackReplyFetcher(client, channel_id, page_size=config.slack_page_size)

    console.print(Panel.fit(
        f"[bold blue]🧵 Slack Thread[/bold blue]\n"
        f"Channel: {channel_id}\n"
        f"Thread: {thread_ts}\n"
        f"Max pages: {max_pages}",
        border_style="blue"
    ))

    try:
        first_page = await fetcher.fetch_next(thread_ts, None)
    except PaginationError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    snapshot = RelationSnapshot().with_page(thread_ts, first_page)
    session = ThreadViewSession(snapshot, fetcher=fetcher, config=config)
    session.focus(thread_ts, next_cursor=first_page.next_cursor)
    if session.is_missing:
        console.print(f"[yellow]⚠ Thread {thread_ts} not found in {channel_id}[/yellow]")
        sys.exit(1)

    pages = 1
    while session.has_more and pages < max_pages:
        task = session.load_more()
        if task is None:
            # Inside the debounce window
            await asyncio.sleep(config.debounce_seconds)
            continue

        await task
        if session.pagination.last_error is not None:
            console.print(f"[yellow]⚠ Stopped paging: {session.pagination.last_error}[/yellow]")
            break
        pages += 1

    console.print(f"[dim]Loaded {pages} page(s), {len(session.context.descendants)} replies[/dim]")

    formatter = ThreadViewFormatter(placeholder_limit=config.placeholder_limit)
    console.print(formatter.format(session.context, session.snapshot), markup=False, highlight=False)
