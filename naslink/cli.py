#!/usr/bin/env python3
"""
naslink CLI

Command-line interface for registering files and serving them.

Usage:
    naslink serve [HOST] [PORT]    # Serve naslinks over HTTP
    naslink add FILE...            # Register files
    naslink delete FILE...         # Remove the naslinks for files
    naslink list                   # Show all naslinks (alias: ls)
    naslink clean                  # Remove every invalid naslink
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.logging import RichHandler
from rich.markup import escape

from .config import Config, load_config
from .errors import StoreError
from .service import NasLinkService

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False, level: str = 'INFO'):
    """Configure logging with rich output."""
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)]
    )


def run_admin(config: Config, action):
    """
    Run an administrative action against the link database.

    Store failures are fatal: print a diagnostic and exit non-zero.
    """
    async def run():
        async with NasLinkService(config) as service:
            return await action(service)

    try:
        return asyncio.run(run())
    except StoreError as e:
        err_console.print(f"[red]Store error: {escape(str(e))}[/red]")
        sys.exit(1)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='JSON config file')
@click.option('--db', 'db_path', type=click.Path(dir_okay=False), help='Link database path')
@click.pass_context
def cli(ctx, verbose, config_path, db_path):
    """naslink - serve files under unguessable links."""
    config = load_config(Path(config_path) if config_path else None)
    if db_path:
        config.db_path = Path(db_path)

    setup_logging(verbose, config.log_level)
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


@cli.command()
@click.argument('host', required=False)
@click.argument('port', required=False, type=int)
@click.pass_context
def serve(ctx, host, port):
    """Serve the naslinks over HTTP (default 0.0.0.0:8080).

    With one argument it is taken as the port.
    """
    config = ctx.obj['config']

    # "serve 9000" means port only
    if host is not None and port is None and host.isdigit():
        host, port = None, int(host)
    host = host or config.host
    port = port or config.port

    from .api import run_api_server

    async def run():
        service = NasLinkService(config)
        console.print(Panel.fit(
            f"[bold green]naslink[/bold green]\n\n"
            f"Address: [yellow]http://{host}:{port}[/yellow]\n"
            f"Database: [blue]{config.database_path}[/blue]",
            title="Serving"
        ))
        await run_api_server(service, host=host, port=port)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Shutting down...[/yellow]")
    except StoreError as e:
        err_console.print(f"[red]Store error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path())
@click.pass_context
def add(ctx, paths):
    """Register files to serve as naslinks."""
    results = run_admin(ctx.obj['config'], lambda service: service.add(paths))

    failed = 0
    for result in results:
        if result.ok:
            console.print(f"{escape(result.path)}: [green]{result.identifier}[/green]", soft_wrap=True)
        else:
            failed += 1
            err_console.print(f"[red]✗ {escape(result.path)}: {escape(result.error)}[/red]", soft_wrap=True)

    if failed:
        err_console.print(f"[red]{failed} of {len(results)} file(s) could not be added[/red]")
        sys.exit(1)


@cli.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path())
@click.pass_context
def delete(ctx, paths):
    """Remove the naslinks for files."""
    results = run_admin(ctx.obj['config'], lambda service: service.delete(paths))

    for path, identifier in results:
        if identifier:
            console.print(f"Removed {escape(path)}: [yellow]{identifier}[/yellow]", soft_wrap=True)
        else:
            console.print(f"[dim]{escape(path)} does not have a naslink[/dim]", soft_wrap=True)


@cli.command('list')
@click.pass_context
def list_links(ctx):
    """Show all of the existing naslinks."""
    records = run_admin(ctx.obj['config'], lambda service: service.list_links())

    if not records:
        console.print("[yellow]No naslinks[/yellow]")
        return

    table = Table(title="naslinks")
    table.add_column("Identifier", style="green", overflow="fold")
    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Size", justify="right", style="yellow")

    for record in records:
        table.add_row(record.identifier, record.path, format_size(record.size))

    console.print(table)
    console.print(f"{len(records)} naslink(s)")


cli.add_command(list_links, name='ls')


@cli.command()
@click.pass_context
def clean(ctx):
    """Remove all invalid naslinks."""
    removed = run_admin(ctx.obj['config'], lambda service: service.clean())

    for record in removed:
        console.print(f"Removed {escape(record.path)}: [yellow]{record.identifier}[/yellow]", soft_wrap=True)

    console.print(f"{len(removed)} invalid naslink(s) removed")


def format_size(bytes_count: int) -> str:
    """Format bytes as human-readable size."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_count < 1024:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024
    return f"{bytes_count:.1f} PB"


if __name__ == '__main__':
    cli()
