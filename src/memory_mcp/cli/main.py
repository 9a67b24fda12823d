"""Main Click CLI entry point for the ``memory-mcp`` command.

Entry point registered in pyproject.toml::

    [project.scripts]
    memory-mcp = "memory_mcp.cli.main:cli"

Usage examples::

    memory-mcp --version
    memory-mcp serve
    memory-mcp list
    memory-mcp list --json-output
    memory-mcp --memory-file /path/to/memories.md add "Prefers dark mode"
"""

from __future__ import annotations

import json
from typing import Optional

import click

from memory_mcp import __version__
from memory_mcp.config import ENV_PREFIX, MemoryConfig
from memory_mcp.mcp.dispatcher import EMPTY_MESSAGE
from memory_mcp.storage.store import MemoryStore, StoreError


@click.group()
@click.version_option(version=__version__, prog_name="memory-mcp")
@click.option(
    "--memory-file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar=f"{ENV_PREFIX}MEMORY_FILE",
    help="Path to the markdown memory file. Defaults to ./memories.md.",
)
@click.pass_context
def cli(ctx: click.Context, memory_file: Optional[str]) -> None:
    """Memory MCP -- a durable memory log for AI assistants."""
    ctx.ensure_object(dict)
    ctx.obj["memory_file"] = memory_file


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server over stdio."""
    from memory_mcp.mcp.server import create_server

    config = _load_config(ctx.obj.get("memory_file"))
    server = create_server(config)
    server.run(transport="stdio")


@cli.command(name="list")
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Output memories as a JSON array instead of markdown.",
)
@click.pass_context
def list_memories(ctx: click.Context, output_json: bool) -> None:
    """Print every stored memory in the order it was recorded."""
    store = _open_store(ctx)
    try:
        entries = store.read_all()
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_json:
        click.echo(json.dumps(entries, indent=2, ensure_ascii=False))
    elif not entries:
        click.echo(EMPTY_MESSAGE)
    else:
        for entry in entries:
            click.echo(entry)


@cli.command()
@click.argument("text")
@click.pass_context
def add(ctx: click.Context, text: str) -> None:
    """Append TEXT to the memory log."""
    store = _open_store(ctx)
    try:
        entry = store.append(text)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Saved memory at {entry.formatted_timestamp()} to {store.path}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(memory_file: Optional[str]) -> MemoryConfig:
    try:
        config = MemoryConfig.load()
        if memory_file:
            config = MemoryConfig(memory_file=memory_file, log_level=config.log_level)
    except ValueError as exc:
        raise click.ClickException(f"Failed to load configuration: {exc}") from exc
    return config


def _open_store(ctx: click.Context) -> MemoryStore:
    config = _load_config(ctx.obj.get("memory_file"))
    return MemoryStore(config.memory_file)
