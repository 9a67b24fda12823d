"""Click CLI commands for running the server and inspecting the memory log.

Provides the ``memory-mcp`` CLI entry point with subcommands:
- ``memory-mcp serve`` -- Run the MCP server over stdio.
- ``memory-mcp list``  -- Print stored memories (with --json-output).
- ``memory-mcp add``   -- Append a memory from the shell.
"""

from memory_mcp.cli.main import add, cli, list_memories, serve

__all__ = ["add", "cli", "list_memories", "serve"]
