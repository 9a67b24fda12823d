"""FastMCP server bootstrap for Memory MCP.

Builds a FastMCP server whose two tools, ``add_memory`` and ``get_memories``,
forward to a :class:`ToolDispatcher` bound to one backing file.  The stdio
framing and JSON-RPC handling are FastMCP's job; this module only wires the
tools to the dispatcher and turns error results into ``ToolError`` so the
host sees an ``isError`` result and the session carries on.

Typical usage::

    from memory_mcp.mcp.server import create_server
    server = create_server()
    server.run(transport="stdio")

Each call to :func:`create_server` returns an independent server, which lets
tests point separate servers at separate temporary files.
"""

import logging
from typing import Annotated, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from memory_mcp import __version__
from memory_mcp.config import MemoryConfig
from memory_mcp.mcp.dispatcher import ADD_MEMORY, GET_MEMORIES, ToolDispatcher
from memory_mcp.models.tools import ToolRequest, ToolResult
from memory_mcp.storage.store import MemoryStore

logger = logging.getLogger(__name__)

SERVER_NAME = "memory-mcp"

SERVER_INSTRUCTIONS = (
    "Memory MCP keeps a durable list of facts about the user. Call "
    "add_memory when the user shares preferences or facts about themselves "
    "or asks you to remember something, and get_memories to recall them."
)


def create_server(config: Optional[MemoryConfig] = None) -> FastMCP:
    """Create and configure a FastMCP server instance.

    Parameters
    ----------
    config:
        Server configuration.  When None, :meth:`MemoryConfig.load` resolves
        it from the environment and defaults.

    Returns
    -------
    FastMCP
        The configured server, ready to ``run()``.
    """
    if config is None:
        config = MemoryConfig.load()
    config.configure_logging()

    logger.info("Initializing Memory MCP server v%s", __version__)
    logger.info("Memory file: %s", config.memory_file)

    dispatcher = ToolDispatcher(MemoryStore(config.memory_file))

    server = FastMCP(
        name=SERVER_NAME,
        instructions=SERVER_INSTRUCTIONS,
        version=__version__,
    )
    _register_tools(server, dispatcher)

    logger.info("FastMCP server created. Tools: %s, %s", ADD_MEMORY, GET_MEMORIES)
    return server


# ---------------------------------------------------------------------------
# Tool registration
# ---------------------------------------------------------------------------


def _register_tools(server: FastMCP, dispatcher: ToolDispatcher) -> None:
    """Register the memory tools on *server*, backed by *dispatcher*.

    Names and descriptions come from :meth:`ToolDispatcher.list_tools`, so
    the host sees exactly what the dispatcher advertises.  This module must
    not use ``from __future__ import annotations``: the ``text`` annotation
    refers to a local variable.
    """
    descriptors = {d.name: d for d in dispatcher.list_tools()}
    add = descriptors[ADD_MEMORY]
    get = descriptors[GET_MEMORIES]
    text_description = add.input_schema["properties"]["text"]["description"]

    @server.tool(name=add.name, description=add.description)
    def add_memory(
        text: Annotated[str, Field(description=text_description)],
    ) -> str:
        result = dispatcher.dispatch(
            ToolRequest(name=ADD_MEMORY, arguments={"text": text})
        )
        return _unwrap(result)

    @server.tool(name=get.name, description=get.description)
    def get_memories() -> str:
        result = dispatcher.dispatch(ToolRequest(name=GET_MEMORIES))
        return _unwrap(result)


def _unwrap(result: ToolResult) -> str:
    """Return the text of a successful result, or raise ``ToolError``."""
    if result.ok:
        return result.content
    raise ToolError(f"[{result.error_kind.value}] {result.message}")
