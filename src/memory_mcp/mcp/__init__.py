"""FastMCP server and tool dispatch for memory recording and retrieval."""

from memory_mcp.mcp.dispatcher import ToolDispatcher
from memory_mcp.mcp.server import create_server

__all__ = ["ToolDispatcher", "create_server"]
