"""Memory MCP - a durable, append-only memory log exposed as MCP tools."""

__version__ = "0.1.0"

from memory_mcp.config import MemoryConfig

__all__ = ["MemoryConfig", "__version__"]
