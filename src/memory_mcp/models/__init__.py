"""Pydantic models for memory entries and tool requests/results."""

from memory_mcp.models.entry import TIMESTAMP_FORMAT, MemoryEntry
from memory_mcp.models.tools import (
    ToolDescriptor,
    ToolErrorKind,
    ToolRequest,
    ToolResult,
)

__all__ = [
    "MemoryEntry",
    "TIMESTAMP_FORMAT",
    "ToolDescriptor",
    "ToolErrorKind",
    "ToolRequest",
    "ToolResult",
]
