"""File-based storage engine for the append-only memory log."""

from memory_mcp.storage.store import (
    InvalidMemoryError,
    MemoryStore,
    StoreError,
    StoreIOError,
)

__all__ = ["InvalidMemoryError", "MemoryStore", "StoreError", "StoreIOError"]
