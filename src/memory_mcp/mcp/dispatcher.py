"""ToolDispatcher -- routes decoded tool requests to the memory store.

The tool set is closed: ``add_memory`` and ``get_memories``.  ``dispatch``
always returns a :class:`ToolResult`; failures of any kind come back as an
error result with a stable :class:`ToolErrorKind` and never escape as
exceptions, so one bad call cannot end the host's session.

Typical usage::

    dispatcher = ToolDispatcher(MemoryStore("/tmp/memories.md"))
    result = dispatcher.dispatch(
        ToolRequest(name="add_memory", arguments={"text": "Likes tea"})
    )
    assert result.ok
"""

from __future__ import annotations

import logging

from memory_mcp.models.tools import (
    ToolDescriptor,
    ToolErrorKind,
    ToolRequest,
    ToolResult,
)
from memory_mcp.storage.store import InvalidMemoryError, MemoryStore, StoreError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tool metadata
# ---------------------------------------------------------------------------

ADD_MEMORY = "add_memory"
GET_MEMORIES = "get_memories"

ADD_MEMORY_DESCRIPTION = (
    "Add a new memory about the user. Call this whenever the user shares "
    "preferences, facts about themselves, or explicitly asks you to "
    "remember something."
)
GET_MEMORIES_DESCRIPTION = "Retrieve all stored memories about the user."

SAVED_MESSAGE = "Memory saved successfully."
EMPTY_MESSAGE = "No memories found yet."

TOOL_DESCRIPTORS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=ADD_MEMORY,
        description=ADD_MEMORY_DESCRIPTION,
        input_schema={
            "type": "object",
            "properties": {
                "text": {
                    "type": "string",
                    "description": "The content to store in memory",
                },
            },
            "required": ["text"],
        },
    ),
    ToolDescriptor(
        name=GET_MEMORIES,
        description=GET_MEMORIES_DESCRIPTION,
        input_schema={"type": "object", "properties": {}},
    ),
)


class ToolDispatcher:
    """Translate tool requests into :class:`MemoryStore` calls.

    The dispatcher holds no state of its own between calls; everything
    durable lives in the store's backing file.
    """

    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    def list_tools(self) -> list[ToolDescriptor]:
        """Return the descriptors of the two supported tools."""
        return [descriptor.model_copy(deep=True) for descriptor in TOOL_DESCRIPTORS]

    def dispatch(self, request: ToolRequest) -> ToolResult:
        """Route *request* to its handler and return the structured result."""
        try:
            if request.name == ADD_MEMORY:
                return self._add_memory(request.arguments)
            if request.name == GET_MEMORIES:
                return self._get_memories()
        except Exception as exc:
            logger.error(
                "Unexpected failure while handling tool %s",
                request.name,
                exc_info=True,
            )
            return ToolResult.failure(
                ToolErrorKind.INTERNAL,
                f"Unexpected error in {request.name}: {exc}",
            )

        logger.warning("Rejected call to unknown tool %r.", request.name)
        return ToolResult.failure(
            ToolErrorKind.UNKNOWN_TOOL,
            f"Unknown tool: {request.name}",
        )

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _add_memory(self, arguments: dict) -> ToolResult:
        if "text" not in arguments:
            logger.warning("add_memory called without 'text'.")
            return ToolResult.failure(
                ToolErrorKind.INVALID_ARGUMENT,
                "Invalid parameters: missing required argument 'text'.",
            )

        try:
            self._store.append(arguments["text"])
        except InvalidMemoryError as exc:
            logger.warning("add_memory rejected: %s", exc)
            return ToolResult.failure(
                ToolErrorKind.INVALID_ARGUMENT,
                f"Invalid parameters: {exc}",
            )
        except StoreError as exc:
            return ToolResult.failure(
                ToolErrorKind.INTERNAL,
                f"Failed to save memory: {exc}",
            )

        return ToolResult.success(SAVED_MESSAGE)

    def _get_memories(self) -> ToolResult:
        try:
            entries = self._store.read_all()
        except StoreError as exc:
            return ToolResult.failure(
                ToolErrorKind.INTERNAL,
                f"Failed to retrieve memories: {exc}",
            )

        if not entries:
            return ToolResult.success(EMPTY_MESSAGE)
        return ToolResult.success("\n".join(entries))
