"""Tests for ToolDispatcher -- routing, argument validation and error mapping.

All tests use a real MemoryStore on a temporary file.
"""

from pathlib import Path

import pytest

from memory_mcp.mcp.dispatcher import (
    ADD_MEMORY,
    EMPTY_MESSAGE,
    GET_MEMORIES,
    SAVED_MESSAGE,
    ToolDispatcher,
)
from memory_mcp.models.tools import ToolErrorKind, ToolRequest
from memory_mcp.storage.store import MemoryStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_file(tmp_path: Path) -> Path:
    return tmp_path / "memories.md"


@pytest.fixture()
def dispatcher(memory_file: Path) -> ToolDispatcher:
    return ToolDispatcher(MemoryStore(str(memory_file)))


def _add(dispatcher: ToolDispatcher, text) -> object:
    return dispatcher.dispatch(ToolRequest(name=ADD_MEMORY, arguments={"text": text}))


def _get(dispatcher: ToolDispatcher):
    return dispatcher.dispatch(ToolRequest(name=GET_MEMORIES))


# ---------------------------------------------------------------------------
# list_tools
# ---------------------------------------------------------------------------


class TestListTools:
    def test_exactly_two_tools(self, dispatcher: ToolDispatcher) -> None:
        names = [tool.name for tool in dispatcher.list_tools()]
        assert names == [ADD_MEMORY, GET_MEMORIES]

    def test_add_memory_schema_requires_text(self, dispatcher: ToolDispatcher) -> None:
        add = dispatcher.list_tools()[0]
        assert add.input_schema["required"] == ["text"]
        assert add.input_schema["properties"]["text"]["type"] == "string"
        assert "remember" in add.description

    def test_get_memories_takes_no_arguments(self, dispatcher: ToolDispatcher) -> None:
        get = dispatcher.list_tools()[1]
        assert get.input_schema["properties"] == {}
        assert "required" not in get.input_schema

    def test_descriptors_are_fixed(self, dispatcher: ToolDispatcher) -> None:
        first = dispatcher.list_tools()
        first[0].input_schema["properties"].clear()
        assert dispatcher.list_tools()[0].input_schema["properties"]


# ---------------------------------------------------------------------------
# add_memory
# ---------------------------------------------------------------------------


class TestAddMemory:
    def test_success(self, dispatcher: ToolDispatcher, memory_file: Path) -> None:
        result = _add(dispatcher, "User prefers dark mode")
        assert result.ok
        assert result.content == SAVED_MESSAGE
        assert "User prefers dark mode" in memory_file.read_text(encoding="utf-8")

    def test_missing_text(self, dispatcher: ToolDispatcher, memory_file: Path) -> None:
        result = dispatcher.dispatch(ToolRequest(name=ADD_MEMORY, arguments={}))
        assert not result.ok
        assert result.error_kind is ToolErrorKind.INVALID_ARGUMENT
        assert "text" in result.message
        assert not memory_file.exists()

    @pytest.mark.parametrize("bad", [None, 3, ["a"], {"text": "x"}])
    def test_non_string_text(self, dispatcher: ToolDispatcher, memory_file: Path, bad) -> None:
        result = _add(dispatcher, bad)
        assert result.error_kind is ToolErrorKind.INVALID_ARGUMENT
        assert not memory_file.exists()

    def test_blank_text(self, dispatcher: ToolDispatcher, memory_file: Path) -> None:
        result = _add(dispatcher, "   ")
        assert result.error_kind is ToolErrorKind.INVALID_ARGUMENT
        assert not memory_file.exists()

    def test_existing_file_unchanged_on_invalid(self, dispatcher: ToolDispatcher, memory_file: Path) -> None:
        _add(dispatcher, "keep me")
        before = memory_file.read_bytes()
        dispatcher.dispatch(ToolRequest(name=ADD_MEMORY, arguments={}))
        assert memory_file.read_bytes() == before

    def test_io_failure_maps_to_internal(self, tmp_path: Path) -> None:
        target = tmp_path / "a-directory"
        target.mkdir()
        dispatcher = ToolDispatcher(MemoryStore(str(target)))
        result = _add(dispatcher, "anything")
        assert result.error_kind is ToolErrorKind.INTERNAL
        assert result.message.startswith("Failed to save memory")


# ---------------------------------------------------------------------------
# get_memories
# ---------------------------------------------------------------------------


class TestGetMemories:
    def test_empty_log(self, dispatcher: ToolDispatcher) -> None:
        result = _get(dispatcher)
        assert result.ok
        assert result.content == EMPTY_MESSAGE

    def test_blank_file_is_empty_state(self, dispatcher: ToolDispatcher, memory_file: Path) -> None:
        memory_file.write_text("\n", encoding="utf-8")
        assert _get(dispatcher).content == EMPTY_MESSAGE

    def test_joins_entries_with_newlines(self, dispatcher: ToolDispatcher) -> None:
        _add(dispatcher, "first")
        _add(dispatcher, "second")
        lines = _get(dispatcher).content.split("\n")
        assert len(lines) == 2
        assert lines[0].endswith("] first")
        assert lines[1].endswith("] second")

    def test_ignores_arguments(self, dispatcher: ToolDispatcher) -> None:
        result = dispatcher.dispatch(
            ToolRequest(name=GET_MEMORIES, arguments={"unexpected": True})
        )
        assert result.ok

    def test_io_failure_maps_to_internal(self, tmp_path: Path) -> None:
        target = tmp_path / "a-directory"
        target.mkdir()
        dispatcher = ToolDispatcher(MemoryStore(str(target)))
        result = _get(dispatcher)
        assert result.error_kind is ToolErrorKind.INTERNAL
        assert result.message.startswith("Failed to retrieve memories")


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------


class TestRouting:
    def test_unknown_tool(self, dispatcher: ToolDispatcher) -> None:
        result = dispatcher.dispatch(ToolRequest(name="bogus_tool"))
        assert not result.ok
        assert result.error_kind is ToolErrorKind.UNKNOWN_TOOL
        assert "bogus_tool" in result.message

    def test_names_are_case_sensitive(self, dispatcher: ToolDispatcher) -> None:
        result = dispatcher.dispatch(ToolRequest(name="ADD_MEMORY", arguments={"text": "x"}))
        assert result.error_kind is ToolErrorKind.UNKNOWN_TOOL

    def test_failure_does_not_affect_next_call(self, tmp_path: Path) -> None:
        target = tmp_path / "memories.md"
        target.mkdir()
        dispatcher = ToolDispatcher(MemoryStore(str(target)))
        assert not _add(dispatcher, "lost").ok

        target.rmdir()
        assert _add(dispatcher, "kept").ok
        assert _get(dispatcher).content.endswith("] kept")

    def test_unexpected_exception_is_contained(self, dispatcher: ToolDispatcher) -> None:
        # A str subclass whose strip() misbehaves reaches the store's
        # validation and must still come back as a result.
        class BadStr(str):
            def strip(self, *args):
                raise RuntimeError("boom")

        result = _add(dispatcher, BadStr("value"))
        assert not result.ok
        assert result.error_kind is ToolErrorKind.INTERNAL
        assert "boom" in result.message
