"""MemoryStore -- append-only markdown log of memories.

The backing file is the sole source of truth: every call opens it, does its
work and closes it again, so edits made by hand between calls are picked up
and nothing is cached in the process.

Typical usage::

    store = MemoryStore()                      # ./memories.md
    store = MemoryStore("/path/to/memories.md")

    store.append("User prefers dark mode")
    for entry in store.read_all():
        print(entry)   # - [2024-01-15 14:30:00] User prefers dark mode
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional

from memory_mcp.config import DEFAULT_MEMORY_FILE
from memory_mcp.models.entry import CONTINUATION_INDENT, ENTRY_PREFIX, MemoryEntry

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for failures raised by :class:`MemoryStore`."""

    kind = "store_error"


class InvalidMemoryError(StoreError):
    """The text handed to :meth:`MemoryStore.append` is not storable."""

    kind = "invalid_argument"


class StoreIOError(StoreError):
    """Reading or writing the backing file failed.

    The originating :class:`OSError` is available as ``__cause__``.
    """

    kind = "io_failure"


class MemoryStore:
    """Durable append-only memory log backed by a single markdown file.

    Parameters
    ----------
    memory_file:
        Absolute or relative path to the backing file.  When *None*, defaults
        to ``<cwd>/memories.md``.  The file is not created until the first
        :meth:`append`.
    """

    def __init__(self, memory_file: Optional[str] = None) -> None:
        if memory_file is not None:
            self._path = Path(memory_file).expanduser().resolve()
        else:
            self._path = Path.cwd() / DEFAULT_MEMORY_FILE

        # Serialises file access in case the transport delivers calls
        # concurrently.
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, text: Any) -> MemoryEntry:
        """Append one memory to the backing file.

        Parameters
        ----------
        text:
            The memory content.  Leading and trailing whitespace is trimmed.

        Returns
        -------
        MemoryEntry
            The entry as written, including its timestamp.

        Raises
        ------
        InvalidMemoryError
            If *text* is not a string or is blank after trimming.
        StoreIOError
            If the file cannot be created or written.
        """
        if not isinstance(text, str):
            raise InvalidMemoryError(
                f"Memory text must be a string, got {type(text).__name__}."
            )
        if not text.strip():
            raise InvalidMemoryError("Memory text must not be empty.")

        entry = MemoryEntry(text=text)
        rendered = entry.render()

        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                # A hand-edited file may lack its final newline.
                if not self._ends_with_newline():
                    rendered = "\n" + rendered
                with open(self._path, "a", encoding="utf-8") as fp:
                    fp.write(rendered)
                    fp.flush()
            except OSError as exc:
                logger.error(
                    "Failed to append memory to %s",
                    self._path,
                    exc_info=True,
                )
                raise StoreIOError(
                    f"Could not write to {self._path}: {exc}"
                ) from exc

        logger.info(
            "Appended memory to %s: %s",
            self._path,
            entry.text[:80],
        )
        return entry

    def read_all(self) -> list[str]:
        """Return every stored entry in on-disk order.

        Entries are returned as raw markdown text.  A line beginning with
        ``"- "`` starts a new entry; other non-blank lines, and indented blank
        lines, continue the entry before them.  A missing or blank file yields
        an empty list.

        Raises
        ------
        StoreIOError
            If the file exists but cannot be read.
        """
        with self._lock:
            try:
                with open(self._path, "r", encoding="utf-8") as fp:
                    raw = fp.read()
            except FileNotFoundError:
                logger.debug("No memory file at %s yet.", self._path)
                return []
            except (OSError, UnicodeDecodeError) as exc:
                logger.error(
                    "Failed to read memories from %s",
                    self._path,
                    exc_info=True,
                )
                raise StoreIOError(
                    f"Could not read {self._path}: {exc}"
                ) from exc

        entries = _split_entries(raw)
        logger.debug("Read %d memories from %s", len(entries), self._path)
        return entries

    def exists(self) -> bool:
        """Check whether the backing file exists on disk."""
        return self._path.is_file()

    @property
    def path(self) -> Path:
        """The resolved path of the backing file."""
        return self._path

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _ends_with_newline(self) -> bool:
        """True if the file is missing, empty, or ends in a newline."""
        try:
            with open(self._path, "rb") as fp:
                fp.seek(0, os.SEEK_END)
                if fp.tell() == 0:
                    return True
                fp.seek(-1, os.SEEK_END)
                return fp.read(1) == b"\n"
        except FileNotFoundError:
            return True


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _split_entries(raw: str) -> list[str]:
    """Group the lines of *raw* into entry blocks."""
    entries: list[list[str]] = []
    for line in raw.splitlines():
        if not line.strip():
            # Indented blank lines belong to a multi-line entry.
            if entries and line.startswith(CONTINUATION_INDENT):
                entries[-1].append(line)
            continue
        if line.startswith(ENTRY_PREFIX) or not entries:
            entries.append([line])
        else:
            entries[-1].append(line)
    return ["\n".join(block) for block in entries]
