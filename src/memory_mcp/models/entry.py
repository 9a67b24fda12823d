"""The MemoryEntry model: one timestamped line block of the memory log."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

# Fixed, human-readable timestamp format written into the backing file.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Every entry starts with this marker so it renders as a markdown list item.
ENTRY_PREFIX = "- "

# Continuation lines of a multi-line entry are indented under the list item.
CONTINUATION_INDENT = "  "


class MemoryEntry(BaseModel):
    """A single stored fact.

    The timestamp is captured when the entry is created by the store; callers
    only ever supply the text.
    """

    text: str = Field(
        ...,
        min_length=1,
        description="The content supplied by the caller, trimmed.",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When this memory was recorded (UTC).",
    )

    @field_validator("text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Memory text must not be empty or whitespace.")
        return stripped

    def formatted_timestamp(self) -> str:
        """Return the timestamp as ``YYYY-MM-DD HH:MM:SS``."""
        return self.timestamp.strftime(TIMESTAMP_FORMAT)

    def render(self) -> str:
        """Render the entry as it is stored on disk, including the newline.

        Single-line text yields ``- [2024-01-15 14:30:00] text``.  Extra lines
        of multi-line text are indented so the block stays a single markdown
        list item.
        """
        first, *rest = self.text.splitlines()
        lines = [f"{ENTRY_PREFIX}[{self.formatted_timestamp()}] {first}"]
        lines.extend(f"{CONTINUATION_INDENT}{line}" for line in rest)
        return "\n".join(lines) + "\n"
