"""Protocol-facing models for tool invocations.

A :class:`ToolRequest` is one decoded call from the host; a
:class:`ToolResult` is exactly one success-or-error answer to it.
:class:`ToolDescriptor` is the static metadata advertised for each tool.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class ToolErrorKind(str, Enum):
    """Stable error categories reported back to the host."""

    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN_TOOL = "unknown_tool"
    INTERNAL = "internal"


class ToolDescriptor(BaseModel):
    """Name, description and JSON input schema of a tool."""

    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON schema describing the tool arguments.",
    )


class ToolRequest(BaseModel):
    """A single decoded tool invocation."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def default_arguments(cls, data: Any) -> Any:
        # Hosts may send "arguments": null for tools without parameters.
        if isinstance(data, dict) and data.get("arguments") is None:
            data = {**data, "arguments": {}}
        return data


class ToolResult(BaseModel):
    """Outcome of a dispatched tool call.

    Exactly one of ``content`` (on success) or ``error_kind`` + ``message``
    (on failure) is populated.  Build instances through :meth:`success` and
    :meth:`failure`.
    """

    ok: bool
    content: Optional[str] = None
    error_kind: Optional[ToolErrorKind] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "ToolResult":
        if self.ok:
            if self.content is None or self.error_kind is not None:
                raise ValueError("A successful result carries content and no error kind.")
        elif self.error_kind is None or not self.message:
            raise ValueError("A failed result carries an error kind and a message.")
        return self

    @classmethod
    def success(cls, content: str) -> "ToolResult":
        return cls(ok=True, content=content)

    @classmethod
    def failure(cls, kind: ToolErrorKind, message: str) -> "ToolResult":
        return cls(ok=False, error_kind=kind, message=message)
