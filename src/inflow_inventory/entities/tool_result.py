"""Remote tool call result domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolResult:
    """Transport-neutral result of a remote tool call.

    Attributes:
        content: Content blocks as plain dicts, e.g. {"type": "text", "text": "..."}
        is_error: Whether the remote flagged the call as failed
    """

    content: list[dict[str, Any]] = field(default_factory=list)
    is_error: bool = False

    @property
    def first_text(self) -> str | None:
        """Text of the first text block, or None if there is none."""
        for block in self.content:
            if block.get("type") == "text":
                return block.get("text")
        return None
