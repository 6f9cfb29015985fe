"""Remote tool transport protocol.

Defines the interface the gateway needs from whatever carries tool calls to
the inventory service. The production implementation talks MCP over a stdio
subprocess; tests use in-memory fakes.
"""

from typing import Any, Protocol, runtime_checkable

from inflow_inventory.entities import ToolResult


@runtime_checkable
class ToolTransport(Protocol):
    """Protocol for remote tool transports."""

    async def connect(self) -> None:
        """Open the connection. Called once by the gateway."""
        ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Invoke a remote tool.

        Args:
            name: Tool name (e.g. "list_products")
            arguments: Tool arguments

        Returns:
            The raw tool result, error flag included
        """
        ...

    async def list_tools(self) -> list[dict[str, Any]]:
        """List remote tools as {"name", "description"} dicts."""
        ...

    async def close(self) -> None:
        """Close the connection and release the subprocess."""
        ...
