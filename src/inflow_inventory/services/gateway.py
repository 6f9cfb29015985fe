"""Remote operation gateway.

Invokes named tools on the inFlow MCP server and normalizes their results:
error payloads become OperationError, JSON text becomes Python data.
"""

import json
from collections.abc import Callable
from typing import Any

from inflow_inventory.config import Settings
from inflow_inventory.entities import ToolResult
from inflow_inventory.errors import ConfigurationError, OperationError
from inflow_inventory.logging_config import get_logger
from inflow_inventory.protocols import ToolTransport
from inflow_inventory.repositories import StdioToolTransport

logger = get_logger(__name__)

TransportFactory = Callable[[], ToolTransport]


class InventoryGateway:
    """Lazy, idempotent connection to the remote tool server.

    The transport is built by a factory on first use, so configuration
    problems (no server command, missing credentials) surface as
    ConfigurationError at connect time rather than at construction. Commands
    that never touch the remote service (cache-stats, cache-clear) therefore
    work without credentials.

    Example:
        ```python
        async with InventoryGateway.create() as gateway:
            products = await gateway.invoke("list_products", {"count": 10})
        ```
    """

    def __init__(self, transport_factory: TransportFactory) -> None:
        """Initialize the gateway.

        Args:
            transport_factory: Zero-argument callable returning an unconnected
                ToolTransport. May raise ConfigurationError.
        """
        self._transport_factory = transport_factory
        self._transport: ToolTransport | None = None

    @classmethod
    def create(cls, settings: Settings | None = None) -> "InventoryGateway":
        """Factory method for a gateway over the MCP stdio transport.

        Args:
            settings: Application settings. If None, uses get_settings().

        Returns:
            Unconnected InventoryGateway
        """
        return cls(transport_factory=lambda: StdioToolTransport.from_settings(settings))

    @property
    def connected(self) -> bool:
        return self._transport is not None

    async def connect(self) -> None:
        """Connect on first call; later calls are no-ops.

        Raises:
            ConfigurationError: If credentials or the server command are
                missing, or the server process cannot be started
        """
        if self._transport is not None:
            return

        transport = self._transport_factory()
        try:
            await transport.connect()
        except OSError as e:
            raise ConfigurationError(f"Cannot start MCP server: {e}") from e
        self._transport = transport

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Invoke a remote tool and return its normalized result.

        Args:
            name: Tool name (e.g. "get_product")
            arguments: Tool arguments

        Returns:
            Parsed JSON from the first text block, the raw text when it is
            not JSON, or the content blocks when there is no text at all

        Raises:
            ConfigurationError: If the connection cannot be configured
            OperationError: If the remote flags the call as failed
        """
        await self.connect()
        assert self._transport is not None

        logger.debug("Invoking tool", tool=name)
        result = await self._transport.call_tool(name, arguments or {})
        return _normalize(name, result)

    call_tool = invoke

    async def list_tools(self) -> list[dict[str, Any]]:
        """List remote tools as {"name", "description"} dicts."""
        await self.connect()
        assert self._transport is not None

        tools = await self._transport.list_tools()
        return [{"name": tool.get("name"), "description": tool.get("description")} for tool in tools]

    async def close(self) -> None:
        if self._transport is None:
            return

        transport, self._transport = self._transport, None
        await transport.close()

    async def __aenter__(self) -> "InventoryGateway":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def _normalize(name: str, result: ToolResult) -> Any:
    text = result.first_text

    if result.is_error:
        logger.info("Tool call failed", tool=name)
        raise OperationError(text or "Tool call failed")

    if text:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    return result.content
