"""MCP stdio implementation of ToolTransport.

Spawns the inFlow MCP server as a subprocess and speaks MCP over its
stdin/stdout using the official `mcp` SDK.
"""

import os
from collections.abc import Mapping
from contextlib import AsyncExitStack
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError

from inflow_inventory.config import McpServerConfig, Settings, get_settings
from inflow_inventory.entities import ToolResult
from inflow_inventory.errors import ConfigurationError, OperationError
from inflow_inventory.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_CREDENTIALS = ("INFLOW_API_KEY", "INFLOW_COMPANY_ID")


def resolve_environment(
    server: McpServerConfig,
    settings: Settings,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the subprocess environment and check credentials.

    The server config's env block overrides the base environment. Credentials
    loaded into Settings (e.g. from a .env file) fill the gaps.

    Raises:
        ConfigurationError: If a required credential is missing or empty
    """
    env = dict(os.environ if base_env is None else base_env)
    for name, value in (
        ("INFLOW_API_KEY", settings.inflow_api_key),
        ("INFLOW_COMPANY_ID", settings.inflow_company_id),
    ):
        if value and not env.get(name):
            env[name] = value
    env.update(server.env)

    for name in REQUIRED_CREDENTIALS:
        if not env.get(name):
            raise ConfigurationError(
                f"{name} environment variable is not set. "
                "Please export it in your shell or add it to ~/.bashrc"
            )

    return env


class StdioToolTransport:
    """ToolTransport over an MCP stdio subprocess.

    This class satisfies the ToolTransport protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        transport = StdioToolTransport.from_settings()
        await transport.connect()
        result = await transport.call_tool("list_vendors", {})
        await transport.close()
        ```
    """

    def __init__(self, server: McpServerConfig, env: dict[str, str]) -> None:
        """Initialize the transport.

        Args:
            server: Command line of the MCP server
            env: Full environment for the subprocess
        """
        self._server = server
        self._env = env
        self._stack: AsyncExitStack | None = None
        self._session: ClientSession | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        base_env: Mapping[str, str] | None = None,
    ) -> "StdioToolTransport":
        """Factory method resolving server config and credentials.

        Raises:
            ConfigurationError: If no server is configured or credentials are missing
        """
        settings = settings or get_settings()
        server = McpServerConfig.from_settings(settings)
        env = resolve_environment(server, settings, base_env)
        return cls(server=server, env=env)

    async def connect(self) -> None:
        """Spawn the server and run the MCP handshake.

        Raises:
            ConfigurationError: If the server command cannot be started
            OperationError: If the server rejects the handshake
        """
        if self._session is not None:
            return

        params = StdioServerParameters(
            command=self._server.command,
            args=self._server.args,
            env=self._env,
        )
        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await stack.enter_async_context(stdio_client(params))
            session = await stack.enter_async_context(ClientSession(read_stream, write_stream))
            await session.initialize()
        except OSError as e:
            await stack.aclose()
            raise ConfigurationError(
                f"Cannot start MCP server {self._server.command!r}: {e}. "
                "Check INFLOW_MCP_COMMAND or INFLOW_CONFIG_PATH."
            ) from e
        except McpError as e:
            await stack.aclose()
            raise OperationError(e.error.message) from e
        except BaseException:
            await stack.aclose()
            raise

        self._stack = stack
        self._session = session
        logger.info("Connected to MCP server", command=self._server.command)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Call a tool.

        Raises:
            OperationError: If the server answers with a JSON-RPC error
        """
        session = self._require_session()
        try:
            result = await session.call_tool(name, arguments)
        except McpError as e:
            logger.debug("Tool call rejected", tool=name, code=e.error.code)
            raise OperationError(e.error.message) from e

        return ToolResult(
            content=[block.model_dump(mode="json") for block in result.content],
            is_error=bool(result.isError),
        )

    async def list_tools(self) -> list[dict[str, Any]]:
        session = self._require_session()
        try:
            result = await session.list_tools()
        except McpError as e:
            raise OperationError(e.error.message) from e
        return [{"name": tool.name, "description": tool.description} for tool in result.tools]

    async def close(self) -> None:
        if self._stack is None:
            return

        stack, self._stack, self._session = self._stack, None, None
        await stack.aclose()
        logger.info("Closed MCP server connection")

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError("Transport is not connected; call connect() first")
        return self._session
