"""
Tests for the remote operation gateway and the stdio transport configuration.
"""

import json
from contextlib import asynccontextmanager

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData

import inflow_inventory.repositories.stdio_transport as stdio_transport

from inflow_inventory.config import McpServerConfig, Settings
from inflow_inventory.entities import ToolResult
from inflow_inventory.errors import ConfigurationError, OperationError
from inflow_inventory.repositories import StdioToolTransport, resolve_environment
from inflow_inventory.services import InventoryGateway

from .fakes import FakeTransport, error_result, text_result

CREDENTIALS = {"INFLOW_API_KEY": "key", "INFLOW_COMPANY_ID": "company"}


def make_settings(**overrides) -> Settings:
    values = {
        "inflow_api_key": None,
        "inflow_company_id": None,
        "mcp_command": "inflow-mcp",
        "mcp_args": ("--stdio",),
        "config_path": None,
        "cache_backend": "memory",
    }
    values.update(overrides)
    return Settings(**values)


class TestConnection:
    """Lazy, idempotent connection."""

    @pytest.mark.asyncio
    async def test_connects_lazily_once(self):
        built = []
        transport = FakeTransport({"list_vendors": []})

        def factory():
            built.append(transport)
            return transport

        gateway = InventoryGateway(transport_factory=factory)
        assert built == []
        assert gateway.connected is False

        await gateway.invoke("list_vendors", {})
        await gateway.invoke("list_vendors", {})
        await gateway.connect()

        assert len(built) == 1
        assert transport.connect_count == 1
        assert gateway.connected is True

    @pytest.mark.asyncio
    async def test_close_releases_transport(self, gateway, transport):
        await gateway.invoke("list_vendors")
        await gateway.close()
        await gateway.close()

        assert transport.closed is True
        assert gateway.connected is False

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self, transport):
        async with InventoryGateway(transport_factory=lambda: transport) as gateway:
            await gateway.invoke("list_locations")

        assert transport.closed is True

    @pytest.mark.asyncio
    async def test_close_without_connect_is_noop(self):
        gateway = InventoryGateway(transport_factory=lambda: pytest.fail("should not connect"))
        await gateway.close()


class TestResultNormalization:
    """Error payloads and the JSON/raw text fallback."""

    @pytest.mark.asyncio
    async def test_json_text_is_parsed(self, gateway, transport):
        transport.responses["get_product"] = {"productId": "p1", "name": "Widget"}

        result = await gateway.invoke("get_product", {"productId": "p1"})

        assert result == {"productId": "p1", "name": "Widget"}
        assert transport.calls == [("get_product", {"productId": "p1"})]

    @pytest.mark.asyncio
    async def test_unparseable_text_is_returned_raw(self, gateway, transport):
        transport.responses["list_currencies"] = ToolResult(content=[{"type": "text", "text": "USD, GBP"}])

        assert await gateway.invoke("list_currencies") == "USD, GBP"

    @pytest.mark.asyncio
    async def test_first_text_block_wins(self, gateway, transport):
        transport.responses["get_location"] = ToolResult(
            content=[
                {"type": "image", "data": "...", "mimeType": "image/png"},
                {"type": "text", "text": json.dumps({"locationId": "l1"})},
                {"type": "text", "text": "ignored"},
            ]
        )

        assert await gateway.invoke("get_location") == {"locationId": "l1"}

    @pytest.mark.asyncio
    async def test_content_without_text_is_returned_as_is(self, gateway, transport):
        content = [{"type": "image", "data": "...", "mimeType": "image/png"}]
        transport.responses["get_product"] = ToolResult(content=content)

        assert await gateway.invoke("get_product") == content

    @pytest.mark.asyncio
    async def test_error_result_raises_with_remote_message(self, gateway, transport):
        transport.responses["upsert_product"] = error_result("Timestamp mismatch")

        with pytest.raises(OperationError) as exc_info:
            await gateway.invoke("upsert_product", {"name": "x"})

        assert exc_info.value.message == "Timestamp mismatch"

    @pytest.mark.asyncio
    async def test_error_result_without_text_uses_default_message(self, gateway, transport):
        transport.responses["upsert_product"] = error_result()

        with pytest.raises(OperationError, match="Tool call failed"):
            await gateway.invoke("upsert_product")

    @pytest.mark.asyncio
    async def test_json_null_is_none(self, gateway, transport):
        transport.responses["get_vendor"] = text_result(None)

        assert await gateway.invoke("get_vendor", {"vendorId": "v1"}) is None

    @pytest.mark.asyncio
    async def test_call_tool_alias(self, gateway, transport):
        transport.responses["list_locations"] = [{"locationId": "l1"}]

        assert await gateway.call_tool("list_locations", {}) == [{"locationId": "l1"}]

    @pytest.mark.asyncio
    async def test_list_tools(self, gateway, transport):
        transport.responses = {"get_product": {}, "list_products": {}}

        tools = await gateway.list_tools()

        assert tools == [
            {"name": "get_product", "description": "get_product tool"},
            {"name": "list_products", "description": "list_products tool"},
        ]


class TestConfiguration:
    """ConfigurationError at connect time."""

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_at_connect(self):
        settings = make_settings()
        gateway = InventoryGateway(
            transport_factory=lambda: StdioToolTransport.from_settings(settings, base_env={})
        )

        with pytest.raises(ConfigurationError, match="INFLOW_API_KEY environment variable is not set"):
            await gateway.invoke("list_products")

    def test_missing_company_id(self):
        server = McpServerConfig(command="inflow-mcp")

        with pytest.raises(ConfigurationError, match="INFLOW_COMPANY_ID"):
            resolve_environment(server, make_settings(), base_env={"INFLOW_API_KEY": "key"})

    def test_empty_credential_counts_as_missing(self):
        server = McpServerConfig(command="inflow-mcp")

        with pytest.raises(ConfigurationError):
            resolve_environment(server, make_settings(), base_env={"INFLOW_API_KEY": "", "INFLOW_COMPANY_ID": "c"})

    def test_server_env_overrides_process_env(self):
        server = McpServerConfig(command="inflow-mcp", env={"INFLOW_API_KEY": "from-config"})

        env = resolve_environment(server, make_settings(), base_env={**CREDENTIALS, "PATH": "/bin"})

        assert env["INFLOW_API_KEY"] == "from-config"
        assert env["INFLOW_COMPANY_ID"] == "company"
        assert env["PATH"] == "/bin"

    def test_settings_credentials_fill_gaps(self):
        server = McpServerConfig(command="inflow-mcp")
        settings = make_settings(inflow_api_key="dotenv-key", inflow_company_id="dotenv-company")

        env = resolve_environment(server, settings, base_env={})

        assert env["INFLOW_API_KEY"] == "dotenv-key"
        assert env["INFLOW_COMPANY_ID"] == "dotenv-company"

    def test_from_settings_uses_env_command(self):
        transport = StdioToolTransport.from_settings(make_settings(), base_env=CREDENTIALS)
        assert isinstance(transport, StdioToolTransport)

    def test_no_server_command(self):
        with pytest.raises(ConfigurationError, match="No MCP server configured"):
            McpServerConfig.from_settings(make_settings(mcp_command=None))

    def test_config_file_overrides_env_command(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "mcpServer": {
                        "command": "npx",
                        "args": ["-y", "inflow-mcp"],
                        "env": {"INFLOW_COMPANY_ID": "c1"},
                    }
                }
            )
        )

        server = McpServerConfig.from_settings(make_settings(config_path=str(path)))

        assert server == McpServerConfig(command="npx", args=["-y", "inflow-mcp"], env={"INFLOW_COMPANY_ID": "c1"})

    def test_config_file_without_command(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"mcpServer": {"args": []}}))

        with pytest.raises(ConfigurationError, match="no mcpServer.command"):
            McpServerConfig.from_file(path)

    def test_unreadable_config_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read MCP config"):
            McpServerConfig.from_file(tmp_path / "missing.json")

    def test_invalid_cache_backend_setting(self):
        with pytest.raises(ValueError, match="INFLOW_CACHE_BACKEND"):
            make_settings(cache_backend="memcached")


class RejectingSession:
    """ClientSession stand-in whose requests fail with a JSON-RPC error."""

    def __init__(self, read_stream, write_stream) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def initialize(self):
        return None

    async def call_tool(self, name, arguments):
        raise McpError(ErrorData(code=-32602, message=f"Unknown tool: {name}"))

    async def list_tools(self):
        raise McpError(ErrorData(code=-32601, message="Method not found"))


class TestTransportErrors:
    """Process and protocol failures surface as the client's own errors."""

    @pytest.mark.asyncio
    async def test_missing_server_executable(self, monkeypatch):
        @asynccontextmanager
        async def no_such_command(params):
            raise FileNotFoundError(2, "No such file or directory", params.command)
            yield

        monkeypatch.setattr(stdio_transport, "stdio_client", no_such_command)
        transport = StdioToolTransport(McpServerConfig(command="no-such-mcp"), env=dict(CREDENTIALS))

        with pytest.raises(ConfigurationError, match="Cannot start MCP server 'no-such-mcp'") as excinfo:
            await transport.connect()

        assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_gateway_reports_unstartable_transport(self, gateway, transport):
        transport.connect_error = PermissionError(13, "Permission denied")

        with pytest.raises(ConfigurationError, match="Permission denied"):
            await gateway.invoke("list_vendors")

        assert gateway.connected is False
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_protocol_errors_become_operation_errors(self, monkeypatch):
        @asynccontextmanager
        async def streams(params):
            yield None, None

        monkeypatch.setattr(stdio_transport, "stdio_client", streams)
        monkeypatch.setattr(stdio_transport, "ClientSession", RejectingSession)
        transport = StdioToolTransport(McpServerConfig(command="inflow-mcp"), env=dict(CREDENTIALS))
        await transport.connect()

        with pytest.raises(OperationError, match="Unknown tool: list_widgets"):
            await transport.call_tool("list_widgets", {})
        with pytest.raises(OperationError, match="Method not found"):
            await transport.list_tools()

        await transport.close()
