"""Test doubles: a controllable clock and an in-memory tool transport."""

import json
from typing import Any

from inflow_inventory.entities import ToolResult


class FakeClock:
    """Time source that only moves when told to."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def text_result(value: Any) -> ToolResult:
    """A successful tool result carrying value as JSON text."""
    return ToolResult(content=[{"type": "text", "text": json.dumps(value)}])


def error_result(message: str | None = None) -> ToolResult:
    content = [{"type": "text", "text": message}] if message is not None else []
    return ToolResult(content=content, is_error=True)


class FakeTransport:
    """ToolTransport answering from a dict of canned responses.

    A response may be a plain value (sent back as JSON text), a ToolResult,
    or a callable taking the call arguments and returning either.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.connect_count = 0
        self.connect_error: BaseException | None = None
        self.closed = False

    async def connect(self) -> None:
        self.connect_count += 1
        if self.connect_error is not None:
            raise self.connect_error

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        self.calls.append((name, dict(arguments)))
        response = self.responses.get(name, {})
        if callable(response):
            response = response(arguments)
        if isinstance(response, ToolResult):
            return response
        return text_result(response)

    async def list_tools(self) -> list[dict[str, Any]]:
        return [{"name": name, "description": f"{name} tool"} for name in sorted(self.responses)]

    async def close(self) -> None:
        self.closed = True

    def calls_to(self, name: str) -> list[dict[str, Any]]:
        return [arguments for tool, arguments in self.calls if tool == name]
