"""Command handler for the CLI edge.

Handlers run a client operation and convert its outcome for the terminal:
results become indented JSON on stdout, domain errors become a JSON error
payload on stderr plus an exit code.
"""

import asyncio
import inspect
import json
from collections.abc import Callable
from typing import Any

import typer
from pydantic import BaseModel

from inflow_inventory.errors import (
    ConfigurationError,
    InventoryClientError,
    OperationError,
    UnsupportedOperationError,
    ValidationError,
)
from inflow_inventory.logging_config import get_logger
from inflow_inventory.services import InventoryClient

logger = get_logger(__name__)

EXIT_OK = 0

# Checked in order; the first matching class wins
EXIT_CODES: tuple[tuple[type[InventoryClientError], int], ...] = (
    (ValidationError, 1),
    (UnsupportedOperationError, 1),
    (ConfigurationError, 2),
    (OperationError, 3),
)

ClientOperation = Callable[[InventoryClient], Any]


def exit_code_for(error: InventoryClientError) -> int:
    """Map a domain error to the process exit code."""
    for error_type, code in EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return 1


def to_jsonable(result: Any) -> Any:
    """Convert DTOs (possibly nested in lists) to plain JSON data."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


class CommandHandler:
    """Runs one CLI command against an InventoryClient.

    The handler owns the client's lifetime: it builds the client, runs the
    operation, and always closes the connection afterwards.

    Example:
        ```python
        handler = CommandHandler(client_factory=InventoryClient.create)
        code = handler.run("list-products", lambda client: client.list_products(limit=5))
        raise typer.Exit(code)
        ```
    """

    def __init__(self, client_factory: Callable[[], InventoryClient]) -> None:
        """Initialize the command handler.

        Args:
            client_factory: Builds the client for this invocation (required).
        """
        self._client_factory = client_factory

    def run(self, command: str, operation: ClientOperation) -> int:
        """Run an operation to completion and print its outcome.

        Args:
            command: Command name, for logging
            operation: Callable taking the client; may return an awaitable

        Returns:
            Process exit code
        """
        return asyncio.run(self._execute(command, operation))

    async def _execute(self, command: str, operation: ClientOperation) -> int:
        try:
            client = self._client_factory()
        except InventoryClientError as e:
            return self._fail(command, e)

        try:
            result = operation(client)
            if inspect.isawaitable(result):
                result = await result
        except InventoryClientError as e:
            return self._fail(command, e)
        finally:
            await client.close()

        typer.echo(json.dumps(to_jsonable(result), indent=2, default=str))
        return EXIT_OK

    def _fail(self, command: str, error: InventoryClientError) -> int:
        code = exit_code_for(error)
        logger.debug("Command failed", command=command, error=type(error).__name__, exit_code=code)

        payload = {"error": type(error).__name__, "message": error.message}
        typer.echo(json.dumps(payload, indent=2), err=True)
        return code
