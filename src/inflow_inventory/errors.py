"""Exception taxonomy for the inventory client.

Exceptions are raised where the problem is detected and only converted to
exit codes at the CLI edge (see handlers.command_handler).

A serial number that is not found is NOT an error: search operations return
a SerialSearchResult with found=False instead.
"""


class InventoryClientError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryClientError):
    """A required argument is missing or malformed.

    Always raised before any cache or network interaction.
    """


class ConfigurationError(InventoryClientError):
    """Required configuration (credentials, server command) is missing."""


class OperationError(InventoryClientError):
    """The remote service reported a failure.

    The message is the remote-supplied text, passed through verbatim.
    """


class UnsupportedOperationError(InventoryClientError):
    """The operation has no equivalent on the remote service."""
