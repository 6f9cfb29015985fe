"""Handler layer for CLI commands.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (CLI)   -> (Business) -> (Data Access)
"""

from .command_handler import CommandHandler, exit_code_for, to_jsonable

__all__ = [
    "CommandHandler",
    "exit_code_for",
    "to_jsonable",
]
