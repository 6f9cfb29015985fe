import json
import os
import shlex
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import redis
from dotenv import load_dotenv

from inflow_inventory.constants import DEFAULT_NAMESPACE, TTL
from inflow_inventory.errors import ConfigurationError

load_dotenv()

CACHE_BACKENDS = ("memory", "redis")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # inFlow credentials (checked at connect time, not here)
    inflow_api_key: str | None = os.getenv("INFLOW_API_KEY")
    inflow_company_id: str | None = os.getenv("INFLOW_COMPANY_ID")

    # MCP server launched over stdio
    mcp_command: str | None = os.getenv("INFLOW_MCP_COMMAND")
    mcp_args: tuple[str, ...] = tuple(shlex.split(os.getenv("INFLOW_MCP_ARGS", "")))
    # Optional JSON file: {"mcpServer": {"command": ..., "args": [...], "env": {...}}}
    config_path: str | None = os.getenv("INFLOW_CONFIG_PATH")

    # Cache
    cache_namespace: str = os.getenv("INFLOW_CACHE_NAMESPACE", DEFAULT_NAMESPACE)
    cache_default_ttl: int = int(os.getenv("INFLOW_CACHE_DEFAULT_TTL", str(int(TTL.SHORT))))
    cache_backend: str = os.getenv("INFLOW_CACHE_BACKEND", "memory")

    # Redis (only used by the redis cache backend)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"INFLOW_CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, "
                f"got {self.cache_backend!r}"
            )

        if self.cache_default_ttl < 0:
            raise ValueError("INFLOW_CACHE_DEFAULT_TTL must not be negative")


@dataclass(frozen=True)
class McpServerConfig:
    """How to launch the inFlow MCP server subprocess."""

    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path) -> "McpServerConfig":
        """Read the "mcpServer" block of a JSON config file.

        Raises:
            ConfigurationError: If the file is unreadable or has no command
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read MCP config {path}: {e}") from e

        server = data.get("mcpServer") or {}
        if not server.get("command"):
            raise ConfigurationError(f"{path} has no mcpServer.command")

        return cls(
            command=server["command"],
            args=[str(arg) for arg in server.get("args", [])],
            env={key: str(value) for key, value in (server.get("env") or {}).items()},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "McpServerConfig":
        """Build the server config, preferring the JSON file when configured.

        Raises:
            ConfigurationError: If no server command is configured anywhere
        """
        if settings.config_path:
            return cls.from_file(settings.config_path)

        if not settings.mcp_command:
            raise ConfigurationError(
                "No MCP server configured. Set INFLOW_MCP_COMMAND (and INFLOW_MCP_ARGS) "
                "or point INFLOW_CONFIG_PATH at a config.json with an mcpServer block."
            )

        return cls(command=settings.mcp_command, args=list(settings.mcp_args))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_redis_client(settings: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    settings = settings or get_settings()
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
