"""inFlow inventory client - cached MCP client for inFlow Inventory.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheBackend, ToolTransport)
    - repositories: Storage and transport implementations
    - services: Business logic (cache store, gateway, accessors, serial index)
    - handlers: CLI command handling (JSON output, exit codes)
    - dto: Data transfer objects (command contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from inflow_inventory.services import InventoryClient

    async with InventoryClient.create() as client:
        stock = await client.get_stock_levels("prod_123")
    ```

Command line:
    ```bash
    inflow-cli get-stock-levels --product-id prod_123
    ```
"""

from inflow_inventory.cache_keys import build_cache_key
from inflow_inventory.config import Settings, get_redis_client, get_settings
from inflow_inventory.constants import TTL
from inflow_inventory.errors import (
    ConfigurationError,
    InventoryClientError,
    OperationError,
    UnsupportedOperationError,
    ValidationError,
)
from inflow_inventory.protocols import CacheBackend, ToolTransport
from inflow_inventory.repositories import InMemoryCacheBackend, RedisCacheBackend, StdioToolTransport
from inflow_inventory.services import CacheStore, InventoryClient, InventoryGateway, SerialIndexService

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "get_redis_client",
    # Cache keys and TTL tiers
    "build_cache_key",
    "TTL",
    # Errors
    "InventoryClientError",
    "ValidationError",
    "ConfigurationError",
    "OperationError",
    "UnsupportedOperationError",
    # Protocols (interfaces)
    "CacheBackend",
    "ToolTransport",
    # Repositories
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "StdioToolTransport",
    # Services
    "CacheStore",
    "InventoryGateway",
    "InventoryClient",
    "SerialIndexService",
]
