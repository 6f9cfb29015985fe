"""Business logic services.

This package contains the service layer that orchestrates caching,
remote calls and serial indexing.
"""

from .cache_service import CacheStore
from .gateway import InventoryGateway
from .inventory_service import InventoryClient
from .serial_index import SerialIndexService

__all__ = [
    "CacheStore",
    "InventoryClient",
    "InventoryGateway",
    "SerialIndexService",
]
