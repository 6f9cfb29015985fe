"""Storage and transport implementations.

Concrete classes satisfying the protocols in inflow_inventory.protocols.
"""

from .memory_backend import InMemoryCacheBackend
from .redis_backend import RedisCacheBackend
from .stdio_transport import StdioToolTransport, resolve_environment

__all__ = [
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "StdioToolTransport",
    "resolve_environment",
]
