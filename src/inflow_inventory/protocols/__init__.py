"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory → Redis, stdio MCP → fakes)
- Unit testing with mock implementations
- Clear separation of concerns
"""

from .cache_backend import CacheBackend
from .tool_transport import ToolTransport

__all__ = [
    "CacheBackend",
    "ToolTransport",
]
