"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for command output - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntry
from .cache_stats import CacheStats
from .serial_record import SerialRecord, normalize_serial
from .tool_result import ToolResult

__all__ = ["CacheEntry", "CacheStats", "SerialRecord", "ToolResult", "normalize_serial"]
