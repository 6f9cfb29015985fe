"""Data Transfer Objects for command contracts.

These Pydantic models define what commands accept as JSON arguments and
what they print. They are used for validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import PurchaseOrderItem, ReceiveItem, UnreceiveItem
from .responses import (
    CacheStatsResponse,
    IndexBuildResponse,
    OrderSerial,
    PurchaseOrderSerial,
    PurchaseOrderSerialsResponse,
    SalesOrderSerialsResponse,
    SerialListResponse,
    SerialSearchResult,
)

__all__ = [
    "PurchaseOrderItem",
    "ReceiveItem",
    "UnreceiveItem",
    "CacheStatsResponse",
    "IndexBuildResponse",
    "OrderSerial",
    "PurchaseOrderSerial",
    "PurchaseOrderSerialsResponse",
    "SalesOrderSerialsResponse",
    "SerialListResponse",
    "SerialSearchResult",
]
