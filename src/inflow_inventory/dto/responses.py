"""Response DTOs for command output."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _OutputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheStatsResponse(_OutputModel):
    """Response DTO for cache statistics."""

    namespace: str = Field(..., description="Cache namespace")
    enabled: bool = Field(..., description="Whether caching is currently enabled")
    hits: int = Field(..., description="Reads served from cache", ge=0)
    misses: int = Field(..., description="Reads that went to the remote service", ge=0)
    size: int = Field(..., description="Entries currently stored", ge=0)
    hit_rate: float = Field(..., description="hits / (hits + misses)", ge=0.0, le=1.0)


class SerialSearchResult(BaseModel):
    """Outcome of a serial number lookup.

    Not-found is a normal result, not an error. When found, the index record
    fields (salesOrderId, productId, inStock, ...) are carried as extra
    attributes.
    """

    found: bool = Field(..., description="Whether the serial is in the index")
    serial: str = Field(..., description="The normalized serial number")
    message: str | None = Field(None, description="Hint when the serial is not found")

    model_config = {"extra": "allow"}


class SerialListResponse(_OutputModel):
    """Response DTO for listing serials from the order-based index."""

    count: int = Field(..., description="Number of serials returned", ge=0)
    total_in_index: int = Field(..., description="Number of serials in the whole index", ge=0)
    serials: list[dict[str, Any]] = Field(default_factory=list)


class OrderSerial(_OutputModel):
    """A serial found on one sales order, with every line type it appeared on."""

    serial: str
    product_id: str | None = None
    sources: list[str] = Field(default_factory=list, description="pack, pick and/or order")


class SalesOrderSerialsResponse(_OutputModel):
    """Serials extracted from a single sales order."""

    sales_order_id: str | None = None
    order_number: str | None = None
    order_date: str | None = None
    status: str | None = None
    serial_count: int = Field(..., ge=0)
    serials: list[OrderSerial] = Field(default_factory=list)


class PurchaseOrderSerial(_OutputModel):
    """A serial received on a purchase order line."""

    serial: str
    product_id: str | None = None
    line_id: str | None = None


class PurchaseOrderSerialsResponse(_OutputModel):
    """Serials extracted from a single purchase order."""

    purchase_order_id: str | None = None
    order_number: str | None = None
    order_date: str | None = None
    status: str | None = None
    serial_count: int = Field(..., ge=0)
    serials: list[PurchaseOrderSerial] = Field(default_factory=list)


class IndexBuildResponse(_OutputModel):
    """Response DTO for an explicit serial index rebuild."""

    success: bool
    total_serials: int = Field(..., ge=0)
    cached: bool = Field(..., description="Whether the index was stored in the cache")
    message: str
