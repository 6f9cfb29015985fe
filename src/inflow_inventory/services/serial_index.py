"""Serial number index service.

inFlow has no search-by-serial endpoint. This service rebuilds one by
scanning bulk data and caching the result as a single entry:

- Order-based: pages through sales orders and extracts the serials embedded
  in their pack, pick and order lines. Slow, but carries order context.
- Product-based: one list_all_serials call. Fast, carries stock context
  but no order.

The two indexes live under different keys with different TTLs and are never
merged.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from inflow_inventory.constants import (
    DEFAULT_MAX_PRODUCTS,
    DEFAULT_SERIAL_ORDER_STATUS,
    PRODUCT_SERIAL_INDEX_KEY,
    SERIAL_INDEX_KEY,
    SERIAL_INDEX_PAGE_SIZE,
    TTL,
)
from inflow_inventory.dto import (
    IndexBuildResponse,
    OrderSerial,
    PurchaseOrderSerial,
    PurchaseOrderSerialsResponse,
    SalesOrderSerialsResponse,
    SerialListResponse,
    SerialSearchResult,
)
from inflow_inventory.entities import SerialRecord, normalize_serial
from inflow_inventory.errors import OperationError, ValidationError
from inflow_inventory.logging_config import get_logger

if TYPE_CHECKING:
    from inflow_inventory.services.inventory_service import InventoryClient

logger = get_logger(__name__)

SerialIndex = dict[str, dict[str, Any]]

ORDER_INCLUDES = ["lines", "pickLines", "packLines"]

# Line collections in priority order: packed lines are the most authoritative
LINE_SOURCES = (("packLines", "pack"), ("pickLines", "pick"), ("lines", "order"))

ORDER_NOT_FOUND_HINT = (
    "Serial number not found in fulfilled sales orders. "
    "Check Airtable for authoritative serial number data."
)
PRODUCT_NOT_FOUND_HINT = (
    "Serial number not found in product inventory. "
    "May not exist or may be in a non-serialized product."
)


def _page_items(result: Any) -> list[Any]:
    if isinstance(result, dict) and "data" in result:
        result = result["data"]
    if result is None:
        return []
    if isinstance(result, list):
        return result
    return [result]


def _line_serials(lines: Any) -> Iterator[tuple[dict[str, Any], str]]:
    """Yield (line, raw serial) for every non-empty serial on the lines."""
    for line in lines or []:
        if not isinstance(line, dict):
            continue
        quantity = line.get("quantity")
        serials = quantity.get("serialNumbers") if isinstance(quantity, dict) else None
        if not isinstance(serials, list):
            continue
        for serial in serials:
            if serial and str(serial).strip():
                yield line, serial


def _require_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise OperationError(f"Unexpected response for {what}: {value!r}")
    return value


class SerialIndexService:
    """Builds, caches and queries the serial number indexes.

    Uses the owning InventoryClient's cache, gateway and bypass flag, so the
    indexes obey --no-cache and caching_disabled() like any other read.
    """

    def __init__(self, client: "InventoryClient") -> None:
        self._client = client

    async def build_serial_index(
        self,
        status: str = DEFAULT_SERIAL_ORDER_STATUS,
        limit: int | None = None,
    ) -> SerialIndex:
        """Build the order-based index by paging through sales orders.

        Business logic:
        1. Page list_sales_orders (100 per page, lines included) until a short
           page, or until limit orders are collected (truncated to exactly limit)
        2. Per order, scan packLines, then pickLines, then lines
        3. First writer wins: a serial already indexed is never overwritten,
           even by a later order

        Args:
            status: Sales order status to scan
            limit: Maximum number of orders to scan (None = all)

        Returns:
            Mapping of normalized serial to record dict
        """
        orders: list[Any] = []
        skip = 0
        while True:
            result = await self._client.gateway.invoke(
                "list_sales_orders",
                {
                    "status": status,
                    "include": ORDER_INCLUDES,
                    "count": SERIAL_INDEX_PAGE_SIZE,
                    "skip": skip,
                },
            )
            page = _page_items(result)
            orders.extend(page)

            if limit and len(orders) >= limit:
                del orders[limit:]
                break
            if len(page) < SERIAL_INDEX_PAGE_SIZE:
                break
            skip += SERIAL_INDEX_PAGE_SIZE

        index: SerialIndex = {}
        for order in orders:
            if not isinstance(order, dict):
                continue
            for field, _source in LINE_SOURCES:
                for line, serial in _line_serials(order.get(field)):
                    key = normalize_serial(serial)
                    if key not in index:
                        index[key] = SerialRecord.from_order_line(serial, order, line).to_order_dict()

        logger.info("Built serial index from orders", orders=len(orders), serials=len(index))
        return index

    async def build_serial_index_from_products(
        self, max_products: int = DEFAULT_MAX_PRODUCTS
    ) -> SerialIndex:
        """Build the product-based index from one list_all_serials call."""
        result = await self._client.gateway.invoke(
            "list_all_serials", {"maxProducts": max_products or DEFAULT_MAX_PRODUCTS}
        )
        items = result.get("serials") if isinstance(result, dict) else None

        index: SerialIndex = {}
        for item in items or []:
            if not isinstance(item, dict) or not item.get("serial"):
                continue
            record = SerialRecord.from_inventory_serial(item)
            index[record.serial] = record.to_product_dict()

        logger.info("Built serial index from products", serials=len(index))
        return index

    async def get_order_index(self) -> SerialIndex:
        """Get the order-based index, building it on a cache miss."""
        return await self._client.cache.get_or_fetch(
            SERIAL_INDEX_KEY,
            self.build_serial_index,
            ttl=TTL.LONG,
            bypass_cache=self._client.bypass_cache,
        )

    async def get_product_index(self) -> SerialIndex:
        """Get the product-based index, building it on a cache miss."""
        return await self._client.cache.get_or_fetch(
            PRODUCT_SERIAL_INDEX_KEY,
            self.build_serial_index_from_products,
            ttl=TTL.MEDIUM,
            bypass_cache=self._client.bypass_cache,
        )

    async def search_serial(self, serial: str) -> SerialSearchResult:
        """Find which sales order a serial shipped on."""
        query = self._normalize_query(serial)
        index = await self.get_order_index()
        return _search(index, query, ORDER_NOT_FOUND_HINT)

    async def search_serial_by_product(self, serial: str) -> SerialSearchResult:
        """Find a serial in current product inventory (no order context)."""
        query = self._normalize_query(serial)
        index = await self.get_product_index()
        return _search(index, query, PRODUCT_NOT_FOUND_HINT)

    async def list_serials(
        self,
        limit: int | None = None,
        product_id: str | None = None,
    ) -> SerialListResponse:
        """List serials from the order-based index.

        Args:
            limit: Maximum number of serials to return
            product_id: Only serials of this product
        """
        index = await self.get_order_index()
        serials = list(index.values())
        if product_id:
            serials = [record for record in serials if record.get("productId") == product_id]
        if limit and limit < len(serials):
            serials = serials[:limit]

        return SerialListResponse(count=len(serials), total_in_index=len(index), serials=serials)

    async def get_sales_order_serials(self, order_id: str) -> SalesOrderSerialsResponse:
        """List the serials on one sales order.

        Each serial carries one source per line it appears on, so a serial
        listed twice on the pack lines reports "pack" twice.
        """
        order = _require_dict(
            await self._client.get_sales_order(order_id, include=ORDER_INCLUDES),
            f"sales order {order_id}",
        )

        found: dict[str, OrderSerial] = {}
        for field, source in LINE_SOURCES:
            for line, serial in _line_serials(order.get(field)):
                key = normalize_serial(serial)
                existing = found.get(key)
                if existing is None:
                    found[key] = OrderSerial(serial=key, product_id=line.get("productId"), sources=[source])
                else:
                    existing.sources.append(source)

        return SalesOrderSerialsResponse(
            sales_order_id=order.get("salesOrderId"),
            order_number=order.get("orderNumber"),
            order_date=order.get("orderDate"),
            status=order.get("inventoryStatus"),
            serial_count=len(found),
            serials=list(found.values()),
        )

    async def get_purchase_order_serials(self, order_id: str) -> PurchaseOrderSerialsResponse:
        """List every serial received on a purchase order's lines."""
        order = _require_dict(
            await self._client.get_purchase_order(order_id, include=["lines"]),
            f"purchase order {order_id}",
        )

        serials = [
            PurchaseOrderSerial(
                serial=normalize_serial(serial),
                product_id=line.get("productId"),
                line_id=line.get("purchaseOrderLineId"),
            )
            for line, serial in _line_serials(order.get("lines"))
        ]

        return PurchaseOrderSerialsResponse(
            purchase_order_id=order.get("purchaseOrderId"),
            order_number=order.get("orderNumber"),
            order_date=order.get("orderDate"),
            status=order.get("inventoryStatus"),
            serial_count=len(serials),
            serials=serials,
        )

    async def rebuild_serial_index(self, limit: int | None = None) -> IndexBuildResponse:
        """Force a rebuild of the order-based index.

        Without a limit the cached index is dropped and rebuilt through the
        cache. With a limit the partial index is returned but NOT cached, as
        it would hide serials from later searches.
        """
        cache = self._client.cache

        if limit:
            index = await self.build_serial_index(limit=limit)
            return IndexBuildResponse(
                success=True,
                total_serials=len(index),
                cached=False,
                message=f"Partial serial index built from up to {limit} orders (not cached)",
            )

        cache.invalidate(SERIAL_INDEX_KEY)
        index = await self.get_order_index()
        cached = cache.enabled and not self._client.bypass_cache
        message = (
            "Serial index built and cached for 1 hour"
            if cached
            else "Serial index built (caching disabled, not cached)"
        )
        return IndexBuildResponse(success=True, total_serials=len(index), cached=cached, message=message)

    @staticmethod
    def _normalize_query(serial: str) -> str:
        query = normalize_serial(serial or "")
        if not query:
            raise ValidationError("serial is required")
        return query


def _search(index: SerialIndex, query: str, hint: str) -> SerialSearchResult:
    record = index.get(query)
    if record is not None:
        return SerialSearchResult(found=True, **record)
    return SerialSearchResult(found=False, serial=query, message=hint)
