"""Inventory client: cached accessors and cache-invalidating writers.

Every read builds a key from its operation name and its own fetch
parameters, then goes through CacheStore.get_or_fetch with the TTL tier of
its resource. Every write calls the remote first and, only if that
succeeds, purges the key families it affects.
"""

from collections.abc import Iterable
from typing import Any

from inflow_inventory.cache_keys import build_cache_key
from inflow_inventory.config import Settings, get_settings
from inflow_inventory.constants import TTL, Invalidates
from inflow_inventory.dto import CacheStatsResponse
from inflow_inventory.errors import OperationError, UnsupportedOperationError, ValidationError
from inflow_inventory.logging_config import get_logger
from inflow_inventory.services.cache_service import CacheStore
from inflow_inventory.services.gateway import InventoryGateway
from inflow_inventory.services.serial_index import SerialIndexService

logger = get_logger(__name__)


def _compact(**fields: Any) -> dict[str, Any]:
    """Keep only the fields that are set (truthy), like optional CLI flags."""
    return {name: value for name, value in fields.items() if value}


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in data.items() if value is not None}


def _require(value: Any, name: str, hint: str = "") -> None:
    if not value:
        raise ValidationError(f"{name} is required{hint}")


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _line_to_item(line: dict[str, Any]) -> dict[str, Any]:
    """Convert a purchase order line as read back into an upsert item."""
    quantity = line.get("quantity")
    if isinstance(quantity, dict):
        raw_quantity = quantity.get("standardQuantity") or quantity.get("uomQuantity") or "1"
    else:
        raw_quantity = quantity or "1"

    return _without_none(
        {
            "id": line.get("purchaseOrderLineId"),
            "productId": line.get("productId"),
            "description": line.get("description"),
            "quantity": _to_float(raw_quantity, 1.0),
            "unitCost": _to_float(line.get("unitPrice") or "0", 0.0),
        }
    )


class InventoryClient:
    """Cached client for the inFlow inventory tools.

    This service depends on a CacheStore and an InventoryGateway; both are
    injected so tests can use an in-memory backend and a fake transport.

    Example:
        ```python
        from inflow_inventory.services import InventoryClient

        async with InventoryClient.create() as client:
            products = await client.list_products(limit=20)
            stock = await client.get_stock_levels("prod_123")
            hit = await client.serials.search_serial("abc123")
        ```
    """

    def __init__(
        self,
        gateway: InventoryGateway,
        cache: CacheStore,
        bypass_cache: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            gateway: Remote operation gateway (required).
            cache: Cache store shared by every accessor (required).
            bypass_cache: Skip the cache for every read made by this client.
        """
        self.gateway = gateway
        self.cache = cache
        self.bypass_cache = bypass_cache
        self.serials = SerialIndexService(self)

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        bypass_cache: bool = False,
    ) -> "InventoryClient":
        """Factory method wiring the MCP gateway and the configured cache.

        Args:
            settings: Application settings. If None, uses get_settings().
            bypass_cache: Skip the cache for every read.

        Returns:
            Configured InventoryClient (not yet connected)
        """
        settings = settings or get_settings()
        return cls(
            gateway=InventoryGateway.create(settings),
            cache=CacheStore.create(settings),
            bypass_cache=bypass_cache,
        )

    async def close(self) -> None:
        await self.gateway.close()

    async def __aenter__(self) -> "InventoryClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _cached(
        self,
        operation: str,
        key_params: dict[str, Any] | None,
        tool: str,
        arguments: dict[str, Any],
        ttl: TTL,
    ) -> Any:
        key = build_cache_key(operation, key_params)
        return await self.cache.get_or_fetch(
            key,
            lambda: self.gateway.invoke(tool, arguments),
            ttl=ttl,
            bypass_cache=self.bypass_cache,
        )

    def _purge(self, patterns: Iterable[str]) -> None:
        removed = sum(self.cache.invalidate_pattern(pattern) for pattern in patterns)
        logger.debug("Purged cache after write", removed=removed)

    # ==================== Tools ====================

    async def list_tools(self) -> list[dict[str, Any]]:
        """List the remote tools (uncached)."""
        return await self.gateway.list_tools()

    # ==================== Products ====================

    async def list_products(
        self,
        limit: int | None = None,
        skip: int | None = None,
        filter: str | None = None,
        category_id: str | None = None,
        category_name: str | None = None,
    ) -> Any:
        """List products with optional smart search and category filters."""
        return await self._cached(
            "products",
            {
                "limit": limit,
                "skip": skip,
                "filter": filter,
                "categoryId": category_id,
                "categoryName": category_name,
            },
            "list_products",
            _compact(
                count=limit,
                skip=skip,
                smart=filter,
                categoryId=category_id,
                categoryName=category_name,
            ),
            TTL.MEDIUM,
        )

    async def get_product(self, product_id: str, include: list[str] | None = None) -> Any:
        _require(product_id, "product_id")
        return await self._cached(
            "product",
            {"id": product_id, "include": include},
            "get_product",
            _compact(productId=product_id, include=include),
            TTL.MEDIUM,
        )

    async def search_products(self, query: str) -> Any:
        _require(query, "query")
        return await self._cached(
            "products_search", {"query": query}, "list_products", {"smart": query}, TTL.MEDIUM
        )

    async def get_bill_of_materials(self, product_id: str) -> Any:
        _require(product_id, "product_id")
        return await self._cached(
            "bom",
            {"productId": product_id},
            "get_bill_of_materials",
            {"productId": product_id},
            TTL.LONG,
        )

    async def get_product_with_bom(self, product_id: str) -> Any:
        _require(product_id, "product_id")
        return await self._cached(
            "product_bom",
            {"productId": product_id},
            "get_product",
            {"productId": product_id, "include": ["itemBoms"]},
            TTL.MEDIUM,
        )

    async def list_categories(self) -> Any:
        return await self._cached("categories", None, "list_categories", {"count": 100}, TTL.LONG)

    # ==================== Stock ====================

    async def get_stock_levels(self, product_id: str | None = None) -> Any:
        """Get the inventory summary of one product.

        Raises:
            ValidationError: If product_id is missing (checked before any I/O)
        """
        _require(
            product_id,
            "productId",
            " for get_inventory_summary. Use list-products first to get product IDs.",
        )
        return await self._cached(
            "stock",
            {"productId": product_id},
            "get_inventory_summary",
            {"productId": product_id},
            TTL.SHORT,
        )

    async def get_stock_by_location(self, location_id: str | None = None) -> Any:
        raise UnsupportedOperationError(
            "Stock by location requires listing products first, then calling "
            "get-stock-levels for each. This command is not directly supported."
        )

    async def list_stock_adjustments(self, limit: int | None = None) -> Any:
        return await self._cached(
            "stock_adjustments",
            {"limit": limit},
            "list_stock_adjustments",
            _compact(limit=limit),
            TTL.SHORT,
        )

    async def get_stock_adjustment(self, adjustment_id: str) -> Any:
        _require(adjustment_id, "adjustment_id")
        return await self._cached(
            "stock_adjustment",
            {"id": adjustment_id},
            "get_stock_adjustment",
            {"adjustmentId": adjustment_id},
            TTL.SHORT,
        )

    async def list_stock_transfers(
        self,
        limit: int | None = None,
        status: str | None = None,
        from_location_id: str | None = None,
        to_location_id: str | None = None,
    ) -> Any:
        return await self._cached(
            "stock_transfers",
            {
                "limit": limit,
                "status": status,
                "fromLocationId": from_location_id,
                "toLocationId": to_location_id,
            },
            "list_stock_transfers",
            _compact(
                count=limit,
                status=status,
                fromLocationId=from_location_id,
                toLocationId=to_location_id,
            ),
            TTL.SHORT,
        )

    async def get_stock_transfer(self, transfer_id: str) -> Any:
        _require(transfer_id, "transfer_id")
        return await self._cached(
            "stock_transfer",
            {"id": transfer_id},
            "get_stock_transfer",
            {"transferId": transfer_id},
            TTL.SHORT,
        )

    async def list_stock_counts(
        self,
        limit: int | None = None,
        status: str | None = None,
        location_id: str | None = None,
    ) -> Any:
        return await self._cached(
            "stock_counts",
            {"limit": limit, "status": status, "locationId": location_id},
            "list_stock_counts",
            _compact(count=limit, status=status, locationId=location_id),
            TTL.SHORT,
        )

    async def get_stock_count(self, stock_count_id: str) -> Any:
        _require(stock_count_id, "stock_count_id")
        return await self._cached(
            "stock_count",
            {"id": stock_count_id},
            "get_stock_count",
            {"stockCountId": stock_count_id},
            TTL.SHORT,
        )

    async def list_adjustment_reasons(self) -> Any:
        return await self._cached(
            "adjustment_reasons", None, "list_adjustment_reasons", {}, TTL.LONG
        )

    async def create_stock_adjustment(self, data: dict[str, Any]) -> Any:
        """Create a stock adjustment, then purge every stock key."""
        result = await self.gateway.invoke("upsert_stock_adjustment", _without_none(data))
        self._purge(Invalidates.STOCK)
        return result

    async def create_stock_transfer(self, data: dict[str, Any]) -> Any:
        """Create a stock transfer, then purge every stock key."""
        result = await self.gateway.invoke("upsert_stock_transfer", _without_none(data))
        self._purge(Invalidates.STOCK)
        return result

    async def create_stock_count(self, data: dict[str, Any]) -> Any:
        """Create a stock count, then purge every stock key."""
        result = await self.gateway.invoke("upsert_stock_count", _without_none(data))
        self._purge(Invalidates.STOCK)
        return result

    # ==================== Sales orders ====================

    async def list_sales_orders(
        self,
        limit: int | None = None,
        skip: int | None = None,
        status: str | None = None,
        include: list[str] | None = None,
    ) -> Any:
        return await self._cached(
            "sales_orders",
            {"limit": limit, "skip": skip, "status": status, "include": include},
            "list_sales_orders",
            _compact(count=limit, skip=skip, status=status, include=include),
            TTL.SHORT,
        )

    async def get_sales_order(self, order_id: str, include: list[str] | None = None) -> Any:
        _require(order_id, "order_id")
        return await self._cached(
            "sales_order",
            {"id": order_id, "include": include},
            "get_sales_order",
            _compact(salesOrderId=order_id, include=include),
            TTL.SHORT,
        )

    async def search_sales_orders(self, query: str) -> Any:
        _require(query, "query")
        return await self._cached(
            "sales_orders_search",
            {"query": query},
            "list_sales_orders",
            {"smart": query},
            TTL.SHORT,
        )

    # ==================== Purchase orders ====================

    async def list_purchase_orders(
        self,
        limit: int | None = None,
        skip: int | None = None,
        status: str | None = None,
        include: list[str] | None = None,
    ) -> Any:
        return await self._cached(
            "purchase_orders",
            {"limit": limit, "skip": skip, "status": status, "include": include},
            "list_purchase_orders",
            _compact(count=limit, skip=skip, status=status, include=include),
            TTL.SHORT,
        )

    async def get_purchase_order(self, order_id: str, include: list[str] | None = None) -> Any:
        _require(order_id, "order_id")
        return await self._cached(
            "purchase_order",
            {"id": order_id, "include": include},
            "get_purchase_order",
            _compact(purchaseOrderId=order_id, include=include),
            TTL.SHORT,
        )

    async def upsert_purchase_order(self, data: dict[str, Any]) -> Any:
        """Create or update a purchase order, then purge purchase order keys."""
        result = await self.gateway.invoke("upsert_purchase_order", _without_none(data))
        self._purge(Invalidates.PURCHASE_ORDER)
        return result

    async def receive_purchase_order(self, data: dict[str, Any]) -> Any:
        """Receive purchase order lines, then purge purchase order and stock keys."""
        _require(data.get("purchaseOrderId"), "purchaseOrderId")
        result = await self.gateway.invoke("receive_purchase_order", _without_none(data))
        self._purge(Invalidates.PURCHASE_ORDER_RECEIPT)
        return result

    async def unreceive_purchase_order(self, data: dict[str, Any]) -> Any:
        """Reverse received lines. A dry run changes nothing and purges nothing."""
        _require(data.get("purchaseOrderId"), "purchaseOrderId")
        result = await self.gateway.invoke("unreceive_purchase_order", _without_none(data))
        if not data.get("dryRun"):
            self._purge(Invalidates.PURCHASE_ORDER_RECEIPT)
        return result

    async def add_purchase_order_item(
        self,
        purchase_order_id: str,
        product_id: str,
        quantity: float,
        unit_cost: float | None = None,
    ) -> Any:
        """Append a line to an existing purchase order.

        The order is re-read with caching disabled so the upsert carries the
        current lines and timestamp.
        """
        _require(purchase_order_id, "purchase_order_id")
        _require(product_id, "product_id")

        with self.cache.caching_disabled():
            current = await self.get_purchase_order(purchase_order_id, include=["lines"])
        current = self._expect_record(current, f"Purchase order {purchase_order_id}")

        items = [_line_to_item(line) for line in current.get("lines") or []]
        items.append(_without_none({"productId": product_id, "quantity": quantity, "unitCost": unit_cost}))

        return await self.upsert_purchase_order(
            {
                "id": purchase_order_id,
                "vendorId": current.get("vendorId"),
                "items": items,
                "timestamp": current.get("timestamp"),
            }
        )

    async def update_purchase_order(
        self,
        purchase_order_id: str,
        remarks: str | None = None,
        order_date: str | None = None,
        expected_date: str | None = None,
        currency: str | None = None,
    ) -> Any:
        """Update header fields of a purchase order, keeping its lines."""
        _require(purchase_order_id, "purchase_order_id")

        with self.cache.caching_disabled():
            current = await self.get_purchase_order(purchase_order_id, include=["lines"])
        current = self._expect_record(current, f"Purchase order {purchase_order_id}")

        return await self.upsert_purchase_order(
            {
                "id": purchase_order_id,
                "vendorId": current.get("vendorId"),
                "items": [_line_to_item(line) for line in current.get("lines") or []],
                "remarks": remarks if remarks is not None else current.get("orderRemarks"),
                "orderDate": order_date or current.get("orderDate"),
                "expectedDate": expected_date or current.get("expectedDate"),
                "currencyCode": currency,
                "timestamp": current.get("timestamp"),
            }
        )

    # ==================== Locations ====================

    async def list_locations(self) -> Any:
        return await self._cached("locations", None, "list_locations", {}, TTL.LONG)

    async def get_location(self, location_id: str) -> Any:
        _require(location_id, "location_id")
        return await self._cached(
            "location",
            {"id": location_id},
            "get_location",
            {"locationId": location_id},
            TTL.LONG,
        )

    # ==================== Product serials ====================

    async def get_product_serials(self, product_id: str) -> Any:
        _require(product_id, "product_id")
        return await self._cached(
            "product_serials",
            {"productId": product_id},
            "get_product_serials",
            {"productId": product_id},
            TTL.MEDIUM,
        )

    async def list_all_serials(
        self,
        max_products: int | None = None,
        in_stock_only: bool | None = None,
    ) -> Any:
        return await self._cached(
            "all_serials",
            {"maxProducts": max_products, "inStockOnly": in_stock_only},
            "list_all_serials",
            _compact(maxProducts=max_products, inStockOnly=in_stock_only),
            TTL.MEDIUM,
        )

    # ==================== Customers & vendors ====================

    async def list_customers(self, limit: int | None = None) -> Any:
        return await self._cached(
            "customers", {"limit": limit}, "list_customers", _compact(limit=limit), TTL.MEDIUM
        )

    async def list_vendors(self, limit: int | None = None) -> Any:
        return await self._cached(
            "vendors", {"limit": limit}, "list_vendors", _compact(limit=limit), TTL.MEDIUM
        )

    async def get_vendor(self, vendor_id: str) -> Any:
        """Get one vendor, always fresh so its timestamp can be used for an update."""
        _require(vendor_id, "vendor_id")
        return await self.gateway.invoke("get_vendor", {"vendorId": vendor_id})

    async def upsert_vendor(self, data: dict[str, Any]) -> Any:
        """Create or update a vendor, then purge vendor list keys."""
        result = await self.gateway.invoke("upsert_vendor", _without_none(data))
        self._purge(Invalidates.VENDOR)
        return result

    async def update_vendor(
        self,
        vendor_id: str,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        website: str | None = None,
    ) -> Any:
        """Update a vendor, carrying over its name and current timestamp.

        Raises:
            OperationError: If the vendor does not exist
        """
        vendor = await self.get_vendor(vendor_id)
        if not vendor:
            raise OperationError(f"Vendor {vendor_id} not found")
        vendor = self._expect_record(vendor, f"Vendor {vendor_id}")

        return await self.upsert_vendor(
            {
                "id": vendor_id,
                "name": name or vendor.get("name"),
                "email": email,
                "phone": phone,
                "website": website,
                "timestamp": vendor.get("timestamp"),
            }
        )

    # ==================== Product writes ====================

    async def upsert_product(self, data: dict[str, Any]) -> Any:
        """Create or update a product, then purge product, search and BOM keys."""
        result = await self.gateway.invoke("upsert_product", _without_none(data))
        self._purge(Invalidates.PRODUCT)
        return result

    async def update_product(
        self,
        product_id: str,
        name: str | None = None,
        sku: str | None = None,
        description: str | None = None,
        cost: float | None = None,
        price: float | None = None,
    ) -> Any:
        """Update a product from a fresh read (name and timestamp carried over)."""
        _require(product_id, "product_id")

        with self.cache.caching_disabled():
            current = await self.get_product(product_id)
        current = self._expect_record(current, f"Product {product_id}")

        return await self.upsert_product(
            {
                "id": product_id,
                "name": name or current.get("name"),
                "sku": sku,
                "description": description,
                "cost": cost,
                "defaultPrice": price,
                "timestamp": current.get("timestamp"),
            }
        )

    # ==================== Other ====================

    async def list_currencies(self, limit: int | None = None) -> Any:
        """List currencies (uncached)."""
        return await self.gateway.invoke("list_currencies", _compact(count=limit))

    async def get_company_info(self) -> Any:
        raise UnsupportedOperationError(
            "Company info endpoint is not available via MCP. "
            "Company ID is set via INFLOW_COMPANY_ID environment variable."
        )

    # ==================== Cache controls ====================

    def disable_cache(self) -> None:
        self.cache.disable()

    def enable_cache(self) -> None:
        self.cache.enable()

    def get_cache_stats(self) -> CacheStatsResponse:
        stats = self.cache.get_stats()
        return CacheStatsResponse(
            namespace=self.cache.namespace,
            enabled=self.cache.enabled,
            hits=stats.hits,
            misses=stats.misses,
            size=stats.size,
            hit_rate=stats.hit_rate,
        )

    def clear_cache(self) -> int:
        return self.cache.clear()

    def invalidate_cache_key(self, key: str) -> bool:
        _require(key, "key")
        return self.cache.invalidate(key)

    @staticmethod
    def _expect_record(value: Any, what: str) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise OperationError(f"{what} returned an unexpected response: {value!r}")
        return value
