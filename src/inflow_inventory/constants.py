"""Cache TTL tiers, reserved keys and invalidation prefixes."""

from enum import IntEnum


class TTL(IntEnum):
    """Cache time-to-live tiers in seconds."""

    SHORT = 300  # stock levels, orders, transfers
    MEDIUM = 900  # products, customers, vendors
    LONG = 3600  # categories, locations, adjustment reasons


DEFAULT_NAMESPACE = "inflow-inventory-manager"

# Reserved keys for the two serial indexes. They are never merged.
SERIAL_INDEX_KEY = "serial_index"
PRODUCT_SERIAL_INDEX_KEY = "serial_index_products"

SERIAL_INDEX_PAGE_SIZE = 100
DEFAULT_SERIAL_ORDER_STATUS = "Fulfilled"
DEFAULT_MAX_PRODUCTS = 100


class Invalidates:
    """Key families purged after each kind of write.

    Each entry is a regex anchored at the start of the un-namespaced key.
    """

    STOCK = (r"^stock",)
    PRODUCT = (
        r"^products",
        r"^product:",
        r"^products_search",
        r"^product_bom",
        r"^bom",
    )
    VENDOR = (r"^vendors",)
    PURCHASE_ORDER = (r"^purchase_orders", r"^purchase_order:")
    PURCHASE_ORDER_RECEIPT = PURCHASE_ORDER + STOCK
