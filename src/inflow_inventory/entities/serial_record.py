"""Serial number record domain entity."""

from dataclasses import dataclass
from typing import Any


def normalize_serial(serial: str) -> str:
    """Normalize a serial number for indexing and lookup (trim + upper-case)."""
    return str(serial).strip().upper()


@dataclass(frozen=True)
class SerialRecord:
    """One entry of a serial index.

    Order-based records carry order context, product-based records carry
    stock context; fields of the other kind stay None.

    Attributes:
        serial: Normalized serial number (the index key)
        product_id: Product the serial belongs to
        sales_order_id: Order the serial was shipped on (order-based)
        order_number: Human-readable order number (order-based)
        order_date: Order date as returned by the remote (order-based)
        shopify_order_url: Storefront link kept in customFields.custom4 (order-based)
        product_name: Product name (product-based)
        location_id: Stock location (product-based)
        sublocation: Stock sublocation (product-based)
        quantity_on_hand: Quantity on hand (product-based)
        in_stock: Whether the serial is currently in stock (product-based)
    """

    serial: str
    product_id: str | None = None
    sales_order_id: str | None = None
    order_number: str | None = None
    order_date: str | None = None
    shopify_order_url: str | None = None
    product_name: str | None = None
    location_id: str | None = None
    sublocation: str | None = None
    quantity_on_hand: Any = None
    in_stock: bool | None = None

    @classmethod
    def from_order_line(cls, serial: str, order: dict, line: dict) -> "SerialRecord":
        """Build an order-based record from a sales order and one of its lines."""
        custom_fields = order.get("customFields") or {}
        return cls(
            serial=normalize_serial(serial),
            product_id=line.get("productId"),
            sales_order_id=order.get("salesOrderId"),
            order_number=order.get("orderNumber"),
            order_date=order.get("orderDate"),
            shopify_order_url=custom_fields.get("custom4") or None,
        )

    @classmethod
    def from_inventory_serial(cls, item: dict) -> "SerialRecord":
        """Build a product-based record from a list_all_serials item."""
        return cls(
            serial=normalize_serial(item["serial"]),
            product_id=item.get("productId"),
            product_name=item.get("productName"),
            location_id=item.get("locationId"),
            sublocation=item.get("sublocation"),
            quantity_on_hand=item.get("quantityOnHand"),
            in_stock=item.get("inStock"),
        )

    def to_order_dict(self) -> dict[str, Any]:
        """Serialize as an order-based index value (camelCase, remote convention)."""
        return {
            "serial": self.serial,
            "salesOrderId": self.sales_order_id,
            "orderNumber": self.order_number,
            "orderDate": self.order_date,
            "productId": self.product_id,
            "shopifyOrderUrl": self.shopify_order_url,
        }

    def to_product_dict(self) -> dict[str, Any]:
        """Serialize as a product-based index value (camelCase, remote convention)."""
        return {
            "serial": self.serial,
            "productId": self.product_id,
            "productName": self.product_name,
            "locationId": self.location_id,
            "quantityOnHand": self.quantity_on_hand,
            "sublocation": self.sublocation,
            "inStock": self.in_stock,
        }
