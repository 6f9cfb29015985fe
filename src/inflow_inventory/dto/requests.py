"""Request DTOs for JSON-array command arguments.

Field names are snake_case in Python and camelCase on the wire, which is
what the inFlow MCP tools expect.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PurchaseOrderItem(_WireModel):
    """Line item for create-purchase-order / add-po-item."""

    product_id: str | None = Field(None, description="Product ID")
    description: str | None = Field(None, description="Free-text line description")
    quantity: float = Field(..., description="Quantity to order", gt=0)
    unit_cost: float | None = Field(None, description="Unit cost")


class ReceiveItem(_WireModel):
    """Line to receive on a purchase order, by line ID or product ID."""

    purchase_order_line_id: str | None = Field(None, description="Purchase order line ID")
    product_id: str | None = Field(None, description="Product ID")
    quantity: float = Field(..., description="Quantity to receive", gt=0)
    serial_numbers: list[str] | None = Field(None, description="Serials for serialized items")


class UnreceiveItem(_WireModel):
    """Product quantity to unreceive (newest receive lines first)."""

    product_id: str = Field(..., description="Product ID", min_length=1)
    quantity: float = Field(..., description="Quantity to unreceive", gt=0)
