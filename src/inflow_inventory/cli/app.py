"""inflow-cli Typer application.

Every command builds an InventoryClient, runs one operation through the
CommandHandler and prints the result as JSON on stdout. Logs and errors go
to stderr.
"""

import json
from dataclasses import dataclass
from typing import Any

import typer
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from inflow_inventory.config import get_settings
from inflow_inventory.dto import PurchaseOrderItem, ReceiveItem, UnreceiveItem
from inflow_inventory.errors import ConfigurationError, ValidationError
from inflow_inventory.handlers import CommandHandler
from inflow_inventory.handlers.command_handler import ClientOperation
from inflow_inventory.logging_config import configure_logging
from inflow_inventory.services import InventoryClient

PO_ITEMS_FORMAT = '[{"productId":"...", "quantity":5, "unitCost":72}]'
RECEIVE_ITEMS_FORMAT = '[{"purchaseOrderLineId":"...","quantity":6}] or [{"productId":"...","quantity":6}]'
UNRECEIVE_ITEMS_FORMAT = '[{"productId":"...","quantity":6}]'
LINE_IDS_FORMAT = '["receiveLineId", ...]'


@dataclass
class CliState:
    """Options shared by every command of one invocation."""

    no_cache: bool = False


app = typer.Typer(
    name="inflow-cli",
    help="inFlow inventory management via MCP",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache for every read"),
    log_level: str = typer.Option(
        "warning", "--log-level", envvar="INFLOW_LOG_LEVEL", help="Log level (debug, info, warning, error)"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Write logs to stderr as JSON lines"),
) -> None:
    """inFlow inventory management via MCP."""
    configure_logging(log_level=log_level, json_logs=json_logs)
    ctx.obj = CliState(no_cache=no_cache)


def build_client(no_cache: bool) -> InventoryClient:
    """Build the client for one invocation from environment settings."""
    try:
        settings = get_settings()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return InventoryClient.create(settings, bypass_cache=no_cache)


def _run(ctx: typer.Context, operation: ClientOperation) -> None:
    state: CliState = ctx.obj or CliState()
    handler = CommandHandler(client_factory=lambda: build_client(state.no_cache))
    code = handler.run(ctx.info_name or "", operation)
    if code:
        raise typer.Exit(code)


def _split(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_json_array(raw: str, option: str, example: str) -> list[Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid {option} JSON. Format: {example}") from e
    if not isinstance(value, list):
        raise ValidationError(f"{option} must be a JSON array. Format: {example}")
    return value


def _parse_items(raw: str, model: type[BaseModel], option: str, example: str) -> list[dict[str, Any]]:
    items = _parse_json_array(raw, option, example)
    try:
        return [model.model_validate(item).to_wire() for item in items]  # type: ignore[attr-defined]
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid {option}: {location}: {first['msg']}. Format: {example}") from e


# ==================== Tools ====================


@app.command("list-tools")
def list_tools(ctx: typer.Context) -> None:
    """List all available MCP tools."""
    _run(ctx, lambda client: client.list_tools())


# ==================== Products ====================


@app.command("list-products")
def list_products(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records to return"),
    skip: int | None = typer.Option(None, min=0, help="Records to skip (pagination)"),
    filter: str | None = typer.Option(None, help="Smart search query"),
    category_id: str | None = typer.Option(None, help="Category ID to filter by"),
    category: str | None = typer.Option(None, help="Category name to filter by"),
) -> None:
    """List products with optional category filtering."""
    _run(
        ctx,
        lambda client: client.list_products(
            limit=limit, skip=skip, filter=filter, category_id=category_id, category_name=category
        ),
    )


@app.command("get-product")
def get_product(ctx: typer.Context, id: str = typer.Option(..., help="Product ID")) -> None:
    """Get product details by ID."""
    _run(ctx, lambda client: client.get_product(id))


@app.command("search-products")
def search_products(ctx: typer.Context, query: str = typer.Option(..., help="Search term")) -> None:
    """Search products by name/SKU."""
    _run(ctx, lambda client: client.search_products(query))


@app.command("get-bom")
def get_bom(ctx: typer.Context, id: str = typer.Option(..., help="Product ID")) -> None:
    """Get bill of materials for a manufacturable product."""
    _run(ctx, lambda client: client.get_bill_of_materials(id))


@app.command("list-categories")
def list_categories(ctx: typer.Context) -> None:
    """List all product categories."""
    _run(ctx, lambda client: client.list_categories())


@app.command("create-product")
def create_product(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Product name"),
    sku: str | None = typer.Option(None, help="Product SKU"),
    description: str | None = typer.Option(None, help="Product description"),
    category_id: str | None = typer.Option(None, help="Category ID"),
    cost: float | None = typer.Option(None, help="Unit cost"),
    price: float | None = typer.Option(None, help="Selling price"),
    barcode: str | None = typer.Option(None, help="Product barcode"),
) -> None:
    """Create a new product in inFlow."""
    _run(
        ctx,
        lambda client: client.upsert_product(
            {
                "name": name,
                "sku": sku,
                "description": description,
                "categoryId": category_id,
                "cost": cost,
                "defaultPrice": price,
                "barcode": barcode,
            }
        ),
    )


@app.command("update-product")
def update_product(
    ctx: typer.Context,
    id: str = typer.Option(..., help="Product ID"),
    name: str | None = typer.Option(None, help="Product name"),
    sku: str | None = typer.Option(None, help="Product SKU"),
    description: str | None = typer.Option(None, help="Product description"),
    cost: float | None = typer.Option(None, help="Unit cost"),
    price: float | None = typer.Option(None, help="Selling price"),
) -> None:
    """Update an existing product."""
    _run(
        ctx,
        lambda client: client.update_product(
            id, name=name, sku=sku, description=description, cost=cost, price=price
        ),
    )


# ==================== Stock ====================


@app.command("get-stock-levels")
def get_stock_levels(
    ctx: typer.Context,
    product_id: str | None = typer.Option(None, help="Product ID"),
) -> None:
    """Get current stock quantities of a product."""
    _run(ctx, lambda client: client.get_stock_levels(product_id))


@app.command("get-stock-by-location")
def get_stock_by_location(
    ctx: typer.Context,
    location_id: str | None = typer.Option(None, help="Location ID"),
) -> None:
    """Get stock breakdown by location (not supported)."""
    _run(ctx, lambda client: client.get_stock_by_location(location_id))


@app.command("list-stock-adjustments")
def list_stock_adjustments(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
) -> None:
    """List stock adjustment history."""
    _run(ctx, lambda client: client.list_stock_adjustments(limit=limit))


@app.command("get-stock-adjustment")
def get_stock_adjustment(ctx: typer.Context, id: str = typer.Option(..., help="Adjustment ID")) -> None:
    """Get stock adjustment details."""
    _run(ctx, lambda client: client.get_stock_adjustment(id))


@app.command("create-stock-adjustment")
def create_stock_adjustment(
    ctx: typer.Context,
    product_id: str = typer.Option(..., help="Product ID"),
    location_id: str = typer.Option(..., help="Location ID"),
    quantity: int = typer.Option(..., help="Quantity adjustment (negative to remove)"),
    reason_id: str | None = typer.Option(None, help="Adjustment reason ID"),
    remarks: str | None = typer.Option(None, help="Notes/remarks"),
) -> None:
    """Create a new stock adjustment."""
    _run(
        ctx,
        lambda client: client.create_stock_adjustment(
            {
                "locationId": location_id,
                "reasonId": reason_id,
                "remarks": remarks,
                "items": [{"productId": product_id, "quantity": quantity}],
            }
        ),
    )


@app.command("list-adjustment-reasons")
def list_adjustment_reasons(ctx: typer.Context) -> None:
    """List available adjustment reasons."""
    _run(ctx, lambda client: client.list_adjustment_reasons())


@app.command("list-stock-transfers")
def list_stock_transfers(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
    status: str | None = typer.Option(None, help="Filter by status"),
    from_location_id: str | None = typer.Option(None, help="Source location ID"),
    to_location_id: str | None = typer.Option(None, help="Destination location ID"),
) -> None:
    """List stock transfers between locations."""
    _run(
        ctx,
        lambda client: client.list_stock_transfers(
            limit=limit, status=status, from_location_id=from_location_id, to_location_id=to_location_id
        ),
    )


@app.command("get-stock-transfer")
def get_stock_transfer(ctx: typer.Context, id: str = typer.Option(..., help="Transfer ID")) -> None:
    """Get stock transfer details."""
    _run(ctx, lambda client: client.get_stock_transfer(id))


@app.command("create-stock-transfer")
def create_stock_transfer(
    ctx: typer.Context,
    product_id: str = typer.Option(..., help="Product ID"),
    from_location_id: str = typer.Option(..., help="Source location ID"),
    to_location_id: str = typer.Option(..., help="Destination location ID"),
    quantity: int = typer.Option(..., min=1, help="Quantity to transfer"),
    remarks: str | None = typer.Option(None, help="Notes/remarks"),
) -> None:
    """Create a new stock transfer."""
    _run(
        ctx,
        lambda client: client.create_stock_transfer(
            {
                "fromLocationId": from_location_id,
                "toLocationId": to_location_id,
                "remarks": remarks,
                "items": [{"productId": product_id, "quantity": quantity}],
            }
        ),
    )


@app.command("list-stock-counts")
def list_stock_counts(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
    status: str | None = typer.Option(None, help="Filter by status"),
    location_id: str | None = typer.Option(None, help="Location ID"),
) -> None:
    """List inventory count records."""
    _run(ctx, lambda client: client.list_stock_counts(limit=limit, status=status, location_id=location_id))


@app.command("get-stock-count")
def get_stock_count(ctx: typer.Context, id: str = typer.Option(..., help="Stock count ID")) -> None:
    """Get stock count details."""
    _run(ctx, lambda client: client.get_stock_count(id))


@app.command("create-stock-count")
def create_stock_count(
    ctx: typer.Context,
    location_id: str = typer.Option(..., help="Location ID"),
    remarks: str | None = typer.Option(None, help="Notes/remarks"),
) -> None:
    """Create a new stock count."""
    _run(ctx, lambda client: client.create_stock_count({"locationId": location_id, "remarks": remarks}))


# ==================== Sales orders ====================


@app.command("list-sales-orders")
def list_sales_orders(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
    skip: int | None = typer.Option(None, min=0, help="Records to skip"),
    status: str | None = typer.Option(None, help="Filter by status"),
    include: str | None = typer.Option(None, help="Include relationships (comma-separated)"),
) -> None:
    """List sales orders."""
    _run(
        ctx,
        lambda client: client.list_sales_orders(limit=limit, skip=skip, status=status, include=_split(include)),
    )


@app.command("get-sales-order")
def get_sales_order(
    ctx: typer.Context,
    id: str = typer.Option(..., help="Sales order ID"),
    include: str | None = typer.Option(None, help="Include relationships (comma-separated)"),
) -> None:
    """Get sales order details."""
    _run(ctx, lambda client: client.get_sales_order(id, include=_split(include)))


@app.command("search-sales-orders")
def search_sales_orders(ctx: typer.Context, query: str = typer.Option(..., help="Search term")) -> None:
    """Search sales orders."""
    _run(ctx, lambda client: client.search_sales_orders(query))


# ==================== Purchase orders ====================


@app.command("list-purchase-orders")
def list_purchase_orders(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
    skip: int | None = typer.Option(None, min=0, help="Records to skip"),
    status: str | None = typer.Option(None, help="Filter by status"),
    include: str | None = typer.Option(None, help="Include relationships (comma-separated)"),
) -> None:
    """List purchase orders."""
    _run(
        ctx,
        lambda client: client.list_purchase_orders(
            limit=limit, skip=skip, status=status, include=_split(include)
        ),
    )


@app.command("get-purchase-order")
def get_purchase_order(
    ctx: typer.Context,
    id: str = typer.Option(..., help="Purchase order ID"),
    include: str | None = typer.Option(None, help="Include relationships (comma-separated)"),
) -> None:
    """Get purchase order details."""
    _run(ctx, lambda client: client.get_purchase_order(id, include=_split(include)))


@app.command("create-purchase-order")
def create_purchase_order(
    ctx: typer.Context,
    vendor_id: str = typer.Option(..., help="Vendor ID"),
    items: str = typer.Option(..., help=f"JSON array: {PO_ITEMS_FORMAT}"),
    order_number: str | None = typer.Option(None, help="PO number (auto-generated if omitted)"),
    order_date: str | None = typer.Option(None, help="Order date (ISO format)"),
    expected_date: str | None = typer.Option(None, help="Expected delivery date"),
    location_id: str | None = typer.Option(None, help="Destination warehouse ID"),
    currency: str | None = typer.Option(None, help="Currency code (GBP, USD)"),
    remarks: str | None = typer.Option(None, help="Notes/remarks"),
) -> None:
    """Create a new purchase order."""

    def operation(client: InventoryClient) -> Any:
        parsed = _parse_items(items, PurchaseOrderItem, "--items", PO_ITEMS_FORMAT)
        return client.upsert_purchase_order(
            {
                "vendorId": vendor_id,
                "orderNumber": order_number,
                "orderDate": order_date,
                "expectedDate": expected_date,
                "locationId": location_id,
                "items": parsed,
                "currencyCode": currency,
                "remarks": remarks,
            }
        )

    _run(ctx, operation)


@app.command("add-po-item")
def add_po_item(
    ctx: typer.Context,
    purchase_order_id: str = typer.Option(..., help="Purchase order ID"),
    product_id: str = typer.Option(..., help="Product ID to add"),
    quantity: int = typer.Option(..., min=1, help="Quantity to order"),
    unit_cost: float | None = typer.Option(None, help="Unit cost"),
) -> None:
    """Add a line item to an existing purchase order."""
    _run(
        ctx,
        lambda client: client.add_purchase_order_item(
            purchase_order_id, product_id, quantity, unit_cost=unit_cost
        ),
    )


@app.command("update-purchase-order")
def update_purchase_order(
    ctx: typer.Context,
    id: str = typer.Option(..., help="Purchase order ID"),
    remarks: str | None = typer.Option(None, help="Order remarks/notes"),
    order_date: str | None = typer.Option(None, help="Order date (ISO format)"),
    expected_date: str | None = typer.Option(None, help="Expected delivery date"),
    currency: str | None = typer.Option(None, help="Currency code (GBP, USD)"),
) -> None:
    """Update an existing purchase order (remarks, dates, currency)."""
    _run(
        ctx,
        lambda client: client.update_purchase_order(
            id, remarks=remarks, order_date=order_date, expected_date=expected_date, currency=currency
        ),
    )


@app.command("receive-po-items")
def receive_po_items(
    ctx: typer.Context,
    purchase_order_id: str = typer.Option(..., help="Purchase order ID"),
    receive_all: bool = typer.Option(False, "--receive-all", help="Fully receive all lines"),
    items: str | None = typer.Option(None, help=f"JSON array: {RECEIVE_ITEMS_FORMAT}"),
    allow_over_receive: bool = typer.Option(False, "--allow-over-receive", help="Allow qty > ordered"),
) -> None:
    """Receive items on a purchase order (partial or full)."""

    def operation(client: InventoryClient) -> Any:
        if not receive_all and not items:
            raise ValidationError("Provide --receive-all or --items=[...]")
        if receive_all and items:
            raise ValidationError("Cannot use both --receive-all and --items")

        return client.receive_purchase_order(
            {
                "purchaseOrderId": purchase_order_id,
                "receiveAll": receive_all or None,
                "items": _parse_items(items, ReceiveItem, "--items", RECEIVE_ITEMS_FORMAT) if items else None,
                "allowOverReceive": allow_over_receive or None,
            }
        )

    _run(ctx, operation)


@app.command("unreceive-po-items")
def unreceive_po_items(
    ctx: typer.Context,
    purchase_order_id: str = typer.Option(..., help="Purchase order ID"),
    receive_line_ids: str | None = typer.Option(None, help=f"JSON array of receive line IDs: {LINE_IDS_FORMAT}"),
    items: str | None = typer.Option(
        None, help=f"JSON array: {UNRECEIVE_ITEMS_FORMAT} (removes newest receive lines first)"
    ),
    unreceive_all: bool = typer.Option(False, "--unreceive-all", help="Remove ALL receive lines"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview only, make no changes"),
) -> None:
    """Remove received items from a purchase order (reverse stock)."""

    def operation(client: InventoryClient) -> Any:
        modes = sum(1 for mode in (receive_line_ids, items, unreceive_all) if mode)
        if modes == 0:
            raise ValidationError("Provide --receive-line-ids, --items, or --unreceive-all")
        if modes > 1:
            raise ValidationError("Use only one of --receive-line-ids, --items, or --unreceive-all")

        line_ids = None
        if receive_line_ids:
            parsed = _parse_json_array(receive_line_ids, "--receive-line-ids", LINE_IDS_FORMAT)
            line_ids = [str(line_id) for line_id in parsed]

        return client.unreceive_purchase_order(
            {
                "purchaseOrderId": purchase_order_id,
                "receiveLineIds": line_ids,
                "items": _parse_items(items, UnreceiveItem, "--items", UNRECEIVE_ITEMS_FORMAT) if items else None,
                "unreceiveAll": unreceive_all or None,
                "dryRun": dry_run or None,
            }
        )

    _run(ctx, operation)


# ==================== Vendors ====================


@app.command("create-vendor")
def create_vendor(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Vendor name"),
    email: str | None = typer.Option(None, help="Email address"),
    phone: str | None = typer.Option(None, help="Phone number"),
    website: str | None = typer.Option(None, help="Website URL"),
    street1: str | None = typer.Option(None, help="Address street line 1"),
    city: str | None = typer.Option(None, help="City"),
    postal_code: str | None = typer.Option(None, help="Postal code"),
    country: str | None = typer.Option(None, help="Country"),
    currency: str | None = typer.Option(None, help="Currency code (GBP, USD)"),
) -> None:
    """Create a new vendor in inFlow."""
    address = None
    if street1 or city or country:
        address = {
            key: value
            for key, value in {"street1": street1, "city": city, "postalCode": postal_code, "country": country}.items()
            if value is not None
        }

    _run(
        ctx,
        lambda client: client.upsert_vendor(
            {
                "name": name,
                "email": email,
                "phone": phone,
                "website": website,
                "address": address,
                "currencyCode": currency,
            }
        ),
    )


@app.command("update-vendor")
def update_vendor(
    ctx: typer.Context,
    id: str = typer.Option(..., help="Vendor ID"),
    name: str | None = typer.Option(None, help="Vendor name"),
    email: str | None = typer.Option(None, help="Email address"),
    phone: str | None = typer.Option(None, help="Phone number"),
    website: str | None = typer.Option(None, help="Website URL"),
) -> None:
    """Update an existing vendor."""
    _run(ctx, lambda client: client.update_vendor(id, name=name, email=email, phone=phone, website=website))


# ==================== Locations ====================


@app.command("list-locations")
def list_locations(ctx: typer.Context) -> None:
    """List warehouse locations."""
    _run(ctx, lambda client: client.list_locations())


@app.command("get-location")
def get_location(ctx: typer.Context, id: str = typer.Option(..., help="Location ID")) -> None:
    """Get location details."""
    _run(ctx, lambda client: client.get_location(id))


# ==================== Serial numbers (order-based) ====================


@app.command("get-order-serials")
def get_order_serials(ctx: typer.Context, id: str = typer.Option(..., help="Sales order ID")) -> None:
    """Get serial numbers from a sales order."""
    _run(ctx, lambda client: client.serials.get_sales_order_serials(id))


@app.command("get-po-serials")
def get_po_serials(ctx: typer.Context, id: str = typer.Option(..., help="Purchase order ID")) -> None:
    """Get serial numbers from a purchase order."""
    _run(ctx, lambda client: client.serials.get_purchase_order_serials(id))


@app.command("search-serial")
def search_serial(ctx: typer.Context, query: str = typer.Option(..., help="Serial number to search for")) -> None:
    """Find which order a serial number is on."""
    _run(ctx, lambda client: client.serials.search_serial(query))


@app.command("list-serials")
def list_serials(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
    product_id: str | None = typer.Option(None, help="Filter by product ID"),
) -> None:
    """List all serial numbers from fulfilled orders."""
    _run(ctx, lambda client: client.serials.list_serials(limit=limit, product_id=product_id))


@app.command("build-serial-index")
def build_serial_index(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, help="Max orders to scan (partial index, not cached)"),
) -> None:
    """Rebuild the order-based serial index (slow)."""
    typer.echo("Building serial index (this may take a while)...", err=True)
    _run(ctx, lambda client: client.serials.rebuild_serial_index(limit=limit))


# ==================== Serial numbers (product-based) ====================


@app.command("get-product-serials")
def get_product_serials(ctx: typer.Context, id: str = typer.Option(..., help="Product ID")) -> None:
    """Get serial numbers for a specific product (fast)."""
    _run(ctx, lambda client: client.get_product_serials(id))


@app.command("list-all-serials")
def list_all_serials(
    ctx: typer.Context,
    max_products: int | None = typer.Option(None, min=1, max=100, help="Max products to fetch"),
    in_stock_only: bool = typer.Option(False, "--in-stock-only", help="Only show in-stock serials"),
) -> None:
    """List serial numbers across all serialized products (fast)."""
    _run(
        ctx,
        lambda client: client.list_all_serials(max_products=max_products, in_stock_only=in_stock_only or None),
    )


@app.command("search-serial-fast")
def search_serial_fast(
    ctx: typer.Context, query: str = typer.Option(..., help="Serial number to search for")
) -> None:
    """Find a serial number by product lookup (no order info)."""
    _run(ctx, lambda client: client.serials.search_serial_by_product(query))


# Older command names, kept for existing scripts


@app.command("list-serial-numbers")
def list_serial_numbers(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
    product_id: str | None = typer.Option(None, help="Filter by product ID"),
) -> None:
    """Alias for list-serials."""
    _run(ctx, lambda client: client.serials.list_serials(limit=limit, product_id=product_id))


@app.command("search-serial-numbers")
def search_serial_numbers(
    ctx: typer.Context, query: str = typer.Option(..., help="Serial number to search for")
) -> None:
    """Alias for search-serial."""
    _run(ctx, lambda client: client.serials.search_serial(query))


@app.command("get-serial-number")
def get_serial_number(ctx: typer.Context, id: str = typer.Option(..., help="Serial number")) -> None:
    """Alias for search-serial, taking the serial as --id."""
    _run(ctx, lambda client: client.serials.search_serial(id))


# ==================== Other ====================


@app.command("list-customers")
def list_customers(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
) -> None:
    """List customer records."""
    _run(ctx, lambda client: client.list_customers(limit=limit))


@app.command("list-vendors")
def list_vendors(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
) -> None:
    """List vendor records."""
    _run(ctx, lambda client: client.list_vendors(limit=limit))


@app.command("get-company-info")
def get_company_info(ctx: typer.Context) -> None:
    """Get company configuration (not supported)."""
    _run(ctx, lambda client: client.get_company_info())


@app.command("list-currencies")
def list_currencies(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, min=1, max=250, help="Max records"),
) -> None:
    """List all available currencies."""
    _run(ctx, lambda client: client.list_currencies(limit=limit))


# ==================== Cache ====================


@app.command("cache-stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show cache hit/miss counters and size."""
    _run(ctx, lambda client: client.get_cache_stats())


@app.command("cache-clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every cached entry of the namespace."""
    _run(ctx, lambda client: {"success": True, "cleared": client.clear_cache()})


@app.command("cache-invalidate")
def cache_invalidate(ctx: typer.Context, key: str = typer.Option(..., help="Cache key to remove")) -> None:
    """Remove one cached entry by key."""
    _run(ctx, lambda client: {"key": key, "removed": client.invalidate_cache_key(key)})


def main() -> None:
    app(prog_name="inflow-cli")
