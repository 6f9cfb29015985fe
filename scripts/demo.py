#!/usr/bin/env python3
"""
Demo script for the inFlow inventory client.

This script shows the caching tier at work against a live inFlow MCP server:
repeated reads are served from cache, writes purge their key family, and the
serial index is built once and then searched from cache.

Requires INFLOW_API_KEY, INFLOW_COMPANY_ID and INFLOW_MCP_COMMAND (or
INFLOW_CONFIG_PATH) in the environment or a .env file.
"""

import asyncio
import sys
import time

from inflow_inventory import InventoryClient, build_cache_key
from inflow_inventory.logging_config import configure_logging


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def timed(label: str, coro) -> object:
    start = time.time()
    result = await coro
    duration = (time.time() - start) * 1000
    print(f"  {label}: {duration:.1f}ms")
    return result


async def demo_cached_reads(client: InventoryClient) -> None:
    """Demonstrate cache hits on repeated reads."""
    print_section("Cached Reads")

    print("\n📦 Listing products twice (second call is a cache hit):")
    await timed("list_products (miss)", client.list_products(limit=10))
    await timed("list_products (hit)", client.list_products(limit=10))

    print("\n🔑 Keys are built from the fetch parameters only:")
    print(f"  {build_cache_key('products', {'limit': 10, 'skip': None})}")
    print(f"  {build_cache_key('product', {'id': 'prod_123', 'include': ['itemBoms']})}")

    print("\n📍 Locations use the long TTL tier:")
    await timed("list_locations (miss)", client.list_locations())
    await timed("list_locations (hit)", client.list_locations())


async def demo_invalidation(client: InventoryClient) -> None:
    """Demonstrate pattern invalidation."""
    print_section("Pattern Invalidation")

    removed = client.cache.invalidate_pattern(r"^products")
    print(f"\n🧹 Purged {removed} product key(s)")
    await timed("list_products (miss again)", client.list_products(limit=10))


async def demo_serial_search(client: InventoryClient, serial: str) -> None:
    """Demonstrate the product-based serial index."""
    print_section("Serial Search")

    result = await timed("search_serial_by_product (build)", client.serials.search_serial_by_product(serial))
    print(f"  → {result.model_dump(exclude_none=True)}")
    result = await timed("search_serial_by_product (cached)", client.serials.search_serial_by_product(serial))
    print(f"  → found={result.found}")


def print_stats(client: InventoryClient) -> None:
    """Print cache statistics."""
    print_section("Cache Statistics")

    stats = client.get_cache_stats()
    print(f"\n  Namespace: {stats.namespace}")
    print(f"  Hits: {stats.hits}")
    print(f"  Misses: {stats.misses}")
    print(f"  Entries: {stats.size}")
    print(f"  Hit rate: {stats.hit_rate:.1%}")


async def main() -> None:
    """Run all demos."""
    configure_logging("warning")
    serial = sys.argv[1] if len(sys.argv) > 1 else "ABC123"

    print("\n" + "=" * 70)
    print("  inFlow Inventory Client Demo")
    print("=" * 70)

    async with InventoryClient.create() as client:
        await demo_cached_reads(client)
        await demo_invalidation(client)
        await demo_serial_search(client, serial)
        print_stats(client)

    print("\n" + "=" * 70)
    print("  Demo completed!")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
