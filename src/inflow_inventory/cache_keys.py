"""Deterministic cache key derivation."""

import json
from collections.abc import Mapping
from typing import Any


def _render(value: Any) -> str:
    # Strings stay quoted, so separators inside a value never end it
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def build_cache_key(operation: str, params: Mapping[str, Any] | None = None) -> str:
    """Build a cache key from an operation name and its fetch parameters.

    Parameters set to None are dropped, so passing a full options object
    produces the same key as omitting the unset fields. Parameter order does
    not matter. Values are rendered as compact JSON, so two parameter sets
    share a key only when their values are equal.

    Args:
        operation: Operation name, also the key family prefix (e.g. "products")
        params: Fetch parameters relevant to the cached value

    Returns:
        "operation" when no parameter is set, otherwise
        'operation:a=1&b="x"' with parameters sorted by name

    Example:
        ```python
        build_cache_key("product", {"id": "p1", "include": None})
        # 'product:id="p1"'
        ```
    """
    present = {name: value for name, value in (params or {}).items() if value is not None}
    if not present:
        return operation

    parts = [f"{name}={_render(present[name])}" for name in sorted(present)]
    return f"{operation}:{'&'.join(parts)}"
