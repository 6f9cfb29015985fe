"""Shared fixtures."""

from collections.abc import Callable

import pytest

from inflow_inventory.constants import TTL
from inflow_inventory.repositories import InMemoryCacheBackend
from inflow_inventory.services import CacheStore, InventoryClient, InventoryGateway

from .fakes import FakeClock, FakeTransport

NAMESPACE = "test"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> InMemoryCacheBackend:
    return InMemoryCacheBackend()


@pytest.fixture
def cache(backend: InMemoryCacheBackend, clock: FakeClock) -> CacheStore:
    return CacheStore(backend=backend, namespace=NAMESPACE, default_ttl=TTL.SHORT, clock=clock)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def gateway(transport: FakeTransport) -> InventoryGateway:
    return InventoryGateway(transport_factory=lambda: transport)


@pytest.fixture
def client(gateway: InventoryGateway, cache: CacheStore) -> InventoryClient:
    return InventoryClient(gateway=gateway, cache=cache)


@pytest.fixture
def cached_keys(backend: InMemoryCacheBackend) -> Callable[[], set[str]]:
    """Return the un-namespaced keys currently stored."""

    def keys() -> set[str]:
        prefix = f"{NAMESPACE}:"
        return {key[len(prefix) :] for key in backend.keys(prefix)}

    return keys
