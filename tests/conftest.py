"""Pytest configuration and fixtures"""
import os

import httpx
import pytest
import pytest_asyncio

os.environ.setdefault("STOREFRONT_BASE_URL", "http://test")
os.environ.setdefault("MODE", "NORMAL")

from contract.pact import PactMock  # noqa: E402
from storefront.coordinator import StorefrontCoordinator  # noqa: E402

ITEMS_PATH = "/order-service/v1/items"
PURCHASE_PATH = "/order-service/v1/purchase"


@pytest.fixture
def two_items():
    """Catalog body with two purchasable items"""
    return [
        {"id": 1, "name": "Test Item 1", "description": "This is a test item", "stock": 5},
        {"id": 2, "name": "Test Item 2", "description": "This is another test item", "stock": 3},
    ]


@pytest.fixture
def pact(tmp_path, two_items):
    """Interception layer with the default 'get items' interaction declared"""
    mock = PactMock(output_dir=str(tmp_path / "pacts"))
    mock.intercept(
        "GET",
        ITEMS_PATH,
        200,
        body=two_items,
        description="Get items should return a success response",
        provider_states=["There are 2 items"],
        alias="getItems",
    )
    return mock


@pytest_asyncio.fixture
async def http_client(pact):
    client = httpx.AsyncClient(transport=pact.transport, base_url="http://test")
    yield client
    await client.aclose()


@pytest.fixture
def coordinator(http_client):
    return StorefrontCoordinator(http_client=http_client)


@pytest.fixture
def order_service_app():
    """Order service app reset to its default state"""
    from order_service import app as module

    module.MODE = "NORMAL"
    module._seed_two_items()
    yield module.app
    module.MODE = "NORMAL"
    module._seed_two_items()
