"""Consumer pacts replayed against the order service"""
import httpx
import pytest

from contract.pact import PactMock
from contract.verifier import load_pact, verify_pact
from storefront.coordinator import StorefrontCoordinator
from tests.conftest import ITEMS_PATH, PURCHASE_PATH


async def _record_consumer_pact(pact):
    async with httpx.AsyncClient(transport=pact.transport, base_url="http://test") as client:
        coordinator = StorefrontCoordinator(http_client=client)
        await coordinator.mount()

        pact.intercept("POST", PURCHASE_PATH, 200,
                       description="Purchase should return a success response",
                       provider_states=["There is an item with stock"])
        coordinator.set_quantity(1, 3)
        await coordinator.buy(1)

        pact.intercept("POST", PURCHASE_PATH, 500,
                       description="Purchase should return an error",
                       provider_states=["There is an error"])
        await coordinator.buy(1)

        pact.intercept("GET", ITEMS_PATH, 200, body=[
            {"id": 1, "name": "Out of Stock Item", "description": "This item is out of stock", "stock": 0},
        ], description="Get items should return an item with 0 stock",
            provider_states=["There is an item with 0 stock"])
        await coordinator.load_catalog()
    return pact.write()


@pytest.fixture
def provider_client(order_service_app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=order_service_app), base_url="http://order-service")


@pytest.mark.asyncio
async def test_consumer_pact_verifies(pact, provider_client):
    path = await _record_consumer_pact(pact)
    document = load_pact(path)
    assert len(document["interactions"]) == 4

    async with provider_client:
        result = await verify_pact(document, provider_client)

    assert result.ok, result.mismatches
    assert "Purchase should return an error" in result.verified


@pytest.mark.asyncio
async def test_mismatch_reported(tmp_path, provider_client):
    pact = PactMock(output_dir=str(tmp_path))
    pact.intercept("GET", ITEMS_PATH, 200, body=[], description="Empty catalog",
                   provider_states=["There are 2 items"])
    async with httpx.AsyncClient(transport=pact.transport, base_url="http://test") as client:
        await client.get(ITEMS_PATH)

    async with provider_client:
        result = await verify_pact(pact.to_pact(), provider_client)

    assert not result.ok
    assert result.mismatches[0].description == "Empty catalog"
    assert result.mismatches[0].reason.startswith("body")


@pytest.mark.asyncio
async def test_unknown_provider_state_is_mismatch(provider_client):
    document = {
        "interactions": [{
            "description": "Needs a unicorn",
            "providerState": "There is a unicorn",
            "request": {"method": "GET", "path": ITEMS_PATH},
            "response": {"status": 200},
        }],
    }

    async with provider_client:
        result = await verify_pact(document, provider_client)

    assert [m.description for m in result.mismatches] == ["Needs a unicorn"]


@pytest.mark.asyncio
async def test_coordinator_against_order_service(provider_client):
    async with provider_client:
        coordinator = StorefrontCoordinator(http_client=provider_client)
        await coordinator.mount()
        coordinator.set_quantity(2, 3)

        assert await coordinator.buy(2) is True
        assert coordinator.get_item(2).stock == 0
        assert coordinator.can_buy(2) is False

        coordinator.set_quantity(1, 9)
        assert await coordinator.buy(1) is False
        assert coordinator.get_item(1).stock == 5
