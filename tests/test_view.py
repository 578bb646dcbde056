"""Tests for the storefront view snapshot"""
import httpx
import pytest

from storefront.errors import ERROR_CATALOG_FAILED, ERROR_PURCHASE_FAILED
from storefront.view import TITLE, render
from tests.conftest import ITEMS_PATH, PURCHASE_PATH


@pytest.mark.asyncio
async def test_items_with_details(coordinator):
    await coordinator.load_catalog()

    view = render(coordinator)

    assert view.title == TITLE == "Available Items"
    assert view.error is None
    first = view.item(1)
    assert first.name == "Test Item 1"
    assert first.description == "This is a test item"
    assert first.stock_label == "Available Stock: 5"
    assert first.quantity_options == [1, 2, 3, 4, 5]
    assert first.selected_quantity == 1
    assert first.buy_disabled is False
    assert view.item(2).stock_label == "Available Stock: 3"


@pytest.mark.asyncio
async def test_selected_quantity_follows_selection(coordinator):
    await coordinator.load_catalog()
    coordinator.set_quantity(1, 3)

    assert render(coordinator).item(1).selected_quantity == 3


@pytest.mark.asyncio
async def test_zero_stock_disables_buy(pact, coordinator):
    pact.intercept("GET", ITEMS_PATH, 200, body=[
        {"id": 1, "name": "Out of Stock Item", "description": "This item is out of stock", "stock": 0},
    ])
    await coordinator.load_catalog()

    row = render(coordinator).item(1)

    assert row.buy_disabled is True
    assert row.quantity_options == []
    assert row.stock_label == "Available Stock: 0"


@pytest.mark.asyncio
async def test_purchase_error_shown_on_its_item(pact, coordinator):
    pact.intercept("POST", PURCHASE_PATH, 500)
    await coordinator.load_catalog()
    await coordinator.buy(1)

    view = render(coordinator)

    assert view.item(1).error == ERROR_PURCHASE_FAILED
    assert view.item(2).error is None


@pytest.mark.asyncio
async def test_catalog_error_shown(pact, coordinator):
    pact.intercept("GET", ITEMS_PATH, 503)
    await coordinator.load_catalog()

    view = render(coordinator)

    assert view.error == ERROR_CATALOG_FAILED
    assert view.items == []


@pytest.mark.asyncio
async def test_pending_purchase_disables_buy(coordinator):
    await coordinator.load_catalog()
    rows = {}

    async def handler(request):
        rows["during"] = render(coordinator).item(2)
        return httpx.Response(500)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as client:
        coordinator._http_client = client
        await coordinator.buy(2)

    assert rows["during"].pending is True
    assert rows["during"].buy_disabled is True
    assert rows["during"].error is None
    assert render(coordinator).item(2).pending is False


def test_unknown_row():
    from storefront.view import StorefrontView

    with pytest.raises(KeyError):
        StorefrontView().item(1)
