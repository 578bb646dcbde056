import asyncio
import os
from typing import Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from storefront.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(title="order-service")
lock = asyncio.Lock()
MODE = os.getenv("MODE", "NORMAL").upper()   # NORMAL or FAILING
API_PATH = "/order-service/v1"


class StoredItem(BaseModel):
    id: int
    name: str
    description: str
    stock: int          # units left for sale


# --- seed catalog ---
ITEMS: Dict[int, StoredItem] = {}


def seed(items: List[dict]) -> None:
    ITEMS.clear()
    for raw in items:
        item = StoredItem(**raw)
        ITEMS[item.id] = item


def _seed_two_items() -> None:
    seed([
        {"id": 1, "name": "Test Item 1", "description": "This is a test item", "stock": 5},
        {"id": 2, "name": "Test Item 2", "description": "This is another test item", "stock": 3},
    ])


def _seed_out_of_stock() -> None:
    seed([{"id": 1, "name": "Out of Stock Item", "description": "This item is out of stock", "stock": 0}])


def _set_failing() -> None:
    global MODE
    _seed_two_items()
    MODE = "FAILING"


PROVIDER_STATES: Dict[str, Callable[[], None]] = {
    "There are 2 items": _seed_two_items,
    "There is an item with stock": _seed_two_items,
    "There is an item with 0 stock": _seed_out_of_stock,
    "There is an error": _set_failing,
}

_seed_two_items()


# --------- Models ---------
class PurchaseReq(BaseModel):
    itemId: int
    quantity: int


class ProviderStateReq(BaseModel):
    state: Optional[str] = None


# --------- Reads ---------
@app.get(f"{API_PATH}/items")
async def list_items() -> List[StoredItem]:
    return [ITEMS[i] for i in sorted(ITEMS)]


@app.get("/orders/check-stock")
async def check_stock(productId: str):
    try:
        item = ITEMS.get(int(productId))
    except ValueError:
        item = None
    if not item:
        raise HTTPException(404, "product not found")
    return {"productId": productId, "stockAvailable": item.stock}


# --------- Writes ---------
@app.post(f"{API_PATH}/purchase")
async def purchase(req: PurchaseReq):
    if MODE == "FAILING":
        raise HTTPException(500, "purchase failure")
    if req.quantity <= 0:
        raise HTTPException(400, "quantity must be > 0")
    async with lock:
        item = ITEMS.get(req.itemId)
        if not item:
            raise HTTPException(404, "item not found")
        if item.stock < req.quantity:
            raise HTTPException(409, "insufficient stock")
        item.stock -= req.quantity
        logger.info("Sold item %s x%d, %d left", item.id, req.quantity, item.stock)
        return {"status": "purchased", "itemId": item.id, "quantity": req.quantity, "stock": item.stock}


# --------- Contract verification hook ---------
@app.post("/_pact/provider-states")
async def provider_state(req: ProviderStateReq):
    global MODE
    MODE = os.getenv("MODE", "NORMAL").upper()
    if req.state is None:
        async with lock:
            _seed_two_items()
        return {"state": None}
    setup = PROVIDER_STATES.get(req.state)
    if setup is None:
        raise HTTPException(400, f"unknown provider state: {req.state}")
    async with lock:
        setup()
    return {"state": req.state}
