"""
Catalog & purchase state coordinator.

Owns the item catalog, the per-item quantity selections and the per-item
purchase errors, and sequences the request/reload cycle around a buy.

All state is written from one event loop; every operation mutates state only
at the points between awaits, so a load in flight never leaves a half-written
catalog behind. Overlapping loads are not deduplicated: the last response to
resolve wins.
"""

from collections import Counter
from typing import Dict, Optional, Set, Tuple

import httpx

from storefront import config
from storefront.errors import (
    ERROR_CATALOG_FAILED,
    ERROR_PURCHASE_FAILED,
    OutOfStockError,
    UnknownItemError,
)
from storefront.logging import get_logger
from storefront.models import Item, PurchaseReq, parse_catalog

logger = get_logger(__name__)


class StorefrontCoordinator:
    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        items_path: str = config.ITEMS_PATH,
        purchase_path: str = config.PURCHASE_PATH,
    ):
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            base_url=config.BASE_URL, timeout=config.TIMEOUT
        )
        self.items_path = items_path
        self.purchase_path = purchase_path

        self._catalog: Tuple[Item, ...] = ()
        self._selections: Dict[int, int] = {}
        self._purchase_errors: Dict[int, str] = {}
        # in-flight purchase count per item; the same item may be bought twice at once
        self._pending: Counter = Counter()
        self.catalog_error: Optional[str] = None
        self.mounted = False

        # tiny counters, same spirit as a /metrics endpoint
        self.stats = {"loads": 0, "load_errors": 0, "purchases": 0, "purchase_errors": 0}

    async def __aenter__(self) -> "StorefrontCoordinator":
        await self.mount()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    # --------- Read-only views of the state ---------
    @property
    def catalog(self) -> Tuple[Item, ...]:
        return self._catalog

    @property
    def selections(self) -> Dict[int, int]:
        return dict(self._selections)

    @property
    def purchase_errors(self) -> Dict[int, str]:
        return dict(self._purchase_errors)

    @property
    def pending(self) -> Set[int]:
        return set(self._pending)

    def get_item(self, item_id: int) -> Item:
        for item in self._catalog:
            if item.id == item_id:
                return item
        raise UnknownItemError(item_id)

    def can_buy(self, item_id: int) -> bool:
        try:
            return self.get_item(item_id).stock > 0
        except UnknownItemError:
            return False

    # --------- Catalog loader ---------
    async def mount(self) -> None:
        """Initial catalog load; later calls are no-ops."""
        if self.mounted:
            return
        self.mounted = True
        await self.load_catalog()

    async def load_catalog(self) -> bool:
        """Fetch the items and reset every quantity selection to 1.

        Returns False and sets `catalog_error` on any failure; the previous
        catalog and selections are left in place.
        """
        self.stats["loads"] += 1
        try:
            r = await self._http_client.get(self.items_path)
            if r.status_code != 200:
                raise httpx.HTTPStatusError(
                    f"items returned {r.status_code}", request=r.request, response=r
                )
            catalog = parse_catalog(r.json())
        except (httpx.HTTPError, ValueError) as e:
            self.stats["load_errors"] += 1
            self.catalog_error = ERROR_CATALOG_FAILED
            logger.warning("Catalog load failed: %s", e)
            return False

        # single state-update point for a completed load
        self._catalog = catalog
        self._selections = {item.id: 1 for item in catalog}
        self.catalog_error = None
        logger.info("Catalog loaded: %d items", len(catalog))
        return True

    # --------- Quantity selector ---------
    def set_quantity(self, item_id: int, quantity: int) -> None:
        # the [1, stock] range is what the view offers, not checked here
        self.get_item(item_id)
        self._selections[item_id] = quantity

    # --------- Purchase submitter ---------
    async def buy(self, item_id: int) -> bool:
        """Submit a purchase of the selected quantity of one item.

        On success the catalog is reloaded once; on failure only this item's
        purchase error is set. Raises UnknownItemError / OutOfStockError before
        any request is sent when the item cannot be bought; a selection that is
        not a whole quantity raises pydantic.ValidationError, also before any
        state changes.
        """
        if self.get_item(item_id).stock <= 0:
            raise OutOfStockError(item_id)

        req = PurchaseReq(itemId=item_id, quantity=self._selections[item_id])
        self._purchase_errors.pop(item_id, None)
        self._pending[item_id] += 1
        self.stats["purchases"] += 1
        try:
            r = await self._http_client.post(self.purchase_path, json=req.model_dump())
            ok = r.is_success
            cause = f"status {r.status_code}"
        except httpx.HTTPError as e:
            ok = False
            cause = repr(e)
        finally:
            self._pending[item_id] -= 1
            if not self._pending[item_id]:
                del self._pending[item_id]

        if not ok:
            self.stats["purchase_errors"] += 1
            self._purchase_errors[item_id] = ERROR_PURCHASE_FAILED
            logger.warning("Purchase of item %s x%d failed: %s", item_id, req.quantity, cause)
            return False

        logger.info("Purchased item %s x%d", item_id, req.quantity)
        await self.load_catalog()
        return True
