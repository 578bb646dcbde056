"""Single-field stock checker: look up one product's available stock."""

from typing import Optional

import httpx

from storefront import config
from storefront.errors import ERROR_STOCK_INFO
from storefront.logging import get_logger
from storefront.models import StockInfo

logger = get_logger(__name__)


class StockChecker:
    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        path: str = config.CHECK_STOCK_PATH,
    ):
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            base_url=config.BASE_URL, timeout=config.TIMEOUT
        )
        self.path = path
        self.product_id = ""
        self.stock_info = ""

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    def set_product_id(self, product_id: str) -> None:
        self.product_id = product_id

    async def check_stock(self) -> str:
        try:
            r = await self._http_client.get(self.path, params={"productId": self.product_id})
            if not r.is_success:
                raise httpx.HTTPStatusError(
                    "Stock information not found", request=r.request, response=r
                )
            info = StockInfo.model_validate(r.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Stock check for %r failed: %s", self.product_id, e)
            self.stock_info = ERROR_STOCK_INFO
            return self.stock_info

        self.stock_info = f"Product ID: {info.productId}, Stock Available: {info.stockAvailable}"
        return self.stock_info
