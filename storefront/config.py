"""Environment configuration for the storefront clients.

Environment variables (all optional):
- STOREFRONT_BASE_URL: origin of the order service (default: http://localhost:8000)
- STOREFRONT_API_PATH: path prefix of the items/purchase endpoints (default: /order-service/v1)
- STOREFRONT_TIMEOUT: request timeout in seconds (default: 5.0)
"""

import os

BASE_URL = os.getenv("STOREFRONT_BASE_URL", "http://localhost:8000")
API_PATH = os.getenv("STOREFRONT_API_PATH", "/order-service/v1").rstrip("/")
TIMEOUT = float(os.getenv("STOREFRONT_TIMEOUT", "5.0"))

ITEMS_PATH = f"{API_PATH}/items"
PURCHASE_PATH = f"{API_PATH}/purchase"
CHECK_STOCK_PATH = "/orders/check-stock"
