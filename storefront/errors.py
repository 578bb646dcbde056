"""
Storefront errors and user-facing messages.

I/O failures never surface as exceptions; they become one of the messages
below. The exceptions are for callers breaking an operation's precondition.
"""

ERROR_PURCHASE_FAILED = "Unable to complete purchase"
ERROR_CATALOG_FAILED = "Unable to load items"
ERROR_STOCK_INFO = "Error: Unable to fetch stock information"


class StorefrontError(Exception):
    """Base class for storefront precondition errors."""


class UnknownItemError(StorefrontError, KeyError):
    def __init__(self, item_id):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"item {self.item_id!r} is not in the catalog"


class OutOfStockError(StorefrontError):
    def __init__(self, item_id):
        super().__init__(f"item {item_id!r} is out of stock")
        self.item_id = item_id
