"""Storefront consumer: catalog & purchase state coordinator."""

from storefront.coordinator import StorefrontCoordinator
from storefront.models import Item

__all__ = ["StorefrontCoordinator", "Item"]
