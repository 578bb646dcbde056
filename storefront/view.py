"""Snapshot of the state the storefront widgets are drawn from."""

from dataclasses import dataclass, field
from typing import List, Optional

TITLE = "Available Items"


@dataclass(frozen=True)
class ItemView:
    id: int
    name: str
    description: str
    stock_label: str
    quantity_options: List[int]
    selected_quantity: int
    buy_disabled: bool
    pending: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class StorefrontView:
    title: str = TITLE
    error: Optional[str] = None
    items: List[ItemView] = field(default_factory=list)

    def item(self, item_id: int) -> ItemView:
        for row in self.items:
            if row.id == item_id:
                return row
        raise KeyError(item_id)


def render(coordinator) -> StorefrontView:
    selections = coordinator.selections
    errors = coordinator.purchase_errors
    pending = coordinator.pending
    rows = []
    for item in coordinator.catalog:
        in_flight = item.id in pending
        rows.append(
            ItemView(
                id=item.id,
                name=item.name,
                description=item.description,
                stock_label=f"Available Stock: {item.stock}",
                # zero stock renders no selectable range
                quantity_options=list(range(1, item.stock + 1)),
                selected_quantity=selections.get(item.id, 1),
                buy_disabled=item.stock <= 0 or in_flight,
                pending=in_flight,
                error=errors.get(item.id),
            )
        )
    return StorefrontView(error=coordinator.catalog_error, items=rows)
