from typing import List, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str
    # stock at the time of the last catalog load; older fixtures call it stockCount
    stock: int = Field(ge=0, validation_alias=AliasChoices("stock", "stockCount"))


class PurchaseReq(BaseModel):
    itemId: int
    quantity: int


class StockInfo(BaseModel):
    productId: Union[str, int]
    stockAvailable: int


_catalog_adapter = TypeAdapter(List[Item])


def parse_catalog(payload) -> tuple:
    """Validate a decoded `GET items` body into an ordered tuple of Items."""
    return tuple(_catalog_adapter.validate_python(payload))
