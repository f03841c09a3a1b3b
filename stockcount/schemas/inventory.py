from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from stockcount.schemas.product import (
    Category,
    CategoryDraft,
    EntityModel,
    Location,
    LocationDraft,
    Product,
    ProductDraft,
)


class InventoryRecordDraft(EntityModel):
    product_name: str
    category: str
    location: str
    quantity: int = Field(ge=0)
    recorded_at: datetime


class InventoryRecord(InventoryRecordDraft):
    id: str


class InventoryEntryRequest(BaseModel):
    product_id: str = Field(
        "",
        validation_alias=AliasChoices("productId", "product_id"),
    )
    location: str = ""
    # Kept as text so that "12abc" is reported as an invalid quantity.
    quantity: Union[int, str] = ""

    model_config = ConfigDict(populate_by_name=True)


class LocationCount(BaseModel):
    location: str
    quantity: int


class ProductTotal(BaseModel):
    category: str
    product_name: str = Field(serialization_alias="productName")
    total_quantity: int = Field(serialization_alias="totalQuantity")
    locations: List[LocationCount] = Field(default_factory=list)


class InventorySummary(BaseModel):
    record_count: int = Field(serialization_alias="recordCount")
    total_quantity: int = Field(serialization_alias="totalQuantity")
    products: List[ProductTotal] = Field(default_factory=list)
    last_recorded_at: Optional[datetime] = Field(None, serialization_alias="lastRecordedAt")


Draft = Union[CategoryDraft, LocationDraft, ProductDraft, InventoryRecordDraft]
Entity = Union[Category, Location, Product, InventoryRecord]

_ENTITY_FOR_DRAFT: Dict[type, type] = {
    CategoryDraft: Category,
    LocationDraft: Location,
    ProductDraft: Product,
    InventoryRecordDraft: InventoryRecord,
}


def entity_from_draft(draft: Draft, entity_id: str) -> Entity:
    entity_type = _ENTITY_FOR_DRAFT.get(type(draft))
    if entity_type is None:
        raise TypeError("Unsupported draft type: {}".format(type(draft).__name__))
    return entity_type(id=entity_id, **draft.model_dump())
