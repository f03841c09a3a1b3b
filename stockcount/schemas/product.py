from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EntityModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CategoryDraft(EntityModel):
    name: str


class Category(CategoryDraft):
    id: str


class LocationDraft(EntityModel):
    name: str


class Location(LocationDraft):
    id: str


class ProductDraft(EntityModel):
    name: str
    category: str


class Product(ProductDraft):
    id: str


class NameCreate(BaseModel):
    name: str = ""


class ProductCreate(BaseModel):
    name: str = ""
    category: str = ""


class ProductCategoryList(BaseModel):
    categories: List[str] = Field(default_factory=list)
