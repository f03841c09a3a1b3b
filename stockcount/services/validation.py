from typing import Iterable, Optional

from stockcount.core.dates import utc_now
from stockcount.core.errors import InvalidEntry
from stockcount.schemas.inventory import InventoryRecordDraft
from stockcount.schemas.product import (
    Category,
    CategoryDraft,
    Location,
    LocationDraft,
    Product,
    ProductDraft,
)


def _clean_name(value) -> str:
    return str(value or "").strip()


def _name_taken(name: str, existing: Iterable) -> bool:
    key = name.casefold()
    return any(item.name.casefold() == key for item in existing)


def validate_category(name, categories: Iterable[Category]) -> CategoryDraft:
    clean = _clean_name(name)
    if not clean:
        raise InvalidEntry("Enter a category name.")
    if _name_taken(clean, categories):
        raise InvalidEntry("This category already exists.")
    return CategoryDraft(name=clean)


def validate_location(name, locations: Iterable[Location]) -> LocationDraft:
    clean = _clean_name(name)
    if not clean:
        raise InvalidEntry("Enter a location name.")
    if _name_taken(clean, locations):
        raise InvalidEntry("This location already exists.")
    return LocationDraft(name=clean)


def validate_product(
    name,
    category,
    products: Iterable[Product],
    categories: Iterable[Category],
) -> ProductDraft:
    clean = _clean_name(name)
    category = _clean_name(category)
    if not clean or not category:
        raise InvalidEntry("Select a category and enter a name.")
    if category not in {item.name for item in categories}:
        raise InvalidEntry("Unknown category: {}".format(category))
    same_category = [item for item in products if item.category == category]
    if _name_taken(clean, same_category):
        raise InvalidEntry("This product already exists in this category.")
    return ProductDraft(name=clean, category=category)


def parse_quantity(value) -> int:
    if isinstance(value, bool):
        raise InvalidEntry("Quantity must be a valid number.")
    if isinstance(value, int):
        quantity = value
    else:
        text = str(value).strip()
        try:
            quantity = int(text, 10)
        except ValueError as exc:
            raise InvalidEntry("Quantity must be a valid number.") from exc
    if quantity < 0:
        raise InvalidEntry("Quantity must be a valid number.")
    return quantity


def validate_inventory_entry(
    product_id,
    location,
    quantity,
    products: Iterable[Product],
    locations: Iterable[Location],
    *,
    recorded_at=None,
) -> InventoryRecordDraft:
    product_id = _clean_name(product_id)
    location = _clean_name(location)
    if not product_id or not location or not str(quantity if quantity is not None else "").strip():
        raise InvalidEntry("Please fill in every field.")

    parsed_quantity = parse_quantity(quantity)

    product: Optional[Product] = next(
        (item for item in products if item.id == product_id),
        None,
    )
    if product is None:
        raise InvalidEntry("Select a product from the list.")
    if location not in {item.name for item in locations}:
        raise InvalidEntry("Unknown location: {}".format(location))

    return InventoryRecordDraft(
        product_name=product.name,
        category=product.category,
        location=location,
        quantity=parsed_quantity,
        recorded_at=recorded_at or utc_now(),
    )


__all__ = [
    "parse_quantity",
    "validate_category",
    "validate_inventory_entry",
    "validate_location",
    "validate_product",
]
