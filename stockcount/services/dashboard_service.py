from typing import Iterable, List

from stockcount.schemas.inventory import (
    InventoryRecord,
    InventorySummary,
    LocationCount,
    ProductTotal,
)


def sorted_records(records: Iterable[InventoryRecord]) -> List[InventoryRecord]:
    """Records ordered by category, then product name."""
    return sorted(
        records,
        key=lambda record: (record.category.casefold(), record.product_name.casefold()),
    )


def inventory_summary(records: Iterable[InventoryRecord]) -> InventorySummary:
    records = list(records)
    totals = {}
    per_location = {}
    for record in records:
        key = (record.category, record.product_name)
        totals[key] = totals.get(key, 0) + record.quantity
        locations = per_location.setdefault(key, {})
        locations[record.location] = locations.get(record.location, 0) + record.quantity

    products = []
    for key in sorted(totals, key=lambda item: (item[0].casefold(), item[1].casefold())):
        category, product_name = key
        products.append(
            ProductTotal(
                category=category,
                product_name=product_name,
                total_quantity=totals[key],
                locations=[
                    LocationCount(location=location, quantity=quantity)
                    for location, quantity in sorted(
                        per_location[key].items(),
                        key=lambda item: item[0].casefold(),
                    )
                ],
            )
        )

    return InventorySummary(
        record_count=len(records),
        total_quantity=sum(totals.values()),
        products=products,
        last_recorded_at=max((record.recorded_at for record in records), default=None),
    )


__all__ = ["inventory_summary", "sorted_records"]
