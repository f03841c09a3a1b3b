from typing import Iterable, List, Optional

from stockcount.schemas.product import Product


def product_categories(products: Iterable[Product]) -> List[str]:
    """Categories that have at least one product, sorted."""
    return sorted({product.category for product in products}, key=str.casefold)


def search_products(
    products: Iterable[Product],
    category: Optional[str] = None,
    term: Optional[str] = None,
) -> List[Product]:
    items = list(products)
    if category is not None:
        items = [product for product in items if product.category == category]
    query_text = str(term).strip().casefold() if term else ""
    if query_text:
        items = [product for product in items if query_text in product.name.casefold()]
    return sorted(items, key=lambda product: product.name.casefold())


def newest_first(items: Iterable) -> list:
    return list(reversed(list(items)))


def missing_prerequisites(view: str, state) -> Optional[str]:
    """Screen the user must visit first, or None when ``view`` is usable."""
    if view == "products" and not len(state.categories):
        return "settings"
    if view == "entry":
        if not len(state.products):
            return "products"
        if not len(state.locations):
            return "settings"
    return None


__all__ = [
    "missing_prerequisites",
    "newest_first",
    "product_categories",
    "search_products",
]
