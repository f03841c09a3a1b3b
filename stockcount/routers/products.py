from typing import Optional

from fastapi import APIRouter, Depends, Query

from stockcount.core.errors import StockCountError
from stockcount.dependencies import get_controller, http_error, require_created
from stockcount.schemas.product import Product, ProductCategoryList, ProductCreate
from stockcount.services.product_service import (
    newest_first,
    product_categories,
    search_products,
)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[Product])
def list_products(controller=Depends(get_controller)):
    return newest_first(controller.state.products)


@router.get("/categories", response_model=ProductCategoryList)
def list_product_categories(controller=Depends(get_controller)):
    return ProductCategoryList(categories=product_categories(controller.state.products))


@router.get("/search", response_model=list[Product])
def search(
    category: Optional[str] = Query(None, description="Exact category name"),
    q: Optional[str] = Query(None, description="Case-insensitive name fragment"),
    controller=Depends(get_controller),
):
    return search_products(controller.state.products, category=category, term=q)


@router.post("", response_model=Product, status_code=201)
async def create_product(payload: ProductCreate, controller=Depends(get_controller)):
    try:
        entity = await controller.add_product(payload.name, payload.category)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return require_created(entity)


@router.delete("/{product_id}")
async def delete_product(product_id: str, controller=Depends(get_controller)):
    try:
        await controller.delete_product(product_id)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return {"status": "deleted", "id": product_id}


__all__ = ["router"]
