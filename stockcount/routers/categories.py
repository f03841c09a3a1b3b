from fastapi import APIRouter, Depends

from stockcount.core.errors import StockCountError
from stockcount.dependencies import get_controller, http_error, require_created
from stockcount.schemas.product import Category, NameCreate

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[Category])
def list_categories(controller=Depends(get_controller)):
    return controller.state.categories.items


@router.post("", response_model=Category, status_code=201)
async def create_category(payload: NameCreate, controller=Depends(get_controller)):
    try:
        entity = await controller.add_category(payload.name)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return require_created(entity)


@router.delete("/{category_id}")
async def delete_category(category_id: str, controller=Depends(get_controller)):
    try:
        await controller.delete_category(category_id)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return {"status": "deleted", "id": category_id}


__all__ = ["router"]
