from fastapi import APIRouter, Depends

from stockcount.core.errors import StockCountError
from stockcount.dependencies import get_controller, http_error, require_created
from stockcount.schemas.product import Location, NameCreate

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("", response_model=list[Location])
def list_locations(controller=Depends(get_controller)):
    return controller.state.locations.items


@router.post("", response_model=Location, status_code=201)
async def create_location(payload: NameCreate, controller=Depends(get_controller)):
    try:
        entity = await controller.add_location(payload.name)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return require_created(entity)


@router.delete("/{location_id}")
async def delete_location(location_id: str, controller=Depends(get_controller)):
    try:
        await controller.delete_location(location_id)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return {"status": "deleted", "id": location_id}


__all__ = ["router"]
