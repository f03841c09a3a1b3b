from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from stockcount.core.errors import StockCountError
from stockcount.dependencies import get_controller, http_error, require_created
from stockcount.schemas.inventory import InventoryEntryRequest, InventoryRecord, InventorySummary
from stockcount.services.dashboard_service import inventory_summary, sorted_records
from stockcount.services.export_service import csv_filename, inventory_csv

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("", response_model=list[InventoryRecord])
def list_records(
    order: str = Query("recent", pattern="^(recent|category)$"),
    controller=Depends(get_controller),
):
    records = controller.state.inventory.items
    if order == "category":
        return sorted_records(records)
    return records


@router.get("/summary", response_model=InventorySummary)
def summary(controller=Depends(get_controller)):
    return inventory_summary(controller.state.inventory)


@router.get("/export.csv")
def export_csv(controller=Depends(get_controller)):
    content = inventory_csv(controller.state.inventory)
    return Response(
        content=content.encode("utf-8-sig"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename={}".format(csv_filename())},
    )


@router.post("", response_model=InventoryRecord, status_code=201)
async def create_record(payload: InventoryEntryRequest, controller=Depends(get_controller)):
    try:
        entity = await controller.add_inventory_record(
            payload.product_id,
            payload.location,
            payload.quantity,
        )
    except StockCountError as exc:
        raise http_error(exc) from exc
    return require_created(entity)


@router.delete("/{record_id}")
async def delete_record(record_id: str, controller=Depends(get_controller)):
    try:
        await controller.delete_inventory_record(record_id)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return {"status": "deleted", "id": record_id}


@router.delete("")
async def clear_records(
    confirm: bool = Query(False, description="Must be true; removes every count for all users"),
    controller=Depends(get_controller),
):
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Confirm deleting the whole count history with confirm=true.",
        )
    try:
        removed = await controller.clear_all_inventory()
    except StockCountError as exc:
        raise http_error(exc) from exc
    return {"status": "cleared", "removed": removed}


__all__ = ["router"]
