from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse

from stockcount.dependencies import get_controller
from stockcount.services.export_service import backup_filename, build_backup

router = APIRouter(prefix="/backup", tags=["Backup"])


@router.get("")
def export_backup(controller=Depends(get_controller)):
    return JSONResponse(
        content=build_backup(controller.state),
        headers={"Content-Disposition": "attachment; filename={}".format(backup_filename())},
    )


@router.post("/import")
def import_backup(_payload: dict = Body(...)):
    # Overwriting shared cloud data from a file would clobber other users' counts.
    raise HTTPException(
        status_code=409,
        detail="Backup import is disabled in cloud mode to avoid data conflicts.",
    )


__all__ = ["router"]
