from fastapi import HTTPException, Request, status

from stockcount.core.errors import (
    GatewayNotConfigured,
    InvalidEntry,
    RemoteRejected,
    RemoteUnavailable,
    StockCountError,
)
from stockcount.services.app_state import ViewStateController

_STATUS_BY_ERROR = (
    (InvalidEntry, status.HTTP_400_BAD_REQUEST),
    (GatewayNotConfigured, status.HTTP_503_SERVICE_UNAVAILABLE),
    (RemoteUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (RemoteRejected, status.HTTP_409_CONFLICT),
)


def get_controller(request: Request) -> ViewStateController:
    return request.app.state.controller


def require_created(entity):
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="The item was deleted before it was saved.",
        )
    return entity


def http_error(exc: StockCountError) -> HTTPException:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, mapped_status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = mapped_status
            break
    return HTTPException(status_code=status_code, detail=exc.user_message)


__all__ = ["get_controller", "http_error", "require_created"]
