from datetime import datetime, timezone

from fastapi import APIRouter, Request

from stockcount.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request):
    settings = get_settings()
    controller = request.app.state.controller
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "remote_configured": controller.gateway.is_configured,
        "loading": controller.state.loading,
        "time": datetime.now(timezone.utc).isoformat(),
    }
