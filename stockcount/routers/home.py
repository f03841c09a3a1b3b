from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from stockcount.core.errors import StockCountError
from stockcount.dependencies import get_controller, http_error
from stockcount.services.product_service import missing_prerequisites

router = APIRouter(tags=["Home"])


def _state_payload(controller):
    state = controller.state
    return {
        "view": state.current_view,
        "loading": state.loading,
        "remoteConfigured": controller.gateway.is_configured,
        "lastLoadedAt": state.last_loaded_at.isoformat() if state.last_loaded_at else None,
        "categories": [item.model_dump(by_alias=True) for item in state.categories],
        "locations": [item.model_dump(by_alias=True) for item in state.locations],
        "products": [item.model_dump(by_alias=True) for item in state.products],
        "inventory": [item.model_dump(by_alias=True, mode="json") for item in state.inventory],
    }


@router.get("/home", response_class=HTMLResponse)
async def home_page(request: Request, controller=Depends(get_controller)):
    # Returning home refreshes data edited by other sessions.
    reloaded = await controller.navigate("home")
    templates = request.app.state.templates
    state = controller.state
    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "counts": {
                "categories": len(state.categories),
                "locations": len(state.locations),
                "products": len(state.products),
                "inventory": len(state.inventory),
            },
            "loading": state.loading,
            "reloaded": reloaded,
            "remote_configured": controller.gateway.is_configured,
        },
    )


@router.get("/state")
def current_state(controller=Depends(get_controller)):
    return _state_payload(controller)


@router.post("/views/{view}")
async def change_view(view: str, controller=Depends(get_controller)):
    try:
        await controller.navigate(view)
    except StockCountError as exc:
        raise http_error(exc) from exc
    return {
        "view": controller.state.current_view,
        "redirect": missing_prerequisites(view, controller.state),
    }


__all__ = ["router"]
