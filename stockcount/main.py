import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from stockcount.config import Settings, get_settings
from stockcount.core.constants import TEMPLATES_DIR
from stockcount.core.logging import setup_logging
from stockcount.routers import (
    backup_router,
    categories_router,
    health_router,
    home_router,
    inventory_router,
    locations_router,
    products_router,
)
from stockcount.services.app_state import ViewStateController
from stockcount.services.remote_store import RemoteStoreGateway

logger = logging.getLogger(__name__)


def create_app(gateway=None, settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    gateway = gateway or RemoteStoreGateway.from_settings(settings)
    controller = ViewStateController(gateway, settings=settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if gateway.is_configured:
            await controller.reload_all()
        else:
            controller.state.loading = False
            logger.error(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set; "
                "all changes are refused until they are."
            )
        try:
            yield
        finally:
            await gateway.aclose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.controller = controller
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app.include_router(health_router)
    app.include_router(home_router)
    app.include_router(categories_router)
    app.include_router(locations_router)
    app.include_router(products_router)
    app.include_router(inventory_router)
    app.include_router(backup_router)

    @app.get("/")
    def root():
        return RedirectResponse(url="/home", status_code=302)

    return app


setup_logging()
app = create_app()


__all__ = ["app", "create_app"]
