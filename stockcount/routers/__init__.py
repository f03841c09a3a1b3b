from stockcount.routers.backup import router as backup_router
from stockcount.routers.categories import router as categories_router
from stockcount.routers.health import router as health_router
from stockcount.routers.home import router as home_router
from stockcount.routers.inventory import router as inventory_router
from stockcount.routers.locations import router as locations_router
from stockcount.routers.products import router as products_router

__all__ = [
    "backup_router",
    "categories_router",
    "health_router",
    "home_router",
    "inventory_router",
    "locations_router",
    "products_router",
]
