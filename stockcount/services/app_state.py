import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from stockcount.config import Settings, get_settings
from stockcount.core.constants import DEFAULT_VIEW, VIEW_STATES, EntityKind
from stockcount.core.dates import utc_now
from stockcount.core.errors import GatewayNotConfigured, InvalidEntry, RemoteStoreError
from stockcount.services.reconciler import EntityCollection, EntityReconciler
from stockcount.services.validation import (
    validate_category,
    validate_inventory_entry,
    validate_location,
    validate_product,
)

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    categories: EntityCollection = field(default_factory=EntityCollection)
    locations: EntityCollection = field(default_factory=EntityCollection)
    products: EntityCollection = field(default_factory=EntityCollection)
    inventory: EntityCollection = field(default_factory=EntityCollection)
    current_view: str = DEFAULT_VIEW
    loading: bool = True
    last_loaded_at: Optional[datetime] = None

    def collection(self, kind: EntityKind) -> EntityCollection:
        return {
            EntityKind.CATEGORY: self.categories,
            EntityKind.LOCATION: self.locations,
            EntityKind.PRODUCT: self.products,
            EntityKind.INVENTORY: self.inventory,
        }[kind]


class ViewStateController:
    """Owns the application state and the four reconcilers.

    Add operations validate their input here, before a reconciler is touched.
    """

    def __init__(self, gateway, state: Optional[AppState] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.gateway = gateway
        self.state = state or AppState()
        timeout = settings.OPTIMISTIC_TIMEOUT_SECONDS
        self.reconcilers = {
            kind: EntityReconciler(
                kind,
                gateway,
                self.state.collection(kind),
                prepend=kind is EntityKind.INVENTORY,
                timeout=timeout,
            )
            for kind in EntityKind
        }

    def _require_gateway(self):
        if not self.gateway.is_configured:
            raise GatewayNotConfigured("remote store is not configured")

    # ------------------------------
    # Loading and navigation
    # ------------------------------

    async def reload_all(self) -> bool:
        if not self.gateway.is_configured:
            logger.error("Reload skipped: remote store is not configured.")
            self.state.loading = False
            return False

        kinds = list(EntityKind)
        try:
            results = await asyncio.gather(
                *(self.gateway.list(kind) for kind in kinds),
                return_exceptions=True,
            )
            failures = [result for result in results if isinstance(result, BaseException)]
            if failures:
                raise failures[0]
        except RemoteStoreError as exc:
            logger.error("Reload failed, keeping current data: %s", exc)
            return False
        finally:
            self.state.loading = False

        fetched = dict(zip(kinds, results))
        fetched[EntityKind.INVENTORY] = sorted(
            fetched[EntityKind.INVENTORY],
            key=lambda record: record.recorded_at,
            reverse=True,
        )
        for kind in kinds:
            self.state.collection(kind).replace_all(fetched[kind])
        self.state.last_loaded_at = utc_now()
        logger.info(
            "Loaded %d categories, %d locations, %d products, %d inventory records",
            len(self.state.categories),
            len(self.state.locations),
            len(self.state.products),
            len(self.state.inventory),
        )
        return True

    async def navigate(self, view: str) -> bool:
        if view not in VIEW_STATES:
            raise InvalidEntry("Unknown view: {}".format(view))
        self.state.current_view = view
        if view == DEFAULT_VIEW:
            # Pick up changes made by other users.
            return await self.reload_all()
        return True

    # ------------------------------
    # Catalog
    # ------------------------------

    async def add_category(self, name):
        self._require_gateway()
        draft = validate_category(name, self.state.categories)
        return await self.reconcilers[EntityKind.CATEGORY].add(draft)

    async def delete_category(self, category_id):
        self._require_gateway()
        await self.reconcilers[EntityKind.CATEGORY].delete(category_id)

    async def add_location(self, name):
        self._require_gateway()
        draft = validate_location(name, self.state.locations)
        return await self.reconcilers[EntityKind.LOCATION].add(draft)

    async def delete_location(self, location_id):
        self._require_gateway()
        await self.reconcilers[EntityKind.LOCATION].delete(location_id)

    async def add_product(self, name, category):
        self._require_gateway()
        draft = validate_product(name, category, self.state.products, self.state.categories)
        return await self.reconcilers[EntityKind.PRODUCT].add(draft)

    async def delete_product(self, product_id):
        self._require_gateway()
        await self.reconcilers[EntityKind.PRODUCT].delete(product_id)

    # ------------------------------
    # Inventory
    # ------------------------------

    async def add_inventory_record(self, product_id, location, quantity):
        self._require_gateway()
        draft = validate_inventory_entry(
            product_id,
            location,
            quantity,
            self.state.products,
            self.state.locations,
        )
        return await self.reconcilers[EntityKind.INVENTORY].add(draft)

    async def delete_inventory_record(self, record_id):
        self._require_gateway()
        await self.reconcilers[EntityKind.INVENTORY].delete(record_id)

    async def clear_all_inventory(self) -> int:
        """Empty the inventory locally and remotely; returns the local count removed."""
        self._require_gateway()
        try:
            removed = await self.reconcilers[EntityKind.INVENTORY].clear()
        except RemoteStoreError as exc:
            logger.error("Clearing inventory failed, reloading: %s", exc)
            await self.reload_all()
            raise
        logger.info("Cleared %d inventory records", len(removed))
        return len(removed)


__all__ = ["AppState", "ViewStateController"]
