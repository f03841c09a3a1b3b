from stockcount.services.app_state import AppState, ViewStateController
from stockcount.services.dashboard_service import inventory_summary, sorted_records
from stockcount.services.reconciler import EntityCollection, EntityReconciler
from stockcount.services.remote_store import RemoteStoreGateway

__all__ = [
    "AppState",
    "EntityCollection",
    "EntityReconciler",
    "RemoteStoreGateway",
    "ViewStateController",
    "inventory_summary",
    "sorted_records",
]
