"""Thin async client for the remote store (Supabase's PostgREST endpoint).

Every call resolves to data or raises one of the errors in
``stockcount.core.errors``:

* ``RemoteUnavailable`` for transport failures, timeouts and HTTP 5xx;
* ``RemoteRejected`` for HTTP 4xx and responses that cannot be mapped.

Field names are translated at this boundary: inventory rows carry
``product_name`` and an epoch-millisecond ``timestamp`` which become
``InventoryRecord.product_name`` / ``recorded_at``.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from stockcount.config import Settings, get_settings
from stockcount.core.constants import DELETE_ALL_SENTINEL_ID, EntityKind
from stockcount.core.dates import from_epoch_ms, to_epoch_ms
from stockcount.core.errors import (
    GatewayNotConfigured,
    RemoteRejected,
    RemoteUnavailable,
)
from stockcount.schemas.inventory import Draft, Entity, InventoryRecord, InventoryRecordDraft
from stockcount.schemas.product import Category, Location, Product

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}
_REST_PATH = "/rest/v1"

_TABLES = {
    EntityKind.CATEGORY: "categories",
    EntityKind.LOCATION: "locations",
    EntityKind.PRODUCT: "products",
    EntityKind.INVENTORY: "inventory",
}

_ORDERING = {
    EntityKind.INVENTORY: "timestamp.desc",
}


def validate_base_url(base_url):
    parsed = urlparse(base_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise GatewayNotConfigured("SUPABASE_URL must be an absolute HTTP(S) URL")
    return base_url.rstrip("/")


def draft_to_row(kind: EntityKind, draft: Draft) -> Dict[str, Any]:
    if kind is EntityKind.INVENTORY:
        return {
            "product_name": draft.product_name,
            "category": draft.category,
            "location": draft.location,
            "quantity": draft.quantity,
            "timestamp": to_epoch_ms(draft.recorded_at),
        }
    return draft.model_dump()


def row_to_entity(kind: EntityKind, row: Dict[str, Any]) -> Entity:
    if not isinstance(row, dict) or row.get("id") is None:
        raise RemoteRejected("row without an id", kind=kind, operation="decode")
    entity_id = str(row["id"])
    try:
        if kind is EntityKind.INVENTORY:
            return InventoryRecord(
                id=entity_id,
                product_name=row.get("product_name") or "",
                category=row.get("category") or "",
                location=row.get("location") or "",
                quantity=int(row.get("quantity") or 0),
                recorded_at=from_epoch_ms(row.get("timestamp") or 0),
            )
        if kind is EntityKind.PRODUCT:
            return Product(
                id=entity_id,
                name=row.get("name") or "",
                category=row.get("category") or "",
            )
        if kind is EntityKind.LOCATION:
            return Location(id=entity_id, name=row.get("name") or "")
        return Category(id=entity_id, name=row.get("name") or "")
    except (TypeError, ValueError, OverflowError, OSError, ValidationError) as exc:
        raise RemoteRejected(
            "malformed row {}: {}".format(entity_id, exc),
            kind=kind,
            operation="decode",
        ) from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        return str(body.get("message") or body.get("details") or body)
    return str(body)


class RemoteStoreGateway:
    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").strip()
        self.api_key = (api_key or "").strip()
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs):
        settings = settings or get_settings()
        return cls(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            timeout=settings.REMOTE_TIMEOUT_SECONDS,
            **kwargs,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def require_configured(self):
        if not self.base_url:
            raise GatewayNotConfigured("SUPABASE_URL is not configured")
        if not self.api_key:
            raise GatewayNotConfigured("SUPABASE_ANON_KEY is not configured")

    def _get_client(self) -> httpx.AsyncClient:
        self.require_configured()
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=validate_base_url(self.base_url) + _REST_PATH,
                headers={
                    "apikey": self.api_key,
                    "Authorization": "Bearer {}".format(self.api_key),
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def _request(self, kind: EntityKind, operation: str, method: str, **kwargs):
        client = self._get_client()
        path = "/" + _TABLES[kind]
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise RemoteUnavailable("request timed out", kind=kind, operation=operation) from exc
        except httpx.TransportError as exc:
            raise RemoteUnavailable(str(exc) or type(exc).__name__, kind=kind, operation=operation) from exc

        if response.status_code >= 500:
            raise RemoteUnavailable(
                "HTTP {} {}".format(response.status_code, _error_detail(response)).strip(),
                kind=kind,
                operation=operation,
            )
        if response.status_code >= 400:
            raise RemoteRejected(
                "HTTP {} {}".format(response.status_code, _error_detail(response)).strip(),
                kind=kind,
                operation=operation,
            )
        return response

    def _decode_rows(self, kind: EntityKind, operation: str, response: httpx.Response):
        try:
            rows = response.json()
        except ValueError as exc:
            raise RemoteRejected("response is not JSON", kind=kind, operation=operation) from exc
        if not isinstance(rows, list):
            raise RemoteRejected("expected a list of rows", kind=kind, operation=operation)
        return rows

    async def list(self, kind: EntityKind) -> List[Entity]:
        params = {"select": "*"}
        if kind in _ORDERING:
            params["order"] = _ORDERING[kind]
        response = await self._request(kind, "list", "GET", params=params)
        rows = self._decode_rows(kind, "list", response)
        entities = [row_to_entity(kind, row) for row in rows]
        logger.debug("Fetched %d rows from %s", len(entities), kind.value)
        return entities

    async def insert(self, kind: EntityKind, draft: Draft) -> Entity:
        if kind is EntityKind.INVENTORY and not isinstance(draft, InventoryRecordDraft):
            raise TypeError("inventory inserts require an InventoryRecordDraft")
        response = await self._request(
            kind,
            "insert",
            "POST",
            json=[draft_to_row(kind, draft)],
            headers={"Prefer": "return=representation"},
        )
        rows = self._decode_rows(kind, "insert", response)
        if not rows:
            raise RemoteRejected("insert returned no rows", kind=kind, operation="insert")
        return row_to_entity(kind, rows[0])

    async def delete(self, kind: EntityKind, entity_id: str) -> None:
        await self._request(
            kind,
            "delete",
            "DELETE",
            params={"id": "eq.{}".format(entity_id)},
        )

    async def delete_all(self, kind: EntityKind) -> None:
        await self._request(
            kind,
            "delete_all",
            "DELETE",
            params={"id": "neq.{}".format(DELETE_ALL_SENTINEL_ID)},
        )


__all__ = [
    "RemoteStoreGateway",
    "draft_to_row",
    "row_to_entity",
    "validate_base_url",
]
