"""Optimistic add/delete lifecycle for one entity collection.

The collection is changed before the remote call starts. When the call
settles the temporary identifier is swapped for the stored one, or the change
is undone and the error is raised to the caller. All mutations run on the
event loop between awaits, so each one is atomic without locking.
"""

import asyncio
import logging
import uuid
from typing import Iterator, List, Optional, Tuple

from stockcount.core.constants import EntityKind
from stockcount.core.errors import RemoteStoreError, RemoteUnavailable
from stockcount.schemas.inventory import Draft, Entity, entity_from_draft

logger = logging.getLogger(__name__)


def new_temporary_id() -> str:
    return str(uuid.uuid4())


class EntityCollection:
    """Ordered in-memory entities of one kind."""

    def __init__(self, items=None):
        self._items: List[Entity] = list(items or [])

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def __contains__(self, entity_id):
        return self.index_of(entity_id) is not None

    @property
    def items(self) -> List[Entity]:
        return list(self._items)

    def ids(self) -> List[str]:
        return [item.id for item in self._items]

    def get(self, entity_id) -> Optional[Entity]:
        index = self.index_of(entity_id)
        return None if index is None else self._items[index]

    def index_of(self, entity_id) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    def insert(self, entity: Entity, *, at_head: bool = False):
        if at_head:
            self._items.insert(0, entity)
        else:
            self._items.append(entity)

    def remove(self, entity_id) -> Optional[Tuple[int, Entity]]:
        index = self.index_of(entity_id)
        if index is None:
            return None
        return index, self._items.pop(index)

    def restore(self, index: int, entity: Entity):
        if entity.id in self:
            return
        self._items.insert(min(index, len(self._items)), entity)

    def replace_id(self, old_id, new_id) -> Optional[Entity]:
        index = self.index_of(old_id)
        if index is None:
            return None
        updated = self._items[index].model_copy(update={"id": new_id})
        self._items[index] = updated
        return updated

    def replace_all(self, items):
        self._items = list(items)

    def clear(self) -> List[Entity]:
        removed, self._items = self._items, []
        return removed


class EntityReconciler:
    def __init__(
        self,
        kind: EntityKind,
        gateway,
        collection: EntityCollection,
        *,
        prepend: bool = False,
        timeout: Optional[float] = None,
    ):
        self.kind = kind
        self.gateway = gateway
        self.collection = collection
        self.prepend = prepend
        self.timeout = timeout
        self._pending = set()
        self._cancelled = set()

    @property
    def pending_ids(self):
        return frozenset(self._pending)

    def is_temporary(self, entity_id) -> bool:
        return entity_id in self._pending

    async def _settle(self, operation: str, coro):
        if self.timeout is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise RemoteUnavailable(
                "no answer within {}s".format(self.timeout),
                kind=self.kind,
                operation=operation,
            ) from exc

    async def add(self, draft: Draft) -> Optional[Entity]:
        """Insert ``draft`` optimistically and return it with its stored id.

        Returns ``None`` when the entity was deleted locally while the insert
        was in flight; the stored row is then removed again remotely.
        """
        temp_id = new_temporary_id()
        self.collection.insert(entity_from_draft(draft, temp_id), at_head=self.prepend)
        self._pending.add(temp_id)

        try:
            stored = await self._settle("insert", self.gateway.insert(self.kind, draft))
        except RemoteStoreError as exc:
            self._pending.discard(temp_id)
            self._cancelled.discard(temp_id)
            self.collection.remove(temp_id)
            exc.temp_id = temp_id
            logger.warning(
                "Add to %s rolled back: %s",
                self.kind.value,
                exc,
                extra={"kind": self.kind.value, "operation": "insert", "temp_id": temp_id},
            )
            raise

        self._pending.discard(temp_id)
        if temp_id in self._cancelled:
            self._cancelled.discard(temp_id)
            await self._discard_stored(stored.id)
            return None

        reconciled = self.collection.replace_id(temp_id, stored.id)
        if reconciled is None:
            # A reload replaced the collection while the insert was in flight.
            logger.info(
                "Stored %s %s is not in local state; it will appear on next reload",
                self.kind.value,
                stored.id,
            )
            reconciled = entity_from_draft(draft, stored.id)
        return reconciled

    async def _discard_stored(self, entity_id):
        try:
            await self._settle("delete", self.gateway.delete(self.kind, entity_id))
        except RemoteStoreError as exc:
            logger.warning(
                "Could not remove %s %s deleted before it was stored: %s",
                self.kind.value,
                entity_id,
                exc,
                extra={"kind": self.kind.value, "operation": "delete", "entity_id": entity_id},
            )

    async def delete(self, entity_id) -> None:
        if entity_id in self._pending:
            self.collection.remove(entity_id)
            self._cancelled.add(entity_id)
            return

        removed = self.collection.remove(entity_id)
        try:
            await self._settle("delete", self.gateway.delete(self.kind, entity_id))
        except RemoteStoreError as exc:
            if removed is not None:
                self.collection.restore(*removed)
            logger.warning(
                "Delete from %s rolled back: %s",
                self.kind.value,
                exc,
                extra={"kind": self.kind.value, "operation": "delete", "entity_id": entity_id},
            )
            raise

    async def clear(self) -> List[Entity]:
        """Empty the collection, then delete every remote row.

        In-flight adds are cancelled. A failure is not rolled back here since
        the remote side may have deleted any subset; callers reload instead.
        """
        self._cancelled.update(self._pending)
        removed = self.collection.clear()
        await self._settle("delete_all", self.gateway.delete_all(self.kind))
        return removed


__all__ = ["EntityCollection", "EntityReconciler", "new_temporary_id"]
