"""In-Memory Store: dict-backed MarketplaceStore for development and tests.

Invariants:
    - Ids come from a per-collection itertools.count: distinct and increasing even
      under concurrent create() calls, and never reused after a rollback
    - created_at comes from the injected clock, never from the caller
    - Stored records are frozen dataclasses; update() swaps in a new record
    - transaction() restores every collection to its pre-transaction rows if the
      body raises; transactions are serialized by one asyncio.Lock and do not nest

Design Decisions:
    - Injected per app/test instead of a module-level singleton, so each test
      gets a clean store and a SQL backend can replace it without code changes
    - Snapshot/restore over an undo log: records are immutable, so a shallow
      dict copy is a complete snapshot
"""

import asyncio
import dataclasses
import itertools
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Generic, TypeVar

from jawastock.core.records import Asset, CartItem, Purchase, User

logger = logging.getLogger(__name__)

R = TypeVar("R")
Clock = Callable[[], datetime]

_STORE_ASSIGNED = ("id", "created_at")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryEntityStore(Generic[R]):
    """Keyed collection of one frozen record type."""

    def __init__(self, record_cls: type[R], clock: Clock = utc_now):
        self._record_cls = record_cls
        self._clock = clock
        self._rows: dict[int, R] = {}
        self._ids = itertools.count(1)

    async def create(self, data: dict[str, Any]) -> R:
        fields = {k: v for k, v in data.items() if k not in _STORE_ASSIGNED}
        record = self._record_cls(
            id=next(self._ids), created_at=self._clock(), **fields,
        )
        self._rows[record.id] = record
        return record

    async def get_by_id(self, record_id: int) -> R | None:
        return self._rows.get(record_id)

    async def get_all_by_predicate(self, predicate: Callable[[R], bool]) -> list[R]:
        return [row for row in self._rows.values() if predicate(row)]

    async def update(self, record_id: int, **fields: Any) -> R | None:
        row = self._rows.get(record_id)
        if row is None:
            return None
        changes = {k: v for k, v in fields.items() if k not in _STORE_ASSIGNED}
        updated = dataclasses.replace(row, **changes)
        self._rows[record_id] = updated
        return updated

    async def delete(self, record_id: int) -> bool:
        return self._rows.pop(record_id, None) is not None

    def snapshot(self) -> dict[int, R]:
        return dict(self._rows)

    def restore(self, rows: dict[int, R]) -> None:
        self._rows = rows

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryMarketplaceStore:
    """All four collections plus snapshot-based transactions."""

    def __init__(self, clock: Clock = utc_now):
        self.users: InMemoryEntityStore[User] = InMemoryEntityStore(User, clock)
        self.assets: InMemoryEntityStore[Asset] = InMemoryEntityStore(Asset, clock)
        self.cart_items: InMemoryEntityStore[CartItem] = InMemoryEntityStore(CartItem, clock)
        self.purchases: InMemoryEntityStore[Purchase] = InMemoryEntityStore(Purchase, clock)
        self._lock = asyncio.Lock()

    def _collections(self) -> tuple[InMemoryEntityStore, ...]:
        return (self.users, self.assets, self.cart_items, self.purchases)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._lock:
            snapshots = [c.snapshot() for c in self._collections()]
            try:
                yield
            except BaseException:
                for collection, rows in zip(self._collections(), snapshots):
                    collection.restore(rows)
                logger.warning("In-memory transaction rolled back")
                raise
