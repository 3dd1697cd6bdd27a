"""Boundary Protocols: contracts between core and the store backends.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - create() assigns a fresh, monotonically increasing id and created_at
    - get_by_id/update return None on absence, delete returns False: absence
      is a valid outcome, not an exception
    - The store is unaware of uniqueness rules; callers pre-check, and a SQL
      backend may additionally enforce them atomically (DuplicateKeyError)
    - transaction() rolls back every mutation made inside it on exception

Design Decisions:
    - Protocol over ABC: structural subtyping, in-memory and SQL backends share
      no base class
    - Async in Protocol: implementations do IO, but the pure functions that
      consume their results (asset_query, moderation, checkout) are never async
"""

from typing import AsyncContextManager, Any, Callable, Protocol, TypeVar

from jawastock.core.records import Asset, CartItem, Purchase, User

R = TypeVar("R")


class EntityStore(Protocol[R]):
    """Keyed collection of one record type."""
    async def create(self, data: dict[str, Any]) -> R: ...
    async def get_by_id(self, record_id: int) -> R | None: ...
    async def get_all_by_predicate(
        self, predicate: Callable[[R], bool],
    ) -> list[R]: ...
    async def update(self, record_id: int, **fields: Any) -> R | None: ...
    async def delete(self, record_id: int) -> bool: ...


class MarketplaceStore(Protocol):
    """All entity collections plus a transactional boundary."""
    users: EntityStore[User]
    assets: EntityStore[Asset]
    cart_items: EntityStore[CartItem]
    purchases: EntityStore[Purchase]

    def transaction(self) -> AsyncContextManager[None]: ...
