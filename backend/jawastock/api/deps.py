"""Request Dependencies: store injection and caller resolution.

Invariants:
    - Exactly one MarketplaceStore per request: the app's in-memory store, or a
      SqlMarketplaceStore bound to a fresh session when storage_backend == "sql"
    - The caller comes from the X-User-Id header set by the authentication
      collaborator; no header = anonymous, unknown id = 401
"""

from typing import AsyncGenerator

from fastapi import Depends, Header, Request

from jawastock.core.errors import AuthenticationError
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.infrastructure import database
from jawastock.infrastructure.sql_store import SqlMarketplaceStore
from jawastock.services.user_service import resolve_caller


async def get_store(request: Request) -> AsyncGenerator[MarketplaceStore, None]:
    store = getattr(request.app.state, "store", None)
    if store is not None:
        yield store
        return
    if not database.db_manager:
        raise RuntimeError("No store configured")
    async with database.db_manager.session() as session:
        yield SqlMarketplaceStore(session)


async def get_optional_caller(
    x_user_id: int | None = Header(None),
    store: MarketplaceStore = Depends(get_store),
) -> Caller | None:
    if x_user_id is None:
        return None
    return await resolve_caller(store, x_user_id)


async def get_caller(
    caller: Caller | None = Depends(get_optional_caller),
) -> Caller:
    if caller is None:
        raise AuthenticationError()
    return caller
