"""User Routes: admin listing."""

from fastapi import APIRouter, Depends

from jawastock.api.deps import get_optional_caller, get_store
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.schemas.user import UserResponse
from jawastock.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await user_service.list_users(store, caller)
