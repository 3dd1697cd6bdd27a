"""Admin Routes: moderation queues."""

from fastapi import APIRouter, Depends

from jawastock.api.deps import get_optional_caller, get_store
from jawastock.core.domain_types import AssetStatus
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.schemas.asset import AssetResponse
from jawastock.services import catalog_service

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/pending-assets", response_model=list[AssetResponse])
async def list_pending_assets(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await catalog_service.list_pending_assets(store, caller)


@router.get("/assets", response_model=list[AssetResponse])
async def list_assets_by_status(
    status: AssetStatus = AssetStatus.PENDING,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await catalog_service.list_assets_by_status(store, caller, status)
