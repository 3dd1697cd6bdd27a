"""Asset Routes: upload, browse, detail, author listing, moderation.

Invariants:
    - Browse parameters are normalized by core.asset_query.build_query, so an
      unknown type or crossed price bounds yields 400 VALIDATION_ERROR
    - Moderation policy comes from settings, never from the request
"""

from fastapi import APIRouter, Depends, Query, status

from jawastock.api.deps import get_optional_caller, get_store
from jawastock.config import Settings, get_settings
from jawastock.core.asset_query import build_query
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.schemas.asset import AssetCreate, AssetResponse, AssetStatusUpdate
from jawastock.services import catalog_service, moderation_service

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.post("", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    body: AssetCreate,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await catalog_service.create_asset(store, caller, body.model_dump())


@router.get("", response_model=list[AssetResponse])
async def browse_assets(
    query: str | None = None,
    type: str | None = None,
    categories: list[str] | None = Query(None),
    min_price: int | None = Query(None, alias="minPrice"),
    max_price: int | None = Query(None, alias="maxPrice"),
    sort: str | None = None,
    limit: int | None = None,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    asset_query = build_query(
        text=query, type=type, categories=categories,
        min_price=min_price, max_price=max_price, sort=sort, limit=limit,
    )
    return await catalog_service.browse_assets(store, caller, asset_query)


@router.get("/author/{author_id}", response_model=list[AssetResponse])
async def list_assets_by_author(
    author_id: int,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await catalog_service.list_assets_by_author(store, caller, author_id)


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(
    asset_id: int,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await catalog_service.get_asset(store, caller, asset_id)


@router.patch("/{asset_id}/status", response_model=AssetResponse)
async def update_asset_status(
    asset_id: int,
    body: AssetStatusUpdate,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
    settings: Settings = Depends(get_settings),
):
    return await moderation_service.moderate_asset(
        store, caller, asset_id, body.status, settings.moderation_policy,
    )
