"""Catalog Service: asset upload, lookup and browse.

Invariants:
    - New assets always start PENDING and belong to the uploading caller,
      whatever the payload says
    - Non-approved assets are visible only to their author or an admin;
      everyone else gets ResourceNotFoundError (existence is not leaked)
    - browse_assets returns approved assets only (enforced by the query engine)
"""

import logging
from typing import Any

from jawastock.core.access_policy import authorize, can_view_asset
from jawastock.core.asset_query import AssetQuery, search_assets
from jawastock.core.domain_types import Action, AssetStatus
from jawastock.core.errors import ResourceNotFoundError
from jawastock.core.records import Asset, Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.core.validate_input import coerce_enum, validate_asset_data

logger = logging.getLogger(__name__)


async def create_asset(
    store: MarketplaceStore, caller: Caller | None, data: dict[str, Any],
) -> Asset:
    authorize(caller, Action.UPLOAD_ASSET)
    clean = validate_asset_data(data)
    clean["author_id"] = caller.user_id
    clean["status"] = AssetStatus.PENDING

    async with store.transaction():
        asset = await store.assets.create(clean)

    logger.info(
        f"Asset submitted for review: {asset.title}",
        extra={"user_id": caller.user_id, "asset_id": asset.id, "action": "upload"},
    )
    return asset


async def get_asset(
    store: MarketplaceStore, caller: Caller | None, asset_id: int,
) -> Asset:
    authorize(caller, Action.VIEW_ASSET)
    asset = await store.assets.get_by_id(asset_id)
    if asset is None or not can_view_asset(caller, asset):
        raise ResourceNotFoundError("Asset", asset_id)
    return asset


async def list_assets_by_author(
    store: MarketplaceStore, caller: Caller | None, author_id: int,
) -> list[Asset]:
    """All of an author's assets the caller may see, newest first."""
    authorize(caller, Action.VIEW_ASSET)
    assets = await store.assets.get_all_by_predicate(
        lambda a: a.author_id == author_id and can_view_asset(caller, a),
    )
    return sorted(assets, key=lambda a: a.created_at, reverse=True)


async def browse_assets(
    store: MarketplaceStore, caller: Caller | None, query: AssetQuery,
) -> list[Asset]:
    authorize(caller, Action.BROWSE_ASSETS)
    approved = await store.assets.get_all_by_predicate(
        lambda a: a.status == AssetStatus.APPROVED,
    )
    return search_assets(approved, query)


async def list_assets_by_status(
    store: MarketplaceStore, caller: Caller | None, status: AssetStatus | str,
) -> list[Asset]:
    """Moderation queue listing, in submission order."""
    authorize(caller, Action.LIST_PENDING_ASSETS)
    status = coerce_enum(AssetStatus, status, "status")
    return await store.assets.get_all_by_predicate(lambda a: a.status == status)


async def list_pending_assets(
    store: MarketplaceStore, caller: Caller | None,
) -> list[Asset]:
    return await list_assets_by_status(store, caller, AssetStatus.PENDING)
