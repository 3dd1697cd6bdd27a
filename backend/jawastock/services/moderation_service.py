"""Moderation Service: admin review of submitted assets.

Invariants:
    - Only callers allowed MODERATE_ASSET (admins) reach the store
    - The read-check-write of the status runs in one store transaction
    - The allowed transitions are decided by core.moderation, not here
"""

import logging

from jawastock.core.access_policy import authorize
from jawastock.core.domain_types import Action, AssetStatus, ModerationPolicy
from jawastock.core.errors import ResourceNotFoundError
from jawastock.core.moderation import check_transition
from jawastock.core.records import Asset, Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.core.validate_input import coerce_enum

logger = logging.getLogger(__name__)


async def moderate_asset(
    store: MarketplaceStore,
    caller: Caller | None,
    asset_id: int,
    status: AssetStatus | str,
    policy: ModerationPolicy = ModerationPolicy.STRICT,
) -> Asset:
    """Move an asset to status; raises InvalidTransitionError under STRICT policy."""
    authorize(caller, Action.MODERATE_ASSET)
    target = coerce_enum(AssetStatus, status, "status")

    async with store.transaction():
        asset = await store.assets.get_by_id(asset_id)
        if asset is None:
            raise ResourceNotFoundError("Asset", asset_id)
        new_status = check_transition(asset.status, target, policy)
        updated = await store.assets.update(asset_id, status=new_status)

    logger.info(
        f"Asset moderated: {asset.status.value} -> {new_status.value}",
        extra={
            "user_id": caller.user_id, "asset_id": asset_id,
            "action": "moderate", "status": new_status.value,
        },
    )
    return updated


async def approve_asset(
    store: MarketplaceStore, caller: Caller | None, asset_id: int,
    policy: ModerationPolicy = ModerationPolicy.STRICT,
) -> Asset:
    return await moderate_asset(store, caller, asset_id, AssetStatus.APPROVED, policy)


async def reject_asset(
    store: MarketplaceStore, caller: Caller | None, asset_id: int,
    policy: ModerationPolicy = ModerationPolicy.STRICT,
) -> Asset:
    return await moderate_asset(store, caller, asset_id, AssetStatus.REJECTED, policy)
