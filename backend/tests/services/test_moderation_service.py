"""Moderation Service tests: admin-only transitions under both policies."""

import pytest

from jawastock.core.domain_types import AssetStatus, ModerationPolicy
from jawastock.core.errors import (
    ForbiddenError, InputValidationError, InvalidTransitionError, ResourceNotFoundError,
)
from jawastock.services import catalog_service, moderation_service

from tests.services.factories import asset_payload


@pytest.fixture
async def pending(store, accounts):
    return await catalog_service.create_asset(store, accounts.contributor, asset_payload())


async def test_admin_approves_pending(store, accounts, pending):
    asset = await moderation_service.approve_asset(store, accounts.admin, pending.id)
    assert asset.status == AssetStatus.APPROVED
    assert (await store.assets.get_by_id(pending.id)).status == AssetStatus.APPROVED


async def test_admin_rejects_pending(store, accounts, pending):
    asset = await moderation_service.reject_asset(store, accounts.admin, pending.id)
    assert asset.status == AssetStatus.REJECTED


async def test_strict_refuses_second_decision(store, accounts, pending):
    await moderation_service.approve_asset(store, accounts.admin, pending.id)
    with pytest.raises(InvalidTransitionError):
        await moderation_service.reject_asset(store, accounts.admin, pending.id)
    assert (await store.assets.get_by_id(pending.id)).status == AssetStatus.APPROVED


async def test_overwrite_replaces_decision(store, accounts, pending):
    await moderation_service.approve_asset(store, accounts.admin, pending.id)
    asset = await moderation_service.moderate_asset(
        store, accounts.admin, pending.id, "rejected", ModerationPolicy.OVERWRITE,
    )
    assert asset.status == AssetStatus.REJECTED


@pytest.mark.parametrize("who", ["contributor", "buyer"])
async def test_non_admin_cannot_moderate(store, accounts, pending, who):
    with pytest.raises(ForbiddenError):
        await moderation_service.approve_asset(store, getattr(accounts, who), pending.id)
    assert (await store.assets.get_by_id(pending.id)).status == AssetStatus.PENDING


async def test_missing_asset(store, accounts):
    with pytest.raises(ResourceNotFoundError):
        await moderation_service.approve_asset(store, accounts.admin, 999)


async def test_unknown_status_rejected(store, accounts, pending):
    with pytest.raises(InputValidationError):
        await moderation_service.moderate_asset(store, accounts.admin, pending.id, "archived")
