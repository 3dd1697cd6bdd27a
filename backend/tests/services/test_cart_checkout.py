"""Cart & Checkout tests: cart ownership, totals, atomic checkout.

Tests cover:
    - Cart add/list/total/remove/clear, duplicates allowed
    - Checkout: one purchase per item, price snapshot, cart cleared
    - Empty cart checkout is a no-op
    - A failure mid-checkout leaves no purchases and the cart intact
"""

from datetime import datetime, timedelta, timezone

import pytest

from jawastock.core.domain_types import LicenseType
from jawastock.core.errors import (
    AuthenticationError, ForbiddenError, InputValidationError, ResourceNotFoundError,
)
from jawastock.services import cart_service, catalog_service, checkout_service, moderation_service

from tests.services.factories import asset_payload, seed_accounts

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def asset(store, accounts):
    created = await catalog_service.create_asset(
        store, accounts.contributor, asset_payload(price=999),
    )
    return await moderation_service.approve_asset(store, accounts.admin, created.id)


@pytest.fixture
async def cheap_asset(store, accounts):
    created = await catalog_service.create_asset(
        store, accounts.contributor, asset_payload(title="Pebble", price=1),
    )
    return await moderation_service.approve_asset(store, accounts.admin, created.id)


# ─── Cart ────────────────────────────────────────────────────────

async def test_add_and_list_cart(store, accounts, asset):
    item = await cart_service.add_to_cart(store, accounts.buyer, asset.id, "extended")
    assert item.user_id == accounts.buyer.user_id
    assert item.license_type == LicenseType.EXTENDED
    assert await cart_service.get_cart(store, accounts.buyer) == [item]
    assert await cart_service.get_cart(store, accounts.contributor) == []


async def test_add_missing_asset(store, accounts):
    with pytest.raises(ResourceNotFoundError):
        await cart_service.add_to_cart(store, accounts.buyer, 999)


async def test_add_unknown_license(store, accounts, asset):
    with pytest.raises(InputValidationError):
        await cart_service.add_to_cart(store, accounts.buyer, asset.id, "lifetime")


async def test_anonymous_has_no_cart(store):
    with pytest.raises(AuthenticationError):
        await cart_service.get_cart(store, None)


async def test_duplicates_allowed_and_totalled(store, accounts, asset, cheap_asset):
    for asset_id in (asset.id, asset.id, cheap_asset.id):
        await cart_service.add_to_cart(store, accounts.buyer, asset_id)
    assert len(await cart_service.get_cart(store, accounts.buyer)) == 3
    assert await cart_service.get_cart_total(store, accounts.buyer) == 999 * 2 + 1


async def test_remove_from_cart(store, accounts, asset):
    item = await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    assert await cart_service.remove_from_cart(store, accounts.buyer, item.id) is True
    assert await cart_service.remove_from_cart(store, accounts.buyer, item.id) is False


async def test_remove_someone_elses_item_forbidden(store, accounts, asset):
    item = await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    with pytest.raises(ForbiddenError):
        await cart_service.remove_from_cart(store, accounts.contributor, item.id)
    assert await store.cart_items.get_by_id(item.id) == item


async def test_clear_cart_only_touches_own_items(store, accounts, asset):
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    other = await cart_service.add_to_cart(store, accounts.contributor, asset.id)
    assert await cart_service.clear_cart(store, accounts.buyer) == 2
    assert await cart_service.get_cart(store, accounts.buyer) == []
    assert await cart_service.get_cart(store, accounts.contributor) == [other]


# ─── Checkout ────────────────────────────────────────────────────

async def test_checkout_single_item(store, accounts, asset):
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    purchases = await checkout_service.checkout(store, accounts.buyer, now=NOW)

    assert len(purchases) == 1
    purchase = purchases[0]
    assert purchase.asset_id == asset.id
    assert purchase.user_id == accounts.buyer.user_id
    assert purchase.price == 999
    assert purchase.download_url == asset.url
    assert purchase.expiry_date == NOW + timedelta(days=7)
    assert await cart_service.get_cart(store, accounts.buyer) == []


async def test_checkout_one_purchase_per_item_in_cart_order(store, accounts, asset, cheap_asset):
    for asset_id in (cheap_asset.id, asset.id, cheap_asset.id):
        await cart_service.add_to_cart(store, accounts.buyer, asset_id)
    purchases = await checkout_service.checkout(store, accounts.buyer)
    assert [p.asset_id for p in purchases] == [cheap_asset.id, asset.id, cheap_asset.id]
    assert sum(p.price for p in purchases) == 1001


async def test_checkout_empty_cart_is_noop(store, accounts):
    assert await checkout_service.checkout(store, accounts.buyer) == []
    assert len(store.purchases) == 0


async def test_purchase_price_is_a_snapshot(store, accounts, asset):
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    [purchase] = await checkout_service.checkout(store, accounts.buyer)
    await store.assets.update(asset.id, price=5000)
    [stored] = await checkout_service.list_purchases(store, accounts.buyer)
    assert stored.price == purchase.price == 999


async def test_checkout_failure_rolls_back(store, accounts, asset, cheap_asset, monkeypatch):
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    await cart_service.add_to_cart(store, accounts.buyer, cheap_asset.id)

    original_create = store.purchases.create
    calls = []

    async def failing_create(data):
        calls.append(data)
        if len(calls) == 2:
            raise RuntimeError("payment ledger unavailable")
        return await original_create(data)

    monkeypatch.setattr(store.purchases, "create", failing_create)
    with pytest.raises(RuntimeError):
        await checkout_service.checkout(store, accounts.buyer)

    assert len(store.purchases) == 0
    assert len(await cart_service.get_cart(store, accounts.buyer)) == 2


async def test_checkout_with_deleted_asset_writes_nothing(store, accounts, asset, cheap_asset):
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    await cart_service.add_to_cart(store, accounts.buyer, cheap_asset.id)
    await store.assets.delete(cheap_asset.id)

    with pytest.raises(ResourceNotFoundError):
        await checkout_service.checkout(store, accounts.buyer)
    assert len(store.purchases) == 0
    assert len(await cart_service.get_cart(store, accounts.buyer)) == 2


async def test_checkout_explicit_items_must_be_own(store, accounts, asset):
    foreign = await cart_service.add_to_cart(store, accounts.contributor, asset.id)
    with pytest.raises(ForbiddenError):
        await checkout_service.checkout(store, accounts.buyer, items=[foreign])
    assert len(store.purchases) == 0


async def test_list_purchases_only_own(store, accounts, asset):
    await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    await checkout_service.checkout(store, accounts.buyer)
    assert len(await checkout_service.list_purchases(store, accounts.buyer)) == 1
    assert await checkout_service.list_purchases(store, accounts.contributor) == []


async def test_checkout_on_sql_store(sql_store):
    accounts = await seed_accounts(sql_store)
    created = await catalog_service.create_asset(
        sql_store, accounts.contributor, asset_payload(price=750),
    )
    await moderation_service.approve_asset(sql_store, accounts.admin, created.id)
    await cart_service.add_to_cart(sql_store, accounts.buyer, created.id)

    [purchase] = await checkout_service.checkout(sql_store, accounts.buyer)
    assert purchase.price == 750
    assert await cart_service.get_cart(sql_store, accounts.buyer) == []


async def test_checkout_repeated_explicit_item_bought_once(store, accounts, asset):
    item = await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    purchases = await checkout_service.checkout(store, accounts.buyer, items=[item, item])
    assert len(purchases) == 1
    assert len(store.purchases) == 1
    assert await cart_service.get_cart(store, accounts.buyer) == []


async def test_checkout_explicit_subset_keeps_unbought_items(store, accounts, asset, cheap_asset):
    bought = await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    kept = await cart_service.add_to_cart(store, accounts.buyer, cheap_asset.id)
    purchases = await checkout_service.checkout(store, accounts.buyer, items=[bought])
    assert [p.asset_id for p in purchases] == [asset.id]
    assert await cart_service.get_cart(store, accounts.buyer) == [kept]


async def test_cart_summary_reads_items_and_total_together(store, accounts, asset, cheap_asset):
    first = await cart_service.add_to_cart(store, accounts.buyer, asset.id)
    second = await cart_service.add_to_cart(store, accounts.buyer, cheap_asset.id)
    items, total = await cart_service.get_cart_summary(store, accounts.buyer)
    assert items == [first, second]
    assert total == 1000
