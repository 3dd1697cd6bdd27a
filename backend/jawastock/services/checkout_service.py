"""Checkout Service: cart -> purchases, all or nothing.

Invariants:
    - The payment collaborator has already confirmed payment when checkout runs
    - Every purchase of one checkout, and the cart clearing, commit in a single
      store transaction: a failure leaves no purchase behind and the cart intact
    - Checkout of an empty cart is a no-op returning []
    - Explicitly passed items must be the caller's own, still-present cart items;
      a repeated item is bought once, and unlisted cart items stay in the cart

Design Decisions:
    - Purchase rows are built by the pure core.checkout before the first write
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

from jawastock.core.access_policy import authorize
from jawastock.core.checkout import DEFAULT_DOWNLOAD_TTL, build_purchase_rows
from jawastock.core.domain_types import Action
from jawastock.core.errors import ForbiddenError, ResourceNotFoundError
from jawastock.core.records import Asset, CartItem, Caller, Purchase
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.services.cart_service import delete_items_of

logger = logging.getLogger(__name__)


async def checkout(
    store: MarketplaceStore,
    caller: Caller | None,
    items: Sequence[CartItem] | None = None,
    now: datetime | None = None,
    download_ttl: timedelta | None = DEFAULT_DOWNLOAD_TTL,
) -> list[Purchase]:
    """Purchase items (default: the whole cart), then drop them from the cart.

    Without items the whole cart is bought and cleared. With items, each
    distinct cart item is bought once and only those items are removed.
    """
    authorize(caller, Action.CHECKOUT)
    now = now or datetime.now(timezone.utc)

    async with store.transaction():
        if items is None:
            cart = await store.cart_items.get_all_by_predicate(
                lambda i: i.user_id == caller.user_id,
            )
        else:
            cart = await _reload_own_items(store, caller, items)
        if not cart:
            return []

        assets = await _load_assets(store, cart)
        rows = build_purchase_rows(cart, assets, now, download_ttl)
        purchases = [await store.purchases.create(row) for row in rows]
        if items is None:
            await delete_items_of(store, caller.user_id)
        else:
            for item in cart:
                await store.cart_items.delete(item.id)

    logger.info(
        f"Checkout completed: {len(purchases)} purchase(s)",
        extra={
            "user_id": caller.user_id,
            "action": "checkout",
            "purchase_count": len(purchases),
            "total_cents": sum(p.price for p in purchases),
        },
    )
    return purchases


async def list_purchases(store: MarketplaceStore, caller: Caller | None) -> list[Purchase]:
    authorize(caller, Action.VIEW_PURCHASES)
    return await store.purchases.get_all_by_predicate(
        lambda p: p.user_id == caller.user_id,
    )


async def _reload_own_items(
    store: MarketplaceStore, caller: Caller, items: Sequence[CartItem],
) -> list[CartItem]:
    fresh = []
    for item_id in dict.fromkeys(item.id for item in items):
        current = await store.cart_items.get_by_id(item_id)
        if current is None:
            raise ResourceNotFoundError("CartItem", item_id)
        if current.user_id != caller.user_id:
            raise ForbiddenError(caller.role.value, "checkout_foreign_cart_item")
        fresh.append(current)
    return fresh


async def _load_assets(
    store: MarketplaceStore, cart: Sequence[CartItem],
) -> dict[int, Asset]:
    assets = {}
    for asset_id in dict.fromkeys(item.asset_id for item in cart):
        asset = await store.assets.get_by_id(asset_id)
        if asset is not None:
            assets[asset_id] = asset
    return assets
