"""Cart Service: per-user cart entries.

Invariants:
    - A caller only ever reads or clears their own cart
    - Duplicate (user, asset) entries are allowed; each add creates a new item
    - The asset must exist at add time; approval is not checked
    - remove_from_cart returns False when the item is already gone; removing
      someone else's item raises ForbiddenError
"""

import logging

from jawastock.core.access_policy import authorize, owns_record
from jawastock.core.checkout import cart_total
from jawastock.core.domain_types import Action, LicenseType
from jawastock.core.errors import ForbiddenError, ResourceNotFoundError
from jawastock.core.records import CartItem, Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.core.validate_input import coerce_enum

logger = logging.getLogger(__name__)


async def add_to_cart(
    store: MarketplaceStore,
    caller: Caller | None,
    asset_id: int,
    license_type: LicenseType | str = LicenseType.STANDARD,
) -> CartItem:
    authorize(caller, Action.MANAGE_CART)
    license_type = coerce_enum(LicenseType, license_type, "license_type")

    async with store.transaction():
        if await store.assets.get_by_id(asset_id) is None:
            raise ResourceNotFoundError("Asset", asset_id)
        item = await store.cart_items.create({
            "user_id": caller.user_id,
            "asset_id": asset_id,
            "license_type": license_type,
        })

    logger.info(
        "Added to cart",
        extra={"user_id": caller.user_id, "asset_id": asset_id, "cart_item_id": item.id},
    )
    return item


async def get_cart(store: MarketplaceStore, caller: Caller | None) -> list[CartItem]:
    authorize(caller, Action.MANAGE_CART)
    return await _items_of(store, caller.user_id)


async def get_cart_summary(
    store: MarketplaceStore, caller: Caller | None,
) -> tuple[list[CartItem], int]:
    """The cart items and their current total in cents, from one cart read."""
    items = await get_cart(store, caller)
    assets = {}
    for asset_id in dict.fromkeys(item.asset_id for item in items):
        asset = await store.assets.get_by_id(asset_id)
        if asset is not None:
            assets[asset_id] = asset
    return items, cart_total(items, assets)


async def get_cart_total(store: MarketplaceStore, caller: Caller | None) -> int:
    _, total = await get_cart_summary(store, caller)
    return total


async def remove_from_cart(
    store: MarketplaceStore, caller: Caller | None, cart_item_id: int,
) -> bool:
    authorize(caller, Action.MANAGE_CART)
    async with store.transaction():
        item = await store.cart_items.get_by_id(cart_item_id)
        if item is None:
            return False
        if not owns_record(caller, item.user_id):
            raise ForbiddenError(caller.role.value, "remove_foreign_cart_item")
        return await store.cart_items.delete(cart_item_id)


async def clear_cart(store: MarketplaceStore, caller: Caller | None) -> int:
    """Delete every item in the caller's cart; returns how many were removed."""
    authorize(caller, Action.MANAGE_CART)
    async with store.transaction():
        return await delete_items_of(store, caller.user_id)


async def delete_items_of(store: MarketplaceStore, user_id: int) -> int:
    """Remove all cart items of user_id. Callers own the transaction."""
    removed = 0
    for item in await _items_of(store, user_id):
        if await store.cart_items.delete(item.id):
            removed += 1
    return removed


async def _items_of(store: MarketplaceStore, user_id: int) -> list[CartItem]:
    return await store.cart_items.get_all_by_predicate(lambda i: i.user_id == user_id)
