"""Checkout Builder: turn cart items into purchase rows.

Invariants:
    - Pure: the caller loads assets and supplies `now`; nothing is persisted here
    - One purchase row per cart item, in cart order (duplicates stay duplicates)
    - price is the asset's price at checkout time, copied by value
    - license_type comes from the cart item, not the asset
    - download_url is the asset url; expiry_date = now + ttl
    - A cart item whose asset no longer exists fails the whole build

Design Decisions:
    - Build everything before the first write: the service persists the rows
      inside one transaction, so a failure here costs zero writes
"""

from datetime import datetime, timedelta
from typing import Any, Mapping, Sequence

from jawastock.core.errors import ResourceNotFoundError
from jawastock.core.records import Asset, CartItem

DEFAULT_DOWNLOAD_TTL = timedelta(days=7)


def build_purchase_rows(
    items: Sequence[CartItem],
    assets_by_id: Mapping[int, Asset],
    now: datetime,
    download_ttl: timedelta | None = DEFAULT_DOWNLOAD_TTL,
) -> list[dict[str, Any]]:
    """Return the purchase data dicts for items (not yet stored)."""
    rows = []
    for item in items:
        asset = assets_by_id.get(item.asset_id)
        if asset is None:
            raise ResourceNotFoundError("Asset", item.asset_id)
        rows.append({
            "user_id": item.user_id,
            "asset_id": asset.id,
            "price": asset.price,
            "license_type": item.license_type,
            "download_url": asset.url,
            "expiry_date": now + download_ttl if download_ttl else None,
        })
    return rows


def cart_total(items: Sequence[CartItem], assets_by_id: Mapping[int, Asset]) -> int:
    """Sum of current asset prices in cents; missing assets count as 0."""
    return sum(
        assets_by_id[item.asset_id].price
        for item in items
        if item.asset_id in assets_by_id
    )
