"""Purchase Routes: checkout and purchase history.

Invariants:
    - POST /checkout is only reached after the payment collaborator confirmed
      payment; it purchases the caller's whole cart atomically
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, status

from jawastock.api.deps import get_optional_caller, get_store
from jawastock.config import Settings, get_settings
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.schemas.cart import PurchaseResponse
from jawastock.services import checkout_service

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.post(
    "/checkout", response_model=list[PurchaseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def checkout(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
    settings: Settings = Depends(get_settings),
):
    return await checkout_service.checkout(
        store, caller, download_ttl=timedelta(days=settings.download_ttl_days),
    )


@router.get("", response_model=list[PurchaseResponse])
async def list_purchases(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await checkout_service.list_purchases(store, caller)
