"""Cart Routes: add, list, total, remove, clear."""

from fastapi import APIRouter, Depends, status

from jawastock.api.deps import get_optional_caller, get_store
from jawastock.core.errors import ResourceNotFoundError
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.schemas.base import MessageResponse
from jawastock.schemas.cart import CartItemCreate, CartItemResponse, CartTotalResponse
from jawastock.services import cart_service

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    body: CartItemCreate,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await cart_service.add_to_cart(
        store, caller, body.asset_id, body.license_type,
    )


@router.get("", response_model=list[CartItemResponse])
async def get_cart(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await cart_service.get_cart(store, caller)


@router.get("/total", response_model=CartTotalResponse)
async def get_cart_total(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    items, total = await cart_service.get_cart_summary(store, caller)
    return CartTotalResponse(item_count=len(items), total=total)


@router.delete("/{cart_item_id}", response_model=MessageResponse)
async def remove_from_cart(
    cart_item_id: int,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    if not await cart_service.remove_from_cart(store, caller, cart_item_id):
        raise ResourceNotFoundError("CartItem", cart_item_id)
    return MessageResponse(message="Cart item removed successfully")


@router.delete("", response_model=MessageResponse)
async def clear_cart(
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    removed = await cart_service.clear_cart(store, caller)
    return MessageResponse(message=f"Cart cleared ({removed} item(s) removed)")
