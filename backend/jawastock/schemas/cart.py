"""Cart & Purchase Schemas."""

from datetime import datetime

from pydantic import Field

from jawastock.core.domain_types import LicenseType
from jawastock.schemas.base import CamelModel


class CartItemCreate(CamelModel):
    asset_id: int = Field(ge=1)
    license_type: LicenseType = LicenseType.STANDARD


class CartItemResponse(CamelModel):
    id: int
    user_id: int
    asset_id: int
    license_type: LicenseType
    created_at: datetime


class CartTotalResponse(CamelModel):
    item_count: int
    total: int


class PurchaseResponse(CamelModel):
    id: int
    user_id: int
    asset_id: int
    price: int
    license_type: LicenseType
    download_url: str
    expiry_date: datetime | None = None
    created_at: datetime
