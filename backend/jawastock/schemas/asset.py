"""Asset Schemas: upload payload, moderation payload, public asset view.

Invariants:
    - AssetCreate has no author_id/status: both are set by the server
    - price is integer cents >= 0 (floats with a fractional part are rejected)
"""

from datetime import datetime

from pydantic import Field

from jawastock.core.domain_types import AssetStatus, AssetType, LicenseType
from jawastock.schemas.base import CamelModel


class AssetCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    type: AssetType
    url: str = Field(min_length=1)
    thumbnail_url: str = Field(min_length=1)
    price: int = Field(ge=0)
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    license_type: LicenseType = LicenseType.STANDARD
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    duration: int | None = Field(None, ge=0)
    file_size: int | None = Field(None, ge=0)


class AssetStatusUpdate(CamelModel):
    status: AssetStatus


class AssetResponse(CamelModel):
    id: int
    title: str
    description: str | None = None
    type: AssetType
    url: str
    thumbnail_url: str
    price: int
    author_id: int
    status: AssetStatus
    tags: list[str]
    categories: list[str]
    license_type: LicenseType
    width: int | None = None
    height: int | None = None
    duration: int | None = None
    file_size: int | None = None
    created_at: datetime
