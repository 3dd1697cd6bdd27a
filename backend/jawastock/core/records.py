"""Records: the plain, immutable rows the core computes on.

Invariants:
    - Records are frozen: a stored record is never mutated in place, updates
      produce a new record (Purchase immutability falls out of this)
    - Relations are ids (author_id, user_id, asset_id), never embedded objects
    - id and created_at are assigned by the store, never by callers

Design Decisions:
    - dataclass(frozen=True, slots=True) over Pydantic models: core stays free of
      validation machinery; Pydantic lives at the HTTP boundary (schemas/)
    - tags/categories as tuples: hashable, ordered for display, set-like use
      via set(record.tags)
"""

from dataclasses import dataclass
from datetime import datetime

from jawastock.core.domain_types import (
    AssetId, AssetStatus, AssetType, CartItemId, Cents, LicenseType,
    PurchaseId, UserId, UserRole,
)


@dataclass(frozen=True, slots=True)
class User:
    id: UserId
    username: str
    email: str
    password: str
    created_at: datetime
    role: UserRole = UserRole.USER
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    profile_image: str | None = None


@dataclass(frozen=True, slots=True)
class Asset:
    id: AssetId
    title: str
    type: AssetType
    url: str
    thumbnail_url: str
    price: Cents
    author_id: UserId
    created_at: datetime
    description: str | None = None
    status: AssetStatus = AssetStatus.PENDING
    tags: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    license_type: LicenseType = LicenseType.STANDARD
    width: int | None = None
    height: int | None = None
    duration: int | None = None      # seconds
    file_size: int | None = None     # bytes


@dataclass(frozen=True, slots=True)
class CartItem:
    id: CartItemId
    user_id: UserId
    asset_id: AssetId
    created_at: datetime
    license_type: LicenseType = LicenseType.STANDARD


@dataclass(frozen=True, slots=True)
class Purchase:
    id: PurchaseId
    user_id: UserId
    asset_id: AssetId
    price: Cents
    license_type: LicenseType
    download_url: str
    created_at: datetime
    expiry_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class Caller:
    """Resolved identity of the request issuer, supplied by the auth collaborator."""
    user_id: UserId
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
