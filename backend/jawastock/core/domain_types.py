"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, AssetId, CartItemId, PurchaseId wrap positive ints (store-assigned)
    - Prices are ints in minor currency units (cents), never floats
    - All valid states encoded as Enums, no raw string matching in core logic

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders and compare equal
      to the raw strings stored by the SQL backend
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
AssetId = NewType("AssetId", int)
CartItemId = NewType("CartItemId", int)
PurchaseId = NewType("PurchaseId", int)


# ─── Value Types ─────────────────────────────────────────────────

Cents = NewType("Cents", int)   # >= 0


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles. Role changes only by explicit admin action."""
    USER = "user"
    CONTRIBUTOR = "contributor"
    ADMIN = "admin"


class AssetType(str, Enum):
    """Kinds of licensable media."""
    PHOTO = "photo"
    VIDEO = "video"
    VECTOR = "vector"
    ILLUSTRATION = "illustration"
    MUSIC = "music"


class AssetStatus(str, Enum):
    """Moderation states. PENDING is initial; APPROVED and REJECTED are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LicenseType(str, Enum):
    """Usage-rights tier attached to an asset, cart item or purchase."""
    STANDARD = "standard"
    EXTENDED = "extended"
    PREMIUM = "premium"


class SortOrder(str, Enum):
    """Browse orderings offered by the catalog."""
    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"


class ModerationPolicy(str, Enum):
    """How moderation treats assets that already left PENDING.

    STRICT rejects the transition; OVERWRITE replaces the status as-is.
    """
    STRICT = "strict"
    OVERWRITE = "overwrite"


class Action(str, Enum):
    """Operations gated by the access policy."""
    BROWSE_ASSETS = "browse_assets"
    VIEW_ASSET = "view_asset"
    UPLOAD_ASSET = "upload_asset"
    MODERATE_ASSET = "moderate_asset"
    LIST_PENDING_ASSETS = "list_pending_assets"
    LIST_USERS = "list_users"
    MANAGE_CART = "manage_cart"
    CHECKOUT = "checkout"
    VIEW_PURCHASES = "view_purchases"
