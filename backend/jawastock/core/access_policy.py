"""Access Policy: the single {role, action} -> allow/deny table.

Invariants:
    - Every gated service operation calls authorize() before touching the store
    - Anonymous callers (None) may only perform PUBLIC_ACTIONS
    - Admin may perform every Action
    - Ownership rules (own cart item, own pending asset) are checked by
      can_view_asset / owns_record, never by comparing roles in services

Design Decisions:
    - Table as data: adding a role or action is one edit, and the matrix is
      directly assertable in tests
"""

from jawastock.core.domain_types import Action, AssetStatus, UserRole
from jawastock.core.errors import AuthenticationError, ForbiddenError
from jawastock.core.records import Asset, Caller

PUBLIC_ACTIONS = frozenset({Action.BROWSE_ASSETS, Action.VIEW_ASSET})

_BUYER_ACTIONS = PUBLIC_ACTIONS | {
    Action.MANAGE_CART, Action.CHECKOUT, Action.VIEW_PURCHASES,
}

POLICY: dict[UserRole, frozenset[Action]] = {
    UserRole.USER: frozenset(_BUYER_ACTIONS),
    UserRole.CONTRIBUTOR: frozenset(_BUYER_ACTIONS | {Action.UPLOAD_ASSET}),
    UserRole.ADMIN: frozenset(Action),
}


def is_allowed(role: UserRole | None, action: Action) -> bool:
    if role is None:
        return action in PUBLIC_ACTIONS
    return action in POLICY[UserRole(role)]


def authorize(caller: Caller | None, action: Action) -> None:
    """Raise unless caller may perform action."""
    if is_allowed(caller.role if caller else None, action):
        return
    if caller is None:
        raise AuthenticationError()
    raise ForbiddenError(caller.role.value, action.value)


def can_view_asset(caller: Caller | None, asset: Asset) -> bool:
    """Approved assets are public; others only to their author or an admin."""
    if asset.status == AssetStatus.APPROVED:
        return True
    if caller is None:
        return False
    return caller.is_admin or caller.user_id == asset.author_id


def owns_record(caller: Caller, owner_id: int) -> bool:
    return caller.is_admin or caller.user_id == owner_id
