"""User Service: registration, credential check, caller resolution.

Invariants:
    - Username/email uniqueness is checked by lookup before insert, inside one
      store transaction; the SQL backend's unique constraints back it atomically
    - DuplicateKeyError is raised before any store mutation
    - Emails are compared lower-cased
    - Only an admin caller may register another admin

Design Decisions:
    - Plain constant-time comparison of the stored secret: hashing belongs to the
      authentication collaborator and is out of scope here
"""

import hmac
import logging
from typing import Any

from jawastock.core.access_policy import authorize
from jawastock.core.domain_types import Action, UserRole
from jawastock.core.errors import (
    AuthenticationError, DuplicateKeyError, ForbiddenError, ResourceNotFoundError,
)
from jawastock.core.records import Caller, User
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.core.validate_input import validate_user_data

logger = logging.getLogger(__name__)


async def find_by_username(store: MarketplaceStore, username: str) -> User | None:
    matches = await store.users.get_all_by_predicate(lambda u: u.username == username)
    return matches[0] if matches else None


async def find_by_email(store: MarketplaceStore, email: str) -> User | None:
    email = email.strip().lower()
    matches = await store.users.get_all_by_predicate(lambda u: u.email == email)
    return matches[0] if matches else None


async def register_user(
    store: MarketplaceStore, data: dict[str, Any], caller: Caller | None = None,
) -> User:
    """Create a user after validation and the username/email pre-check."""
    clean = validate_user_data(data)
    if clean["role"] == UserRole.ADMIN and not (caller and caller.is_admin):
        raise ForbiddenError(
            caller.role.value if caller else "anonymous", "register_admin",
        )

    async with store.transaction():
        if await find_by_username(store, clean["username"]):
            raise DuplicateKeyError("username", clean["username"])
        if await find_by_email(store, clean["email"]):
            raise DuplicateKeyError("email", clean["email"])
        user = await store.users.create(clean)

    logger.info(
        f"User registered: {user.username}",
        extra={"user_id": user.id, "action": "register"},
    )
    return user


async def authenticate(store: MarketplaceStore, email: str, password: str) -> User:
    """Return the user whose email/password match, else AuthenticationError."""
    user = await find_by_email(store, email)
    if user is None or not hmac.compare_digest(
        user.password.encode(), password.encode(),
    ):
        logger.warning("Login rejected", extra={"action": "login"})
        raise AuthenticationError("Invalid email or password")
    return user


async def get_user(store: MarketplaceStore, user_id: int) -> User:
    user = await store.users.get_by_id(user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


async def resolve_caller(store: MarketplaceStore, user_id: int) -> Caller:
    """Turn an authenticated user id into a Caller (id + current role)."""
    user = await store.users.get_by_id(user_id)
    if user is None:
        raise AuthenticationError("Unknown user")
    return Caller(user_id=user.id, role=user.role)


async def list_users(store: MarketplaceStore, caller: Caller | None) -> list[User]:
    authorize(caller, Action.LIST_USERS)
    return await store.users.get_all_by_predicate(lambda u: True)


async def ensure_admin(
    store: MarketplaceStore, username: str, email: str, password: str,
) -> User:
    """Create the seed admin account unless a user with that email exists."""
    existing = await find_by_email(store, email)
    if existing:
        return existing
    system = Caller(user_id=0, role=UserRole.ADMIN)
    return await register_user(
        store,
        {
            "username": username, "email": email, "password": password,
            "role": UserRole.ADMIN, "first_name": "Admin", "last_name": "User",
        },
        caller=system,
    )
