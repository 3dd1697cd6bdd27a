"""Input Validation: pure checks that run before any store call.

Invariants:
    - Pure functions: no IO, raise InputValidationError on the first violation
    - Return a normalized copy of the input (enums coerced, strings stripped,
      label lists deduplicated); the caller's dict is never mutated
    - Prices are ints >= 0; bools are rejected even though bool subclasses int

Design Decisions:
    - Duplicated at the HTTP boundary by Pydantic Field constraints: the
      services are also called directly (tests, scripts), and must not trust
      that a schema ran first
"""

import re
from enum import Enum
from typing import Any, Iterable, TypeVar

from jawastock.core.domain_types import (
    AssetStatus, AssetType, LicenseType, UserRole,
)
from jawastock.core.errors import InputValidationError

E = TypeVar("E", bound=Enum)

USERNAME_MIN = 3
USERNAME_MAX = 50
PASSWORD_MIN = 6
TITLE_MAX = 200

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_USER_FIELDS = {
    "username", "email", "password", "role",
    "first_name", "last_name", "bio", "profile_image",
}
_ASSET_FIELDS = {
    "title", "description", "type", "url", "thumbnail_url", "price",
    "author_id", "status", "tags", "categories", "license_type",
    "width", "height", "duration", "file_size",
}


def coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    """Coerce a raw value into enum_cls or raise InputValidationError."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InputValidationError(
            f"Invalid {field} '{value}'. Must be one of: {allowed}", field,
        ) from None


def validate_price(value: Any, field: str = "price") -> int:
    """Price must be a non-negative integer amount of minor units."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputValidationError(
            f"{field} must be an integer number of cents", field,
        )
    if value < 0:
        raise InputValidationError(f"{field} must be >= 0", field)
    return value


def normalize_labels(values: Iterable[str] | None, field: str) -> tuple[str, ...]:
    """Strip labels, drop blanks and repeats, keep first-seen order."""
    if values is None:
        return ()
    if isinstance(values, str):
        raise InputValidationError(f"{field} must be a list of strings", field)
    seen: list[str] = []
    for raw in values:
        if not isinstance(raw, str):
            raise InputValidationError(f"{field} must be a list of strings", field)
        label = raw.strip()
        if label and label not in seen:
            seen.append(label)
    return tuple(seen)


def validate_user_data(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a registration payload; returns the normalized copy."""
    _reject_unknown(data, _USER_FIELDS)
    clean = dict(data)

    username = _require_text(clean, "username")
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise InputValidationError(
            f"username must be {USERNAME_MIN}-{USERNAME_MAX} characters", "username",
        )
    clean["username"] = username

    email = _require_text(clean, "email").lower()
    if not _EMAIL_RE.match(email):
        raise InputValidationError("email is not a valid address", "email")
    clean["email"] = email

    password = clean.get("password")
    if not isinstance(password, str) or len(password) < PASSWORD_MIN:
        raise InputValidationError(
            f"password must be at least {PASSWORD_MIN} characters", "password",
        )

    clean["role"] = coerce_enum(UserRole, clean.get("role", UserRole.USER), "role")
    return clean


def validate_asset_data(data: dict[str, Any]) -> dict[str, Any]:
    """Validate an asset creation payload; returns the normalized copy."""
    _reject_unknown(data, _ASSET_FIELDS)
    clean = dict(data)

    title = _require_text(clean, "title")
    if len(title) > TITLE_MAX:
        raise InputValidationError(
            f"title must be at most {TITLE_MAX} characters", "title",
        )
    clean["title"] = title
    clean["url"] = _require_text(clean, "url")
    clean["thumbnail_url"] = _require_text(clean, "thumbnail_url")

    if "type" not in clean:
        raise InputValidationError("type is required", "type")
    clean["type"] = coerce_enum(AssetType, clean["type"], "type")
    if "price" not in clean:
        raise InputValidationError("price is required", "price")
    clean["price"] = validate_price(clean["price"])

    clean["license_type"] = coerce_enum(
        LicenseType, clean.get("license_type", LicenseType.STANDARD), "license_type",
    )
    if "status" in clean:
        clean["status"] = coerce_enum(AssetStatus, clean["status"], "status")
    clean["tags"] = normalize_labels(clean.get("tags"), "tags")
    clean["categories"] = normalize_labels(clean.get("categories"), "categories")

    for name in ("width", "height", "duration", "file_size"):
        value = clean.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InputValidationError(f"{name} must be a non-negative integer", name)
    return clean


def _require_text(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(f"{field} is required", field)
    return value.strip()


def _reject_unknown(data: dict[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise InputValidationError(
            f"Unknown field(s): {', '.join(unknown)}", unknown[0],
        )
