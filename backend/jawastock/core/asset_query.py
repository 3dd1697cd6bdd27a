"""Asset Query Engine: filter and sort the catalog for a browsing context.

Invariants:
    - Pure function: no IO, no async, no DB; same input list + query -> same output
    - Only APPROVED assets are ever returned, regardless of other parameters
    - Text match is a case-insensitive substring of title OR description OR any tag;
      empty/whitespace text matches everything
    - Category filter uses OR semantics (any overlap with the requested set)
    - Price bounds are inclusive; each bound is optional
    - Sort is stable for every key: ties keep input (insertion) order, including
      for descending keys

Design Decisions:
    - One normalized AssetQuery value instead of ad hoc chained predicates:
      the whole contract is testable from a list of records
    - reverse=True over negated keys: Python's sort stays stable with reverse,
      and datetimes cannot be negated
    - limit applied after sorting (catalog "latest N" listings)
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable

from jawastock.core.domain_types import AssetStatus, AssetType, SortOrder
from jawastock.core.errors import InputValidationError
from jawastock.core.records import Asset
from jawastock.core.validate_input import coerce_enum, normalize_labels, validate_price

ALL_TYPES = "all"


@dataclass(frozen=True)
class AssetQuery:
    """Browse parameters. Construct through build_query() to get validation."""
    text: str = ""
    type: AssetType | None = None
    categories: frozenset[str] = field(default_factory=frozenset)
    min_price: int | None = None
    max_price: int | None = None
    sort: SortOrder = SortOrder.NEWEST
    limit: int | None = None


def build_query(
    text: str | None = None,
    type: str | AssetType | None = None,
    categories: Iterable[str] | None = None,
    min_price: int | None = None,
    max_price: int | None = None,
    sort: str | SortOrder | None = None,
    limit: int | None = None,
) -> AssetQuery:
    """Normalize raw browse parameters into an AssetQuery.

    Raises InputValidationError on unknown type/sort, negative or crossed
    price bounds, or a non-positive limit.
    """
    asset_type = None
    if type and type != ALL_TYPES:
        asset_type = coerce_enum(AssetType, type, "type")

    if min_price is not None:
        validate_price(min_price, "min_price")
    if max_price is not None:
        validate_price(max_price, "max_price")
    if min_price is not None and max_price is not None and min_price > max_price:
        raise InputValidationError(
            "min_price must not exceed max_price", "min_price",
        )

    if limit is not None and (isinstance(limit, bool) or limit < 1):
        raise InputValidationError("limit must be a positive integer", "limit")

    return AssetQuery(
        text=(text or "").strip(),
        type=asset_type,
        categories=frozenset(normalize_labels(categories, "categories")),
        min_price=min_price,
        max_price=max_price,
        sort=coerce_enum(SortOrder, sort or SortOrder.NEWEST, "sort"),
        limit=limit,
    )


def matches_text(asset: Asset, text: str) -> bool:
    """Case-insensitive substring match against title, description, or any tag."""
    if not text:
        return True
    needle = text.lower()
    if needle in asset.title.lower():
        return True
    if asset.description and needle in asset.description.lower():
        return True
    return any(needle in tag.lower() for tag in asset.tags)


def matches_query(asset: Asset, query: AssetQuery) -> bool:
    """True when the asset is approved and passes every filter of query."""
    if asset.status != AssetStatus.APPROVED:
        return False
    if query.type is not None and asset.type != query.type:
        return False
    if query.categories and not query.categories.intersection(asset.categories):
        return False
    if query.min_price is not None and asset.price < query.min_price:
        return False
    if query.max_price is not None and asset.price > query.max_price:
        return False
    return matches_text(asset, query.text)


_SORT_KEYS: dict[SortOrder, tuple[Callable[[Asset], object], bool]] = {
    SortOrder.NEWEST: (lambda a: a.created_at, True),
    SortOrder.OLDEST: (lambda a: a.created_at, False),
    SortOrder.PRICE_LOW: (lambda a: a.price, False),
    SortOrder.PRICE_HIGH: (lambda a: a.price, True),
}


def sort_assets(assets: list[Asset], order: SortOrder) -> list[Asset]:
    """Stable sort by the given order; returns a new list."""
    key, descending = _SORT_KEYS[order]
    return sorted(assets, key=key, reverse=descending)


def search_assets(assets: Iterable[Asset], query: AssetQuery) -> list[Asset]:
    """Filter, sort and truncate assets (given in insertion order) per query."""
    filtered = [a for a in assets if matches_query(a, query)]
    ordered = sort_assets(filtered, query.sort)
    if query.limit is not None:
        ordered = ordered[:query.limit]
    return ordered
