"""SQL Store: MarketplaceStore over a SQLAlchemy AsyncSession.

Invariants:
    - Every mutation flushes immediately so ids and created_at are known on return
    - Nothing commits outside transaction(); transaction() commits on success and
      rolls the session back on any exception
    - IntegrityError on a unique column surfaces as DuplicateKeyError, making
      username/email uniqueness atomic at the storage layer
    - ORM rows never leave this module: callers only see frozen core records

Design Decisions:
    - One generic SqlEntityStore parameterized by (model class, record class):
      the four collections differ only in columns
    - get_all_by_predicate loads the table in id order and filters in Python:
      predicates are plain callables, and id order is insertion order
"""

import dataclasses
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Callable, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jawastock.core.domain_types import AssetStatus, AssetType, LicenseType, UserRole
from jawastock.core.errors import DuplicateKeyError
from jawastock.core.records import Asset, CartItem, Purchase, User
from jawastock.db.base import Base
from jawastock.models import AssetModel, CartItemModel, PurchaseModel, UserModel

logger = logging.getLogger(__name__)

R = TypeVar("R")

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "role": UserRole,
    "type": AssetType,
    "status": AssetStatus,
    "license_type": LicenseType,
}
_LIST_FIELDS = frozenset({"tags", "categories"})
_STORE_ASSIGNED = ("id", "created_at")


def _to_column(name: str, value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if name in _LIST_FIELDS:
        return list(value or ())
    return value


class SqlEntityStore(Generic[R]):
    """Keyed collection backed by one table."""

    def __init__(
        self,
        session: AsyncSession,
        model_cls: type[Base],
        record_cls: type[R],
        unique_fields: tuple[str, ...] = (),
    ):
        self._session = session
        self._model_cls = model_cls
        self._record_cls = record_cls
        self._unique_fields = unique_fields

    async def create(self, data: dict[str, Any]) -> R:
        columns = {
            k: _to_column(k, v) for k, v in data.items() if k not in _STORE_ASSIGNED
        }
        model = self._model_cls(**columns)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._raise_duplicate(e, columns)
            raise
        await self._session.refresh(model)
        return self._to_record(model)

    async def get_by_id(self, record_id: int) -> R | None:
        model = await self._session.get(self._model_cls, record_id)
        return self._to_record(model) if model else None

    async def get_all_by_predicate(self, predicate: Callable[[R], bool]) -> list[R]:
        result = await self._session.execute(
            select(self._model_cls).order_by(self._model_cls.id),
        )
        records = (self._to_record(m) for m in result.scalars().all())
        return [r for r in records if predicate(r)]

    async def update(self, record_id: int, **fields: Any) -> R | None:
        model = await self._session.get(self._model_cls, record_id)
        if model is None:
            return None
        for name, value in fields.items():
            if name not in _STORE_ASSIGNED:
                setattr(model, name, _to_column(name, value))
        try:
            await self._session.flush()
        except IntegrityError as e:
            self._raise_duplicate(e, fields)
            raise
        return self._to_record(model)

    async def delete(self, record_id: int) -> bool:
        model = await self._session.get(self._model_cls, record_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_record(self, model: Base) -> R:
        kwargs = {}
        for f in dataclasses.fields(self._record_cls):
            value = getattr(model, f.name)
            if f.name in _ENUM_FIELDS and value is not None:
                value = _ENUM_FIELDS[f.name](value)
            elif f.name in _LIST_FIELDS:
                value = tuple(value or ())
            kwargs[f.name] = value
        return self._record_cls(**kwargs)

    def _raise_duplicate(self, exc: IntegrityError, columns: dict[str, Any]) -> None:
        """Re-raise a unique-column violation as DuplicateKeyError."""
        detail = str(exc.orig).lower()
        for name in self._unique_fields:
            if name in detail:
                raise DuplicateKeyError(name, str(columns.get(name, ""))) from exc


class SqlMarketplaceStore:
    """All four collections sharing one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self.users: SqlEntityStore[User] = SqlEntityStore(
            session, UserModel, User, unique_fields=("username", "email"),
        )
        self.assets: SqlEntityStore[Asset] = SqlEntityStore(session, AssetModel, Asset)
        self.cart_items: SqlEntityStore[CartItem] = SqlEntityStore(
            session, CartItemModel, CartItem,
        )
        self.purchases: SqlEntityStore[Purchase] = SqlEntityStore(
            session, PurchaseModel, Purchase,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except BaseException:
            await self._session.rollback()
            logger.warning("SQL transaction rolled back")
            raise
