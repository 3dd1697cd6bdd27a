"""ORM Models: SQLAlchemy declarative models for the four marketplace tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Enum-valued columns store the enum's string value

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before
      create_all() or Alembic autogenerate runs
"""

from jawastock.models.user import UserModel  # noqa: F401
from jawastock.models.asset import AssetModel  # noqa: F401
from jawastock.models.cart_item import CartItemModel  # noqa: F401
from jawastock.models.purchase import PurchaseModel  # noqa: F401
