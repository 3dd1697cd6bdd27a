"""Infrastructure Layer: store backends, database sessions, logging.

Invariants:
    - Every store backend satisfies core.repository_protocols.MarketplaceStore
    - SQLAlchemy errors never escape as-is (mapped to core.errors types)
"""
