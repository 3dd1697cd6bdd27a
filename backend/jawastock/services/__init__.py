"""Services Layer: async orchestration around the pure core.

Invariants:
    - Every mutating operation authorizes through core.access_policy first
    - Input is validated before the first store call
    - Multi-record mutations run inside store.transaction()

Design Decisions:
    - Module-level async functions taking the store explicitly: the store is
      injected per request, never imported as a singleton
"""
