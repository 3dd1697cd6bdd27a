"""Core Layer: pure marketplace rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic given their inputs (clock passed in)

Design Decisions:
    - Functional core separated from imperative shell: the query engine, the
      moderation state machine and the access policy are testable without a store
"""
