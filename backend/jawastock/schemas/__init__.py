"""Pydantic Schemas: request/response contracts for the HTTP API.

Invariants:
    - Wire names are camelCase (original client contract), attributes snake_case
    - Response schemas never expose the user password

Design Decisions:
    - Separate from models/ and core.records: schemas are API contracts,
      models are persistence, records are what the core computes on
"""
