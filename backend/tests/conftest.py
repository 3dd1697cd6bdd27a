"""Root conftest: shared test configuration."""

import os

# Tests never touch a real database or seed accounts implicitly
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("SEED_ADMIN", "false")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
